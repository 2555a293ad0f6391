from pyPDDLGrounder import ActionSchema, Expression, MethodSchema
from pyPDDLGrounder.core.debug.decompiler import PDDLDecompiler
from pyPDDLGrounder.core.debug.exception import print_stack_trace
from pyPDDLGrounder.core.expr import Connective, as_variable

X, Y = as_variable(0), as_variable(1)


def test_expressions_with_names(tables):
    decompiler = PDDLDecompiler(tables)
    expr = Expression.forall(Y, 0, Expression.conjunction(
        Expression.atom(2, [X, Y]),
        Expression.negation(Expression.equal(X, 1)),
        Expression.when(Expression.atom(3), Expression.false())))
    assert decompiler.decompile_expr(expr) == \
        '(forall (?x1 - location) (and (link ?x0 ?x1) (not (= ?x0 b)) (when (ready) false)))'


def test_expressions_without_names():
    decompiler = PDDLDecompiler()
    expr = Expression.exists(X, 3, Expression.disjunction(
        Expression.atom(4, [X, 2]), Expression.task(1, [X])))
    assert decompiler.decompile_expr(expr) == '(exists (?x0 - T3) (or (p4 ?x0 c2) (t1 ?x0)))'
    assert decompiler.decompile_expr(Expression.conjunction(), level=1) == '    (and)'


def test_numeric_and_temporal_expressions():
    decompiler = PDDLDecompiler()
    expr = Expression(Connective.AT_START, children=[
        Expression(Connective.INCREASE, children=[
            Expression.function(0, [X]),
            Expression(Connective.PLUS, children=[
                Expression.number(1.5), Expression(Connective.DURATION_ATOM)])])])
    assert decompiler.decompile_expr(expr) == \
        '(at start (increase (f0 ?x0) (+ 1.5 ?duration)))'


def test_operators(tables):
    decompiler = PDDLDecompiler(tables)
    action = ActionSchema('move', [0, 0], Expression.atom(1, [X]),
                          Expression.atom(1, [Y]), values=[0, None])
    assert decompiler.decompile_operator(action) == (
        '(action move (a ?x1 - location)\n'
        '    :precondition (clear ?x0)\n'
        '    :effect (clear ?x1))')

    method = MethodSchema('deliver', [2], Expression.true(),
                          Expression.task(0, [X, 1]), Expression.conjunction())
    assert decompiler.decompile_operator(method) == (
        '(method deliver (?x0 - item)\n'
        '    :precondition true\n'
        '    :task (deliver ?x0 b)\n'
        '    :subtasks (and))')


def test_stack_trace(tables):
    assert print_stack_trace(Expression.atom(0, [2]), tables) == '>> (at c)'
    assert print_stack_trace('move') == '>> move'
