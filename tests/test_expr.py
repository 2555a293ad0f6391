import pytest

from pyPDDLGrounder.core.debug.exception import (
    PDDLInvalidExpressionError,
    PDDLInvalidNumberOfArgumentsError
)
from pyPDDLGrounder.core.expr import (
    as_variable,
    is_variable,
    variable_index,
    Connective,
    Expression
)

X, Y = as_variable(0), as_variable(1)


##################################################################################
# Construction
##################################################################################

def test_variable_encoding():
    assert X == -1
    assert Y == -2
    assert is_variable(X)
    assert not is_variable(0)
    assert variable_index(as_variable(7)) == 7


def test_factories_build_consistent_nodes():
    atom = Expression.atom(3, [X, 0])
    assert atom.connective == Connective.ATOM
    assert atom.predicate == 3
    assert atom.arguments == [X, 0]
    assert atom.children == []

    forall = Expression.forall(X, 2, atom)
    assert forall.is_quantified()
    assert forall.variable == X
    assert forall.type_id == 2
    assert forall.children == [atom]

    assert Expression.true().is_true()
    assert Expression.false().is_false()
    assert Expression.number(2.5).value == 2.5


@pytest.mark.parametrize('connective, num_children', [
    (Connective.NOT, 0),
    (Connective.NOT, 2),
    (Connective.WHEN, 1),
    (Connective.PLUS, 3),
    (Connective.HOLD_DURING, 3),
    (Connective.TRUE, 1)
])
def test_wrong_number_of_children_is_rejected(connective, num_children):
    children = [Expression.true() for _ in range(num_children)]
    with pytest.raises(PDDLInvalidNumberOfArgumentsError):
        Expression(connective, children=children)


def test_malformed_nodes_are_rejected():
    with pytest.raises(PDDLInvalidExpressionError):
        Expression(Connective.FORALL, children=[Expression.true()], type_id=0)
    with pytest.raises(PDDLInvalidExpressionError):
        Expression(Connective.EXISTS, children=[Expression.true()], variable=3, type_id=0)
    with pytest.raises(PDDLInvalidExpressionError):
        Expression(Connective.FORALL, children=[Expression.true()], variable=X)
    with pytest.raises(PDDLInvalidExpressionError):
        Expression(Connective.ATOM, arguments=[0])
    with pytest.raises(PDDLInvalidNumberOfArgumentsError):
        Expression(Connective.EQUAL_ATOM, arguments=[0])
    with pytest.raises(PDDLInvalidExpressionError):
        Expression(Connective.AND, arguments=[0])
    with pytest.raises(PDDLInvalidExpressionError):
        Expression(Connective.AND, children=['p'])
    with pytest.raises(PDDLInvalidExpressionError):
        Expression('and')
    with pytest.raises(PDDLInvalidNumberOfArgumentsError):
        Expression(Connective.F_EXP_T, children=[Expression.number(1), Expression.number(2)])


def test_nary_and_optional_arities():
    assert Expression.conjunction().children == []
    assert len(Expression.disjunction(*[Expression.true()] * 5).children) == 5
    assert Expression(Connective.F_EXP_T).children == []
    assert len(Expression(Connective.F_EXP_T, children=[Expression.number(1)]).children) == 1


##################################################################################
# Rewriting
##################################################################################

def test_copy_shares_nothing():
    original = Expression.conjunction(
        Expression.atom(0, [X]), Expression.negation(Expression.atom(1, [Y])))
    clone = original.copy()
    assert clone == original

    clone.children[0].arguments[0] = 5
    clone.children[1].children[0].set_truth(True)
    clone.children.append(Expression.false())

    assert original.children[0].arguments == [X]
    assert original.children[1].children[0].connective == Connective.ATOM
    assert len(original.children) == 2


def test_set_truth_drops_payload():
    expr = Expression.forall(X, 0, Expression.atom(0, [X]))
    expr.set_truth(False)
    assert expr.is_false()
    assert expr.children == []
    assert expr.arguments == []
    assert expr.variable is None
    assert expr.type_id is None
    assert expr == Expression.false()


def test_become_adopts_other_node():
    expr = Expression.conjunction(Expression.atom(0, [X]))
    other = Expression.equal(X, 1)
    expr.become(other)
    assert expr.connective == Connective.EQUAL_ATOM
    assert expr.arguments == [X, 1]
    assert expr.children == []


def test_reset_only_to_nary():
    expr = Expression.exists(X, 0, Expression.atom(0, [X]))
    expr.reset(Connective.OR)
    assert expr.connective == Connective.OR
    assert expr.children == []
    assert expr.variable is None
    with pytest.raises(PDDLInvalidExpressionError):
        expr.reset(Connective.NOT)


##################################################################################
# Queries
##################################################################################

def test_operands_skip_time_bound_of_quaternary():
    children = [Expression.atom(0, [X]), Expression.atom(1, [X]),
                Expression.number(10), Expression.atom(2, [X])]
    expr = Expression(Connective.HOLD_DURING, children=children)
    assert expr.operands() == [children[0], children[1], children[3]]


def test_operands_of_opaque_leaves_are_empty():
    expr = Expression(Connective.MINIMIZE, children=[Expression.number(1)])
    assert expr.operands() == []


def test_is_ground():
    assert Expression.conjunction(Expression.atom(0, [0, 1]), Expression.true()).is_ground()
    assert not Expression.negation(Expression.atom(0, [0, X])).is_ground()


def test_structural_equality():
    assert Expression.atom(0, [X]) == Expression.atom(0, [X])
    assert Expression.atom(0, [X]) != Expression.atom(1, [X])
    assert Expression.atom(0, [X]) != Expression.task(0, [X])
    assert Expression.conjunction(Expression.true()) != Expression.disjunction(Expression.true())
    assert 'ATOM' in str(Expression.conjunction(Expression.atom(0, [X])))
