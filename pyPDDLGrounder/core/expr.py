from enum import Enum
from typing import Iterable, List, Optional, Union

from pyPDDLGrounder.core.debug.exception import (
    PDDLInvalidExpressionError,
    PDDLInvalidNumberOfArgumentsError
)

Value = Union[int, float]


class Connective(Enum):
    '''The closed set of operators an expression node can carry.'''

    # logical
    AND = 'and'
    OR = 'or'
    NOT = 'not'
    WHEN = 'when'
    FORALL = 'forall'
    EXISTS = 'exists'

    # atomic
    ATOM = 'atom'
    EQUAL_ATOM = 'equal_atom'
    TASK = 'task'
    FN_HEAD = 'fn_head'
    FN_ATOM = 'fn_atom'
    DURATION_ATOM = 'duration_atom'

    # constants and leaves
    TRUE = 'true'
    FALSE = 'false'
    NUMBER = 'number'
    TIME_VAR = 'time_var'
    IS_VIOLATED = 'is_violated'
    MINIMIZE = 'minimize'
    MAXIMIZE = 'maximize'

    # numeric
    F_EXP = 'f_exp'
    F_EXP_T = 'f_exp_t'
    UMINUS = 'uminus'
    LESS = 'less'
    LESS_OR_EQUAL = 'less_or_equal'
    EQUAL = 'equal'
    GREATER = 'greater'
    GREATER_OR_EQUAL = 'greater_or_equal'
    ASSIGN = 'assign'
    INCREASE = 'increase'
    DECREASE = 'decrease'
    SCALE_UP = 'scale_up'
    SCALE_DOWN = 'scale_down'
    MUL = 'mul'
    DIV = 'div'
    MINUS = 'minus'
    PLUS = 'plus'

    # temporal
    AT_START = 'at_start'
    AT_END = 'at_end'
    OVER_ALL = 'over_all'
    ALWAYS = 'always'
    SOMETIME = 'sometime'
    AT_MOST_ONCE = 'at_most_once'
    SOMETIME_AFTER = 'sometime_after'
    SOMETIME_BEFORE = 'sometime_before'
    WITHIN = 'within'
    HOLD_AFTER = 'hold_after'
    ALWAYS_WITHIN = 'always_within'
    HOLD_DURING = 'hold_during'


NARY = frozenset({Connective.AND, Connective.OR})

QUANTIFIERS = frozenset({Connective.FORALL, Connective.EXISTS})

UNARY = frozenset({
    Connective.NOT, Connective.UMINUS,
    Connective.FORALL, Connective.EXISTS,
    Connective.AT_START, Connective.AT_END, Connective.OVER_ALL,
    Connective.ALWAYS, Connective.SOMETIME, Connective.AT_MOST_ONCE
})

BINARY = frozenset({
    Connective.WHEN, Connective.F_EXP,
    Connective.LESS, Connective.LESS_OR_EQUAL, Connective.EQUAL,
    Connective.GREATER, Connective.GREATER_OR_EQUAL,
    Connective.ASSIGN, Connective.INCREASE, Connective.DECREASE,
    Connective.SCALE_UP, Connective.SCALE_DOWN,
    Connective.MUL, Connective.DIV, Connective.MINUS, Connective.PLUS,
    Connective.SOMETIME_AFTER, Connective.SOMETIME_BEFORE,
    Connective.WITHIN, Connective.HOLD_AFTER
})

# position 2 holds the numeric time bound and is never rewritten
QUATERNARY = frozenset({Connective.ALWAYS_WITHIN, Connective.HOLD_DURING})
QUATERNARY_OPERANDS = (0, 1, 3)

SYMBOLIC = frozenset({
    Connective.ATOM, Connective.TASK, Connective.FN_HEAD, Connective.FN_ATOM
})

# leaves whose content (if any) grounding never looks into
OPAQUE = frozenset({
    Connective.NUMBER, Connective.DURATION_ATOM, Connective.TIME_VAR,
    Connective.IS_VIOLATED, Connective.MINIMIZE, Connective.MAXIMIZE
})

TRUTH = frozenset({Connective.TRUE, Connective.FALSE})


def as_variable(index: int) -> int:
    '''Encodes the parameter index as a variable argument.'''
    return -index - 1


def is_variable(arg: int) -> bool:
    return arg < 0


def variable_index(arg: int) -> int:
    '''Inverse of as_variable.'''
    return -arg - 1


class Expression(object):
    '''Expression class represents a lifted or grounded node of a planning
    operator: an operator tag (connective) with its children, its argument
    vector and, depending on the tag, a symbol id, a bound variable and type
    or a numeric value.

    Arguments are integers: a negative value -i-1 refers to the i-th variable,
    a non-negative value is the id of a constant.

    Nodes are rewritten in place during grounding, but only through set_truth(),
    become() and reset(), which keep the tag and the payload consistent.

    Args:
        connective: the operator tag
        children: sub-expressions, ordered
        arguments: argument vector of atomic expressions
        symbol: predicate, task or function id of atomic expressions
        variable: encoded variable bound by a quantifier
        type_id: type of the variable bound by a quantifier
        value: value of a number
    '''

    def __init__(self, connective: Connective,
                 children: Optional[Iterable['Expression']]=None,
                 arguments: Optional[Iterable[int]]=None,
                 symbol: Optional[int]=None,
                 variable: Optional[int]=None,
                 type_id: Optional[int]=None,
                 value: Optional[Value]=None) -> None:
        self._connective = connective
        self.children = [] if children is None else list(children)
        self.arguments = [] if arguments is None else list(arguments)
        self.symbol = symbol
        self.variable = variable
        self.type_id = type_id
        self.value = value
        self._validate()

    # ===========================================================================
    # factories
    # ===========================================================================

    @classmethod
    def true(cls) -> 'Expression':
        return cls(Connective.TRUE)

    @classmethod
    def false(cls) -> 'Expression':
        return cls(Connective.FALSE)

    @classmethod
    def number(cls, value: Value) -> 'Expression':
        return cls(Connective.NUMBER, value=value)

    @classmethod
    def atom(cls, predicate: int, arguments: Iterable[int]=()) -> 'Expression':
        return cls(Connective.ATOM, arguments=arguments, symbol=predicate)

    @classmethod
    def equal(cls, left: int, right: int) -> 'Expression':
        return cls(Connective.EQUAL_ATOM, arguments=(left, right))

    @classmethod
    def task(cls, task: int, arguments: Iterable[int]=()) -> 'Expression':
        return cls(Connective.TASK, arguments=arguments, symbol=task)

    @classmethod
    def function(cls, function: int, arguments: Iterable[int]=()) -> 'Expression':
        return cls(Connective.FN_HEAD, arguments=arguments, symbol=function)

    @classmethod
    def conjunction(cls, *children: 'Expression') -> 'Expression':
        return cls(Connective.AND, children=children)

    @classmethod
    def disjunction(cls, *children: 'Expression') -> 'Expression':
        return cls(Connective.OR, children=children)

    @classmethod
    def negation(cls, child: 'Expression') -> 'Expression':
        return cls(Connective.NOT, children=(child,))

    @classmethod
    def when(cls, antecedent: 'Expression', consequent: 'Expression') -> 'Expression':
        return cls(Connective.WHEN, children=(antecedent, consequent))

    @classmethod
    def forall(cls, variable: int, type_id: int, body: 'Expression') -> 'Expression':
        return cls(Connective.FORALL, children=(body,),
                   variable=variable, type_id=type_id)

    @classmethod
    def exists(cls, variable: int, type_id: int, body: 'Expression') -> 'Expression':
        return cls(Connective.EXISTS, children=(body,),
                   variable=variable, type_id=type_id)

    # ===========================================================================
    # validation
    # ===========================================================================

    def _validate(self) -> None:
        connective = self._connective
        if not isinstance(connective, Connective):
            raise PDDLInvalidExpressionError(
                f'<{connective}> is not a valid connective.')

        num_children = len(self.children)
        for child in self.children:
            if not isinstance(child, Expression):
                raise PDDLInvalidExpressionError(
                    f'Child <{child}> of {connective.name} is not an expression.')

        if connective in UNARY:
            expected = 1
        elif connective in BINARY:
            expected = 2
        elif connective in QUATERNARY:
            expected = 4
        elif connective in TRUTH or connective in SYMBOLIC \
        or connective == Connective.EQUAL_ATOM:
            expected = 0
        else:
            expected = None
        if expected is not None and num_children != expected:
            raise PDDLInvalidNumberOfArgumentsError(
                f'{connective.name} requires {expected} sub-expression(s), '
                f'got {num_children}.')
        if connective == Connective.F_EXP_T and num_children > 1:
            raise PDDLInvalidNumberOfArgumentsError(
                f'{connective.name} requires at most 1 sub-expression, '
                f'got {num_children}.')

        if connective in QUANTIFIERS:
            if self.variable is None or not is_variable(self.variable):
                raise PDDLInvalidExpressionError(
                    f'{connective.name} must bind a variable, got <{self.variable}>.')
            if self.type_id is None:
                raise PDDLInvalidExpressionError(
                    f'{connective.name} must declare the type of its variable.')

        if connective in SYMBOLIC and self.symbol is None:
            raise PDDLInvalidExpressionError(
                f'{connective.name} requires a predicate, task or function id.')

        if connective == Connective.EQUAL_ATOM and len(self.arguments) != 2:
            raise PDDLInvalidNumberOfArgumentsError(
                f'{connective.name} requires 2 arguments, '
                f'got {len(self.arguments)}.')

        if self.arguments and not (
            connective in SYMBOLIC or connective == Connective.EQUAL_ATOM):
            raise PDDLInvalidExpressionError(
                f'{connective.name} does not take an argument vector.')

        if connective == Connective.NUMBER and self.value is None:
            raise PDDLInvalidExpressionError('NUMBER requires a value.')

    # ===========================================================================
    # structural queries
    # ===========================================================================

    @property
    def connective(self) -> Connective:
        return self._connective

    @property
    def predicate(self) -> int:
        if self._connective != Connective.ATOM:
            raise ValueError('Expression is not an atom.')
        return self.symbol

    def is_true(self) -> bool:
        return self._connective == Connective.TRUE

    def is_false(self) -> bool:
        return self._connective == Connective.FALSE

    def is_quantified(self) -> bool:
        return self._connective in QUANTIFIERS

    def is_ground(self) -> bool:
        '''Returns True if no argument in the tree refers to a variable.'''
        if any(is_variable(arg) for arg in self.arguments):
            return False
        return all(child.is_ground() for child in self.children)

    def operands(self) -> List['Expression']:
        '''Returns the children that grounding recurses into.'''
        connective = self._connective
        if connective in QUATERNARY:
            return [self.children[i] for i in QUATERNARY_OPERANDS]
        elif connective in OPAQUE:
            return []
        else:
            return self.children

    # ===========================================================================
    # in-place rewriting
    # ===========================================================================

    def set_truth(self, value: bool) -> None:
        '''Turns this node into the constant TRUE or FALSE, dropping its payload.'''
        self._connective = Connective.TRUE if value else Connective.FALSE
        self.children = []
        self.arguments = []
        self.symbol = None
        self.variable = None
        self.type_id = None
        self.value = None

    def reset(self, connective: Connective, children: Iterable['Expression']=()) -> None:
        '''Turns this node into a logical node over the given children.'''
        if connective not in NARY:
            raise PDDLInvalidExpressionError(
                f'Cannot reset a node to {connective.name}.')
        self._connective = connective
        self.children = list(children)
        self.arguments = []
        self.symbol = None
        self.variable = None
        self.type_id = None
        self.value = None

    def become(self, other: 'Expression') -> None:
        '''Adopts the whole payload of other, which must not be used afterwards.'''
        self._connective = other._connective
        self.children = other.children
        self.arguments = other.arguments
        self.symbol = other.symbol
        self.variable = other.variable
        self.type_id = other.type_id
        self.value = other.value

    def copy(self) -> 'Expression':
        '''Returns a deep copy sharing no node or list with this expression.'''
        clone = Expression.__new__(Expression)
        clone._connective = self._connective
        clone.children = [child.copy() for child in self.children]
        clone.arguments = list(self.arguments)
        clone.symbol = self.symbol
        clone.variable = self.variable
        clone.type_id = self.type_id
        clone.value = self.value
        return clone

    # ===========================================================================
    # comparison and printing
    # ===========================================================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        return self._connective == other._connective \
            and self.arguments == other.arguments \
            and self.symbol == other.symbol \
            and self.variable == other.variable \
            and self.type_id == other.type_id \
            and self.value == other.value \
            and self.children == other.children

    __hash__ = None

    def __repr__(self) -> str:
        return f'Expression({self._connective.name})'

    def __str__(self) -> str:
        '''Returns string representing the expression.'''
        return self.__expr_str(self, 0)

    @classmethod
    def __expr_str(cls, expr, level):
        ident = ' ' * level * 4
        header = expr._connective.name
        if expr.symbol is not None:
            header += f', symbol={expr.symbol}'
        if expr.arguments:
            header += f', args={expr.arguments}'
        if expr.variable is not None:
            header += f', var={expr.variable}, type={expr.type_id}'
        if expr.value is not None:
            header += f', value={expr.value}'
        if not expr.children:
            return f'{ident}Expression({header})'
        children = '\n'.join(cls.__expr_str(child, level + 1)
                             for child in expr.children)
        return f'{ident}Expression({header}, children=\n{children})'
