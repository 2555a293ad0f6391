from typing import TYPE_CHECKING, Optional, Sequence

from pyPDDLGrounder.core.expr import Connective, Expression, is_variable, variable_index

if TYPE_CHECKING:
    from pyPDDLGrounder.core.compiler.model import PDDLDomainTables
    from pyPDDLGrounder.core.operator import OperatorSchema


class PDDLDecompiler:
    '''Converts an Expression to a string that reads like the corresponding
    PDDL expression. Symbols are printed by name when the tables carry names,
    otherwise as ?xN (variables), cN (constants), pN (predicates), tN (tasks),
    fN (functions) and TN (types).'''

    KEYWORDS = {
        Connective.AND: 'and',
        Connective.OR: 'or',
        Connective.NOT: 'not',
        Connective.WHEN: 'when',
        Connective.FORALL: 'forall',
        Connective.EXISTS: 'exists',
        Connective.F_EXP: 'f-exp',
        Connective.F_EXP_T: 'f-exp-t',
        Connective.UMINUS: '-',
        Connective.LESS: '<',
        Connective.LESS_OR_EQUAL: '<=',
        Connective.EQUAL: '=',
        Connective.GREATER: '>',
        Connective.GREATER_OR_EQUAL: '>=',
        Connective.ASSIGN: 'assign',
        Connective.INCREASE: 'increase',
        Connective.DECREASE: 'decrease',
        Connective.SCALE_UP: 'scale-up',
        Connective.SCALE_DOWN: 'scale-down',
        Connective.MUL: '*',
        Connective.DIV: '/',
        Connective.MINUS: '-',
        Connective.PLUS: '+',
        Connective.AT_START: 'at start',
        Connective.AT_END: 'at end',
        Connective.OVER_ALL: 'over all',
        Connective.ALWAYS: 'always',
        Connective.SOMETIME: 'sometime',
        Connective.AT_MOST_ONCE: 'at-most-once',
        Connective.SOMETIME_AFTER: 'sometime-after',
        Connective.SOMETIME_BEFORE: 'sometime-before',
        Connective.WITHIN: 'within',
        Connective.HOLD_AFTER: 'hold-after',
        Connective.ALWAYS_WITHIN: 'always-within',
        Connective.HOLD_DURING: 'hold-during',
        Connective.MINIMIZE: 'minimize',
        Connective.MAXIMIZE: 'maximize',
        Connective.IS_VIOLATED: 'is-violated',
        Connective.DURATION_ATOM: '?duration',
        Connective.TIME_VAR: '#t'
    }

    def __init__(self, tables: Optional['PDDLDomainTables']=None) -> None:
        self.tables = tables

    # ===========================================================================
    # main subroutines
    # ===========================================================================

    def decompile_expr(self, expr: Expression, level: int=0) -> str:
        '''Converts an expression to a string representing PDDL-like code.

        :param expr: the expression to convert
        :param level: indentation level
        '''
        return ' ' * level * 4 + self._decompile(expr)

    def decompile_operator(self, operator: 'OperatorSchema') -> str:
        '''Converts an action or method to a multi-line PDDL-like string.'''
        params = []
        for (i, (type_id, value)) in enumerate(zip(operator.parameters, operator.values)):
            if value is None:
                params.append(f'{self._argument(-i - 1)} - {self._type(type_id)}')
            else:
                params.append(self._constant(value))
        lines = [f'({operator.KIND} {operator.name} ({" ".join(params)})']
        for (key, expr) in operator.expressions().items():
            lines.append(f'    :{key} {self._decompile(expr)}')
        return '\n'.join(lines) + ')'

    # ===========================================================================
    # symbols
    # ===========================================================================

    @staticmethod
    def _name(names: Optional[Sequence[str]], index: int, prefix: str) -> str:
        if names is not None and 0 <= index < len(names):
            return names[index]
        return f'{prefix}{index}'

    def _names(self, attr):
        return None if self.tables is None else getattr(self.tables, attr)

    def _constant(self, index):
        return self._name(self._names('constant_names'), index, 'c')

    def _type(self, index):
        return self._name(self._names('type_names'), index, 'T')

    def _argument(self, arg):
        if is_variable(arg):
            return f'?x{variable_index(arg)}'
        return self._constant(arg)

    def _symbolic(self, name, arguments):
        if not arguments:
            return f'({name})'
        args = ' '.join(self._argument(arg) for arg in arguments)
        return f'({name} {args})'

    # ===========================================================================
    # expressions
    # ===========================================================================

    def _decompile(self, expr):
        connective = expr.connective

        if connective == Connective.TRUE:
            return 'true'
        elif connective == Connective.FALSE:
            return 'false'
        elif connective == Connective.NUMBER:
            return str(expr.value)
        elif connective == Connective.ATOM:
            name = self._name(self._names('predicate_names'), expr.symbol, 'p')
            return self._symbolic(name, expr.arguments)
        elif connective == Connective.TASK:
            name = self._name(self._names('task_names'), expr.symbol, 't')
            return self._symbolic(name, expr.arguments)
        elif connective in (Connective.FN_HEAD, Connective.FN_ATOM):
            name = self._name(self._names('function_names'), expr.symbol, 'f')
            return self._symbolic(name, expr.arguments)
        elif connective == Connective.EQUAL_ATOM:
            return self._symbolic('=', expr.arguments)
        elif expr.is_quantified():
            var = self._argument(expr.variable)
            body = self._decompile(expr.children[0])
            keyword = self.KEYWORDS[connective]
            return f'({keyword} ({var} - {self._type(expr.type_id)}) {body})'

        keyword = self.KEYWORDS[connective]
        if not expr.children:
            return f'({keyword})' if connective in (Connective.AND, Connective.OR) else keyword
        children = ' '.join(self._decompile(child) for child in expr.children)
        return f'({keyword} {children})'
