from collections import OrderedDict
from typing import Dict, Optional, Sequence

from pyPDDLGrounder.core.expr import Expression


class OperatorSchema(object):
    '''Base class of actions and methods: a named list of typed parameters and
    the expressions they appear in.
    Note:
        The i-th parameter is referred to as variable -i-1 inside expressions,
        until it is bound to a constant stored in values[i].
    Args:
        name: Name of the operator.
        parameters: Type id of each parameter.
        preconditions: Precondition expression.
        values: Constant bound to each parameter, None if free.
    '''

    KIND = 'operator'

    def __init__(self, name: str,
                 parameters: Sequence[int],
                 preconditions: Expression,
                 values: Optional[Sequence[Optional[int]]]=None) -> None:
        self.name = name
        self.parameters = tuple(parameters)
        self.preconditions = preconditions
        if values is None:
            values = [None] * len(self.parameters)
        self.values = list(values)
        if len(self.values) != len(self.parameters):
            raise ValueError(
                f'{self.KIND} <{name}> has {len(self.parameters)} parameter(s) '
                f'but {len(self.values)} value(s).')

    @property
    def arity(self) -> int:
        '''Returns arity of operator.'''
        return len(self.parameters)

    def is_instantiated_with(self, constant: int) -> bool:
        '''Returns True if some parameter is already bound to the constant.'''
        return constant in self.values

    def is_grounded(self) -> bool:
        return all(value is not None for value in self.values)

    def expressions(self) -> Dict[str, Expression]:
        '''Returns the expressions of the operator, keyed by PDDL field name.'''
        return OrderedDict(precondition=self.preconditions)

    def copy(self) -> 'OperatorSchema':
        raise NotImplementedError

    def __str__(self) -> str:
        values = ', '.join('?' if value is None else str(value)
                           for value in self.values)
        return f'{self.name}({values})'

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self})'


class ActionSchema(OperatorSchema):
    '''Action: preconditions and effects.'''

    KIND = 'action'

    def __init__(self, name: str,
                 parameters: Sequence[int],
                 preconditions: Expression,
                 effects: Expression,
                 values: Optional[Sequence[Optional[int]]]=None) -> None:
        super(ActionSchema, self).__init__(name, parameters, preconditions, values)
        self.effects = effects

    def expressions(self) -> Dict[str, Expression]:
        exprs = super(ActionSchema, self).expressions()
        exprs['effect'] = self.effects
        return exprs

    def copy(self) -> 'ActionSchema':
        return ActionSchema(self.name, self.parameters,
                            self.preconditions.copy(), self.effects.copy(),
                            self.values)


class MethodSchema(OperatorSchema):
    '''HTN method: decomposes the task into the subtasks under the preconditions.'''

    KIND = 'method'

    def __init__(self, name: str,
                 parameters: Sequence[int],
                 preconditions: Expression,
                 task: Expression,
                 subtasks: Expression,
                 values: Optional[Sequence[Optional[int]]]=None) -> None:
        super(MethodSchema, self).__init__(name, parameters, preconditions, values)
        self.task = task
        self.subtasks = subtasks

    def expressions(self) -> Dict[str, Expression]:
        exprs = super(MethodSchema, self).expressions()
        exprs['task'] = self.task
        exprs['subtasks'] = self.subtasks
        return exprs

    def copy(self) -> 'MethodSchema':
        return MethodSchema(self.name, self.parameters,
                            self.preconditions.copy(), self.task.copy(),
                            self.subtasks.copy(), self.values)
