import abc
import numpy as np
from typing import Iterable, List, Optional, Tuple

from pyPDDLGrounder.core.compiler.expander import QuantifierExpander
from pyPDDLGrounder.core.compiler.model import PDDLDomainTables
from pyPDDLGrounder.core.compiler.resolver import AtomResolver
from pyPDDLGrounder.core.compiler.simplifier import Simplifier
from pyPDDLGrounder.core.compiler.substitution import Substitution
from pyPDDLGrounder.core.config import DEFAULT_CONFIG, load_config
from pyPDDLGrounder.core.debug.decompiler import PDDLDecompiler
from pyPDDLGrounder.core.debug.exception import (
    raise_warning,
    PDDLValueOutOfRangeError
)
from pyPDDLGrounder.core.debug.logger import Logger
from pyPDDLGrounder.core.expr import as_variable
from pyPDDLGrounder.core.operator import ActionSchema, MethodSchema, OperatorSchema


class BasePDDLGrounder(metaclass=abc.ABCMeta):
    '''Base class for all grounder classes.
    '''

    @abc.abstractmethod
    def ground(self, actions: Iterable[ActionSchema],
               methods: Iterable[MethodSchema]=()) -> Tuple[List[ActionSchema], List[MethodSchema]]:
        '''Produces the grounded actions and methods of the lifted ones.
        '''
        pass


class PDDLGrounder(BasePDDLGrounder):
    '''Standard class for grounding actions and HTN methods. Enumerates the
    bindings of parameters to constants, one parameter after the other, and
    substitutes and simplifies the expressions of the operator after each
    binding so that a partial binding making preconditions or effects FALSE is
    abandoned with all of its extensions.

    Unless distinct_constants is False, two parameters of an operator are never
    bound to the same constant, i.e. move(a, a) is never produced. Such
    operators are seen as a flaw of the domain, where all but one of the equal
    parameters are superfluous. This assumption makes the grounding unsound.
    '''

    def __init__(self, tables: PDDLDomainTables,
                 bound: Optional[int]=None,
                 distinct_constants: bool=True,
                 logger: Optional[Logger]=None) -> None:
        '''Creates a new grounder for operators over the given tables.

        :param tables: type domains, predicate signatures, inertia and
        occurrence tables of the problem
        :param bound: maximum number of instances of each operator (None for
        no limit)
        :param distinct_constants: whether parameters of an operator must be
        bound to distinct constants
        :param logger: to log information about grounding to file
        '''
        super(PDDLGrounder, self).__init__()
        self.tables = tables
        self.bound = self._check_bound(bound)
        self.distinct_constants = distinct_constants
        self.logger = logger

        self.resolver = AtomResolver(tables)
        self.substitution = Substitution(self.resolver)
        self.simplifier = Simplifier()
        self.expander = QuantifierExpander(tables, self.substitution, self.resolver)
        self.decompiler = PDDLDecompiler(tables)

    @classmethod
    def from_config(cls, tables: PDDLDomainTables,
                    path: str=DEFAULT_CONFIG) -> 'PDDLGrounder':
        '''Creates a new grounder with the settings of the config file.'''
        return cls(tables, **load_config(path))

    @staticmethod
    def _check_bound(bound):
        if bound is not None and bound < 0:
            raise PDDLValueOutOfRangeError(
                f'Bound on the number of instances {bound} is not >= 0.')
        return bound

    def _log(self, msg):
        if self.logger is not None:
            self.logger.log(msg)

    # ===========================================================================
    # main subroutines
    # ===========================================================================

    def ground(self, actions: Iterable[ActionSchema],
               methods: Iterable[MethodSchema]=()) -> Tuple[List[ActionSchema], List[MethodSchema]]:
        return self.instantiate_actions(actions), self.instantiate_methods(methods)

    def instantiate_actions(self, actions: Iterable[ActionSchema]) -> List[ActionSchema]:
        '''Grounds all actions, skipping those with a parameter of empty type.'''
        grounded = self._instantiate_all(actions)
        self._log(f'[info] grounded actions: {len(grounded)}')
        return grounded

    def instantiate_methods(self, methods: Iterable[MethodSchema]) -> List[MethodSchema]:
        '''Grounds all methods, skipping those with a parameter of empty type.'''
        grounded = self._instantiate_all(methods)
        self._log(f'[info] grounded methods: {len(grounded)}')
        return grounded

    def _instantiate_all(self, operators):
        grounded = []
        for operator in operators:
            empty = [type_id for type_id in operator.parameters
                     if not self.tables.domain(type_id)]
            if empty:
                self._log(f'[info] skipped {operator.KIND} <{operator.name}>: '
                          f'parameter type(s) {empty} have no objects')
                continue
            grounded.extend(self.instantiate(operator))
        return grounded

    def instantiate(self, operator: OperatorSchema,
                    bound: Optional[int]=None) -> List[OperatorSchema]:
        '''Grounds one action or method. The given operator is left unchanged.

        :param operator: the lifted action or method
        :param bound: maximum number of instances, overriding the bound of the
        grounder
        '''
        bound = self.bound if bound is None else self._check_bound(bound)
        self._check_operator(operator)
        operator = operator.copy()

        if self.logger is not None:
            sizes = [len(self.tables.domain(type_id))
                     for type_id in operator.parameters]
            space = np.prod(np.asarray(sizes, dtype=object)) if sizes else 1
            self.logger.log(
                f'[info] grounding {operator.KIND} <{operator.name}> '
                f'over at most {space} binding(s):\n' +
                self.decompiler.decompile_operator(operator))

        # quantifiers are removed once, before any parameter is bound
        self.expander.expand(operator.preconditions)
        self.simplifier.simplify(operator.preconditions)
        if operator.preconditions.is_false():
            self._log(f'[info] pruned {operator.KIND} <{operator.name}>: '
                      f'preconditions are never satisfied')
            return []
        if isinstance(operator, ActionSchema):
            self.expander.expand(operator.effects)
            self.simplifier.simplify(operator.effects)
            if operator.effects.is_false():
                self._log(f'[info] pruned action <{operator.name}>: '
                          f'effects are inconsistent')
                return []

        instances = []
        self._instantiate(operator, 0, bound, instances)
        if bound is not None and len(instances) >= bound:
            raise_warning(
                f'Grounding of {operator.KIND} <{operator.name}> stopped after '
                f'reaching the bound of {bound} instance(s).', 'red')
        self._log(f'[info] grounded {operator.KIND} <{operator.name}>: '
                  f'{len(instances)} instance(s)')
        return instances

    def _check_operator(self, operator):
        for type_id in operator.parameters:
            self.tables.domain(type_id)
        root = f'{operator.KIND} <{operator.name}>'
        for expr in operator.expressions().values():
            self.tables.check_expression(expr, root)

    # ===========================================================================
    # enumeration of bindings
    # ===========================================================================

    def _instantiate(self, operator, index, bound, instances):
        if bound is not None and len(instances) >= bound:
            return

        # all parameters are bound
        if index == operator.arity:
            self.simplifier.simplify(operator.preconditions)
            if operator.preconditions.is_false():
                return
            if isinstance(operator, ActionSchema):
                self.simplifier.simplify(operator.effects)
                if operator.effects.is_false():
                    return
            instances.append(operator)
            return

        var = as_variable(index)
        for cons in self.tables.domain(operator.parameters[index]):
            if self.distinct_constants and operator.is_instantiated_with(cons):
                continue
            if isinstance(operator, ActionSchema):
                candidate = self._bind_action(operator, index, var, cons)
            else:
                candidate = self._bind_method(operator, index, var, cons)
            if candidate is not None:
                self._instantiate(candidate, index + 1, bound, instances)

    def _substitute(self, expr, var, cons):
        '''Returns a substituted and simplified copy of expr.'''
        expr = expr.copy()
        self.substitution.substitute(expr, var, cons)
        self.simplifier.simplify(expr)
        return expr

    def _bind_action(self, action, index, var, cons):
        preconditions = self._substitute(action.preconditions, var, cons)
        if preconditions.is_false():
            return None
        effects = self._substitute(action.effects, var, cons)
        if effects.is_false():
            return None
        values = list(action.values)
        values[index] = cons
        return ActionSchema(action.name, action.parameters,
                            preconditions, effects, values)

    def _bind_method(self, method, index, var, cons):
        preconditions = self._substitute(method.preconditions, var, cons)
        if preconditions.is_false():
            return None

        # task and subtasks keep their structure, only arguments change
        task = method.task.copy()
        self.substitution.substitute(task, var, cons)
        subtasks = method.subtasks.copy()
        self.substitution.substitute(subtasks, var, cons)

        values = list(method.values)
        values[index] = cons
        return MethodSchema(method.name, method.parameters,
                            preconditions, task, subtasks, values)
