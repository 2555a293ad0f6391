from enum import Enum
import numpy as np
from typing import Dict, Iterable, Optional, Sequence, Tuple

from pyPDDLGrounder.core.debug.exception import (
    print_stack_trace_root as PST,
    PDDLInvalidNumberOfArgumentsError,
    PDDLTypeError,
    PDDLUndefinedPredicateError,
    PDDLValueOutOfRangeError
)
from pyPDDLGrounder.core.expr import Connective, Expression

Fact = Tuple[int, Tuple[int, ...]]


class Inertia(Enum):
    '''Static behaviour of a predicate with respect to the initial state.'''

    POSITIVE = 'positive'   # never added by an effect
    NEGATIVE = 'negative'   # never deleted by an effect
    INERTIA = 'inertia'     # neither added nor deleted
    FLUENT = 'fluent'       # both added and deleted


class PredicateTable:
    '''Counts of the initial state facts of one predicate, for every partial
    binding of its arguments. The table is first keyed by binding mask, whose
    bit i is set iff argument i is bound, then by the tuple of bound argument
    values in position order.
    '''

    def __init__(self, arity: int,
                 counts: Optional[Dict[int, Dict[Tuple[int, ...], int]]]=None) -> None:
        self.arity = arity
        self.counts = {} if counts is None else counts
        for mask in self.counts:
            if not (0 <= mask < (1 << arity)):
                raise PDDLValueOutOfRangeError(
                    f'Mask {mask} is out of range for a predicate of arity {arity}.')

    @staticmethod
    def from_facts(arity: int, facts: Iterable[Sequence[int]]) -> 'PredicateTable':
        '''Builds the table of all 2^arity masks from the ground facts of the
        predicate that hold in the initial state.
        '''
        facts = [tuple(fact) for fact in facts]
        for fact in facts:
            if len(fact) != arity:
                raise PDDLInvalidNumberOfArgumentsError(
                    f'Fact {fact} does not match predicate arity {arity}.')
            if any(arg < 0 for arg in fact):
                raise PDDLValueOutOfRangeError(
                    f'Fact {fact} contains a variable, expected constants only.')

        counts = {}
        if not facts:
            return PredicateTable(arity, counts)

        if arity == 0:
            counts[0] = {(): 1}
            return PredicateTable(arity, counts)

        # duplicated facts denote the same ground atom
        matrix = np.unique(np.asarray(facts, dtype=np.int64), axis=0)
        for mask in range(1 << arity):
            positions = [i for i in range(arity) if (mask >> i) & 1]
            if not positions:
                counts[mask] = {(): int(matrix.shape[0])}
                continue
            keys, occurs = np.unique(matrix[:, positions], axis=0, return_counts=True)
            counts[mask] = {tuple(int(v) for v in key): int(n)
                            for (key, n) in zip(keys, occurs)}
        return PredicateTable(arity, counts)

    def count(self, mask: int, key: Tuple[int, ...]) -> int:
        return self.counts.get(mask, {}).get(key, 0)

    def __repr__(self) -> str:
        return f'PredicateTable(arity={self.arity}, masks={sorted(self.counts)})'


class PDDLDomainTables:
    '''The read-only tables computed from a problem before grounding: domains of
    types, predicate signatures, inertia of predicates and occurrence counts of
    predicates in the initial state.

    Predicates with no inertia are treated as fluents, predicates with no
    occurrence table as absent from the initial state.
    '''

    def __init__(self, domains: Dict[int, Iterable[int]],
                 signatures: Dict[int, Sequence[int]],
                 inertia: Optional[Dict[int, Inertia]]=None,
                 occurrences: Optional[Dict[int, PredicateTable]]=None,
                 type_names: Optional[Sequence[str]]=None,
                 constant_names: Optional[Sequence[str]]=None,
                 predicate_names: Optional[Sequence[str]]=None,
                 task_names: Optional[Sequence[str]]=None,
                 function_names: Optional[Sequence[str]]=None) -> None:
        '''Creates a new set of tables.

        :param domains: the constant ids of each type id
        :param signatures: the type id of each argument of each predicate id
        :param inertia: the inertia of each predicate id
        :param occurrences: the occurrence table of each predicate id
        :param type_names: names of type ids, only used for printing
        :param constant_names: names of constant ids, only used for printing
        :param predicate_names: names of predicate ids, only used for printing
        :param task_names: names of task ids, only used for printing
        :param function_names: names of function ids, only used for printing
        '''

        # the order of a domain is the order of enumeration during grounding
        self._domains = {type_id: tuple(dict.fromkeys(constants))
                         for (type_id, constants) in domains.items()}
        self._signatures = {predicate: tuple(types)
                            for (predicate, types) in signatures.items()}
        self._inertia = {} if inertia is None else dict(inertia)
        self._occurrences = {} if occurrences is None else dict(occurrences)

        self.type_names = type_names
        self.constant_names = constant_names
        self.predicate_names = predicate_names
        self.task_names = task_names
        self.function_names = function_names

        self._validate()

    @staticmethod
    def from_initial_state(domains: Dict[int, Iterable[int]],
                           signatures: Dict[int, Sequence[int]],
                           inertia: Dict[int, Inertia],
                           facts: Iterable[Fact],
                           **kwargs) -> 'PDDLDomainTables':
        '''Creates the tables, building occurrence tables of all predicates from
        the (predicate, arguments) facts of the initial state.
        '''
        grouped = {predicate: [] for predicate in signatures}
        for (predicate, arguments) in facts:
            if predicate not in grouped:
                raise PDDLUndefinedPredicateError(
                    f'Initial state fact refers to undefined predicate <{predicate}>.')
            grouped[predicate].append(arguments)
        occurrences = {predicate: PredicateTable.from_facts(
                           len(signatures[predicate]), predicate_facts)
                       for (predicate, predicate_facts) in grouped.items()}
        return PDDLDomainTables(domains, signatures, inertia, occurrences, **kwargs)

    def _validate(self) -> None:
        for (predicate, types) in self._signatures.items():
            for type_id in types:
                if type_id not in self._domains:
                    raise PDDLTypeError(
                        f'Type <{type_id}> of predicate <{predicate}> is not '
                        f'defined, should be one of {set(self._domains)}.')
        for (predicate, table) in self._occurrences.items():
            if predicate not in self._signatures:
                raise PDDLUndefinedPredicateError(
                    f'Occurrence table given for undefined predicate <{predicate}>.')
            if table.arity != len(self._signatures[predicate]):
                raise PDDLInvalidNumberOfArgumentsError(
                    f'Occurrence table of predicate <{predicate}> has arity '
                    f'{table.arity}, expected {len(self._signatures[predicate])}.')
        for (predicate, inertia) in self._inertia.items():
            if predicate not in self._signatures:
                raise PDDLUndefinedPredicateError(
                    f'Inertia given for undefined predicate <{predicate}>.')
            if not isinstance(inertia, Inertia):
                raise PDDLTypeError(
                    f'Inertia of predicate <{predicate}> must be an Inertia, '
                    f'got <{inertia}>.')

    # ===========================================================================
    # lookups
    # ===========================================================================

    @property
    def domains(self):
        return self._domains

    @property
    def signatures(self):
        return self._signatures

    def domain(self, type_id: int) -> Tuple[int, ...]:
        constants = self._domains.get(type_id, None)
        if constants is None:
            raise PDDLTypeError(
                f'Type <{type_id}> is not defined, '
                f'should be one of {set(self._domains)}.')
        return constants

    def signature(self, predicate: int) -> Tuple[int, ...]:
        types = self._signatures.get(predicate, None)
        if types is None:
            raise PDDLUndefinedPredicateError(
                f'Predicate <{predicate}> is not defined.')
        return types

    def inertia(self, predicate: int) -> Inertia:
        return self._inertia.get(predicate, Inertia.FLUENT)

    def occurrences(self, predicate: int) -> PredicateTable:
        table = self._occurrences.get(predicate, None)
        if table is None:
            table = PredicateTable(len(self.signature(predicate)))
        return table

    # ===========================================================================
    # validation of expressions
    # ===========================================================================

    def check_expression(self, expr: Expression, root: str) -> None:
        '''Checks that every predicate and quantified type used in the
        expression is defined, and that atoms match their predicate's arity.
        '''
        if expr.connective == Connective.ATOM:
            if expr.symbol not in self._signatures:
                raise PDDLUndefinedPredicateError(
                    f'Predicate <{expr.symbol}> is not defined.\n' +
                    PST(expr, root, self))
            arity = len(self._signatures[expr.symbol])
            if len(expr.arguments) != arity:
                raise PDDLInvalidNumberOfArgumentsError(
                    f'Predicate <{expr.symbol}> requires {arity} argument(s), '
                    f'got {len(expr.arguments)}.\n' + PST(expr, root, self))
        elif expr.is_quantified() and expr.type_id not in self._domains:
            raise PDDLTypeError(
                f'Quantified variable type <{expr.type_id}> is not defined.\n' +
                PST(expr, root, self))
        for child in expr.children:
            self.check_expression(child, root)
