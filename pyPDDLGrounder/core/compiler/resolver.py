from pyPDDLGrounder.core.compiler.model import Inertia, PDDLDomainTables
from pyPDDLGrounder.core.expr import Connective, Expression


class AtomResolver:
    '''Folds atoms to TRUE or FALSE when the inertia of their predicate and the
    initial state decide their value in every reachable state.

    Two cases are folded:
        1. the predicate is never added (positive inertia or inertia) and no
        initial state fact unifies with the atom: the atom is FALSE;
        2. the predicate is never deleted (negative inertia or inertia) and every
        type-consistent ground instance of the atom is in the initial state: the
        atom is TRUE.
    '''

    NEVER_ADDED = frozenset({Inertia.POSITIVE, Inertia.INERTIA})
    NEVER_DELETED = frozenset({Inertia.NEGATIVE, Inertia.INERTIA})

    def __init__(self, tables: PDDLDomainTables) -> None:
        self.tables = tables

    def resolve(self, expr: Expression) -> None:
        if expr.connective != Connective.ATOM:
            return

        tables = self.tables
        predicate = expr.symbol
        inertia = tables.inertia(predicate)
        if inertia == Inertia.FLUENT:
            return

        # mask of bound positions and number of instances of the free ones
        signature = tables.signature(predicate)
        mask = 0
        key = []
        max_count = 1
        for (i, arg) in enumerate(expr.arguments):
            if arg >= 0:
                mask |= 1 << i
                key.append(arg)
            else:
                max_count *= len(tables.domain(signature[i]))

        count = tables.occurrences(predicate).count(mask, tuple(key))
        if inertia in AtomResolver.NEVER_ADDED and count == 0:
            expr.set_truth(False)
        elif inertia in AtomResolver.NEVER_DELETED and count == max_count:
            expr.set_truth(True)
