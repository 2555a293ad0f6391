from pyPDDLGrounder.core.compiler.model import PDDLDomainTables
from pyPDDLGrounder.core.compiler.resolver import AtomResolver
from pyPDDLGrounder.core.compiler.substitution import Substitution
from pyPDDLGrounder.core.expr import Connective, Expression


class QuantifierExpander:
    '''Rewrites universal (existential) quantifiers as conjunctions
    (disjunctions) of their body over the domain of the quantified variable.
    '''

    def __init__(self, tables: PDDLDomainTables,
                 substitution: Substitution,
                 resolver: AtomResolver) -> None:
        self.tables = tables
        self.substitution = substitution
        self.resolver = resolver

    def expand(self, expr: Expression) -> None:
        '''Expands in place all quantified expressions in expr.'''
        connective = expr.connective

        if connective == Connective.AND:
            self._expand_nary(expr, connective, absorbing=False)

        elif connective == Connective.OR:
            self._expand_nary(expr, connective, absorbing=True)

        elif connective == Connective.FORALL:
            self._expand_quantifier(expr, Connective.AND, absorbing=False)

        elif connective == Connective.EXISTS:
            self._expand_quantifier(expr, Connective.OR, absorbing=True)

        elif connective == Connective.ATOM:
            self.resolver.resolve(expr)

        elif connective in (Connective.EQUAL_ATOM, Connective.TASK,
                            Connective.FN_HEAD, Connective.FN_ATOM):
            pass

        else:
            for child in expr.operands():
                self.expand(child)

    def _is_vacuous(self, expr):
        return expr.is_quantified() and not self.tables.domain(expr.type_id)

    def _expand_nary(self, expr, connective, absorbing):
        children = expr.children
        i = 0
        while i < len(children):
            child = children[i]

            # quantification over an empty domain is removed
            if self._is_vacuous(child):
                del children[i]
                continue

            self.expand(child)
            if child.is_true() if absorbing else child.is_false():
                expr.set_truth(absorbing)
                return
            i += 1

    def _expand_quantifier(self, expr, connective, absorbing):
        constants = self.tables.domain(expr.type_id)
        body = expr.children[0]
        var = expr.variable
        expr.reset(connective)
        for cons in constants:
            instance = body.copy()
            self.substitution.substitute(instance, var, cons)
            expr.children.append(instance)
            if instance.is_true() if absorbing else instance.is_false():
                expr.set_truth(absorbing)
                return

        # the instances may contain nested quantifiers
        self.expand(expr)
