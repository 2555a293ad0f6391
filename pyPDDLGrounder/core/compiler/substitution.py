from pyPDDLGrounder.core.compiler.resolver import AtomResolver
from pyPDDLGrounder.core.expr import Connective, Expression


class Substitution:
    '''Replaces a variable by a constant everywhere in an expression, folding
    on the way the nodes that the replacement makes constant.
    '''

    def __init__(self, resolver: AtomResolver) -> None:
        self.resolver = resolver

    def substitute(self, expr: Expression, var: int, cons: int) -> None:
        '''Substitutes in place all occurrences of var in expr by cons.'''
        connective = expr.connective

        if connective == Connective.ATOM:
            if self._replace(expr.arguments, var, cons):
                self.resolver.resolve(expr)

        elif connective in (Connective.TASK, Connective.FN_HEAD):
            self._replace(expr.arguments, var, cons)

        elif connective == Connective.EQUAL_ATOM:
            self._replace(expr.arguments, var, cons)
            left, right = expr.arguments
            if left == right:
                expr.set_truth(True)
            elif left >= 0 and right >= 0:
                expr.set_truth(False)

        elif connective == Connective.AND:
            for child in expr.children:
                self.substitute(child, var, cons)
                if child.is_false():
                    expr.set_truth(False)
                    break

        elif connective == Connective.OR:
            for child in expr.children:
                self.substitute(child, var, cons)
                if child.is_true():
                    expr.set_truth(True)
                    break

        elif connective == Connective.NOT:
            child = expr.children[0]
            self.substitute(child, var, cons)
            if child.is_true():
                expr.set_truth(False)
            elif child.is_false():
                expr.set_truth(True)

        else:
            for child in expr.operands():
                self.substitute(child, var, cons)

    @staticmethod
    def _replace(arguments, var, cons):
        updated = False
        for (i, arg) in enumerate(arguments):
            if arg == var:
                arguments[i] = cons
                updated = True
        return updated
