from pyPDDLGrounder.core.expr import Connective, Expression


class Simplifier:
    '''Simplifies expressions in place with the following rules:
        not true = false, not false = true
        true ^ phi = phi, false ^ phi = false
        true v phi = true, false v phi = phi
        (and (and phi psi) chi) = (and phi psi chi), and likewise for or
        (when false phi) is dropped, (when true phi) = phi
        (when phi true) is dropped from a conjunction,
        (when phi false) from a disjunction
        x = x is true, c1 = c2 is false for distinct constants
    Atoms are left untouched: they are folded by the AtomResolver as soon as
    their arguments change.
    '''

    def __init__(self) -> None:
        self._dispatch = {
            Connective.AND: self._simplify_and,
            Connective.OR: self._simplify_or,
            Connective.NOT: self._simplify_not,
            Connective.EQUAL_ATOM: self._simplify_equal
        }

    def simplify(self, expr: Expression) -> None:
        '''Main dispatch method for recursively simplifying the expression tree.'''
        handler = self._dispatch.get(expr.connective, None)
        if handler is not None:
            handler(expr)
        else:
            for child in expr.operands():
                self.simplify(child)

    def _simplify_equal(self, expr):
        left, right = expr.arguments
        if left == right:
            expr.set_truth(True)
        elif left >= 0 and right >= 0:
            expr.set_truth(False)

    def _simplify_not(self, expr):
        child = expr.children[0]
        self.simplify(child)
        if child.is_true():
            expr.set_truth(False)
        elif child.is_false():
            expr.set_truth(True)

    def _simplify_and(self, expr):
        self._simplify_nary(expr, Connective.AND, absorbing=False)

    def _simplify_or(self, expr):
        self._simplify_nary(expr, Connective.OR, absorbing=True)

    def _simplify_nary(self, expr, connective, absorbing):
        '''Simplifies a conjunction (absorbing=False) or a disjunction
        (absorbing=True): a child with truth value absorbing decides the whole
        expression, a child with the other truth value is dropped.'''
        children = expr.children
        i = 0
        while i < len(children):
            child = children[i]
            self.simplify(child)
            child_connective = child.connective

            if self._is_truth(child, absorbing):
                expr.set_truth(absorbing)
                return

            elif self._is_truth(child, not absorbing):
                del children[i]

            elif child_connective == connective:
                if not self._inline(expr, i, child.children, absorbing):
                    return

            elif child_connective == Connective.WHEN:
                antecedent, consequent = child.children
                if antecedent.is_false():

                    # the effect requires an inconsistent state to apply
                    del children[i]

                elif antecedent.is_true():

                    # the effect becomes unconditional
                    if consequent.connective == connective:
                        if not self._inline(expr, i, consequent.children, absorbing):
                            return
                    else:
                        children[i] = consequent

                        # revisit the consequent at the same position
                        continue

                elif self._is_truth(consequent, not absorbing):

                    # the effect changes nothing
                    del children[i]

                else:
                    i += 1

            else:
                i += 1

        if not children:
            expr.set_truth(not absorbing)
        elif len(children) == 1:
            expr.become(children[0])

    def _inline(self, expr, i, grandchildren, absorbing):
        '''Replaces the i-th child of expr by grandchildren; returns False if
        expr collapsed to the truth value absorbing.'''
        inlined = []
        for grandchild in grandchildren:
            if self._is_truth(grandchild, absorbing):
                expr.set_truth(absorbing)
                return False
            elif not self._is_truth(grandchild, not absorbing):
                inlined.append(grandchild)
        expr.children[i:i + 1] = inlined
        return True

    @staticmethod
    def _is_truth(expr, value):
        return expr.is_true() if value else expr.is_false()
