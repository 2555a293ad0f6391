import warnings

import termcolor


def print_stack_trace(expr, tables=None):
    # late import: the expression module itself raises the errors below
    from pyPDDLGrounder.core.debug.decompiler import PDDLDecompiler
    from pyPDDLGrounder.core.expr import Expression

    if isinstance(expr, Expression):
        trace = PDDLDecompiler(tables).decompile_expr(expr)
    else:
        trace = str(expr)
    return f'>> {trace}'


def print_stack_trace_root(expr, root, tables=None):
    return print_stack_trace(expr, tables) + '\n' + f'Please check expression for {root}.'


def raise_warning(message, color='yellow'):
    message = termcolor.colored(message, color)
    warnings.warn(message, stacklevel=2)


class PDDLInvalidExpressionError(SyntaxError):
    pass


class PDDLInvalidNumberOfArgumentsError(SyntaxError):
    pass


class PDDLUndefinedPredicateError(SyntaxError):
    pass


class PDDLTypeError(TypeError):
    pass


class PDDLValueOutOfRangeError(ValueError):
    pass


class PDDLConfigError(ValueError):
    pass
