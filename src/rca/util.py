from functools import wraps


class CalcError(Exception):
    '''
    Recoverable calculator error.

    The message is what the user sees, leading space included.
    '''
    # Errors that discard the rest of the input line.
    aborts_line = False

    def __init__(self, message, *args):
        super().__init__(message, *args)
        self.message = message

    def __str__(self):
        return self.message


class EmptyStackError(CalcError):
    def __init__(self, message=' empty stack', *args):
        super().__init__(message, *args)


class DomainError(CalcError):
    pass


class TokenError(CalcError):
    '''
    Unknown token or malformed literal.
    '''
    aborts_line = True


class ExpressionError(CalcError):
    '''
    Malformed infix expression.
    '''
    aborts_line = True


class TruncationWarning(CalcError):
    pass


class OutOfVariableSlots(CalcError):
    pass


class Quit(Exception):
    '''
    Leave the calculator with this exit status.
    '''
    def __init__(self, status):
        super().__init__(status)
        self.status = status


def wrap_user_errors(fmt):
    '''
    Ugly hack decorator that converts math exceptions to domain errors.

    Passes through CalcErrors. The format gets the wrapped function's
    arguments.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except (ArithmeticError, ValueError) as e:
                raise DomainError(fmt.format(*args, **kwargs), e)
        return wrapper
    return decorator
