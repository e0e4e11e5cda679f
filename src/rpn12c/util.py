from functools import wraps


class CalculatorError(Exception):
    '''
    Domain failure surfaced on the display as an error label.

    The first argument is the label itself, e.g. ``'Error 7'``.
    '''

    @property
    def label(self):
        return self.args[0]


def wrap_domain_errors(label):
    '''
    Decorator that converts arithmetic exceptions to calculator errors.

    Passes through CalculatorErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalculatorError:
                raise
            except (ZeroDivisionError, ValueError, OverflowError) as e:
                raise CalculatorError(label, e)
        return wrapper
    return decorator


class LexError(Exception):
    '''
    Text that doesn't spell out a key sequence.
    '''
    pass
