'''
Numeric primitives shared by the solvers and the display.
'''

from decimal import Decimal, ROUND_HALF_UP
import math

from .util import CalculatorError


FIX = 'FIX'
SCI = 'SCI'

# Beyond these magnitudes FIX falls back to exponential notation.
FIX_MAX = 1e10
FIX_MIN = 1e-9


def format_display(value, decimals=2, mode=FIX, decimal_sep='.', group_sep=','):
    '''
    Render a number the way the display shows it.

    Never raises; non-finite values render as ``Error``.
    '''
    try:
        value = float(value)
    except (TypeError, ValueError, OverflowError):
        return 'Error'
    if math.isnan(value) or math.isinf(value):
        return 'Error'
    magnitude = abs(value)
    if mode == SCI or magnitude >= FIX_MAX or 0 < magnitude < FIX_MIN:
        return _exponential(value, decimals, decimal_sep)
    # Work in a neutral notation, then swap in the configured separators.
    text = '{:,.{}f}'.format(value, decimals)
    if text.startswith('-') and not any(c in '123456789' for c in text):
        text = text[1:]
    return text.translate({ord(','): '\0', ord('.'): decimal_sep}) \
               .replace('\0', group_sep)


def _exponential(value, decimals, decimal_sep):
    mantissa, exponent = '{:.{}e}'.format(value, decimals).split('e')
    # 1.50e+03 -> 1.50e3, 1.50e-03 -> 1.50e-3
    exponent = int(exponent)
    return '{}e{}'.format(mantissa.replace('.', decimal_sep), exponent)


def factorial(n: float) -> float:
    '''
    Factorial of the integral part of n, as a float.

    Overflows to infinity rather than raising.
    '''
    if n < 0:
        raise CalculatorError('Error 0')
    result = 1.0
    for k in range(2, int(math.floor(n)) + 1):
        result *= k
        if math.isinf(result):
            break
    return result


def round_half_away(value: float, decimals: int) -> float:
    '''
    Round to a number of fractional digits, ties away from zero.
    '''
    # Floats this large carry no fractional digits anyway.
    if not math.isfinite(value) or abs(value) >= 1e15:
        return value
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def integer_part(value: float) -> float:
    return float(math.trunc(value))


def fractional_part(value: float) -> float:
    return value - math.trunc(value)


def growth(rate: float, periods: float) -> float:
    '''
    Compound growth factor (1 + rate) ** periods.

    Overflow yields infinity; a negative base with a fractional exponent
    yields NaN rather than a complex number.
    '''
    try:
        return math.pow(1 + rate, periods)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def divide(numerator: float, denominator: float) -> float:
    '''
    IEEE-style division: a zero denominator gives ±inf, or NaN for 0/0.
    '''
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def raise_power(base: float, exponent: float) -> float:
    '''
    base ** exponent, overflowing to a signed infinity.

    Domain errors (a negative base with a fractional exponent, zero to a
    negative power) still raise ValueError.
    '''
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent % 2 == 1:
            return -math.inf
        return math.inf
