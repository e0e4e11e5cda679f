'''
Display formatting and numeric helper tests
'''

import math

from rpn12c.numeric import (FIX, SCI, divide, factorial, format_display,
                            fractional_part, growth, integer_part,
                            round_half_away)
from rpn12c.util import CalculatorError

from pytest import approx, raises, mark


def test_groups_thousands():
    assert format_display(1234.5, 2, FIX) == '1,234.50'


def test_large_switches_to_exponential():
    assert format_display(1e11, 2, FIX) == '1.00e11'


def test_tiny_switches_to_exponential():
    assert format_display(1.5e-10, 2, FIX) == '1.50e-10'


def test_zero_stays_fixed():
    assert format_display(0, 2, FIX) == '0.00'


def test_negative_zero_has_no_sign():
    assert format_display(-0.001, 2, FIX) == '0.00'


@mark.parametrize('value', [math.nan, math.inf, -math.inf])
def test_non_finite_is_error(value):
    assert format_display(value, 2, FIX) == 'Error'


def test_unconvertible_is_error():
    assert format_display('abc') == 'Error'


def test_scientific():
    assert format_display(1234.56, 3, SCI) == '1.235e3'
    assert format_display(-0.00025, 1, SCI) == '-2.5e-4'


def test_swapped_separators():
    assert format_display(1234567.891, 2, FIX,
                          decimal_sep=',', group_sep='.') == '1.234.567,89'


def test_no_decimals():
    assert format_display(42, 0, FIX) == '42'


def test_factorial():
    assert factorial(0) == 1
    assert factorial(5) == 120
    assert factorial(5.9) == 120


def test_factorial_overflows_to_infinity():
    assert math.isinf(factorial(500))


def test_factorial_of_negative():
    with raises(CalculatorError, match='Error 0'):
        factorial(-1)


@mark.parametrize('value,decimals,expected', [
    (2.5, 0, 3),
    (-2.5, 0, -3),
    (1.005, 2, 1.01),
    (1.2345, 3, 1.235),
    (-1.2345, 3, -1.235),
])
def test_round_half_away(value, decimals, expected):
    assert round_half_away(value, decimals) == expected


def test_round_leaves_huge_values():
    assert round_half_away(1e20, 2) == 1e20


def test_integer_and_fraction():
    assert integer_part(-3.75) == -3
    assert fractional_part(-3.75) == -0.75
    assert fractional_part(3.25) == 0.25


def test_growth():
    assert growth(0.01, 12) == approx(1.126825030131969)
    assert math.isinf(growth(1, 1e6))
    assert math.isnan(growth(-2, 0.5))


def test_divide():
    assert divide(1, 2) == 0.5
    assert divide(-1, 0) == -math.inf
    assert math.isnan(divide(0, 0))
