'''
Packed date tests
'''

from datetime import date
import math

from rpn12c.dates import (DMY, MDY, add_days, day_of_week, days_between,
                          days_between_360, decode_date, encode_date)
from rpn12c.util import CalculatorError

from pytest import raises, mark


def test_leap_day_round_trips():
    day = decode_date(29.022024, DMY)
    assert day == date(2024, 2, 29)
    assert encode_date(day, DMY) == 29.022024


def test_leap_day_in_common_year():
    with raises(CalculatorError, match='Error 8'):
        decode_date(29.022023, DMY)


def test_month_first():
    assert decode_date(12.312024, MDY) == date(2024, 12, 31)
    assert encode_date(date(2024, 12, 31), MDY) == 12.312024


def test_formats_disagree():
    assert decode_date(3.042024, MDY) == date(2024, 3, 4)
    assert decode_date(3.042024, DMY) == date(2024, 4, 3)


@mark.parametrize('value', [
    4.312024,  # 31 April
    13.012024,  # month 13
    0.012024,
    -1.012024,
    math.nan,
    math.inf,
])
def test_invalid(value):
    with raises(CalculatorError, match='Error 8'):
        decode_date(value, MDY)


def test_day_of_week():
    # Thursday
    assert day_of_week(date(2024, 2, 29)) == 4
    assert day_of_week(date(2024, 3, 3)) == 7


def test_days_between():
    assert days_between(date(2024, 6, 15), date(2024, 12, 15)) == 183
    assert days_between(date(2024, 12, 15), date(2024, 6, 15)) == -183


def test_days_between_360():
    assert days_between_360(date(2024, 6, 15), date(2024, 12, 15)) == 180
    assert days_between_360(date(2024, 1, 31), date(2024, 3, 31)) == 60


def test_add_days():
    assert add_days(date(2024, 2, 28), 2) == date(2024, 3, 1)
    assert add_days(date(2024, 3, 1), -1.9) == date(2024, 2, 29)


def test_add_days_out_of_range():
    with raises(CalculatorError, match='Error 8'):
        add_days(date(9999, 12, 31), 1)
    with raises(CalculatorError, match='Error 8'):
        add_days(date(2024, 1, 1), math.inf)
