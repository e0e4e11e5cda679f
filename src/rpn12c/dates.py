'''
Calendar dates packed into a single number.

M.DY: month is the integral part, day and year the first six fractional
digits (12.312024 is 31 December 2024). D.MY swaps day and month
(31.122024).
'''

from datetime import date, timedelta
import math

from .util import CalculatorError


MDY = 'MDY'
DMY = 'DMY'


def decode_date(value, fmt=MDY):
    '''
    Unpack a date number, raising Error 8 unless it is a real calendar date.
    '''
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise CalculatorError('Error 8')
    if not math.isfinite(value) or value < 0:
        raise CalculatorError('Error 8')
    integral, fraction = '{:.6f}'.format(value).split('.')
    first = int(integral)
    second, year = int(fraction[:2]), int(fraction[2:])
    day, month = (first, second) if fmt == DMY else (second, first)
    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        raise CalculatorError('Error 8')


def encode_date(day, fmt=MDY):
    if fmt == DMY:
        return float('{}.{:02d}{:04d}'.format(day.day, day.month, day.year))
    return float('{}.{:02d}{:04d}'.format(day.month, day.day, day.year))


def day_of_week(day):
    '''
    Monday is 1, Sunday is 7.
    '''
    return day.isoweekday()


def days_between(start, end):
    return (end - start).days


def days_between_360(start, end):
    '''
    Day count on the 30/360 basis (month-end days count as the 30th).
    '''
    d1 = min(start.day, 30)
    d2 = end.day
    if d2 == 31 and d1 == 30:
        d2 = 30
    return ((end.year - start.year) * 360 +
            (end.month - start.month) * 30 +
            (d2 - d1))


def add_days(start, days):
    '''
    Shift a date by a (truncated) number of days.
    '''
    if not math.isfinite(days):
        raise CalculatorError('Error 8')
    try:
        return start + timedelta(days=math.trunc(days))
    except OverflowError:
        raise CalculatorError('Error 8')
