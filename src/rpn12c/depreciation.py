'''
Depreciation schedules.

Each function takes the year to depreciate (1..life), the cost, the
salvage value and the life in years, and returns the depreciation for
that year together with the book value at its end.
'''

import math

from .util import CalculatorError


# Declining-balance factor used when the rate register holds zero.
DB_DEFAULT_FACTOR = 2

# Longest life a schedule is worked out for.
MAX_LIFE = 10000


def _check_year(year, life):
    if not (math.isfinite(year) and math.isfinite(life)) or life > MAX_LIFE:
        raise CalculatorError('Error 5')
    if year > life or year <= 0:
        raise CalculatorError('Error 5')


def straight_line(year, cost, salvage, life):
    _check_year(year, life)
    depreciation = (cost - salvage) / life
    return depreciation, cost - depreciation * year


def sum_of_years(year, cost, salvage, life):
    _check_year(year, life)
    digits = life * (life + 1) / 2
    depreciable = cost - salvage
    charge = depreciable * (life - year + 1) / digits
    # Charges for years 1..year, summed in closed form.
    whole = math.floor(year)
    accumulated = depreciable * (whole * life - whole * (whole - 1) / 2) / digits
    return charge, cost - accumulated


def declining_balance(year, cost, salvage, life, factor_pct=0):
    '''
    Declining balance at ``factor_pct / 100 / life`` per year.

    A zero factor falls back to DB_DEFAULT_FACTOR. Salvage does not
    floor the book value.
    '''
    _check_year(year, life)
    factor = factor_pct or DB_DEFAULT_FACTOR
    rate = factor / 100 / life
    book = cost
    depreciation = 0.0
    for _ in range(int(year)):
        depreciation = book * rate
        book -= depreciation
    return depreciation, book
