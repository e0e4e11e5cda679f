'''
Depreciation schedule tests
'''

import math

from rpn12c.depreciation import (MAX_LIFE, declining_balance, straight_line,
                                 sum_of_years)
from rpn12c.util import CalculatorError

from pytest import approx, raises, mark


COST = 10000
SALVAGE = 1000
LIFE = 5


def test_straight_line():
    charge, book = straight_line(2, COST, SALVAGE, LIFE)
    assert charge == 1800
    assert book == 6400


def test_straight_line_ends_at_salvage():
    assert straight_line(LIFE, COST, SALVAGE, LIFE)[1] == approx(SALVAGE)


def test_sum_of_years():
    # 15 digits: 5/15, 4/15, ...
    charge, book = sum_of_years(1, COST, SALVAGE, LIFE)
    assert charge == approx(3000)
    assert book == approx(7000)
    charge, book = sum_of_years(2, COST, SALVAGE, LIFE)
    assert charge == approx(2400)
    assert book == approx(4600)


def test_sum_of_years_ends_at_salvage():
    assert sum_of_years(LIFE, COST, SALVAGE, LIFE)[1] == approx(SALVAGE)


def test_declining_balance_default_factor():
    # Zero factor falls back to a rate of 2 / 100 / life per year.
    charge, book = declining_balance(1, COST, SALVAGE, LIFE)
    assert charge == approx(COST * 0.004)
    assert book == approx(COST * 0.996)


def test_declining_balance_double():
    charge, book = declining_balance(2, COST, SALVAGE, LIFE, 200)
    assert charge == approx(2400)
    assert book == approx(3600)


@mark.parametrize('year', [0, -1, LIFE + 1])
def test_year_out_of_bounds(year):
    for schedule in (straight_line, sum_of_years, declining_balance):
        with raises(CalculatorError, match='Error 5'):
            schedule(year, COST, SALVAGE, LIFE)


@mark.parametrize('year,life', [
    (math.inf, math.inf),
    (1, math.inf),
    (math.nan, LIFE),
    (1e12, 1e12),
    (1, MAX_LIFE + 1),
])
def test_unworkable_life(year, life):
    for schedule in (straight_line, sum_of_years, declining_balance):
        with raises(CalculatorError, match='Error 5'):
            schedule(year, COST, SALVAGE, life)


def test_sum_of_years_matches_yearly_charges():
    life = 40
    total = sum(sum_of_years(year, COST, SALVAGE, life)[0]
                for year in range(1, 18))
    assert sum_of_years(17, COST, SALVAGE, life)[1] == approx(COST - total)


def test_longest_life():
    charge, book = sum_of_years(MAX_LIFE, COST, SALVAGE, MAX_LIFE)
    assert book == approx(SALVAGE)
    charge, book = declining_balance(MAX_LIFE, COST, SALVAGE, MAX_LIFE, 200)
    assert 0 < book < COST
