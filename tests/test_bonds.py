'''
Bond price and yield tests
'''

from datetime import date

from rpn12c.bonds import DAYS_PER_YEAR, bond_price, bond_yield

from pytest import approx


SETTLEMENT = date(2024, 1, 1)
MATURITY = date(2034, 1, 1)


def test_priced_at_par_when_yield_equals_coupon():
    assert bond_price(SETTLEMENT, MATURITY, 5, 5) == approx(100)


def test_discount_and_premium():
    assert bond_price(SETTLEMENT, MATURITY, 5, 6) < 100
    assert bond_price(SETTLEMENT, MATURITY, 5, 4) > 100


def test_matured_is_par():
    assert bond_price(MATURITY, MATURITY, 5, 6) == 100
    assert bond_price(MATURITY, SETTLEMENT, 5, 6) == 100


def test_zero_yield_pays_every_coupon():
    periods = (MATURITY - SETTLEMENT).days / DAYS_PER_YEAR * 2
    assert bond_price(SETTLEMENT, MATURITY, 5, 0) == approx(100 + 2.5 * periods)


def test_yield_reproduces_price():
    price = bond_price(SETTLEMENT, MATURITY, 5, 6)
    ytm = bond_yield(SETTLEMENT, MATURITY, 5, price)
    assert ytm == approx(6, abs=1e-3)
    assert bond_price(SETTLEMENT, MATURITY, 5, ytm) == approx(price, abs=1e-3)


def test_yield_at_par():
    assert bond_yield(SETTLEMENT, MATURITY, 7, 100) == approx(7, abs=1e-3)
