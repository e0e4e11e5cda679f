'''
Semiannual coupon bond price and yield to maturity.

Prices are per 100 of face value; rates are annual percentages.
'''

from .dates import days_between
from .numeric import growth


DAYS_PER_YEAR = 365.25

YIELD_GUESS = 0.05
YIELD_ITERATIONS = 20
# One hundredth of a basis point.
YIELD_STEP = 0.0001
PRICE_TOLERANCE = 0.0001


def bond_price(settlement, maturity, coupon_pct, yield_pct):
    periods = days_between(settlement, maturity) / DAYS_PER_YEAR * 2
    if periods <= 0:
        return 100.0
    r = yield_pct / 100 / 2
    coupon = coupon_pct / 2
    discount = growth(r, -periods)
    if r == 0:
        return 100 + coupon * periods
    return 100 * discount + coupon / r * (1 - discount)


def bond_yield(settlement, maturity, coupon_pct, price):
    '''
    Annual yield in percent that reproduces a price.

    Newton-Raphson on the price with a forward-difference slope; a flat
    slope falls back to a unit step instead of dividing by zero.
    '''
    rate = YIELD_GUESS
    for _ in range(YIELD_ITERATIONS):
        p = bond_price(settlement, maturity, coupon_pct, rate * 100)
        bumped = bond_price(settlement, maturity, coupon_pct,
                            (rate + YIELD_STEP) * 100)
        slope = (bumped - p) / YIELD_STEP
        diff = p - price
        if abs(diff) < PRICE_TOLERANCE:
            break
        rate -= diff / (slope or 1)
    return rate * 100
