'''
Time value of money: the five-register annuity equation.

    PV·(1+i)^n + PMT·(1+i·t)·((1+i)^n − 1)/i + FV = 0

with t = 1 for payments at the start of each period (BEG) and 0 at the
end (END). Money received is positive, money paid out negative.
'''

from enum import Enum
import math

from .numeric import divide, growth
from .util import CalculatorError


# Below this the rate is treated as zero and the linear forms are used.
ZERO_RATE = 1e-10

RATE_GUESS = 0.10
RATE_ITERATIONS = 100
RATE_STEP = 1e-7
RATE_TOLERANCE = 1e-12

# Upper bound on periods a single AMORT keystroke will iterate over.
MAX_AMORT_PERIODS = 100000


class TVMRegister(str, Enum):
    N = 'n'
    I = 'i'  # noqa: E741
    PV = 'PV'
    PMT = 'PMT'
    FV = 'FV'


def _balance(n, rate, pv, pmt, fv, begin):
    '''
    Left hand side of the annuity equation at a periodic rate.
    '''
    if abs(rate) < ZERO_RATE:
        return pv + pmt * n + fv
    g = growth(rate, n)
    t = 1 if begin else 0
    return pv * g + pmt * (1 + rate * t) * (g - 1) / rate + fv


def solve_n(i_pct, pv, pmt, fv, begin=False):
    i = i_pct / 100
    if abs(i) < ZERO_RATE:
        n = divide(-(pv + fv), pmt)
    else:
        if 1 + i <= 0:
            raise CalculatorError('Error 5')
        k = pmt * (1 + i * (1 if begin else 0)) / i
        ratio = divide(k - fv, pv + k)
        if not ratio > 0 or math.isinf(ratio):
            raise CalculatorError('Error 5')
        n = math.log(ratio) / math.log(1 + i)
    if not math.isfinite(n):
        raise CalculatorError('Error 5')
    return n


def solve_i(n, pv, pmt, fv, begin=False):
    '''
    Periodic rate in percent, by Newton-Raphson with a numeric derivative.
    '''
    signs = {math.copysign(1, v) for v in (pv, pmt, fv) if v}
    if n <= 0 or len(signs) < 2:
        raise CalculatorError('Error 5')
    rate = RATE_GUESS
    for _ in range(RATE_ITERATIONS):
        f = _balance(n, rate, pv, pmt, fv, begin)
        slope = (_balance(n, rate + RATE_STEP, pv, pmt, fv, begin) - f) / RATE_STEP
        if not math.isfinite(f) or not math.isfinite(slope) or slope == 0:
            break
        step = f / slope
        rate -= step
        if rate <= -1:
            break
        if abs(step) < RATE_TOLERANCE:
            return rate * 100
    raise CalculatorError('Error 5')


def solve_tvm(n, i_pct, pv, pmt, fv, begin=False, solve_for=TVMRegister.FV):
    '''
    Solve the annuity equation for one register, the other four known.

    PV, PMT and FV use the closed forms; a zero denominator propagates
    as infinity or NaN rather than raising.
    '''
    solve_for = TVMRegister(solve_for)
    if solve_for is TVMRegister.N:
        return solve_n(i_pct, pv, pmt, fv, begin)
    if solve_for is TVMRegister.I:
        return solve_i(n, pv, pmt, fv, begin)

    i = i_pct / 100
    if abs(i) < ZERO_RATE:
        if solve_for is TVMRegister.FV:
            return -(pv + pmt * n)
        if solve_for is TVMRegister.PV:
            return -(fv + pmt * n)
        return divide(-(fv + pv), n)

    g = growth(i, n)
    annuity = (1 + i * (1 if begin else 0)) * (g - 1) / i
    if solve_for is TVMRegister.FV:
        return -(pv * g + pmt * annuity)
    if solve_for is TVMRegister.PV:
        return divide(-(fv + pmt * annuity), g)
    return divide(-(fv + pv * g), annuity)


def amortize(periods, i_pct, pv, pmt):
    '''
    Amortize a number of payments.

    Returns (interest, principal, remaining balance) where interest and
    principal are the totals over the amortized periods.
    '''
    if not math.isfinite(periods) or periods > MAX_AMORT_PERIODS:
        raise CalculatorError('Error 5')
    rate = i_pct / 100
    balance = pv
    total_interest = total_principal = 0.0
    for _ in range(max(0, math.ceil(periods))):
        interest = -(balance * rate)
        principal = pmt - interest
        balance += principal
        total_interest += interest
        total_principal += principal
    return total_interest, total_principal, balance


def simple_interest(n_days, i_pct, pv, basis=360):
    '''
    Simple interest accrued over n days at an annual percentage rate.
    '''
    return -(pv * n_days * i_pct) / (basis * 100)
