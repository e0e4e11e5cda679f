'''
Cash-flow ledger feeding NPV and IRR.

Each entry is an amount repeated a number of consecutive periods; the
first entry is the flow at period 0.
'''

from dataclasses import dataclass, replace
import math

from .util import CalculatorError, wrap_domain_errors


MIN_COUNT = 1
MAX_COUNT = 99

IRR_GUESS = 0.10
IRR_ITERATIONS = 50
IRR_TOLERANCE = 1e-6
IRR_FLAT = 1e-9


@dataclass(frozen=True)
class CashFlow:
    amount: float
    count: int = 1

    def with_count(self, count):
        '''
        Copy with a repeat count clamped to what a cash-flow register holds.
        '''
        count = max(MIN_COUNT, min(MAX_COUNT, math.floor(count)))
        return replace(self, count=count)


def expand(flows):
    '''
    Flatten entries into one amount per period.
    '''
    return [flow.amount for flow in flows for _ in range(flow.count)]


@wrap_domain_errors('Error 0')
def npv(i_pct, flows):
    rate = i_pct / 100
    return sum(cf / (1 + rate) ** t for t, cf in enumerate(expand(flows)))


@wrap_domain_errors('Error 7')
def irr(flows):
    '''
    Internal rate of return in percent, by Newton-Raphson from 10%.

    Raises Error 7 when the flows never change sign, the slope goes
    flat, the rate leaves the reals or the iteration cap runs out.
    '''
    amounts = expand(flows)
    if not any(cf > 0 for cf in amounts) or not any(cf < 0 for cf in amounts):
        raise CalculatorError('Error 7')
    rate = IRR_GUESS
    for _ in range(IRR_ITERATIONS):
        value = slope = 0.0
        for t, cf in enumerate(amounts):
            discount = (1 + rate) ** t
            value += cf / discount
            slope -= t * cf / (discount * (1 + rate))
        if abs(value) < IRR_TOLERANCE:
            return rate * 100
        if abs(slope) < IRR_FLAT:
            break
        rate -= value / slope
        if not math.isfinite(rate):
            break
    raise CalculatorError('Error 7')
