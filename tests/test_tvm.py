'''
Time value of money tests
'''

import math

from rpn12c.tvm import (TVMRegister, amortize, simple_interest, solve_tvm)
from rpn12c.util import CalculatorError

from pytest import approx, raises, mark


LOAN_PMT = solve_tvm(12, 1, -1000, 0, 0, solve_for='PMT')


def test_loan_payment():
    pmt = solve_tvm(12, 1, -1000, 0, 0, solve_for=TVMRegister.PMT)
    assert pmt == approx(88.8488, abs=1e-4)


def test_payment_in_advance_is_smaller():
    end = solve_tvm(12, 1, -1000, 0, 0, False, TVMRegister.PMT)
    begin = solve_tvm(12, 1, -1000, 0, 0, True, TVMRegister.PMT)
    assert begin == approx(end / 1.01)


@mark.parametrize('n,i,pv,pmt', [
    (12, 1, -1000, 0),
    (360, 0.5, 250000, -1500),
    (5, 7.25, -100, -20),
])
def test_future_then_present_value(n, i, pv, pmt):
    fv = solve_tvm(n, i, pv, pmt, 0, solve_for='FV')
    assert solve_tvm(n, i, 0, pmt, fv, solve_for='PV') == approx(pv)


def test_zero_rate_is_linear():
    assert solve_tvm(10, 0, -100, -10, 0, solve_for='FV') == 200
    assert solve_tvm(10, 0, 0, -10, 200, solve_for='PV') == -100
    assert solve_tvm(10, 0, -100, 0, 300, solve_for='PMT') == -20


def test_zero_denominator_propagates():
    assert math.isinf(solve_tvm(0, 1, -1000, 0, 0, solve_for='PMT'))


def test_solve_periods():
    n = solve_tvm(0, 1, -1000, LOAN_PMT, 0, solve_for='n')
    assert n == approx(12)


def test_solve_periods_at_zero_rate():
    assert solve_tvm(0, 0, -1000, 100, 0, solve_for='n') == approx(10)


def test_payment_never_covers_interest():
    with raises(CalculatorError, match='Error 5'):
        solve_tvm(0, 1, -1000, 5, 0, solve_for='n')


def test_solve_rate():
    i = solve_tvm(12, 0, -1000, LOAN_PMT, 0, solve_for='i')
    assert i == approx(1, abs=1e-6)


def test_solve_rate_needs_sign_change():
    with raises(CalculatorError, match='Error 5'):
        solve_tvm(12, 0, 1000, 100, 0, solve_for='i')


def test_amortize_first_payment():
    interest, principal, balance = amortize(1, 1, 1000, -LOAN_PMT)
    assert interest == approx(-10)
    assert principal == approx(-78.8488, abs=1e-4)
    assert balance == approx(921.1512, abs=1e-4)


def test_amortize_whole_loan():
    interest, principal, balance = amortize(12, 1, 1000, -LOAN_PMT)
    assert balance == approx(0, abs=1e-9)
    assert principal == approx(-1000)
    assert interest + principal == approx(-12 * LOAN_PMT)


def test_amortize_too_many_periods():
    with raises(CalculatorError, match='Error 5'):
        amortize(1e9, 1, 1000, -10)


def test_simple_interest():
    assert simple_interest(360, 10, 1000) == approx(-100)
    assert simple_interest(60, 7, 450) == approx(-5.25)
