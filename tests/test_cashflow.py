'''
Cash-flow NPV and IRR tests
'''

from rpn12c.cashflow import MAX_COUNT, CashFlow, expand, irr, npv
from rpn12c.util import CalculatorError

from pytest import approx, raises, mark


PROJECT = (CashFlow(-1000), CashFlow(300), CashFlow(400), CashFlow(500))


def test_expand_repeats_in_order():
    flows = (CashFlow(-100), CashFlow(10, 3), CashFlow(5))
    assert expand(flows) == [-100, 10, 10, 10, 5]


@mark.parametrize('count,expected', [
    (3.7, 3),
    (0, 1),
    (-5, 1),
    (150, MAX_COUNT),
])
def test_count_is_clamped(count, expected):
    assert CashFlow(10).with_count(count).count == expected


def test_npv_at_zero_is_the_sum():
    flows = (CashFlow(-500), CashFlow(120, 4), CashFlow(80))
    assert npv(0, flows) == approx(sum(expand(flows)))


def test_npv():
    flows = (CashFlow(-1000), CashFlow(500), CashFlow(600))
    assert npv(10, flows) == approx(-1000 + 500 / 1.1 + 600 / 1.21)


def test_npv_of_nothing():
    assert npv(10, ()) == 0


def test_npv_at_minus_hundred_percent():
    with raises(CalculatorError, match='Error 0'):
        npv(-100, PROJECT)


def test_irr_zeroes_npv():
    rate = irr(PROJECT)
    assert rate == approx(8.9, abs=0.1)
    assert abs(npv(rate, PROJECT)) < 1e-4


def test_irr_with_repeats():
    flows = (CashFlow(-1000), CashFlow(100, 12), CashFlow(200))
    rate = irr(flows)
    assert abs(npv(rate, flows)) < 1e-4


def test_irr_without_sign_change():
    with raises(CalculatorError, match='Error 7'):
        irr((CashFlow(100), CashFlow(200)))
    with raises(CalculatorError, match='Error 7'):
        irr(())
