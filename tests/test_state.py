'''
State value and snapshot tests
'''

from rpn12c.keys import KEYPAD, KEYS, Action, key
from rpn12c.state import (CalculatorState, Financial, Modifier, Snapshot,
                          parse_entry)
from rpn12c.tvm import TVMRegister
from rpn12c.util import CalculatorError, wrap_domain_errors

from pytest import raises, mark


@mark.parametrize('buffer,expected', [
    ('', 0),
    ('.', 0),
    ('-', 0),
    ('-.', 0),
    ('12.', 12),
    ('1e', 1),
    ('2e-', 2),
    ('2e-3', 0.002),
    ('-4.5', -4.5),
])
def test_parse_entry(buffer, expected):
    assert parse_entry(buffer) == expected


def test_x_prefers_entry():
    state = CalculatorState(stack=(1.0, 2.0, 3.0, 4.0), input_buffer='9')
    assert state.x == 9
    assert state.y == 2
    assert state.evolve(input_buffer=None).x == 1


def test_financial_registers():
    fin = Financial().set(TVMRegister.PV, -1000).set('n', 12)
    assert fin.get('PV') == -1000
    assert fin.n == 12
    with raises(ValueError):
        fin.set('rate', 1)


def test_snapshot_text():
    state = CalculatorState(display='3.00')
    assert Snapshot.of(state).text == '3.00'
    assert Snapshot.of(state.evolve(error='Error 7')).text == 'Error 7'
    assert Snapshot.of(state.evolve(power_on=False)).text == ''


def test_snapshot_annunciators():
    state = CalculatorState(modifiers=Modifier.G, beg_mode=True)
    assert Snapshot.of(state).annunciators == ['g', 'BEGIN']


def test_keypad():
    assert len(KEYPAD) == 4
    assert len(KEYS) == 39
    assert key('ENTER').action is Action.ENTER
    assert key('÷') == key('DIV')
    with raises(KeyError):
        key('nope')


def test_wrap_domain_errors():
    @wrap_domain_errors('Error 0')
    def divide(a, b):
        return a / b

    @wrap_domain_errors('Error 0')
    def fails():
        raise CalculatorError('Error 5')

    assert divide(1, 2) == 0.5
    with raises(CalculatorError, match='Error 0') as e:
        divide(1, 0)
    assert e.value.label == 'Error 0'
    with raises(CalculatorError, match='Error 5'):
        fails()
