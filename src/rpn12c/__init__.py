'''
HP-12C style financial RPN calculator.

Four-level stack arithmetic with stack lift, the five time value of money
registers, cash flow NPV and IRR, bonds, depreciation, calendar arithmetic
and two-variable statistics.

Keys go in as events, one at a time; what comes back is a whole new state.
Nothing draws anything: the display is a string, the annunciators a list.
'''

from .cli import CLI
from .lexer import Lexer
from .machine import Machine, transition
from .state import CalculatorState, Snapshot


__all__ = 'Machine', 'transition', 'CalculatorState', 'Snapshot', 'Lexer', \
          'CLI'
