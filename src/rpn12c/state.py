'''
Calculator state: one immutable value, replaced wholesale on every key.
'''

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from .cashflow import CashFlow
from .dates import DMY, MDY
from .numeric import FIX, SCI
from .stats import Stats
from .tvm import TVMRegister


STACK_DEPTH = 4
MEMORY_SIZE = 20
# Longest number the entry buffer will hold.
MAX_ENTRY = 15


class Modifier(str, Enum):
    NONE = 'NONE'
    F = 'F'
    G = 'G'


class DisplayFormat(str, Enum):
    FIX = FIX
    SCI = SCI


class DateFormat(str, Enum):
    MDY = MDY
    DMY = DMY


@dataclass(frozen=True)
class Financial:
    n: float = 0.0
    i: float = 0.0
    PV: float = 0.0
    PMT: float = 0.0
    FV: float = 0.0

    def get(self, register):
        return getattr(self, TVMRegister(register).value)

    def set(self, register, value):
        return replace(self, **{TVMRegister(register).value: value})


@dataclass(frozen=True)
class CalculatorState:
    stack: Tuple[float, ...] = (0.0,) * STACK_DEPTH
    display: str = '0.00'
    last_x: float = 0.0
    input_buffer: Optional[str] = None
    modifiers: Modifier = Modifier.NONE
    power_on: bool = True
    financial: Financial = field(default_factory=Financial)
    error: Optional[str] = None
    memory: Tuple[float, ...] = (0.0,) * MEMORY_SIZE
    stats: Stats = field(default_factory=Stats)
    cash_flows: Tuple[CashFlow, ...] = ()
    pending_op: Optional[str] = None
    beg_mode: bool = False
    date_format: DateFormat = DateFormat.MDY
    decimals: int = 2
    display_format: DisplayFormat = DisplayFormat.FIX
    stack_lift: bool = True

    @property
    def x(self):
        '''
        X as the next operation will see it: the live entry, else the stack.
        '''
        if self.input_buffer is not None:
            return parse_entry(self.input_buffer)
        return self.stack[0]

    @property
    def y(self):
        return self.stack[1]

    def evolve(self, **changes):
        return replace(self, **changes)


def parse_entry(buffer):
    '''
    Value of a partially typed number ('12.', '-', '1e', '2e-' are fine).
    '''
    text = buffer.rstrip('e-')
    if text in ('', '.', '-.'):
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


@dataclass(frozen=True)
class Snapshot:
    '''
    Read-only view of what a display and its annunciators need.
    '''
    stack: Tuple[float, ...]
    display: str
    error: Optional[str]
    modifier: Modifier
    financial: Financial
    beg_mode: bool
    date_format: DateFormat
    pending_op: Optional[str]
    power_on: bool

    @property
    def text(self):
        if not self.power_on:
            return ''
        return self.error or self.display

    @property
    def annunciators(self):
        flags = []
        if self.modifier is Modifier.F:
            flags.append('f')
        elif self.modifier is Modifier.G:
            flags.append('g')
        if self.beg_mode:
            flags.append('BEGIN')
        if self.date_format is DateFormat.DMY:
            flags.append('D.MY')
        return flags

    @classmethod
    def of(cls, state):
        return cls(stack=state.stack,
                   display=state.display,
                   error=state.error,
                   modifier=state.modifiers,
                   financial=state.financial,
                   beg_mode=state.beg_mode,
                   date_format=state.date_format,
                   pending_op=state.pending_op,
                   power_on=state.power_on)
