'''
Persisted form of the calculator state.

The record is what gets written to storage between sessions. Loading is
forgiving: a field that is missing or malformed falls back to its
initial default on its own, without discarding the rest of the record.
'''

import logging
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .cashflow import MAX_COUNT, MIN_COUNT, CashFlow
from .state import (MAX_ENTRY, MEMORY_SIZE, STACK_DEPTH, CalculatorState,
                    DateFormat, DisplayFormat, Financial, Modifier)
from .stats import Stats


logger = logging.getLogger(__name__)


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FinancialRecord(BaseModel):
    # Register names are stored as they are, no camel-casing.
    n: float = 0.0
    i: float = 0.0
    PV: float = 0.0
    PMT: float = 0.0
    FV: float = 0.0


class StatsRecord(_Record):
    n: float = 0
    sum_x: float = 0.0
    sum_x2: float = 0.0
    sum_y: float = 0.0
    sum_y2: float = 0.0
    sum_xy: float = Field(0.0, alias='sumXY')


class CashFlowRecord(_Record):
    amount: float
    count: Annotated[int, Field(ge=MIN_COUNT, le=MAX_COUNT)] = 1


class StateRecord(_Record):
    stack: Annotated[List[float], Field(min_length=STACK_DEPTH,
                                        max_length=STACK_DEPTH)] = \
        Field(default_factory=lambda: [0.0] * STACK_DEPTH)
    display: str = '0.00'
    last_x: float = 0.0
    input_buffer: Optional[Annotated[str, Field(max_length=MAX_ENTRY)]] = None
    modifiers: Modifier = Modifier.NONE
    power_on: bool = True
    financial: FinancialRecord = Field(default_factory=FinancialRecord)
    error: Optional[str] = None
    memory: Annotated[List[float], Field(min_length=MEMORY_SIZE,
                                         max_length=MEMORY_SIZE)] = \
        Field(default_factory=lambda: [0.0] * MEMORY_SIZE)
    stats: StatsRecord = Field(default_factory=StatsRecord)
    cash_flows: List[CashFlowRecord] = Field(default_factory=list)
    pending_op: Optional[str] = None
    beg_mode: bool = False
    date_format: DateFormat = DateFormat.MDY
    decimals: Annotated[int, Field(ge=0, le=9)] = 2
    display_format: DisplayFormat = DisplayFormat.FIX
    stack_lift: bool = True

    @field_validator('*', mode='wrap')
    @classmethod
    def _default_when_malformed(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            default = cls.model_fields[info.field_name] \
                         .get_default(call_default_factory=True)
            logger.warning('Malformed %r in saved state, using %r',
                           info.field_name, default)
            return default


def _from_state(state):
    return StateRecord(
        stack=list(state.stack),
        display=state.display,
        last_x=state.last_x,
        input_buffer=state.input_buffer,
        modifiers=state.modifiers,
        power_on=state.power_on,
        financial=FinancialRecord(**vars(state.financial)),
        error=state.error,
        memory=list(state.memory),
        stats=StatsRecord(**vars(state.stats)),
        cash_flows=[CashFlowRecord(amount=flow.amount, count=flow.count)
                    for flow in state.cash_flows],
        pending_op=state.pending_op,
        beg_mode=state.beg_mode,
        date_format=state.date_format,
        decimals=state.decimals,
        display_format=state.display_format,
        stack_lift=state.stack_lift,
    )


def to_record(state):
    '''
    Plain, JSON-ready mapping of a state.
    '''
    return _from_state(state).model_dump(mode='json', by_alias=True)


def _to_state(record):
    return CalculatorState(
        stack=tuple(record.stack),
        display=record.display,
        last_x=record.last_x,
        input_buffer=record.input_buffer,
        modifiers=record.modifiers,
        power_on=record.power_on,
        financial=Financial(**record.financial.model_dump()),
        error=record.error,
        memory=tuple(record.memory),
        stats=Stats(**record.stats.model_dump()),
        cash_flows=tuple(CashFlow(flow.amount, flow.count)
                         for flow in record.cash_flows),
        pending_op=record.pending_op,
        beg_mode=record.beg_mode,
        date_format=record.date_format,
        decimals=record.decimals,
        display_format=record.display_format,
        stack_lift=record.stack_lift,
    )


def from_record(data):
    '''
    Rebuild a state from a mapping; anything unusable becomes the default.
    '''
    try:
        record = StateRecord.model_validate(data)
    except ValidationError:
        logger.warning('Saved state is not a record, starting fresh')
        return CalculatorState()
    return _to_state(record)


def dumps(state):
    return _from_state(state).model_dump_json(by_alias=True)


def loads(text):
    try:
        record = StateRecord.model_validate_json(text)
    except ValidationError:
        logger.warning('Saved state is not valid JSON, starting fresh')
        return CalculatorState()
    return _to_state(record)
