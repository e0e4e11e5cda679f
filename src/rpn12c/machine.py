'''
The calculator engine: key events in, states out.

Every key is a pure transition from one CalculatorState to the next. The
active shift (none, f or g) picks the table a key is looked up in; a
pending STO/RCL sequence captures keys before any table does.
'''

import logging
import math
import threading

from . import bonds, cashflow, dates, depreciation, stats, tvm
from .cashflow import CashFlow
from .config import get_settings
from .keys import Action, KeyEvent
from .numeric import (FIX, factorial, format_display, fractional_part,
                      integer_part, raise_power, round_half_away)
from .record import from_record, to_record
from .state import (MAX_ENTRY, MEMORY_SIZE, STACK_DEPTH, CalculatorState,
                    DateFormat, DisplayFormat, Financial, Modifier, Snapshot)
from .util import CalculatorError, wrap_domain_errors


logger = logging.getLogger(__name__)

PASTE = 'PASTE'
DATE_DECIMALS = 6


class Machine:
    '''
    Financial RPN calculator (four-level stack machine).

    Holds the current state and replaces it on every fed key. ``transition``
    itself never mutates anything and never raises; domain failures become
    an error label on the returned state.
    '''

    def __init__(self, state=None, settings=None):
        '''
        Create a machine, switched on, from scratch or from a saved state.
        '''
        self.settings = settings or get_settings()
        self.state = state if state is not None else self.initial()
        self._lock = threading.Lock()

    def initial(self):
        return CalculatorState(display=self._format(0, 2, FIX))

    # --- lifecycle -------------------------------------------------------

    def feed(self, event):
        '''
        Process one key event, returning the new state.
        '''
        with self._lock:
            self.state = self.transition(self.state, event)
            return self.state

    def press(self, *events):
        for event in events:
            self.feed(event)
        return self.state

    def snapshot(self):
        return Snapshot.of(self.state)

    def dump(self):
        return to_record(self.state)

    def load(self, record):
        with self._lock:
            self.state = from_record(record)

    # --- display ---------------------------------------------------------

    def _format(self, value, decimals, mode):
        return format_display(value, decimals, mode,
                              decimal_sep=self.settings.decimal_separator,
                              group_sep=self.settings.group_separator)

    def _show(self, state, value):
        return self._format(value, state.decimals, state.display_format)

    def _show_entry(self, buffer):
        return buffer.replace('.', self.settings.decimal_separator) + '_'

    def _current_display(self, state):
        if state.input_buffer is not None:
            return self._show_entry(state.input_buffer)
        return self._show(state, state.stack[0])

    # --- stack helpers ---------------------------------------------------

    @staticmethod
    def _commit(state):
        '''
        Finish any number being typed: it becomes X.
        '''
        if state.input_buffer is None:
            return state
        return state.evolve(stack=(state.x,) + state.stack[1:],
                            input_buffer=None)

    def _result(self, state, stack, **changes):
        '''
        State showing a computed X, with stack lift enabled.
        '''
        changes.setdefault('stack_lift', True)
        return state.evolve(stack=tuple(stack),
                            display=self._show(state, stack[0]),
                            input_buffer=None,
                            **changes)

    def _push(self, state, value, **changes):
        s = state.stack
        return self._result(state, (value, s[0], s[1], s[2]), **changes)

    def _unary(self, state, value):
        '''
        Replace X with value, remembering the old X.
        '''
        s = state.stack
        return self._result(state, (value,) + s[1:], last_x=s[0])

    def _give(self, state, value, **changes):
        '''
        Result standing in for a live entry, or pushed on top of X.
        '''
        if state.input_buffer is not None:
            state = self._commit(state)
            return self._result(state, (value,) + state.stack[1:], **changes)
        return self._push(state, value, **changes)

    # --- dispatch --------------------------------------------------------

    def transition(self, state, event):
        '''
        Next state after a key. Pure: the given state is left as it is.
        '''
        event = KeyEvent(*event)
        action = Action(event.action)
        if action is Action.PWR:
            return self._power(state)
        if not state.power_on:
            return state
        logger.debug('key %s (%s) in %s', event.id, action.value,
                     state.pending_op or state.modifiers.value)
        state = state.evolve(error=None)
        if action is Action.MOD:
            return self._modifier(state, event)
        if state.pending_op is not None:
            return self._pending(state, event, action)
        if event.id == PASTE:
            return self._paste(state, event)
        handler = self._lookup(state.modifiers, event, action)
        try:
            if handler is not None:
                state = handler(self, state, event)
        except CalculatorError as e:
            logger.info('%s on key %s', e.label, event.id)
            return state.evolve(error=e.label, modifiers=Modifier.NONE)
        return state.evolve(modifiers=Modifier.NONE)

    def _lookup(self, modifier, event, action):
        if modifier is Modifier.F:
            return type(self).F_SHIFTED.get(event.id) or \
                type(self).F_ACTIONS.get(action)
        if modifier is Modifier.G:
            return type(self).G_SHIFTED.get(event.id)
        if action is Action.FUNC:
            return type(self).FUNCTIONS.get(event.value)
        return type(self).ACTIONS.get(action)

    def _power(self, state):
        if state.power_on:
            return state.evolve(power_on=False, display='',
                                modifiers=Modifier.NONE, pending_op=None)
        state = state.evolve(power_on=True)
        return state.evolve(display=self._current_display(state))

    def _modifier(self, state, event):
        pressed = Modifier(event.value)
        if state.modifiers is pressed:
            pressed = Modifier.NONE
        state = state.evolve(modifiers=pressed, pending_op=None)
        return state.evolve(display=self._current_display(state))

    def _paste(self, state, event):
        '''
        A whole number entered at once, replacing any entry in progress.
        '''
        text = str(event.value).strip().lower()[:MAX_ENTRY]
        try:
            usable = math.isfinite(float(text))
        except ValueError:
            usable = False
        if not usable:
            return state.evolve(modifiers=Modifier.NONE)
        if state.input_buffer is None:
            state = self._begin_entry(state)
        return state.evolve(input_buffer=text, display=self._show_entry(text),
                            modifiers=Modifier.NONE)

    # --- STO / RCL sequences ---------------------------------------------

    def _pending(self, state, event, action):
        pending = state.pending_op
        if action is Action.DOT:
            if '.' in pending:
                return state
            pending += '.'
            return state.evolve(pending_op=pending, display=pending + ' _')
        if action is Action.NUM and event.id != PASTE:
            digit = int(event.value)
            index = 10 + digit if '.' in pending else digit
            if pending.startswith('STO'):
                return self._store(state, pending, index)
            return self._recall(state, index)
        if action is Action.OP and pending == 'STO':
            pending += event.value
            return state.evolve(pending_op=pending,
                                display='STO {} _'.format(event.value))
        logger.debug('%s cancelled by %s', pending, event.id)
        state = state.evolve(pending_op=None)
        return state.evolve(display=self._current_display(state))

    def _store(self, state, pending, index):
        state = self._commit(state)
        x = state.stack[0]
        memory = list(state.memory)
        operator = pending[3:].rstrip('.')
        if operator == '+':
            memory[index] += x
        elif operator == '-':
            memory[index] -= x
        elif operator == '*':
            memory[index] *= x
        elif operator == '/':
            if x != 0:
                memory[index] /= x
        else:
            memory[index] = x
        return self._result(state, state.stack, memory=tuple(memory),
                            pending_op=None, modifiers=Modifier.NONE)

    def _recall(self, state, index):
        state = self._commit(state)
        return self._push(state, state.memory[index],
                          pending_op=None, modifiers=Modifier.NONE)

    # --- entry -----------------------------------------------------------

    def _begin_entry(self, state):
        '''
        Make room for a new number, lifting the stack unless disabled.
        '''
        if state.stack_lift:
            s = state.stack
            state = state.evolve(stack=(s[0], s[0], s[1], s[2]))
        return state.evolve(input_buffer='', stack_lift=True)

    def _type(self, state, char):
        if state.input_buffer is None:
            state = self._begin_entry(state)
        buffer = state.input_buffer
        if len(buffer) >= MAX_ENTRY:
            return state
        if char == '.' and ('.' in buffer or 'e' in buffer):
            return state
        buffer += char
        return state.evolve(input_buffer=buffer,
                            display=self._show_entry(buffer))

    def digit(self, state, event):
        return self._type(state, str(int(event.value)))

    def dot(self, state, event):
        return self._type(state, '.')

    def exponent(self, state, event):
        if state.input_buffer is None:
            state = self._begin_entry(state).evolve(input_buffer='1')
        buffer = state.input_buffer
        if 'e' in buffer or len(buffer) >= MAX_ENTRY:
            return state
        buffer = (buffer or '1') + 'e'
        return state.evolve(input_buffer=buffer,
                            display=self._show_entry(buffer))

    def change_sign(self, state, event):
        buffer = state.input_buffer
        if buffer is None:
            s = state.stack
            return state.evolve(stack=(-s[0],) + s[1:],
                                display=self._show(state, -s[0]))
        mantissa, e, power = buffer.partition('e')
        if e:
            power = power[1:] if power.startswith('-') else '-' + power
        else:
            mantissa = mantissa[1:] if mantissa.startswith('-') else '-' + mantissa
        flipped = mantissa + e + power
        if len(flipped) > MAX_ENTRY:
            return state
        return state.evolve(input_buffer=flipped,
                            display=self._show_entry(flipped))

    def enter(self, state, event):
        state = self._commit(state)
        s = state.stack
        return self._result(state, (s[0], s[0], s[1], s[2]), stack_lift=False)

    def clear_x(self, state, event):
        '''
        Blank the display for a fresh X; the stack itself is left alone.
        '''
        return state.evolve(input_buffer=None, stack_lift=False,
                            display=self._show(state, 0))

    # --- stack arithmetic ------------------------------------------------

    def arithmetic(self, state, event):
        state = self._commit(state)
        x, y, z, t = state.stack
        op = event.value
        if op == '+':
            result = y + x
        elif op == '-':
            result = y - x
        elif op == '*':
            result = y * x
        else:
            # Division by zero gives zero, not an error.
            result = y / x if x != 0 else 0.0
        return self._result(state, (result, z, t, t), last_x=x)

    @wrap_domain_errors('Error 0')
    def power(self, state, event):
        state = self._commit(state)
        x, y, z, t = state.stack
        return self._result(state, (raise_power(y, x), z, t, t), last_x=x)

    def reciprocal(self, state, event):
        state = self._commit(state)
        if state.stack[0] == 0:
            raise CalculatorError('Error 0')
        return self._unary(state, 1 / state.stack[0])

    def _percent(self, state, formula, needs_base):
        state = self._commit(state)
        x, y = state.stack[:2]
        if needs_base and y == 0:
            raise CalculatorError('Error 0')
        return self._result(state, (formula(x, y),) + state.stack[1:],
                            last_x=x)

    def percent_total(self, state, event):
        return self._percent(state, lambda x, y: x / y * 100, True)

    def percent_change(self, state, event):
        return self._percent(state, lambda x, y: (x - y) / y * 100, True)

    def percent(self, state, event):
        return self._percent(state, lambda x, y: y * x / 100, False)

    def roll_down(self, state, event):
        state = self._commit(state)
        x, y, z, t = state.stack
        return self._result(state, (y, z, t, x))

    def swap(self, state, event):
        state = self._commit(state)
        x, y, z, t = state.stack
        return self._result(state, (y, x, z, t))

    def store_recall(self, state, event):
        return state.evolve(pending_op=event.value,
                            display='{} _'.format(event.value))

    def sigma_plus(self, state, event):
        return self._accumulate(state, state.stats.add)

    def sigma_minus(self, state, event):
        return self._accumulate(state, state.stats.remove)

    def _accumulate(self, state, accumulate):
        state = self._commit(state)
        x, y, z, t = state.stack
        updated = accumulate(x, y)
        return state.evolve(stats=updated,
                            stack=(float(updated.n), x, y, z),
                            last_x=x,
                            stack_lift=False,
                            display=self._format(updated.n, 0, FIX))

    # --- financial registers ---------------------------------------------

    def financial(self, state, event):
        '''
        Store a typed value in a TVM register, or solve for that register.
        '''
        register = tvm.TVMRegister(event.value)
        if state.input_buffer is not None:
            state = self._commit(state)
            value = state.stack[0]
            return self._result(state, state.stack,
                                financial=state.financial.set(register, value))
        fin = state.financial
        solved = tvm.solve_tvm(fin.n, fin.i, fin.PV, fin.PMT, fin.FV,
                               state.beg_mode, register)
        return self._push(state, solved,
                          financial=fin.set(register, solved))

    # --- f shifted -------------------------------------------------------

    def clear_registers(self, state, event):
        return state.evolve(stack=(0.0,) * STACK_DEPTH,
                            financial=Financial(),
                            stats=stats.Stats(),
                            memory=(0.0,) * MEMORY_SIZE,
                            cash_flows=(),
                            last_x=0.0,
                            input_buffer=None,
                            stack_lift=True,
                            display=self._show(state, 0))

    def clear_statistics(self, state, event):
        state = self._commit(state)
        return state.evolve(stats=stats.Stats(), display=self._show(state, 0))

    def clear_financial(self, state, event):
        state = self._commit(state)
        return state.evolve(financial=Financial(),
                            display=self._show(state, state.stack[0]))

    def fix(self, state, event):
        state = self._commit(state).evolve(decimals=int(event.value),
                                           display_format=DisplayFormat.FIX)
        return state.evolve(display=self._show(state, state.stack[0]))

    def scientific(self, state, event):
        state = self._commit(state).evolve(display_format=DisplayFormat.SCI)
        return state.evolve(display=self._show(state, state.stack[0]))

    def amortization(self, state, event):
        state = self._commit(state)
        periods = state.stack[0]
        fin = state.financial
        interest, principal, balance = tvm.amortize(periods, fin.i, fin.PV,
                                                    fin.PMT)
        fin = fin.set('n', fin.n + periods).set('PV', balance)
        return self._result(state,
                            (balance, principal, interest, state.stack[3]),
                            financial=fin)

    def simple_interest(self, state, event):
        state = self._commit(state)
        fin = state.financial
        return self._push(state, tvm.simple_interest(fin.n, fin.i, fin.PV))

    def net_present_value(self, state, event):
        state = self._commit(state)
        return self._push(state, cashflow.npv(state.financial.i,
                                              state.cash_flows))

    def round_x(self, state, event):
        state = self._commit(state)
        rounded = round_half_away(state.stack[0], state.decimals)
        return self._result(state, (rounded,) + state.stack[1:])

    def internal_rate(self, state, event):
        state = self._commit(state)
        return self._push(state, cashflow.irr(state.cash_flows))

    def _bond_dates(self, state):
        fmt = state.date_format.value
        return (dates.decode_date(state.stack[1], fmt),
                dates.decode_date(state.stack[0], fmt))

    def price(self, state, event):
        state = self._commit(state)
        settlement, maturity = self._bond_dates(state)
        fin = state.financial
        return self._push(state, bonds.bond_price(settlement, maturity,
                                                  fin.PMT, fin.i))

    def yield_to_maturity(self, state, event):
        state = self._commit(state)
        settlement, maturity = self._bond_dates(state)
        fin = state.financial
        return self._push(state, bonds.bond_yield(settlement, maturity,
                                                  fin.PMT, fin.PV))

    @wrap_domain_errors('Error 5')
    def _depreciate(self, state, schedule, *extra):
        state = self._commit(state)
        fin = state.financial
        charge, book = schedule(state.stack[0], fin.PV, fin.FV, fin.n, *extra)
        return self._result(state, (charge, book) + state.stack[2:])

    def straight_line(self, state, event):
        return self._depreciate(state, depreciation.straight_line)

    def sum_of_years(self, state, event):
        return self._depreciate(state, depreciation.sum_of_years)

    def declining_balance(self, state, event):
        return self._depreciate(state, depreciation.declining_balance,
                                state.financial.i)

    # --- g shifted -------------------------------------------------------

    def day_month_year(self, state, event):
        return self._commit(state).evolve(date_format=DateFormat.DMY)

    def month_day_year(self, state, event):
        return self._commit(state).evolve(date_format=DateFormat.MDY)

    def begin(self, state, event):
        return self._commit(state).evolve(beg_mode=True)

    def end(self, state, event):
        return self._commit(state).evolve(beg_mode=False)

    def mean(self, state, event):
        state = self._commit(state)
        x = state.stack[0]
        mean_x, mean_y = stats.mean(state.stats)
        return self._result(state, (mean_x, mean_y) + state.stack[1:3],
                            last_x=x)

    def standard_deviation(self, state, event):
        state = self._commit(state)
        x = state.stack[0]
        sd_x, _ = stats.std_dev(state.stats)
        mean_x, _ = stats.mean(state.stats)
        return self._result(state, (sd_x, mean_x) + state.stack[1:3],
                            last_x=x)

    def _estimate(self, state, estimator):
        state = self._commit(state)
        x, y, z, t = state.stack
        estimate, r = estimator(state.stats, x)
        return self._result(state, (estimate, r, y, z), last_x=x)

    def estimate_x(self, state, event):
        return self._estimate(state, stats.estimate_x)

    def estimate_y(self, state, event):
        return self._estimate(state, stats.estimate_y)

    def weighted_mean(self, state, event):
        state = self._commit(state)
        return self._push(state, stats.weighted_mean(state.stats),
                          last_x=state.stack[0])

    def date_plus_days(self, state, event):
        state = self._commit(state)
        x, y, z, t = state.stack
        fmt = state.date_format.value
        shifted = dates.add_days(dates.decode_date(y, fmt), x)
        encoded = dates.encode_date(shifted, fmt)
        weekday = dates.day_of_week(shifted)
        state = self._result(state, (encoded, float(weekday), z, t), last_x=x)
        return state.evolve(display='{} {}'.format(
            self._format(encoded, DATE_DECIMALS, FIX), weekday))

    def delta_days(self, state, event):
        state = self._commit(state)
        x, y, z, t = state.stack
        fmt = state.date_format.value
        start, end = dates.decode_date(y, fmt), dates.decode_date(x, fmt)
        return self._result(state,
                            (float(dates.days_between(start, end)),
                             float(dates.days_between_360(start, end)), z, t),
                            last_x=x)

    def _periodic(self, state, register, value):
        return self._give(state, value,
                          financial=state.financial.set(register, value))

    def twelve_times(self, state, event):
        return self._periodic(state, 'n', state.x * 12)

    def twelve_divide(self, state, event):
        return self._periodic(state, 'i', state.x / 12)

    def cash_flow_zero(self, state, event):
        x = state.x
        return self._give(state, x, cash_flows=(CashFlow(x),),
                          financial=state.financial.set('PV', x))

    def cash_flow_j(self, state, event):
        flows = state.cash_flows + (CashFlow(state.x),)
        index = len(flows) - 1
        state = self._give(state, float(index), cash_flows=flows)
        return state.evolve(display=self._format(index, 0, FIX))

    @wrap_domain_errors('Error 0')
    def cash_flow_count(self, state, event):
        state = self._commit(state)
        if not state.cash_flows:
            return state
        last = state.cash_flows[-1].with_count(state.stack[0])
        state = self._result(state, state.stack,
                             cash_flows=state.cash_flows[:-1] + (last,))
        return state.evolve(display=self._format(last.count, 0, FIX))

    @wrap_domain_errors('Error 0')
    def square_root(self, state, event):
        state = self._commit(state)
        return self._unary(state, math.sqrt(state.stack[0]))

    @wrap_domain_errors('Error 0')
    def exponential(self, state, event):
        state = self._commit(state)
        return self._unary(state, math.exp(state.stack[0]))

    @wrap_domain_errors('Error 0')
    def natural_log(self, state, event):
        state = self._commit(state)
        return self._unary(state, math.log(state.stack[0]))

    @wrap_domain_errors('Error 0')
    def fraction(self, state, event):
        state = self._commit(state)
        return self._unary(state, fractional_part(state.stack[0]))

    @wrap_domain_errors('Error 0')
    def integer(self, state, event):
        state = self._commit(state)
        return self._unary(state, integer_part(state.stack[0]))

    def square(self, state, event):
        state = self._commit(state)
        return self._unary(state, state.stack[0] * state.stack[0])

    @wrap_domain_errors('Error 0')
    def factorial(self, state, event):
        state = self._commit(state)
        return self._unary(state, factorial(state.stack[0]))

    def last_x(self, state, event):
        state = self._commit(state)
        return self._push(state, state.last_x)

    # Unshifted keys, by action.
    ACTIONS = {
        Action.NUM: digit,
        Action.DOT: dot,
        Action.ENTER: enter,
        Action.OP: arithmetic,
        Action.FIN: financial,
        Action.CHS: change_sign,
        Action.CLR: clear_x,
    }

    # Unshifted function keys, by value.
    FUNCTIONS = {
        'pow': power,
        'inv': reciprocal,
        'pctT': percent_total,
        'dPct': percent_change,
        'pct': percent,
        'EEX': exponent,
        'rdn': roll_down,
        'swap': swap,
        'STO': store_recall,
        'RCL': store_recall,
        'sigma': sigma_plus,
    }

    # Orange legends, by key id; any digit sets FIX, the point SCI.
    F_SHIFTED = {
        'CLX': clear_registers,
        'SST': clear_statistics,
        'xy': clear_financial,
        'n': amortization,
        'i': simple_interest,
        'PV': net_present_value,
        'PMT': round_x,
        'FV': internal_rate,
        'yx': price,
        'inv': yield_to_maturity,
        'pctT': straight_line,
        'dPct': sum_of_years,
        'pct': declining_balance,
    }
    F_ACTIONS = {
        Action.NUM: fix,
        Action.DOT: scientific,
    }

    # Blue legends, by key id.
    G_SHIFTED = {
        '4': day_month_year,
        '5': month_day_year,
        '7': begin,
        '8': end,
        '0': mean,
        'DOT': standard_deviation,
        '1': estimate_x,
        '2': estimate_y,
        '6': weighted_mean,
        'SIGMA': sigma_minus,
        'CHS': date_plus_days,
        'EEX': delta_days,
        'n': twelve_times,
        'i': twelve_divide,
        'PV': cash_flow_zero,
        'PMT': cash_flow_j,
        'FV': cash_flow_count,
        'yx': square_root,
        'inv': exponential,
        'pctT': natural_log,
        'dPct': fraction,
        'pct': integer,
        'MUL': square,
        '3': factorial,
        'ADD': last_x,
    }


def transition(state, event, settings=None):
    '''
    Pure (state, event) -> state, without keeping a machine around.
    '''
    return Machine(state, settings).transition(state, event)
