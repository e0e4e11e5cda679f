'''
Keypad legend and the key events it produces.

Each key has its face label plus the f (orange) and g (blue) shifted
legends. The engine only ever sees KeyEvents; how a key press is
obtained is up to the front end.
'''

from enum import Enum
from typing import NamedTuple, Optional, Union


class Action(str, Enum):
    NUM = 'NUM'
    ENTER = 'ENTER'
    OP = 'OP'
    FIN = 'FIN'
    CLR = 'CLR'
    MOD = 'MOD'
    PWR = 'PWR'
    DOT = 'DOT'
    CHS = 'CHS'
    FUNC = 'FUNC'


class KeyEvent(NamedTuple):
    id: str
    action: Action
    value: Optional[Union[int, float, str]] = None


class Key(NamedTuple):
    id: str
    label: str
    f_label: str
    g_label: str
    action: Action
    value: Optional[Union[int, str]] = None

    def event(self):
        return KeyEvent(self.id, self.action, self.value)


KEYPAD = (
    (
        Key('n', 'n', 'AMORT', '12x', Action.FIN, 'n'),
        Key('i', 'i', 'INT', '12÷', Action.FIN, 'i'),
        Key('PV', 'PV', 'NPV', 'CFo', Action.FIN, 'PV'),
        Key('PMT', 'PMT', 'RND', 'CFj', Action.FIN, 'PMT'),
        Key('FV', 'FV', 'IRR', 'Nj', Action.FIN, 'FV'),
        Key('CHS', 'CHS', 'RPN', 'DATE', Action.CHS),
        Key('7', '7', 'ALG', 'BEG', Action.NUM, 7),
        Key('8', '8', '', 'END', Action.NUM, 8),
        Key('9', '9', '', 'MEM', Action.NUM, 9),
        Key('DIV', '÷', '', '', Action.OP, '/'),
    ),
    (
        Key('yx', 'y^x', 'PRICE', '√x', Action.FUNC, 'pow'),
        Key('inv', '1/x', 'YTM', 'e^x', Action.FUNC, 'inv'),
        Key('pctT', '%T', 'SL', 'LN', Action.FUNC, 'pctT'),
        Key('dPct', 'Δ%', 'SOYD', 'FRAC', Action.FUNC, 'dPct'),
        Key('pct', '%', 'DB', 'INTG', Action.FUNC, 'pct'),
        Key('EEX', 'EEX', 'ALG', 'ΔDYS', Action.FUNC, 'EEX'),
        Key('4', '4', '', 'D.MY', Action.NUM, 4),
        Key('5', '5', '', 'M.DY', Action.NUM, 5),
        Key('6', '6', '', 'x̄w', Action.NUM, 6),
        Key('MUL', '×', '', 'x²', Action.OP, '*'),
    ),
    (
        Key('RS', 'R/S', 'P/R', 'PSE', Action.FUNC, 'RS'),
        Key('SST', 'SST', 'CLEAR Σ', 'BST', Action.FUNC, 'SST'),
        Key('Rdn', 'R↓', 'PRGM', 'GTO', Action.FUNC, 'rdn'),
        Key('xy', 'x≷y', 'FIN', 'x≤y', Action.FUNC, 'swap'),
        Key('CLX', 'CLx', 'REG', 'x=0', Action.CLR),
        Key('ENTER', 'ENTER', 'PREFIX', '', Action.ENTER),
        Key('1', '1', '', 'x̂,r', Action.NUM, 1),
        Key('2', '2', '', 'ŷ,r', Action.NUM, 2),
        Key('3', '3', '', 'n!', Action.NUM, 3),
        Key('SUB', '-', '', '', Action.OP, '-'),
    ),
    (
        Key('ON', 'ON', 'OFF', '', Action.PWR),
        Key('f', 'f', '', '', Action.MOD, 'F'),
        Key('g', 'g', '', '', Action.MOD, 'G'),
        Key('STO', 'STO', '', '(', Action.FUNC, 'STO'),
        Key('RCL', 'RCL', '', ')', Action.FUNC, 'RCL'),
        Key('0', '0', '', 'x̄', Action.NUM, 0),
        Key('DOT', '.', '', 's', Action.DOT),
        Key('SIGMA', 'Σ+', '', 'Σ-', Action.FUNC, 'sigma'),
        Key('ADD', '+', '', 'LST x', Action.OP, '+'),
    ),
)

KEYS = {key.id: key for row in KEYPAD for key in row}

# Other names a key goes by: face labels plus plain-ASCII spellings.
ALIASES = {key.label: key.id for key in KEYS.values()}
ALIASES.update({
    '/': 'DIV',
    '*': 'MUL',
    'x': 'MUL',
    '^': 'yx',
    'Rv': 'Rdn',
    'RDN': 'Rdn',
    'x<>y': 'xy',
    'X<>Y': 'xy',
    'CLx': 'CLX',
    'S+': 'SIGMA',
    'SIGMA+': 'SIGMA',
    'OFF': 'ON',
})


def key(name):
    '''
    Event for a key, by id or any of its aliases.

    :raises KeyError: on a name that is no key.
    '''
    return KEYS[ALIASES.get(name, name)].event()


def literal(number):
    '''
    Event entering a whole number at once, as a paste would.
    '''
    return KeyEvent('PASTE', Action.NUM, str(number))
