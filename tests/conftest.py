from pytest import Item, fixture

from rpn12c.config import Settings
from rpn12c.keys import literal
from rpn12c.lexer import Lexer
from rpn12c.machine import Machine


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          # Get rid of full-diff, -vv for full diff, etc.
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def machine():
    '''
    Fresh machine with default separators, whatever the environment says.
    '''
    return Machine(settings=Settings(decimal_separator='.',
                                     group_separator=','))


@fixture
def press(machine):
    '''
    Key in a line as typed at the prompt, returning the machine's state.

    Non-string arguments are pasted as whole numbers.
    '''
    lexer = Lexer()

    def press(*lines):
        for line in lines:
            if not isinstance(line, str):
                machine.feed(literal(line))
                continue
            for match in lexer.lex(line):
                if lexer.isfeedable(match):
                    machine.press(*lexer.events(match))
        return machine.state
    return press
