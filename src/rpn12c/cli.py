import logging
from os import isatty, path
import sys
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL

from prompt_toolkit import PromptSession

from .config import get_settings
from .lexer import Lexer
from .machine import Machine
from .record import dumps, loads
from .util import LexError


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt, machine):
        self.prompt = prompt
        self.machine = machine

    def toolbar(self):
        '''
        Annunciators and the stack, under the prompt.
        '''
        snapshot = self.machine.snapshot()
        stack = '  '.join('{}: {:g}'.format(name, value)
                          for name, value
                          in reversed(list(zip('XYZT', snapshot.stack))))
        return ' '.join(snapshot.annunciators + [stack])

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=None,
                                    rprompt=None,
                                    bottom_toolbar=self.toolbar,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the financial calculator.

    Every line read is a sequence of keys; the display is printed once the
    whole line has been keyed in.
    '''

    def dumper(self):
        '''
        Dump all lexemes matches and the keys they press.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(repr)>\t<keys>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                matched = match.group(0)  # the lexeme text itself
                groups = lexer.matchedgroups(match)
                print(*groups.keys(),
                      repr(matched),
                      ' '.join(event.id for event in lexer.events(match)),
                      sep='\t')

    def executor(self):
        '''
        Run machine (financial calculator).
        '''
        lexer = Lexer()
        for line in self.args.expressions:
            try:
                for match in lexer.lex(line):
                    if lexer.isfeedable(match):
                        self.machine.press(*lexer.events(match))
            # Abort entire rest of line, makes sense anyway
            except LexError as e:
                print(e.args[0], file=sys.stderr)
                continue
            text = self.machine.snapshot().text
            if text:
                print(text)
        self._save()

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.settings.prompt,
                                    machine=self.machine)
        else:
            return stdin

    def _state_file(self):
        if self.args.state is not None:
            return path.expanduser(self.args.state)
        return path.expanduser(self.settings.state_file)

    def _load(self):
        '''
        Machine resumed from the state file, if there is one to resume.
        '''
        if self.args.fresh:
            return Machine(settings=self.settings)
        filename = self._state_file()
        try:
            with open(filename) as f:
                state = loads(f.read())
        except FileNotFoundError:
            return Machine(settings=self.settings)
        except OSError as e:
            logger.warning("Couldn't read %s: %s", filename, e)
            return Machine(settings=self.settings)
        logger.info('Resumed from %s', filename)
        return Machine(state, settings=self.settings)

    def _save(self):
        if self.args.no_save:
            return
        filename = self._state_file()
        try:
            with open(filename, 'w') as f:
                f.write(dumps(self.machine.state))
        except OSError as e:
            logger.warning("Couldn't save %s: %s", filename, e)

    def __init__(self, settings=None):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.settings = settings or get_settings()
        self.argument_parser = ArgumentParser(
            description='HP-12C style financial RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('--state', metavar='FILE',
                                          help='state file to resume from '
                                               'and save to')
        self.argument_parser.add_argument('--fresh', action='store_true',
                                          help="don't resume saved state")
        self.argument_parser.add_argument('--no-save', action='store_true',
                                          help="don't save state on exit")
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.settings.prompt)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else self.settings.log_level.upper(),
                            format='%(levelname)s %(name)s: %(message)s')
        self.machine = self._load()
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        else:
            # One line of keys, however the shell split it.
            self.args.expressions = [' '.join(self.args.expressions)]
        try:
            self.args.action()
        except KeyboardInterrupt:
            self._save()
            exit(1)
