from functools import reduce
import operator

import regex

from .keys import ALIASES, KEYS, key
from .util import LexError


class Lexer:
    '''
    Lexer for typed key sequences, e.g. ``1000 ENTER 12 *`` or ``f n``.

    Numbers are spelled out as the digit, point, CHS and EEX keys a person
    would press. Everything else is a key id or one of its aliases.

    For consistency, for now, needs to be instantiated, despite holding no
    internal state.
    '''
    # Integral part of a number
    INTEGRAL = r'''
                # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
                (?:
                    # 1, 12, or the 1 in 1_200.
                    \d{1,3}
                    (?:
                        # The 4, 45, etc. in 1234, 12345, etc.
                        \d
                        |
                        # Support not just digits, but thousands separators
                        (?:
                            _\d{3}
                        )
                    )*
                )
                '''
    # Fractional part of a number
    FRACTIONAL = r'''
                  # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
                  (?:
                      \d+
                  )
                  '''
    # Power of ten, as keyed in after EEX
    EXPONENT = r'''
                (?:
                    e
                    -?
                    \d{1,2}
                )
                '''
    # Number, of any kind supported by grammar.
    # String formatting and regex is a tricky business, because of the braces.
    # It works here. Be careful in general!
    NUMBER = r'''
              -?
              (?:
                  (?:
                      # 1, 12, 1_200, 1_200. (notice trailing dot), 1.3
                      {INTEGRAL}
                      (?:
                          \.
                          {FRACTIONAL}?
                      )?
                  )|(?:
                      # .2, 0.2
                      {INTEGRAL}?
                      \.
                      {FRACTIONAL}
                  )
              )
              {EXPONENT}?
              '''.format(INTEGRAL=INTEGRAL, FRACTIONAL=FRACTIONAL,
                         EXPONENT=EXPONENT)

    # Digits are numbers; every other key name, longest first.
    NAMES = sorted({name
                    for name
                    in set(KEYS) | set(ALIASES)
                    if not name.isdigit()},
                   key=lambda name: (-len(name), name))
    KEY = r'(?:' + r'|'.join(map(regex.escape, NAMES)) + r')'
    SPACE = r'\s+'

    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<key>' + KEY + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Raises on the first bit of the line that is no lexeme, after having
        yielded everything before it.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise LexError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme can be fed to machine.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Yield lexeme matches.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}

    def events(self, match):
        '''
        Key events a lexeme stands for.
        '''
        groups = self.matchedgroups(match)
        if 'key' in groups:
            return [key(groups['key'])]
        if 'number' in groups:
            return self._keystrokes(groups['number'])
        return []

    def _keystrokes(self, number):
        mantissa, e, power = number.replace('_', '').partition('e')
        strokes = [key('DOT') if char == '.' else key(char)
                   for char in mantissa.lstrip('-')]
        if mantissa.startswith('-'):
            strokes.append(key('CHS'))
        if e:
            strokes.append(key('EEX'))
            strokes.extend(key(char) for char in power.lstrip('-'))
            if power.startswith('-'):
                strokes.append(key('CHS'))
        return strokes
