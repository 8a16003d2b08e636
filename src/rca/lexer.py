from enum import Enum
from functools import reduce
from typing import Any, NamedTuple, Optional
import logging
import operator
import string

import regex

from .locales import DEFAULT as DEFAULT_LOCALE
from .registry import Kind


log = logging.getLogger(__name__)


class TokenKind(Enum):
    NUMERIC = 'numeric'
    # Operand-like operators: constants, registers, lastx.
    SYMBOLIC = 'symbolic'
    OPERATOR = 'operator'
    # Assignable storage locations (s1).
    STORAGE = 'storage'
    VARIABLE = 'variable'
    EOL = 'EOL'
    UNKNOWN = 'unknown'


class Token(NamedTuple):
    kind: TokenKind
    # float for numbers, Operator for operators, str otherwise.
    value: Any = None
    # The base a number was entered in.
    base: Optional[int] = None
    # Exact (floating hex) entry, not to be rounded.
    raw: bool = False

    @property
    def operator(self):
        '''
        The Operator, for operator-like tokens, else None.
        '''
        if self.kind in (TokenKind.OPERATOR,
                         TokenKind.SYMBOLIC,
                         TokenKind.STORAGE):
            return self.value
        return None

    def describe(self, precision=15):
        '''
        Quoted text for messages.
        '''
        if self.kind is TokenKind.NUMERIC:
            return "'%.*g'" % (precision, self.value)
        elif self.operator is not None:
            return "'{}'".format(self.value.name)
        elif self.kind is TokenKind.EOL:
            return "'EOL'"
        return "'{}'".format(self.value)


EOL = Token(TokenKind.EOL)

_KINDS = {
    Kind.SYMBOLIC: TokenKind.SYMBOLIC,
    Kind.STORAGE: TokenKind.STORAGE,
}


class Lexer:
    '''
    Tokenizer for calculator input, one token at a time.

    Needs the operator registry for names, the numeric modes to know whether
    floating hex input is allowed, and the locale for the decimal point.
    '''
    # Hex integer, 0x7f
    HEX = r'''
           0[xX][0-9a-fA-F]+
           '''
    # Floating hex, 0xc.90fdaa22168c23cp-2, only once it's been displayed
    RAW_HEX = r'''
               0[xX]
               (?:
                   [0-9a-fA-F]+
                   (?:
                       \.
                       [0-9a-fA-F]*
                   )?
                   |
                   \.
                   [0-9a-fA-F]+
               )
               (?:
                   [pP][+-]?\d+
               )?
               '''
    BINARY = r'''
              0[bB][01]+
              '''
    # 0o17, or C-style 017
    OCTAL = r'''
             0[oO][0-7]+
             |
             0[0-7]+
             '''
    # 1, 1.5, 1., .5, 1e5, 1.5e-5; with the locale's decimal point
    DECIMAL = r'''
               (?:
                   \d+
                   (?:
                       {DP}
                       \d*
                   )?
                   |
                   {DP}
                   \d+
               )
               (?:
                   [eE][+-]?\d+
               )?
               '''
    # Order matters: first alternative wins.
    NUMBER = r'''
              (?<hex>{HEX})
              |
              (?<binary>{BINARY})
              |
              (?<octal>{OCTAL})
              |
              (?<decimal>{DECIMAL})
              '''
    VARIABLE = r'_[A-Za-z0-9][A-Za-z0-9_]*'
    NAME = r'[A-Za-z][A-Za-z0-9_]*'
    # Parser hack: hard-coded list of double punctuation operators
    DOUBLE_PUNCTUATION = ('>>', '<<', '>=', '<=', '==', '!=', '&&', '||',
                          '**')
    BASES = {
        'hex': 16,
        'binary': 2,
        'octal': 8,
        'decimal': 10,
    }
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def __init__(self, registry, modes, locale=DEFAULT_LOCALE):
        self.registry = registry
        self.modes = modes
        self.locale = locale
        cls = type(self)
        decimal = cls.DECIMAL.format(DP=regex.escape(locale.decimal_point))
        self.grammar = cls.NUMBER.format(HEX=cls.HEX,
                                         BINARY=cls.BINARY,
                                         OCTAL=cls.OCTAL,
                                         DECIMAL=decimal)
        self.raw_grammar = cls.NUMBER.format(HEX=cls.RAW_HEX,
                                             BINARY=cls.BINARY,
                                             OCTAL=cls.OCTAL,
                                             DECIMAL=decimal)
        self._number = regex.compile(self.grammar, flags=cls.FLAGS)
        self._raw_number = regex.compile(self.raw_grammar, flags=cls.FLAGS)
        self._variable = regex.compile(cls.VARIABLE)
        self._name = regex.compile(cls.NAME)
        self._space = regex.compile(r'\s*')

    def parse_token(self, line, position, rpn=True):
        '''
        Return the token at position in line, and the position after it.

        In RPN context, a leading + or - belongs to a following number. In
        infix expressions it never does; the translator decides.
        '''
        position = self._space.match(line, position).end()
        if position >= len(line):
            return EOL, position
        start = position
        sign = 1.0
        c = line[position]

        if rpn and c in '+-':
            # We want "1 2 -3" to push 1, 2, and -3, not (1-2) and 3.
            following = line[position + 1:position + 2]
            if (following.isdigit() or
                    line.startswith(self.locale.decimal_point,
                                    position + 1)):
                sign = -1.0 if c == '-' else 1.0
                position += 1
            elif following and not following.isspace():
                return self._unknown(line, start)

        if (line[position].isdigit() or
                line.startswith(self.locale.decimal_point, position)):
            return self._parse_number(line, position, start, sign)

        match = self._variable.match(line, position)
        if match:
            return (self._trace(Token(TokenKind.VARIABLE, match.group(0))),
                    match.end())

        if line[position] in string.ascii_letters:
            name = self._name.match(line, position).group(0)
        elif line[position] in string.punctuation:
            name = line[position:position + 2]
            if name not in type(self).DOUBLE_PUNCTUATION:
                name = line[position]
        else:
            log.info('illegal character in input: %r', line[position])
            return self._unknown(line, start)

        found = self.registry.lookup(name)
        if found is None:
            return self._unknown(line, start)
        kind = _KINDS.get(found.kind, TokenKind.OPERATOR)
        return self._trace(Token(kind, found)), position + len(name)

    def _parse_number(self, line, position, start, sign):
        pattern = (self._raw_number
                   if self.modes.raw_hex_input_ok
                   else self._number)
        match = pattern.match(line, position)
        if match is None:
            return self._unknown(line, start)
        which = match.lastgroup
        text = match.group(0)
        base = type(self).BASES[which]
        raw = False
        try:
            if which == 'decimal':
                value = float(text.replace(self.locale.decimal_point, '.'))
            elif which == 'hex' and regex.search(r'[.pP]', text):
                value = float.fromhex(text)
                raw = True
            else:
                digits = text[2:] if text[1:2].isalpha() else text
                value = float(int(digits, base))
        except OverflowError:
            return self._unknown(line, start)
        token = Token(TokenKind.NUMERIC, sign * value, base, raw)
        return self._trace(token), match.end()

    def _unknown(self, line, start):
        return (self._trace(Token(TokenKind.UNKNOWN, line[start:].strip())),
                len(line))

    def _trace(self, token):
        log.info('token %s %s', token.kind.value, token.describe())
        return token

    def lex(self, line, rpn=True):
        '''
        Yield all tokens of a line, up to and including EOL or the first
        unknown token.
        '''
        position = 0
        while True:
            token, position = self.parse_token(line, position, rpn)
            yield token
            if token.kind in (TokenKind.EOL, TokenKind.UNKNOWN):
                return
