'''
Calculator lexer tests
'''

from pytest import fixture

from rca.lexer import Lexer, TokenKind
from rca.locales import Locale
from rca.machine import Machine


@fixture
def lexer(modes):
    return Lexer(Machine.OPERATORS, modes)


def kinds(tokens):
    return [token.kind for token in tokens]


def test_bases(lexer):
    for text, value, base in [('0x1f', 31, 16),
                              ('0X1F', 31, 16),
                              ('0b101', 5, 2),
                              ('017', 15, 8),
                              ('0o17', 15, 8),
                              ('42', 42, 10),
                              ('0', 0, 10),
                              ('08', 8, 10),
                              ('1.5e3', 1500, 10),
                              ('.5', 0.5, 10)]:
        token, position = lexer.parse_token(text, 0)
        assert token.kind is TokenKind.NUMERIC
        assert token.value == value
        assert token.base == base
        assert position == len(text)


def test_signs(lexer):
    tokens = list(lexer.lex('1 2 -3 +4'))
    assert kinds(tokens) == [TokenKind.NUMERIC] * 4 + [TokenKind.EOL]
    assert [token.value for token in tokens[:-1]] == [1, 2, -3, 4]


def test_lone_sign_is_operator(lexer):
    tokens = list(lexer.lex('1 2 - 3 +'))
    assert kinds(tokens) == [TokenKind.NUMERIC,
                             TokenKind.NUMERIC,
                             TokenKind.OPERATOR,
                             TokenKind.NUMERIC,
                             TokenKind.OPERATOR,
                             TokenKind.EOL]
    assert tokens[2].operator.name == '-'


def test_sign_glued_to_junk(lexer):
    tokens = list(lexer.lex('1 -x 2'))
    assert kinds(tokens) == [TokenKind.NUMERIC, TokenKind.UNKNOWN]
    assert tokens[1].value == '-x 2'


def test_no_sign_in_infix(lexer):
    tokens = list(lexer.lex('2-3', rpn=False))
    assert kinds(tokens) == [TokenKind.NUMERIC,
                             TokenKind.OPERATOR,
                             TokenKind.NUMERIC,
                             TokenKind.EOL]
    assert tokens[2].value == 3


def test_names(lexer):
    tokens = list(lexer.lex('sqrt pi s1 _foo >= ** r1'))
    assert kinds(tokens) == [TokenKind.OPERATOR,
                             TokenKind.SYMBOLIC,
                             TokenKind.STORAGE,
                             TokenKind.VARIABLE,
                             TokenKind.OPERATOR,
                             TokenKind.OPERATOR,
                             TokenKind.SYMBOLIC,
                             TokenKind.EOL]
    assert tokens[3].value == '_foo'
    assert tokens[4].operator.name == '>='
    assert tokens[5].operator.name == '**'


def test_unknown_name(lexer):
    tokens = list(lexer.lex('1 frobnicate 2'))
    assert kinds(tokens) == [TokenKind.NUMERIC, TokenKind.UNKNOWN]
    assert tokens[1].value == 'frobnicate 2'


def test_illegal_character(lexer):
    tokens = list(lexer.lex('1 é'))
    assert tokens[-1].kind is TokenKind.UNKNOWN


def test_raw_hex_needs_raw_output_first(lexer, modes):
    token, position = lexer.parse_token('0x1.8p+1', 0)
    assert token.value == 1
    assert position == 3
    modes.raw_hex_input_ok = True
    token, position = lexer.parse_token('0x1.8p+1', 0)
    assert token.value == 3
    assert token.raw
    assert position == len('0x1.8p+1')


def test_locale_decimal_point(modes):
    lexer = Lexer(Machine.OPERATORS, modes, Locale(decimal_point=','))
    token, _ = lexer.parse_token('1,5', 0)
    assert token.value == 1.5


def test_describe(lexer):
    tokens = list(lexer.lex('2.5 + _x'))
    assert [token.describe() for token in tokens] == ["'2.5'",
                                                      "'+'",
                                                      "'_x'",
                                                      "'EOL'"]
