'''
Numeric mode tests: widths, snapping, and formats
'''

import math

from rca.locales import Locale
from rca.modes import NumericMode, group, round_half_away


def test_epsilon(modes):
    assert modes.epsilon == 2.0 ** -52
    assert modes.max_precision == 15
    assert modes.max_int_width == 53


def test_width_clamped(modes):
    assert modes.set_width(0) == 53
    assert modes.set_width(100) == 53
    assert modes.set_width(1) == 2
    assert modes.set_width(8) == 8
    assert modes.int_mask == 0xff
    assert modes.int_sign_bit == 0x80


def test_sign_extend(modes):
    modes.set_width(8)
    assert modes.sign_extend(255) == -1
    assert modes.sign_extend(127) == 127
    assert modes.sign_extend(256) == 0


def test_truncate(modes):
    modes.set_width(8)
    assert modes.truncate(300.0) == (44.0, True)
    assert modes.truncate(-1.0) == (-1.0, False)
    assert modes.truncate(math.inf) == (-128.0, True)


def test_tweak(modes):
    assert modes.tweak(0.1 + 0.2) == 0.3
    assert modes.tweak(2.9999999999999996) == 3.0
    assert modes.tweak(math.inf) == math.inf
    modes.rounding = False
    assert modes.tweak(0.1 + 0.2) != 0.3


def test_round_half_away():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4) == 2


def test_group():
    assert group('1234567', 3, ',') == '1,234,567'
    assert group('123', 3, ',') == '123'
    assert group('deadbeef', 4, '_') == 'dead_beef'
    assert group('1234567', 3, '') == '1234567'


def test_integer_formats(modes):
    assert modes.format(255.0, 'H') == (' 0xff', 255.0, False)
    assert modes.format(8.0, 'O') == (' 010', 8.0, False)
    assert modes.format(-2.0, 'D') == (' -2', -2.0, False)
    text, converted, changed = modes.format(3.5, 'D')
    assert (text, converted, changed) == (' 3', 3.0, True)


def test_unsigned(modes):
    modes.mode = 'U'
    modes.set_width(16)
    assert modes.format(-1.0)[0] == ' 65535'


def test_binary_width(modes):
    modes.mode = 'B'
    modes.set_width(4)
    assert modes.format(5.0)[0] == ' 0b0101'


def test_float_formats(modes):
    assert modes.format(3.7) == (' 3.7', 3.7, False)
    assert modes.format(1e20)[0] == ' 1e+20'
    assert modes.format(math.nan)[0] == ' nan'
    modes.float_style = 'f'
    modes.float_digits = 3
    assert modes.format(2.0 / 3.0)[0] == ' 0.667'


def test_float_decimals_capped_by_precision(modes):
    modes.float_style = 'f'
    modes.float_digits = 10
    # Only 15 significant digits to go around.
    assert modes.format(123456789.123)[0] == ' 123456789.123000'


def test_engineering(modes):
    assert modes.engineering(12345.0) == '12.3450e+03'
    assert modes.engineering(0.001) == '1.00000e-03'
    assert modes.engineering(-123456.0) == '-123.456e+03'


def test_raw(modes):
    assert not modes.raw_hex_input_ok
    assert modes.format(1.5, 'R')[0] == ' 0x1.8000000000000p+0'
    assert modes.raw_hex_input_ok


def test_localized():
    modes = NumericMode(Locale(decimal_point=',', thousands_sep='.'))
    assert modes.format(1234.5)[0] == ' 1.234,5'
    modes.separators = False
    assert modes.format(1234.5)[0] == ' 1234,5'


def test_describe(modes):
    assert modes.describe() == \
        ' Mode is float.  Displaying 6 digits of total precision.\n'
    modes.mode = 'H'
    modes.set_width(16)
    assert modes.describe() == ' Mode is hex.  Integer math with 16 bits.\n'
