'''
Numeric modes: integer word width, float snapping, and display formats.

Values are always floats. In the integer modes they hold integers that have
been truncated, masked to the word width, and sign extended, so the word
width can be no larger than the float mantissa.
'''

import logging
import math
import regex
import sys

from .locales import DEFAULT as DEFAULT_LOCALE


log = logging.getLogger(__name__)

LONGLONG_BITS = 64

FLOAT_MODES = 'FR'

NAMES = {
    'F': 'float',
    'D': 'signed decimal',
    'U': 'unsigned decimal',
    'H': 'hex',
    'O': 'octal',
    'B': 'binary',
    'R': 'raw hex float',
}

# Base numbers are shown in, per mode. Raw float shows hex digits.
BASES = {
    'F': 10,
    'D': 10,
    'U': 10,
    'H': 16,
    'O': 8,
    'B': 2,
    'R': 16,
}

_LEADING_NUMBER = regex.compile(r"(-?)(\d+)(.*)", regex.DOTALL)


def detect_epsilon():
    '''
    Smallest power of two that still changes 1.0 when added to it.
    '''
    epsilon = 1.0
    while 1.0 + epsilon / 2.0 > 1.0:
        epsilon /= 2.0
    return epsilon


def round_half_away(x):
    '''
    Round to nearest integer, halves away from zero (like C's round()).
    '''
    whole = math.floor(abs(x))
    if abs(x) - whole >= 0.5:
        whole += 1
    return math.copysign(whole, x)


def group(digits, size, separator):
    '''
    Insert separator every size digits, counting from the right.
    '''
    if not separator or len(digits) <= size:
        return digits
    head = len(digits) % size or size
    return separator.join([digits[:head]] +
                          [digits[i:i + size]
                           for i
                           in range(head, len(digits), size)])


class NumericMode:
    '''
    Arithmetic and display mode of the calculator.
    '''

    DEFAULT_MODE = 'F'
    DEFAULT_DIGITS = 6
    DEFAULT_STYLE = 'g'
    # Snap to integers this many epsilons away (scaled by magnitude).
    SNAP_EPSILONS = 20

    def __init__(self, locale=DEFAULT_LOCALE):
        self.locale = locale
        self.mode = type(self).DEFAULT_MODE
        self.float_digits = type(self).DEFAULT_DIGITS
        self.float_style = type(self).DEFAULT_STYLE
        self.rounding = True
        self.separators = True
        # Floating hex input (-0x1.8p+3) is only accepted once floating hex
        # output has been seen.
        self.raw_hex_input_ok = False
        self.epsilon = detect_epsilon()
        self.max_precision = int(-math.log10(self.epsilon))
        self.max_int_width = min(LONGLONG_BITS, sys.float_info.mant_dig)
        self.set_width(0)

    @property
    def floating(self):
        return self.mode in FLOAT_MODES

    @property
    def base(self):
        return BASES[self.mode]

    @property
    def name(self):
        return NAMES[self.mode]

    def set_width(self, bits):
        '''
        Set integer word width, clamped to what we can represent.

        0 means the maximum.
        '''
        if not bits or bits > self.max_int_width:
            bits = self.max_int_width
        bits = max(2, int(bits))
        self.int_width = bits
        self.int_sign_bit = 1 << (bits - 1)
        self.int_mask = (1 << bits) - 1
        self.int_max = self.int_mask >> 1
        self.int_min = self.int_sign_bit
        return bits

    def sign_extend(self, n):
        '''
        Mask integer to the word width, then sign extend it.
        '''
        n &= self.int_mask
        return n - ((n & self.int_sign_bit) << 1)

    def mask(self, x):
        '''
        Convert a value to what the current mode stores.
        '''
        if self.floating or not math.isfinite(x):
            return x
        return float(self.sign_extend(int(x)))

    def truncate(self, x):
        '''
        Return x as an integer of the current width, and if that lost
        anything.
        '''
        if not math.isfinite(x):
            return float(self.sign_extend(self.int_sign_bit)), True
        n = float(self.sign_extend(int(x)))
        return n, n != x

    def tweak(self, x):
        '''
        Snap computed results very close to integers, otherwise round them to
        our maximum precision, to hide floating point detritus.
        '''
        if not self.rounding or x == 0 or not math.isfinite(x):
            return x
        tolerance = self.epsilon * type(self).SNAP_EPSILONS
        if abs(x) > 1.0:
            tolerance *= abs(x)
        r = round_half_away(x)
        if abs(x - r) <= tolerance:
            if x != r:
                log.debug('snap %s (%r) to %s', x.hex(), x, r.hex())
            return r
        r = float('%.*g' % (self.max_precision, x))
        if x != r:
            log.debug('round %s (%r) to %s', x.hex(), x, r.hex())
        return r

    def format(self, x, fmt=None):
        '''
        Render a value in the given (default: current) mode's format.

        Pure. Returns the text, the value converted to the current integer
        width, and whether that conversion lost anything.
        '''
        fmt = fmt or self.mode
        if fmt in FLOAT_MODES or not math.isfinite(x):
            return self.format_float(x, fmt), x, False

        converted, changed = self.truncate(x)
        n = int(x) & self.int_mask
        separator = self.locale.thousands_sep if self.separators else ''
        if fmt == 'H':
            text = ' 0x' + group('%x' % n, 4, separator)
        elif fmt == 'O':
            text = ' 0' + group('%o' % n, 3, separator)
        elif fmt == 'B':
            text = ' 0b' + self._binary(n, separator)
        elif fmt == 'U':
            text = ' ' + group('%d' % n, 3, separator)
        elif fmt == 'D':
            n = int(x) if self.floating else self.sign_extend(n)
            text = ' ' + ('-' if n < 0 else '') + group('%d' % abs(n), 3,
                                                        separator)
        else:
            raise ValueError('No such format {}'.format(repr(fmt)))
        return text, converted, changed

    def _binary(self, n, separator):
        # No masking in float mode, show the widest word instead.
        width = self.max_int_width if self.floating else self.int_width
        digits = format(n & ((1 << width) - 1), '0{}b'.format(width))
        # Separators fall on byte boundaries.
        return group(digits, 8, separator)

    def format_float(self, x, fmt='F'):
        if fmt == 'R':
            self.raw_hex_input_ok = True
            return ' ' + x.hex()
        if self.float_style == 'e':
            return ' ' + self._localize(self.engineering(x), grouping=False)
        if self.float_style == 'f':
            text = '%.*f' % (self.float_digits, x)
            if '.' in text:
                # Don't show more significant digits than we have, trimming
                # from the decimals where we can.
                leading = sum(c.isdigit() for c in text.split('.')[0])
                if leading == 1 and text[0] == '0':
                    leading = 0
                decimals = min(self.float_digits,
                               self.max_precision - leading)
                text = '%.*f' % (max(decimals, 0), x)
        else:
            text = '%.*g' % (self.float_digits, x)
        return ' ' + self._localize(text)

    def engineering(self, x):
        '''
        %e style, exponent lowered to a multiple of 3.
        '''
        text = '%.*e' % (max(self.float_digits, 1) - 1, x)
        if 'e' not in text:
            return text  # inf, nan
        mantissa, exponent = text.split('e')
        exponent = int(exponent)
        shift = exponent % 3
        sign = '-' if mantissa.startswith('-') else ''
        digits = mantissa.lstrip('-').replace('.', '')
        point = 1 + shift
        digits = digits.ljust(point, '0')
        text = sign + digits[:point]
        if digits[point:]:
            text += '.' + digits[point:]
        return text + 'e%+03d' % (exponent - shift)

    def _localize(self, text, grouping=True):
        '''
        Group integer digits and use the locale's decimal point.
        '''
        match = _LEADING_NUMBER.fullmatch(text)
        if match is None:
            return text
        sign, digits, rest = match.groups()
        if grouping and self.separators:
            digits = group(digits, 3, self.locale.thousands_sep)
        if rest.startswith('.'):
            rest = self.locale.decimal_point + rest[1:]
        return sign + digits + rest

    def describe(self):
        '''
        Lines describing the current mode, for the "mode" command.
        '''
        line = ' Mode is {}. '.format(self.name)
        if self.mode == 'F':
            if self.float_style == 'f':
                what = 'after the decimal'
            elif self.float_style == 'e':
                what = 'of total precision, engineering style'
            else:
                what = 'of total precision'
            line += ' Displaying {} digits {}.\n'.format(self.float_digits,
                                                         what)
        elif self.mode == 'R':
            line += ' Displaying using floating hexadecimal.\n'
        else:
            line += ' Integer math with {} bits.\n'.format(self.int_width)
        return line
