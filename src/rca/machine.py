from collections import deque
from functools import partial
import logging
import math
import sys

from .infix import Translator
from .lexer import EOL, Lexer, TokenKind
from .locales import DEFAULT as DEFAULT_LOCALE
from .modes import NumericMode
from .registry import Associativity, Kind, Registry, Section, op
from .stack import OperandStack
from .util import (CalcError, DomainError, EmptyStackError, ExpressionError,
                   OutOfVariableSlots, Quit, TokenError, TruncationWarning,
                   wrap_user_errors)


log = logging.getLogger(__name__)

LLONG_MIN = -(1 << 63)
LLONG_MAX = (1 << 63) - 1
LLONG_BITS = 64

TRACING_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def _wrap64(n):
    '''
    Wrap integer to a signed 64 bit value, like C's long long.
    '''
    n &= (1 << LLONG_BITS) - 1
    return n - ((n >> (LLONG_BITS - 1)) << LLONG_BITS)


def _nonfinite(*values):
    '''
    Return the value to propagate if any operand is NaN or infinite.

    NaN is more insidious than inf, so it wins.
    '''
    for value in values:
        if math.isnan(value):
            return value
    for value in values:
        if math.isinf(value):
            return value
    return None


def _integers(*values):
    '''
    Convert bitwise operands to integers, if they fit in a long long.
    '''
    if any(value < LLONG_MIN or value > LLONG_MAX for value in values):
        raise DomainError(' error: bitwise operand(s) out of 64-bit integer '
                          'range')
    return [int(value) for value in values]


def _times(factor):
    def convert(self, a):
        return a * factor
    return convert


def _divided(divisor):
    def convert(self, a):
        return a / divisor
    return convert


class Machine:
    '''
    Arithmetic stack machine (RPN calculator), with infix expressions.

    Feed it lines; it tokenizes, translates parenthesized infix expressions,
    and runs the resulting tokens against its stack.
    '''

    MAX_VARIABLES = 32
    REGISTERS = 5

    def __init__(self, locale=DEFAULT_LOCALE, out=None, err=None,
                 verbose=False):
        '''
        Create empty stack machine.

        :param out: where results go, stdout by default.
        :param err: where errors and warnings go, stderr by default.
        :param verbose: Show stack traces on bad user commands.
        '''
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.verbose = verbose
        self.locale = locale
        self.modes = NumericMode(locale)
        self.stack = OperandStack(self.modes)
        self.lexer = Lexer(type(self).OPERATORS, self.modes, locale)
        self.translator = Translator(self.lexer, type(self).OPERATORS)
        self.variables = dict()
        self.registers = [0.0] * type(self).REGISTERS
        self.lastx = 0.0
        # During an infix expression, lastx is kept at its pre-infix value.
        self.frozen_lastx = None
        self.infix_level = -1
        self.queue = deque()
        # Informative feedback is only printed if the command generating it
        # is followed by the end of the line.
        self.pending = []
        self.autoprint = True
        self.suppress_autoprint = False
        self.exit_on_error = False
        self.degrees = True
        self.tracing = 0
        self.assigning = False
        self.line = ''
        self.position = 0
        self.last_token = EOL
        self.last_ok = True

    # Input

    def feed_line(self, line):
        '''
        Run one line of input.

        Raises Quit when the calculator should exit.
        '''
        self.line = line
        self.position = 0
        self.queue.clear()
        while True:
            try:
                token = self._next_token()
                if not self._dispatch(token):
                    return
            except CalcError as e:
                # Abort entire rest of line
                self.report(e)
                self._abandon_line()
                return

    def _next_token(self):
        '''
        Use up tokens created by infix processing first.
        '''
        if self.queue:
            self._freeze_lastx()
            return self.queue.popleft()
        token, self.position = self.lexer.parse_token(self.line,
                                                      self.position)
        self._thaw_lastx()
        return token

    def _dispatch(self, token):
        '''
        Run one token. Returns False at the end of the line.
        '''
        if token.kind is TokenKind.EOL:
            self._end_of_line()
            return False
        self.pending.clear()

        if token.kind is TokenKind.UNKNOWN:
            raise TokenError(" error: unrecognized input '{}'"
                             .format(token.value))
        if self.assigning and token.kind not in (TokenKind.VARIABLE,
                                                 TokenKind.STORAGE):
            self.assigning = False
            raise ExpressionError(' error: nothing to assign to')

        try:
            if token.kind is TokenKind.NUMERIC:
                if token.raw:
                    self.stack.push(token.value)
                else:
                    self.result_push(token.value)
            elif token.kind is TokenKind.VARIABLE:
                self._variable(token.value)
            else:
                self._invoke(token.operator)
            ok = True
        except CalcError as e:
            if e.aborts_line:
                raise
            self.report(e)
            ok = False
        self.last_token = token
        self.last_ok = ok
        return True

    def _invoke(self, operator):
        log.info('invoking %s', operator.name)
        if operator.kind in (Kind.UNARY, Kind.BINARY):
            self._apply(operator)
        else:
            operator.function(self)

    def _apply(self, operator):
        '''
        Apply unary or binary operator to the stack.

        Puts the operands back if it fails.
        '''
        args = self.stack.popn(operator.arity)
        try:
            # If you don't reverse, you'll do 2**9 when you say 9 2 ^.
            result = operator.function(self, *reversed(args))
        except CalcError:
            self._restore(args)
            raise
        except (ArithmeticError, ValueError) as e:
            self._restore(args)
            raise DomainError(' error: {} in {}'.format(e, operator.name), e)
        self.result_push(result)
        self.lastx = args[0]

    def _restore(self, args):
        for value in reversed(args):
            self.stack.push(value)

    def _end_of_line(self):
        self.flush_pending()
        if self.assigning:
            self.assigning = False
            self.report(ExpressionError(' error: nothing to assign to'))
        elif (self.autoprint and
                not self.suppress_autoprint and
                self._worth_printing()):
            self.print_top()
        self.suppress_autoprint = False
        self.last_token = EOL

    def _worth_printing(self):
        '''
        Return true if the top of stack isn't just what the user typed.
        '''
        token = self.last_token
        if not self.last_ok:
            return False
        if token.kind is TokenKind.NUMERIC:
            return token.base != self.modes.base
        return token.kind in (TokenKind.OPERATOR,
                              TokenKind.SYMBOLIC,
                              TokenKind.STORAGE,
                              TokenKind.VARIABLE)

    def _abandon_line(self):
        if self.frozen_lastx is not None:
            # Drop whatever the broken expression left behind.
            self.stack.truncate(self.infix_level)
            self.lastx = self.frozen_lastx
            self.frozen_lastx = None
            self.infix_level = -1
        self.queue.clear()
        self.pending.clear()
        self.assigning = False
        self.suppress_autoprint = False
        self.last_token = EOL
        self.position = len(self.line)

    def _freeze_lastx(self):
        if self.frozen_lastx is None:
            top = self.stack.peek()
            self.frozen_lastx = top if top is not None else 0.0
            self.infix_level = len(self.stack)

    def _thaw_lastx(self):
        if self.frozen_lastx is not None:
            self.lastx = self.frozen_lastx
            self.frozen_lastx = None
            if len(self.stack) != self.infix_level + 1:
                self.error('BUG: stack changed by {} after infix'
                           .format(len(self.stack) - self.infix_level))
            self.infix_level = -1

    # Output

    def print(self, *args, **kwargs):
        print(*args, file=self.out, **kwargs)

    def error(self, message):
        '''
        Show error or warning, and leave if that's what the user wants.
        '''
        self.out.flush()
        print(message, file=self.err)
        if self.exit_on_error:
            raise Quit(4)

    def report(self, e):
        if self.verbose:
            log.info('%s', type(e).__name__, exc_info=e)
        self.error(str(e))

    def inform(self, message):
        '''
        Queue feedback to show at the end of the line.
        '''
        self.pending.append(message)

    def flush_pending(self):
        if self.pending:
            self.out.write(''.join(self.pending))
            self.pending.clear()

    def print_value(self, value, fmt=None):
        '''
        Print value in format (default: mode's), warning if that loses
        anything.

        Returns the value converted to the current integer width, and whether
        that changed it.
        '''
        self.suppress_autoprint = True
        text, converted, changed = self.modes.format(value, fmt)
        self.print(text)
        if changed:
            if self.modes.floating:
                message = '     # warning: display format loses accuracy'
            else:
                message = '     # warning: accuracy lost, was %.*g' % (
                    self.modes.max_precision, value)
            self.report(TruncationWarning(message))
        return converted, changed

    def print_top(self, fmt=None):
        top = self.stack.peek()
        if top is not None:
            self.print_value(top, fmt)

    def print_stack(self, convert=False):
        '''
        Print the whole stack, bottom first, optionally converting values
        to the current integer width.
        '''
        for index, value in enumerate(self.stack):
            converted, changed = self.print_value(value)
            if convert and changed:
                self.stack.convert(index, converted)

    # Stack

    def result_push(self, value):
        '''
        Push a computed result, snapped and rounded.
        '''
        if math.isfinite(value):
            value = self.modes.tweak(value)
        self.stack.push(value)

    def _pop_integer(self):
        '''
        Pop a count or setting, which must be finite.
        '''
        value = self.stack.pop()
        if not math.isfinite(value):
            self.stack.push(value)
            raise DomainError(' error: need a finite number, got {}'
                              .format(value))
        return int(value)

    def _variable(self, name):
        '''
        Read variable, or write it right after an assignment.
        '''
        assigning, self.assigning = self.assigning, False
        if name not in self.variables:
            if len(self.variables) >= type(self).MAX_VARIABLES:
                raise OutOfVariableSlots(' error: out of variable slots '
                                         '(max {})'
                                         .format(type(self).MAX_VARIABLES))
            self.variables[name] = 0.0
        if assigning:
            value = self.stack.peek()
            if value is None:
                raise EmptyStackError()
            self.variables[name] = value
        else:
            self.stack.push(self.variables[name])

    # Operators with two operands

    def add(self, a, b):
        return a + b

    def subtract(self, a, b):
        return a - b

    def multiply(self, a, b):
        return a * b

    def divide(self, a, b):
        if b == 0:
            raise DomainError(' error: division by zero')
        return a / b

    def modulo(self, a, b):
        if b == 0:
            raise DomainError(' error: modulo by zero')
        if not math.isfinite(a):
            return math.nan
        return math.fmod(a, b)

    def power(self, a, b):
        if a < 0 and math.isfinite(b) and not b.is_integer():
            raise DomainError(' error: result of power would be complex')
        if a == 0 and b < 0:
            raise DomainError(' error: division by zero')
        try:
            return math.pow(a, b)
        except OverflowError:
            if a < 0 and b % 2 == 1:
                return -math.inf
            return math.inf

    def rshift(self, a, b):
        propagate = _nonfinite(a, b)
        if propagate is not None:
            return propagate
        i, j = _integers(a, b)
        if j < 0:
            raise DomainError(' error: shift by negative not allowed')
        if j >= LLONG_BITS:
            return 0.0
        # Logical shift, not arithmetic
        return float((i & ((1 << LLONG_BITS) - 1)) >> j)

    def lshift(self, a, b):
        propagate = _nonfinite(a, b)
        if propagate is not None:
            return propagate
        i, j = _integers(a, b)
        if j < 0:
            raise DomainError(' error: shift by negative not allowed')
        if j >= LLONG_BITS:
            return 0.0
        return float(_wrap64(i << j))

    def bitwise_and(self, a, b):
        propagate = _nonfinite(a, b)
        if propagate is not None:
            return propagate
        i, j = _integers(a, b)
        return float(i & j)

    def bitwise_or(self, a, b):
        propagate = _nonfinite(a, b)
        if propagate is not None:
            return propagate
        i, j = _integers(a, b)
        return float(i | j)

    def bitwise_xor(self, a, b):
        propagate = _nonfinite(a, b)
        if propagate is not None:
            return propagate
        i, j = _integers(a, b)
        return float(i ^ j)

    def setbit(self, a, b):
        propagate = _nonfinite(a, b)
        if propagate is not None:
            return propagate
        i, j = _integers(a, b)
        if j < 0:
            raise DomainError(' error: negative bit number not allowed')
        if j >= LLONG_BITS:
            return float(i)
        return float(_wrap64(i | (1 << j)))

    def clearbit(self, a, b):
        propagate = _nonfinite(a, b)
        if propagate is not None:
            return propagate
        i, j = _integers(a, b)
        if j < 0:
            raise DomainError(' error: negative bit number not allowed')
        if j >= LLONG_BITS:
            return float(i)
        return float(_wrap64(i & ~(1 << j)))

    def logical_and(self, a, b):
        return float(bool(a) and bool(b))

    def logical_or(self, a, b):
        return float(bool(a) or bool(b))

    def is_eq(self, a, b):
        return float(a == b)

    def is_neq(self, a, b):
        return float(a != b)

    def is_lt(self, a, b):
        return float(a < b)

    def is_le(self, a, b):
        return float(a <= b)

    def is_gt(self, a, b):
        return float(a > b)

    def is_ge(self, a, b):
        return float(a >= b)

    def assign(self):
        '''
        Make the next variable or storage location take the top of stack.
        '''
        self.assigning = True

    # Operators with one operand

    def bitwise_not(self, a):
        if not math.isfinite(a):
            return a
        i, = _integers(a)
        return float(~i)

    def chsign(self, a):
        return -a

    def nop(self, a):
        return a

    def absolute(self, a):
        return abs(a)

    def recip(self, a):
        if a == 0:
            raise DomainError(' error: division by zero')
        return 1.0 / a

    def squareroot(self, a):
        if a < 0:
            raise DomainError(' error: square root of negative number')
        return math.sqrt(a)

    def _radians(self, angle):
        '''
        User's angle (degrees or radians) to radians.
        '''
        self._trig_check()
        return math.radians(angle) if self.degrees else angle

    def _user_angle(self, radians):
        return math.degrees(radians) if self.degrees else radians

    def _trig_check(self):
        if not self.modes.floating:
            raise DomainError(' error: trig functions make no sense in '
                              'integer mode')

    @wrap_user_errors(' error: math domain error in sin')
    def sine(self, a):
        return math.sin(self._radians(a))

    @wrap_user_errors(' error: math domain error in cos')
    def cosine(self, a):
        return math.cos(self._radians(a))

    @wrap_user_errors(' error: math domain error in tan')
    def tangent(self, a):
        radians = self._radians(a)
        # tan() goes undefined at +/-90
        degrees = a if self.degrees else math.degrees(a)
        if math.fmod(self.modes.tweak(degrees) - 90, 180) == 0:
            return math.nan
        return math.tan(radians)

    @wrap_user_errors(' error: math domain error in asin')
    def asine(self, a):
        self._trig_check()
        return self._user_angle(math.asin(a))

    @wrap_user_errors(' error: math domain error in acos')
    def acosine(self, a):
        self._trig_check()
        return self._user_angle(math.acos(a))

    def atangent(self, a):
        self._trig_check()
        return self._user_angle(math.atan(a))

    def atangent2(self, a, b):
        self._trig_check()
        return self._user_angle(math.atan2(a, b))

    def exponential(self, a):
        try:
            return math.exp(a)
        except OverflowError:
            return math.inf

    def _logarithm(self, f, a):
        if a < 0:
            raise DomainError(' error: logarithm of negative number')
        if a == 0:
            return -math.inf
        return f(a)

    def log_natural(self, a):
        return self._logarithm(math.log, a)

    def log_base2(self, a):
        return self._logarithm(math.log2, a)

    def log_base10(self, a):
        return self._logarithm(math.log10, a)

    def fraction(self, a):
        return math.modf(a)[0]

    def integer(self, a):
        return math.modf(a)[1]

    def logical_not(self, a):
        return 1.0 if a == 0 else 0.0

    def fahrenheit_to_celsius(self, a):
        return (a - 32.0) / 1.8

    def celsius_to_fahrenheit(self, a):
        return a * 1.8 + 32.0

    # Stack manipulation

    def clear(self):
        '''
        Clear everything from the stack.
        '''
        top = self.stack.peek()
        if top is not None:
            self.lastx = top
        self.stack.clear()

    def rolldown(self):
        '''
        Pop and discard the top of stack.
        '''
        self.lastx = self.stack.pop()

    def enter(self):
        '''
        Duplicate element at top of stack.
        '''
        top = self.stack.peek()
        if top is None:
            raise EmptyStackError()
        self.stack.push(top)

    def exchange(self):
        '''
        Swap two elements at top of stack.
        '''
        b, a = self.stack.popn(2)
        self.stack.push(b)
        self.stack.push(a)

    def mark(self):
        n = self.stack.pop()
        if n == -1:
            self.stack.clear_mark()
            return
        try:
            self.stack.set_mark(int(n))
        except (ValueError, OverflowError):
            self.stack.push(n)
            if len(self.stack) == 1:
                raise DomainError(' error: bad mark, max of 0 with empty '
                                  'stack, or, -1 to clear')
            raise DomainError(' error: bad mark, range between 0 and stack '
                              'length ({}), or -1 to clear'
                              .format(len(self.stack) - 1))

    def _total(self, what):
        count = self.stack.above_mark()
        if count <= 0:
            raise EmptyStackError(' error: nothing to {}'.format(what))
        values = list(self.stack)[-count:]
        try:
            total = math.fsum(values)
        except (OverflowError, ValueError):
            # Infinities of both signs, or overflow along the way.
            total = sum(values)
        self.stack.popn(count)
        self.stack.clear_mark()
        return total, count

    def sum(self):
        '''
        Sum the stack down to the mark.
        '''
        total, _ = self._total('sum')
        self.result_push(total)

    def average(self):
        '''
        Average the stack down to the mark.
        '''
        total, count = self._total('avg')
        self.result_push(total / count)

    # Constants and storage

    def repush(self):
        '''
        Push the previous top of stack.
        '''
        if self.frozen_lastx is not None:
            self.stack.push(self.frozen_lastx)
        else:
            self.stack.push(self.lastx)

    def store_register(self, index):
        '''
        Copy top of stack to an off-stack location.
        '''
        self.assigning = False
        top = self.stack.peek()
        if top is None:
            raise EmptyStackError()
        self.registers[index] = top

    def recall_register(self, index):
        self.stack.push(self.registers[index])

    def push_pi(self):
        self.stack.push(math.pi)

    def push_e(self):
        self.stack.push(math.e)

    # Infix

    def open_paren(self):
        '''
        Translate the infix expression that follows, to run next.
        '''
        queue, self.position = self.translator.translate(self.line,
                                                         self.position)
        self.queue.extend(queue)

    def close_paren(self):
        # This has to be a warning -- the command in error is already
        # finished, so we can't cancel it.
        raise CalcError(' warning: mismatched/extra parentheses')

    # Display

    def print_all(self):
        '''
        Print all elements on the stack, bottom of the stack first.
        '''
        self.print_stack()
        self.suppress_autoprint = True

    def print_one(self, fmt=None):
        '''
        Print the element on the top of the stack.
        '''
        self.print_top(fmt)
        self.suppress_autoprint = True

    def state(self):
        '''
        Show calculator state.
        '''
        m = self.modes
        styles = {'g': 'precision', 'f': 'decimals', 'e': 'engineering'}
        lines = [
            '',
            ' Current mode is {}'.format(m.mode),
            '',
            ' In floating mode:',
            '  max precision is {} decimal digits'.format(m.max_precision),
            '  current display mode is "{} {}"'.format(
                m.float_digits, styles[m.float_style]),
            '  snapping/rounding is {}'.format('on' if m.rounding else 'off'),
            '',
            ' In integer modes:',
            '  width is {} bits'.format(m.int_width),
            '  mask:     0x{:x}'.format(m.int_mask),
            '  sign bit: 0x{:x}'.format(m.int_sign_bit),
            '  max:      0x{:x}'.format(m.int_max),
            '  min:      0x{:x}'.format(m.int_min),
            '',
            ' Stack, top comes first:',
        ]
        if not self.stack:
            lines.append('{:>16}'.format('<empty>'))
        for value in reversed(list(self.stack)):
            integer = ('{:#20x}'.format(int(value))
                       if math.isfinite(value)
                       else '{:>20}'.format(value))
            lines.append(' {}   {!r:>24}    {}'.format(integer, value,
                                                       value.hex()))
        lines += [
            ' stack count {}, stack mark {}'.format(len(self.stack),
                                                    self.stack.mark),
            '',
            ' Variables: {}'.format(', '.join(
                '{}={!r}'.format(name, value)
                for name, value
                in sorted(self.variables.items())) or '<none>'),
            ' Registers: {}'.format(', '.join(map(repr, self.registers))),
            '',
            ' Float epsilon is {} ({})'.format(m.epsilon, m.epsilon.hex()),
            ' Locale elements:',
            "  decimal '{}', thousands separator '{}', currency '{}'"
            .format(self.locale.decimal_point, self.locale.thousands_sep,
                    self.locale.currency),
        ]
        self.print('\n'.join(lines))
        self.suppress_autoprint = True

    # Modes

    def show_mode(self):
        self.inform(self.modes.describe())
        self.suppress_autoprint = True

    def set_mode(self, mode):
        self.modes.mode = mode
        self.show_mode()
        self.print_stack(convert=True)

    def _digits(self, style):
        digits = abs(self._pop_integer())
        limited = ''
        if style != 'f' and digits < 1:
            # this is total digits, so '0' doesn't make sense
            digits = 1
        elif digits > self.modes.max_precision:
            digits = self.modes.max_precision
            limited = 'the maximum of '
        self.modes.float_digits = digits
        self.modes.float_style = style
        return digits, limited

    def _float_only(self, what):
        if self.modes.mode != 'F':
            self.inform(' Not in floating decimal mode, {} recorded but '
                        'ignored.\n'.format(what))

    def precision(self):
        '''
        Float format: number of significant digits.
        '''
        digits, limited = self._digits('g')
        self.inform(' Will show {}{} significant digit{}.\n'.format(
            limited, digits, '' if digits == 1 else 's'))
        self._float_only('float precision')

    def engineering(self):
        '''
        Float format: engineering notation, number of significant digits.
        '''
        digits, limited = self._digits('e')
        self.inform(' Will show {}{} significant digit{}, in engineering '
                    'notation.\n'.format(limited, digits,
                                         '' if digits == 1 else 's'))
        self._float_only('float precision')

    def decimal_length(self):
        '''
        Float format: digits after the decimal.
        '''
        digits, _ = self._digits('f')
        if digits == 0:
            self.inform(' Will show no digits after the decimal.\n')
        else:
            self.inform(' Will show at most {} digit{} after the decimal.\n'
                        .format(digits, '' if digits == 1 else 's'))
        self._float_only('decimal length is')

    def width(self):
        '''
        Set the word size for integer modes.
        '''
        bits = self._pop_integer()
        if bits > self.modes.max_int_width:
            self.print(' Width out of range, set to max ({})'
                       .format(self.modes.max_int_width))
        elif bits < 2 and bits != 0:
            self.print(' Width out of range, set to min (2)')
        bits = self.modes.set_width(bits)
        self.inform(' Integers are now {} bits wide.\n'.format(bits))
        if self.modes.floating:
            self.inform(' In floating mode, integer width is recorded but '
                        'ignored.\n')
        else:
            self.stack.mask_all()

    def _toggle(self):
        wanted = self.stack.pop()
        if wanted not in (0, 1):
            self.report(CalcError(' warning: toggle commands usually take '
                                  '0 or 1 as their argument'))
        return wanted != 0

    def use_degrees(self):
        self.degrees = self._toggle()
        self.inform(' trig functions will now use {}\n'.format(
            'degrees' if self.degrees else 'radians'))

    def set_autoprint(self):
        self.autoprint = self._toggle()
        self.inform(' Autoprinting is now {}\n'.format(
            'on' if self.autoprint else 'off'))

    def set_separators(self):
        wanted = self._toggle()
        if not self.locale.thousands_sep:
            self.inform(' No thousands separator defined in the current '
                        'locale, so no numeric separators.\n')
            self.modes.separators = False
            return
        self.modes.separators = wanted
        self.inform(' Numeric separators now {}\n'.format(
            'on' if wanted else 'off'))

    def set_rounding(self):
        self.modes.rounding = self._toggle()
        self.inform(' Float snapping/rounding is now {}\n'.format(
            'on' if self.modes.rounding else 'off'))

    def set_errorexit(self):
        wanted = self.stack.pop()
        self.exit_on_error = wanted != 0
        if wanted not in (0, 1):
            self.report(CalcError(' warning: toggle commands usually take '
                                  '0 or 1 as their argument'))
        self.inform(' errors and warnings will {} cause exit\n'.format(
            'now' if self.exit_on_error else 'not'))

    # Housekeeping

    def set_tracing(self):
        '''
        Debug tracing: 1 logs tokens and RPN, 2 the shunting yard too.
        '''
        level = self._pop_integer()
        if level == 11:
            return self.commands()
        self.tracing = level
        logging.getLogger(__package__).setLevel(
            TRACING_LEVELS.get(level, logging.DEBUG))
        self.print(' internal tracing is now level {}'.format(level))

    def commands(self):
        '''
        Dump raw command table.
        '''
        self.print('{:<10} {:>8} {:>7}  {}'.format('oper', 'operands',
                                                   'preced', 'help'))
        for operator in type(self).OPERATORS:
            self.print('{:<10} {:>8} {:>7}  {}'.format(
                operator.name, operator.kind.value, operator.precedence,
                operator.help or ''))
        self.suppress_autoprint = True

    def help(self):
        '''
        Print all possible commands.
        '''
        self.print(
            ' rca -- an RPN calculator, with infix expressions\n'
            '  Entering a number pushes it on the stack.\n'
            '  Operators replace either one or two stack values with their '
            'result.\n'
            '  Always prefix hex (0x7f), octal (0177) or binary (0b101) '
            'input.\n'
            '  Infix expressions are entered using (...), as in: '
            '(sin(30)^2 + cos(30)^2)\n'
            "  Variables start with '_', and are assigned in infix: "
            '(_x = 3)\n'
            "  Anything after '#' is a comment.\n"
            "  Below, 'x' refers to top-of-stack, 'y' to the next value "
            'beneath.\n')
        for line in type(self).OPERATORS.help_lines():
            self.print(line)
        self.suppress_autoprint = True

    def precedence(self):
        '''
        List infix operator precedence.
        '''
        self.print(' Precedence for operators in infix expressions, from\n'
                   '  top to bottom in order of descending precedence.\n'
                   ' All operators are left-associative, except for those\n'
                   "  in rows marked 'R', which associate right to left.")
        for line in type(self).OPERATORS.precedence_lines():
            self.print(line)
        self.suppress_autoprint = True

    def exit_status(self):
        '''
        0 or 1 from the logical value of the top of stack (flipped, per UNIX
        convention), 2 on empty stack.
        '''
        if self.stack:
            return int(self.stack.pop() == 0)
        return 2

    def quit(self):
        if self.autoprint and not self.suppress_autoprint:
            self.print_top()
        raise Quit(self.exit_status())

    # Language mapping to stack operations/callables.
    OPERATORS = Registry([
        Section('Numerical operators with two operands:', (
            op('+', add, None, Kind.BINARY, 18),
            op('-', subtract, 'Add and subtract x and y', Kind.BINARY, 18),
            op('*', multiply, None, Kind.BINARY, 20),
            op('x', multiply, 'Multiply x and y', Kind.BINARY, 20),
            op('/', divide, None, Kind.BINARY, 20),
            op('%', modulo, 'Divide and modulo of y by x', Kind.BINARY, 20),
            op('^', power, None, Kind.BINARY, 22, Associativity.RIGHT),
            op('**', power, "Raise y to the x'th power", Kind.BINARY, 22,
               Associativity.RIGHT),
            op('>>', rshift, None, Kind.BINARY, 16),
            op('<<', lshift, 'Right/left logical shift of y by x bits',
               Kind.BINARY, 16),
            op('&', bitwise_and, None, Kind.BINARY, 14),
            op('|', bitwise_or, None, Kind.BINARY, 10),
            op('xor', bitwise_xor, 'Bitwise AND, OR, and XOR of y and x',
               Kind.BINARY, 12),
            op('setb', setbit, None, Kind.BINARY, 10),
            op('clearb', clearbit, 'Set and clear bit x in y', Kind.BINARY,
               14),
            op('=', assign, 'Assignment (to variables and storage)',
               Kind.ASSIGNMENT, 1),
        )),
        Section('Numerical operators with one operand:', (
            op('~', bitwise_not, "Bitwise NOT of x (1's complement)",
               Kind.UNARY, 26),
            op('chs', chsign, None, Kind.UNARY, 26),
            op('negate', chsign, "Change sign of x (2's complement)",
               Kind.UNARY, 26),
            op('nop', nop, 'Does nothing', Kind.UNARY, 26),
            op('recip', recip, None, Kind.UNARY, 26),
            op('sqrt', squareroot, 'Reciprocal and square root of x',
               Kind.UNARY, 26),
            op('sin', sine, None, Kind.UNARY, 26),
            op('cos', cosine, None, Kind.UNARY, 26),
            op('tan', tangent, '', Kind.UNARY, 26),
            op('asin', asine, None, Kind.UNARY, 26),
            op('acos', acosine, None, Kind.UNARY, 26),
            op('atan', atangent, 'Trig functions', Kind.UNARY, 26),
            op('atan2', atangent2, 'Arctan of y/x (2 operands)',
               Kind.BINARY, 26),
            op('exp', exponential, "Raise e to the x'th power", Kind.UNARY,
               26),
            op('ln', log_natural, None, Kind.UNARY, 26),
            op('log2', log_base2, None, Kind.UNARY, 26),
            op('log10', log_base10, 'Natural, base 2, and base 10 '
               'logarithms', Kind.UNARY, 26),
            op('abs', absolute, None, Kind.UNARY, 26),
            op('frac', fraction, None, Kind.UNARY, 26),
            op('int', integer, 'Absolute value, fractional and integer '
               'parts of x', Kind.UNARY, 26),
            op('(', open_paren, None, Kind.PSEUDO, 28),
            op(')', close_paren, 'Begin and end "infix" expression'),
        )),
        Section('Logical operators (mostly two operands):', (
            op('&&', logical_and, None, Kind.BINARY, 4),
            op('||', logical_or, 'Logical AND and OR', Kind.BINARY, 2),
            op('==', is_eq, None, Kind.BINARY, 6),
            op('!=', is_neq, None, Kind.BINARY, 6),
            op('<', is_lt, None, Kind.BINARY, 8),
            op('<=', is_le, None, Kind.BINARY, 8),
            op('>', is_gt, None, Kind.BINARY, 8),
            op('>=', is_ge, 'Arithmetic comparisons', Kind.BINARY, 8),
            op('!', logical_not, 'Logical NOT of x', Kind.UNARY, 26),
        )),
        Section('Stack manipulation:', (
            op('clear', clear, 'Clear stack'),
            op('pop', rolldown, 'Pop (and discard) x'),
            op('push', enter),
            op('dup', enter, 'Push (a duplicate of) x'),
            op('lastx', repush, None, Kind.SYMBOLIC),
            op('lx', repush, 'Fetch previous value of x', Kind.SYMBOLIC),
            op('exch', exchange),
            op('swap', exchange, 'Exchange x and y'),
            op('mark', mark, 'Mark stack for later summing'),
            op('sum', sum, 'Sum stack to "mark", or entire stack if no '
               'mark'),
            op('avg', average, 'Average stack to "mark", or entire stack if '
               'no mark'),
        )),
        Section('Constants and storage (no operands):', (
            op('store', partial(store_register, index=0), None,
               Kind.STORAGE),
            op('recall', partial(recall_register, index=0),
               'Same as s1 and r1', Kind.SYMBOLIC),
            op('s1', partial(store_register, index=0), None, Kind.STORAGE),
            op('s2', partial(store_register, index=1), None, Kind.STORAGE),
            op('s3', partial(store_register, index=2), None, Kind.STORAGE),
            op('s4', partial(store_register, index=3), None, Kind.STORAGE),
            op('s5', partial(store_register, index=4),
               'Save x off-stack (to 5 locations)', Kind.STORAGE),
            op('r1', partial(recall_register, index=0), None,
               Kind.SYMBOLIC),
            op('r2', partial(recall_register, index=1), None,
               Kind.SYMBOLIC),
            op('r3', partial(recall_register, index=2), None,
               Kind.SYMBOLIC),
            op('r4', partial(recall_register, index=3), None,
               Kind.SYMBOLIC),
            op('r5', partial(recall_register, index=4),
               'Fetch x (from 5 locations)', Kind.SYMBOLIC),
            op('pi', push_pi, 'Push constant pi', Kind.SYMBOLIC),
            op('e', push_e, 'Push constant e', Kind.SYMBOLIC),
        )),
        Section('Unit conversions (one operand):', (
            op('i2mm', _times(25.4), None, Kind.UNARY, 26),
            op('mm2i', _divided(25.4), 'inches / millimeters', Kind.UNARY,
               26),
            op('ft2m', _divided(3.28084), None, Kind.UNARY, 26),
            op('m2ft', _times(3.28084), 'feet / meters', Kind.UNARY, 26),
            op('mi2km', _divided(0.6213712), None, Kind.UNARY, 26),
            op('km2mi', _times(0.6213712), 'miles / kilometers', Kind.UNARY,
               26),
            op('f2c', fahrenheit_to_celsius, None, Kind.UNARY, 26),
            op('c2f', celsius_to_fahrenheit, 'degrees F/C', Kind.UNARY, 26),
            op('oz2g', _times(28.3495), None, Kind.UNARY, 26),
            op('g2oz', _divided(28.3495), 'ounces / grams', Kind.UNARY, 26),
            op('oz2ml', _times(29.5735), None, Kind.UNARY, 26),
            op('ml2oz', _divided(29.5735), 'ounces / milliliters',
               Kind.UNARY, 26),
            op('q2l', _divided(1.05669), None, Kind.UNARY, 26),
            op('l2q', _times(1.05669), 'quarts / liters', Kind.UNARY, 26),
            op('d2r', _times(math.pi / 180.0), None, Kind.UNARY, 26),
            op('r2d', _times(180.0 / math.pi), 'degrees / radians',
               Kind.UNARY, 26),
        )),
        Section('Display:', (
            op('P', print_all, 'Print whole stack according to mode'),
            op('p', print_one, 'Print x according to mode'),
            op('f', partial(print_one, fmt='F')),
            op('d', partial(print_one, fmt='D')),
            op('u', partial(print_one, fmt='U'),
               'Print x as float, decimal, unsigned decimal,'),
            op('h', partial(print_one, fmt='H')),
            op('o', partial(print_one, fmt='O')),
            op('b', partial(print_one, fmt='B'),
               '     hex, octal, or binary'),
            op('state', state, 'Show calculator state'),
        )),
        Section('Modes:', (
            op('F', partial(set_mode, mode='F')),
            op('D', partial(set_mode, mode='D')),
            op('U', partial(set_mode, mode='U'),
               'Switch to floating point, decimal, unsigned decimal,'),
            op('H', partial(set_mode, mode='H')),
            op('O', partial(set_mode, mode='O')),
            op('B', partial(set_mode, mode='B'),
               '     hex, octal, or binary modes'),
            op('precision', precision),
            op('k', precision,
               'Float format: number of significant digits (%g)'),
            op('decimals', decimal_length),
            op('K', decimal_length,
               'Float format: digits after decimal (%f)'),
            op('engineering', engineering),
            op('E', engineering,
               'Float format: engineering notation, significant digits'),
            op('width', width),
            op('w', width, 'Set effective word size for integer modes'),
            op('degrees', use_degrees,
               'Toggle trig functions: degrees (1) or radians (0)'),
            op('autoprint', set_autoprint),
            op('a', set_autoprint, 'Toggle autoprinting on/off with 0/1'),
            op('separators', set_separators),
            op('s', set_separators,
               'Toggle numeric separators (i.e., commas) on/off (0/1)'),
            op('mode', show_mode, 'Display current mode parameters'),
        )),
        Section('Debug support:', (
            op('r', partial(print_one, fmt='R'),
               'Print x as raw floating hex'),
            op('R', partial(set_mode, mode='R'),
               'Switch to raw floating hex mode'),
            op('rounding', set_rounding,
               'Toggle snapping and rounding of floats'),
            op('tracing', set_tracing,
               'Toggle debug tracing (11 dumps the command table)'),
        )),
        Section('Housekeeping:', (
            op('?', help),
            op('help', help, 'Show this list'),
            op('precedence', precedence, 'List infix operator precedence'),
            op('quit', quit),
            op('q', quit),
            op('exit', quit, 'Leave the calculator'),
            op('errorexit', set_errorexit,
               'Toggle exiting on error and warning'),
        )),
    ])
