'''
Infix to RPN translation, by Dijkstra's shunting yard algorithm.

Takes over the input line right after an opening parenthesis, and produces
a queue of RPN tokens for the machine to run before it reads any more input.
'''

from collections import deque
import logging

from .lexer import Token, TokenKind
from .registry import Kind
from .util import ExpressionError, TokenError


log = logging.getLogger(__name__)

# Characters after a + or - that keep it a binary operator.
BINARY_FOLLOWERS = ' \t\v\r\n)+-'


class Translator:
    '''
    Shunting yard over tokens from the lexer.

    Holds no state between expressions.
    '''

    def __init__(self, lexer, registry):
        self.lexer = lexer
        self.open_paren = Token(TokenKind.OPERATOR, registry['('])
        self.close_paren = registry[')']
        self.chsign = Token(TokenKind.OPERATOR, registry['chs'])
        self.nop = Token(TokenKind.OPERATOR, registry['nop'])

    def translate(self, line, position):
        '''
        Translate the expression starting after an open parenthesis at
        position, up to its matching close.

        Returns the RPN queue and the position after the expression.
        '''
        operators = [self.open_paren]
        output = []
        depth = 1
        previous = self.open_paren
        # A variable waits for the next token to know if it's assigned to.
        pending = None
        pending_previous = None

        while True:
            log.debug('operator stack: %s', _dump(operators))
            log.debug('output stack: %s', _dump(output))

            token, position = self.lexer.parse_token(line, position,
                                                     rpn=False)
            if token.kind is TokenKind.UNKNOWN:
                raise TokenError(" error: unrecognized input '{}'"
                                 .format(token.value))

            if pending is not None:
                if self._is_assignment(token):
                    if not self._starts_operand(pending_previous):
                        self._error(pending_previous, pending)
                    operators.append(pending)
                    operators.append(token)
                    pending = None
                    previous = token
                    continue
                output.append(pending)
                pending = None

            if token.kind is TokenKind.EOL:
                break

            if (previous.kind is TokenKind.STORAGE and
                    not self._is_assignment(token)):
                self._error(previous, token)

            if token.kind is TokenKind.VARIABLE:
                if self._is_operand(previous):
                    self._error(previous, token)
                pending, pending_previous = token, previous
            elif token.kind is TokenKind.STORAGE:
                if not self._is_open(previous):
                    self._error(previous, token)
                operators.append(token)
            elif token.kind in (TokenKind.NUMERIC, TokenKind.SYMBOLIC):
                if self._is_operand(previous):
                    self._error(previous, token)
                output.append(token)
            elif self._is_open(token):
                if self._is_operand(previous):
                    self._error(previous, token)
                operators.append(token)
                depth += 1
            elif token.operator is self.close_paren:
                if not self._is_operand(previous):
                    self._error(previous, token)
                self._close(operators, output)
                depth -= 1
            else:
                token = self._operator(token, previous, operators, output,
                                       line[position:position + 1])

            if depth == 0:
                break
            previous = token

        if depth:
            raise ExpressionError(' error: missing parentheses')

        while operators:
            token = operators.pop()
            if not self._is_open(token):
                output.append(token)

        queue = deque(output)
        log.info('rpn queue: %s', _dump(queue))
        return queue, position

    def _operator(self, token, previous, operators, output, following):
        '''
        Place a unary or binary operator, returning the token as placed.
        '''
        op = token.operator
        if op.kind is Kind.BINARY and op.name in ('+', '-'):
            # +/- are unary if the previous token isn't something that will
            # become an operand, and they're followed by something that
            # isn't space, the end, or another +/- (no +-+ chains).
            if (not self._is_operand(previous) and
                    following not in BINARY_FOLLOWERS):
                token = self.chsign if op.name == '-' else self.nop
                log.debug('%s is now %s', op.name, token.operator.name)
                op = token.operator

        if op.kind is Kind.UNARY:
            if self._is_operand(previous):
                self._error(previous, token)
        elif op.kind is Kind.ASSIGNMENT:
            # Only reachable after a storage location (s1 = ...), which
            # stores by itself.
            if previous.kind is not TokenKind.STORAGE:
                self._error(previous, token)
            return token
        elif op.kind is Kind.BINARY:
            if not self._is_operand(previous):
                self._error(previous, token)
        else:
            raise ExpressionError(" error: '{}' unsuitable in infix "
                                  "expression".format(op.name))

        while operators and self._outranks(operators[-1], op):
            output.append(operators.pop())
        operators.append(token)
        return token

    def _close(self, operators, output):
        '''
        Pop to the matching open parenthesis, then a unary operator applied
        to the group.
        '''
        while operators and not self._is_open(operators[-1]):
            output.append(operators.pop())
        if not operators:
            raise ExpressionError(' error: missing parentheses?')
        operators.pop()
        if operators:
            op = operators[-1].operator
            if op is not None and op.kind is Kind.UNARY:
                output.append(operators.pop())

    def _outranks(self, top, op):
        '''
        Return true if stacked token top must be output before op is pushed.
        '''
        if self._is_open(top):
            return False
        precedence = top.operator.precedence if top.operator else 0
        if precedence > op.precedence:
            return True
        # a ^ b ^ c is a ^ (b ^ c)
        return precedence == op.precedence and not op.right_associative

    def _is_open(self, token):
        return token.operator is self.open_paren.operator

    def _is_assignment(self, token):
        return (token.operator is not None and
                token.operator.kind is Kind.ASSIGNMENT)

    def _starts_operand(self, token):
        '''
        Return true if an assignment target may follow token.
        '''
        return self._is_open(token) or self._is_assignment(token)

    def _is_operand(self, token):
        return (token.kind in (TokenKind.NUMERIC,
                               TokenKind.SYMBOLIC,
                               TokenKind.VARIABLE) or
                token.operator is self.close_paren)

    def _error(self, previous, token):
        raise ExpressionError(' error: bad expression sequence, at {} and {}'
                              .format(previous.describe(),
                                      token.describe()))


def _dump(tokens):
    return ' '.join(token.describe() for token in tokens) or '<empty>'
