'''
RPN calculator, with infix expressions.

Supports plain old arithmetic, bitwise and logical operators, the usual
mathematical functions, unit conversions, and your usual stack operators.
Integer modes (signed and unsigned decimal, hex, octal, binary) work at a
settable word width; floating results are snapped and rounded to hide
floating point detritus.

Anything in parentheses is an infix expression, translated to RPN on the fly,
so "2 (3 * 4) +" and "(2 + 3 * 4)" are the same thing. Variables ("_x") are
assigned in infix expressions, "(_x = 3)", and read anywhere.

Not intended to be Turing-complete!
'''

from .cli import CLI
from .lexer import Lexer
from .machine import Machine


__all__ = 'Machine', 'Lexer', 'CLI'
