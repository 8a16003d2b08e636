from pytest import fixture, raises

from rca.stack import OperandStack
from rca.util import EmptyStackError


@fixture
def stack(modes):
    return OperandStack(modes)


def test_popn_is_all_or_nothing(stack):
    stack.push(1.0)
    with raises(EmptyStackError):
        stack.popn(2)
    assert list(stack) == [1.0]
    stack.push(2.0)
    assert stack.popn(2) == [2.0, 1.0]


def test_pop_empty(stack):
    with raises(EmptyStackError, match='empty stack'):
        stack.pop()
    assert stack.peek() is None


def test_mark(stack):
    for value in 1.0, 2.0, 3.0, 4.0:
        stack.push(value)
    stack.set_mark(2)
    assert stack.above_mark() == 2
    stack.popn(3)
    # Went below the mark, so it's gone.
    assert stack.mark == 0
    with raises(ValueError):
        stack.set_mark(5)


def test_masked_in_integer_mode(stack, modes):
    modes.mode = 'D'
    modes.set_width(8)
    stack.push(300.7)
    assert stack.peek() == 44


def test_truncate(stack):
    for value in 1.0, 2.0, 3.0:
        stack.push(value)
    stack.truncate(1)
    assert list(stack) == [1.0]
