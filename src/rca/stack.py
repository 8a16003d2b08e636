from collections import deque

from .util import EmptyStackError


class OperandStack:
    '''
    LIFO stack of values, masked on the way in according to the mode.

    A mark, if set, is the stack depth that sum and avg stop at.
    '''

    def __init__(self, modes):
        self.modes = modes
        self._values = deque()
        self.mark = 0

    def push(self, value):
        self._values.append(self.modes.mask(value))

    def pop(self):
        '''
        Pop the top value, or raise without touching anything.
        '''
        if not self._values:
            raise EmptyStackError()
        value = self._values.pop()
        # Remove the mark if we've gone below it.
        if len(self._values) < self.mark:
            self.mark = 0
        return value

    def popn(self, n):
        '''
        Pop specified number of values, topmost first.

        Raises, popping nothing, if there are not enough.
        '''
        if len(self._values) < n:
            raise EmptyStackError()
        return [self.pop() for _ in range(n)]

    def peek(self):
        '''
        Return the top value, or None if empty.
        '''
        return self._values[-1] if self._values else None

    def clear(self):
        self._values.clear()
        self.mark = 0

    def truncate(self, depth):
        '''
        Drop values until no deeper than depth.
        '''
        while len(self._values) > depth:
            self.pop()

    def mask_all(self):
        '''
        Re-mask every entry in place, e.g. after a word width change.
        '''
        self._values = deque(map(self.modes.mask, self._values))

    def convert(self, index, value):
        '''
        Replace an entry, counting from the bottom.
        '''
        self._values[index] = value

    def set_mark(self, n):
        '''
        Mark the stack so the top n values are above the mark.
        '''
        if not 0 <= n <= len(self._values):
            raise ValueError(n)
        self.mark = len(self._values) - n

    def clear_mark(self):
        self.mark = 0

    def above_mark(self):
        return len(self._values) - self.mark

    def __len__(self):
        return len(self._values)

    def __bool__(self):
        return bool(self._values)

    def __iter__(self):
        '''
        Values from the bottom of the stack to the top.
        '''
        return iter(list(self._values))
