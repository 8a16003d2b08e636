'''
Operator descriptors and the name lookup table built from them.
'''

from enum import Enum
from typing import Callable, NamedTuple, Optional


class Kind(Enum):
    # Manipulates the calculator itself, e.g. mode switches, dup.
    PSEUDO = 'pseudo'
    UNARY = 'unary'
    BINARY = 'binary'
    # A named number, like pi, or r1.
    SYMBOLIC = 'symbolic'
    # Can be assigned to, like s1.
    STORAGE = 'storage'
    # "=": its right hand side is whatever follows it.
    ASSIGNMENT = 'assignment'


class Associativity(Enum):
    LEFT = 'left'
    RIGHT = 'right'


class Operator(NamedTuple):
    name: str
    function: Callable
    help: Optional[str] = None
    kind: Kind = Kind.PSEUDO
    precedence: int = 0
    associativity: Associativity = Associativity.LEFT
    section: str = ''

    @property
    def arity(self):
        '''
        Number of operands, as seen by infix expressions.
        '''
        if self.kind is Kind.UNARY:
            return 1
        elif self.kind in (Kind.BINARY, Kind.ASSIGNMENT):
            return 2
        return 0

    @property
    def right_associative(self):
        return self.associativity is Associativity.RIGHT


def op(name, function, help=None, kind=Kind.PSEUDO, precedence=0,
       associativity=None):
    '''
    Shorthand for table entries.

    Unary operators always associate right to left. A help of None shares
    the help of the next entry.
    '''
    if associativity is None:
        associativity = (Associativity.RIGHT
                         if kind is Kind.UNARY
                         else Associativity.LEFT)
    return Operator(name, function, help, kind, precedence, associativity)


class Section(NamedTuple):
    title: str
    operators: tuple


class Registry:
    '''
    Read-only table of operators, by unique name.
    '''

    def __init__(self, sections):
        self.sections = []
        self._by_name = dict()
        for title, operators in sections:
            operators = tuple(operator._replace(section=title)
                              for operator
                              in operators)
            for operator in operators:
                if operator.name in self._by_name:
                    raise ValueError('Duplicate operator {}'
                                     .format(repr(operator.name)))
                self._by_name[operator.name] = operator
            self.sections.append(Section(title, operators))

    def lookup(self, name):
        '''
        Return the operator with exactly this name, or None.
        '''
        return self._by_name.get(name)

    def __getitem__(self, name):
        return self._by_name[name]

    def __contains__(self, name):
        return name in self._by_name

    def __iter__(self):
        '''
        Yield operators in table order.
        '''
        for section in self.sections:
            yield from section.operators

    def __len__(self):
        return len(self._by_name)

    def names(self):
        return list(self._by_name)

    def help_lines(self):
        '''
        Yield help text, operators sharing help joined on one line.
        '''
        for title, operators in self.sections:
            yield ' ' + title
            names = ''
            previous = None
            for operator in operators:
                if names:
                    if operator.function is previous and operator.help:
                        names += ', or '
                    else:
                        names += ', '
                names += operator.name
                if operator.help is not None:
                    yield '{:>21}     {}'.format(' ' + names, operator.help)
                    names = ''
                previous = operator.function
            yield ''

    def precedence_lines(self):
        '''
        Yield infix precedence rows, highest first.
        '''
        rows = dict()
        for operator in self:
            if operator.precedence:
                rows.setdefault(operator.precedence, []).append(operator)
        for number, precedence in enumerate(sorted(rows, reverse=True), 1):
            operators = rows[precedence]
            marker = 'R' if any(operator.right_associative
                                for operator
                                in operators
                                if operator.kind is not Kind.PSEUDO) else ' '
            yield ' {:<2}  {}     {}'.format(number, marker,
                                            ' '.join(operator.name
                                                     for operator
                                                     in operators))
