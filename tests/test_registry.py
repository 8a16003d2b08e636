from pytest import raises

from rca.machine import Machine
from rca.registry import Associativity, Kind, Registry, Section, op


def noop(machine):
    pass


def test_duplicates_rejected():
    with raises(ValueError, match='Duplicate'):
        Registry([Section('one', (op('x', noop),)),
                  Section('two', (op('x', noop),))])


def test_lookup():
    registry = Registry([Section('Things:', (op('a', noop, 'help'),))])
    assert registry.lookup('a').section == 'Things:'
    assert registry.lookup('b') is None
    assert 'a' in registry
    assert len(registry) == 1


def test_defaults():
    assert op('u', noop, kind=Kind.UNARY).right_associative
    assert not op('b', noop, kind=Kind.BINARY).right_associative
    assert op('b', noop, kind=Kind.BINARY).arity == 2
    assert op('p', noop).arity == 0
    assert op('^', noop, kind=Kind.BINARY,
              associativity=Associativity.RIGHT).right_associative


def test_operator_table():
    operators = Machine.OPERATORS
    assert operators['^'].precedence == operators['**'].precedence == 22
    assert operators['*'].precedence > operators['+'].precedence
    assert operators['='].kind is Kind.ASSIGNMENT
    assert operators['s1'].kind is Kind.STORAGE
    assert operators['pi'].kind is Kind.SYMBOLIC
    assert operators['atan2'].arity == 2
    for name in 'quit', 'q', 'exit', 'help', '?':
        assert name in operators


def test_help_lines():
    lines = list(Machine.OPERATORS.help_lines())
    assert lines[0] == ' Numerical operators with two operands:'
    assert any(line.split() == ['+,', '-', 'Add', 'and', 'subtract', 'x',
                                'and', 'y']
               for line in lines)
    assert any('chs, or negate' in line for line in lines)


def test_precedence_lines():
    rows = [line.split() for line in Machine.OPERATORS.precedence_lines()]
    assert rows[0] == ['1', '(']
    assert rows[1][:2] == ['2', 'R']
    assert rows[2] == ['3', 'R', '^', '**']
    assert rows[-1] == ['14', '=']
