from io import StringIO

from pytest import Item, fixture

from rca.machine import Machine
from rca.modes import NumericMode


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    # Not bothering with make-style output that you can feed into a Vim
    # quickfix list and iterate over.
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          # Get rid of full-diff, -vv for full diff, etc.
          # TODO: Make work when multiline output.
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def out():
    return StringIO()


@fixture
def err():
    return StringIO()


@fixture
def machine(out, err):
    return Machine(out=out, err=err)


@fixture
def modes():
    return NumericMode()


@fixture
def calc(machine, out):
    '''
    Feed lines to the machine, returning only what they printed.
    '''
    def feed(*lines):
        out.seek(0)
        out.truncate()
        for line in lines:
            machine.feed_line(line)
        return out.getvalue()
    return feed
