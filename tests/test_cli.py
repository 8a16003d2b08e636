'''
Command line tests
'''

from pytest import fixture, raises

from rca import cli
from rca.cli import CLI


@fixture(autouse=True)
def environment(monkeypatch):
    monkeypatch.delenv(CLI.INIT_VARIABLE, raising=False)
    # No thousands separators in the output.
    monkeypatch.setenv('LC_ALL', 'C')


@fixture
def stdin(tmp_path, monkeypatch):
    '''
    Replace stdin with a real (non-tty) file holding the given text.
    '''
    opened = []

    def replace(text=''):
        path = tmp_path / 'stdin'
        path.write_text(text)
        f = open(path)
        opened.append(f)
        monkeypatch.setattr(cli, 'stdin', f)
    yield replace
    for f in opened:
        f.close()


def test_expressions(capsys):
    assert CLI().run(args=['-e', '2 3 +', '4 *']) == 0
    assert capsys.readouterr().out == ' 5\n 20\n'


def test_exit_status(capsys):
    assert CLI().run(args=['-e', '0']) == 1
    assert CLI().run(args=['-e', '1 pop']) == 2
    assert CLI().run(args=['-e']) == 2


def test_quit_status(capsys):
    assert CLI().run(args=['-e', '7 0 q', 'never']) == 1
    captured = capsys.readouterr()
    assert captured.out == ' 0\n'
    assert captured.err == ''


def test_errorexit(capsys):
    assert CLI().run(args=['-e', '1 errorexit', '1 0 /', '5']) == 4
    assert capsys.readouterr().err == ' error: division by zero\n'


def test_comments_and_grouping(capsys):
    assert CLI().run(args=['-e', '1,000 1 + # one more']) == 0
    assert capsys.readouterr().out == ' 1001\n'


def test_init_is_quiet(capsys, monkeypatch):
    monkeypatch.setenv(CLI.INIT_VARIABLE, '5 s1 7 p 4 k')
    assert CLI().run(args=['-e', 'r1']) == 0
    assert capsys.readouterr().out == ' 5\n'


def test_arguments_are_first_line(capsys, stdin):
    stdin('4 *\n')
    assert CLI().run(args=['2', '3', '+']) == 0
    assert capsys.readouterr().out == ' 5\n 20\n'


def test_negative_argument(capsys, stdin):
    stdin()
    assert CLI().run(args=['-3']) == 0
    assert capsys.readouterr().out == ''


def test_bad_option(capsys, stdin):
    stdin()
    with raises(SystemExit):
        CLI().run(args=['-x'])


def test_reads_stdin(capsys, stdin):
    stdin('1 2 +\n(_x = 3)\n_x *\n')
    assert CLI().run(args=[]) == 0
    assert capsys.readouterr().out == ' 3\n 3\n 9\n'


def test_raw_grammar(capsys, stdin):
    stdin()
    assert CLI().run(args=['-G']) == 0
    assert '(?<hex>' in capsys.readouterr().out


def test_dump(capsys):
    assert CLI().run(args=['-D', '-e', '1 sqrt']) == 0
    assert capsys.readouterr().out.splitlines() == [
        '<kind>\t<text>\t<arity>',
        "numeric\t'1'\t",
        "operator\t'sqrt'\t1",
        "EOL\t'EOL'\t",
    ]
