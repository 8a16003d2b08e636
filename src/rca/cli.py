from os import environ, isatty
from sys import stdin, stdout, stderr, exit
from io import StringIO
from itertools import chain
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter

from .locales import Locale
from .machine import Machine
from .util import Quit


class InteractiveInput:
    def __init__(self, prompt, words=()):
        self.prompt = prompt
        self.words = list(words)

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=None,
                                    # Operator names; sentence mode so that
                                    # punctuation operators complete too.
                                    completer=WordCompleter(self.words,
                                                            sentence=True),
                                    complete_while_typing=False,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.
    '''

    DEFAULT_PROMPT = '> '
    INIT_VARIABLE = 'RCA_INIT'
    LOG_FORMAT = '%(levelname)s %(name)s: %(message)s'

    def dumper(self):
        '''
        Dump all tokens of each line: kind, text, and arity.
        '''
        machine = self._machine()
        print('<kind>\t<text>\t<arity>')
        for line in self.args.expressions:
            for token in machine.lexer.lex(self.locale.clean(line)):
                operator = token.operator
                print(token.kind.value,
                      token.describe(),
                      operator.arity if operator is not None else '',
                      sep='\t')
        return 0

    def executor(self):
        '''
        Run machine (RPN calculator), returning its exit status.
        '''
        machine = self._machine()
        try:
            init = environ.get(type(self).INIT_VARIABLE)
            if init:
                # Startup commands shouldn't chatter.
                out, machine.out = machine.out, StringIO()
                try:
                    self._feed(machine, [init])
                finally:
                    machine.out = out
            self._feed(machine, self._lines())
        except Quit as e:
            return e.status
        # Running out of input is an implicit quit, without the autoprint.
        return machine.exit_status()

    def raw_grammar(self):
        '''
        Print current internally defined number grammar.
        '''
        lexer = self._machine().lexer
        print(lexer.grammar)
        return 0

    def _machine(self):
        return Machine(locale=self.locale, verbose=self.args.verbose)

    def _feed(self, machine, lines):
        for line in lines:
            machine.feed_line(self.locale.clean(line.rstrip('\n')))

    def _lines(self):
        '''
        Command line arguments are the first line of input.
        '''
        if self.args.commands:
            return chain([' '.join(self.args.commands)],
                         self.args.expressions)
        return self.args.expressions

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    words=Machine.OPERATORS.names())
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            prog='rca',
            description='RPN calculator, with infix expressions')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='trace tokens and infix '
                                               'translation')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions',
                                       help='evaluate each argument as a '
                                            'line, then exit')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.add_argument('commands',
                                          nargs='*',
                                          help='first line of input')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Returns the exit status.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=(logging.INFO
                                   if self.args.verbose
                                   else logging.WARNING),
                            format=type(self).LOG_FORMAT,
                            stream=stderr)
        self.locale = Locale.from_environment(Machine.OPERATORS.names())
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            return self.args.action()
        except KeyboardInterrupt:
            exit(1)


def main():
    exit(CLI().run())
