'''
Locale punctuation, and the cleanup of input lines that depends on it.
'''

import locale
from typing import NamedTuple, Optional


class Locale(NamedTuple):
    '''
    Numeric punctuation.

    thousands_sep is used for output only, thousands_sep_input only to strip
    grouping from input.
    '''
    decimal_point: str = '.'
    thousands_sep: str = ''
    thousands_sep_input: str = ','
    currency: Optional[str] = '$'

    @classmethod
    def from_environment(cls, names=()):
        '''
        Read the user's locale (LC_ALL etc).

        :param names: command names the currency symbol must not collide
                      with, since it is deleted from input lines.
        '''
        try:
            locale.setlocale(locale.LC_ALL, '')
        except locale.Error:
            pass
        conventions = locale.localeconv()
        decimal_point = conventions['decimal_point'] or '.'
        thousands_sep = conventions['thousands_sep']
        # Lets us strip commas from input even if the locale isn't set up.
        thousands_sep_input = thousands_sep
        if not thousands_sep_input and decimal_point == '.':
            thousands_sep_input = ','
        currency = conventions['currency_symbol']
        if not currency:
            currency = '$'
        elif currency.isascii() and any(currency in name for name in names):
            currency = None
        return cls(decimal_point, thousands_sep, thousands_sep_input,
                   currency)

    def clean(self, line):
        '''
        Drop comments, digit grouping and currency symbols from a line.
        '''
        line = line.split('#', 1)[0]
        if self.thousands_sep_input:
            line = line.replace(self.thousands_sep_input, '')
        if self.currency:
            line = line.replace(self.currency, '')
        return line


DEFAULT = Locale()
