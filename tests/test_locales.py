import locale

from rca import locales
from rca.locales import Locale


def test_clean():
    assert Locale().clean('1,000 $5 + # comment') == '1000 5 + '


def test_clean_without_currency():
    assert Locale(currency=None).clean('$5') == '$5'


def conventions(**overrides):
    found = {
        'decimal_point': '.',
        'thousands_sep': '',
        'currency_symbol': '',
    }
    found.update(overrides)
    return lambda: found


def test_from_environment(monkeypatch):
    monkeypatch.setattr(locales.locale, 'setlocale', lambda *args: 'C')
    monkeypatch.setattr(locales.locale, 'localeconv', conventions())
    assert Locale.from_environment() == Locale('.', '', ',', '$')


def test_from_environment_european(monkeypatch):
    monkeypatch.setattr(locales.locale, 'setlocale', lambda *args: 'de_DE')
    monkeypatch.setattr(locales.locale, 'localeconv',
                        conventions(decimal_point=',',
                                    thousands_sep='.',
                                    currency_symbol='€'))
    assert Locale.from_environment() == Locale(',', '.', '.', '€')


def test_currency_colliding_with_commands(monkeypatch):
    monkeypatch.setattr(locales.locale, 'setlocale', lambda *args: 'xx')
    monkeypatch.setattr(locales.locale, 'localeconv',
                        conventions(currency_symbol='p'))
    assert Locale.from_environment(['pi', 'quit']).currency is None


def test_broken_locale(monkeypatch):
    def setlocale(*args):
        raise locale.Error('unsupported locale setting')
    monkeypatch.setattr(locales.locale, 'setlocale', setlocale)
    monkeypatch.setattr(locales.locale, 'localeconv', conventions())
    assert Locale.from_environment().decimal_point == '.'
