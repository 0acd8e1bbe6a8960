"""
Amount input helpers

Users type money amounts with thousands separators ("1,234.56").
These helpers keep what is shown in an input box and what is submitted in
sync:

    format_amount_for_display(1234.5)      -> '1,234.5'
    handle_amount_input_change('12a34.567') -> '1,234.56'
    parse_amount_from_display('1,234.56')  -> Decimal('1234.56')

The display formatters never emit more than two decimal digits.
"""

import re
from decimal import Decimal, InvalidOperation

from django import forms
from django.core.validators import MinValueValidator

NON_AMOUNT_CHARS = re.compile(r'[^0-9.]')
THOUSANDS_BOUNDARY = re.compile(r'\B(?=(\d{3})+(?!\d))')
LEADING_NUMBER = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def _to_text(value):
    if isinstance(value, Decimal):
        return format(value, 'f')
    return str(value)


def format_amount_for_display(value):
    """
    Format a number (or the current display string) for an amount input.

    Non numeric characters are dropped, the integer part gets commas and
    the decimal part is cut to two digits.
    """
    if value is None or value == '':
        return ''
    stripped = NON_AMOUNT_CHARS.sub('', _to_text(value))
    int_part, _, dec_part = stripped.partition('.')
    if '.' in dec_part:
        dec_part = dec_part.split('.')[0]
    with_commas = THOUSANDS_BOUNDARY.sub(',', int_part)
    if dec_part == '':
        return with_commas
    return f'{with_commas}.{dec_part[:2]}'


def parse_amount_from_display(display):
    """Parse a display string (with commas) back to a Decimal. Invalid input is 0."""
    if not display or not str(display).strip():
        return Decimal('0')
    cleaned = str(display).replace(',', '').strip()
    match = LEADING_NUMBER.match(cleaned)
    if not match:
        return Decimal('0')
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return Decimal('0')


def handle_amount_input_change(next_value):
    """
    Normalize a raw keystroke result: digits and a single dot, at most two
    decimals, formatted with commas.
    """
    allowed = NON_AMOUNT_CHARS.sub('', next_value or '')
    if allowed.count('.') > 1:
        first_dot = allowed.index('.')
        allowed = allowed[:first_dot + 1] + allowed[first_dot + 1:].replace('.', '')
    int_part, dot, dec_part = allowed.partition('.')
    combined = f'{int_part}.{dec_part[:2]}' if dot else int_part
    return format_amount_for_display('0' if combined == '.' else combined)


def format_with_commas(value):
    """
    Settings variant: add commas to the integer part and leave the decimals
    as typed. Input with more than one dot is returned untouched.
    """
    if not value:
        return ''
    clean = value.replace(',', '')
    if clean in ('.', ''):
        return clean
    parts = clean.split('.')
    if len(parts) > 2:
        return value
    parts[0] = THOUSANDS_BOUNDARY.sub(',', parts[0])
    return '.'.join(parts)


def parse_commas(value):
    return value.replace(',', '')


class AmountInput(forms.TextInput):
    """Text input that shows stored amounts with thousands separators"""

    def __init__(self, attrs=None, formatter=format_amount_for_display):
        default_attrs = {'inputmode': 'decimal', 'autocomplete': 'off', 'data-amount-input': ''}
        if attrs:
            default_attrs.update(attrs)
        super().__init__(default_attrs)
        self.formatter = formatter

    def format_value(self, value):
        # bound (re-displayed) data stays exactly as the user typed it
        if value is None or isinstance(value, str):
            return value or None
        return self.formatter(_to_text(value)) or None


class AmountField(forms.DecimalField):
    """
    DecimalField that accepts comma formatted input ("1,234.50").

    The minimum defaults to 0.01 (amounts must be positive); pass
    ``allow_zero=True`` for balances such as a goal's saved amount.
    ``min_message`` replaces the error shown below the minimum.
    """
    widget = AmountInput

    def __init__(self, *, allow_zero=False, min_message=None, **kwargs):
        kwargs.setdefault('max_digits', 12)
        kwargs.setdefault('decimal_places', 2)
        super().__init__(**kwargs)
        minimum = Decimal('0') if allow_zero else Decimal('0.01')
        self.validators.append(MinValueValidator(minimum, message=min_message))

    def to_python(self, value):
        if isinstance(value, str):
            value = parse_commas(value).strip()
        return super().to_python(value)
