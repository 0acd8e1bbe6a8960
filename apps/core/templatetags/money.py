from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django import template

register = template.Library()

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'GHS': 'GH₵',
    'NGN': '₦',
}


def format_currency(value, code='USD'):
    """-1234.5, 'USD' -> '-$1,234.50'"""
    try:
        amount = Decimal(str(value if value is not None else 0))
    except (InvalidOperation, ValueError, TypeError):
        amount = Decimal('0')
    amount = amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    code = (code or 'USD').upper()
    symbol = CURRENCY_SYMBOLS.get(code, f'{code} ')
    sign = '-' if amount < 0 else ''
    return f"{sign}{symbol}{abs(amount):,.2f}"


@register.filter(name='currency')
def currency(value, code='USD'):
    return format_currency(value, code)


@register.filter
def percent_width(value):
    """Clamp a percentage to 0..100 for progress bar widths"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, round(number, 1)))
