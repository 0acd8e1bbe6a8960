from decimal import Decimal

import pytest
from django.template import Context, Template

from apps.core.templatetags.money import format_currency, percent_width


class TestCurrencyFilter:
    @pytest.mark.parametrize('value, code, expected', [
        (Decimal('1234.5'), 'USD', '$1,234.50'),
        (Decimal('-1234.5'), 'USD', '-$1,234.50'),
        (10, 'EUR', '€10.00'),
        (0, 'GBP', '£0.00'),
        (Decimal('2500'), 'GHS', 'GH₵2,500.00'),
        (Decimal('99.999'), 'NGN', '₦100.00'),
        (5, 'JPY', 'JPY 5.00'),
        (None, 'USD', '$0.00'),
        ('not a number', 'USD', '$0.00'),
    ])
    def test_format_currency(self, value, code, expected):
        assert format_currency(value, code) == expected

    def test_lowercase_code(self):
        assert format_currency(1, 'eur') == '€1.00'

    def test_template_usage(self):
        template = Template('{% load money %}{{ amount|currency:code }}')
        rendered = template.render(Context({'amount': Decimal('42'), 'code': 'USD'}))
        assert rendered == '$42.00'


class TestPercentWidth:
    @pytest.mark.parametrize('value, expected', [
        (50, 50),
        (150, 100),
        (-10, 0),
        (33.333, 33.3),
        ('abc', 0),
        (None, 0),
    ])
    def test_clamped(self, value, expected):
        assert percent_width(value) == expected
