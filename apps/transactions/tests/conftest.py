"""
Transaction fixtures
"""
import pytest
from decimal import Decimal
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from apps.transactions.models import Transaction


@pytest.fixture
def expense(test_user, expense_category):
    return Transaction.objects.create(
        user=test_user,
        category=expense_category,
        type='expense',
        amount=Decimal('42.50'),
        date=timezone.localdate(),
        description='Weekly groceries',
    )


@pytest.fixture
def receipt_file():
    """Small fake PNG upload"""
    return SimpleUploadedFile('lunch.png', b'\x89PNG\r\n\x1a\n' + b'0' * 64, content_type='image/png')
