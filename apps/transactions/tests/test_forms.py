from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from apps.transactions.forms import TransactionForm


def form_data(category, **overrides):
    data = {
        'type': category.type,
        'amount': '1,250.75',
        'category': category.pk,
        'date': timezone.localdate().isoformat(),
        'description': 'Rent share',
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestTransactionForm:
    def test_valid_with_comma_amount(self, test_user, expense_category):
        form = TransactionForm(data=form_data(expense_category), user=test_user)

        assert form.is_valid(), form.errors
        assert form.cleaned_data['amount'] == Decimal('1250.75')

        tx = form.save()
        assert tx.user == test_user

    @pytest.mark.parametrize('amount', ['0', '-5', 'abc', ''])
    def test_invalid_amount(self, test_user, expense_category, amount):
        form = TransactionForm(data=form_data(expense_category, amount=amount), user=test_user)
        assert not form.is_valid()
        assert 'amount' in form.errors

    def test_invalid_amount_message(self, test_user, expense_category):
        form = TransactionForm(data=form_data(expense_category, amount='0'), user=test_user)
        form.is_valid()
        assert form.errors['amount'] == ['Enter a valid amount.']

    def test_category_type_must_match(self, test_user, income_category):
        form = TransactionForm(data=form_data(income_category, type='expense'), user=test_user)

        assert not form.is_valid()
        assert form.errors['category'] == ['Choose an expense category for this transaction.']

    def test_other_users_category_not_selectable(self, test_user, other_category):
        form = TransactionForm(data=form_data(other_category), user=test_user)

        assert not form.is_valid()
        assert 'category' in form.errors

    def test_category_choices_are_deduplicated(self, test_user, expense_category):
        from apps.transactions.models import Category
        Category.objects.create(user=test_user, name='food / groceries', type='expense')

        form = TransactionForm(user=test_user)
        names = [c.name.lower() for c in form.fields['category'].queryset]

        assert names.count('food / groceries') == 1

    def test_date_defaults_to_today(self, test_user):
        form = TransactionForm(user=test_user)
        assert form.fields['date'].initial == timezone.localdate()

    def test_description_optional(self, test_user, expense_category):
        form = TransactionForm(data=form_data(expense_category, description=''), user=test_user)
        assert form.is_valid(), form.errors


@pytest.mark.django_db
class TestReceiptValidation:
    def _form(self, user, category, upload):
        return TransactionForm(data=form_data(category), files={'receipt': upload}, user=user)

    @pytest.mark.parametrize('name, content_type', [
        ('receipt.png', 'image/png'),
        ('receipt.JPG', 'image/jpeg'),
        ('receipt.jpeg', 'image/jpeg'),
        ('receipt.pdf', 'application/pdf'),
    ])
    def test_allowed_types(self, test_user, expense_category, name, content_type):
        upload = SimpleUploadedFile(name, b'data', content_type=content_type)
        form = self._form(test_user, expense_category, upload)
        assert form.is_valid(), form.errors

    @pytest.mark.parametrize('name', ['receipt.gif', 'notes.txt', 'archive.zip'])
    def test_other_types_rejected(self, test_user, expense_category, name):
        upload = SimpleUploadedFile(name, b'data', content_type='application/octet-stream')
        form = self._form(test_user, expense_category, upload)

        assert not form.is_valid()
        assert 'Only PNG, JPG, and PDF receipts are allowed.' in form.errors['receipt']

    def test_size_limit(self, settings, test_user, expense_category):
        settings.RECEIPT_MAX_BYTES = 1024 * 1024
        upload = SimpleUploadedFile('big.png', b'0' * (1024 * 1024 + 1), content_type='image/png')
        form = self._form(test_user, expense_category, upload)

        assert not form.is_valid()
        assert form.errors['receipt'] == ['Receipts cannot be larger than 1MB.']
