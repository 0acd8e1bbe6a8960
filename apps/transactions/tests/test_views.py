from decimal import Decimal

import openpyxl
import pytest
from io import BytesIO
from django.urls import reverse
from django.utils import timezone

from apps.accounts.models import UserSettings
from apps.transactions.categories import DEFAULT_CATEGORIES
from apps.transactions.models import Category, Transaction


def post_data(category, **overrides):
    data = {
        'type': category.type,
        'amount': '2,000',
        'category': category.pk,
        'date': timezone.localdate().isoformat(),
        'description': 'Monthly rent',
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestTransactionList:
    def test_requires_login(self, client):
        response = client.get(reverse('transactions:transaction_list'))
        assert response.status_code == 302
        assert '/accounts/login/' in response.url

    def test_seeds_default_categories(self, auth_client, test_user):
        response = auth_client.get(reverse('transactions:transaction_list'))

        assert response.status_code == 200
        assert Category.objects.filter(user=test_user).count() == len(DEFAULT_CATEGORIES)

    def test_only_own_transactions(self, auth_client, expense, other_user, other_category):
        Transaction.objects.create(user=other_user, category=other_category, amount=Decimal('999'))

        response = auth_client.get(reverse('transactions:transaction_list'))

        assert list(response.context['page_obj']) == [expense]

    def test_search_description_and_category(self, auth_client, test_user, expense, income_category):
        salary = Transaction.objects.create(
            user=test_user, category=income_category, type='income', amount=Decimal('3000'), description='March pay'
        )
        url = reverse('transactions:transaction_list')

        assert list(auth_client.get(url, {'search': 'GROCERIES'}).context['page_obj']) == [expense]
        assert list(auth_client.get(url, {'search': 'salary'}).context['page_obj']) == [salary]
        assert list(auth_client.get(url, {'search': 'nothing here'}).context['page_obj']) == []

    def test_summary_adds_gross_income(self, auth_client, test_user, expense, income_category):
        Transaction.objects.create(user=test_user, category=income_category, type='income', amount=Decimal('500'))
        UserSettings.objects.filter(user=test_user).update(gross_income=Decimal('1000'))

        summary = auth_client.get(reverse('transactions:transaction_list')).context['summary']

        assert summary['total_income'] == Decimal('1500')
        assert summary['total_expenses'] == Decimal('42.50')
        assert summary['remaining'] == Decimal('1457.50')
        assert summary['is_red_line'] is False

    def test_summary_ignores_search(self, auth_client, expense):
        summary = auth_client.get(reverse('transactions:transaction_list'), {'search': 'zzz'}).context['summary']
        assert summary['total_expenses'] == Decimal('42.50')

    @pytest.mark.parametrize('red_line, expected', [
        (None, False),
        (Decimal('0'), False),
        (Decimal('957.50'), True),
        (Decimal('2000'), True),
    ])
    def test_red_line(self, auth_client, test_user, expense, red_line, expected):
        UserSettings.objects.filter(user=test_user).update(gross_income=Decimal('1000'), red_line_amount=red_line)

        summary = auth_client.get(reverse('transactions:transaction_list')).context['summary']

        # remaining is 957.50; equal counts as reached
        assert summary['is_red_line'] is expected


@pytest.mark.django_db
class TestTransactionCreate:
    def test_get_preselects_housing(self, auth_client):
        response = auth_client.get(reverse('transactions:transaction_create'))

        category_id = response.context['form'].initial['category']
        assert Category.objects.get(pk=category_id).name == 'Housing / Rent'

    def test_create(self, auth_client, test_user, expense_category):
        response = auth_client.post(reverse('transactions:transaction_create'), post_data(expense_category))

        assert response.status_code == 302
        tx = Transaction.objects.get(user=test_user)
        assert tx.amount == Decimal('2000')
        assert tx.category == expense_category

    def test_create_with_receipt(self, auth_client, test_user, expense_category, receipt_file):
        data = post_data(expense_category)
        data['receipt'] = receipt_file

        auth_client.post(reverse('transactions:transaction_create'), data)

        tx = Transaction.objects.get(user=test_user)
        assert tx.receipt.name.startswith(f'receipts/{test_user.pk}/')
        assert tx.receipt.name.endswith('-lunch.png')

    def test_invalid_rerenders(self, auth_client, test_user, expense_category):
        response = auth_client.post(reverse('transactions:transaction_create'), post_data(expense_category, amount='0'))

        assert response.status_code == 200
        assert response.context['form'].errors['amount'] == ['Enter a valid amount.']
        assert not Transaction.objects.filter(user=test_user).exists()


@pytest.mark.django_db
class TestTransactionUpdateDelete:
    def test_update(self, auth_client, expense, expense_category):
        url = reverse('transactions:transaction_update', args=[expense.pk])
        response = auth_client.post(url, post_data(expense_category, amount='55.10'))

        assert response.status_code == 302
        expense.refresh_from_db()
        assert expense.amount == Decimal('55.10')

    def test_update_form_shows_formatted_amount(self, auth_client, test_user, expense_category):
        tx = Transaction.objects.create(user=test_user, category=expense_category, amount=Decimal('1234.50'))
        response = auth_client.get(reverse('transactions:transaction_update', args=[tx.pk]))
        assert 'value="1,234.50"' in response.content.decode()

    def test_delete_needs_post(self, auth_client, expense):
        url = reverse('transactions:transaction_delete', args=[expense.pk])

        response = auth_client.get(url)
        assert response.status_code == 200
        assert Transaction.objects.filter(pk=expense.pk).exists()

        response = auth_client.post(url)
        assert response.status_code == 302
        assert not Transaction.objects.filter(pk=expense.pk).exists()

    @pytest.mark.parametrize('name', ['transactions:transaction_update', 'transactions:transaction_delete'])
    def test_other_users_transaction_is_404(self, client, other_user, expense, name):
        client.login(username='other@example.com', password='Budget-Plan-2026!')

        assert client.get(reverse(name, args=[expense.pk])).status_code == 404
        assert client.post(reverse(name, args=[expense.pk])).status_code == 404
        assert Transaction.objects.filter(pk=expense.pk).exists()


@pytest.mark.django_db
class TestTransactionExport:
    def test_xlsx_download(self, auth_client, expense):
        response = auth_client.get(reverse('transactions:transaction_export'))

        assert response.status_code == 200
        assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        assert response['Content-Disposition'].startswith('attachment; filename="transactions_')

        ws = openpyxl.load_workbook(BytesIO(response.content)).active
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0] == ('Date', 'Type', 'Category', 'Amount', 'Description', 'Receipt')
        assert rows[1][1:5] == ('Expense', 'Food / Groceries', 42.5, 'Weekly groceries')

    def test_only_own_rows(self, auth_client, expense, other_user, other_category):
        Transaction.objects.create(user=other_user, category=other_category, amount=Decimal('1'), description='not mine')

        response = auth_client.get(reverse('transactions:transaction_export'))
        ws = openpyxl.load_workbook(BytesIO(response.content)).active
        descriptions = [row[4] for row in ws.iter_rows(min_row=2, values_only=True)]

        assert 'not mine' not in descriptions

    def test_formula_like_text_exported_as_plain_text(self, auth_client, expense):
        expense.description = '=HYPERLINK("http://example.com","x")'
        expense.save()

        response = auth_client.get(reverse('transactions:transaction_export'))
        ws = openpyxl.load_workbook(BytesIO(response.content)).active
        cell = ws.cell(row=2, column=5)

        assert cell.data_type == 's'
        assert cell.value == '=HYPERLINK("http://example.com","x")'
