"""
Shared pytest fixtures (users, logged-in client, media storage)
"""
import pytest
from django.contrib.auth.models import User

PASSWORD = 'Budget-Plan-2026!'


@pytest.fixture
def test_user(db):
    """Active user; username mirrors the email"""
    return User.objects.create_user(username='tester@example.com', email='tester@example.com', password=PASSWORD)


@pytest.fixture
def other_user(db):
    """Another user (access control tests)"""
    return User.objects.create_user(username='other@example.com', email='other@example.com', password=PASSWORD)


@pytest.fixture
def auth_client(client, test_user):
    """Client logged in as test_user"""
    client.login(username='tester@example.com', password=PASSWORD)
    return client


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Uploaded receipts go to a temporary directory"""
    settings.MEDIA_ROOT = tmp_path / 'media'
    return settings.MEDIA_ROOT


@pytest.fixture
def income_category(test_user):
    from apps.transactions.models import Category
    return Category.objects.create(user=test_user, name='Salary / Wages', type='income', color='#059669')


@pytest.fixture
def expense_category(test_user):
    from apps.transactions.models import Category
    return Category.objects.create(user=test_user, name='Food / Groceries', type='expense', color='#f59e0b')


@pytest.fixture
def other_category(other_user):
    from apps.transactions.models import Category
    return Category.objects.create(user=other_user, name='Food / Groceries', type='expense')
