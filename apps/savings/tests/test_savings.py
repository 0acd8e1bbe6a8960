from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse

from apps.savings.forms import ContributeForm, SavingsGoalForm, SavingsGoalUpdateForm
from apps.savings.models import SavingsGoal, progress_color


@pytest.fixture
def goal(test_user):
    return SavingsGoal.objects.create(
        user=test_user, name='Emergency fund', target_amount=Decimal('1000'), current_amount=Decimal('250')
    )


@pytest.mark.parametrize('percent, color', [
    (100, 'green-strong'),
    (66, 'green'),
    (65.9, 'amber'),
    (33, 'amber'),
    (32.9, 'red'),
    (0, 'red'),
])
def test_progress_color(percent, color):
    assert progress_color(percent) == color


@pytest.mark.django_db
class TestSavingsGoalModel:
    def test_progress_percent(self, goal):
        assert goal.progress_percent == 25
        assert goal.progress_color == 'red'

    def test_progress_capped_at_100(self, goal):
        goal.current_amount = Decimal('1500')
        assert goal.progress_percent == 100
        assert goal.progress_color == 'green-strong'

    def test_zero_target_is_zero_progress(self):
        assert SavingsGoal(target_amount=Decimal('0'), current_amount=Decimal('5')).progress_percent == 0

    def test_contribute(self, goal):
        goal.contribute(Decimal('100.50'))
        assert goal.current_amount == Decimal('350.50')
        goal.refresh_from_db()
        assert goal.current_amount == Decimal('350.50')

    def test_contribute_past_column_limit_changes_nothing(self, goal):
        goal.current_amount = Decimal('9999999999.00')
        goal.save()

        assert goal.contribute(Decimal('1')) is False
        goal.refresh_from_db()
        assert goal.current_amount == Decimal('9999999999.00')


@pytest.mark.django_db
class TestSavingsForms:
    def test_blank_name_becomes_new_goal(self, test_user):
        form = SavingsGoalForm(data={'name': '  ', 'target_amount': '5,000', 'deadline': ''}, user=test_user)

        assert form.is_valid(), form.errors
        goal = form.save()
        assert goal.name == 'New goal'
        assert goal.current_amount == Decimal('0')
        assert goal.deadline is None

    @pytest.mark.parametrize('target', ['0', '-10', 'abc', ''])
    def test_invalid_target(self, test_user, target):
        form = SavingsGoalForm(data={'name': 'Car', 'target_amount': target}, user=test_user)

        assert not form.is_valid()
        assert form.errors['target_amount'] == ['Enter a valid target amount.']

    def test_update_blank_name_keeps_old(self, goal):
        form = SavingsGoalUpdateForm(
            data={'name': '', 'target_amount': '1,000', 'current_amount': '300', 'deadline': ''},
            instance=goal,
        )

        assert form.is_valid(), form.errors
        form.save()
        goal.refresh_from_db()
        assert goal.name == 'Emergency fund'
        assert goal.current_amount == Decimal('300')

    def test_update_negative_current(self, goal):
        form = SavingsGoalUpdateForm(
            data={'name': 'X', 'target_amount': '1000', 'current_amount': '-1', 'deadline': ''},
            instance=goal,
        )
        assert not form.is_valid()
        assert form.errors['current_amount'] == ['Current amount cannot be negative.']

    def test_update_blank_deadline_clears(self, goal):
        goal.deadline = date(2027, 1, 1)
        goal.save()
        form = SavingsGoalUpdateForm(
            data={'name': goal.name, 'target_amount': '1000', 'current_amount': '250', 'deadline': ''},
            instance=goal,
        )

        assert form.is_valid(), form.errors
        form.save()
        goal.refresh_from_db()
        assert goal.deadline is None

    @pytest.mark.parametrize('amount, valid', [
        ('1,250.5', True),
        ('0.01', True),
        ('0', False),
        ('0.004', False),
        ('-5', False),
        ('abc', False),
        ('', False),
    ])
    def test_contribute_form(self, amount, valid):
        form = ContributeForm(data={'amount': amount})
        assert form.is_valid() is valid
        if not valid:
            assert form.errors['amount'] == ['Enter a valid amount to add.']

    def test_contribute_form_rejects_overflowing_balance(self, goal):
        goal.current_amount = Decimal('9999999999.00')

        assert ContributeForm(data={'amount': '0.99'}, goal=goal).is_valid()
        form = ContributeForm(data={'amount': '1'}, goal=goal)
        assert not form.is_valid()
        assert form.errors['amount'] == ['Enter a valid amount to add.']


@pytest.mark.django_db
class TestSavingsViews:
    def test_list_search(self, auth_client, test_user, goal):
        SavingsGoal.objects.create(user=test_user, name='New laptop', target_amount=Decimal('1200'))
        url = reverse('savings:goal_list')

        names = [g.name for g in auth_client.get(url, {'search': 'EMERGENCY'}).context['goals']]
        assert names == ['Emergency fund']
        assert len(auth_client.get(url).context['goals']) == 2

    def test_list_only_own(self, auth_client, other_user, goal):
        SavingsGoal.objects.create(user=other_user, name='Not mine', target_amount=Decimal('10'))
        names = [g.name for g in auth_client.get(reverse('savings:goal_list')).context['goals']]
        assert names == ['Emergency fund']

    def test_create(self, auth_client, test_user):
        response = auth_client.post(reverse('savings:goal_create'), {'name': 'Holiday', 'target_amount': '2,000'})

        assert response.status_code == 302
        assert SavingsGoal.objects.get(user=test_user).target_amount == Decimal('2000')

    def test_contribute(self, auth_client, goal):
        response = auth_client.post(reverse('savings:goal_contribute', args=[goal.pk]), {'amount': '1,000'})

        assert response.status_code == 302
        goal.refresh_from_db()
        assert goal.current_amount == Decimal('1250')

    def test_contribute_invalid(self, auth_client, goal):
        response = auth_client.post(reverse('savings:goal_contribute', args=[goal.pk]), {'amount': '0'}, follow=True)

        goal.refresh_from_db()
        assert goal.current_amount == Decimal('250')
        assert 'Enter a valid amount to add.' in [str(m) for m in response.context['messages']]

    def test_contribute_rounding_to_zero_is_rejected(self, auth_client, goal):
        response = auth_client.post(reverse('savings:goal_contribute', args=[goal.pk]), {'amount': '0.004'}, follow=True)

        goal.refresh_from_db()
        assert goal.current_amount == Decimal('250')
        assert 'Enter a valid amount to add.' in [str(m) for m in response.context['messages']]

    def test_contribute_overflow_keeps_pages_working(self, auth_client, goal):
        SavingsGoal.objects.filter(pk=goal.pk).update(current_amount=Decimal('9999999999.00'))

        response = auth_client.post(reverse('savings:goal_contribute', args=[goal.pk]), {'amount': '1'}, follow=True)

        assert 'Enter a valid amount to add.' in [str(m) for m in response.context['messages']]
        goal.refresh_from_db()
        assert goal.current_amount == Decimal('9999999999.00')
        assert auth_client.get(reverse('savings:goal_list')).status_code == 200
        assert auth_client.get(reverse('analytics')).status_code == 200

    def test_contribute_requires_post(self, auth_client, goal):
        assert auth_client.get(reverse('savings:goal_contribute', args=[goal.pk])).status_code == 405

    def test_delete_after_confirm(self, auth_client, goal):
        url = reverse('savings:goal_delete', args=[goal.pk])

        assert auth_client.get(url).status_code == 200
        auth_client.post(url)
        assert not SavingsGoal.objects.filter(pk=goal.pk).exists()

    @pytest.mark.parametrize('name', ['savings:goal_update', 'savings:goal_contribute', 'savings:goal_delete'])
    def test_other_users_goal_is_404(self, client, other_user, goal, name):
        client.login(username='other@example.com', password='Budget-Plan-2026!')

        response = client.post(reverse(name, args=[goal.pk]), {'amount': '10'})

        assert response.status_code == 404
        goal.refresh_from_db()
        assert goal.current_amount == Decimal('250')
