from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.utils import timezone

from apps.accounts.models import UserSettings
from apps.budgets.models import Budget
from apps.savings.models import SavingsGoal
from apps.transactions.categories import ensure_defaults
from apps.transactions.models import Transaction, TYPE_EXPENSE, TYPE_INCOME
from . import analytics as agg

DASHBOARD_MONTHS = 6
ANALYTICS_MONTHS = 12


@login_required
def dashboard(request):
    """Current month overview"""
    user = request.user
    today = timezone.localdate()
    ensure_defaults(user)
    user_settings = UserSettings.for_user(user)

    transactions = Transaction.objects.filter(user=user).with_relations()
    month_start, month_end = agg.month_bounds(today)
    this_month = transactions.by_date_range(month_start, month_end)
    totals = this_month.totals()

    gross = user_settings.gross_income or agg.ZERO
    spending = agg.totals_by_category(this_month, TYPE_EXPENSE)
    monthly_overview = agg.monthly_series(transactions, today, DASHBOARD_MONTHS)

    context = {
        'total_expenses': totals['expense'],
        'total_income_tx': totals['income'],
        'gross_income': gross,
        'total_balance': gross + totals['income'] - totals['expense'],
        'savings_rate': agg.savings_rate(gross, totals['expense']),
        'spending_by_category': spending,
        'monthly_overview': monthly_overview,
        'recent_transactions': transactions[:5],
        'days_left_in_month': agg.days_left_in_month(today),
        'month_label': today.strftime('%B %Y'),
        'spending_chart': agg.chart_payload(spending, ['name', 'value']),
        'overview_chart': agg.chart_payload(monthly_overview, ['month', 'income', 'expenses']),
    }
    return render(request, 'dashboard/dashboard.html', context)


@login_required
def analytics(request):
    """All-time spending, income and savings"""
    user = request.user
    today = timezone.localdate()
    transactions = Transaction.objects.filter(user=user)
    totals = transactions.totals()

    spending = agg.totals_by_category(transactions, TYPE_EXPENSE, limit=10)
    income = agg.totals_by_category(transactions, TYPE_INCOME, limit=8)
    monthly_data = agg.monthly_series(transactions, today, ANALYTICS_MONTHS, with_balance=True)
    savings = agg.savings_progress(SavingsGoal.objects.filter(user=user).order_by('created_at'))

    context = {
        'total_income': totals['income'],
        'total_expenses': totals['expense'],
        'net': totals['income'] - totals['expense'],
        'total_budget': Budget.objects.filter(user=user).total_amount(),
        'spending_by_category': spending,
        'income_by_category': income,
        'monthly_data': monthly_data,
        'savings_progress': savings,
        'spending_chart': agg.chart_payload(spending, ['name', 'value']),
        'income_chart': agg.chart_payload(income, ['name', 'value']),
        'monthly_chart': agg.chart_payload(monthly_data, ['month', 'income', 'expenses', 'balance']),
    }
    return render(request, 'dashboard/analytics.html', context)
