"""
Aggregations for the dashboard and analytics pages

All functions take a Transaction queryset already filtered to one user.
Money values stay Decimal; chart_payload() converts them for Chart.js.
"""
import calendar
from datetime import date
from decimal import Decimal, ROUND_FLOOR

from django.db.models import Sum, Q
from django.db.models.functions import TruncMonth

from apps.transactions.models import TYPE_EXPENSE, TYPE_INCOME

ZERO = Decimal('0')
UNCATEGORIZED = 'Uncategorized'
GOAL_LABEL_LENGTH = 12


def round_half_up(value):
    """Nearest integer, halves toward +infinity (2.5 -> 3, -2.5 -> -2)"""
    return int((Decimal(value) + Decimal('0.5')).to_integral_value(rounding=ROUND_FLOOR))


def month_bounds(day):
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def month_starts(today, count):
    """First day of the last ``count`` months including today's, oldest first"""
    starts = []
    year, month = today.year, today.month
    for _ in range(count):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def days_left_in_month(today):
    return max(0, (month_bounds(today)[1] - today).days)


def totals_by_category(queryset, tx_type, limit=None):
    """[{'name', 'value'}] summed per category name, largest first"""
    rows = (
        queryset.filter(type=tx_type)
        .values('category__name')
        .annotate(value=Sum('amount'))
    )
    merged = {}
    for row in rows:
        name = row['category__name'] or UNCATEGORIZED
        merged[name] = merged.get(name, ZERO) + (row['value'] or ZERO)

    result = [{'name': name, 'value': value} for name, value in merged.items()]
    result.sort(key=lambda item: item['value'], reverse=True)
    return result[:limit] if limit else result


def monthly_series(queryset, today, count, with_balance=False):
    """
    Income / expenses per calendar month for the last ``count`` months

    Labels look like 'Oct 26'. Months without transactions are zero.
    """
    starts = month_starts(today, count)
    window_end = month_bounds(today)[1]

    stats = (
        queryset.filter(date__gte=starts[0], date__lte=window_end)
        .annotate(month=TruncMonth('date'))
        .values('month')
        .annotate(
            income=Sum('amount', filter=Q(type=TYPE_INCOME)),
            expenses=Sum('amount', filter=Q(type=TYPE_EXPENSE)),
        )
        .order_by('month')
    )
    stats_by_month = {item['month']: item for item in stats}

    series = []
    for start in starts:
        item = stats_by_month.get(start, {})
        income = item.get('income') or ZERO
        expenses = item.get('expenses') or ZERO
        row = {'month': start.strftime('%b %y'), 'income': income, 'expenses': expenses}
        if with_balance:
            row['balance'] = income - expenses
        series.append(row)
    return series


def savings_rate(gross, total_expenses):
    """Percent of gross income left after expenses; 0 without gross income"""
    if not gross or gross <= 0:
        return 0
    return round_half_up((gross - total_expenses) / gross * 100)


def savings_progress(goals):
    rows = []
    for goal in goals:
        name = goal.name
        if len(name) > GOAL_LABEL_LENGTH:
            name = name[:GOAL_LABEL_LENGTH] + '…'
        pct = 0
        if goal.target_amount > 0:
            pct = round_half_up(goal.current_amount / goal.target_amount * 100)
        rows.append({
            'name': name,
            'current': goal.current_amount,
            'target': goal.target_amount,
            'pct': pct,
        })
    return rows


def chart_payload(rows, keys):
    """Rows for json_script: Decimal values become floats"""
    payload = []
    for row in rows:
        payload.append({
            key: float(row[key]) if isinstance(row[key], Decimal) else row[key]
            for key in keys
        })
    return payload
