import calendar
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import IntegrityError
from django.shortcuts import render, redirect, get_object_or_404
from django.utils import timezone

from apps.transactions.categories import categories_by_type, ensure_defaults
from apps.transactions.models import TYPE_EXPENSE
from .forms import BudgetForm
from .models import Budget

logger = logging.getLogger(__name__)


def current_month_range(today=None):
    """(first day, last day) of the month containing ``today``"""
    today = today or timezone.localdate()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


@login_required
def budget_list(request):
    budgets = Budget.objects.filter(user=request.user).with_relations().with_spent()

    context = {
        'budgets': budgets,
        'total_budget': budgets.total_amount(),
    }
    return render(request, 'budgets/budget_list.html', context)


@login_required
def budget_create(request):
    if request.method == 'POST':
        form = BudgetForm(request.POST, user=request.user)
        if form.is_valid():
            try:
                budget = form.save()
            except IntegrityError as e:
                logger.error(f"Budget save failed: user_id={request.user.id}, error={e}")
                messages.error(request, 'Failed to save the budget.')
            else:
                logger.info(f"Budget created: id={budget.pk}, user_id={request.user.id}")
                messages.success(request, 'Budget successfully added')
                return redirect('budgets:budget_list')
    else:
        start_date, end_date = current_month_range()
        expense_categories = categories_by_type(ensure_defaults(request.user), TYPE_EXPENSE)
        initial = {
            'category': expense_categories[0].pk if expense_categories else None,
            'start_date': start_date,
            'end_date': end_date,
        }
        form = BudgetForm(initial=initial, user=request.user)

    return render(request, 'budgets/budget_form.html', {
        'form': form,
        'title': 'Add budget',
    })


@login_required
def budget_update(request, pk):
    budget = get_object_or_404(Budget, pk=pk, user=request.user)

    if request.method == 'POST':
        form = BudgetForm(request.POST, instance=budget, user=request.user)
        if form.is_valid():
            form.save()
            messages.success(request, 'Budget updated.')
            return redirect('budgets:budget_list')
    else:
        form = BudgetForm(instance=budget, user=request.user)

    return render(request, 'budgets/budget_form.html', {
        'form': form,
        'budget': budget,
        'title': 'Edit budget',
    })


@login_required
def budget_delete(request, pk):
    budget = get_object_or_404(Budget, pk=pk, user=request.user)

    if request.method == 'POST':
        budget.delete()
        logger.info(f"Budget deleted: id={pk}, user_id={request.user.id}")
        messages.success(request, 'Budget deleted.')
        return redirect('budgets:budget_list')

    return render(request, 'budgets/budget_confirm_delete.html', {'budget': budget})
