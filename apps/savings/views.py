import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import IntegrityError
from django.shortcuts import render, redirect, get_object_or_404
from django.views.decorators.http import require_POST

from .forms import SavingsGoalForm, SavingsGoalUpdateForm, ContributeForm
from .models import SavingsGoal

logger = logging.getLogger(__name__)


@login_required
def goal_list(request):
    """Goals with progress; ``search`` filters by name"""
    search = request.GET.get('search', '').strip()
    goals = SavingsGoal.objects.filter(user=request.user).search(search)

    context = {
        'goals': goals,
        'search': search,
        'form': SavingsGoalForm(user=request.user),
    }
    return render(request, 'savings/goal_list.html', context)


@login_required
def goal_create(request):
    if request.method == 'POST':
        form = SavingsGoalForm(request.POST, user=request.user)
        if form.is_valid():
            try:
                goal = form.save()
            except IntegrityError as e:
                logger.error(f"Goal save failed: user_id={request.user.id}, error={e}")
                messages.error(request, 'Failed to add goal.')
            else:
                logger.info(f"Savings goal created: id={goal.pk}, user_id={request.user.id}")
                messages.success(request, f"'{goal.name}' added.")
                return redirect('savings:goal_list')
    else:
        form = SavingsGoalForm(user=request.user)

    return render(request, 'savings/goal_form.html', {
        'form': form,
        'title': 'Add goal',
    })


@login_required
def goal_update(request, pk):
    """Edit a goal; the page also carries the add-to-goal form"""
    goal = get_object_or_404(SavingsGoal, pk=pk, user=request.user)

    if request.method == 'POST':
        form = SavingsGoalUpdateForm(request.POST, instance=goal, user=request.user)
        if form.is_valid():
            try:
                form.save()
            except IntegrityError as e:
                logger.error(f"Goal update failed: id={goal.pk}, error={e}")
                messages.error(request, 'Failed to update.')
            else:
                messages.success(request, 'Goal updated.')
                return redirect('savings:goal_list')
    else:
        form = SavingsGoalUpdateForm(instance=goal, user=request.user)

    return render(request, 'savings/goal_form.html', {
        'form': form,
        'goal': goal,
        'contribute_form': ContributeForm(goal=goal),
        'title': 'Edit goal',
    })


@login_required
@require_POST
def goal_contribute(request, pk):
    """Add an amount to the goal's saved balance"""
    goal = get_object_or_404(SavingsGoal, pk=pk, user=request.user)
    form = ContributeForm(request.POST, goal=goal)

    if not form.is_valid():
        for error in form.errors.get('amount', []):
            messages.error(request, error)
        return redirect('savings:goal_update', pk=goal.pk)

    if not goal.contribute(form.cleaned_data['amount']):
        messages.error(request, 'Enter a valid amount to add.')
        return redirect('savings:goal_update', pk=goal.pk)

    logger.info(f"Savings contribution: goal_id={goal.pk}, amount={form.cleaned_data['amount']}")
    messages.success(request, f"Added to '{goal.name}'.")
    return redirect('savings:goal_update', pk=goal.pk)


@login_required
def goal_delete(request, pk):
    goal = get_object_or_404(SavingsGoal, pk=pk, user=request.user)

    if request.method == 'POST':
        goal_name = goal.name
        goal.delete()
        logger.info(f"Savings goal deleted: id={pk}, user_id={request.user.id}")
        messages.success(request, f"'{goal_name}' deleted.")
        return redirect('savings:goal_list')

    return render(request, 'savings/goal_confirm_delete.html', {'goal': goal})
