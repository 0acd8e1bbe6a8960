import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db import IntegrityError
from django.db.models import Q
from django.http import HttpResponse
from django.shortcuts import render, redirect, get_object_or_404
from django.utils import timezone

from apps.accounts.models import UserSettings
from .categories import ensure_defaults, get_default_category_id
from .forms import TransactionForm, TransactionSearchForm
from .models import Transaction, TYPE_EXPENSE
from .utils import export_transactions_to_excel

logger = logging.getLogger(__name__)


def build_summary(user):
    """
    Totals over all of the user's transactions (search does not apply)

    total_income = gross income + recorded income
    remaining    = total_income - total_expenses
    """
    user_settings = UserSettings.for_user(user)
    totals = Transaction.objects.filter(user=user).totals()

    gross = user_settings.gross_income or 0
    total_income = gross + totals['income']
    remaining = total_income - totals['expense']
    red_line = user_settings.red_line_amount

    return {
        'gross_income': gross,
        'total_income_tx': totals['income'],
        'total_expenses': totals['expense'],
        'total_income': total_income,
        'remaining': remaining,
        'red_line_amount': red_line,
        'is_red_line': red_line is not None and remaining <= red_line,
    }


# ============================================================
# Transaction
# ============================================================

@login_required
def transaction_list(request):
    """Transaction list with search and the income / remaining summary"""
    ensure_defaults(request.user)
    transactions = Transaction.objects.filter(user=request.user).with_relations()

    search_form = TransactionSearchForm(request.GET)
    search = search_form.cleaned_data.get('search', '').strip() if search_form.is_valid() else ''
    if search:
        transactions = transactions.filter(
            Q(description__icontains=search) |
            Q(category__name__icontains=search)
        )

    paginator = Paginator(transactions, 20)
    page_obj = paginator.get_page(request.GET.get('page'))

    query_params = request.GET.copy()
    query_params.pop('page', None)

    context = {
        'page_obj': page_obj,
        'search_form': search_form,
        'search': search,
        'summary': build_summary(request.user),
        'querystring': query_params.urlencode(),
    }
    return render(request, 'transactions/transaction_list.html', context)


@login_required
def transaction_create(request):
    if request.method == 'POST':
        form = TransactionForm(request.POST, request.FILES, user=request.user)
        if form.is_valid():
            try:
                tx = form.save()
            except (IntegrityError, OSError) as e:
                logger.error(f"Transaction save failed: user_id={request.user.id}, error={e}")
                messages.error(request, 'Failed to save the transaction.')
            else:
                logger.info(f"Transaction created: id={tx.pk}, user_id={request.user.id}")
                messages.success(request, 'Transaction added.')
                return redirect('transactions:transaction_list')
    else:
        form = TransactionForm(
            initial={'type': TYPE_EXPENSE, 'category': get_default_category_id(request.user)},
            user=request.user,
        )

    return render(request, 'transactions/transaction_form.html', {
        'form': form,
        'title': 'Add transaction',
    })


@login_required
def transaction_update(request, pk):
    tx = get_object_or_404(Transaction, pk=pk, user=request.user)

    if request.method == 'POST':
        form = TransactionForm(request.POST, request.FILES, instance=tx, user=request.user)
        if form.is_valid():
            try:
                form.save()
            except (IntegrityError, OSError) as e:
                logger.error(f"Transaction update failed: id={tx.pk}, error={e}")
                messages.error(request, 'Failed to save the transaction.')
            else:
                messages.success(request, 'Transaction updated.')
                return redirect('transactions:transaction_list')
    else:
        form = TransactionForm(instance=tx, user=request.user)

    return render(request, 'transactions/transaction_form.html', {
        'form': form,
        'transaction': tx,
        'title': 'Edit transaction',
    })


@login_required
def transaction_delete(request, pk):
    """Delete after confirmation; the receipt file goes with the row"""
    tx = get_object_or_404(Transaction, pk=pk, user=request.user)

    if request.method == 'POST':
        tx.delete()
        logger.info(f"Transaction deleted: id={pk}, user_id={request.user.id}")
        messages.success(request, 'Transaction deleted.')
        return redirect('transactions:transaction_list')

    return render(request, 'transactions/transaction_confirm_delete.html', {'transaction': tx})


@login_required
def transaction_export(request):
    """All of the user's transactions as .xlsx"""
    queryset = Transaction.objects.filter(user=request.user).with_relations()
    currency = UserSettings.for_user(request.user).currency

    excel_file = export_transactions_to_excel(queryset, currency=currency)
    timestamp = timezone.localtime().strftime('%Y%m%d_%H%M%S')

    filename = f"transactions_{timestamp}.xlsx"
    response = HttpResponse(
        excel_file.read(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
