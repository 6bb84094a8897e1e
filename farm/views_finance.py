"""Finance views: transactions, the financial summary and report downloads."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import DatabaseError, transaction
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_http_methods, require_POST

from .forms import EXPENSE_CATEGORIES, INCOME_CATEGORIES, ReportForm, TransactionForm
from .models import ActivityLog, FinancialTransaction
from .services.financial_summary import build_financial_summary
from .services.list_filters import filter_transactions, transaction_totals
from .services.reports import (
    REPORT_CATALOG,
    ReportError,
    build_report,
    render_csv,
    render_excel,
    resolve_date_range,
)
from .views import DELETE_FAILED, SAVE_FAILED, _build_breadcrumbs, _list_params, log_activity

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _category_options() -> List[str]:
    """Known categories plus any custom ones already used in the books."""

    used = FinancialTransaction.objects.values_list('category', flat=True).distinct()
    return sorted(set(INCOME_CATEGORIES) | set(EXPENSE_CATEGORIES) | set(used))


@login_required
def transaction_list(request: HttpRequest) -> HttpResponse:
    """List transactions with search, type/category filters and running totals."""
    params = _list_params(request, 'type', 'category')
    transactions = filter_transactions(FinancialTransaction.objects.select_related('animal'), **params)
    context = {
        'transactions': transactions,
        'totals': transaction_totals(transactions),
        'filters': params,
        'type_choices': FinancialTransaction.TransactionType.choices,
        'category_options': _category_options(),
        'breadcrumbs': _build_breadcrumbs(('Finance', '')),
    }
    return render(request, 'transaction_list.html', context)


def _transaction_form_context(form: TransactionForm, title: str) -> Dict[str, Any]:
    return {
        'form': form,
        'title': title,
        'income_categories': INCOME_CATEGORIES,
        'expense_categories': EXPENSE_CATEGORIES,
        'breadcrumbs': _build_breadcrumbs(('Finance', reverse('transaction_list')), (title, '')),
    }


def _describe(txn: FinancialTransaction) -> str:
    return f"{txn.category}: {txn.amount} ({txn.description})"


@login_required
def transaction_add(request: HttpRequest) -> HttpResponse:
    """Record a new income or expense."""
    if request.method == 'POST':
        form = TransactionForm(request.POST)
        if form.is_valid():
            try:
                with transaction.atomic():
                    txn = form.save(commit=False)
                    txn.created_by = request.user
                    txn.save()
            except DatabaseError:
                logger.exception('Could not add transaction')
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.TRANSACTION, f'{txn.type} recorded', _describe(txn))
                messages.success(request, 'Transaction added successfully.')
                return redirect('transaction_list')
    else:
        initial = {'date': timezone.localdate(), 'type': request.GET.get('type') or FinancialTransaction.TransactionType.EXPENSE}
        form = TransactionForm(initial=initial)
    return render(request, 'transaction_form.html', _transaction_form_context(form, 'Add Transaction'))


@login_required
def transaction_edit(request: HttpRequest, pk: int) -> HttpResponse:
    """Edit a transaction."""
    txn = get_object_or_404(FinancialTransaction, pk=pk)
    if request.method == 'POST':
        form = TransactionForm(request.POST, instance=txn)
        if form.is_valid():
            try:
                with transaction.atomic():
                    txn = form.save()
            except DatabaseError:
                logger.exception('Could not update transaction %s', pk)
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.TRANSACTION, 'Updated transaction', _describe(txn))
                messages.success(request, 'Transaction updated successfully.')
                return redirect('transaction_detail', pk=txn.pk)
    else:
        form = TransactionForm(instance=txn)
    return render(request, 'transaction_form.html', _transaction_form_context(form, 'Edit Transaction'))


@login_required
def transaction_detail(request: HttpRequest, pk: int) -> HttpResponse:
    txn = get_object_or_404(FinancialTransaction.objects.select_related('animal', 'created_by'), pk=pk)
    context = {
        'txn': txn,
        'breadcrumbs': _build_breadcrumbs(('Finance', reverse('transaction_list')), ('Transaction', '')),
    }
    return render(request, 'transaction_detail.html', context)


@login_required
@require_POST
def transaction_delete(request: HttpRequest, pk: int) -> HttpResponse:
    """Delete a transaction."""
    txn = get_object_or_404(FinancialTransaction, pk=pk)
    label = _describe(txn)
    try:
        txn.delete()
    except DatabaseError:
        logger.exception('Could not delete transaction %s', pk)
        messages.error(request, DELETE_FAILED)
    else:
        log_activity(request.user, ActivityLog.Category.TRANSACTION, 'Deleted transaction', label)
        messages.success(request, 'Transaction deleted.')
    return redirect('transaction_list')


@login_required
def finance_summary(request: HttpRequest) -> HttpResponse:
    """Render the financial summary page; charts load from the JSON endpoint."""
    context = {
        'summary': build_financial_summary(),
        'breadcrumbs': _build_breadcrumbs(('Finance', reverse('transaction_list')), ('Summary', '')),
    }
    return render(request, 'finance_summary.html', context)


@login_required
@require_http_methods(["GET"])
def finance_summary_data(request: HttpRequest) -> JsonResponse:
    """Return the financial summary as JSON for the charts."""

    return JsonResponse(build_financial_summary().as_dict())


@login_required
def reports(request: HttpRequest) -> HttpResponse:
    """Generate a report and stream it back as an Excel or CSV download.

    GET renders the report form. A valid POST resolves the date range,
    collects the rows for the selected report and returns the file as an
    attachment. Report failures are shown on the form instead.
    """
    if request.method == 'POST':
        form = ReportForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                start, end = resolve_date_range(data['date_range'], data.get('start_date'), data.get('end_date'))
                dataset = build_report(data['report_type'], start, end)
            except ReportError as exc:
                messages.error(request, str(exc))
            except DatabaseError:
                logger.exception('Report %s failed', data['report_type'])
                messages.error(request, 'Failed to generate report. Please try again.')
            else:
                log_activity(
                    request.user,
                    ActivityLog.Category.SYSTEM,
                    'Generated report',
                    f"{dataset.title} ({data['report_format']})",
                )
                if data['report_format'] == 'CSV':
                    response = HttpResponse(render_csv(dataset), content_type='text/csv; charset=utf-8')
                    response['Content-Disposition'] = f'attachment; filename="{dataset.filename}.csv"'
                    return response
                response = HttpResponse(render_excel(dataset), content_type=XLSX_CONTENT_TYPE)
                response['Content-Disposition'] = f'attachment; filename="{dataset.filename}.xlsx"'
                return response
    else:
        form = ReportForm()

    context = {
        'form': form,
        'catalog': REPORT_CATALOG,
        'breadcrumbs': _build_breadcrumbs(('Reports', '')),
    }
    return render(request, 'reports.html', context)
