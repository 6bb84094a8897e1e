"""Search, filter and summary helpers for the list pages.

Every list page accepts a free-text ``search`` term plus a handful of
equality filters taken from the query string. The sentinel value ``all``
(or an empty value) disables a filter. Summary figures such as the
transaction totals or the alert counters are computed over the filtered
rows so they always agree with what the table shows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db.models import DecimalField, Q, QuerySet, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from ..models import Alert, Event, FinancialTransaction

ALL = 'all'


def _is_active(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def _search_q(term: str, *fields: str) -> Q:
    query = Q()
    for field in fields:
        query |= Q(**{f'{field}__icontains': term})
    return query


def filter_animals(
    queryset: QuerySet,
    *,
    search: str = '',
    status: str = ALL,
    sex: str = ALL,
    health: str = ALL,
) -> QuerySet:
    """Filter animals by name/tag/breed search and status, sex and health."""

    search = (search or '').strip()
    if search:
        queryset = queryset.filter(_search_q(search, 'name', 'tag_number', 'breed'))
    if _is_active(status):
        queryset = queryset.filter(status=status)
    if _is_active(sex):
        queryset = queryset.filter(sex=sex)
    if _is_active(health):
        queryset = queryset.filter(health_status=health)
    return queryset


def filter_health_records(
    queryset: QuerySet,
    *,
    search: str = '',
    record_type: str = ALL,
    status: str = ALL,
) -> QuerySet:
    """Filter health records by animal/description search, type and status."""

    search = (search or '').strip()
    if search:
        queryset = queryset.filter(
            _search_q(search, 'animal__name', 'animal__tag_number', 'description')
        )
    if _is_active(record_type):
        queryset = queryset.filter(record_type=record_type)
    if _is_active(status):
        queryset = queryset.filter(status=status)
    return queryset


def filter_events(queryset: QuerySet, *, search: str = '', status: str = ALL) -> QuerySet:
    """Filter events by title/description/type search and status bucket.

    ``status`` accepts ``upcoming`` (Upcoming or In Progress), ``completed``
    or ``all``.
    """

    search = (search or '').strip()
    if search:
        queryset = queryset.filter(_search_q(search, 'title', 'description', 'event_type'))
    if status == 'upcoming':
        queryset = queryset.filter(status__in=[Event.Status.UPCOMING, Event.Status.IN_PROGRESS])
    elif status == 'completed':
        queryset = queryset.filter(status=Event.Status.COMPLETED)
    return queryset


def filter_transactions(
    queryset: QuerySet,
    *,
    search: str = '',
    type: str = ALL,
    category: str = ALL,
) -> QuerySet:
    """Filter transactions by description/category/reference search, type and category."""

    search = (search or '').strip()
    if search:
        queryset = queryset.filter(_search_q(search, 'description', 'category', 'reference'))
    if _is_active(type):
        queryset = queryset.filter(type=type)
    if _is_active(category):
        queryset = queryset.filter(category=category)
    return queryset


def filter_alerts(
    queryset: QuerySet,
    *,
    search: str = '',
    status: str = ALL,
    type: str = ALL,
    priority: str = ALL,
) -> QuerySet:
    """Filter alerts by title/description search, status, type and priority."""

    search = (search or '').strip()
    if search:
        queryset = queryset.filter(_search_q(search, 'title', 'description'))
    if _is_active(status):
        queryset = queryset.filter(status=status)
    if _is_active(type):
        queryset = queryset.filter(type=type)
    if _is_active(priority):
        queryset = queryset.filter(priority=priority)
    return queryset


@dataclass
class TransactionTotals:
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


def transaction_totals(queryset: QuerySet) -> TransactionTotals:
    """Sum income and expenses over the given transactions."""

    zero = Value(Decimal('0.00'), output_field=DecimalField(max_digits=12, decimal_places=2))
    totals = queryset.aggregate(
        income=Coalesce(Sum('amount', filter=Q(type=FinancialTransaction.TransactionType.INCOME)), zero),
        expenses=Coalesce(Sum('amount', filter=Q(type=FinancialTransaction.TransactionType.EXPENSE)), zero),
    )
    return TransactionTotals(income=Decimal(totals['income']), expenses=Decimal(totals['expenses']))


@dataclass
class AlertCounts:
    pending: int
    completed: int
    overdue: int


def overdue_alerts(queryset: QuerySet, today: Optional[date] = None) -> QuerySet:
    """Alerts past their due date that are neither completed nor cancelled."""

    today = today or timezone.localdate()
    return queryset.filter(due_date__lt=today).exclude(status__in=Alert.CLOSED_STATUSES)


def alert_counts(queryset: QuerySet, today: Optional[date] = None) -> AlertCounts:
    """Return the pending/completed/overdue counters shown above the alert list."""

    return AlertCounts(
        pending=queryset.filter(status=Alert.Status.PENDING).count(),
        completed=queryset.filter(status=Alert.Status.COMPLETED).count(),
        overdue=overdue_alerts(queryset, today).count(),
    )
