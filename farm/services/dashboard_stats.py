"""Aggregations behind the dashboard cards, flock growth chart and activity feed.

Everything here is recomputed from the database on each request; nothing is
cached or persisted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db.models import Count, Q, Sum
from django.db.models.functions import ExtractMonth
from django.utils import timezone

from ..models import ActivityLog, Alert, Animal, FinancialTransaction
from .periods import (
    MONTH_LABELS,
    day_start,
    month_bounds,
    percentage_change,
    previous_month_bounds,
    round_half_up,
)


@dataclass
class DashboardStats:
    total_animals: int
    animals_trend: int
    health_percent: int
    monthly_revenue: float
    revenue_trend: int
    pending_tasks: int
    high_priority_tasks: int
    tasks_trend: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FlockGrowth:
    months: List[Dict[str, Any]]
    year_growth: int

    def as_dict(self) -> Dict[str, Any]:
        return {'months': self.months, 'year_growth': self.year_growth}


def _income_between(start: date, end: date) -> Decimal:
    total = FinancialTransaction.objects.filter(
        type=FinancialTransaction.TransactionType.INCOME,
        date__gte=start,
        date__lte=end,
    ).aggregate(total=Sum('amount'))['total']
    return Decimal(total or 0)


def compute_dashboard_stats(today: Optional[date] = None) -> DashboardStats:
    """Compute the four dashboard cards.

    Trends compare against last calendar month: animals and pending alerts
    created last month, and income dated last month.
    """

    today = today or timezone.localdate()
    month_start, month_end = month_bounds(today)
    last_start, last_end = previous_month_bounds(today)
    created_last_month = Q(created_at__gte=day_start(last_start), created_at__lt=day_start(month_start))

    animals = Animal.objects.all()
    total_animals = animals.count()
    healthy = animals.filter(
        Q(status=Animal.Status.ACTIVE) | Q(health_status=Animal.HealthStatus.HEALTHY)
    ).count()
    health_percent = round_half_up(healthy / total_animals * 100) if total_animals else 0
    animals_last_month = animals.filter(created_last_month).count()

    revenue = _income_between(month_start, month_end)
    revenue_last_month = _income_between(last_start, last_end)

    open_alerts = Alert.objects.filter(status__in=Alert.OPEN_STATUSES)
    pending_tasks = open_alerts.count()
    high_priority = open_alerts.filter(priority__in=Alert.HIGH_PRIORITIES).count()
    pending_last_month = open_alerts.filter(created_last_month).count()

    return DashboardStats(
        total_animals=total_animals,
        animals_trend=percentage_change(total_animals, animals_last_month),
        health_percent=health_percent,
        monthly_revenue=float(round(revenue, 2)),
        revenue_trend=percentage_change(revenue, revenue_last_month),
        pending_tasks=pending_tasks,
        high_priority_tasks=high_priority,
        tasks_trend=percentage_change(pending_tasks, pending_last_month),
    )


def compute_flock_growth(year: Optional[int] = None) -> FlockGrowth:
    """Return the cumulative number of animals added per month of ``year``.

    Year growth compares December's running total with January's. When
    either is zero the growth is reported as 0; negative growth is clamped
    to 0.
    """

    year = year or timezone.localdate().year
    created_this_year = Animal.objects.filter(
        created_at__gte=day_start(date(year, 1, 1)),
        created_at__lt=day_start(date(year + 1, 1, 1)),
    )
    per_month = dict(
        created_this_year.annotate(month=ExtractMonth('created_at'))
        .values('month')
        .annotate(total=Count('id'))
        .order_by()
        .values_list('month', 'total')
    )
    running = 0
    months: List[Dict[str, Any]] = []
    for index, label in enumerate(MONTH_LABELS, start=1):
        running += int(per_month.get(index, 0))
        months.append({'month': label, 'count': running})

    first = months[0]['count']
    last = months[-1]['count']
    growth = 0
    if first > 0 and last > 0:
        growth = max(round_half_up((last - first) / first * 100), 0)
    return FlockGrowth(months=months, year_growth=growth)


def recent_activities(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Return the latest activity log entries for the dashboard feed."""

    limit = limit or getattr(settings, 'FARM_RECENT_ACTIVITY_LIMIT', 6)
    entries = ActivityLog.objects.select_related('user')[:limit]
    return [
        {
            'id': entry.pk,
            'type': entry.category,
            'title': entry.action,
            'description': entry.details,
            'timestamp': entry.timestamp,
            'user': entry.user.username if entry.user else '',
        }
        for entry in entries
    ]
