"""Financial summary used by the finance page charts and its JSON endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from django.db.models import QuerySet
from django.utils import timezone

from ..models import FinancialTransaction
from .periods import MONTH_LABELS, month_bounds, percentage_change, previous_month_bounds

CENT = Decimal('0.01')


def _money(value: Decimal) -> float:
    return float(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


@dataclass
class FinancialSummary:
    total_revenue: float
    total_expenses: float
    net_profit: float
    revenue_growth: int
    expense_growth: int
    profit_growth: int
    monthly: List[Dict[str, Any]] = field(default_factory=list)
    income_by_category: List[Dict[str, Any]] = field(default_factory=list)
    expenses_by_category: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.monthly

    def as_dict(self) -> Dict[str, Any]:
        return {
            'total_revenue': self.total_revenue,
            'total_expenses': self.total_expenses,
            'net_profit': self.net_profit,
            'revenue_growth': self.revenue_growth,
            'expense_growth': self.expense_growth,
            'profit_growth': self.profit_growth,
            'monthly': self.monthly,
            'income_by_category': self.income_by_category,
            'expenses_by_category': self.expenses_by_category,
        }


def _month_totals(rows: List[FinancialTransaction], start: date, end: date) -> Dict[str, Decimal]:
    income = Decimal('0')
    expenses = Decimal('0')
    for row in rows:
        if start <= row.date <= end:
            if row.type == FinancialTransaction.TransactionType.INCOME:
                income += row.amount
            else:
                expenses += row.amount
    return {'income': income, 'expenses': expenses, 'profit': income - expenses}


def build_financial_summary(
    queryset: Optional[QuerySet] = None,
    today: Optional[date] = None,
) -> FinancialSummary:
    """Aggregate transactions into totals, a monthly series and category splits.

    Growth figures compare the current calendar month with the previous
    one. The monthly series is keyed by ``YYYY-MM`` and sorted
    chronologically; category lists are sorted by descending amount.
    """

    today = today or timezone.localdate()
    queryset = queryset if queryset is not None else FinancialTransaction.objects.all()
    rows = list(queryset.only('type', 'category', 'amount', 'date'))

    income_total = Decimal('0')
    expense_total = Decimal('0')
    monthly: Dict[str, Dict[str, Decimal]] = {}
    income_categories: Dict[str, Decimal] = {}
    expense_categories: Dict[str, Decimal] = {}

    for row in rows:
        key = row.date.strftime('%Y-%m')
        bucket = monthly.setdefault(key, {'income': Decimal('0'), 'expenses': Decimal('0')})
        if row.type == FinancialTransaction.TransactionType.INCOME:
            income_total += row.amount
            bucket['income'] += row.amount
            income_categories[row.category] = income_categories.get(row.category, Decimal('0')) + row.amount
        else:
            expense_total += row.amount
            bucket['expenses'] += row.amount
            expense_categories[row.category] = expense_categories.get(row.category, Decimal('0')) + row.amount

    series = []
    for key in sorted(monthly):
        year, month = key.split('-')
        series.append({
            'month': key,
            'name': f"{MONTH_LABELS[int(month) - 1]} {year}",
            'income': _money(monthly[key]['income']),
            'expenses': _money(monthly[key]['expenses']),
        })

    current = _month_totals(rows, *month_bounds(today))
    previous = _month_totals(rows, *previous_month_bounds(today))

    def _categories(totals: Dict[str, Decimal]) -> List[Dict[str, Any]]:
        ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
        return [{'name': name, 'value': _money(value)} for name, value in ordered]

    return FinancialSummary(
        total_revenue=_money(income_total),
        total_expenses=_money(expense_total),
        net_profit=_money(income_total - expense_total),
        revenue_growth=percentage_change(current['income'], previous['income']),
        expense_growth=percentage_change(current['expenses'], previous['expenses']),
        profit_growth=percentage_change(current['profit'], previous['profit']),
        monthly=series,
        income_by_category=_categories(income_categories),
        expenses_by_category=_categories(expense_categories),
    )
