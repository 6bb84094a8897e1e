"""Calendar helpers shared by the dashboard, finance and report services."""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time
from typing import Tuple

from django.utils import timezone

MONTH_LABELS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by ``months`` calendar months, clamping the day."""

    index = value.year * 12 + (value.month - 1) + months
    year, month_index = divmod(index, 12)
    month = month_index + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_bounds(value: date) -> Tuple[date, date]:
    """Return the first and last day of the month containing ``value``."""

    last_day = calendar.monthrange(value.year, value.month)[1]
    return value.replace(day=1), value.replace(day=last_day)


def previous_month_bounds(value: date) -> Tuple[date, date]:
    """Return the first and last day of the month before ``value``."""

    first_of_month = value.replace(day=1)
    return month_bounds(add_months(first_of_month, -1))


def day_start(value: date) -> datetime:
    """Return an aware datetime at midnight of ``value`` in the current zone."""

    return timezone.make_aware(datetime.combine(value, time.min))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""

    return int(math.floor(value + 0.5))


def percentage_change(current: float, previous: float) -> int:
    """Return the rounded percentage change from ``previous`` to ``current``.

    A previous value of zero yields 0 rather than an infinite change. A
    negative baseline (e.g. last month's loss) is measured against its
    magnitude so an improvement reads as positive.
    """

    if not previous:
        return 0
    return round_half_up((float(current) - float(previous)) / abs(float(previous)) * 100)
