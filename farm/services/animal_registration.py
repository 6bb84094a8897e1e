"""Helpers for the detailed animal registration page."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from django.utils import timezone

from ..models import Animal

ORIGIN_LABELS = {
    'birth': 'Born on farm',
    'purchase': 'Purchased',
    'import': 'Imported',
}


def calculate_age(birth_date: date, today: Optional[date] = None) -> str:
    """Describe the age of an animal born on ``birth_date``.

    Animals younger than a year are described in months (``"1 month"``,
    ``"7 months"``), older ones in whole years (``"2 years"``).
    """

    today = today or timezone.localdate()
    years = today.year - birth_date.year
    months = today.month - birth_date.month
    if months < 0 or (months == 0 and today.day < birth_date.day):
        years -= 1
    if years <= 0:
        month_diff = (today.month + 12 - birth_date.month) % 12
        return f"{month_diff} {'month' if month_diff == 1 else 'months'}"
    return f"{years} {'year' if years == 1 else 'years'}"


def format_registration_notes(data: Dict[str, Any]) -> str:
    """Fold the registration extras into the free-text notes column.

    The description comes first, followed by a blank line and one
    ``Label: value`` line per extra that was supplied.
    """

    description = (data.get('description') or '').strip()
    origin = data.get('origin')
    lines = [
        f"State at birth: {data['state_at_birth']}" if data.get('state_at_birth') else '',
        f"Father ID: {data['father_tag']}" if data.get('father_tag') else '',
        f"Mother ID: {data['mother_tag']}" if data.get('mother_tag') else '',
        f"Color/Markings: {data['color']}" if data.get('color') else '',
        f"Origin: {ORIGIN_LABELS.get(origin, origin)}" if origin else '',
    ]
    extra = '\n'.join(line for line in lines if line)
    if description and extra:
        return f"{description}\n\n{extra}"
    return description or extra


def register_animal(data: Dict[str, Any], today: Optional[date] = None) -> Animal:
    """Create an Active, Healthy animal from cleaned registration data."""

    return Animal.objects.create(
        name=data['name'],
        tag_number=data['tag_number'],
        breed=data.get('breed', ''),
        sex=data['sex'],
        status=Animal.Status.ACTIVE,
        age=calculate_age(data['birth_date'], today),
        birth_date=data['birth_date'],
        weight_kg=data['weight_at_birth'],
        health_status=Animal.HealthStatus.HEALTHY,
        notes=format_registration_notes(data),
        description=(data.get('description') or '').strip(),
    )
