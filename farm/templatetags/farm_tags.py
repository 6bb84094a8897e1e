"""Custom template filters and tags for the farm app."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from django import template
from django.urls import NoReverseMatch, reverse

register = template.Library()

_BADGE_CLASSES = {
    # animals
    'Active': 'success',
    'Healthy': 'success',
    'Sold': 'secondary',
    'Dead': 'dark',
    'Culled': 'dark',
    'Pregnant': 'info',
    'Sick': 'danger',
    'Recovering': 'warning',
    # health, events and alerts
    'Completed': 'success',
    'Ongoing': 'primary',
    'Scheduled': 'info',
    'Needs Follow-up': 'warning',
    'Upcoming': 'info',
    'In Progress': 'primary',
    'Missed': 'danger',
    'Pending': 'warning',
    'Cancelled': 'secondary',
    # priorities
    'Low': 'secondary',
    'Medium': 'info',
    'High': 'warning',
    'Urgent': 'danger',
    # transactions
    'Income': 'success',
    'Expense': 'danger',
}


@register.filter
def money(value, label: str = '') -> str:
    """Format a number with thousands separators and two decimals.

    ``{{ amount|money:currency_label }}`` renders ``KSh 1,250.00``.
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ''
    formatted = f"{amount:,.2f}"
    return f"{label} {formatted}" if label else formatted


@register.filter
def status_badge(value) -> str:
    """Return the Bootstrap colour name used to badge a status or priority."""
    return _BADGE_CLASSES.get(str(value), 'secondary')


@register.filter
def trend_class(value) -> str:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 'text-muted'
    if number > 0:
        return 'text-success'
    if number < 0:
        return 'text-danger'
    return 'text-muted'


def _resolve_url(name: str | None) -> str:
    """Safely resolve a URL name to its absolute path."""

    if not name:
        return '#'
    try:
        return reverse(name)
    except NoReverseMatch:
        return '#'


@register.inclusion_tag('partials/sidebar_menu.html', takes_context=True)
def render_sidebar(context: Dict[str, Any]) -> Dict[str, Any]:
    """Render the sidebar navigation and highlight the current section."""

    request = context.get('request')
    current_path = getattr(request, 'path', '')

    def url_is_active(url: str) -> bool:
        if url == '#' or not current_path:
            return False
        if url == '/':
            return current_path == '/'
        return current_path.rstrip('/').startswith(url.rstrip('/'))

    items: List[Dict[str, Any]] = []
    for label, url_name in [
        ('Dashboard', 'dashboard'),
        ('Animals', 'animal_list'),
        ('Health', 'health_list'),
        ('Events', 'event_list'),
        ('Finance', 'transaction_list'),
        ('Reports', 'reports'),
        ('Alerts', 'alert_list'),
        ('Settings', 'settings'),
    ]:
        url = _resolve_url(url_name)
        items.append({'label': label, 'url': url, 'active': url_is_active(url)})
    return {'items': items}
