"""Custom context processors for the farm application.

Every page needs the signed-in user's profile for the navbar, the farm
settings for the header and money formatting, and the unread notification
count for the bell.
"""

from __future__ import annotations

from typing import Any, Dict

from django.conf import settings

from .models import FarmSettings


def farm_context(request) -> Dict[str, Any]:
    """Expose the current profile, farm settings and notification count."""
    context: Dict[str, Any] = {
        'current_profile': None,
        'currency_label': getattr(settings, 'FARM_CURRENCY_LABEL', 'KSh'),
        'unread_notification_count': 0,
    }
    user = getattr(request, 'user', None)
    if user and user.is_authenticated:
        context['current_profile'] = getattr(user, 'profile', None)
        context['unread_notification_count'] = user.notifications.filter(is_read=False).count()
        context['farm_settings'] = FarmSettings.load()
    return context
