"""Utility helpers for creating and dispatching user notifications.

Notifications feed the bell in the navbar. They are raised when a High or
Urgent alert is created and when an open alert slips past its due date.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from django.contrib.auth.models import User
from django.utils import timezone

from ..models import Alert, Notification
from .list_filters import overdue_alerts

logger = logging.getLogger(__name__)


def _user_display(user: Optional[User]) -> str:
    """Return a readable label for the given user."""

    if not user:
        return ''
    profile = getattr(user, 'profile', None)
    if profile and profile.full_name:
        return profile.full_name
    full_name = user.get_full_name()
    if full_name:
        return full_name
    return user.username


def _alert_context(alert: Alert) -> Dict[str, Any]:
    return {
        'alert_id': alert.pk,
        'title': alert.title,
        'priority': alert.priority,
        'due_date': alert.due_date.isoformat(),
    }


def _recipients() -> Iterable[User]:
    return User.objects.filter(is_active=True)


def create_notification(
    recipient: User,
    *,
    message: str,
    event_type: str,
    alert: Optional[Alert] = None,
    extra_metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    """Create a single notification row."""

    return Notification.objects.create(
        recipient=recipient,
        alert=alert,
        message=message,
        event_type=event_type,
        metadata=dict(extra_metadata or {}),
    )


def notify_alert_raised(alert: Alert, actor: Optional[User] = None) -> List[Notification]:
    """Tell every active user about a new High or Urgent alert.

    Alerts of lower priority do not notify anyone.
    """

    if alert.priority not in Alert.HIGH_PRIORITIES:
        return []
    actor_name = _user_display(actor)
    message = f'{alert.priority} alert: "{alert.title}" is due on {alert.due_date:%Y-%m-%d}.'
    if actor_name:
        message = f'{actor_name} raised a {alert.priority.lower()} alert: "{alert.title}" (due {alert.due_date:%Y-%m-%d}).'
    metadata = _alert_context(alert)
    if actor_name:
        metadata['actor'] = actor_name
    created = [
        create_notification(
            recipient,
            message=message,
            event_type=Notification.EventType.ALERT_RAISED,
            alert=alert,
            extra_metadata=metadata,
        )
        for recipient in _recipients()
    ]
    logger.info('Alert %s raised %d notifications', alert.pk, len(created))
    return created


def ensure_overdue_alert_notifications(today: Optional[date] = None) -> int:
    """Ensure each user is notified once about every overdue alert.

    Returns the number of notifications created by this call.
    """

    today = today or timezone.localdate()
    alerts = list(overdue_alerts(Alert.objects.all(), today))
    if not alerts:
        return 0
    existing = set(
        Notification.objects.filter(
            alert__in=alerts,
            event_type=Notification.EventType.ALERT_OVERDUE,
        ).values_list('alert_id', 'recipient_id')
    )
    recipients = list(_recipients())
    created = 0
    for alert in alerts:
        for recipient in recipients:
            if (alert.pk, recipient.pk) in existing:
                continue
            create_notification(
                recipient,
                message=f'Alert "{alert.title}" is overdue (was due {alert.due_date:%Y-%m-%d}).',
                event_type=Notification.EventType.ALERT_OVERDUE,
                alert=alert,
                extra_metadata=_alert_context(alert),
            )
            created += 1
    if created:
        logger.info('Created %d overdue alert notifications', created)
    return created


def unread_notifications(recipient: User, limit: int = 10) -> List[Dict[str, Any]]:
    """Serialise the recipient's unread notifications for the navbar bell."""

    rows = Notification.objects.filter(recipient=recipient, is_read=False)[:limit]
    return [
        {
            'id': notification.pk,
            'message': notification.message,
            'event_type': notification.event_type,
            'alert_id': notification.alert_id,
            'created_at': notification.created_at.isoformat(),
        }
        for notification in rows
    ]


def mark_notifications_read(recipient: User, notification_ids: Optional[Iterable[int]] = None) -> int:
    """Mark notifications as read for the recipient."""

    qs = Notification.objects.filter(recipient=recipient, is_read=False)
    if notification_ids is not None:
        ids = list(notification_ids)
        if not ids:
            return 0
        qs = qs.filter(pk__in=ids)
    updated = qs.update(is_read=True)
    return int(updated)
