"""Tests for alert views and the notification bell endpoints."""

import json
from datetime import date, timedelta

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from farm.models import Alert, Animal, Notification
from farm.services.notifications import (
    ensure_overdue_alert_notifications,
    mark_notifications_read,
    notify_alert_raised,
    unread_notifications,
)


class AlertViewTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.other = User.objects.create_user('helper', password='secret1')
        self.client.force_login(self.user)
        self.bella = Animal.objects.create(name='Bella', tag_number='SH-001')
        self.today = timezone.localdate()

    def _payload(self, **overrides):
        data = {
            'title': 'Vaccinate lambs',
            'description': 'Clostridial vaccine round',
            'type': 'Task',
            'priority': 'Medium',
            'status': 'Pending',
            'due_date': (self.today + timedelta(days=3)).isoformat(),
            'related_to': 'None',
        }
        data.update(overrides)
        return data

    def test_add_alert(self) -> None:
        response = self.client.post(reverse('alert_add'), self._payload(related_to='Animal', animal=self.bella.pk))
        self.assertRedirects(response, reverse('alert_list'))
        alert = Alert.objects.get()
        self.assertEqual(alert.animal, self.bella)
        self.assertEqual(alert.created_by, self.user)
        self.assertFalse(Notification.objects.exists())

    def test_urgent_alert_notifies_every_user(self) -> None:
        self.client.post(reverse('alert_add'), self._payload(priority='Urgent'))
        alert = Alert.objects.get()
        recipients = set(Notification.objects.filter(alert=alert).values_list('recipient__username', flat=True))
        self.assertEqual(recipients, {'shepherd', 'helper'})

    def test_status_update_is_post_only(self) -> None:
        alert = Alert.objects.create(title='Fix fence', description='North paddock', due_date=self.today)
        url = reverse('alert_status', args=[alert.pk])
        self.assertEqual(self.client.get(url).status_code, 405)

        response = self.client.post(url, {'status': 'Completed'})
        self.assertRedirects(response, reverse('alert_list'))
        alert.refresh_from_db()
        self.assertEqual(alert.status, 'Completed')

    def test_invalid_status_is_ignored(self) -> None:
        alert = Alert.objects.create(title='Fix fence', description='North paddock', due_date=self.today)
        self.client.post(reverse('alert_status', args=[alert.pk]), {'status': 'Done'})
        alert.refresh_from_db()
        self.assertEqual(alert.status, 'Pending')

    def test_list_counts_and_overdue_notifications(self) -> None:
        Alert.objects.create(title='Late task', description='Should be done', due_date=self.today - timedelta(days=2))
        Alert.objects.create(title='Closed', description='All done', due_date=self.today - timedelta(days=2),
                             status='Completed')

        response = self.client.get(reverse('alert_list'))

        counts = response.context['counts']
        self.assertEqual((counts.pending, counts.completed, counts.overdue), (1, 1, 1))
        self.assertContains(response, '<span class="badge bg-danger">Overdue</span>', count=1)
        self.assertEqual(Notification.objects.filter(event_type='alert_overdue').count(), 2)

    def test_edit_and_delete(self) -> None:
        alert = Alert.objects.create(title='Fix fence', description='North paddock', due_date=self.today)
        response = self.client.post(reverse('alert_edit', args=[alert.pk]), self._payload(title='Fix gate'))
        self.assertRedirects(response, reverse('alert_list'))
        alert.refresh_from_db()
        self.assertEqual(alert.title, 'Fix gate')

        self.client.post(reverse('alert_delete', args=[alert.pk]))
        self.assertFalse(Alert.objects.exists())


class NotificationServiceTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.today = date(2026, 5, 15)

    def test_low_priority_alert_does_not_notify(self) -> None:
        alert = Alert.objects.create(title='Sweep', description='Sweep barn', due_date=self.today, priority='Low')
        self.assertEqual(notify_alert_raised(alert), [])

    def test_overdue_notifications_are_deduplicated(self) -> None:
        Alert.objects.create(title='Late', description='Past due', due_date=date(2026, 5, 1))
        self.assertEqual(ensure_overdue_alert_notifications(self.today), 1)
        self.assertEqual(ensure_overdue_alert_notifications(self.today), 0)

    def test_mark_read(self) -> None:
        alert = Alert.objects.create(title='Late', description='Past due', due_date=date(2026, 5, 1), priority='High')
        notify_alert_raised(alert)
        ensure_overdue_alert_notifications(self.today)
        self.assertEqual(len(unread_notifications(self.user)), 2)

        first = Notification.objects.filter(recipient=self.user).first()
        self.assertEqual(mark_notifications_read(self.user, [first.pk]), 1)
        self.assertEqual(mark_notifications_read(self.user, []), 0)
        self.assertEqual(mark_notifications_read(self.user), 1)
        self.assertEqual(unread_notifications(self.user), [])


class NotificationEndpointTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.client.force_login(self.user)
        alert = Alert.objects.create(title='Vet call', description='Ewe down', due_date=date(2026, 5, 1), priority='Urgent')
        notify_alert_raised(alert)

    def test_unread_endpoint(self) -> None:
        data = self.client.get(reverse('notifications_unread')).json()
        self.assertEqual(data['count'], 1)
        self.assertIn('Vet call', data['notifications'][0]['message'])

    def test_mark_read_all(self) -> None:
        response = self.client.post(
            reverse('notifications_mark_read'),
            data=json.dumps({'all': True}),
            content_type='application/json',
        )
        self.assertEqual(response.json(), {'ok': True, 'updated': 1})
        self.assertFalse(Notification.objects.filter(is_read=False).exists())

    def test_mark_read_rejects_bad_payload(self) -> None:
        response = self.client.post(reverse('notifications_mark_read'), data='not json', content_type='application/json')
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            reverse('notifications_mark_read'),
            data=json.dumps({'ids': ['x']}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['ok'])

    def test_mark_read_rejects_non_object_json(self) -> None:
        for body in ([1, 2], 3, 'x', None):
            response = self.client.post(
                reverse('notifications_mark_read'),
                data=json.dumps(body),
                content_type='application/json',
            )
            self.assertEqual(response.status_code, 400, body)
            self.assertEqual(response.json(), {'ok': False, 'message': 'Invalid payload.'})
        self.assertTrue(Notification.objects.filter(is_read=False).exists())
