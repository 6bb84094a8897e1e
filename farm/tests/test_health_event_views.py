"""Tests for the health record and event views."""

from datetime import date

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse

from farm.models import ActivityLog, Animal, Event, HealthRecord


class HealthViewTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.client.force_login(self.user)
        self.bella = Animal.objects.create(name='Bella', tag_number='SH-001')

    def _payload(self, **overrides):
        data = {
            'animal': self.bella.pk,
            'record_type': 'Vaccination',
            'date': '2026-05-10',
            'description': 'Annual booster',
            'administered_by': 'Dr. Wanjiru',
            'status': 'Completed',
            'outcome': '',
            'follow_up_date': '',
            'notes': '',
        }
        data.update(overrides)
        return data

    def test_add_record(self) -> None:
        response = self.client.post(reverse('health_add'), self._payload())
        self.assertRedirects(response, reverse('health_list'))
        record = HealthRecord.objects.get()
        self.assertEqual(record.animal, self.bella)
        self.assertTrue(ActivityLog.objects.filter(category='health').exists())

    def test_add_form_preselects_animal(self) -> None:
        response = self.client.get(reverse('health_add'), {'animal': self.bella.pk})
        self.assertEqual(response.context['form'].initial['animal'], self.bella.pk)

    def test_invalid_follow_up_is_reported(self) -> None:
        response = self.client.post(reverse('health_add'), self._payload(follow_up_date='2026-05-01'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Follow-up date cannot be before the record date.')
        self.assertEqual(HealthRecord.objects.count(), 0)

    def test_list_filters_and_edit_and_delete(self) -> None:
        record = HealthRecord.objects.create(animal=self.bella, record_type='Treatment', date=date(2026, 5, 1),
                                             description='Foot rot', administered_by='Vet', status='Ongoing')
        response = self.client.get(reverse('health_list'), {'status': 'Completed'})
        self.assertEqual(list(response.context['records']), [])
        response = self.client.get(reverse('health_list'), {'search': 'foot'})
        self.assertEqual(list(response.context['records']), [record])

        response = self.client.post(reverse('health_edit', args=[record.pk]), self._payload(
            record_type='Treatment', description='Foot rot cleared', status='Completed',
        ))
        self.assertRedirects(response, reverse('health_list'))
        record.refresh_from_db()
        self.assertEqual(record.status, 'Completed')

        self.client.post(reverse('health_delete', args=[record.pk]))
        self.assertFalse(HealthRecord.objects.exists())


class EventViewTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.client.force_login(self.user)
        self.bella = Animal.objects.create(name='Bella', tag_number='SH-001')
        self.luna = Animal.objects.create(name='Luna', tag_number='SH-002')

    def _payload(self, **overrides):
        data = {
            'title': 'Spring shearing',
            'event_type': 'Shearing',
            'date': '2026-05-20',
            'time': '09:30',
            'description': 'Shear the ewes before lambing',
            'animals': [self.bella.pk, self.luna.pk],
            'status': 'Upcoming',
            'notes': '',
        }
        data.update(overrides)
        return data

    def test_add_event_links_animals(self) -> None:
        response = self.client.post(reverse('event_add'), self._payload())
        self.assertRedirects(response, reverse('event_list'))
        event = Event.objects.get()
        self.assertEqual(set(event.animals.all()), {self.bella, self.luna})
        self.assertEqual(event.performed_by, self.user)
        self.assertTrue(ActivityLog.objects.filter(category='event', action='Spring shearing').exists())

    def test_add_event_requires_animals(self) -> None:
        response = self.client.post(reverse('event_add'), self._payload(animals=[]))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Select at least one animal.')
        self.assertFalse(Event.objects.exists())

    def test_detail_edit_and_delete(self) -> None:
        event = Event.objects.create(title='Weaning', event_type='Weaning', date=date(2026, 5, 1),
                                     description='Wean spring lambs', status='Upcoming')
        event.animals.set([self.bella])

        response = self.client.get(reverse('event_detail', args=[event.pk]))
        self.assertContains(response, 'Bella (#SH-001)')

        response = self.client.post(reverse('event_edit', args=[event.pk]), self._payload(
            title='Weaning', event_type='Weaning', animals=[self.luna.pk], status='Completed',
        ))
        self.assertRedirects(response, reverse('event_detail', args=[event.pk]))
        event.refresh_from_db()
        self.assertEqual(event.status, 'Completed')
        self.assertEqual(list(event.animals.all()), [self.luna])

        self.client.post(reverse('event_delete', args=[event.pk]))
        self.assertFalse(Event.objects.exists())

    def test_list_status_buckets(self) -> None:
        Event.objects.create(title='Dipping', date=date(2026, 5, 1), description='Sheep dip', status='In Progress')
        Event.objects.create(title='Mating', date=date(2026, 4, 1), description='Tupping', status='Completed')

        response = self.client.get(reverse('event_list'), {'status': 'upcoming'})
        self.assertEqual([e.title for e in response.context['events']], ['Dipping'])
        response = self.client.get(reverse('event_list'), {'status': 'completed'})
        self.assertEqual([e.title for e in response.context['events']], ['Mating'])
