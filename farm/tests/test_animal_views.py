"""Tests for the animal list, quick form, registration and delete views."""

from datetime import date, timedelta

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from farm.models import ActivityLog, Animal, HealthRecord
from farm.services.animal_registration import calculate_age, format_registration_notes


class RegistrationHelperTests(TestCase):
    def test_calculate_age(self) -> None:
        today = date(2026, 5, 15)
        self.assertEqual(calculate_age(date(2026, 4, 10), today), '1 month')
        self.assertEqual(calculate_age(date(2025, 11, 20), today), '6 months')
        self.assertEqual(calculate_age(date(2025, 5, 15), today), '1 year')
        self.assertEqual(calculate_age(date(2023, 2, 1), today), '3 years')

    def test_notes_layout(self) -> None:
        notes = format_registration_notes({
            'description': 'Strong lamb',
            'state_at_birth': 'Healthy',
            'father_tag': 'SH-010',
            'color': 'White with black face',
            'origin': 'purchase',
        })
        self.assertEqual(
            notes,
            'Strong lamb\n\nState at birth: Healthy\nFather ID: SH-010\n'
            'Color/Markings: White with black face\nOrigin: Purchased',
        )


class AnimalViewTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.client.force_login(self.user)
        self.bella = Animal.objects.create(name='Bella', tag_number='SH-001', breed='Dorper', sex='Female')
        Animal.objects.create(name='Max', tag_number='SH-002', breed='Merino', sex='Male', status='Sold')

    def test_list_filters_by_query_string(self) -> None:
        response = self.client.get(reverse('animal_list'), {'status': 'Sold'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([a.name for a in response.context['animals']], ['Max'])

        response = self.client.get(reverse('animal_list'), {'search': 'dorper', 'status': 'all'})
        self.assertEqual([a.name for a in response.context['animals']], ['Bella'])

    def test_quick_add(self) -> None:
        response = self.client.post(reverse('animal_add'), {
            'name': 'Luna',
            'tag_number': 'SH-003',
            'breed': 'Dorper',
            'age': '2 years',
            'sex': 'Female',
            'status': 'Active',
            'weight_kg': '45.5',
            'health_status': 'Healthy',
        })
        self.assertRedirects(response, reverse('animal_list'))
        self.assertTrue(Animal.objects.filter(tag_number='SH-003').exists())
        self.assertTrue(ActivityLog.objects.filter(category='animal', action='Added animal').exists())

    def test_quick_add_rejects_duplicate_tag(self) -> None:
        response = self.client.post(reverse('animal_add'), {
            'name': 'Copy',
            'tag_number': 'SH-001',
            'sex': 'Female',
            'status': 'Active',
            'health_status': 'Healthy',
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Animal.objects.filter(tag_number='SH-001').count(), 1)
        self.assertIn('tag_number', response.context['form'].errors)

    def test_duplicate_tag_check_ignores_case(self) -> None:
        payload = {'name': 'Copy', 'tag_number': 'sh-001', 'sex': 'Female', 'status': 'Active', 'health_status': 'Healthy'}
        response = self.client.post(reverse('animal_add'), payload)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['form'].errors['tag_number'], ['An animal with this tag number already exists.'])
        self.assertFalse(Animal.objects.filter(tag_number='sh-001').exists())

        max_pk = Animal.objects.get(tag_number='SH-002').pk
        response = self.client.post(reverse('animal_edit', args=[max_pk]), dict(payload, name='Max', tag_number='Sh-001'))
        self.assertIn('tag_number', response.context['form'].errors)

        response = self.client.post(reverse('animal_edit', args=[self.bella.pk]), dict(payload, name='Bella', tag_number='sh-001'))
        self.assertRedirects(response, reverse('animal_list'))
        self.bella.refresh_from_db()
        self.assertEqual(self.bella.tag_number, 'sh-001')

    def test_edit(self) -> None:
        response = self.client.post(reverse('animal_edit', args=[self.bella.pk]), {
            'name': 'Bella',
            'tag_number': 'SH-001',
            'sex': 'Female',
            'status': 'Pregnant',
            'health_status': 'Pregnant',
        })
        self.assertRedirects(response, reverse('animal_list'))
        self.bella.refresh_from_db()
        self.assertEqual(self.bella.status, 'Pregnant')

    def test_register_stores_derived_fields(self) -> None:
        birth = timezone.localdate() - timedelta(days=70)
        response = self.client.post(reverse('animal_register'), {
            'name': 'Lamb',
            'tag_number': 'SH-100',
            'sex': 'Male',
            'birth_date': birth.isoformat(),
            'breed': 'Dorper',
            'weight_at_birth': '3.4',
            'origin': 'birth',
            'mother_tag': 'SH-001',
            'description': 'Twin',
        })
        self.assertRedirects(response, reverse('animal_list'))
        lamb = Animal.objects.get(tag_number='SH-100')
        self.assertEqual(lamb.status, 'Active')
        self.assertEqual(lamb.health_status, 'Healthy')
        self.assertTrue(lamb.age.endswith('months'))
        self.assertTrue(lamb.notes.startswith('Twin\n\n'))
        self.assertIn('Mother ID: SH-001', lamb.notes)

    def test_delete_requires_post_and_cascades(self) -> None:
        HealthRecord.objects.create(animal=self.bella, record_type='Vaccination', date=date(2026, 5, 1),
                                    description='Booster', administered_by='Vet')
        url = reverse('animal_delete', args=[self.bella.pk])

        self.assertEqual(self.client.get(url).status_code, 405)

        response = self.client.post(url)
        self.assertRedirects(response, reverse('animal_list'))
        self.assertFalse(Animal.objects.filter(pk=self.bella.pk).exists())
        self.assertEqual(HealthRecord.objects.count(), 0)

    def test_missing_animal_is_404(self) -> None:
        self.assertEqual(self.client.get(reverse('animal_edit', args=[9999])).status_code, 404)
