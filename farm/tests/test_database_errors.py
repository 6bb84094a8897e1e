"""Database failures during writes are logged, flashed and leave rows untouched."""

from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.auth.models import User
from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from farm.models import Alert, Animal, FarmSettings, FinancialTransaction
from farm.views import DELETE_FAILED, SAVE_FAILED


def _failing(*args, **kwargs):
    raise DatabaseError('connection lost')


class TransactionWriteFailureTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.client.force_login(self.user)
        self.txn = FinancialTransaction.objects.create(
            type='Expense', category='Feed', amount=Decimal('80.00'), date=date(2026, 5, 2), description='Salt licks',
        )

    def _payload(self, **overrides):
        data = {
            'type': 'Expense',
            'category': 'Feed',
            'amount': '120',
            'date': '2026-05-10',
            'description': 'Hay bales',
            'related_to': 'Farm',
            'payment_method': 'Cash',
            'reference': '',
        }
        data.update(overrides)
        return data

    def test_failed_add_rerenders_form(self) -> None:
        with mock.patch.object(FinancialTransaction, 'save', _failing), \
                self.assertLogs('farm.views_finance', level='ERROR'):
            response = self.client.post(reverse('transaction_add'), self._payload())

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].is_bound)
        self.assertContains(response, SAVE_FAILED)
        self.assertEqual(FinancialTransaction.objects.count(), 1)

    def test_failed_edit_keeps_previous_values(self) -> None:
        with mock.patch.object(FinancialTransaction, 'save', _failing), \
                self.assertLogs('farm.views_finance', level='ERROR'):
            response = self.client.post(reverse('transaction_edit', args=[self.txn.pk]), self._payload())

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, SAVE_FAILED)
        self.txn.refresh_from_db()
        self.assertEqual((self.txn.amount, self.txn.description), (Decimal('80.00'), 'Salt licks'))

    def test_failed_delete_redirects_with_error(self) -> None:
        with mock.patch.object(FinancialTransaction, 'delete', _failing), \
                self.assertLogs('farm.views_finance', level='ERROR'):
            response = self.client.post(reverse('transaction_delete', args=[self.txn.pk]), follow=True)

        self.assertRedirects(response, reverse('transaction_list'))
        self.assertContains(response, DELETE_FAILED)
        self.assertTrue(FinancialTransaction.objects.filter(pk=self.txn.pk).exists())


class FarmWriteFailureTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', password='secret1')
        self.client.force_login(self.user)
        self.bella = Animal.objects.create(name='Bella', tag_number='SH-001')

    def test_failed_animal_add(self) -> None:
        with mock.patch.object(Animal, 'save', _failing), self.assertLogs('farm.views', level='ERROR'):
            response = self.client.post(reverse('animal_add'), {
                'name': 'Luna',
                'tag_number': 'SH-002',
                'sex': 'Female',
                'status': 'Active',
                'health_status': 'Healthy',
            })

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, SAVE_FAILED)
        self.assertFalse(Animal.objects.filter(tag_number='SH-002').exists())

    def test_failed_animal_delete(self) -> None:
        with mock.patch.object(Animal, 'delete', _failing), self.assertLogs('farm.views', level='ERROR'):
            response = self.client.post(reverse('animal_delete', args=[self.bella.pk]), follow=True)

        self.assertRedirects(response, reverse('animal_list'))
        self.assertContains(response, DELETE_FAILED)
        self.assertTrue(Animal.objects.filter(pk=self.bella.pk).exists())

    def test_failed_alert_status_update(self) -> None:
        alert = Alert.objects.create(title='Fix fence', description='North paddock', due_date=date(2026, 5, 1))
        with mock.patch.object(Alert, 'save', _failing), self.assertLogs('farm.views', level='ERROR'):
            response = self.client.post(reverse('alert_status', args=[alert.pk]), {'status': 'Completed'}, follow=True)

        self.assertContains(response, SAVE_FAILED)
        alert.refresh_from_db()
        self.assertEqual(alert.status, 'Pending')

    def test_failed_settings_save(self) -> None:
        FarmSettings.load()
        with mock.patch.object(FarmSettings, 'save', _failing), self.assertLogs('farm.views', level='ERROR'):
            response = self.client.post(reverse('settings'), {
                'action': 'settings',
                'farm_name': 'Green Hills',
                'owner_name': '',
                'contact_email': '',
                'contact_phone': '',
                'location': '',
                'currency': 'USD',
                'date_format': 'YYYY-MM-DD',
                'time_zone': 'Africa/Nairobi',
            })

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, SAVE_FAILED)
        self.assertEqual(FarmSettings.load().farm_name, 'Mumbi Farm')
