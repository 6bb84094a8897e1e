"""Search, filter and summary helpers used by the list pages."""

from datetime import date
from decimal import Decimal

from django.test import TestCase

from farm.models import Alert, Animal, Event, FinancialTransaction, HealthRecord
from farm.services.list_filters import (
    alert_counts,
    filter_alerts,
    filter_animals,
    filter_events,
    filter_health_records,
    filter_transactions,
    transaction_totals,
)


class AnimalFilterTests(TestCase):
    def setUp(self) -> None:
        Animal.objects.create(name='Bella', tag_number='SH-001', breed='Dorper', sex='Female', status='Active')
        Animal.objects.create(name='Max', tag_number='SH-002', breed='Merino', sex='Male', status='Sold')
        Animal.objects.create(name='Luna', tag_number='SH-003', breed='Dorper', sex='Female',
                              status='Pregnant', health_status='Pregnant')

    def test_search_is_case_insensitive_over_name_tag_and_breed(self) -> None:
        qs = Animal.objects.all()
        self.assertEqual({a.name for a in filter_animals(qs, search='dorper')}, {'Bella', 'Luna'})
        self.assertEqual({a.name for a in filter_animals(qs, search='sh-002')}, {'Max'})
        self.assertEqual({a.name for a in filter_animals(qs, search='BEL')}, {'Bella'})

    def test_all_disables_filters(self) -> None:
        self.assertEqual(filter_animals(Animal.objects.all(), status='all', sex='all', health='all').count(), 3)

    def test_equality_filters_combine(self) -> None:
        qs = filter_animals(Animal.objects.all(), sex='Female', status='Pregnant')
        self.assertEqual([a.name for a in qs], ['Luna'])
        self.assertEqual(filter_animals(Animal.objects.all(), health='Pregnant').count(), 1)


class HealthRecordFilterTests(TestCase):
    def setUp(self) -> None:
        bella = Animal.objects.create(name='Bella', tag_number='SH-001')
        max_ = Animal.objects.create(name='Max', tag_number='SH-002')
        HealthRecord.objects.create(animal=bella, record_type='Vaccination', date=date(2026, 5, 1),
                                    description='Clostridial booster', administered_by='Vet', status='Completed')
        HealthRecord.objects.create(animal=max_, record_type='Treatment', date=date(2026, 5, 2),
                                    description='Foot rot treatment', administered_by='Vet', status='Ongoing')

    def test_search_matches_animal_tag_and_description(self) -> None:
        qs = HealthRecord.objects.all()
        self.assertEqual(filter_health_records(qs, search='sh-002').count(), 1)
        self.assertEqual(filter_health_records(qs, search='booster').get().animal.name, 'Bella')

    def test_status_filter_returns_only_matching_rows(self) -> None:
        qs = filter_health_records(HealthRecord.objects.all(), status='Completed')
        self.assertTrue(all(record.status == 'Completed' for record in qs))
        self.assertEqual(qs.count(), 1)


class EventFilterTests(TestCase):
    def setUp(self) -> None:
        for title, status in [('Shearing', 'Upcoming'), ('Weaning', 'In Progress'), ('Mating', 'Completed'), ('Dip', 'Missed')]:
            Event.objects.create(title=title, description=f'{title} session', date=date(2026, 5, 1), status=status)

    def test_upcoming_includes_in_progress(self) -> None:
        titles = {e.title for e in filter_events(Event.objects.all(), status='upcoming')}
        self.assertEqual(titles, {'Shearing', 'Weaning'})

    def test_completed_and_all(self) -> None:
        self.assertEqual([e.title for e in filter_events(Event.objects.all(), status='completed')], ['Mating'])
        self.assertEqual(filter_events(Event.objects.all(), status='all').count(), 4)


class TransactionFilterTests(TestCase):
    def setUp(self) -> None:
        FinancialTransaction.objects.create(type='Income', category='Wool Sales', amount=Decimal('500.00'),
                                            date=date(2026, 5, 1), description='Wool clip', reference='INV-1')
        FinancialTransaction.objects.create(type='Expense', category='Feed', amount=Decimal('120.25'),
                                            date=date(2026, 5, 2), description='Hay bales')
        FinancialTransaction.objects.create(type='Expense', category='Medication', amount=Decimal('30.00'),
                                            date=date(2026, 5, 3), description='Dewormer')

    def test_totals_follow_filters(self) -> None:
        qs = FinancialTransaction.objects.all()
        totals = transaction_totals(qs)
        self.assertEqual(totals.income, Decimal('500.00'))
        self.assertEqual(totals.expenses, Decimal('150.25'))
        self.assertEqual(totals.net, Decimal('349.75'))

        expenses = filter_transactions(qs, type='Expense', category='Feed')
        totals = transaction_totals(expenses)
        self.assertEqual(totals.income, Decimal('0'))
        self.assertEqual(totals.expenses, Decimal('120.25'))

    def test_search_covers_reference(self) -> None:
        self.assertEqual(filter_transactions(FinancialTransaction.objects.all(), search='inv-1').count(), 1)

    def test_totals_of_empty_queryset(self) -> None:
        totals = transaction_totals(FinancialTransaction.objects.none())
        self.assertEqual(totals.net, Decimal('0'))


class AlertFilterTests(TestCase):
    def setUp(self) -> None:
        self.today = date(2026, 5, 15)
        Alert.objects.create(title='Vaccinate lambs', description='Due soon', due_date=date(2026, 5, 20),
                             status='Pending', priority='High', type='Task')
        Alert.objects.create(title='Order feed', description='Running low', due_date=date(2026, 5, 10),
                             status='In Progress', priority='Medium', type='Reminder')
        Alert.objects.create(title='Fix fence', description='North paddock', due_date=date(2026, 5, 1),
                             status='Completed', priority='Low', type='Task')
        Alert.objects.create(title='Old warning', description='Ignored', due_date=date(2026, 5, 1),
                             status='Cancelled', priority='Urgent', type='Warning')

    def test_counts(self) -> None:
        counts = alert_counts(Alert.objects.all(), self.today)
        self.assertEqual(counts.pending, 1)
        self.assertEqual(counts.completed, 1)
        # Only the in-progress alert is both past due and still open.
        self.assertEqual(counts.overdue, 1)

    def test_filters(self) -> None:
        qs = Alert.objects.all()
        self.assertEqual([a.title for a in filter_alerts(qs, status='Completed')], ['Fix fence'])
        self.assertEqual(filter_alerts(qs, type='Task').count(), 2)
        self.assertEqual([a.title for a in filter_alerts(qs, priority='Urgent')], ['Old warning'])
        self.assertEqual([a.title for a in filter_alerts(qs, search='PADDOCK')], ['Fix fence'])

    def test_is_overdue(self) -> None:
        self.assertTrue(Alert.objects.get(title='Order feed').is_overdue(self.today))
        self.assertFalse(Alert.objects.get(title='Fix fence').is_overdue(self.today))
        self.assertFalse(Alert.objects.get(title='Vaccinate lambs').is_overdue(self.today))
