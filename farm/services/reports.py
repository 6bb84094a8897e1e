"""Report catalogue, date ranges and spreadsheet rendering.

A report is identified by a catalogue id such as ``health-vaccination``.
:func:`build_report` turns an id and a date range into a
:class:`ReportDataset` (a title, column headers and plain rows);
:func:`render_excel` and :func:`render_csv` serialise the dataset for
download. Inventory reports describe the herd as it stands today and
ignore the range; every other report only includes rows dated inside it.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from io import BytesIO, StringIO
from typing import Any, Callable, Dict, List, Optional, Tuple

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from django.utils import timezone

from ..models import Animal, Event, FinancialTransaction, HealthRecord
from .periods import MONTH_LABELS, add_months, day_start

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Raised when a report cannot be generated for the requested options."""


REPORT_CATALOG: List[Tuple[str, List[Tuple[str, str]]]] = [
    ('Inventory', [
        ('inventory-flock', 'Current Flock Summary'),
        ('inventory-breeding', 'Breeding Stock Report'),
        ('inventory-age', 'Age Distribution'),
    ]),
    ('Health', [
        ('health-vaccination', 'Vaccination Status'),
        ('health-incidents', 'Health Incidents'),
        ('health-mortality', 'Mortality Report'),
    ]),
    ('Breeding', [
        ('breeding-performance', 'Breeding Performance'),
        ('breeding-lambing', 'Lambing Statistics'),
        ('breeding-genetic', 'Genetic Analysis'),
    ]),
    ('Financial', [
        ('financial-revenue', 'Revenue Summary'),
        ('financial-expense', 'Expense Analysis'),
        ('financial-profit', 'Profitability Report'),
    ]),
]

REPORT_FORMAT_CHOICES = [
    ('Excel', 'Excel Spreadsheet'),
    ('CSV', 'CSV File'),
]

DATE_RANGE_CHOICES = [
    ('Last7Days', 'Last 7 Days'),
    ('Last30Days', 'Last 30 Days'),
    ('Last3Months', 'Last 3 Months'),
    ('Last6Months', 'Last 6 Months'),
    ('Last12Months', 'Last 12 Months'),
    ('Custom', 'Custom Range'),
]

_RANGE_DAYS = {'Last7Days': 7, 'Last30Days': 30}
_RANGE_MONTHS = {'Last3Months': 3, 'Last6Months': 6, 'Last12Months': 12}

HERD_STATUSES = (Animal.Status.ACTIVE, Animal.Status.PREGNANT)
BREEDING_AGE_MONTHS = 12


def report_choices() -> List[Tuple[str, List[Tuple[str, str]]]]:
    """Return the catalogue grouped for a ``<select>`` with optgroups."""

    return [(f"{group} Reports", list(reports)) for group, reports in REPORT_CATALOG]


def report_name(report_id: str) -> str:
    """Return ``"Name (Group)"`` for a catalogue id."""

    for group, reports in REPORT_CATALOG:
        for rid, name in reports:
            if rid == report_id:
                return f"{name} ({group})"
    raise ReportError(f'Unknown report type "{report_id}".')


def resolve_date_range(
    date_range: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """Translate a range key into inclusive ``(start, end)`` dates."""

    today = today or timezone.localdate()
    if date_range in _RANGE_DAYS:
        return today - timedelta(days=_RANGE_DAYS[date_range]), today
    if date_range in _RANGE_MONTHS:
        return add_months(today, -_RANGE_MONTHS[date_range]), today
    if date_range == 'Custom':
        if not start or not end:
            raise ReportError('A custom range needs both a start and an end date.')
        if end < start:
            raise ReportError('The end date cannot be before the start date.')
        return start, end
    raise ReportError(f'Unknown date range "{date_range}".')


@dataclass
class ReportDataset:
    report_id: str
    title: str
    start: date
    end: date
    columns: List[str]
    rows: List[List[Any]] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return f"{self.report_id}-{self.start:%Y%m%d}-{self.end:%Y%m%d}"


def _money(value: Optional[Decimal]) -> float:
    return float(round(Decimal(value or 0), 2))


def _age_in_months(birth_date: date, today: date) -> int:
    months = (today.year - birth_date.year) * 12 + (today.month - birth_date.month)
    if today.day < birth_date.day:
        months -= 1
    return max(months, 0)


def _animal_labels(event: Event) -> str:
    return ', '.join(f"{animal.name} (#{animal.tag_number})" for animal in event.animals.all())


def _inventory_flock(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    columns = ['Tag Number', 'Name', 'Breed', 'Sex', 'Status', 'Health Status', 'Age', 'Weight (kg)']
    rows = [
        [
            animal.tag_number,
            animal.name,
            animal.breed,
            animal.sex,
            animal.status,
            animal.health_status,
            animal.age,
            _money(animal.weight_kg) if animal.weight_kg is not None else '',
        ]
        for animal in Animal.objects.filter(status__in=HERD_STATUSES).order_by('tag_number')
    ]
    return columns, rows


def _inventory_breeding(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    columns = ['Tag Number', 'Name', 'Breed', 'Sex', 'Status', 'Birth Date', 'Age (months)']
    rows = []
    herd = Animal.objects.filter(status__in=HERD_STATUSES, birth_date__isnull=False).order_by('sex', 'tag_number')
    for animal in herd:
        age_months = _age_in_months(animal.birth_date, today)
        if age_months < BREEDING_AGE_MONTHS:
            continue
        rows.append([
            animal.tag_number,
            animal.name,
            animal.breed,
            animal.sex,
            animal.status,
            animal.birth_date.isoformat(),
            age_months,
        ])
    return columns, rows


AGE_BUCKETS: List[Tuple[str, int, Optional[int]]] = [
    ('Under 6 months', 0, 6),
    ('6-12 months', 6, 12),
    ('1-2 years', 12, 24),
    ('2-5 years', 24, 60),
    ('Over 5 years', 60, None),
]


def _inventory_age(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    columns = ['Age Group', 'Female', 'Male', 'Total']
    counts: Dict[str, Dict[str, int]] = {
        label: {'Female': 0, 'Male': 0} for label, _, _ in AGE_BUCKETS
    }
    counts['Unknown'] = {'Female': 0, 'Male': 0}
    for animal in Animal.objects.filter(status__in=HERD_STATUSES):
        label = 'Unknown'
        if animal.birth_date:
            months = _age_in_months(animal.birth_date, today)
            for bucket, lower, upper in AGE_BUCKETS:
                if months >= lower and (upper is None or months < upper):
                    label = bucket
                    break
        counts[label][animal.sex] = counts[label].get(animal.sex, 0) + 1
    rows = [
        [label, values['Female'], values['Male'], values['Female'] + values['Male']]
        for label, values in counts.items()
    ]
    return columns, rows


def _health_rows(record_types: List[str], start: date, end: date) -> List[List[Any]]:
    records = (
        HealthRecord.objects.filter(record_type__in=record_types, date__gte=start, date__lte=end)
        .select_related('animal')
        .order_by('date', 'pk')
    )
    return [
        [
            record.date.isoformat(),
            record.animal.name,
            record.animal.tag_number,
            record.record_type,
            record.description,
            record.administered_by,
            record.status,
            record.outcome,
            record.follow_up_date.isoformat() if record.follow_up_date else '',
        ]
        for record in records
    ]


HEALTH_COLUMNS = [
    'Date', 'Animal', 'Tag Number', 'Type', 'Description', 'Administered By', 'Status', 'Outcome', 'Follow-up Date',
]


def _health_vaccination(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    return HEALTH_COLUMNS, _health_rows([HealthRecord.RecordType.VACCINATION], start, end)


def _health_incidents(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    types = [HealthRecord.RecordType.ILLNESS, HealthRecord.RecordType.TREATMENT]
    return HEALTH_COLUMNS, _health_rows(types, start, end)


def _health_mortality(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    columns = ['Tag Number', 'Name', 'Breed', 'Sex', 'Recorded On', 'Notes']
    deaths = Animal.objects.filter(
        status=Animal.Status.DEAD,
        updated_at__gte=day_start(start),
        updated_at__lt=day_start(end + timedelta(days=1)),
    ).order_by('updated_at')
    rows = [
        [
            animal.tag_number,
            animal.name,
            animal.breed,
            animal.sex,
            timezone.localtime(animal.updated_at).date().isoformat(),
            animal.notes,
        ]
        for animal in deaths
    ]
    return columns, rows


def _event_rows(event_type: str, start: date, end: date) -> List[List[Any]]:
    events = (
        Event.objects.filter(event_type=event_type, date__gte=start, date__lte=end)
        .prefetch_related('animals')
        .order_by('date', 'pk')
    )
    return [
        [
            event.date.isoformat(),
            event.title,
            event.status,
            event.animals.count(),
            _animal_labels(event),
            event.description,
        ]
        for event in events
    ]


EVENT_COLUMNS = ['Date', 'Title', 'Status', 'Animal Count', 'Animals', 'Description']


def _breeding_performance(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    return EVENT_COLUMNS, _event_rows(Event.EventType.MATING, start, end)


def _breeding_lambing(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    return EVENT_COLUMNS, _event_rows(Event.EventType.BIRTH, start, end)


_PARENT_RE = {
    'father': re.compile(r'^Father ID:\s*(.+)$', re.MULTILINE),
    'mother': re.compile(r'^Mother ID:\s*(.+)$', re.MULTILINE),
}


def _breeding_genetic(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    columns = ['Tag Number', 'Name', 'Breed', 'Sex', 'Birth Date', 'Father ID', 'Mother ID']
    animals = Animal.objects.filter(
        created_at__gte=day_start(start),
        created_at__lt=day_start(end + timedelta(days=1)),
    ).order_by('tag_number')
    rows = []
    for animal in animals:
        father = _PARENT_RE['father'].search(animal.notes or '')
        mother = _PARENT_RE['mother'].search(animal.notes or '')
        rows.append([
            animal.tag_number,
            animal.name,
            animal.breed,
            animal.sex,
            animal.birth_date.isoformat() if animal.birth_date else '',
            father.group(1).strip() if father else '',
            mother.group(1).strip() if mother else '',
        ])
    return columns, rows


TRANSACTION_COLUMNS = ['Date', 'Category', 'Description', 'Amount', 'Payment Method', 'Reference', 'Animal']


def _transaction_rows(txn_type: str, start: date, end: date) -> List[List[Any]]:
    transactions = (
        FinancialTransaction.objects.filter(type=txn_type, date__gte=start, date__lte=end)
        .select_related('animal')
        .order_by('date', 'pk')
    )
    return [
        [
            txn.date.isoformat(),
            txn.category,
            txn.description,
            _money(txn.amount),
            txn.payment_method,
            txn.reference,
            txn.animal.tag_number if txn.animal else '',
        ]
        for txn in transactions
    ]


def _financial_revenue(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    return TRANSACTION_COLUMNS, _transaction_rows(FinancialTransaction.TransactionType.INCOME, start, end)


def _financial_expense(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    return TRANSACTION_COLUMNS, _transaction_rows(FinancialTransaction.TransactionType.EXPENSE, start, end)


def _financial_profit(start: date, end: date, today: date) -> Tuple[List[str], List[List[Any]]]:
    columns = ['Month', 'Income', 'Expenses', 'Net Profit']
    months: Dict[Tuple[int, int], Dict[str, Decimal]] = {}
    transactions = FinancialTransaction.objects.filter(date__gte=start, date__lte=end).only('type', 'amount', 'date')
    for txn in transactions:
        bucket = months.setdefault((txn.date.year, txn.date.month), {'income': Decimal('0'), 'expenses': Decimal('0')})
        if txn.type == FinancialTransaction.TransactionType.INCOME:
            bucket['income'] += txn.amount
        else:
            bucket['expenses'] += txn.amount
    rows = []
    for (year, month) in sorted(months):
        values = months[(year, month)]
        rows.append([
            f"{MONTH_LABELS[month - 1]} {year}",
            _money(values['income']),
            _money(values['expenses']),
            _money(values['income'] - values['expenses']),
        ])
    return columns, rows


REPORT_BUILDERS: Dict[str, Callable[[date, date, date], Tuple[List[str], List[List[Any]]]]] = {
    'inventory-flock': _inventory_flock,
    'inventory-breeding': _inventory_breeding,
    'inventory-age': _inventory_age,
    'health-vaccination': _health_vaccination,
    'health-incidents': _health_incidents,
    'health-mortality': _health_mortality,
    'breeding-performance': _breeding_performance,
    'breeding-lambing': _breeding_lambing,
    'breeding-genetic': _breeding_genetic,
    'financial-revenue': _financial_revenue,
    'financial-expense': _financial_expense,
    'financial-profit': _financial_profit,
}


def build_report(report_id: str, start: date, end: date, today: Optional[date] = None) -> ReportDataset:
    """Collect the rows for ``report_id`` between ``start`` and ``end`` inclusive."""

    builder = REPORT_BUILDERS.get(report_id)
    if builder is None:
        raise ReportError(f'Unknown report type "{report_id}".')
    today = today or timezone.localdate()
    columns, rows = builder(start, end, today)
    logger.info('Built report %s for %s..%s with %d rows', report_id, start, end, len(rows))
    return ReportDataset(
        report_id=report_id,
        title=report_name(report_id),
        start=start,
        end=end,
        columns=columns,
        rows=rows,
    )


def render_excel(dataset: ReportDataset) -> bytes:
    """Serialise the dataset as an ``.xlsx`` workbook."""

    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = 'Report'
    worksheet.append([dataset.title])
    worksheet.append([f"Period: {dataset.start:%Y-%m-%d} to {dataset.end:%Y-%m-%d}"])
    worksheet.append([])
    worksheet.append(dataset.columns)
    worksheet['A1'].font = Font(bold=True, size=14)
    for cell in worksheet[4]:
        cell.font = Font(bold=True)
    for row in dataset.rows:
        worksheet.append(row)
    for index, header in enumerate(dataset.columns, start=1):
        widest = max([len(str(header))] + [len(str(row[index - 1])) for row in dataset.rows])
        worksheet.column_dimensions[get_column_letter(index)].width = min(max(widest + 2, 10), 60)
    stream = BytesIO()
    workbook.save(stream)
    return stream.getvalue()


def render_csv(dataset: ReportDataset) -> str:
    """Serialise the dataset as CSV text with a UTF-8 BOM for spreadsheet apps."""

    output = StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(dataset.columns)
    for row in dataset.rows:
        writer.writerow(row)
    return '\ufeff' + output.getvalue()
