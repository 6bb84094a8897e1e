"""Forms used by the farm application.

This module defines Django forms for registration and login, the profile
and password pages, and every create/edit dialog of the farm pages:
animals (quick form and detailed registration), health records, events,
financial transactions, alerts, reports and farm settings. Forms
encapsulate both the input widgets displayed to users and the server-side
validation rules for their respective models.
"""

from __future__ import annotations

import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from django import forms
from django.contrib.auth.models import User
from django.utils import timezone

from .models import (
    Alert,
    Animal,
    Breed,
    Event,
    FarmSettings,
    FinancialTransaction,
    HealthCategory,
    HealthItem,
    HealthRecord,
    Profile,
)
from .services.reports import DATE_RANGE_CHOICES, REPORT_FORMAT_CHOICES, report_choices


INCOME_CATEGORIES: List[str] = [
    'Sheep Sales',
    'Wool Sales',
    'Breeding Services',
    'Manure Sales',
    'Government Subsidies',
    'Insurance Claims',
    'Other',
]

EXPENSE_CATEGORIES: List[str] = [
    'Feed',
    'Medication',
    'Veterinary Services',
    'Equipment',
    'Shearing',
    'Labor',
    'Transport',
    'Utilities',
    'Repairs',
    'Insurance',
    'Other',
]

# Largest value the amount column (10 digits, 2 decimal places) can hold.
MAX_AMOUNT = Decimal('99999999.99')

DEFAULT_BREEDS: List[str] = [
    'Blackhead Persian',
    'Border Leicester',
    'Corriedale',
    'Dorper',
    'Dorset',
    'Hampshire',
    'Merino',
    'Red Maasai',
    'Romney',
    'Suffolk',
    'Texel',
]

DEFAULT_HEALTH_CATALOGUE: Dict[str, List[str]] = {
    'Vaccinations': ['Clostridial Diseases', 'Pulpy Kidney', 'Tetanus', 'Pasteurella'],
    'Common Diseases': ['Foot Rot', 'Mastitis', 'Pneumonia', 'Internal Parasites'],
    'Medications': ['Antibiotics', 'Anti-inflammatories', 'Dewormers', 'Vitamins'],
}


def active_breed_names() -> List[str]:
    """Return breed suggestions for the animal forms.

    Active catalogue entries win; an empty catalogue falls back to the
    default breed list so a fresh install still offers suggestions.
    """

    names = list(Breed.objects.filter(active=True).values_list('name', flat=True))
    return names or list(DEFAULT_BREEDS)


def health_catalogue() -> List[Tuple[str, List[str]]]:
    """Return ``(category, items)`` pairs, or the defaults for an empty catalogue."""

    catalogue = [
        (category.name, [item.name for item in category.items.all()])
        for category in HealthCategory.objects.prefetch_related('items')
    ]
    return catalogue or [(name, list(items)) for name, items in DEFAULT_HEALTH_CATALOGUE.items()]


class RegistrationForm(forms.Form):
    """Collects the information required to create a new user account."""

    username = forms.CharField(label='Username', min_length=3, max_length=150, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': 'shepherd',
    }))
    email = forms.EmailField(label='Email', widget=forms.EmailInput(attrs={
        'class': 'form-control',
        'placeholder': 'you@example.com',
    }))
    password = forms.CharField(label='Password', min_length=6, widget=forms.PasswordInput(attrs={
        'class': 'form-control',
        'placeholder': '••••••••',
    }))
    confirm_password = forms.CharField(label='Confirm Password', widget=forms.PasswordInput(attrs={
        'class': 'form-control',
        'placeholder': '••••••••',
    }))

    def clean_username(self) -> str:
        username = self.cleaned_data['username'].strip()
        if User.objects.filter(username__iexact=username).exists():
            raise forms.ValidationError('This username is already taken.')
        return username

    def clean_email(self) -> str:
        email = self.cleaned_data['email'].lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError('An account with this email already exists.')
        return email

    def clean(self) -> Dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        password = cleaned_data.get('password')
        confirm = cleaned_data.get('confirm_password')
        if password and confirm and password != confirm:
            self.add_error('confirm_password', 'Passwords do not match.')
        return cleaned_data


class LoginForm(forms.Form):
    """Login form requesting an email (or username) and password."""

    email = forms.CharField(label='Email or Username', max_length=254, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': 'you@example.com',
    }))
    password = forms.CharField(label='Password', widget=forms.PasswordInput(attrs={
        'class': 'form-control',
        'placeholder': '••••••••',
    }))


class ProfileForm(forms.Form):
    """Edit the username and display name of the signed-in user."""

    username = forms.CharField(label='Username', min_length=3, max_length=150, widget=forms.TextInput(attrs={
        'class': 'form-control',
    }))
    full_name = forms.CharField(label='Full Name', max_length=255, required=False, widget=forms.TextInput(attrs={
        'class': 'form-control',
    }))

    def __init__(self, *args, user: User, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_username(self) -> str:
        username = self.cleaned_data['username'].strip()
        clash = User.objects.filter(username__iexact=username).exclude(pk=self.user.pk)
        if clash.exists():
            raise forms.ValidationError('This username is already taken.')
        return username


class PasswordChangeForm(forms.Form):
    """Change the password after verifying the current one."""

    current_password = forms.CharField(label='Current Password', widget=forms.PasswordInput(attrs={
        'class': 'form-control',
    }))
    new_password = forms.CharField(label='New Password', min_length=6, widget=forms.PasswordInput(attrs={
        'class': 'form-control',
    }))
    confirm_password = forms.CharField(label='Confirm New Password', widget=forms.PasswordInput(attrs={
        'class': 'form-control',
    }))

    def __init__(self, *args, user: User, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_current_password(self) -> str:
        current = self.cleaned_data['current_password']
        if not self.user.check_password(current):
            raise forms.ValidationError('Current password is incorrect.')
        return current

    def clean(self) -> Dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        new_password = cleaned_data.get('new_password')
        confirm = cleaned_data.get('confirm_password')
        if new_password and confirm and new_password != confirm:
            self.add_error('confirm_password', 'Passwords do not match.')
        return cleaned_data


class AnimalForm(forms.ModelForm):
    """Quick add/edit form for an animal in the inventory."""

    class Meta:
        model = Animal
        fields = [
            'name',
            'tag_number',
            'breed',
            'age',
            'sex',
            'status',
            'weight_kg',
            'health_status',
            'birth_date',
            'image_url',
            'notes',
        ]
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Animal name'}),
            'tag_number': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. SH-001'}),
            'breed': forms.TextInput(attrs={'class': 'form-control', 'list': 'breed-options'}),
            'age': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. 2 years'}),
            'sex': forms.Select(attrs={'class': 'form-select'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'weight_kg': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01', 'min': '0'}),
            'health_status': forms.Select(attrs={'class': 'form-select'}),
            'birth_date': forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
            'image_url': forms.URLInput(attrs={'class': 'form-control', 'placeholder': 'https://'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
        }

    def clean_name(self) -> str:
        name = self.cleaned_data['name'].strip()
        if len(name) < 2:
            raise forms.ValidationError('Name must be at least 2 characters.')
        return name

    def clean_tag_number(self) -> str:
        tag = self.cleaned_data['tag_number'].strip()
        clash = Animal.objects.filter(tag_number__iexact=tag)
        if self.instance.pk:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise forms.ValidationError('An animal with this tag number already exists.')
        return tag

    def clean_weight_kg(self) -> Optional[Decimal]:
        weight = self.cleaned_data.get('weight_kg')
        if weight is not None and weight < 0:
            raise forms.ValidationError('Weight cannot be negative.')
        return weight


class AnimalRegistrationForm(forms.Form):
    """Detailed registration of a newborn or acquired animal.

    Only the core columns are stored directly; parentage, colour, state at
    birth and origin are folded into the animal's notes by
    :func:`farm.services.animal_registration.format_registration_notes`.
    """

    ORIGIN_CHOICES = [
        ('birth', 'Born on farm'),
        ('purchase', 'Purchased'),
        ('import', 'Imported'),
    ]

    name = forms.CharField(label='Name', min_length=2, max_length=255, widget=forms.TextInput(attrs={
        'class': 'form-control',
    }))
    tag_number = forms.CharField(label='Tag Number', max_length=64, widget=forms.TextInput(attrs={
        'class': 'form-control',
    }))
    sex = forms.ChoiceField(label='Sex', choices=Animal.Sex.choices, widget=forms.Select(attrs={
        'class': 'form-select',
    }))
    birth_date = forms.DateField(label='Date of Birth', widget=forms.DateInput(attrs={
        'type': 'date',
        'class': 'form-control',
    }))
    breed = forms.CharField(label='Breed', max_length=100, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'list': 'breed-options',
    }))
    weight_at_birth = forms.DecimalField(
        label='Weight at Birth (kg)',
        min_value=Decimal('0.1'),
        max_digits=6,
        decimal_places=2,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.1'}),
    )
    origin = forms.ChoiceField(label='Origin', choices=ORIGIN_CHOICES, initial='birth', widget=forms.Select(attrs={
        'class': 'form-select',
    }))
    state_at_birth = forms.CharField(label='State at Birth', required=False, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': 'e.g., Healthy, Weak, etc.',
    }))
    father_tag = forms.CharField(label="Father's ID", required=False, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': "Enter father's tag number",
    }))
    mother_tag = forms.CharField(label="Mother's ID", required=False, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': "Enter mother's tag number",
    }))
    color = forms.CharField(label='Color/Markings', required=False, widget=forms.TextInput(attrs={
        'class': 'form-control',
    }))
    description = forms.CharField(label='Description', required=False, widget=forms.Textarea(attrs={
        'class': 'form-control',
        'rows': 3,
    }))

    def clean_tag_number(self) -> str:
        tag = self.cleaned_data['tag_number'].strip()
        if not tag:
            raise forms.ValidationError('Tag number is required.')
        if Animal.objects.filter(tag_number__iexact=tag).exists():
            raise forms.ValidationError('An animal with this tag number already exists.')
        return tag

    def clean_birth_date(self) -> datetime.date:
        birth_date = self.cleaned_data['birth_date']
        if birth_date > timezone.localdate():
            raise forms.ValidationError('Date of birth cannot be in the future.')
        return birth_date


class HealthRecordForm(forms.ModelForm):
    """Add or edit a health record for an animal."""

    class Meta:
        model = HealthRecord
        fields = [
            'animal',
            'record_type',
            'date',
            'description',
            'administered_by',
            'status',
            'outcome',
            'follow_up_date',
            'notes',
        ]
        widgets = {
            'animal': forms.Select(attrs={'class': 'form-select'}),
            'record_type': forms.Select(attrs={'class': 'form-select'}),
            'date': forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
            'description': forms.TextInput(attrs={'class': 'form-control', 'list': 'health-item-options'}),
            'administered_by': forms.TextInput(attrs={'class': 'form-control'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'outcome': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'follow_up_date': forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['animal'].queryset = Animal.objects.order_by('name')
        self.fields['animal'].label_from_instance = lambda animal: f"{animal.name} (#{animal.tag_number})"

    def clean_description(self) -> str:
        description = self.cleaned_data['description'].strip()
        if len(description) < 5:
            raise forms.ValidationError('Description must be at least 5 characters.')
        return description

    def clean_administered_by(self) -> str:
        administered_by = self.cleaned_data['administered_by'].strip()
        if not administered_by:
            raise forms.ValidationError('Administrator name is required.')
        return administered_by

    def clean(self) -> Dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        record_date = cleaned_data.get('date')
        follow_up = cleaned_data.get('follow_up_date')
        if record_date and follow_up and follow_up < record_date:
            self.add_error('follow_up_date', 'Follow-up date cannot be before the record date.')
        return cleaned_data


class EventForm(forms.ModelForm):
    """Add or edit a farm event and the animals it concerns."""

    animals = forms.ModelMultipleChoiceField(
        queryset=Animal.objects.none(),
        widget=forms.SelectMultiple(attrs={'class': 'form-select', 'size': 6}),
        error_messages={'required': 'Select at least one animal.'},
    )

    class Meta:
        model = Event
        fields = ['title', 'event_type', 'date', 'time', 'description', 'animals', 'status', 'notes']
        widgets = {
            'title': forms.TextInput(attrs={'class': 'form-control'}),
            'event_type': forms.Select(attrs={'class': 'form-select'}),
            'date': forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
            'time': forms.TimeInput(attrs={'type': 'time', 'class': 'form-control'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['animals'].queryset = Animal.objects.order_by('name')
        self.fields['animals'].label_from_instance = lambda animal: f"{animal.name} (#{animal.tag_number})"

    def clean_title(self) -> str:
        title = self.cleaned_data['title'].strip()
        if len(title) < 3:
            raise forms.ValidationError('Title must be at least 3 characters.')
        return title

    def clean_description(self) -> str:
        description = self.cleaned_data['description'].strip()
        if len(description) < 5:
            raise forms.ValidationError('Description must be at least 5 characters.')
        return description


class TransactionForm(forms.ModelForm):
    """Add or edit an income or expense transaction.

    ``amount`` is accepted as free text and must parse as a positive
    number. When ``related_to`` is ``Animal`` an animal must be chosen; for
    any other target the animal link is cleared.
    """

    amount = forms.CharField(label='Amount', widget=forms.TextInput(attrs={
        'class': 'form-control',
        'inputmode': 'decimal',
        'placeholder': '0.00',
    }))

    class Meta:
        model = FinancialTransaction
        fields = [
            'type',
            'category',
            'amount',
            'date',
            'description',
            'related_to',
            'animal',
            'payment_method',
            'reference',
        ]
        widgets = {
            'type': forms.Select(attrs={'class': 'form-select'}),
            'category': forms.TextInput(attrs={'class': 'form-control', 'list': 'category-options'}),
            'date': forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'related_to': forms.Select(attrs={'class': 'form-select'}),
            'animal': forms.Select(attrs={'class': 'form-select'}),
            'payment_method': forms.Select(attrs={'class': 'form-select'}),
            'reference': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Receipt or invoice number'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['animal'].queryset = Animal.objects.order_by('name')
        self.fields['animal'].required = False
        self.fields['animal'].label_from_instance = lambda animal: f"{animal.name} (#{animal.tag_number})"

    def clean_category(self) -> str:
        category = self.cleaned_data['category'].strip()
        if not category:
            raise forms.ValidationError('Category is required.')
        return category

    def clean_amount(self) -> Decimal:
        raw = str(self.cleaned_data.get('amount', '')).strip().replace(',', '')
        try:
            amount = Decimal(raw)
            if amount.is_finite():
                amount = amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        except ArithmeticError:
            raise forms.ValidationError('Amount must be a positive number.')
        if not amount.is_finite() or amount <= 0:
            raise forms.ValidationError('Amount must be a positive number.')
        if amount > MAX_AMOUNT:
            raise forms.ValidationError('Amount is too large.')
        return amount

    def clean_description(self) -> str:
        description = self.cleaned_data['description'].strip()
        if len(description) < 3:
            raise forms.ValidationError('Description must be at least 3 characters.')
        return description

    def clean(self) -> Dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        related_to = cleaned_data.get('related_to')
        if related_to == FinancialTransaction.RelatedTo.ANIMAL:
            if not cleaned_data.get('animal'):
                self.add_error('animal', 'Select the animal this transaction relates to.')
        else:
            cleaned_data['animal'] = None
        return cleaned_data


class AlertForm(forms.ModelForm):
    """Add or edit an alert, optionally tied to an animal."""

    RELATED_NONE = 'None'
    RELATED_ANIMAL = 'Animal'
    RELATED_CHOICES = [
        (RELATED_NONE, 'None'),
        (RELATED_ANIMAL, 'Animal'),
    ]

    related_to = forms.ChoiceField(
        label='Related To',
        choices=RELATED_CHOICES,
        initial=RELATED_NONE,
        widget=forms.Select(attrs={'class': 'form-select'}),
    )

    class Meta:
        model = Alert
        fields = ['title', 'description', 'type', 'priority', 'status', 'due_date', 'related_to', 'animal']
        widgets = {
            'title': forms.TextInput(attrs={'class': 'form-control'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
            'type': forms.Select(attrs={'class': 'form-select'}),
            'priority': forms.Select(attrs={'class': 'form-select'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'due_date': forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
            'animal': forms.Select(attrs={'class': 'form-select'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['animal'].queryset = Animal.objects.order_by('name')
        self.fields['animal'].required = False
        self.fields['animal'].label_from_instance = lambda animal: f"{animal.name} (#{animal.tag_number})"
        if not self.is_bound and getattr(self.instance, 'animal_id', None):
            self.initial['related_to'] = self.RELATED_ANIMAL

    def clean_title(self) -> str:
        title = self.cleaned_data['title'].strip()
        if len(title) < 3:
            raise forms.ValidationError('Title must be at least 3 characters.')
        return title

    def clean_description(self) -> str:
        description = self.cleaned_data['description'].strip()
        if len(description) < 5:
            raise forms.ValidationError('Description must be at least 5 characters.')
        return description

    def clean(self) -> Dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        if cleaned_data.get('related_to') == self.RELATED_ANIMAL:
            if not cleaned_data.get('animal'):
                self.add_error('animal', 'Select the animal this alert relates to.')
        else:
            cleaned_data['animal'] = None
        return cleaned_data


class AlertStatusForm(forms.Form):
    """Single-field form backing the status-update action on alert cards."""

    status = forms.ChoiceField(choices=Alert.Status.choices)


class ReportForm(forms.Form):
    """Choose a report, an output format and the period it covers."""

    report_type = forms.ChoiceField(label='Report Type', widget=forms.Select(attrs={'class': 'form-select'}))
    report_format = forms.ChoiceField(
        label='Format',
        choices=REPORT_FORMAT_CHOICES,
        initial='Excel',
        widget=forms.Select(attrs={'class': 'form-select'}),
    )
    date_range = forms.ChoiceField(
        label='Date Range',
        choices=DATE_RANGE_CHOICES,
        initial='Last30Days',
        widget=forms.Select(attrs={'class': 'form-select'}),
    )
    start_date = forms.DateField(required=False, widget=forms.DateInput(attrs={
        'type': 'date',
        'class': 'form-control',
    }))
    end_date = forms.DateField(required=False, widget=forms.DateInput(attrs={
        'type': 'date',
        'class': 'form-control',
    }))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['report_type'].choices = [('', 'Select a report')] + report_choices()

    def clean(self) -> Dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        if cleaned_data.get('date_range') != 'Custom':
            return cleaned_data
        start = cleaned_data.get('start_date')
        end = cleaned_data.get('end_date')
        if not start:
            self.add_error('start_date', 'Start date is required for a custom range.')
        if not end:
            self.add_error('end_date', 'End date is required for a custom range.')
        if start and end and end < start:
            self.add_error('end_date', 'End date cannot be before the start date.')
        return cleaned_data


class FarmSettingsForm(forms.ModelForm):
    """General farm details and display preferences."""

    CURRENCY_CHOICES = [
        ('USD', 'USD - US Dollar'),
        ('EUR', 'EUR - Euro'),
        ('GBP', 'GBP - British Pound'),
        ('KES', 'KES - Kenyan Shilling'),
        ('ZAR', 'ZAR - South African Rand'),
    ]
    DATE_FORMAT_CHOICES = [
        ('MM/DD/YYYY', 'MM/DD/YYYY'),
        ('DD/MM/YYYY', 'DD/MM/YYYY'),
        ('YYYY-MM-DD', 'YYYY-MM-DD'),
    ]
    TIME_ZONE_CHOICES = [
        ('Europe/London', 'UTC+0 - London'),
        ('Africa/Nairobi', 'UTC+3 - Nairobi'),
        ('America/New_York', 'UTC-5 - New York, Toronto'),
        ('America/Los_Angeles', 'UTC-8 - Los Angeles'),
    ]

    currency = forms.ChoiceField(choices=CURRENCY_CHOICES, widget=forms.Select(attrs={'class': 'form-select'}))
    date_format = forms.ChoiceField(choices=DATE_FORMAT_CHOICES, widget=forms.Select(attrs={'class': 'form-select'}))
    time_zone = forms.ChoiceField(choices=TIME_ZONE_CHOICES, widget=forms.Select(attrs={'class': 'form-select'}))

    class Meta:
        model = FarmSettings
        fields = [
            'farm_name',
            'owner_name',
            'contact_email',
            'contact_phone',
            'location',
            'currency',
            'date_format',
            'time_zone',
        ]
        widgets = {
            'farm_name': forms.TextInput(attrs={'class': 'form-control'}),
            'owner_name': forms.TextInput(attrs={'class': 'form-control'}),
            'contact_email': forms.EmailInput(attrs={'class': 'form-control'}),
            'contact_phone': forms.TextInput(attrs={'class': 'form-control'}),
            'location': forms.TextInput(attrs={'class': 'form-control'}),
        }


class BreedForm(forms.Form):
    """Add a breed to the catalogue."""

    name = forms.CharField(label='Breed', max_length=100, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': 'Add new breed',
    }))

    def clean_name(self) -> str:
        name = self.cleaned_data['name'].strip()
        if not name:
            raise forms.ValidationError('Breed name is required.')
        if Breed.objects.filter(name__iexact=name).exists():
            raise forms.ValidationError(f'{name} is already in the breed list.')
        return name


class HealthItemForm(forms.Form):
    """Add an item to the health catalogue.

    ``category`` names an existing category (matched case-insensitively) or
    a new one, which is created together with the item.
    """

    category = forms.CharField(label='Category', max_length=100, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'list': 'health-category-options',
        'placeholder': 'Select or type a category',
    }))
    name = forms.CharField(label='Health item', max_length=100, widget=forms.TextInput(attrs={
        'class': 'form-control',
        'placeholder': 'New health item',
    }))

    def clean_category(self) -> str:
        category = self.cleaned_data['category'].strip()
        if not category:
            raise forms.ValidationError('Category is required.')
        existing = HealthCategory.objects.filter(name__iexact=category).first()
        return existing.name if existing else category

    def clean_name(self) -> str:
        name = self.cleaned_data['name'].strip()
        if not name:
            raise forms.ValidationError('Item name is required.')
        return name

    def clean(self) -> Dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        category = cleaned_data.get('category')
        name = cleaned_data.get('name')
        if category and name:
            clash = HealthItem.objects.filter(category__name__iexact=category, name__iexact=name)
            if clash.exists():
                self.add_error('name', f'{name} is already listed under {category}.')
        return cleaned_data


class UserRoleForm(forms.Form):
    """Assign a farm role to a user account."""

    user = forms.ModelChoiceField(queryset=User.objects.all())
    role = forms.ChoiceField(choices=Profile.Role.choices)
