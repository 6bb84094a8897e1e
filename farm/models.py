"""Data models for the Shepherd Connect application.

This module defines the database schema using Django's ORM.  Every entity
is a flat record with primitive fields, enumerated status strings and an
optional foreign key to ``Animal`` or the auth ``User``.  Validation of
user input lives in ``farm.forms``; the models only carry the column
definitions, choice lists and a handful of small derived helpers.
"""

from __future__ import annotations

import datetime
from typing import Optional

from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone


class TimestampedModel(models.Model):
    """Abstract base adding ``created_at``/``updated_at`` columns."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Profile(TimestampedModel):
    """Additional information associated with a Django auth User.

    The built-in ``User`` model handles authentication details such as the
    username, email and password.  ``Profile`` adds the display name and the
    farm role shown on the profile page.
    """

    class Role(models.TextChoices):
        USER = 'user', 'User'
        ADMIN = 'admin', 'Admin'
        MANAGER = 'manager', 'Farm Manager'
        VETERINARIAN = 'veterinarian', 'Veterinarian'
        ASSISTANT = 'assistant', 'Assistant'

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    full_name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)

    def __str__(self) -> str:  # pragma: no cover
        return f"Profile of {self.user.username}"


class Animal(TimestampedModel):
    """An animal in the farm inventory."""

    class Sex(models.TextChoices):
        FEMALE = 'Female', 'Female'
        MALE = 'Male', 'Male'

    class Status(models.TextChoices):
        ACTIVE = 'Active', 'Active'
        SOLD = 'Sold', 'Sold'
        DEAD = 'Dead', 'Dead'
        CULLED = 'Culled', 'Culled'
        PREGNANT = 'Pregnant', 'Pregnant'

    class HealthStatus(models.TextChoices):
        HEALTHY = 'Healthy', 'Healthy'
        SICK = 'Sick', 'Sick'
        RECOVERING = 'Recovering', 'Recovering'
        PREGNANT = 'Pregnant', 'Pregnant'

    name = models.CharField(max_length=255)
    tag_number = models.CharField(max_length=64, unique=True)
    breed = models.CharField(max_length=100, blank=True)
    sex = models.CharField(max_length=10, choices=Sex.choices, default=Sex.FEMALE)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    age = models.CharField(max_length=50, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    weight_kg = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    health_status = models.CharField(
        max_length=20,
        choices=HealthStatus.choices,
        default=HealthStatus.HEALTHY,
    )
    image_url = models.URLField(blank=True)
    notes = models.TextField(blank=True)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['status'], name='farm_animal_status_idx'),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} (#{self.tag_number})"


class HealthRecord(TimestampedModel):
    """A vaccination, treatment or other medical entry for an animal."""

    class RecordType(models.TextChoices):
        VACCINATION = 'Vaccination', 'Vaccination'
        TREATMENT = 'Treatment', 'Treatment'
        DEWORMING = 'Deworming', 'Deworming'
        ILLNESS = 'Illness', 'Illness'
        CHECK_UP = 'Check-up', 'Check-up'

    class Status(models.TextChoices):
        COMPLETED = 'Completed', 'Completed'
        ONGOING = 'Ongoing', 'Ongoing'
        SCHEDULED = 'Scheduled', 'Scheduled'
        NEEDS_FOLLOW_UP = 'Needs Follow-up', 'Needs Follow-up'

    animal = models.ForeignKey(Animal, on_delete=models.CASCADE, related_name='health_records')
    record_type = models.CharField(max_length=20, choices=RecordType.choices)
    date = models.DateField()
    description = models.TextField()
    administered_by = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.COMPLETED)
    outcome = models.TextField(blank=True)
    follow_up_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-date', '-created_at']

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.record_type} for {self.animal} on {self.date:%Y-%m-%d}"


class Event(TimestampedModel):
    """A farm event such as a birth, mating or shearing session.

    An event may concern several animals, which are stored through a
    many-to-many relation rather than a serialised list.
    """

    class EventType(models.TextChoices):
        BIRTH = 'Birth', 'Birth'
        MATING = 'Mating', 'Mating'
        WEANING = 'Weaning', 'Weaning'
        SHEARING = 'Shearing', 'Shearing'
        VACCINATION = 'Vaccination', 'Vaccination'
        CUSTOM = 'Custom', 'Custom'

    class Status(models.TextChoices):
        UPCOMING = 'Upcoming', 'Upcoming'
        IN_PROGRESS = 'In Progress', 'In Progress'
        COMPLETED = 'Completed', 'Completed'
        MISSED = 'Missed', 'Missed'

    title = models.CharField(max_length=255)
    event_type = models.CharField(max_length=20, choices=EventType.choices, default=EventType.CUSTOM)
    date = models.DateField()
    time = models.TimeField(null=True, blank=True)
    description = models.TextField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.UPCOMING)
    animals = models.ManyToManyField(Animal, related_name='events', blank=True)
    performed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='performed_events',
    )
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-date', '-created_at']

    def __str__(self) -> str:  # pragma: no cover
        return f"Event<{self.title} {self.date:%Y-%m-%d}>"


class FinancialTransaction(TimestampedModel):
    """An income or expense line in the farm books."""

    class TransactionType(models.TextChoices):
        INCOME = 'Income', 'Income'
        EXPENSE = 'Expense', 'Expense'

    class RelatedTo(models.TextChoices):
        ANIMAL = 'Animal', 'Animal'
        FARM = 'Farm', 'Farm'
        OTHER = 'Other', 'Other'

    class PaymentMethod(models.TextChoices):
        CASH = 'Cash', 'Cash'
        BANK_TRANSFER = 'Bank Transfer', 'Bank Transfer'
        CREDIT_CARD = 'Credit Card', 'Credit Card'
        MOBILE_MONEY = 'Mobile Money', 'Mobile Money'
        CHECK = 'Check', 'Check'
        OTHER = 'Other', 'Other'

    type = models.CharField(max_length=10, choices=TransactionType.choices, default=TransactionType.EXPENSE)
    category = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    date = models.DateField()
    description = models.TextField()
    related_to = models.CharField(max_length=10, choices=RelatedTo.choices, default=RelatedTo.FARM)
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    reference = models.CharField(max_length=255, blank=True)
    animal = models.ForeignKey(
        Animal,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions',
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions',
    )

    class Meta:
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['date'], name='farm_txn_date_idx'),
            models.Index(fields=['type'], name='farm_txn_type_idx'),
            models.Index(fields=['category'], name='farm_txn_category_idx'),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.type} {self.amount} ({self.category})"


class Alert(TimestampedModel):
    """A task, reminder or warning with a due date."""

    class AlertType(models.TextChoices):
        TASK = 'Task', 'Task'
        REMINDER = 'Reminder', 'Reminder'
        WARNING = 'Warning', 'Warning'
        EMERGENCY = 'Emergency', 'Emergency'

    class Priority(models.TextChoices):
        LOW = 'Low', 'Low'
        MEDIUM = 'Medium', 'Medium'
        HIGH = 'High', 'High'
        URGENT = 'Urgent', 'Urgent'

    class Status(models.TextChoices):
        PENDING = 'Pending', 'Pending'
        IN_PROGRESS = 'In Progress', 'In Progress'
        COMPLETED = 'Completed', 'Completed'
        CANCELLED = 'Cancelled', 'Cancelled'

    OPEN_STATUSES = (Status.PENDING, Status.IN_PROGRESS)
    CLOSED_STATUSES = (Status.COMPLETED, Status.CANCELLED)
    HIGH_PRIORITIES = (Priority.HIGH, Priority.URGENT)

    title = models.CharField(max_length=255)
    description = models.TextField()
    type = models.CharField(max_length=20, choices=AlertType.choices, default=AlertType.TASK)
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    due_date = models.DateField()
    animal = models.ForeignKey(
        Animal,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='alerts',
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='alerts',
    )

    class Meta:
        ordering = ['due_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='farm_alert_status_idx'),
            models.Index(fields=['due_date'], name='farm_alert_due_date_idx'),
        ]

    def is_overdue(self, today: Optional[datetime.date] = None) -> bool:
        """Return True when the alert is past due and still open."""

        if self.status in self.CLOSED_STATUSES:
            return False
        today = today or timezone.localdate()
        return self.due_date < today

    def __str__(self) -> str:  # pragma: no cover
        return f"Alert<{self.title} due {self.due_date:%Y-%m-%d}>"


class FarmSettings(TimestampedModel):
    """Singleton row holding farm-wide presentation settings."""

    farm_name = models.CharField(max_length=255, default='Mumbi Farm')
    owner_name = models.CharField(max_length=255, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=32, blank=True)
    location = models.CharField(max_length=255, blank=True)
    currency = models.CharField(max_length=10, default='KES')
    date_format = models.CharField(max_length=20, default='DD/MM/YYYY')
    time_zone = models.CharField(max_length=64, default='Africa/Nairobi')

    class Meta:
        verbose_name_plural = 'farm settings'

    @classmethod
    def load(cls) -> 'FarmSettings':
        """Return the settings row, creating it with defaults on first use."""

        settings_row, _ = cls.objects.get_or_create(pk=1)
        return settings_row

    def __str__(self) -> str:  # pragma: no cover
        return self.farm_name


class Breed(models.Model):
    """A breed offered as a suggestion on the animal forms."""

    name = models.CharField(max_length=100, unique=True)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class HealthCategory(models.Model):
    """A group of health items such as vaccinations or common diseases."""

    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'health categories'

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class HealthItem(models.Model):
    """A named vaccine, disease or medication offered on the health forms."""

    category = models.ForeignKey(HealthCategory, on_delete=models.CASCADE, related_name='items')
    name = models.CharField(max_length=100)

    class Meta:
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['category', 'name'], name='farm_health_item_unique'),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.category.name}: {self.name}"


class ActivityLog(models.Model):
    """Tracks user actions within the application.

    Each entry records the user who performed the action, a short
    description, optional details and the timestamp.  The dashboard renders
    the most recent entries as the "recent activities" feed.
    """

    class Category(models.TextChoices):
        ANIMAL = 'animal', 'Animal'
        HEALTH = 'health', 'Health'
        EVENT = 'event', 'Event'
        TRANSACTION = 'transaction', 'Transaction'
        ALERT = 'alert', 'Alert'
        SYSTEM = 'system', 'System'

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='activity_logs')
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.SYSTEM)
    action = models.CharField(max_length=255)
    details = models.TextField(blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.timestamp:%Y-%m-%d %H:%M:%S} - {self.user}: {self.action}"


class Notification(models.Model):
    """Stores user facing notifications triggered by alert activity."""

    class EventType(models.TextChoices):
        ALERT_RAISED = 'alert_raised', 'Alert Raised'
        ALERT_OVERDUE = 'alert_overdue', 'Alert Overdue'

    recipient = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    alert = models.ForeignKey(
        Alert,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications',
    )
    message = models.TextField()
    event_type = models.CharField(max_length=50, choices=EventType.choices)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:  # pragma: no cover
        return f"Notification<{self.recipient.username} {self.event_type}>"
