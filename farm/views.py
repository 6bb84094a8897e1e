"""Core view functions for Shepherd Connect.

This module implements account registration and authentication, the
dashboard, the profile and settings pages, and the list/form views for
animals, health records, events and alerts. Financial transactions and
reports live in :mod:`farm.views_finance`. Every mutation runs inside
``transaction.atomic``; database failures are logged, surfaced as an error
message and leave the previous page state untouched.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from django.contrib import messages
from django.contrib.auth import authenticate, login, logout, update_session_auth_hash
from django.contrib.auth.decorators import login_required
from django.contrib.auth.models import User
from django.db import DatabaseError, transaction
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_http_methods, require_POST

from .forms import (
    AlertForm,
    AlertStatusForm,
    AnimalForm,
    AnimalRegistrationForm,
    BreedForm,
    EventForm,
    FarmSettingsForm,
    HealthItemForm,
    HealthRecordForm,
    LoginForm,
    PasswordChangeForm,
    ProfileForm,
    RegistrationForm,
    UserRoleForm,
    active_breed_names,
    health_catalogue,
)
from .models import (
    ActivityLog,
    Alert,
    Animal,
    Breed,
    Event,
    FarmSettings,
    HealthCategory,
    HealthItem,
    HealthRecord,
    Profile,
)
from .services.animal_registration import register_animal
from .services.dashboard_stats import compute_dashboard_stats, compute_flock_growth, recent_activities
from .services.list_filters import (
    ALL,
    alert_counts,
    filter_alerts,
    filter_animals,
    filter_events,
    filter_health_records,
)
from .services.notifications import (
    ensure_overdue_alert_notifications,
    mark_notifications_read,
    notify_alert_raised,
    unread_notifications,
)

logger = logging.getLogger(__name__)

SAVE_FAILED = 'Could not save your changes. Please try again.'
DELETE_FAILED = 'Could not delete the record. Please try again.'


def _build_breadcrumbs(*segments: Tuple[str, Optional[str]]) -> List[Dict[str, str]]:
    """Construct a breadcrumb trail starting from the dashboard."""

    breadcrumbs: List[Dict[str, str]] = [{'label': 'Dashboard', 'url': reverse('dashboard')}]
    for label, url in segments:
        breadcrumbs.append({'label': label, 'url': url or ''})
    return breadcrumbs


def _list_params(request: HttpRequest, *keys: str) -> Dict[str, str]:
    """Read the search term and filter values of a list page from the query string."""

    params = {'search': request.GET.get('search', '').strip()}
    for key in keys:
        params[key] = request.GET.get(key) or ALL
    return params


def log_activity(user: Optional[User], category: str, action: str, details: str = '') -> None:
    """Record a user action for the dashboard's recent activity feed.

    Args:
        user: The user who performed the action. May be None for
            anonymous or system actions.
        category: One of :class:`ActivityLog.Category`.
        action: A short description of the action (e.g. "Added animal").
        details: Optional additional information about the action.
    """
    try:
        ActivityLog.objects.create(user=user, category=category, action=action, details=details)
    except DatabaseError:
        logger.warning('Could not record activity "%s"', action, exc_info=True)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


def register(request: HttpRequest) -> HttpResponse:
    """Create a user account with a default profile and sign the user in."""
    if request.user.is_authenticated:
        return redirect('dashboard')

    if request.method == 'POST':
        form = RegistrationForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                with transaction.atomic():
                    user = User.objects.create_user(
                        username=data['username'],
                        email=data['email'],
                        password=data['password'],
                    )
                    Profile.objects.create(user=user, role=Profile.Role.USER)
            except DatabaseError:
                logger.exception('Registration failed for %s', data['username'])
                messages.error(request, 'Could not create your account. Please try again.')
            else:
                login(request, user)
                log_activity(user, ActivityLog.Category.SYSTEM, 'Registered account', user.username)
                messages.success(request, 'Account created successfully. Welcome!')
                return redirect('dashboard')
    else:
        form = RegistrationForm()

    return render(request, 'register.html', {'form': form, 'breadcrumbs': []})


def login_view(request: HttpRequest) -> HttpResponse:
    """Authenticate a user via email (or username) and password."""
    if request.user.is_authenticated:
        return redirect('dashboard')
    if request.method == 'POST':
        form = LoginForm(request.POST)
        if form.is_valid():
            identifier = form.cleaned_data['email'].strip()
            password = form.cleaned_data['password']
            username = identifier
            if '@' in identifier:
                match = User.objects.filter(email__iexact=identifier).first()
                if match:
                    username = match.username
            user = authenticate(request, username=username, password=password)
            if user:
                login(request, user)
                logger.info('User %s signed in', user.username)
                return redirect('dashboard')
            messages.error(request, 'Invalid email or password.')
    else:
        form = LoginForm()
    return render(request, 'login.html', {'form': form, 'breadcrumbs': []})


def logout_view(request: HttpRequest) -> HttpResponse:
    """Log the user out and redirect to the login page."""
    logout(request)
    messages.info(request, 'You have been signed out.')
    return redirect('login')


@login_required
def profile_view(request: HttpRequest) -> HttpResponse:
    """Show the profile page and handle the profile and password forms.

    Both forms post to this view; the ``action`` field tells them apart.
    """
    user = request.user
    profile, _ = Profile.objects.get_or_create(user=user)
    profile_form = ProfileForm(user=user, initial={'username': user.username, 'full_name': profile.full_name})
    password_form = PasswordChangeForm(user=user)

    if request.method == 'POST':
        action = request.POST.get('action')
        if action == 'password':
            password_form = PasswordChangeForm(request.POST, user=user)
            if password_form.is_valid():
                user.set_password(password_form.cleaned_data['new_password'])
                user.save(update_fields=['password'])
                update_session_auth_hash(request, user)
                log_activity(user, ActivityLog.Category.SYSTEM, 'Changed password')
                messages.success(request, 'Password updated successfully.')
                return redirect('profile')
        else:
            profile_form = ProfileForm(request.POST, user=user)
            if profile_form.is_valid():
                try:
                    with transaction.atomic():
                        user.username = profile_form.cleaned_data['username']
                        user.save(update_fields=['username'])
                        profile.full_name = profile_form.cleaned_data['full_name']
                        profile.save(update_fields=['full_name', 'updated_at'])
                except DatabaseError:
                    logger.exception('Profile update failed for user %s', user.pk)
                    messages.error(request, SAVE_FAILED)
                else:
                    messages.success(request, 'Profile updated successfully.')
                    return redirect('profile')

    context = {
        'profile': profile,
        'profile_form': profile_form,
        'password_form': password_form,
        'breadcrumbs': _build_breadcrumbs(('Profile', '')),
    }
    return render(request, 'profile.html', context)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@login_required
def dashboard(request: HttpRequest) -> HttpResponse:
    """Display the farm overview: stat cards, flock growth and recent activity."""
    ensure_overdue_alert_notifications()
    today = timezone.localdate()
    context = {
        'stats': compute_dashboard_stats(today),
        'growth': compute_flock_growth(today.year),
        'activities': recent_activities(),
        'upcoming_events': Event.objects.filter(
            date__gte=today,
            status__in=[Event.Status.UPCOMING, Event.Status.IN_PROGRESS],
        ).order_by('date')[:5],
        'breadcrumbs': [],
    }
    return render(request, 'dashboard.html', context)


@login_required
def dashboard_data(request: HttpRequest) -> JsonResponse:
    """Expose the dashboard statistics and flock growth series as JSON."""

    today = timezone.localdate()
    payload = {
        'stats': compute_dashboard_stats(today).as_dict(),
        'growth': compute_flock_growth(today.year).as_dict(),
        'activities': recent_activities(),
    }
    return JsonResponse(payload)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def _can_manage_roles(user: User) -> bool:
    if getattr(user, 'is_superuser', False):
        return True
    profile = getattr(user, 'profile', None)
    return bool(profile and profile.role == Profile.Role.ADMIN)


def _change_user_role(request: HttpRequest, role_form: UserRoleForm) -> None:
    """Apply a validated role change and flash the outcome."""

    if not _can_manage_roles(request.user):
        messages.error(request, 'Access denied: only administrators can change user roles.')
        return
    member = role_form.cleaned_data['user']
    role = role_form.cleaned_data['role']
    if member.pk == request.user.pk and not request.user.is_superuser:
        messages.error(request, 'You cannot change your own role.')
        return
    try:
        with transaction.atomic():
            profile, _ = Profile.objects.get_or_create(user=member)
            profile.role = role
            profile.save(update_fields=['role', 'updated_at'])
    except DatabaseError:
        logger.exception('Could not change role of %s', member.username)
        messages.error(request, SAVE_FAILED)
        return
    label = Profile.Role(role).label
    log_activity(request.user, ActivityLog.Category.SYSTEM, 'Changed user role', f'{member.username}: {label}')
    messages.success(request, f'{member.username} is now {label}.')


@login_required
def settings_view(request: HttpRequest) -> HttpResponse:
    """Edit farm-wide settings, the breed and health catalogues and user roles.

    Every form on the page posts here; the ``action`` field tells them apart.
    """
    farm_settings = FarmSettings.load()
    settings_form = FarmSettingsForm(instance=farm_settings)
    breed_form = BreedForm()
    health_item_form = HealthItemForm()

    if request.method == 'POST':
        action = request.POST.get('action')
        if action == 'role':
            role_form = UserRoleForm(request.POST)
            if not role_form.is_valid():
                messages.error(request, 'Invalid role change.')
                return redirect('settings')
            _change_user_role(request, role_form)
            return redirect('settings')
        if action == 'health_item':
            health_item_form = HealthItemForm(request.POST)
            if health_item_form.is_valid():
                category_name = health_item_form.cleaned_data['category']
                name = health_item_form.cleaned_data['name']
                try:
                    with transaction.atomic():
                        category, _ = HealthCategory.objects.get_or_create(name=category_name)
                        HealthItem.objects.create(category=category, name=name)
                except DatabaseError:
                    logger.exception('Could not add health item %s', name)
                    messages.error(request, SAVE_FAILED)
                else:
                    messages.success(request, f'{name} has been added to {category_name}.')
                    return redirect('settings')
        elif action == 'breed':
            breed_form = BreedForm(request.POST)
            if breed_form.is_valid():
                name = breed_form.cleaned_data['name']
                try:
                    Breed.objects.create(name=name, active=True)
                except DatabaseError:
                    logger.exception('Could not add breed %s', name)
                    messages.error(request, SAVE_FAILED)
                else:
                    messages.success(request, f'{name} has been added to your list of breeds.')
                    return redirect('settings')
        else:
            settings_form = FarmSettingsForm(request.POST, instance=farm_settings)
            if settings_form.is_valid():
                try:
                    settings_form.save()
                except DatabaseError:
                    logger.exception('Could not save farm settings')
                    messages.error(request, SAVE_FAILED)
                else:
                    log_activity(request.user, ActivityLog.Category.SYSTEM, 'Updated farm settings')
                    messages.success(request, 'Settings saved successfully.')
                    return redirect('settings')

    context = {
        'settings_form': settings_form,
        'breed_form': breed_form,
        'active_breeds': Breed.objects.filter(active=True),
        'inactive_breeds': Breed.objects.filter(active=False),
        'health_item_form': health_item_form,
        'health_categories': HealthCategory.objects.prefetch_related('items'),
        'members': User.objects.select_related('profile').order_by('username'),
        'role_choices': Profile.Role.choices,
        'can_manage_roles': _can_manage_roles(request.user),
        'breadcrumbs': _build_breadcrumbs(('Settings', '')),
    }
    return render(request, 'settings.html', context)


@login_required
@require_POST
def breed_toggle(request: HttpRequest, pk: int) -> HttpResponse:
    """Move a breed between the active and inactive lists."""
    breed = get_object_or_404(Breed, pk=pk)
    breed.active = not breed.active
    breed.save(update_fields=['active'])
    state = 'activated' if breed.active else 'deactivated'
    messages.success(request, f'{breed.name} {state}.')
    return redirect('settings')


# ---------------------------------------------------------------------------
# Animals
# ---------------------------------------------------------------------------


@login_required
def animal_list(request: HttpRequest) -> HttpResponse:
    """List the herd with search and status/sex/health filters."""
    params = _list_params(request, 'status', 'sex', 'health')
    animals = filter_animals(Animal.objects.all(), **params)
    context = {
        'animals': animals,
        'filters': params,
        'status_choices': Animal.Status.choices,
        'sex_choices': Animal.Sex.choices,
        'health_choices': Animal.HealthStatus.choices,
        'total_count': Animal.objects.count(),
        'breadcrumbs': _build_breadcrumbs(('Animals', '')),
    }
    return render(request, 'animal_list.html', context)


def _animal_form_context(form: AnimalForm, title: str, animal: Optional[Animal] = None) -> Dict[str, Any]:
    segments = [('Animals', reverse('animal_list'))]
    if animal is not None:
        segments.append((animal.name, ''))
    segments.append((title, ''))
    return {
        'form': form,
        'title': title,
        'animal': animal,
        'breed_options': active_breed_names(),
        'breadcrumbs': _build_breadcrumbs(*segments),
    }


@login_required
def animal_add(request: HttpRequest) -> HttpResponse:
    """Quick-add an animal."""
    if request.method == 'POST':
        form = AnimalForm(request.POST)
        if form.is_valid():
            try:
                with transaction.atomic():
                    animal = form.save()
            except DatabaseError:
                logger.exception('Could not add animal')
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.ANIMAL, 'Added animal', f"{animal.name} (#{animal.tag_number})")
                messages.success(request, f'{animal.name} has been added to the flock.')
                return redirect('animal_list')
    else:
        form = AnimalForm()
    return render(request, 'animal_form.html', _animal_form_context(form, 'Add Animal'))


@login_required
def animal_edit(request: HttpRequest, pk: int) -> HttpResponse:
    """Edit an existing animal."""
    animal = get_object_or_404(Animal, pk=pk)
    if request.method == 'POST':
        form = AnimalForm(request.POST, instance=animal)
        if form.is_valid():
            try:
                with transaction.atomic():
                    animal = form.save()
            except DatabaseError:
                logger.exception('Could not update animal %s', pk)
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.ANIMAL, 'Updated animal', f"{animal.name} (#{animal.tag_number})")
                messages.success(request, f'{animal.name} updated successfully.')
                return redirect('animal_list')
    else:
        form = AnimalForm(instance=animal)
    return render(request, 'animal_form.html', _animal_form_context(form, 'Edit Animal', animal))


@login_required
def animal_register(request: HttpRequest) -> HttpResponse:
    """Detailed registration of a newborn or acquired animal."""
    if request.method == 'POST':
        form = AnimalRegistrationForm(request.POST)
        if form.is_valid():
            try:
                with transaction.atomic():
                    animal = register_animal(form.cleaned_data)
            except DatabaseError:
                logger.exception('Could not register animal')
                messages.error(request, 'Failed to register animal. Please try again.')
            else:
                log_activity(request.user, ActivityLog.Category.ANIMAL, 'Registered animal', f"{animal.name} (#{animal.tag_number})")
                messages.success(request, f'Animal registered successfully. {animal.name} has been added to the flock.')
                return redirect('animal_list')
    else:
        form = AnimalRegistrationForm()
    context = {
        'form': form,
        'breed_options': active_breed_names(),
        'breadcrumbs': _build_breadcrumbs(('Animals', reverse('animal_list')), ('Register Animal', '')),
    }
    return render(request, 'animal_register.html', context)


@login_required
@require_POST
def animal_delete(request: HttpRequest, pk: int) -> HttpResponse:
    """Delete an animal together with its health records."""
    animal = get_object_or_404(Animal, pk=pk)
    label = f"{animal.name} (#{animal.tag_number})"
    try:
        with transaction.atomic():
            animal.delete()
    except DatabaseError:
        logger.exception('Could not delete animal %s', pk)
        messages.error(request, DELETE_FAILED)
    else:
        log_activity(request.user, ActivityLog.Category.ANIMAL, 'Removed animal', label)
        messages.success(request, f'{label} deleted.')
    return redirect('animal_list')


# ---------------------------------------------------------------------------
# Health records
# ---------------------------------------------------------------------------


@login_required
def health_list(request: HttpRequest) -> HttpResponse:
    """List health records with search and type/status filters."""
    params = _list_params(request, 'record_type', 'status')
    records = filter_health_records(HealthRecord.objects.select_related('animal'), **params)
    context = {
        'records': records,
        'filters': params,
        'type_choices': HealthRecord.RecordType.choices,
        'status_choices': HealthRecord.Status.choices,
        'breadcrumbs': _build_breadcrumbs(('Health', '')),
    }
    return render(request, 'health_list.html', context)


def _health_form_context(form: HealthRecordForm, title: str) -> Dict[str, Any]:
    return {
        'form': form,
        'title': title,
        'health_catalogue': health_catalogue(),
        'breadcrumbs': _build_breadcrumbs(('Health', reverse('health_list')), (title, '')),
    }


@login_required
def health_add(request: HttpRequest) -> HttpResponse:
    """Add a health record; ``?animal=<id>`` preselects the animal."""
    if request.method == 'POST':
        form = HealthRecordForm(request.POST)
        if form.is_valid():
            try:
                with transaction.atomic():
                    record = form.save()
            except DatabaseError:
                logger.exception('Could not add health record')
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(
                    request.user,
                    ActivityLog.Category.HEALTH,
                    f'{record.record_type} recorded',
                    f"{record.animal.name}: {record.description}",
                )
                messages.success(request, 'Health record added successfully.')
                return redirect('health_list')
    else:
        initial = {'date': timezone.localdate()}
        animal_id = request.GET.get('animal')
        if animal_id and animal_id.isdigit():
            initial['animal'] = int(animal_id)
        form = HealthRecordForm(initial=initial)
    return render(request, 'health_form.html', _health_form_context(form, 'Add Health Record'))


@login_required
def health_edit(request: HttpRequest, pk: int) -> HttpResponse:
    """Edit a health record."""
    record = get_object_or_404(HealthRecord, pk=pk)
    if request.method == 'POST':
        form = HealthRecordForm(request.POST, instance=record)
        if form.is_valid():
            try:
                with transaction.atomic():
                    record = form.save()
            except DatabaseError:
                logger.exception('Could not update health record %s', pk)
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.HEALTH, 'Updated health record', f"{record.animal.name}: {record.record_type}")
                messages.success(request, 'Health record updated successfully.')
                return redirect('health_list')
    else:
        form = HealthRecordForm(instance=record)
    return render(request, 'health_form.html', _health_form_context(form, 'Edit Health Record'))


@login_required
@require_POST
def health_delete(request: HttpRequest, pk: int) -> HttpResponse:
    """Delete a health record."""
    record = get_object_or_404(HealthRecord, pk=pk)
    try:
        record.delete()
    except DatabaseError:
        logger.exception('Could not delete health record %s', pk)
        messages.error(request, DELETE_FAILED)
    else:
        messages.success(request, 'Health record deleted.')
    return redirect('health_list')


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@login_required
def event_list(request: HttpRequest) -> HttpResponse:
    """List events with search and an upcoming/completed filter."""
    params = _list_params(request, 'status')
    events = filter_events(Event.objects.prefetch_related('animals'), **params)
    context = {
        'events': events,
        'filters': params,
        'breadcrumbs': _build_breadcrumbs(('Events', '')),
    }
    return render(request, 'event_list.html', context)


def _event_form_context(form: EventForm, title: str) -> Dict[str, Any]:
    return {
        'form': form,
        'title': title,
        'breadcrumbs': _build_breadcrumbs(('Events', reverse('event_list')), (title, '')),
    }


@login_required
def event_add(request: HttpRequest) -> HttpResponse:
    """Create an event and link the selected animals."""
    if request.method == 'POST':
        form = EventForm(request.POST)
        if form.is_valid():
            try:
                with transaction.atomic():
                    event = form.save(commit=False)
                    event.performed_by = request.user
                    event.save()
                    form.save_m2m()
            except DatabaseError:
                logger.exception('Could not add event')
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.EVENT, event.title, event.description)
                messages.success(request, 'Event added successfully.')
                return redirect('event_list')
    else:
        form = EventForm(initial={'date': timezone.localdate()})
    return render(request, 'event_form.html', _event_form_context(form, 'Add Event'))


@login_required
def event_edit(request: HttpRequest, pk: int) -> HttpResponse:
    """Edit an event and its animal links."""
    event = get_object_or_404(Event, pk=pk)
    if request.method == 'POST':
        form = EventForm(request.POST, instance=event)
        if form.is_valid():
            try:
                with transaction.atomic():
                    event = form.save()
            except DatabaseError:
                logger.exception('Could not update event %s', pk)
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.EVENT, 'Updated event', event.title)
                messages.success(request, 'Event updated successfully.')
                return redirect('event_detail', pk=event.pk)
    else:
        form = EventForm(instance=event)
    return render(request, 'event_form.html', _event_form_context(form, 'Edit Event'))


@login_required
def event_detail(request: HttpRequest, pk: int) -> HttpResponse:
    """Show a single event with the animals it concerns."""
    event = get_object_or_404(Event.objects.select_related('performed_by').prefetch_related('animals'), pk=pk)
    context = {
        'event': event,
        'breadcrumbs': _build_breadcrumbs(('Events', reverse('event_list')), (event.title, '')),
    }
    return render(request, 'event_detail.html', context)


@login_required
@require_POST
def event_delete(request: HttpRequest, pk: int) -> HttpResponse:
    """Delete an event."""
    event = get_object_or_404(Event, pk=pk)
    title = event.title
    try:
        with transaction.atomic():
            event.delete()
    except DatabaseError:
        logger.exception('Could not delete event %s', pk)
        messages.error(request, DELETE_FAILED)
    else:
        log_activity(request.user, ActivityLog.Category.EVENT, 'Deleted event', title)
        messages.success(request, 'Event deleted.')
    return redirect('event_list')


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


@login_required
def alert_list(request: HttpRequest) -> HttpResponse:
    """List alerts with search, status/type/priority filters and counters."""
    ensure_overdue_alert_notifications()
    params = _list_params(request, 'status', 'type', 'priority')
    alerts = filter_alerts(Alert.objects.select_related('animal'), **params)
    context = {
        'alerts': alerts,
        'counts': alert_counts(alerts),
        'filters': params,
        'status_choices': Alert.Status.choices,
        'type_choices': Alert.AlertType.choices,
        'priority_choices': Alert.Priority.choices,
        'breadcrumbs': _build_breadcrumbs(('Alerts', '')),
    }
    return render(request, 'alert_list.html', context)


def _alert_form_context(form: AlertForm, title: str) -> Dict[str, Any]:
    return {
        'form': form,
        'title': title,
        'breadcrumbs': _build_breadcrumbs(('Alerts', reverse('alert_list')), (title, '')),
    }


@login_required
def alert_add(request: HttpRequest) -> HttpResponse:
    """Create an alert; High and Urgent alerts notify every user."""
    if request.method == 'POST':
        form = AlertForm(request.POST)
        if form.is_valid():
            try:
                with transaction.atomic():
                    alert = form.save(commit=False)
                    alert.created_by = request.user
                    alert.save()
                    notify_alert_raised(alert, actor=request.user)
            except DatabaseError:
                logger.exception('Could not add alert')
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.ALERT, f'{alert.type} created', alert.title)
                messages.success(request, 'Alert created successfully.')
                return redirect('alert_list')
    else:
        form = AlertForm(initial={'due_date': timezone.localdate()})
    return render(request, 'alert_form.html', _alert_form_context(form, 'Add Alert'))


@login_required
def alert_edit(request: HttpRequest, pk: int) -> HttpResponse:
    """Edit an alert."""
    alert = get_object_or_404(Alert, pk=pk)
    if request.method == 'POST':
        form = AlertForm(request.POST, instance=alert)
        if form.is_valid():
            try:
                with transaction.atomic():
                    alert = form.save()
            except DatabaseError:
                logger.exception('Could not update alert %s', pk)
                messages.error(request, SAVE_FAILED)
            else:
                log_activity(request.user, ActivityLog.Category.ALERT, 'Updated alert', alert.title)
                messages.success(request, 'Alert updated successfully.')
                return redirect('alert_list')
    else:
        form = AlertForm(instance=alert)
    return render(request, 'alert_form.html', _alert_form_context(form, 'Edit Alert'))


@login_required
@require_POST
def alert_status(request: HttpRequest, pk: int) -> HttpResponse:
    """Update the status of an alert from its card."""
    alert = get_object_or_404(Alert, pk=pk)
    form = AlertStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Invalid status.')
        return redirect('alert_list')
    alert.status = form.cleaned_data['status']
    try:
        alert.save(update_fields=['status', 'updated_at'])
    except DatabaseError:
        logger.exception('Could not update status of alert %s', pk)
        messages.error(request, SAVE_FAILED)
    else:
        log_activity(request.user, ActivityLog.Category.ALERT, f'Alert marked {alert.status}', alert.title)
        messages.success(request, f'Alert marked as {alert.status}.')
    return redirect('alert_list')


@login_required
@require_POST
def alert_delete(request: HttpRequest, pk: int) -> HttpResponse:
    """Delete an alert."""
    alert = get_object_or_404(Alert, pk=pk)
    try:
        alert.delete()
    except DatabaseError:
        logger.exception('Could not delete alert %s', pk)
        messages.error(request, DELETE_FAILED)
    else:
        messages.success(request, 'Alert deleted.')
    return redirect('alert_list')


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@login_required
@require_http_methods(["GET"])
def notifications_unread(request: HttpRequest) -> JsonResponse:
    """Return unread notifications for the current user."""

    items = unread_notifications(request.user, limit=50)
    total = request.user.notifications.filter(is_read=False).count()
    return JsonResponse({'notifications': items, 'count': total})


@login_required
@require_http_methods(["POST"])
def notifications_mark_read(request: HttpRequest) -> JsonResponse:
    """Mark notifications as read for the current user."""

    try:
        payload = json.loads(request.body.decode('utf-8') or '{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({'ok': False, 'message': 'Invalid payload.'}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({'ok': False, 'message': 'Invalid payload.'}, status=400)

    if payload.get('all'):
        updated = mark_notifications_read(request.user, None)
    else:
        ids = payload.get('ids')
        if not isinstance(ids, list):
            return JsonResponse({'ok': False, 'message': 'No notifications specified.'}, status=400)
        try:
            id_list = [int(value) for value in ids]
        except (TypeError, ValueError):
            return JsonResponse({'ok': False, 'message': 'Invalid notification identifiers.'}, status=400)
        updated = mark_notifications_read(request.user, id_list)

    return JsonResponse({'ok': True, 'updated': updated})
