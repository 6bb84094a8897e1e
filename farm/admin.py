"""Django admin configuration for farm models."""

from django.contrib import admin
from django.contrib.auth.models import User
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    ActivityLog,
    Alert,
    Animal,
    Breed,
    Event,
    FarmSettings,
    FinancialTransaction,
    HealthCategory,
    HealthItem,
    HealthRecord,
    Notification,
    Profile,
)


class ProfileInline(admin.StackedInline):
    """Allows editing of the Profile model on the same page as the User model."""
    model = Profile
    can_delete = False
    verbose_name_plural = 'profile'


class UserAdmin(BaseUserAdmin):
    """Extend the default User admin to include Profile fields."""
    inlines = (ProfileInline,)


@admin.register(Animal)
class AnimalAdmin(admin.ModelAdmin):
    list_display = ('name', 'tag_number', 'breed', 'sex', 'status', 'health_status')
    list_filter = ('status', 'sex', 'health_status')
    search_fields = ('name', 'tag_number', 'breed')


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    list_display = ('date', 'type', 'category', 'amount', 'payment_method')
    list_filter = ('type', 'category')
    search_fields = ('description', 'reference')


@admin.register(Alert)
class AlertAdmin(admin.ModelAdmin):
    list_display = ('title', 'type', 'priority', 'status', 'due_date')
    list_filter = ('status', 'type', 'priority')


admin.site.unregister(User)
admin.site.register(User, UserAdmin)
admin.site.register(HealthRecord)
admin.site.register(Event)
admin.site.register(FarmSettings)
admin.site.register(Breed)
admin.site.register(HealthCategory)
admin.site.register(HealthItem)
admin.site.register(ActivityLog)
admin.site.register(Notification)
