"""Application configuration for the farm app."""

from __future__ import annotations

from django.apps import AppConfig


class FarmConfig(AppConfig):
    """Custom AppConfig for the farm application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'farm'
    verbose_name = 'Farm Management'
