"""Farm application for Shepherd Connect.

This package contains the models, views, forms, templates and services that
power the farm management pages: animals, health records, events,
financial transactions, alerts, reports, settings and user profiles.
"""

default_app_config = 'farm.apps.FarmConfig'
