"""Populate the breed catalogue with the default breed list.

Fresh installs show the default breeds as suggestions until the catalogue
has entries of its own. This command writes those defaults into the
``Breed`` table so they can be deactivated or extended from the settings
page.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.db import OperationalError


class Command(BaseCommand):
    help = "Insert the default breeds into the breed catalogue."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Add missing defaults even if the catalogue already has entries.",
        )

    def handle(self, *args, **options):
        from farm.forms import DEFAULT_BREEDS
        from farm.models import Breed

        try:
            if Breed.objects.exists() and not options["force"]:
                self.stdout.write(
                    self.style.WARNING(
                        "Breed catalogue already contains data; use --force to add missing defaults."
                    )
                )
                return
        except OperationalError as exc:
            raise CommandError(
                "Database is not ready; ensure migrations have been applied before seeding."
            ) from exc

        existing = {name.lower() for name in Breed.objects.values_list("name", flat=True)}
        created = 0
        for name in DEFAULT_BREEDS:
            if name.lower() in existing:
                continue
            Breed.objects.create(name=name, active=True)
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Added {created} breeds."))
