"""
Management command to seed the default workflow transitions.

Under the closed transition policy an item can only change status along an
explicit rule, so this must run after ``seed_workflow_statuses``.

Usage:
    python manage.py seed_workflow_transitions           # Create missing rules
    python manage.py seed_workflow_transitions --force   # Re-enable disabled default rules
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.planning.models import Status
from apps.planning.services.status_registry import (
    DEFAULT_STATUSES,
    DEFAULT_TRANSITIONS,
    StatusRegistry,
)


class Command(BaseCommand):
    help = "Seed the default transition rules between the default workflow statuses."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Mark every default transition as allowed, even if it was disabled",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        force = options.get("force")

        names = [status_data["name"] for status_data in DEFAULT_STATUSES]
        found = set(Status.objects.filter(name__in=names).values_list("name", flat=True))
        missing = [name for name in names if name not in found]
        if missing:
            self.stdout.write(
                self.style.ERROR(
                    f"   Error: Missing workflow statuses: {', '.join(missing)}. "
                    "Run 'python manage.py seed_workflow_statuses' first."
                )
            )
            return

        count = StatusRegistry().seed_default_transitions(force=force)

        self.stdout.write("\n" + "=" * 60)
        self.stdout.write(self.style.SUCCESS("SEEDING COMPLETE"))
        self.stdout.write("=" * 60)
        label = "Created or re-enabled" if force else "Created"
        self.stdout.write(f"{label}: {count} of {len(DEFAULT_TRANSITIONS)} transitions")
        self.stdout.write("=" * 60 + "\n")
