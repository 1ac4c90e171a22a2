"""
Management command to seed the default workflow statuses.

Statuses are shared by every project of the installation. Without at least
one status flagged as default for new items, epics and work items cannot be
created.

Usage:
    python manage.py seed_workflow_statuses           # Create missing defaults
    python manage.py seed_workflow_statuses --force   # Reset defaults to their stock values
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.planning.models import Status
from apps.planning.services.status_registry import DEFAULT_STATUSES


class Command(BaseCommand):
    help = "Seed the default workflow statuses (Backlog, In Progress, Done, Cancelled)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite colors, order and flags of existing default statuses",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        force = options.get("force")

        created_count = 0
        updated_count = 0

        for status_data in DEFAULT_STATUSES:
            defaults = {
                "color": status_data["color"],
                "order_index": status_data["order_index"],
                "is_default_for_new": status_data.get("is_default_for_new", False),
                "is_completed_status": status_data.get("is_completed_status", False),
                "is_cancelled_status": status_data.get("is_cancelled_status", False),
                "is_active": True,
            }

            if force:
                status, created = Status.objects.update_or_create(
                    name=status_data["name"], defaults=defaults
                )
            else:
                status, created = Status.objects.get_or_create(
                    name=status_data["name"], defaults=defaults
                )

            if created:
                self.stdout.write(self.style.SUCCESS(f"   Created: {status.name}"))
                created_count += 1
            elif force:
                self.stdout.write(self.style.WARNING(f"   Updated: {status.name}"))
                updated_count += 1
            else:
                self.stdout.write(f"   Exists: {status.name}")

        self.stdout.write("\n" + "=" * 60)
        self.stdout.write(self.style.SUCCESS("SEEDING COMPLETE"))
        self.stdout.write("=" * 60)
        self.stdout.write(f"Created: {created_count} workflow statuses")
        if force:
            self.stdout.write(f"Updated: {updated_count} workflow statuses")
        self.stdout.write("=" * 60 + "\n")
