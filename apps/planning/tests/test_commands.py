"""
Tests for workflow seeding commands.
"""
from io import StringIO

import pytest
from django.core.management import call_command

from apps.planning.models import Status, StatusTransition
from apps.planning.services.status_registry import BACKLOG, DEFAULT_TRANSITIONS, IN_PROGRESS


def run(command, *args):
    out = StringIO()
    call_command(command, *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestSeedWorkflowStatuses:
    """Test seed_workflow_statuses command."""

    def test_creates_defaults(self):
        """Test creates defaults."""
        output = run("seed_workflow_statuses")

        assert Status.objects.count() == 4
        assert "Created: 4 workflow statuses" in output

    def test_second_run_creates_nothing(self):
        """Test second run creates nothing."""
        run("seed_workflow_statuses")
        output = run("seed_workflow_statuses")

        assert Status.objects.count() == 4
        assert "Created: 0 workflow statuses" in output

    def test_force_resets_defaults(self):
        """Test force resets defaults."""
        run("seed_workflow_statuses")
        Status.objects.filter(name=BACKLOG).update(color="#000000", is_active=False)

        output = run("seed_workflow_statuses", "--force")

        backlog = Status.objects.get(name=BACKLOG)
        assert backlog.color == "#34495e"
        assert backlog.is_active is True
        assert "Updated: 4 workflow statuses" in output


@pytest.mark.django_db
class TestSeedWorkflowTransitions:
    """Test seed_workflow_transitions command."""

    def test_requires_statuses(self):
        """Test requires statuses."""
        output = run("seed_workflow_transitions")

        assert "Missing workflow statuses" in output
        assert StatusTransition.objects.count() == 0

    def test_creates_default_rules(self):
        """Test creates default rules."""
        run("seed_workflow_statuses")
        output = run("seed_workflow_transitions")

        assert StatusTransition.objects.count() == len(DEFAULT_TRANSITIONS)
        assert f"Created: {len(DEFAULT_TRANSITIONS)} of {len(DEFAULT_TRANSITIONS)}" in output

    def test_force_reenables_rules(self):
        """Test force reenables rules."""
        run("seed_workflow_statuses")
        run("seed_workflow_transitions")
        StatusTransition.objects.filter(
            from_status__name=BACKLOG, to_status__name=IN_PROGRESS
        ).update(is_allowed=False)

        run("seed_workflow_transitions", "--force")

        assert not StatusTransition.objects.filter(is_allowed=False).exists()
