import logging

from django.conf import settings
from django.db import transaction

from apps.planning.exceptions import (
    DuplicateKey,
    InvalidStatusTransition,
    NotFound,
    PlanningValidationError,
)
from apps.planning.models import Epic, Status, StatusTransition, WorkItem
from apps.planning.serializers import (
    CreateStatusRequestSerializer,
    CreateStatusTransitionRequestSerializer,
    UpdateStatusRequestSerializer,
)

from .validation import validate_request

logger = logging.getLogger(__name__)

POLICY_CLOSED = "closed"
POLICY_OPEN = "open"
TRANSITION_POLICIES = (POLICY_CLOSED, POLICY_OPEN)

BACKLOG = "Backlog"
IN_PROGRESS = "In Progress"
DONE = "Done"
CANCELLED = "Cancelled"

DEFAULT_STATUSES = [
    {
        "name": BACKLOG,
        "color": "#34495e",
        "order_index": 0,
        "is_default_for_new": True,
    },
    {
        "name": IN_PROGRESS,
        "color": "#3498db",
        "order_index": 1,
    },
    {
        "name": DONE,
        "color": "#2ecc71",
        "order_index": 2,
        "is_completed_status": True,
    },
    {
        "name": CANCELLED,
        "color": "#e74c3c",
        "order_index": 3,
        "is_cancelled_status": True,
    },
]

DEFAULT_TRANSITIONS = [
    (BACKLOG, IN_PROGRESS),
    (BACKLOG, CANCELLED),
    (IN_PROGRESS, BACKLOG),
    (IN_PROGRESS, DONE),
    (IN_PROGRESS, CANCELLED),
    (DONE, IN_PROGRESS),
    (DONE, BACKLOG),
    (CANCELLED, BACKLOG),
]


class StatusRegistry:
    """
    Workflow statuses and the transition rules between them.

    The transition policy is fixed when the registry is built. Under the
    ``closed`` policy only pairs with an explicit ``is_allowed=True`` rule may
    be crossed, so a freshly added status needs rules before items can reach
    or leave it. Under the ``open`` policy a missing rule allows the move and
    only explicit ``is_allowed=False`` rules refuse it.
    """

    def __init__(self, policy=None):
        policy = policy or getattr(settings, "PLANNING_TRANSITION_POLICY", POLICY_CLOSED)
        if policy not in TRANSITION_POLICIES:
            raise ValueError(
                f"Unknown transition policy '{policy}'. "
                f"Expected one of: {', '.join(TRANSITION_POLICIES)}"
            )
        self.policy = policy

    # Transition rules

    def is_transition_allowed(self, from_status_id, to_status_id):
        if from_status_id == to_status_id:
            return True

        rule = (
            StatusTransition.objects.filter(
                from_status_id=from_status_id, to_status_id=to_status_id
            )
            .values_list("is_allowed", flat=True)
            .first()
        )
        if rule is None:
            return self.policy == POLICY_OPEN
        return rule

    def ensure_transition(self, from_status, to_status):
        """Raise InvalidStatusTransition unless ``from_status`` may move to ``to_status``."""
        if from_status.pk == to_status.pk:
            return
        if not to_status.is_active:
            raise InvalidStatusTransition(
                f"Cannot transition to inactive status '{to_status.name}'"
            )
        if not self.is_transition_allowed(from_status.pk, to_status.pk):
            logger.warning(
                f"Refused status transition '{from_status.name}' -> '{to_status.name}'"
            )
            raise InvalidStatusTransition(
                f"Cannot transition from '{from_status.name}' to '{to_status.name}'"
            )

    def allowed_transitions(self, from_status_id):
        """Active statuses reachable from ``from_status_id`` in one move."""
        explicit = StatusTransition.objects.filter(from_status_id=from_status_id)
        allowed_ids = set(explicit.filter(is_allowed=True).values_list("to_status_id", flat=True))

        if self.policy == POLICY_OPEN:
            denied_ids = set(
                explicit.filter(is_allowed=False).values_list("to_status_id", flat=True)
            )
            return list(
                Status.objects.filter(is_active=True)
                .exclude(pk=from_status_id)
                .exclude(pk__in=denied_ids)
            )

        return list(Status.objects.filter(is_active=True, pk__in=allowed_ids))

    @transaction.atomic
    def create_transition(self, data):
        attrs = validate_request(CreateStatusTransitionRequestSerializer, data)
        from_status = self.get_status(attrs["from_status_id"], role="Source status")
        to_status = self.get_status(attrs["to_status_id"], role="Target status")

        if from_status.pk == to_status.pk:
            raise PlanningValidationError(
                {"to_status_id": "A transition must connect two different statuses"}
            )
        if StatusTransition.objects.filter(
            from_status=from_status, to_status=to_status
        ).exists():
            raise DuplicateKey(
                f"Transition from '{from_status.name}' to '{to_status.name}' already exists"
            )

        transition = StatusTransition.objects.create(
            from_status=from_status,
            to_status=to_status,
            is_allowed=attrs["is_allowed"],
        )
        logger.info(f"Created status transition {transition}")
        return transition

    # Statuses

    def active_statuses(self):
        return Status.objects.filter(is_active=True).order_by("order_index", "name")

    def get_status(self, status_id, role="Status"):
        try:
            return Status.objects.get(pk=status_id)
        except Status.DoesNotExist:
            raise NotFound(f"{role} with ID {status_id} not found")

    def resolve_active(self, status_id):
        status = self.get_status(status_id)
        if not status.is_active:
            raise PlanningValidationError(
                {"status_id": f"Status '{status.name}' is not active"}
            )
        return status

    def default_status_for(self, project=None):
        # Statuses are shared by every project of the installation; the
        # project argument is accepted so callers stay agnostic of that.
        status = (
            Status.objects.filter(is_default_for_new=True, is_active=True)
            .order_by("order_index", "pk")
            .first()
        )
        if status is None:
            raise PlanningValidationError(
                "No default status found. Please ensure at least one status is marked as default."
            )
        return status

    @transaction.atomic
    def create_status(self, data):
        attrs = validate_request(CreateStatusRequestSerializer, data)
        if Status.objects.filter(name=attrs["name"]).exists():
            raise DuplicateKey(f"Status with name '{attrs['name']}' already exists")

        status = Status.objects.create(
            name=attrs["name"],
            color=attrs.get("color") or "",
            order_index=attrs["order_index"],
            is_default_for_new=attrs["is_default_for_new"],
            is_completed_status=attrs["is_completed_status"],
            is_cancelled_status=attrs["is_cancelled_status"],
        )
        logger.info(f"Created status '{status.name}'")
        return status

    @transaction.atomic
    def update_status(self, status_id, data):
        status = self.get_status(status_id)
        attrs = validate_request(UpdateStatusRequestSerializer, data)
        if Status.objects.filter(name=attrs["name"]).exclude(pk=status.pk).exists():
            raise DuplicateKey(f"Status with name '{attrs['name']}' already exists")

        status.name = attrs["name"]
        status.color = attrs.get("color") or ""
        status.order_index = attrs["order_index"]
        status.is_default_for_new = attrs["is_default_for_new"]
        status.is_completed_status = attrs["is_completed_status"]
        status.is_cancelled_status = attrs["is_cancelled_status"]
        status.is_active = attrs["is_active"]
        status.save()
        return status

    @transaction.atomic
    def delete_status(self, status_id):
        status = self.get_status(status_id)

        epic_count = Epic.objects.filter(status=status).count()
        work_item_count = WorkItem.objects.filter(status=status).count()
        if epic_count or work_item_count:
            raise PlanningValidationError(
                f"Cannot delete status '{status.name}' because it is in use by "
                f"{epic_count} epics and {work_item_count} work items"
            )

        logger.info(f"Deleted status '{status.name}'")
        status.delete()

    @transaction.atomic
    def seed_defaults(self, with_transitions=True):
        """
        Create the default workflow when the registry is empty.

        Returns the active statuses. Calling it again is a no-op.
        """
        if Status.objects.exists():
            return list(self.active_statuses())

        statuses = {
            attrs["name"]: Status.objects.create(**attrs) for attrs in DEFAULT_STATUSES
        }
        if with_transitions:
            self.seed_default_transitions(statuses)

        logger.info(f"Seeded {len(statuses)} default statuses")
        return list(self.active_statuses())

    def seed_default_transitions(self, statuses=None, force=False):
        """
        Create the default allow-list between the default statuses.

        Pairs whose statuses are missing are skipped. Returns the number of
        rules created (or re-enabled when ``force`` is set).
        """
        if statuses is None:
            names = [attrs["name"] for attrs in DEFAULT_STATUSES]
            statuses = {s.name: s for s in Status.objects.filter(name__in=names)}

        created_count = 0
        for from_name, to_name in DEFAULT_TRANSITIONS:
            if from_name not in statuses or to_name not in statuses:
                continue
            if force:
                StatusTransition.objects.update_or_create(
                    from_status=statuses[from_name],
                    to_status=statuses[to_name],
                    defaults={"is_allowed": True},
                )
                created_count += 1
            else:
                _, created = StatusTransition.objects.get_or_create(
                    from_status=statuses[from_name],
                    to_status=statuses[to_name],
                    defaults={"is_allowed": True},
                )
                if created:
                    created_count += 1
        return created_count
