import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from apps.planning.exceptions import (
    Conflict,
    DuplicateKey,
    NotFound,
    PlanningValidationError,
)
from apps.planning.models import Epic, Project, WorkItem
from apps.planning.serializers import (
    CreateEpicRequestSerializer,
    CreateWorkItemRequestSerializer,
    UpdateEpicRequestSerializer,
    UpdateWorkItemRequestSerializer,
)
from apps.planning.utils import resolve_user

from .hierarchy_validator import HierarchyValidator, load_nodes
from .key_generator import KeyGenerator
from .status_registry import StatusRegistry
from .validation import require_permission, validate_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpicProgress:
    work_item_count: int
    completed_work_item_count: int


class PlanningRuleEngine:
    """
    Create, update and move epics and work items.

    Every mutating operation checks all of its rules before the first write
    and runs inside a single transaction, so a refused request leaves no
    partial state behind. Callers pass in the outcome of their own
    authorization check as ``permitted``.
    """

    def __init__(self, registry=None, key_generator=None, hierarchy=None, clock=timezone.now):
        self.registry = registry or StatusRegistry()
        self.key_generator = key_generator or KeyGenerator()
        self.hierarchy = hierarchy or HierarchyValidator()
        self.clock = clock

    # Lookups

    def get_project(self, project_id):
        try:
            return Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            raise NotFound(f"Project with ID {project_id} not found")

    def get_epic(self, epic_id):
        try:
            return Epic.objects.select_related("project", "status").get(pk=epic_id)
        except Epic.DoesNotExist:
            raise NotFound(f"Epic with ID {epic_id} not found")

    def get_work_item(self, item_id):
        try:
            return WorkItem.objects.select_related("project", "status").get(pk=item_id)
        except WorkItem.DoesNotExist:
            raise NotFound(f"Work item with ID {item_id} not found")

    def ensure_writable(self, project):
        if project.is_archived:
            raise PlanningValidationError(
                f"Project '{project.key}' is archived and cannot be modified"
            )

    # Epics

    @transaction.atomic
    def create_epic(self, data, actor=None, permitted=True):
        require_permission(permitted)
        attrs = validate_request(CreateEpicRequestSerializer, data)

        project = self.get_project(attrs["project_id"])
        self.ensure_writable(project)

        if attrs.get("status_id") is not None:
            status = self.registry.resolve_active(attrs["status_id"])
        else:
            status = self.registry.default_status_for(project)
        assignee = resolve_user(attrs.get("assignee_id"), role="Assignee")

        key = self.key_generator.next_epic_key(project)
        if Epic.objects.filter(project=project, key=key).exists():
            raise DuplicateKey(f"Epic with key '{key}' already exists")

        now = self.clock()
        try:
            with transaction.atomic():
                epic = Epic.objects.create(
                    project=project,
                    key=key,
                    summary=attrs["summary"],
                    description=attrs.get("description") or "",
                    assignee=assignee,
                    status=status,
                    priority=attrs["priority"],
                    start_date=attrs.get("start_date"),
                    due_date=attrs.get("due_date"),
                    created_at=now,
                    updated_at=now,
                )
        except IntegrityError as e:
            raise DuplicateKey(f"Epic with key '{key}' already exists") from e

        logger.info(f"Epic {epic.key} created in project {project.key} by {actor}")
        return epic

    @transaction.atomic
    def update_epic(self, epic_id, data, actor=None, permitted=True):
        require_permission(permitted)
        epic = self.get_epic(epic_id)
        attrs = validate_request(UpdateEpicRequestSerializer, data)
        self.ensure_writable(epic.project)

        status = self.registry.get_status(attrs["status_id"])
        self.registry.ensure_transition(epic.status, status)
        assignee = resolve_user(attrs.get("assignee_id"), role="Assignee")

        epic.summary = attrs["summary"]
        epic.description = attrs.get("description") or ""
        epic.assignee = assignee
        epic.status = status
        epic.priority = attrs["priority"]
        epic.start_date = attrs.get("start_date")
        epic.due_date = attrs.get("due_date")
        epic.updated_at = self.clock()
        epic.save()

        logger.info(f"Epic {epic.key} updated by {actor}")
        return epic

    @transaction.atomic
    def move_epic(self, epic_id, to_status_id, permitted=True):
        require_permission(permitted)
        epic = self.get_epic(epic_id)
        status = self.registry.get_status(to_status_id)
        if status.pk == epic.status_id:
            return epic

        self.ensure_writable(epic.project)
        self.registry.ensure_transition(epic.status, status)

        epic.status = status
        epic.updated_at = self.clock()
        epic.save(update_fields=["status", "updated_at"])
        logger.info(f"Epic {epic.key} moved to '{status.name}'")
        return epic

    @transaction.atomic
    def assign_epic(self, epic_id, assignee_id, permitted=True):
        require_permission(permitted)
        epic = self.get_epic(epic_id)
        self.ensure_writable(epic.project)
        assignee = resolve_user(assignee_id, role="Assignee")

        epic.assignee = assignee
        epic.updated_at = self.clock()
        epic.save(update_fields=["assignee", "updated_at"])
        logger.info(f"Epic {epic.key} assigned to {assignee}")
        return epic

    @transaction.atomic
    def archive_epic(self, epic_id, permitted=True):
        require_permission(permitted)
        epic = self.get_epic(epic_id)
        if not epic.is_active:
            return epic

        epic.is_active = False
        epic.updated_at = self.clock()
        epic.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Epic {epic.key} archived")
        return epic

    @transaction.atomic
    def delete_epic(self, epic_id, permitted=True):
        require_permission(permitted)
        epic = self.get_epic(epic_id)
        self.ensure_writable(epic.project)

        work_item_count = epic.work_items.count()
        if work_item_count:
            raise PlanningValidationError(
                f"Cannot delete epic '{epic.key}' because it has {work_item_count} work items. "
                "Please delete or reassign them first."
            )

        logger.info(f"Epic {epic.key} deleted")
        epic.delete()

    def epic_progress(self, epic):
        counts = WorkItem.objects.filter(epic=epic).aggregate(
            total=Count("id"),
            completed=Count("id", filter=Q(status__is_completed_status=True)),
        )
        return EpicProgress(
            work_item_count=counts["total"],
            completed_work_item_count=counts["completed"],
        )

    # Work items

    @transaction.atomic
    def create_work_item(self, data, actor=None, permitted=True):
        require_permission(permitted)
        attrs = validate_request(CreateWorkItemRequestSerializer, data)

        project = self.get_project(attrs["project_id"])
        self.ensure_writable(project)

        epic = None
        if attrs.get("epic_id") is not None:
            epic = self.get_epic(attrs["epic_id"])
            if epic.project_id != project.pk:
                raise PlanningValidationError(
                    {"epic_id": "Epic does not belong to the specified project"}
                )
            if not epic.is_active:
                raise PlanningValidationError(
                    {"epic_id": f"Epic '{epic.key}' is archived"}
                )

        parent_id = attrs.get("parent_work_item_id")
        if parent_id is not None:
            nodes = load_nodes(project)
            self.hierarchy.validate_parent(None, parent_id, nodes, project.pk)
            self.hierarchy.validate_parent_type(attrs["type"], nodes[parent_id].type)

        status = self.registry.default_status_for(project)
        assignee = resolve_user(attrs.get("assignee_id"), role="Assignee")
        reporter = resolve_user(attrs.get("reporter_id"), role="Reporter") or actor

        key = self.key_generator.next_work_item_key(project)
        if WorkItem.objects.filter(project=project, key=key).exists():
            raise DuplicateKey(f"Work item with key '{key}' already exists")

        now = self.clock()
        try:
            with transaction.atomic():
                item = WorkItem.objects.create(
                    project=project,
                    epic=epic,
                    parent_id=parent_id,
                    key=key,
                    type=attrs["type"],
                    summary=attrs["summary"],
                    description=attrs.get("description") or "",
                    status=status,
                    assignee=assignee,
                    reporter=reporter,
                    priority=attrs["priority"],
                    due_date=attrs.get("due_date"),
                    created_at=now,
                    updated_at=now,
                )
        except IntegrityError as e:
            raise DuplicateKey(f"Work item with key '{key}' already exists") from e

        logger.info(f"Work item {item.key} created in project {project.key} by {actor}")
        return item

    @transaction.atomic
    def update_work_item(self, item_id, data, actor=None, permitted=True):
        require_permission(permitted)
        item = self.get_work_item(item_id)
        attrs = validate_request(UpdateWorkItemRequestSerializer, data)
        self.ensure_writable(item.project)

        expected_version = attrs.get("version")
        if expected_version is not None and expected_version != item.version:
            raise Conflict(
                f"Work item {item.key} is at version {item.version}, not {expected_version}"
            )

        status = self.registry.get_status(attrs["status_id"])
        self.registry.ensure_transition(item.status, status)
        assignee = resolve_user(attrs.get("assignee_id"), role="Assignee")

        item = self._write_versioned(
            item,
            summary=attrs["summary"],
            description=attrs.get("description") or "",
            status=status,
            assignee=assignee,
            priority=attrs["priority"],
            due_date=attrs.get("due_date"),
        )
        logger.info(f"Work item {item.key} updated by {actor}")
        return item

    @transaction.atomic
    def move_work_item(self, item_id, to_status_id, permitted=True, **changes):
        """
        Move a work item to another workflow status.

        A move to the current status succeeds without writing. WIP limits are
        not checked here; the board only reports them. Extra ``changes`` are
        written in the same versioned update.
        """
        require_permission(permitted)
        item = self.get_work_item(item_id)
        status = self.registry.get_status(to_status_id)

        if status.pk == item.status_id:
            if changes:
                self.ensure_writable(item.project)
                item = self._write_versioned(item, **changes)
            return item

        self.ensure_writable(item.project)
        self.registry.ensure_transition(item.status, status)

        from_name = item.status.name
        item = self._write_versioned(item, status=status, **changes)
        logger.info(f"Work item {item.key} moved from '{from_name}' to '{status.name}'")
        return item

    @transaction.atomic
    def set_parent(self, item_id, parent_id, permitted=True):
        require_permission(permitted)
        item = self.get_work_item(item_id)
        self.ensure_writable(item.project)

        if parent_id is not None:
            nodes = load_nodes(item.project)
            self.hierarchy.validate_parent(item.pk, parent_id, nodes, item.project_id)
            self.hierarchy.validate_parent_type(item.type, nodes[parent_id].type)

        item = self._write_versioned(item, parent_id=parent_id)
        logger.info(f"Work item {item.key} parent set to {parent_id}")
        return item

    @transaction.atomic
    def assign_work_item(self, item_id, assignee_id, permitted=True):
        require_permission(permitted)
        item = self.get_work_item(item_id)
        self.ensure_writable(item.project)
        assignee = resolve_user(assignee_id, role="Assignee")

        item = self._write_versioned(item, assignee=assignee)
        logger.info(f"Work item {item.key} assigned to {assignee}")
        return item

    @transaction.atomic
    def archive_work_item(self, item_id, permitted=True):
        require_permission(permitted)
        item = self.get_work_item(item_id)
        if not item.is_active:
            return item

        item = self._write_versioned(item, is_active=False)
        logger.info(f"Work item {item.key} archived")
        return item

    @transaction.atomic
    def delete_work_item(self, item_id, permitted=True):
        require_permission(permitted)
        item = self.get_work_item(item_id)
        self.ensure_writable(item.project)

        child_count = item.children.count()
        if child_count:
            raise PlanningValidationError(
                f"Cannot delete work item '{item.key}' because it has {child_count} child work items. "
                "Please delete or reassign them first."
            )

        logger.info(f"Work item {item.key} deleted")
        item.delete()

    def _write_versioned(self, item, **changes):
        """Apply ``changes`` only if nobody else wrote the row since it was read."""
        updated = WorkItem.objects.filter(pk=item.pk, version=item.version).update(
            version=F("version") + 1, updated_at=self.clock(), **changes
        )
        if updated != 1:
            logger.warning(f"Concurrent write detected on work item {item.key}")
            raise Conflict(f"Work item {item.key} was modified concurrently")

        item.refresh_from_db()
        return item
