import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.planning.exceptions import DuplicateKey, NotFound, PlanningValidationError
from apps.planning.models import Project
from apps.planning.permissions import can_manage_project
from apps.planning.serializers import (
    CreateProjectRequestSerializer,
    UpdateProjectRequestSerializer,
)

from .status_registry import StatusRegistry
from .validation import require_permission, validate_request

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, registry=None, clock=timezone.now):
        self.registry = registry or StatusRegistry()
        self.clock = clock

    def get_project(self, project_id):
        try:
            return Project.objects.select_related("owner").get(pk=project_id)
        except Project.DoesNotExist:
            raise NotFound(f"Project with ID {project_id} not found")

    @transaction.atomic
    def create_project(self, data, owner):
        """
        Create a project owned by ``owner``.

        The status registry is seeded with the default workflow the first
        time a project is created on an empty installation.
        """
        attrs = validate_request(CreateProjectRequestSerializer, data)
        key = attrs["key"]
        if Project.objects.filter(key=key).exists():
            raise DuplicateKey(f"Project with key '{key}' already exists")

        now = self.clock()
        try:
            with transaction.atomic():
                project = Project.objects.create(
                    key=key,
                    name=attrs["name"],
                    description=attrs.get("description") or "",
                    owner=owner,
                    created_at=now,
                    updated_at=now,
                )
        except IntegrityError as e:
            raise DuplicateKey(f"Project with key '{key}' already exists") from e

        self.registry.seed_defaults()
        logger.info(f"Project {project.key} created by {owner}")
        return project

    @transaction.atomic
    def update_project(self, project_id, data, actor):
        project = self.get_project(project_id)
        require_permission(
            can_manage_project(actor, project), "Only the project owner can update the project"
        )
        attrs = validate_request(UpdateProjectRequestSerializer, data)

        project.name = attrs["name"]
        project.description = attrs.get("description") or ""
        project.is_active = attrs["is_active"]
        project.updated_at = self.clock()
        project.save(update_fields=["name", "description", "is_active", "updated_at"])
        return project

    @transaction.atomic
    def archive_project(self, project_id, actor):
        return self._set_archived(project_id, actor, True)

    @transaction.atomic
    def unarchive_project(self, project_id, actor):
        return self._set_archived(project_id, actor, False)

    @transaction.atomic
    def delete_project(self, project_id, actor):
        project = self.get_project(project_id)
        require_permission(
            can_manage_project(actor, project), "Only the project owner can delete the project"
        )

        epic_count = project.epic_count
        work_item_count = project.work_item_count
        if epic_count or work_item_count:
            raise PlanningValidationError(
                f"Cannot delete project '{project.key}' because it has {epic_count} epics "
                f"and {work_item_count} work items. Please delete them first."
            )

        logger.info(f"Project {project.key} deleted by {actor}")
        project.delete()

    def _set_archived(self, project_id, actor, archived):
        project = self.get_project(project_id)
        action = "archive" if archived else "unarchive"
        require_permission(
            can_manage_project(actor, project), f"Only the project owner can {action} the project"
        )

        if project.is_archived != archived:
            project.is_archived = archived
            project.updated_at = self.clock()
            project.save(update_fields=["is_archived", "updated_at"])
            logger.info(f"Project {project.key} {action}d by {actor}")
        return project
