import logging
import re

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F

from apps.planning.exceptions import Conflict
from apps.planning.models import Epic, ProjectKeyCounter, WorkItem

logger = logging.getLogger(__name__)


class KeyGenerator:
    """
    Hands out human-readable keys such as ``PROJ-12`` and ``PROJ-EPIC-3``.

    Each (project, scope) pair owns a persisted counter. The counter is bumped
    with an increment-and-fetch guarded by the value that was read, so two
    concurrent callers can never receive the same number; the loser gets a
    ``Conflict`` and decides for itself whether to retry.
    """

    SCOPE_PREFIXES = {
        ProjectKeyCounter.SCOPE_EPIC: "EPIC-",
        ProjectKeyCounter.SCOPE_WORK_ITEM: "",
    }

    SCOPE_MODELS = {
        ProjectKeyCounter.SCOPE_EPIC: Epic,
        ProjectKeyCounter.SCOPE_WORK_ITEM: WorkItem,
    }

    def next_key(self, project, scope):
        if scope not in self.SCOPE_PREFIXES:
            raise ValueError(f"Unknown key scope '{scope}'")

        number = self._next_number(project, scope)
        return self.format_key(project.key, scope, number)

    def next_epic_key(self, project):
        return self.next_key(project, ProjectKeyCounter.SCOPE_EPIC)

    def next_work_item_key(self, project):
        return self.next_key(project, ProjectKeyCounter.SCOPE_WORK_ITEM)

    @classmethod
    def format_key(cls, project_key, scope, number):
        return f"{project_key}-{cls.SCOPE_PREFIXES[scope]}{number}"

    def _next_number(self, project, scope):
        try:
            with transaction.atomic():
                counter = self._lock_counter(project, scope)
                updated = ProjectKeyCounter.objects.filter(
                    pk=counter.pk, last_value=counter.last_value
                ).update(last_value=F("last_value") + 1)
                if updated != 1:
                    raise Conflict(
                        f"Key counter for project '{project.key}' was modified concurrently"
                    )
                counter.refresh_from_db(fields=["last_value"])
        except (IntegrityError, DatabaseError) as e:
            logger.warning(
                f"Key generation collided for project {project.key} [{scope}]: {str(e)}"
            )
            raise Conflict(
                f"Key counter for project '{project.key}' was modified concurrently"
            ) from e

        return counter.last_value

    def _lock_counter(self, project, scope):
        counter = (
            ProjectKeyCounter.objects.select_for_update()
            .filter(project=project, scope=scope)
            .first()
        )
        if counter is not None:
            return counter

        # First key in this scope: start from whatever numbered keys already
        # exist so rows created before the counter are never duplicated.
        return ProjectKeyCounter.objects.create(
            project=project,
            scope=scope,
            last_value=self._highest_existing_number(project, scope),
        )

    def _highest_existing_number(self, project, scope):
        prefix = f"{project.key}-{self.SCOPE_PREFIXES[scope]}"
        pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
        model = self.SCOPE_MODELS[scope]

        keys = model.objects.filter(project=project, key__startswith=prefix).values_list(
            "key", flat=True
        )
        numbers = [int(match.group(1)) for match in map(pattern.match, keys) if match]
        return max(numbers, default=0)
