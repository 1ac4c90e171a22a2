"""
Error kinds raised by the planning rule layer.

Every kind carries a stable ``default_code`` that the HTTP layer exposes as the
error category, so a front-end can pick a message without parsing text.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class PlanningError(APIException):
    """Base class for planning rule violations."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Planning rule violated."
    default_code = "planning_error"

    @property
    def kind(self):
        return self.default_code


class PlanningValidationError(PlanningError):
    """A field-level constraint (length, range, regex, required) was violated."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class DuplicateKey(PlanningError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "An entity with this key already exists."
    default_code = "duplicate_key"


class NotFound(PlanningError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Referenced entity not found."
    default_code = "not_found"


class InvalidHierarchy(PlanningError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid work item hierarchy."
    default_code = "invalid_hierarchy"


class CircularHierarchy(PlanningError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Work item hierarchy would contain a cycle."
    default_code = "circular_hierarchy"


class InvalidStatusTransition(PlanningError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Status transition is not allowed."
    default_code = "invalid_status_transition"


class Conflict(PlanningError):
    """
    A concurrent write was detected by the storage layer.

    The rule layer never retries; the caller decides whether to reload and
    try again.
    """

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The entity was modified concurrently. Reload and retry."
    default_code = "conflict"


class Forbidden(PlanningError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"
