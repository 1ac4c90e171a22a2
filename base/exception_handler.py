"""
REST framework exception handler for the planning API.

Responses carry only the error category and a human-readable message:

    {"error": "invalid_status_transition", "detail": "Cannot transition ..."}
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from rest_framework.views import exception_handler

from apps.planning.exceptions import PlanningError, PlanningValidationError

logger = logging.getLogger(__name__)


def planning_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        exc = PlanningValidationError(detail=detail)
    elif isinstance(exc, ProtectedError):
        exc = PlanningValidationError(
            detail="Entity is still referenced and cannot be deleted."
        )

    response = exception_handler(exc, context)
    if response is None:
        # Unhandled errors fall through to Django's 500 handling.
        return None

    if isinstance(exc, PlanningError):
        code = exc.kind
    else:
        code = getattr(exc, "default_code", "error")

    if isinstance(response.data, dict) and "detail" in response.data:
        detail = response.data["detail"]
    else:
        detail = response.data

    if response.status_code >= 500:
        logger.error(f"Planning API error ({code}): {detail}")
    response.data = {"error": code, "detail": detail}
    return response
