"""
Tests for the API error envelope.
"""
import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from apps.planning.exceptions import (
    CircularHierarchy,
    Conflict,
    DuplicateKey,
    Forbidden,
    InvalidHierarchy,
    InvalidStatusTransition,
    NotFound,
    PlanningValidationError,
)
from base.exception_handler import planning_exception_handler


@pytest.mark.parametrize(
    "exc_class, expected_status, expected_code",
    [
        (PlanningValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
        (DuplicateKey, status.HTTP_409_CONFLICT, "duplicate_key"),
        (NotFound, status.HTTP_404_NOT_FOUND, "not_found"),
        (InvalidHierarchy, 422, "invalid_hierarchy"),
        (CircularHierarchy, 422, "circular_hierarchy"),
        (InvalidStatusTransition, 422, "invalid_status_transition"),
        (Conflict, status.HTTP_409_CONFLICT, "conflict"),
        (Forbidden, status.HTTP_403_FORBIDDEN, "forbidden"),
    ],
)
def test_each_kind_has_a_stable_status_and_code(exc_class, expected_status, expected_code):
    """Test each kind has a stable status and code."""
    response = planning_exception_handler(exc_class("Something is wrong"), {})

    assert response.status_code == expected_status
    assert response.data == {"error": expected_code, "detail": "Something is wrong"}
    assert exc_class().kind == expected_code


def test_default_messages():
    """Test default messages."""
    response = planning_exception_handler(Conflict(), {})

    assert response.data["detail"] == Conflict.default_detail


def test_field_errors_are_kept():
    """Test field errors are kept."""
    exc = PlanningValidationError(detail={"summary": ["This field is required."]})

    response = planning_exception_handler(exc, {})

    assert response.data["error"] == "validation_error"
    assert response.data["detail"] == {"summary": ["This field is required."]}


def test_django_validation_error_is_converted():
    """Test django validation error is converted."""
    exc = DjangoValidationError({"key": ["Project key must start with a letter"]})

    response = planning_exception_handler(exc, {})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["error"] == "validation_error"
    assert response.data["detail"] == {"key": ["Project key must start with a letter"]}


def test_protected_error_is_converted():
    """Test protected error is converted."""
    response = planning_exception_handler(ProtectedError("in use", set()), {})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["error"] == "validation_error"


def test_framework_errors_use_their_code():
    """Test framework errors use their code."""
    response = planning_exception_handler(NotAuthenticated(), {})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.data["error"] == "not_authenticated"


def test_unexpected_errors_are_not_rendered():
    """Test unexpected errors are not rendered."""
    assert planning_exception_handler(RuntimeError("boom"), {}) is None
