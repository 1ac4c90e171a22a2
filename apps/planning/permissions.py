"""
Ownership checks for planning resources.

The rule layer never authenticates anyone; callers compute the decision with
these helpers and hand it to the services as ``permitted``.
"""
from rest_framework import permissions

from apps.planning.models import BoardColumn


def project_of(obj):
    """Resolve the owning project of a planning object."""
    if isinstance(obj, BoardColumn):
        return obj.board.project
    if hasattr(obj, "project"):
        return obj.project
    return obj


def can_manage_project(user, project):
    """Only the project owner (or a superuser) may change a project and its board."""
    if user is None or not user.is_authenticated:
        return False
    return user.is_superuser or project.owner_id == user.pk


class IsProjectOwner(permissions.BasePermission):
    """
    Read access for any authenticated user, writes for the project owner.
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return can_manage_project(request.user, project_of(obj))
