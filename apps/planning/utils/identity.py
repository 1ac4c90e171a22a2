"""
User lookups used by the planning rules.

Accounts live in Django's auth app; the planning layer only needs to know
whether a referenced user exists and how to show their name.
"""

from django.contrib.auth import get_user_model

from apps.planning.exceptions import NotFound

User = get_user_model()


def resolve_user(user_id, role="User"):
    """Return the user with ``user_id``, ``None`` for ``None``, else raise NotFound."""
    if user_id is None:
        return None
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound(f"{role} with ID {user_id} not found")


def display_name(user):
    if user is None:
        return None
    return user.get_full_name() or user.get_username()
