from apps.planning.exceptions import Forbidden, PlanningValidationError


def validate_request(serializer_class, data):
    """Run a request serializer and return its validated data or raise."""
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise PlanningValidationError(detail=serializer.errors)
    return serializer.validated_data


def require_permission(permitted, message=None):
    """Refuse the operation when the caller's permission decision is negative."""
    if not permitted:
        raise Forbidden(message or Forbidden.default_detail)
