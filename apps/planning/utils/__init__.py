from .identity import display_name, resolve_user

__all__ = ["display_name", "resolve_user"]
