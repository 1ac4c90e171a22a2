"""
Test settings - in-memory database, quiet logging.
"""

from .settings import *  # noqa

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
        "ATOMIC_REQUESTS": False,
    }
}

# Speed up password hashing for tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

PLANNING_TRANSITION_POLICY = "closed"
PLANNING_MAX_SUBTASK_DEPTH = 1

LOGGING["loggers"]["apps"]["level"] = "WARNING"  # noqa: F405
