"""
Pytest configuration and shared fixtures.
"""
import pytest

from apps.planning.services import (
    BoardService,
    PlanningRuleEngine,
    ProjectService,
    StatusRegistry,
)
from apps.planning.services.status_registry import (
    BACKLOG,
    CANCELLED,
    DONE,
    IN_PROGRESS,
)
from apps.planning.tests.factories import ProjectFactory, UserFactory


@pytest.fixture
def user(db):
    return UserFactory(first_name="Ada", last_name="Lovelace")


@pytest.fixture
def other_user(db):
    return UserFactory()


@pytest.fixture
def registry(db):
    return StatusRegistry(policy="closed")


@pytest.fixture
def statuses(registry):
    """The seeded default workflow, keyed by status name."""
    return {status.name: status for status in registry.seed_defaults()}


@pytest.fixture
def backlog(statuses):
    return statuses[BACKLOG]


@pytest.fixture
def in_progress(statuses):
    return statuses[IN_PROGRESS]


@pytest.fixture
def done(statuses):
    return statuses[DONE]


@pytest.fixture
def cancelled(statuses):
    return statuses[CANCELLED]


@pytest.fixture
def project(user, statuses):
    return ProjectFactory(key="PROJ", name="Planning", owner=user)


@pytest.fixture
def engine(registry):
    return PlanningRuleEngine(registry=registry)


@pytest.fixture
def project_service(registry):
    return ProjectService(registry=registry)


@pytest.fixture
def board_service(engine):
    return BoardService(engine=engine)
