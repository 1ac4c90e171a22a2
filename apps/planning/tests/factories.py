"""
Factory classes for planning models.
"""
import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory

from apps.planning.models import (
    Board,
    BoardColumn,
    Epic,
    Project,
    Status,
    StatusTransition,
    WorkItem,
)


class UserFactory(DjangoModelFactory):
    """Factory for the auth User model."""

    class Meta:
        model = get_user_model()

    email = factory.Sequence(lambda n: f"testuser{n}@testexample{n}.com")
    username = factory.Sequence(lambda n: f"testuser{n}")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    is_active = True
    is_staff = False
    is_superuser = False

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        """Set password after user creation."""
        if not create:
            return

        self.set_password(extracted or "testpass123")
        self.save()


class ProjectFactory(DjangoModelFactory):
    """Factory for Project model."""

    class Meta:
        model = Project

    key = factory.Sequence(lambda n: f"TPRJ{n:04d}")
    name = factory.Sequence(lambda n: f"TestProject{n}")
    description = factory.Faker("text", max_nb_chars=200)
    owner = factory.SubFactory(UserFactory)
    is_active = True
    is_archived = False


class StatusFactory(DjangoModelFactory):
    """Factory for Status model."""

    class Meta:
        model = Status

    name = factory.Sequence(lambda n: f"Status {n}")
    color = "#0052CC"
    order_index = factory.Sequence(lambda n: n)
    is_default_for_new = False
    is_completed_status = False
    is_cancelled_status = False
    is_active = True


class StatusTransitionFactory(DjangoModelFactory):
    """Factory for StatusTransition model."""

    class Meta:
        model = StatusTransition

    from_status = factory.SubFactory(StatusFactory)
    to_status = factory.SubFactory(StatusFactory)
    is_allowed = True


class EpicFactory(DjangoModelFactory):
    """Factory for Epic model."""

    class Meta:
        model = Epic

    project = factory.SubFactory(ProjectFactory)
    key = factory.LazyAttributeSequence(lambda o, n: f"{o.project.key}-EPIC-{n + 1}")
    summary = factory.Faker("sentence", nb_words=5)
    description = factory.Faker("paragraph")
    status = factory.SubFactory(StatusFactory)
    priority = 3


class WorkItemFactory(DjangoModelFactory):
    """Factory for WorkItem model."""

    class Meta:
        model = WorkItem

    project = factory.SubFactory(ProjectFactory)
    key = factory.LazyAttributeSequence(lambda o, n: f"{o.project.key}-{n + 1}")
    type = WorkItem.TYPE_TASK
    summary = factory.Faker("sentence", nb_words=6)
    description = factory.Faker("paragraph")
    status = factory.SubFactory(StatusFactory)
    priority = 3


class BoardFactory(DjangoModelFactory):
    """Factory for Board model."""

    class Meta:
        model = Board

    project = factory.SubFactory(ProjectFactory)
    name = factory.Sequence(lambda n: f"Board {n}")
    description = factory.Faker("sentence")


class BoardColumnFactory(DjangoModelFactory):
    """Factory for BoardColumn model."""

    class Meta:
        model = BoardColumn

    board = factory.SubFactory(BoardFactory)
    status = factory.SubFactory(StatusFactory)
    order_index = factory.Sequence(lambda n: n)
