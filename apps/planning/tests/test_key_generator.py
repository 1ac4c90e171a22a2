"""
Tests for project key generation.
"""
import threading

import pytest
from django.db import DatabaseError, connection

from apps.planning.exceptions import Conflict
from apps.planning.models import ProjectKeyCounter
from apps.planning.services import KeyGenerator
from apps.planning.tests.factories import (
    EpicFactory,
    ProjectFactory,
    StatusFactory,
    WorkItemFactory,
)


@pytest.mark.django_db
class TestKeyGenerator:
    """Test KeyGenerator."""

    def setup_method(self):
        self.generator = KeyGenerator()
        self.project = ProjectFactory(key="PROJ")

    def test_first_keys_start_at_one(self):
        """Test first keys start at one."""
        assert self.generator.next_epic_key(self.project) == "PROJ-EPIC-1"
        assert self.generator.next_work_item_key(self.project) == "PROJ-1"

    def test_keys_are_strictly_increasing(self):
        """Test keys are strictly increasing."""
        keys = [self.generator.next_work_item_key(self.project) for _ in range(5)]

        numbers = [int(key.rsplit("-", 1)[1]) for key in keys]
        assert numbers == [1, 2, 3, 4, 5]
        assert len(set(keys)) == len(keys)

    def test_scopes_have_independent_counters(self):
        """Test scopes have independent counters."""
        self.generator.next_work_item_key(self.project)
        self.generator.next_work_item_key(self.project)

        assert self.generator.next_epic_key(self.project) == "PROJ-EPIC-1"
        assert self.generator.next_work_item_key(self.project) == "PROJ-3"

    def test_projects_have_independent_counters(self):
        """Test projects have independent counters."""
        other = ProjectFactory(key="OTHER")
        self.generator.next_epic_key(self.project)

        assert self.generator.next_epic_key(other) == "OTHER-EPIC-1"
        assert self.generator.next_epic_key(self.project) == "PROJ-EPIC-2"

    def test_counter_is_persisted(self):
        """Test counter is persisted."""
        self.generator.next_epic_key(self.project)
        self.generator.next_epic_key(self.project)

        counter = ProjectKeyCounter.objects.get(
            project=self.project, scope=ProjectKeyCounter.SCOPE_EPIC
        )
        assert counter.last_value == 2

    def test_deleted_entities_do_not_rewind_counter(self):
        """Test deleted entities do not rewind counter."""
        status = StatusFactory()
        key = self.generator.next_work_item_key(self.project)
        item = WorkItemFactory(project=self.project, key=key, status=status)
        item.delete()

        assert self.generator.next_work_item_key(self.project) == "PROJ-2"

    def test_counter_starts_after_existing_keys(self):
        """Test counter starts after existing keys."""
        status = StatusFactory()
        EpicFactory(project=self.project, key="PROJ-EPIC-7", status=status)
        EpicFactory(project=self.project, key="PROJ-EPIC-3", status=status)
        WorkItemFactory(project=self.project, key="PROJ-12", status=status)
        WorkItemFactory(project=self.project, key="PROJ-legacy", status=status)

        assert self.generator.next_epic_key(self.project) == "PROJ-EPIC-8"
        assert self.generator.next_work_item_key(self.project) == "PROJ-13"

    def test_epic_keys_do_not_seed_work_item_counter(self):
        """Test epic keys do not seed work item counter."""
        status = StatusFactory()
        EpicFactory(project=self.project, key="PROJ-EPIC-9", status=status)

        assert self.generator.next_work_item_key(self.project) == "PROJ-1"

    def test_unknown_scope_is_rejected(self):
        """Test unknown scope is rejected."""
        with pytest.raises(ValueError):
            self.generator.next_key(self.project, "sprint")

    def test_format_key(self):
        """Test format key."""
        assert KeyGenerator.format_key("ABC", ProjectKeyCounter.SCOPE_EPIC, 4) == "ABC-EPIC-4"
        assert KeyGenerator.format_key("ABC", ProjectKeyCounter.SCOPE_WORK_ITEM, 4) == "ABC-4"

    def test_lost_compare_and_swap_raises_conflict(self, monkeypatch):
        """Test lost compare and swap raises conflict."""
        self.generator.next_work_item_key(self.project)

        original_lock = KeyGenerator._lock_counter

        def stale_lock(generator, project, scope):
            counter = original_lock(generator, project, scope)
            # Another writer bumps the counter after it was read.
            ProjectKeyCounter.objects.filter(pk=counter.pk).update(last_value=99)
            return counter

        monkeypatch.setattr(KeyGenerator, "_lock_counter", stale_lock)

        with pytest.raises(Conflict):
            self.generator.next_work_item_key(self.project)

    def test_storage_failure_raises_conflict(self, monkeypatch):
        """Test storage failure raises conflict."""
        def failing_lock(generator, project, scope):
            raise DatabaseError("could not obtain lock")

        monkeypatch.setattr(KeyGenerator, "_lock_counter", failing_lock)

        with pytest.raises(Conflict):
            self.generator.next_epic_key(self.project)


@pytest.mark.django_db(transaction=True)
class TestConcurrentKeyGeneration:
    """Test key generation with several callers racing on one counter."""

    callers = 8

    def test_concurrent_callers_never_share_a_key(self):
        """Test racing callers get distinct keys or a Conflict, nothing else."""
        project = ProjectFactory(key="RACE")
        generator = KeyGenerator()
        assert generator.next_work_item_key(project) == "RACE-1"

        barrier = threading.Barrier(self.callers)
        keys, conflicts, errors = [], [], []

        def call():
            try:
                barrier.wait()
                keys.append(generator.next_work_item_key(project))
            except Conflict as e:
                conflicts.append(e)
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=call) for _ in range(self.callers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(keys) + len(conflicts) == self.callers

        numbers = sorted(int(key.rsplit("-", 1)[1]) for key in keys)
        assert len(set(numbers)) == len(numbers)
        assert numbers == list(range(2, len(numbers) + 2))
        assert generator.next_work_item_key(project) == f"RACE-{len(numbers) + 2}"
