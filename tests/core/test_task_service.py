"""Tests for TaskService - ownership-scoped task operations."""

from uuid import uuid4

import pytest

from core.exceptions import NotFoundError
from core.models import TaskCreate, TaskUpdate

ANN = uuid4()
BOB = uuid4()


@pytest.fixture
def task(task_service):
    return task_service.create(ANN, TaskCreate(title="Buy milk", description="2%"))


class TestCreateAndList:

    def test_created_task_is_incomplete(self, task):
        assert task.status is False
        assert task.account_id == ANN
        assert task.title == "Buy milk"

    def test_list_only_own_tasks(self, task_service, task):
        task_service.create(BOB, TaskCreate(title="Bob's", description="x"))

        tasks = task_service.list_all(ANN)

        assert [t.id for t in tasks] == [task.id]

    def test_list_newest_first(self, task_service, task_store, task):
        second = task_service.create(ANN, TaskCreate(title="Second", description="x"))
        # Force a strict ordering regardless of clock resolution
        task_store.tasks[second.id] = second.model_copy(
            update={"created_at": task.created_at.replace(year=task.created_at.year + 1)}
        )

        assert [t.id for t in task_service.list_all(ANN)] == [second.id, task.id]


class TestOwnership:
    """Another account's task behaves exactly like a missing one."""

    def test_get(self, task_service, task):
        with pytest.raises(NotFoundError, match="Task not found"):
            task_service.get(BOB, task.id)

    def test_update(self, task_service, task):
        with pytest.raises(NotFoundError):
            task_service.update(BOB, task.id, TaskUpdate(title="Hijacked"))
        assert task_service.get(ANN, task.id).title == "Buy milk"

    def test_delete(self, task_service, task):
        with pytest.raises(NotFoundError):
            task_service.delete(BOB, task.id)
        assert task_service.get(ANN, task.id) is not None

    def test_toggle(self, task_service, task):
        with pytest.raises(NotFoundError):
            task_service.toggle_status(BOB, task.id)
        assert task_service.get(ANN, task.id).status is False

    def test_missing_task(self, task_service):
        with pytest.raises(NotFoundError):
            task_service.get(ANN, uuid4())

    @pytest.mark.parametrize("bad_id", ["not-a-uuid", "123", ""])
    def test_malformed_id_is_not_found(self, task_service, bad_id):
        with pytest.raises(NotFoundError, match="Task not found"):
            task_service.get(ANN, bad_id)


class TestMutations:

    def test_get_accepts_string_id(self, task_service, task):
        assert task_service.get(ANN, str(task.id)).id == task.id

    def test_update_applies_only_given_fields(self, task_service, task):
        updated = task_service.update(ANN, task.id, TaskUpdate(description="whole"))
        assert updated.description == "whole"
        assert updated.title == "Buy milk"
        assert updated.status is False

    def test_update_status(self, task_service, task):
        assert task_service.update(ANN, task.id, TaskUpdate(status=True)).status is True

    def test_delete(self, task_service, task):
        task_service.delete(ANN, task.id)
        with pytest.raises(NotFoundError):
            task_service.get(ANN, task.id)

    def test_toggle_messages(self, task_service, task):
        first = task_service.toggle_status(ANN, task.id)
        assert first.task.status is True
        assert first.message == "Task marked as completed"

        second = task_service.toggle_status(ANN, task.id)
        assert second.task.status is False
        assert second.message == "Task marked as incomplete"

    def test_double_toggle_restores_status(self, task_service, task):
        task_service.toggle_status(ANN, task.id)
        task_service.toggle_status(ANN, task.id)
        assert task_service.get(ANN, task.id).status == task.status
