"""
Task service for per-account todo items.

Every operation takes the authenticated account id from the access guard and
passes it to the store as a mandatory filter. Missing and foreign tasks both
surface as NotFoundError with the same message.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from core.database import TaskStore
from core.exceptions import NotFoundError
from core.models import Task, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TASK_NOT_FOUND_MESSAGE = "Task not found"


@dataclass
class ToggleResult:
    """Toggled task plus a phrase describing its new status."""

    task: Task
    message: str


def _parse_task_id(task_id: str | UUID) -> UUID:
    """Malformed ids are treated as unknown tasks."""
    if isinstance(task_id, UUID):
        return task_id
    try:
        return UUID(task_id)
    except (ValueError, TypeError, AttributeError):
        raise NotFoundError(TASK_NOT_FOUND_MESSAGE)


class TaskService:
    """Service for task operations."""

    def __init__(self, task_store: TaskStore):
        self._tasks = task_store

    def create(self, account_id: UUID, data: TaskCreate) -> Task:
        """
        Create a new task, initially incomplete.

        Args:
            account_id: Owning account
            data: Title and description

        Returns:
            Created task
        """
        task = self._tasks.create(account_id, data.title, data.description)
        logger.debug(f"Created task {task.id} for account {account_id}")
        return task

    def list_all(self, account_id: UUID) -> list[Task]:
        """All tasks owned by the account, newest first."""
        return self._tasks.list_for_account(account_id)

    def get(self, account_id: UUID, task_id: str | UUID) -> Task:
        """
        Raises:
            NotFoundError: Task missing or owned by another account.
        """
        task = self._tasks.get(account_id, _parse_task_id(task_id))
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        return task

    def update(self, account_id: UUID, task_id: str | UUID, data: TaskUpdate) -> Task:
        """
        Apply only the fields present in ``data``.

        Raises:
            NotFoundError: Task missing or owned by another account.
        """
        fields = data.model_dump(exclude_none=True)
        task = self._tasks.update(account_id, _parse_task_id(task_id), fields)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        return task

    def delete(self, account_id: UUID, task_id: str | UUID) -> None:
        """
        Raises:
            NotFoundError: Task missing or owned by another account.
        """
        if not self._tasks.delete(account_id, _parse_task_id(task_id)):
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        logger.debug(f"Deleted task {task_id} for account {account_id}")

    def toggle_status(self, account_id: UUID, task_id: str | UUID) -> ToggleResult:
        """
        Flip the completion status.

        Raises:
            NotFoundError: Task missing or owned by another account.
        """
        task = self._tasks.toggle_status(account_id, _parse_task_id(task_id))
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        status = "completed" if task.status else "incomplete"
        return ToggleResult(task=task, message=f"Task marked as {status}")
