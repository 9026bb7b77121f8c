"""Task store: task rows in the tasks table.

Every query is filtered by the owning account id. A task owned by another
account is indistinguishable from one that does not exist.
"""

from typing import Any
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.exceptions import InternalError
from core.models import Task
from utils.timezone import now_utc

TASK_COLUMNS = "id, account_id, title, description, status, created_at, updated_at"

# Columns a partial update may touch
UPDATABLE_FIELDS = ("title", "description", "status")


class TaskStore:
    """Database operations for tasks, always scoped to one account."""

    def __init__(self, postgres: PostgresClient):
        self._db = postgres

    def create(self, account_id: UUID, title: str, description: str) -> Task:
        now = now_utc()
        rows = self._db.execute_returning(
            f"""INSERT INTO tasks (id, account_id, title, description, status, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING {TASK_COLUMNS}""",
            (uuid4(), account_id, title, description, False, now, now),
        )
        if not rows:
            raise InternalError("Task insert returned no row")
        return Task.model_validate(rows[0])

    def list_for_account(self, account_id: UUID) -> list[Task]:
        """All tasks owned by the account, newest first."""
        rows = self._db.execute(
            f"""SELECT {TASK_COLUMNS} FROM tasks
                WHERE account_id = %s
                ORDER BY created_at DESC""",
            (account_id,),
        )
        return [Task.model_validate(row) for row in rows]

    def get(self, account_id: UUID, task_id: UUID) -> Task | None:
        row = self._db.execute_single(
            f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = %s AND account_id = %s",
            (task_id, account_id),
        )
        return Task.model_validate(row) if row else None

    def update(self, account_id: UUID, task_id: UUID, fields: dict[str, Any]) -> Task | None:
        """Write the given subset of title/description/status. None if not owned."""
        assignments = []
        params: list[Any] = []
        for name in UPDATABLE_FIELDS:
            if name in fields:
                assignments.append(f"{name} = %s")
                params.append(fields[name])
        if not assignments:
            return self.get(account_id, task_id)

        assignments.append("updated_at = %s")
        params.extend([now_utc(), task_id, account_id])

        rows = self._db.execute_returning(
            f"""UPDATE tasks SET {', '.join(assignments)}
                WHERE id = %s AND account_id = %s
                RETURNING {TASK_COLUMNS}""",
            tuple(params),
        )
        return Task.model_validate(rows[0]) if rows else None

    def delete(self, account_id: UUID, task_id: UUID) -> bool:
        """False if the task does not exist or is not owned."""
        rows = self._db.execute_returning(
            "DELETE FROM tasks WHERE id = %s AND account_id = %s RETURNING id",
            (task_id, account_id),
        )
        return len(rows) > 0

    def toggle_status(self, account_id: UUID, task_id: UUID) -> Task | None:
        """Flip completion status in a single statement. None if not owned."""
        rows = self._db.execute_returning(
            f"""UPDATE tasks SET status = NOT status, updated_at = %s
                WHERE id = %s AND account_id = %s
                RETURNING {TASK_COLUMNS}""",
            (now_utc(), task_id, account_id),
        )
        return Task.model_validate(rows[0]) if rows else None
