"""/todo routes: CRUD and status toggle for the caller's own tasks."""

from typing import Callable

from fastapi import APIRouter, Depends

from api.base import success_response
from auth.types import Identity
from core.models import TaskCreate, TaskUpdate
from core.services.task_service import TaskService


def create_task_router(
    task_service: TaskService,
    require_identity: Callable[..., Identity],
) -> APIRouter:
    """Create task router. Every route requires an authenticated identity."""
    router = APIRouter(tags=["tasks"])

    @router.post("", status_code=201)
    def create_task(body: TaskCreate, identity: Identity = Depends(require_identity)):
        task = task_service.create(identity.account_id, body)
        return success_response("Task created successfully", task=task)

    @router.get("")
    def list_tasks(identity: Identity = Depends(require_identity)):
        tasks = task_service.list_all(identity.account_id)
        return success_response("Tasks fetched successfully", tasks=tasks, count=len(tasks))

    @router.get("/{task_id}")
    def get_task(task_id: str, identity: Identity = Depends(require_identity)):
        task = task_service.get(identity.account_id, task_id)
        return success_response("Task fetched successfully", task=task)

    @router.put("/{task_id}")
    def update_task(
        task_id: str,
        body: TaskUpdate,
        identity: Identity = Depends(require_identity),
    ):
        task = task_service.update(identity.account_id, task_id, body)
        return success_response("Task updated successfully", task=task)

    @router.delete("/{task_id}")
    def delete_task(task_id: str, identity: Identity = Depends(require_identity)):
        task_service.delete(identity.account_id, task_id)
        return success_response("Task deleted successfully")

    @router.patch("/{task_id}/toggle")
    def toggle_task(task_id: str, identity: Identity = Depends(require_identity)):
        result = task_service.toggle_status(identity.account_id, task_id)
        return success_response(result.message, task=result.task)

    return router
