"""Task API endpoints.

This module provides a FastAPI router with CRUD over the task collection.  It
is mounted under ``/api/tasks`` by the main ``create_app`` factory.  Domain
errors raised by the service propagate to the app's exception handlers.
"""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import APIRouter, Query

from ..service import TaskService
from .models import CreateTaskRequest, ErrorResponse, MessageResponse, TaskOut, UpdateTaskRequest

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def create_task_router(get_service: Callable[[], TaskService]) -> APIRouter:
    """Create the task API router.

    Parameters
    ----------
    get_service:
        A zero-argument callable returning the :class:`TaskService` bound to
        the running application.
    """
    router = APIRouter(prefix="/api/tasks", tags=["tasks"], responses=_ERRORS)

    @router.post("", response_model=TaskOut, status_code=201)
    def create_task(body: CreateTaskRequest) -> TaskOut:
        task = get_service().create_task(
            title=body.title,
            description=body.description,
            status=body.status,
        )
        return TaskOut.from_task(task)

    @router.get("", response_model=list[TaskOut])
    def list_tasks(
        keyword: Optional[str] = Query(None),
        status: Optional[str] = Query(None),
    ) -> list[TaskOut]:
        tasks = get_service().list_tasks(keyword=keyword, status=status)
        return [TaskOut.from_task(t) for t in tasks]

    @router.get("/{task_id}", response_model=TaskOut)
    def get_task(task_id: str) -> TaskOut:
        return TaskOut.from_task(get_service().get_task(task_id))

    @router.put("/{task_id}", response_model=TaskOut)
    def update_task(task_id: str, body: UpdateTaskRequest) -> TaskOut:
        task = get_service().update_task(task_id, body.model_dump())
        return TaskOut.from_task(task)

    @router.delete("/{task_id}", response_model=MessageResponse)
    def delete_task(task_id: str) -> MessageResponse:
        get_service().delete_task(task_id)
        return MessageResponse(message="Task deleted successfully")

    return router
