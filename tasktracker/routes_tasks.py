"""
tasktracker/routes_tasks.py

Task endpoints. Any member of a task's project may read, edit and delete
it; for anyone else the task does not exist (404).
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response

from tasktracker.auth_context import Principal, require_principal
from tasktracker.dependencies import get_task_service
from tasktracker.schemas_tasks import TaskCreateRequest, TaskResponse, TaskStatusUpdateRequest, TaskUpdateRequest
from tasktracker.task_service import TaskService

router = APIRouter(
    prefix="/api/todo",
    tags=["tasks"],
)


@router.post("/create", response_model=TaskResponse, status_code=201)
def create_task(
    req: TaskCreateRequest,
    principal: Principal = Depends(require_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Create a task in req.project_id.

    Raises:
        400: empty title, importance outside 1-3, deadline not in the future
        403: caller is not a member of the project
    """
    task = service.create_task(
        principal.user_id,
        req.project_id,
        req.title,
        req.description,
        req.importance,
        req.deadline,
    )
    return TaskResponse.model_validate(task)


@router.get("/all", response_model=List[TaskResponse])
def list_tasks(
    principal: Principal = Depends(require_principal),
    service: TaskService = Depends(get_task_service),
) -> List[TaskResponse]:
    """Tasks across every project the caller belongs to."""
    return [TaskResponse.model_validate(t) for t in service.list_user_tasks(principal.user_id)]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return TaskResponse.model_validate(service.get_task(principal.user_id, task_id))


@router.put("/{task_id}/edit", response_model=TaskResponse)
def update_task(
    req: TaskUpdateRequest,
    task_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    task = service.update_task(
        principal.user_id,
        task_id,
        req.title,
        req.description,
        req.importance,
        req.deadline,
    )
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}/edit", response_model=TaskResponse)
def update_task_status(
    req: TaskStatusUpdateRequest,
    task_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return TaskResponse.model_validate(service.update_task_status(principal.user_id, task_id, req.status))


@router.delete("/{task_id}", status_code=204)
def delete_task(
    task_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: TaskService = Depends(get_task_service),
) -> Response:
    service.delete_task(principal.user_id, task_id)
    return Response(status_code=204)
