"""
tasktracker/routes_projects.py

Project and membership endpoints, plus the per-project task and note lists.

Security guarantees:
- All endpoints require authentication (require_principal)
- The acting user comes from the verified token only, never from the body
- Membership / ownership decisions are made by the services' AccessControl
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response

from tasktracker.auth_context import Principal, require_principal
from tasktracker.dependencies import get_note_service, get_project_service, get_task_service
from tasktracker.note_service import NoteService
from tasktracker.project_service import ProjectService
from tasktracker.schemas_projects import (
    AddMemberRequest,
    ProjectCreateRequest,
    ProjectMemberResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from tasktracker.schemas_tasks import NoteResponse, TaskResponse
from tasktracker.task_service import TaskService

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
)


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(
    req: ProjectCreateRequest,
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """
    Create a project owned by the caller.

    The caller is recorded as the project's `owner` member in the same
    transaction.
    """
    project = service.create_project(principal.user_id, req.name, req.description)
    return ProjectResponse.model_validate(project)


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> List[ProjectResponse]:
    """Projects the caller is a member of (any role)."""
    return [ProjectResponse.model_validate(p) for p in service.list_user_projects(principal.user_id)]


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return ProjectResponse.model_validate(service.get_project(principal.user_id, project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    req: ProjectUpdateRequest,
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """Owner only."""
    project = service.update_project(principal.user_id, project_id, req.name, req.description)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", status_code=204)
def delete_project(
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> Response:
    """Owner only. Tasks, notes and memberships are removed with the project."""
    service.delete_project(principal.user_id, project_id)
    return Response(status_code=204)


# ---------------------------------------------------------
# Members
# ---------------------------------------------------------
@router.post("/{project_id}/members", response_model=ProjectMemberResponse, status_code=201)
def add_member(
    req: AddMemberRequest,
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> ProjectMemberResponse:
    """Owner only. The new member always gets role `member`."""
    member = service.add_member(principal.user_id, project_id, req.user_id)
    return ProjectMemberResponse.model_validate(member)


@router.get("/{project_id}/members", response_model=List[ProjectMemberResponse])
def list_members(
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> List[ProjectMemberResponse]:
    return [ProjectMemberResponse.model_validate(m) for m in service.list_members(principal.user_id, project_id)]


@router.delete("/{project_id}/members/{user_id}", status_code=204)
def remove_member(
    project_id: UUID = Path(...),
    user_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> Response:
    """Owner only. The owner's own membership cannot be removed."""
    service.remove_member(principal.user_id, project_id, user_id)
    return Response(status_code=204)


@router.post("/{project_id}/leave", status_code=204)
def leave_project(
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: ProjectService = Depends(get_project_service),
) -> Response:
    service.leave_project(principal.user_id, project_id)
    return Response(status_code=204)


# ---------------------------------------------------------
# Project-scoped tasks and notes
# ---------------------------------------------------------
@router.get("/{project_id}/tasks", response_model=List[TaskResponse])
def list_project_tasks(
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: TaskService = Depends(get_task_service),
) -> List[TaskResponse]:
    return [TaskResponse.model_validate(t) for t in service.list_project_tasks(principal.user_id, project_id)]


@router.get("/{project_id}/notes", response_model=List[NoteResponse])
def list_project_notes(
    project_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    return [NoteResponse.model_validate(n) for n in service.list_project_notes(principal.user_id, project_id)]
