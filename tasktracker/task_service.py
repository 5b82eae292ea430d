"""
tasktracker/task_service.py

Task use cases. Create and list-by-project assert membership up front;
reads, updates and deletes are authorized inside the store statement itself.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from tasktracker.access import AccessControl
from tasktracker.config import IS_DEV
from tasktracker.db import DbConnection
from tasktracker.models import IMPORTANCE_MIN, Task, validate_task_fields, validate_task_status
from tasktracker.project_store import ProjectStore
from tasktracker.task_store import TaskStore


class TaskService:
    def __init__(self, conn: DbConnection):
        self.tasks = TaskStore(conn)
        self.access = AccessControl(ProjectStore(conn))

    def create_task(
        self,
        principal: UUID,
        project_id: UUID,
        title: str,
        description: Optional[str] = "",
        importance: int = IMPORTANCE_MIN,
        deadline: Optional[datetime] = None,
    ) -> Task:
        title, description, importance, deadline = validate_task_fields(title, description, importance, deadline)
        self.access.assert_member(principal, project_id)
        task = self.tasks.create(project_id, principal, title, description, importance, deadline)
        if IS_DEV:
            print(f"[TASKS] Created task_id={task.id}, project_id={project_id}, user_id={principal}")
        return task

    def list_user_tasks(self, principal: UUID) -> List[Task]:
        return self.tasks.list_by_user(principal)

    def list_project_tasks(self, principal: UUID, project_id: UUID) -> List[Task]:
        self.access.assert_member(principal, project_id)
        return self.tasks.list_by_project(project_id, principal)

    def get_task(self, principal: UUID, task_id: UUID) -> Task:
        return self.tasks.get(task_id, principal)

    def update_task(
        self,
        principal: UUID,
        task_id: UUID,
        title: str,
        description: Optional[str] = "",
        importance: int = IMPORTANCE_MIN,
        deadline: Optional[datetime] = None,
    ) -> Task:
        title, description, importance, deadline = validate_task_fields(title, description, importance, deadline)
        self.tasks.update(task_id, principal, title, description, importance, deadline)
        return self.tasks.get(task_id, principal)

    def update_task_status(self, principal: UUID, task_id: UUID, status: str) -> Task:
        self.tasks.update_status(task_id, principal, validate_task_status(status))
        return self.tasks.get(task_id, principal)

    def delete_task(self, principal: UUID, task_id: UUID) -> None:
        self.tasks.delete(task_id, principal)
        if IS_DEV:
            print(f"[TASKS] Deleted task_id={task_id}, user_id={principal}")
