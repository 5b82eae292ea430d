"""
Task and note use-case tests.

Visibility and mutability follow project membership only, never who
created the task or note.

Run: pytest tasktracker/test_task_note_services.py -v
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from tasktracker.access import AccessControl
from tasktracker.errors import DomainError, ErrorKind
from tasktracker.models import TaskStatus
from tasktracker.note_service import NoteService
from tasktracker.note_store import NoteStore
from tasktracker.project_service import ProjectService
from tasktracker.project_store import ProjectStore
from tasktracker.task_service import TaskService
from tasktracker.task_store import TaskStore


@pytest.fixture
def alpha(conn, make_user):
    """Alpha owned by u1 with member u2; u3 is a stranger."""
    u1, u2, u3 = make_user("u1"), make_user("u2"), make_user("u3")
    projects = ProjectService(conn)
    project = projects.create_project(u1.id, "Alpha")
    projects.add_member(u1.id, project.id, u2.id)
    return {"project": project, "u1": u1, "u2": u2, "u3": u3, "projects": projects}


@pytest.fixture
def tasks(conn):
    return TaskService(conn)


@pytest.fixture
def notes(conn):
    return NoteService(conn)


def assert_kind(exc_info, kind):
    assert exc_info.value.kind is kind


class TestScenarios:
    def test_member_creates_task_but_cannot_delete_project(self, conn, alpha, tasks):
        project, u2 = alpha["project"], alpha["u2"]
        access = AccessControl(ProjectStore(conn))
        assert access.has_access(u2.id, project.id) is True
        assert access.is_owner(u2.id, project.id) is False

        task = tasks.create_task(u2.id, project.id, "Write docs")
        assert task.user_id == u2.id
        assert task.status is TaskStatus.waiting
        assert task.importance == 1

        with pytest.raises(DomainError) as exc_info:
            alpha["projects"].delete_project(u2.id, project.id)
        assert_kind(exc_info, ErrorKind.NOT_OWNER)

    def test_owner_edits_task_created_by_member(self, alpha, tasks):
        project, u1, u2 = alpha["project"], alpha["u1"], alpha["u2"]
        task = tasks.create_task(u2.id, project.id, "Write docs")

        updated = tasks.update_task(u1.id, task.id, "Write better docs", "more detail", 3)
        assert updated.title == "Write better docs"
        assert updated.importance == 3
        assert updated.user_id == u2.id

        tasks.delete_task(u1.id, task.id)
        with pytest.raises(DomainError) as exc_info:
            tasks.get_task(u2.id, task.id)
        assert_kind(exc_info, ErrorKind.NOT_FOUND)

    def test_stranger_cannot_list_project_tasks(self, alpha, tasks):
        tasks.create_task(alpha["u1"].id, alpha["project"].id, "Secret")

        with pytest.raises(DomainError) as exc_info:
            tasks.list_project_tasks(alpha["u3"].id, alpha["project"].id)
        assert_kind(exc_info, ErrorKind.NO_ACCESS)

        # Same answer as for a project that does not exist
        with pytest.raises(DomainError) as exc_info:
            tasks.list_project_tasks(alpha["u3"].id, uuid.uuid4())
        assert_kind(exc_info, ErrorKind.NO_ACCESS)

    def test_removed_member_loses_task_access(self, conn, alpha, tasks):
        project, u1, u2 = alpha["project"], alpha["u1"], alpha["u2"]
        task = tasks.create_task(u2.id, project.id, "Write docs")

        alpha["projects"].remove_member(u1.id, project.id, u2.id)

        access = AccessControl(ProjectStore(conn))
        assert access.has_access(u2.id, project.id) is False
        with pytest.raises(DomainError) as exc_info:
            tasks.update_task(u2.id, task.id, "Still mine?")
        assert_kind(exc_info, ErrorKind.NOT_FOUND)
        with pytest.raises(DomainError) as exc_info:
            tasks.delete_task(u2.id, task.id)
        assert_kind(exc_info, ErrorKind.NOT_FOUND)

        # Unchanged for the remaining owner
        assert tasks.get_task(u1.id, task.id).title == "Write docs"


class TestTasks:
    def test_stranger_cannot_create_task(self, alpha, tasks):
        with pytest.raises(DomainError) as exc_info:
            tasks.create_task(alpha["u3"].id, alpha["project"].id, "Intruder")
        assert_kind(exc_info, ErrorKind.NO_ACCESS)

    def test_stranger_mutations_are_not_found(self, alpha, tasks):
        task = tasks.create_task(alpha["u1"].id, alpha["project"].id, "Plan")
        stranger = alpha["u3"].id

        for call in (
            lambda: tasks.get_task(stranger, task.id),
            lambda: tasks.update_task(stranger, task.id, "Hijack"),
            lambda: tasks.update_task_status(stranger, task.id, "completed"),
            lambda: tasks.delete_task(stranger, task.id),
        ):
            with pytest.raises(DomainError) as exc_info:
                call()
            assert_kind(exc_info, ErrorKind.NOT_FOUND)

        assert tasks.get_task(alpha["u1"].id, task.id).title == "Plan"

    def test_missing_task_is_not_found(self, alpha, tasks):
        with pytest.raises(DomainError) as exc_info:
            tasks.delete_task(alpha["u1"].id, uuid.uuid4())
        assert_kind(exc_info, ErrorKind.NOT_FOUND)

    def test_status_update(self, alpha, tasks):
        task = tasks.create_task(alpha["u1"].id, alpha["project"].id, "Plan")
        updated = tasks.update_task_status(alpha["u2"].id, task.id, "in_progress")
        assert updated.status is TaskStatus.in_progress

        with pytest.raises(DomainError) as exc_info:
            tasks.update_task_status(alpha["u2"].id, task.id, "done")
        assert_kind(exc_info, ErrorKind.INVALID_INPUT)

    def test_deadline_round_trips_as_utc(self, alpha, tasks):
        deadline = datetime.now(timezone.utc) + timedelta(days=2)
        task = tasks.create_task(alpha["u1"].id, alpha["project"].id, "Ship", deadline=deadline)

        loaded = tasks.get_task(alpha["u1"].id, task.id)
        assert loaded.deadline == deadline

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"title": ""},
            {"title": "   "},
            {"title": "x" * 201},
            {"title": "ok", "importance": 0},
            {"title": "ok", "importance": 4},
            {"title": "ok", "description": "d" * 5001},
            {"title": "ok", "deadline": datetime.now(timezone.utc) - timedelta(minutes=1)},
        ],
    )
    def test_invalid_fields(self, alpha, tasks, kwargs):
        with pytest.raises(DomainError) as exc_info:
            tasks.create_task(alpha["u1"].id, alpha["project"].id, **kwargs)
        assert_kind(exc_info, ErrorKind.INVALID_INPUT)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"title": "   "},
            {"title": "ok", "importance": 0},
            {"title": "ok", "importance": 4},
            {"title": "ok", "deadline": datetime.now(timezone.utc) - timedelta(minutes=1)},
        ],
    )
    def test_invalid_update_leaves_task_unchanged(self, alpha, tasks, kwargs):
        deadline = datetime.now(timezone.utc) + timedelta(days=1)
        task = tasks.create_task(alpha["u1"].id, alpha["project"].id, "Plan", "details", 2, deadline)

        with pytest.raises(DomainError) as exc_info:
            tasks.update_task(alpha["u2"].id, task.id, **kwargs)
        assert_kind(exc_info, ErrorKind.INVALID_INPUT)

        stored = tasks.get_task(alpha["u1"].id, task.id)
        assert (stored.title, stored.description, stored.importance, stored.deadline) == (
            "Plan", "details", 2, deadline,
        )

    def test_validation_runs_before_membership(self, alpha, tasks):
        with pytest.raises(DomainError) as exc_info:
            tasks.create_task(alpha["u3"].id, alpha["project"].id, "ok", importance=9)
        assert_kind(exc_info, ErrorKind.INVALID_INPUT)

    def test_list_user_tasks_spans_memberships(self, alpha, tasks):
        u1, u2 = alpha["u1"], alpha["u2"]
        beta = alpha["projects"].create_project(u2.id, "Beta")
        in_alpha = tasks.create_task(u1.id, alpha["project"].id, "Alpha task")
        in_beta = tasks.create_task(u2.id, beta.id, "Beta task")

        assert {t.id for t in tasks.list_user_tasks(u2.id)} == {in_alpha.id, in_beta.id}
        assert {t.id for t in tasks.list_user_tasks(u1.id)} == {in_alpha.id}
        assert tasks.list_user_tasks(alpha["u3"].id) == []

    def test_list_project_tasks(self, alpha, tasks):
        first = tasks.create_task(alpha["u1"].id, alpha["project"].id, "First")
        second = tasks.create_task(alpha["u2"].id, alpha["project"].id, "Second")

        listed = tasks.list_project_tasks(alpha["u2"].id, alpha["project"].id)
        assert {t.id for t in listed} == {first.id, second.id}


class TestNotes:
    def test_member_note_lifecycle(self, alpha, notes):
        project, u1, u2 = alpha["project"], alpha["u1"], alpha["u2"]
        note = notes.create_note(u2.id, project.id, "Minutes", "discussed roadmap")

        assert notes.get_note(u1.id, note.id).name == "Minutes"
        updated = notes.update_note(u1.id, note.id, "Minutes v2", "")
        assert updated.name == "Minutes v2"
        assert updated.user_id == u2.id

        notes.delete_note(u2.id, note.id)
        assert notes.list_project_notes(u1.id, project.id) == []

    def test_stranger_is_denied(self, alpha, notes):
        project, u1, u3 = alpha["project"], alpha["u1"], alpha["u3"]
        note = notes.create_note(u1.id, project.id, "Minutes")

        with pytest.raises(DomainError) as exc_info:
            notes.create_note(u3.id, project.id, "Intruder")
        assert_kind(exc_info, ErrorKind.NO_ACCESS)

        with pytest.raises(DomainError) as exc_info:
            notes.list_project_notes(u3.id, project.id)
        assert_kind(exc_info, ErrorKind.NO_ACCESS)

        for call in (
            lambda: notes.get_note(u3.id, note.id),
            lambda: notes.update_note(u3.id, note.id, "Hijack"),
            lambda: notes.delete_note(u3.id, note.id),
        ):
            with pytest.raises(DomainError) as exc_info:
                call()
            assert_kind(exc_info, ErrorKind.NOT_FOUND)

        assert notes.list_user_notes(u3.id) == []

    def test_removed_member_loses_note_access(self, alpha, notes):
        project, u1, u2 = alpha["project"], alpha["u1"], alpha["u2"]
        note = notes.create_note(u2.id, project.id, "Minutes")
        alpha["projects"].remove_member(u1.id, project.id, u2.id)

        with pytest.raises(DomainError) as exc_info:
            notes.update_note(u2.id, note.id, "Edited")
        assert_kind(exc_info, ErrorKind.NOT_FOUND)
        assert [n.id for n in notes.list_user_notes(u1.id)] == [note.id]

    @pytest.mark.parametrize("name,description", [("", ""), ("N", ""), ("n" * 101, ""), ("Ok name", "d" * 5001)])
    def test_invalid_fields(self, alpha, notes, name, description):
        with pytest.raises(DomainError) as exc_info:
            notes.create_note(alpha["u1"].id, alpha["project"].id, name, description)
        assert_kind(exc_info, ErrorKind.INVALID_INPUT)

    @pytest.mark.parametrize("name,description", [("N", ""), ("Ok name", "d" * 5001)])
    def test_invalid_update_leaves_note_unchanged(self, alpha, notes, name, description):
        note = notes.create_note(alpha["u1"].id, alpha["project"].id, "Minutes", "agenda")

        with pytest.raises(DomainError) as exc_info:
            notes.update_note(alpha["u2"].id, note.id, name, description)
        assert_kind(exc_info, ErrorKind.INVALID_INPUT)

        stored = notes.get_note(alpha["u1"].id, note.id)
        assert (stored.name, stored.description) == ("Minutes", "agenda")


class TestStoreCreateRequiresMembership:
    """The stores re-check membership in the INSERT itself."""

    def count(self, conn, table):
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def test_task_insert_for_non_member_is_no_access(self, conn, alpha):
        with pytest.raises(DomainError) as exc_info:
            TaskStore(conn).create(alpha["project"].id, alpha["u3"].id, "Intruder", "", 1, None)
        assert_kind(exc_info, ErrorKind.NO_ACCESS)
        assert self.count(conn, "tasks") == 0

    def test_note_insert_for_non_member_is_no_access(self, conn, alpha):
        with pytest.raises(DomainError) as exc_info:
            NoteStore(conn).create(alpha["project"].id, alpha["u3"].id, "Intruder", "")
        assert_kind(exc_info, ErrorKind.NO_ACCESS)
        assert self.count(conn, "notes") == 0

    def test_member_removed_after_check_cannot_create(self, conn, alpha, tasks, notes):
        project, u1, u2 = alpha["project"], alpha["u1"], alpha["u2"]
        alpha["projects"].remove_member(u1.id, project.id, u2.id)

        # Service-level check passes as it would have just before the removal
        with patch.object(AccessControl, "assert_member", return_value=None):
            with pytest.raises(DomainError) as task_exc:
                tasks.create_task(u2.id, project.id, "Late task")
            with pytest.raises(DomainError) as note_exc:
                notes.create_note(u2.id, project.id, "Late note")

        assert_kind(task_exc, ErrorKind.NO_ACCESS)
        assert_kind(note_exc, ErrorKind.NO_ACCESS)
        assert self.count(conn, "tasks") == 0
        assert self.count(conn, "notes") == 0

    def test_member_insert_succeeds(self, conn, alpha):
        task = TaskStore(conn).create(alpha["project"].id, alpha["u2"].id, "Plan", "", 2, None)
        note = NoteStore(conn).create(alpha["project"].id, alpha["u2"].id, "Minutes", "")
        assert task.importance == 2
        assert note.name == "Minutes"
        assert self.count(conn, "tasks") == self.count(conn, "notes") == 1
