from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from smarttask.models import Subtask, Task
from smarttask.schemas.task import SubtaskUpdate, TaskUpdate
from smarttask.services import ParentTaskNotFoundError, TaskServiceError, belongs_to_owner


def test_create_task_stamps_owner_and_defaults(service):
    task = service.create_task("  Buy milk  ", "owner-1")

    assert task.title == "Buy milk"
    assert task.user_id == "owner-1"
    assert task.completed is False
    assert task.subtasks == []


def test_get_task_is_scoped_to_owner(service):
    task = service.create_task("Private", "owner-1")

    assert service.get_task(task.id, "owner-1").id == task.id
    assert service.get_task(task.id, "owner-2") is None
    assert service.get_task("does-not-exist", "owner-1") is None


def test_list_tasks_newest_first_with_subtasks(service, session):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    old = Task(title="old", user_id="owner-1", created_at=base)
    new = Task(title="new", user_id="owner-1", created_at=base + timedelta(hours=1))
    other = Task(title="theirs", user_id="owner-2", created_at=base + timedelta(hours=2))
    session.add_all([old, new, other])
    session.commit()
    service.create_subtask("step", old.id, "owner-1")

    tasks = service.list_tasks("owner-1")

    assert [t.title for t in tasks] == ["new", "old"]
    assert [s.title for s in tasks[1].subtasks] == ["step"]


PAST = datetime(2020, 1, 1, tzinfo=timezone.utc)


def _backdate(session, row):
    row.created_at = PAST
    row.updated_at = PAST
    session.add(row)
    session.commit()
    session.refresh(row)
    return row.updated_at


def test_update_task_applies_partial_patch(service, session):
    task = service.create_task("Draft", "owner-1")
    original = _backdate(session, session.get(Task, task.id))

    updated = service.update_task(task.id, "owner-1", TaskUpdate(completed=True))

    assert updated.completed is True
    assert updated.title == "Draft"
    assert updated.updated_at > original


def test_update_subtask_refreshes_updated_at(service, session):
    task = service.create_task("Trip", "owner-1")
    sub = service.create_subtask("Pack", task.id, "owner-1")
    original = _backdate(session, session.get(Subtask, sub.id))

    updated = service.update_subtask(sub.id, "owner-1", SubtaskUpdate(title="Pack bags"))

    assert updated.updated_at > original
    assert updated.created_at == original


def test_update_task_of_other_owner_writes_nothing(service):
    task = service.create_task("Mine", "owner-1")

    assert service.update_task(task.id, "owner-2", TaskUpdate(title="Hijacked")) is None
    assert service.get_task(task.id, "owner-1").title == "Mine"


def test_delete_task_twice_returns_false(service):
    task = service.create_task("Temp", "owner-1")

    assert service.delete_task(task.id, "owner-1") is True
    assert service.get_task(task.id, "owner-1") is None
    assert service.delete_task(task.id, "owner-1") is False


def test_delete_task_of_other_owner_is_refused(service):
    task = service.create_task("Mine", "owner-1")

    assert service.delete_task(task.id, "owner-2") is False
    assert service.get_task(task.id, "owner-1") is not None


def test_delete_task_cascades_to_subtasks(service, session):
    task = service.create_task("Parent", "owner-1")
    service.create_subtask("a", task.id, "owner-1")
    service.create_subtask("b", task.id, "owner-1")

    service.delete_task(task.id, "owner-1")

    assert session.exec(select(Subtask)).all() == []


def test_create_subtask_requires_owned_parent(service, session):
    task = service.create_task("Mine", "owner-1")

    with pytest.raises(ParentTaskNotFoundError):
        service.create_subtask("sneaky", task.id, "owner-2")
    with pytest.raises(ParentTaskNotFoundError):
        service.create_subtask("orphan", "missing", "owner-1")
    assert issubclass(ParentTaskNotFoundError, TaskServiceError)

    assert session.exec(select(Subtask)).all() == []


def test_create_subtask_attaches_to_parent(service):
    task = service.create_task("Trip", "owner-1")

    sub = service.create_subtask(" Pack ", task.id, "owner-1")

    assert sub.task_id == task.id
    assert sub.title == "Pack"
    assert sub.completed is False
    assert [s.id for s in service.get_task(task.id, "owner-1").subtasks] == [sub.id]


def test_update_subtask_checks_parent_owner(service):
    task = service.create_task("Trip", "owner-1")
    sub = service.create_subtask("Pack", task.id, "owner-1")

    assert service.update_subtask(sub.id, "owner-2", SubtaskUpdate(completed=True)) is None
    assert service.get_task(task.id, "owner-1").subtasks[0].completed is False

    updated = service.update_subtask(sub.id, "owner-1", SubtaskUpdate(completed=True, title="Pack bags"))
    assert updated.completed is True
    assert updated.title == "Pack bags"


def test_delete_subtask_checks_parent_owner(service):
    task = service.create_task("Trip", "owner-1")
    sub = service.create_subtask("Pack", task.id, "owner-1")

    assert service.delete_subtask(sub.id, "owner-2") is False
    assert service.delete_subtask(sub.id, "owner-1") is True
    assert service.delete_subtask(sub.id, "owner-1") is False


def test_belongs_to_owner_for_both_kinds(service, session):
    task = service.create_task("Trip", "owner-1")
    sub = service.create_subtask("Pack", task.id, "owner-1")

    assert belongs_to_owner(session, Task, task.id, "owner-1").id == task.id
    assert belongs_to_owner(session, Task, task.id, "owner-2") is None
    assert belongs_to_owner(session, Subtask, sub.id, "owner-1").id == sub.id
    assert belongs_to_owner(session, Subtask, sub.id, "owner-2") is None


def test_storage_fault_becomes_service_error(service, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(service.session, "exec", boom)

    with pytest.raises(TaskServiceError, match="Failed to fetch tasks"):
        service.list_tasks("owner-1")
