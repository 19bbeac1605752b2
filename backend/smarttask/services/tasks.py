"""
Task and subtask persistence, scoped to a single owner.

Every lookup and mutation takes the owner id explicitly. When a row does not
exist, or exists but belongs to someone else, callers get ``None``/``False``;
the two cases are never told apart. Creating a subtask under an inaccessible
task is the one exception and raises :class:`ParentTaskNotFoundError`.

Storage faults are rolled back, logged, and re-raised as
:class:`TaskServiceError` with a generic message.
"""
from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone
from typing import List, Optional, Type, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, select

from smarttask.models import Subtask, Task
from smarttask.schemas.task import (
    SubtaskRead,
    SubtaskUpdate,
    TaskRead,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

Owned = TypeVar("Owned", Task, Subtask)


class TaskServiceError(Exception):
    """Storage-level failure. The message is safe to show, the cause is not."""


class ParentTaskNotFoundError(TaskServiceError):
    """The parent task of a new subtask is missing or owned by someone else."""


def _owner_clause(model: Type[Union[Task, Subtask]], owner_id: str):
    if model is Task:
        return col(Task.user_id) == owner_id
    if model is Subtask:
        # subtasks have no owner column; ownership comes from the parent task
        return col(Subtask.task_id).in_(select(Task.id).where(col(Task.user_id) == owner_id))
    raise TypeError(f"No ownership rule for {model.__name__}")


def belongs_to_owner(session: Session, model: Type[Owned], entity_id: str, owner_id: str) -> Optional[Owned]:
    """Return the row if it exists and belongs to ``owner_id``, else ``None``."""
    stmt = select(model).where(col(model.id) == entity_id, _owner_clause(model, owner_id))
    return session.exec(stmt).first()


def _storage_op(failure_message: str):
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self: "TaskService", *args, **kwargs):
            try:
                return fn(self, *args, **kwargs)
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.error("%s: %s", failure_message, exc, exc_info=True)
                raise TaskServiceError(failure_message) from exc
        return wrapper
    return decorator


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise ValueError("Title is required")
    return title


def _apply_patch(entity: Union[Task, Subtask], patch: Union[TaskUpdate, SubtaskUpdate]) -> None:
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    if "title" in changes:
        entity.title = _clean_title(changes["title"])
    if "completed" in changes:
        entity.completed = changes["completed"]
    entity.updated_at = _now()


class TaskService:
    """One instance per request; all work happens in ``session``'s transaction."""

    def __init__(self, session: Session):
        self.session = session

    @_storage_op("Failed to fetch tasks")
    def list_tasks(self, owner_id: str) -> List[TaskRead]:
        stmt = (
            select(Task)
            .where(_owner_clause(Task, owner_id))
            .options(selectinload(Task.subtasks))
            .order_by(col(Task.created_at).desc())
        )
        return [TaskRead.model_validate(t) for t in self.session.exec(stmt).all()]

    @_storage_op("Failed to fetch task")
    def get_task(self, task_id: str, owner_id: str) -> Optional[TaskRead]:
        task = belongs_to_owner(self.session, Task, task_id, owner_id)
        if task is None:
            return None
        return TaskRead.model_validate(task)

    @_storage_op("Failed to create task")
    def create_task(self, title: str, owner_id: str) -> TaskRead:
        task = Task(title=_clean_title(title), user_id=owner_id)
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return TaskRead.model_validate(task)

    @_storage_op("Failed to update task")
    def update_task(self, task_id: str, owner_id: str, patch: TaskUpdate) -> Optional[TaskRead]:
        task = belongs_to_owner(self.session, Task, task_id, owner_id)
        if task is None:
            return None

        _apply_patch(task, patch)
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return TaskRead.model_validate(task)

    @_storage_op("Failed to delete task")
    def delete_task(self, task_id: str, owner_id: str) -> bool:
        task = belongs_to_owner(self.session, Task, task_id, owner_id)
        if task is None:
            return False
        # subtasks go with it (relationship cascade + ON DELETE CASCADE)
        self.session.delete(task)
        self.session.commit()
        return True

    @_storage_op("Failed to create subtask")
    def create_subtask(self, title: str, task_id: str, owner_id: str) -> SubtaskRead:
        parent = belongs_to_owner(self.session, Task, task_id, owner_id)
        if parent is None:
            raise ParentTaskNotFoundError(task_id)

        subtask = Subtask(title=_clean_title(title), task_id=parent.id)
        self.session.add(subtask)
        self.session.commit()
        self.session.refresh(subtask)
        return SubtaskRead.model_validate(subtask)

    @_storage_op("Failed to update subtask")
    def update_subtask(self, subtask_id: str, owner_id: str, patch: SubtaskUpdate) -> Optional[SubtaskRead]:
        subtask = belongs_to_owner(self.session, Subtask, subtask_id, owner_id)
        if subtask is None:
            return None

        _apply_patch(subtask, patch)
        self.session.add(subtask)
        self.session.commit()
        self.session.refresh(subtask)
        return SubtaskRead.model_validate(subtask)

    @_storage_op("Failed to delete subtask")
    def delete_subtask(self, subtask_id: str, owner_id: str) -> bool:
        subtask = belongs_to_owner(self.session, Subtask, subtask_id, owner_id)
        if subtask is None:
            return False
        self.session.delete(subtask)
        self.session.commit()
        return True
