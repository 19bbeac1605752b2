from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime, timezone
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: str = Field(default_factory=_new_id, primary_key=True)
    # owner id from identity resolution, never from the request body
    user_id: str = Field(index=True)

    title: str
    completed: bool = False

    created_at: datetime = Field(default_factory=_now, index=True)
    updated_at: datetime = Field(default_factory=_now)

    subtasks: List["Subtask"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "Subtask.created_at",
        },
    )


class Subtask(SQLModel, table=True):
    __tablename__ = "subtasks"

    id: str = Field(default_factory=_new_id, primary_key=True)
    task_id: str = Field(foreign_key="tasks.id", index=True, ondelete="CASCADE")

    title: str
    completed: bool = False

    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    task: Optional[Task] = Relationship(back_populates="subtasks")
