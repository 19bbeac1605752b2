from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class _WireModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SubtaskRead(_WireModel):
    id: str
    title: str
    completed: bool
    task_id: str
    created_at: datetime
    updated_at: datetime


class TaskRead(_WireModel):
    id: str
    title: str
    completed: bool
    user_id: str
    created_at: datetime
    updated_at: datetime
    subtasks: List[SubtaskRead] = []


class TaskCreate(BaseModel):
    title: Optional[str] = None

class TaskUpdate(BaseModel):
    title: Optional[str] = None
    completed: Optional[bool] = None


class SubtaskCreate(BaseModel):
    title: Optional[str] = None

class SubtaskUpdate(BaseModel):
    title: Optional[str] = None
    completed: Optional[bool] = None
