from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from smarttask.api.deps import RequestContext, get_request_context, get_task_service
from smarttask.schemas.task import (
    SubtaskCreate,
    SubtaskRead,
    SubtaskUpdate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from smarttask.services import ParentTaskNotFoundError, TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _require_id(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise HTTPException(status_code=400, detail=f"{field} is required")
    return value.strip()


def _require_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    return title.strip()


def _checked_patch(patch, patch_type):
    # title may be omitted, but if it's sent it can't be blank
    if patch is None:
        return patch_type()
    if patch.title is not None:
        patch.title = _require_title(patch.title)
    return patch


@router.get("", response_model=List[TaskRead])
def list_tasks(
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    return service.list_tasks(ctx.owner_id)

@router.post("", response_model=TaskRead, status_code=201)
def create_task(
    data: Optional[TaskCreate] = None,
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    title = _require_title(data.title if data else None)
    return service.create_task(title, ctx.owner_id)

@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    task_id = _require_id(task_id, "Task ID")
    task = service.get_task(task_id, ctx.owner_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

@router.put("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: str,
    data: Optional[TaskUpdate] = None,
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    task_id = _require_id(task_id, "Task ID")
    task = service.update_task(task_id, ctx.owner_id, _checked_patch(data, TaskUpdate))
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

@router.delete("/{task_id}", status_code=204)
def delete_task(
    task_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    task_id = _require_id(task_id, "Task ID")
    if not service.delete_task(task_id, ctx.owner_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return None

@router.post("/{task_id}/subtasks", response_model=SubtaskRead, status_code=201)
def create_subtask(
    task_id: str,
    data: Optional[SubtaskCreate] = None,
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    task_id = _require_id(task_id, "Task ID")
    title = _require_title(data.title if data else None)
    try:
        return service.create_subtask(title, task_id, ctx.owner_id)
    except ParentTaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")

@router.put("/subtasks/{subtask_id}", response_model=SubtaskRead)
def update_subtask(
    subtask_id: str,
    data: Optional[SubtaskUpdate] = None,
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    subtask_id = _require_id(subtask_id, "Subtask ID")
    subtask = service.update_subtask(subtask_id, ctx.owner_id, _checked_patch(data, SubtaskUpdate))
    if subtask is None:
        raise HTTPException(status_code=404, detail="Subtask not found")
    return subtask

@router.delete("/subtasks/{subtask_id}", status_code=204)
def delete_subtask(
    subtask_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: TaskService = Depends(get_task_service),
):
    subtask_id = _require_id(subtask_id, "Subtask ID")
    if not service.delete_subtask(subtask_id, ctx.owner_id):
        raise HTTPException(status_code=404, detail="Subtask not found")
    return None
