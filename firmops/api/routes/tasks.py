"""Task lifecycle and assignment endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from firmops.core.auth import STAFF_ROLES, CallerContext, require_roles
from firmops.db.dependencies import get_persistence
from firmops.models.entities import TaskStatus
from firmops.repositories import Persistence
from firmops.services.task_service import TaskCreateData, TaskService, TaskUpdateData

router = APIRouter(prefix="/tasks", tags=["tasks"])
employees_router = APIRouter(prefix="/employees", tags=["tasks"])


class TaskCreatePayload(BaseModel):
    project_id: UUID
    title: str = Field(min_length=1, max_length=70)
    description: str = Field(min_length=1, max_length=255)
    start_date: date
    status: TaskStatus = TaskStatus.NOT_STARTED
    waiting_for: str | None = Field(default=None, max_length=70)
    due_date: date | None = None
    worked_hours: Decimal | None = Field(default=None, ge=0, max_digits=8, decimal_places=2)
    employee_id: UUID | None = None


class TaskUpdatePayload(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=70)
    description: str | None = Field(default=None, min_length=1, max_length=255)
    status: TaskStatus | None = None
    waiting_for: str | None = Field(default=None, max_length=70)
    start_date: date | None = None
    due_date: date | None = None
    end_date: date | None = None
    worked_hours: Decimal | None = Field(default=None, ge=0, max_digits=8, decimal_places=2)


class TaskStatusPayload(BaseModel):
    status: TaskStatus


class TaskAssigneePayload(BaseModel):
    employee_id: UUID


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreatePayload,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    task = await TaskService(persistence).create_task(TaskCreateData(**payload.model_dump()))
    if task is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Task already exists")
    return TaskService.serialize_task(task)


@router.get("/{task_id}")
async def get_task(
    task_id: UUID,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    task = await TaskService(persistence).get_task(task_id)
    return TaskService.serialize_task(task)


@router.patch("/{task_id}")
async def update_task(
    task_id: UUID,
    payload: TaskUpdatePayload,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    task = await TaskService(persistence).update_task(
        task_id,
        TaskUpdateData.from_fields(payload.model_dump(exclude_unset=True)),
    )
    return TaskService.serialize_task(task)


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: UUID,
    payload: TaskStatusPayload,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    task = await TaskService(persistence).update_task_status(task_id, payload.status)
    return TaskService.serialize_task(task)


@router.put("/{task_id}/assignee")
async def assign_task(
    task_id: UUID,
    payload: TaskAssigneePayload,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    link = await TaskService(persistence).assign_task(task_id, payload.employee_id)
    return TaskService.serialize_assignment(link)


@router.delete("/{task_id}")
async def delete_task(
    task_id: UUID,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    task = await TaskService(persistence).delete_task(task_id)
    return TaskService.serialize_task(task)


@employees_router.get("/{employee_id}/tasks")
async def list_employee_tasks(
    employee_id: UUID,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    tasks = await TaskService(persistence).find_tasks_by_employee_id(employee_id)
    return {"items": [TaskService.serialize_task(task) for task in tasks]}


@employees_router.get("/{employee_id}/task-assignments")
async def list_employee_assignments(
    employee_id: UUID,
    context: CallerContext = Depends(require_roles(*STAFF_ROLES)),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    links = await TaskService(persistence).list_employee_assignments(employee_id)
    return {"items": [TaskService.serialize_assignment(link) for link in links]}
