"""Task lifecycle and employee assignment service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from firmops.core.errors import ConflictError, NotFoundError, ValidationError, unexpected_error_guard
from firmops.models.entities import EmployeeTask, Task, TaskStatus, utcnow
from firmops.repositories import Persistence
from firmops.services.partial_update import PartialUpdate

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class TaskCreateData:
    project_id: UUID
    title: str
    description: str
    start_date: date
    status: TaskStatus = TaskStatus.NOT_STARTED
    waiting_for: str | None = None
    due_date: date | None = None
    worked_hours: Decimal | None = None
    employee_id: UUID | None = None


@dataclass(slots=True)
class TaskUpdateData(PartialUpdate):
    """Changed fields only. The owning project cannot be changed."""

    CLEARABLE: ClassVar[frozenset[str]] = frozenset({"waiting_for", "due_date", "end_date", "worked_hours"})

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    waiting_for: str | None = None
    start_date: date | None = None
    due_date: date | None = None
    end_date: date | None = None
    worked_hours: Decimal | None = None
    cleared: frozenset[str] = frozenset()


class TaskService:
    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence

    async def create_task(self, data: TaskCreateData) -> Task | None:
        """Create a task under an existing project.

        Returns ``None`` when the task already exists (same title within the
        project) so callers can report it apart from a failure.
        """

        with unexpected_error_guard(logger, "task_create_failed", project_id=str(data.project_id)):
            project = await self.persistence.projects.get(data.project_id)
            if project is None:
                raise ValidationError("Project does not exist", project_id=str(data.project_id))
            if data.employee_id is not None and await self.persistence.employees.get(data.employee_id) is None:
                raise ValidationError("Employee does not exist", employee_id=str(data.employee_id))

            now = utcnow()
            task = Task(
                project_id=data.project_id,
                title=data.title.strip(),
                description=data.description.strip(),
                status=data.status,
                waiting_for=data.waiting_for,
                start_date=data.start_date,
                due_date=data.due_date,
                worked_hours=data.worked_hours,
                created_at=now,
            )
            try:
                task = await self.persistence.tasks.add_with_assignment(task, data.employee_id)
            except IntegrityError:
                logger.info("task_already_exists", project_id=str(data.project_id), title=task.title)
                return None

        logger.info("task_created", task_id=str(task.id), project_id=str(task.project_id))
        return task

    async def get_task(self, task_id: UUID) -> Task:
        with unexpected_error_guard(logger, "task_fetch_failed", task_id=str(task_id)):
            task = await self.persistence.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task not found", task_id=str(task_id))
        return task

    async def list_project_tasks(self, project_id: UUID) -> list[Task]:
        with unexpected_error_guard(logger, "project_tasks_fetch_failed", project_id=str(project_id)):
            project, tasks = await asyncio.gather(
                self.persistence.projects.get(project_id),
                self.persistence.tasks.list_by_project(project_id),
            )
        if project is None:
            raise NotFoundError("Project not found", project_id=str(project_id))
        return tasks

    async def update_task(self, task_id: UUID, data: TaskUpdateData) -> Task:
        changes = data.changes()
        for key in ("title", "description"):
            if key in changes:
                changes[key] = str(changes[key]).strip()
        changes["updated_at"] = utcnow()

        with unexpected_error_guard(logger, "task_update_failed", task_id=str(task_id)):
            try:
                task = await self.persistence.tasks.update(task_id, changes)
            except IntegrityError as exc:
                raise ConflictError("Task already exists", task_id=str(task_id)) from exc
            if task is None:
                raise NotFoundError("Task not found", task_id=str(task_id))
        return task

    async def update_task_status(self, task_id: UUID, status: TaskStatus) -> Task:
        """Any status may follow any other."""

        return await self.update_task(task_id, TaskUpdateData(status=status))

    async def delete_task(self, task_id: UUID) -> Task:
        with unexpected_error_guard(logger, "task_delete_failed", task_id=str(task_id)):
            task = await self.persistence.tasks.delete(task_id)
            if task is None:
                raise NotFoundError("Task not found", task_id=str(task_id))
        logger.info("task_deleted", task_id=str(task_id))
        return task

    async def assign_task(self, task_id: UUID, employee_id: UUID) -> EmployeeTask:
        """Make ``employee_id`` the task's only assignee."""

        with unexpected_error_guard(logger, "task_assign_failed", task_id=str(task_id)):
            task, employee = await asyncio.gather(
                self.persistence.tasks.get(task_id),
                self.persistence.employees.get(employee_id),
            )
            if task is None:
                raise NotFoundError("Task not found", task_id=str(task_id))
            if employee is None:
                raise NotFoundError("Employee not found", employee_id=str(employee_id))
            link = await self.persistence.assignments.assign(task_id, employee_id)

        logger.info("task_assigned", task_id=str(task_id), employee_id=str(employee_id))
        return link

    async def find_tasks_by_employee_id(self, employee_id: UUID) -> list[Task]:
        """Tasks currently assigned to the employee; empty when there are none."""

        with unexpected_error_guard(logger, "employee_tasks_fetch_failed", employee_id=str(employee_id)):
            links = await self.list_employee_assignments(employee_id)
            if not links:
                return []
            return await self.persistence.tasks.list_by_ids(link.task_id for link in links)

    async def list_employee_assignments(self, employee_id: UUID) -> list[EmployeeTask]:
        with unexpected_error_guard(logger, "employee_assignments_fetch_failed", employee_id=str(employee_id)):
            employee = await self.persistence.employees.get(employee_id)
            if employee is None:
                raise NotFoundError("Employee not found", employee_id=str(employee_id))
            return await self.persistence.assignments.list_by_employee(employee_id)

    @staticmethod
    def serialize_task(task: Task) -> dict[str, object]:
        return {
            "id": str(task.id),
            "project_id": str(task.project_id),
            "title": task.title,
            "description": task.description,
            "status": task.status.value,
            "waiting_for": task.waiting_for,
            "start_date": task.start_date.isoformat(),
            "due_date": task.due_date.isoformat() if task.due_date else None,
            "end_date": task.end_date.isoformat() if task.end_date else None,
            "worked_hours": str(task.worked_hours) if task.worked_hours is not None else None,
            "created_at": task.created_at.isoformat(),
        }

    @staticmethod
    def serialize_assignment(link: EmployeeTask) -> dict[str, object]:
        return {
            "id": str(link.id),
            "employee_id": str(link.employee_id),
            "task_id": str(link.task_id),
        }
