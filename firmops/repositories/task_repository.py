"""Task and task-assignment persistence."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, select

from firmops.models.entities import EmployeeTask, Task
from firmops.repositories.base import SessionRepository, unique_ids


class TaskRepository(SessionRepository[Task]):
    model = Task

    async def list_all(self) -> list[Task]:
        return await self._many(select(Task).order_by(Task.start_date.asc(), Task.title.asc()))

    async def list_by_project(self, project_id: UUID) -> list[Task]:
        return await self._many(
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(Task.start_date.asc(), Task.title.asc())
        )

    async def list_by_ids(self, task_ids: Iterable[UUID]) -> list[Task]:
        ids = unique_ids(task_ids)
        if not ids:
            return []
        return await self._many(
            select(Task).where(Task.id.in_(ids)).order_by(Task.start_date.asc(), Task.title.asc())
        )

    async def add_with_assignment(self, task: Task, employee_id: UUID | None = None) -> Task:
        """Insert a task and, optionally, its assignee link in one transaction."""

        async with self.sessions() as session:
            session.add(task)
            if employee_id is not None:
                await session.flush()
                session.add(EmployeeTask(employee_id=employee_id, task_id=task.id))
            await session.commit()
            return task

    async def delete(self, record_id: UUID) -> Task | None:
        async with self.sessions() as session:
            task = await session.get(Task, record_id)
            if task is None:
                return None
            await session.execute(delete(EmployeeTask).where(EmployeeTask.task_id == record_id))
            await session.delete(task)
            await session.commit()
            return task


class EmployeeTaskRepository(SessionRepository[EmployeeTask]):
    model = EmployeeTask

    async def list_all(self) -> list[EmployeeTask]:
        return await self._many(select(EmployeeTask).order_by(EmployeeTask.created_at.asc()))

    async def list_for_tasks(self, task_ids: Iterable[UUID]) -> list[EmployeeTask]:
        ids = unique_ids(task_ids)
        if not ids:
            return []
        return await self._many(
            select(EmployeeTask)
            .where(EmployeeTask.task_id.in_(ids))
            .order_by(EmployeeTask.created_at.asc())
        )

    async def list_by_employee(self, employee_id: UUID) -> list[EmployeeTask]:
        return await self._many(
            select(EmployeeTask)
            .where(EmployeeTask.employee_id == employee_id)
            .order_by(EmployeeTask.created_at.asc())
        )

    async def assign(self, task_id: UUID, employee_id: UUID) -> EmployeeTask:
        """Make ``employee_id`` the only assignee of ``task_id``."""

        async with self.sessions() as session:
            await session.execute(delete(EmployeeTask).where(EmployeeTask.task_id == task_id))
            link = EmployeeTask(employee_id=employee_id, task_id=task_id)
            session.add(link)
            await session.commit()
            return link
