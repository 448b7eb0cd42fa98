"""Project report builder: project view, task views with assignees, status statistics."""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from uuid import UUID

import structlog

from firmops.core.errors import NotFoundError, UnexpectedError, unexpected_error_guard
from firmops.models.entities import Company, Employee, EmployeeTask, Project, Task
from firmops.repositories import Persistence

logger = structlog.get_logger(__name__)

STATISTIC_KEYS = (
    "done",
    "inprogress",
    "underrevision",
    "delayed",
    "postponed",
    "notstarted",
    "cancelled",
)


@dataclass(slots=True)
class ProjectView:
    project: Project
    company_name: str


@dataclass(slots=True)
class TaskView:
    task: Task
    employee_first_name: str | None = None
    employee_last_name: str | None = None


@dataclass(slots=True)
class ProjectReport:
    project: ProjectView
    tasks: list[TaskView]
    statistics: dict[str, int]


def normalize_status_key(status: str | enum.Enum) -> str:
    """``" In progress "`` -> ``"inprogress"``."""

    text = status.value if isinstance(status, enum.Enum) else str(status)
    return "".join(text.split()).lower()


def initialize_statistics(total: int) -> dict[str, int]:
    statistics = {"total": total}
    statistics.update({key: 0 for key in STATISTIC_KEYS})
    return statistics


def compute_task_statistics(statuses: Sequence[str | enum.Enum]) -> dict[str, int]:
    """Count statuses into the fixed counter shape; unknown statuses are skipped."""

    statistics = initialize_statistics(len(statuses))
    for status in statuses:
        key = normalize_status_key(status)
        if key in STATISTIC_KEYS:
            statistics[key] += 1
    return statistics


def assemble_report(
    *,
    project: Project,
    company: Company,
    tasks: Sequence[Task],
    assignments: Iterable[EmployeeTask],
    employees: Iterable[Employee],
) -> ProjectReport:
    assignee_by_task: dict[UUID, UUID] = {}
    for link in assignments:
        assignee_by_task.setdefault(link.task_id, link.employee_id)
    employees_by_id = {employee.id: employee for employee in employees}

    views: list[TaskView] = []
    for task in tasks:
        view = TaskView(task=task)
        employee_id = assignee_by_task.get(task.id)
        employee = employees_by_id.get(employee_id) if employee_id is not None else None
        if employee is not None:
            view.employee_first_name = employee.first_name
            view.employee_last_name = employee.last_name
        views.append(view)

    return ProjectReport(
        project=ProjectView(project=project, company_name=company.name),
        tasks=views,
        statistics=compute_task_statistics([task.status for task in tasks]),
    )


class ProjectReportService:
    """Builds a project report from current records on every call."""

    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence

    async def build_report(self, project_id: UUID) -> ProjectReport:
        with unexpected_error_guard(logger, "project_report_failed", project_id=str(project_id)):
            project = await self.persistence.projects.get(project_id)
            if project is None:
                raise NotFoundError("Project not found", project_id=str(project_id))

            company, tasks = await asyncio.gather(
                self.persistence.companies.get(project.company_id),
                self.persistence.tasks.list_by_project(project_id),
            )
            if company is None:
                logger.error(
                    "project_company_missing",
                    project_id=str(project_id),
                    company_id=str(project.company_id),
                )
                raise UnexpectedError(project_id=str(project_id))

            assignments = await self.persistence.assignments.list_for_tasks(task.id for task in tasks)
            employees = await self.persistence.employees.list_by_ids(link.employee_id for link in assignments)

        return assemble_report(
            project=project,
            company=company,
            tasks=tasks,
            assignments=assignments,
            employees=employees,
        )

    @staticmethod
    def serialize_task_view(view: TaskView) -> dict[str, object]:
        task = view.task
        payload: dict[str, object] = {
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
        }
        if view.employee_first_name is not None:
            payload["employee_first_name"] = view.employee_first_name
            payload["employee_last_name"] = view.employee_last_name
        return payload

    @classmethod
    def serialize_report(cls, report: ProjectReport) -> dict[str, object]:
        project = report.project.project
        return {
            "project": {
                "id": str(project.id),
                "company_id": str(project.company_id),
                "company_name": report.project.company_name,
                "name": project.name,
                "category": project.category,
                "status": project.status.value,
                "start_date": project.start_date.isoformat(),
                "end_date": project.end_date.isoformat() if project.end_date else None,
                "periodicity": project.periodicity.value,
                "is_chargeable": project.is_chargeable,
                "area": project.area.value,
            },
            "tasks": [cls.serialize_task_view(view) for view in report.tasks],
            "statistics": dict(report.statistics),
        }
