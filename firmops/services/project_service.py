"""Project lifecycle, department-scoped listings and DONE-last ordering."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import ClassVar
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from firmops.core.errors import (
    ConflictError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
    unexpected_error_guard,
)
from firmops.core.scope import RoleTitle, normalize_role_title
from firmops.models.entities import Department, Project, ProjectPeriodicity, ProjectStatus, utcnow
from firmops.repositories import Persistence
from firmops.services.partial_update import PartialUpdate
from firmops.services.project_report_service import ProjectView

logger = structlog.get_logger(__name__)

# None means every area.
ROLE_AREAS: dict[RoleTitle, tuple[Department, ...] | None] = {
    RoleTitle.ADMIN: None,
    RoleTitle.LEGAL: (Department.LEGAL, Department.LEGAL_AND_ACCOUNTING),
    RoleTitle.ACCOUNTING: (Department.ACCOUNTING, Department.LEGAL_AND_ACCOUNTING),
    RoleTitle.NO_ROLE: (),
}


@dataclass(slots=True)
class ProjectCreateData:
    company_id: UUID
    name: str
    category: str
    area: Department
    start_date: date
    end_date: date | None = None
    matter: str | None = None
    description: str | None = None
    status: ProjectStatus = ProjectStatus.IN_QUOTATION
    periodicity: ProjectPeriodicity = ProjectPeriodicity.ONE_TIME
    is_chargeable: bool = False


@dataclass(slots=True)
class ProjectUpdateData(PartialUpdate):
    CLEARABLE: ClassVar[frozenset[str]] = frozenset({"end_date", "matter", "description"})

    company_id: UUID | None = None
    name: str | None = None
    category: str | None = None
    area: Department | None = None
    start_date: date | None = None
    end_date: date | None = None
    matter: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    periodicity: ProjectPeriodicity | None = None
    is_chargeable: bool | None = None
    is_archived: bool | None = None
    cleared: frozenset[str] = frozenset()


def order_done_last(projects: Iterable[Project]) -> list[Project]:
    """Non-DONE projects first by status then name; DONE projects by end date, newest first."""

    active: list[Project] = []
    done: list[Project] = []
    for project in projects:
        (done if project.status is ProjectStatus.DONE else active).append(project)

    active.sort(key=lambda project: (project.status.value, project.name.lower()))
    done.sort(key=lambda project: project.name.lower())
    done.sort(key=lambda project: project.end_date or date.min, reverse=True)
    return active + done


def areas_for_role(title: str | None) -> tuple[Department, ...] | None:
    role = normalize_role_title(title)
    if role is None:
        return ()
    return ROLE_AREAS[role]


class ProjectService:
    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence

    async def _require_company(self, company_id: UUID) -> None:
        if await self.persistence.companies.get(company_id) is None:
            raise ValidationError("Company does not exist", company_id=str(company_id))

    async def create_project(self, data: ProjectCreateData) -> Project:
        if data.end_date is not None and data.end_date < data.start_date:
            raise ValidationError("end_date must be greater than or equal to start_date.")

        with unexpected_error_guard(logger, "project_create_failed", company_id=str(data.company_id)):
            await self._require_company(data.company_id)
            project = await self.persistence.projects.add(
                Project(
                    company_id=data.company_id,
                    name=data.name.strip(),
                    category=data.category.strip(),
                    area=data.area,
                    start_date=data.start_date,
                    end_date=data.end_date,
                    matter=data.matter,
                    description=data.description,
                    status=data.status,
                    periodicity=data.periodicity,
                    is_chargeable=data.is_chargeable,
                    is_archived=False,
                    created_at=utcnow(),
                )
            )
        logger.info("project_created", project_id=str(project.id), company_id=str(project.company_id))
        return project

    async def get_project(self, project_id: UUID) -> ProjectView:
        with unexpected_error_guard(logger, "project_fetch_failed", project_id=str(project_id)):
            project = await self.persistence.projects.get(project_id)
            if project is None:
                raise NotFoundError("Project not found", project_id=str(project_id))
            company = await self.persistence.companies.get(project.company_id)
            if company is None:
                logger.error(
                    "project_company_missing",
                    project_id=str(project_id),
                    company_id=str(project.company_id),
                )
                raise UnexpectedError(project_id=str(project_id))
        return ProjectView(project=project, company_name=company.name)

    async def list_projects_for_role(self, caller_email: str) -> list[Project]:
        """Projects in the areas the caller's role covers."""

        with unexpected_error_guard(logger, "project_list_failed", caller_email=caller_email):
            role = await self.persistence.roles.get_by_employee_email(caller_email)
            if role is None:
                raise NotFoundError("Employee not found", caller_email=caller_email)

            areas = areas_for_role(role.title)
            if areas is None:
                projects = await self.persistence.projects.list_all()
            elif not areas:
                return []
            else:
                projects = await self.persistence.projects.list_by_areas(areas)
        return order_done_last(projects)

    async def list_company_projects(self, company_id: UUID) -> list[Project]:
        with unexpected_error_guard(logger, "company_projects_fetch_failed", company_id=str(company_id)):
            company, projects = await asyncio.gather(
                self.persistence.companies.get(company_id),
                self.persistence.projects.list_by_company(company_id),
            )
        if company is None:
            raise NotFoundError("Company not found", company_id=str(company_id))
        return order_done_last(projects)

    async def update_project(self, project_id: UUID, data: ProjectUpdateData) -> Project:
        changes = data.changes()
        for key in ("name", "category"):
            if key in changes:
                changes[key] = str(changes[key]).strip()
        changes["updated_at"] = utcnow()

        with unexpected_error_guard(logger, "project_update_failed", project_id=str(project_id)):
            if "start_date" in changes or "end_date" in changes:
                current = await self.persistence.projects.get(project_id)
                if current is None:
                    raise NotFoundError("Project not found", project_id=str(project_id))
                start_date = changes.get("start_date", current.start_date)
                end_date = changes.get("end_date", current.end_date)
                if end_date is not None and end_date < start_date:
                    raise ValidationError("end_date must be greater than or equal to start_date.")
            if data.company_id is not None:
                await self._require_company(data.company_id)
            project = await self.persistence.projects.update(project_id, changes)
            if project is None:
                raise NotFoundError("Project not found", project_id=str(project_id))
        return project

    async def update_project_status(self, project_id: UUID, status: ProjectStatus) -> Project:
        return await self.update_project(project_id, ProjectUpdateData(status=status))

    async def delete_project(self, project_id: UUID) -> Project:
        with unexpected_error_guard(logger, "project_delete_failed", project_id=str(project_id)):
            try:
                project = await self.persistence.projects.delete(project_id)
            except IntegrityError as exc:
                raise ConflictError("Project still has tasks", project_id=str(project_id)) from exc
            if project is None:
                raise NotFoundError("Project not found", project_id=str(project_id))
        logger.info("project_deleted", project_id=str(project_id))
        return project

    @staticmethod
    def serialize_project(project: Project, company_name: str | None = None) -> dict[str, object]:
        payload: dict[str, object] = {
            "id": str(project.id),
            "company_id": str(project.company_id),
            "name": project.name,
            "matter": project.matter,
            "description": project.description,
            "category": project.category,
            "status": project.status.value,
            "start_date": project.start_date.isoformat(),
            "end_date": project.end_date.isoformat() if project.end_date else None,
            "periodicity": project.periodicity.value,
            "is_chargeable": project.is_chargeable,
            "is_archived": project.is_archived,
            "area": project.area.value,
            "created_at": project.created_at.isoformat(),
        }
        if company_name is not None:
            payload["company_name"] = company_name
        return payload
