"""Project lifecycle, listing and report endpoints."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from firmops.core.auth import CallerContext, get_caller_context
from firmops.db.dependencies import get_persistence
from firmops.models.entities import Department, ProjectPeriodicity, ProjectStatus
from firmops.repositories import Persistence
from firmops.services.project_report_service import ProjectReportService
from firmops.services.project_service import ProjectCreateData, ProjectService, ProjectUpdateData
from firmops.services.task_service import TaskService

router = APIRouter(prefix="/projects", tags=["projects"])


class ProjectCreatePayload(BaseModel):
    company_id: UUID
    name: str = Field(min_length=1, max_length=70)
    category: str = Field(min_length=1, max_length=70)
    area: Department
    start_date: date
    end_date: date | None = None
    matter: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=256)
    status: ProjectStatus = ProjectStatus.IN_QUOTATION
    periodicity: ProjectPeriodicity = ProjectPeriodicity.ONE_TIME
    is_chargeable: bool = False


class ProjectUpdatePayload(BaseModel):
    company_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=70)
    category: str | None = Field(default=None, min_length=1, max_length=70)
    area: Department | None = None
    start_date: date | None = None
    end_date: date | None = None
    matter: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=256)
    status: ProjectStatus | None = None
    periodicity: ProjectPeriodicity | None = None
    is_chargeable: bool | None = None
    is_archived: bool | None = None


class ProjectStatusPayload(BaseModel):
    status: ProjectStatus


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreatePayload,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    project = await ProjectService(persistence).create_project(ProjectCreateData(**payload.model_dump()))
    return ProjectService.serialize_project(project)


@router.get("")
async def list_projects(
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    projects = await ProjectService(persistence).list_projects_for_role(context.email)
    return {"items": [ProjectService.serialize_project(project) for project in projects]}


@router.get("/{project_id}")
async def get_project(
    project_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    view = await ProjectService(persistence).get_project(project_id)
    return ProjectService.serialize_project(view.project, company_name=view.company_name)


@router.get("/{project_id}/report")
async def get_project_report(
    project_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    report = await ProjectReportService(persistence).build_report(project_id)
    return ProjectReportService.serialize_report(report)


@router.get("/{project_id}/tasks")
async def list_project_tasks(
    project_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    tasks = await TaskService(persistence).list_project_tasks(project_id)
    return {"items": [TaskService.serialize_task(task) for task in tasks]}


@router.patch("/{project_id}")
async def update_project(
    project_id: UUID,
    payload: ProjectUpdatePayload,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    project = await ProjectService(persistence).update_project(
        project_id,
        ProjectUpdateData.from_fields(payload.model_dump(exclude_unset=True)),
    )
    return ProjectService.serialize_project(project)


@router.patch("/{project_id}/status")
async def update_project_status(
    project_id: UUID,
    payload: ProjectStatusPayload,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    project = await ProjectService(persistence).update_project_status(project_id, payload.status)
    return ProjectService.serialize_project(project)


@router.delete("/{project_id}")
async def delete_project(
    project_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    project = await ProjectService(persistence).delete_project(project_id)
    return ProjectService.serialize_project(project)
