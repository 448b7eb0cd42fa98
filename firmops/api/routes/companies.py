"""Client company endpoints."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from firmops.core.auth import CallerContext, get_caller_context
from firmops.db.dependencies import get_persistence
from firmops.repositories import Persistence
from firmops.services.company_service import CompanyCreateData, CompanyService, CompanyUpdateData
from firmops.services.project_service import ProjectService

router = APIRouter(prefix="/companies", tags=["companies"])


class CompanyCreatePayload(BaseModel):
    name: str = Field(min_length=1, max_length=70)
    email: str | None = Field(default=None, min_length=3, max_length=320)
    phone_number: str | None = Field(default=None, max_length=20)
    landline_phone: str | None = Field(default=None, max_length=20)
    rfc: str | None = Field(default=None, min_length=12, max_length=13)
    tax_residence: str | None = Field(default=None, max_length=255)
    constitution_date: date | None = None


class CompanyUpdatePayload(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=70)
    email: str | None = Field(default=None, min_length=3, max_length=320)
    phone_number: str | None = Field(default=None, max_length=20)
    landline_phone: str | None = Field(default=None, max_length=20)
    rfc: str | None = Field(default=None, min_length=12, max_length=13)
    tax_residence: str | None = Field(default=None, max_length=255)
    constitution_date: date | None = None


@router.get("")
async def list_companies(
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    companies = await CompanyService(persistence).list_companies()
    return {"items": [CompanyService.serialize_company(company) for company in companies]}


@router.get("/unarchived")
async def list_unarchived_companies(
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    companies = await CompanyService(persistence).list_unarchived_companies()
    return {"items": [CompanyService.serialize_company(company) for company in companies]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_company(
    payload: CompanyCreatePayload,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    company = await CompanyService(persistence).create_company(CompanyCreateData(**payload.model_dump()))
    return CompanyService.serialize_company(company)


@router.get("/{company_id}")
async def find_company(
    company_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    company = await CompanyService(persistence).find_company(company_id)
    return CompanyService.serialize_company(company)


@router.patch("/{company_id}")
async def update_company(
    company_id: UUID,
    payload: CompanyUpdatePayload,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    company = await CompanyService(persistence).update_company(
        company_id,
        CompanyUpdateData.from_fields(payload.model_dump(exclude_unset=True)),
    )
    return CompanyService.serialize_company(company)


@router.post("/{company_id}/archive")
async def toggle_company_archive(
    company_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    company = await CompanyService(persistence).toggle_company_archive(company_id)
    return CompanyService.serialize_company(company)


@router.delete("/{company_id}")
async def delete_company(
    company_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    company = await CompanyService(persistence).delete_company(company_id)
    return CompanyService.serialize_company(company)


@router.get("/{company_id}/projects")
async def list_company_projects(
    company_id: UUID,
    context: CallerContext = Depends(get_caller_context),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    projects = await ProjectService(persistence).list_company_projects(company_id)
    return {"items": [ProjectService.serialize_project(project) for project in projects]}
