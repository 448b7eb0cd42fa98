"""Client company records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import ClassVar
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from firmops.core.errors import ConflictError, NotFoundError, unexpected_error_guard
from firmops.models.entities import Company, utcnow
from firmops.repositories import Persistence
from firmops.services.partial_update import PartialUpdate

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class CompanyCreateData:
    name: str
    email: str | None = None
    phone_number: str | None = None
    landline_phone: str | None = None
    rfc: str | None = None
    tax_residence: str | None = None
    constitution_date: date | None = None


@dataclass(slots=True)
class CompanyUpdateData(PartialUpdate):
    CLEARABLE: ClassVar[frozenset[str]] = frozenset(
        {"email", "phone_number", "landline_phone", "rfc", "tax_residence", "constitution_date"}
    )

    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    landline_phone: str | None = None
    rfc: str | None = None
    tax_residence: str | None = None
    constitution_date: date | None = None
    cleared: frozenset[str] = frozenset()


class CompanyService:
    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence

    async def list_companies(self) -> list[Company]:
        with unexpected_error_guard(logger, "company_list_failed"):
            return await self.persistence.companies.list_all()

    async def list_unarchived_companies(self) -> list[Company]:
        with unexpected_error_guard(logger, "company_list_failed", archived=False):
            return await self.persistence.companies.list_unarchived()

    async def find_company(self, company_id: UUID) -> Company:
        with unexpected_error_guard(logger, "company_fetch_failed", company_id=str(company_id)):
            company = await self.persistence.companies.get(company_id)
        if company is None:
            raise NotFoundError("Company not found", company_id=str(company_id))
        return company

    async def create_company(self, data: CompanyCreateData) -> Company:
        company = Company(
            name=data.name.strip(),
            email=data.email,
            phone_number=data.phone_number,
            landline_phone=data.landline_phone,
            rfc=data.rfc.strip().upper() if data.rfc else None,
            tax_residence=data.tax_residence,
            constitution_date=data.constitution_date,
            archived=False,
            created_at=utcnow(),
        )
        with unexpected_error_guard(logger, "company_create_failed", name=company.name):
            company = await self.persistence.companies.add(company)
        logger.info("company_created", company_id=str(company.id))
        return company

    async def update_company(self, company_id: UUID, data: CompanyUpdateData) -> Company:
        changes = data.changes()
        if "name" in changes:
            changes["name"] = str(changes["name"]).strip()
        if changes.get("rfc") is not None:
            changes["rfc"] = str(changes["rfc"]).strip().upper()
        changes["updated_at"] = utcnow()

        with unexpected_error_guard(logger, "company_update_failed", company_id=str(company_id)):
            company = await self.persistence.companies.update(company_id, changes)
        if company is None:
            raise NotFoundError("Company not found", company_id=str(company_id))
        return company

    async def toggle_company_archive(self, company_id: UUID) -> Company:
        company = await self.find_company(company_id)
        with unexpected_error_guard(logger, "company_archive_failed", company_id=str(company_id)):
            updated = await self.persistence.companies.update(
                company_id,
                {"archived": not company.archived, "updated_at": utcnow()},
            )
        if updated is None:
            raise NotFoundError("Company not found", company_id=str(company_id))
        logger.info("company_archive_toggled", company_id=str(company_id), archived=updated.archived)
        return updated

    async def delete_company(self, company_id: UUID) -> Company:
        with unexpected_error_guard(logger, "company_delete_failed", company_id=str(company_id)):
            try:
                company = await self.persistence.companies.delete(company_id)
            except IntegrityError as exc:
                raise ConflictError("Company still has projects", company_id=str(company_id)) from exc
        if company is None:
            raise NotFoundError("Company not found", company_id=str(company_id))
        logger.info("company_deleted", company_id=str(company_id))
        return company

    @staticmethod
    def serialize_company(company: Company) -> dict[str, object]:
        return {
            "id": str(company.id),
            "name": company.name,
            "email": company.email,
            "phone_number": company.phone_number,
            "landline_phone": company.landline_phone,
            "rfc": company.rfc,
            "tax_residence": company.tax_residence,
            "constitution_date": company.constitution_date.isoformat() if company.constitution_date else None,
            "archived": company.archived,
            "created_at": company.created_at.isoformat(),
            "updated_at": company.updated_at.isoformat() if company.updated_at else None,
        }
