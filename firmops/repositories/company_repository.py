"""Company persistence."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select

from firmops.models.entities import Company
from firmops.repositories.base import SessionRepository, unique_ids


class CompanyRepository(SessionRepository[Company]):
    model = Company

    async def list_all(self) -> list[Company]:
        return await self._many(select(Company).order_by(Company.name.asc()))

    async def list_unarchived(self) -> list[Company]:
        return await self._many(
            select(Company).where(Company.archived.is_(False)).order_by(Company.name.asc())
        )

    async def list_by_ids(self, company_ids: Iterable[UUID]) -> list[Company]:
        ids = unique_ids(company_ids)
        if not ids:
            return []
        return await self._many(select(Company).where(Company.id.in_(ids)).order_by(Company.name.asc()))
