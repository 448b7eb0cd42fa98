"""Project persistence."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select

from firmops.models.entities import Department, Project
from firmops.repositories.base import SessionRepository, unique_ids


class ProjectRepository(SessionRepository[Project]):
    model = Project

    async def list_all(self) -> list[Project]:
        return await self._many(select(Project).order_by(Project.name.asc()))

    async def list_by_company(self, company_id: UUID) -> list[Project]:
        return await self._many(
            select(Project).where(Project.company_id == company_id).order_by(Project.name.asc())
        )

    async def list_by_areas(self, areas: Iterable[Department]) -> list[Project]:
        wanted = list(areas)
        if not wanted:
            return []
        return await self._many(select(Project).where(Project.area.in_(wanted)).order_by(Project.name.asc()))

    async def list_by_ids(self, project_ids: Iterable[UUID]) -> list[Project]:
        ids = unique_ids(project_ids)
        if not ids:
            return []
        return await self._many(select(Project).where(Project.id.in_(ids)).order_by(Project.name.asc()))
