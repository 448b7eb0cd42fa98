"""Employee and role persistence."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, select

from firmops.models.entities import Employee, Role
from firmops.repositories.base import SessionRepository, unique_ids


def normalize_email(email: str) -> str:
    return email.strip().lower()


class EmployeeRepository(SessionRepository[Employee]):
    model = Employee

    async def get_by_email(self, email: str) -> Employee | None:
        return await self._one(select(Employee).where(func.lower(Employee.email) == normalize_email(email)))

    async def list_all(self) -> list[Employee]:
        return await self._many(select(Employee).order_by(Employee.last_name.asc(), Employee.first_name.asc()))

    async def list_by_ids(self, employee_ids: Iterable[UUID]) -> list[Employee]:
        ids = unique_ids(employee_ids)
        if not ids:
            return []
        return await self._many(select(Employee).where(Employee.id.in_(ids)))


class RoleRepository(SessionRepository[Role]):
    model = Role

    async def get_by_employee_email(self, email: str) -> Role | None:
        return await self._one(
            select(Role)
            .join(Employee, Employee.role_id == Role.id)
            .where(func.lower(Employee.email) == normalize_email(email))
        )

    async def list_all(self) -> list[Role]:
        return await self._many(select(Role).order_by(Role.title.asc()))
