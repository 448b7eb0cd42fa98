"""Role lifecycle and employee role assignment."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from firmops.core.errors import ConflictError, NotFoundError, ValidationError, unexpected_error_guard
from firmops.core.scope import normalize_role_title
from firmops.models.entities import Employee, Role, utcnow
from firmops.repositories import Persistence

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class RoleCreateData:
    id: str
    title: str


def parse_role_id(value: str | UUID) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError as exc:
        raise ValidationError("Invalid UUID format for role ID", role_id=str(value)) from exc


class RoleService:
    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence

    async def create_role(self, data: RoleCreateData) -> Role:
        role_id = parse_role_id(data.id)
        title = normalize_role_title(data.title)
        if title is None:
            raise ValidationError("Unsupported role title", title=data.title)

        with unexpected_error_guard(logger, "role_create_failed", role_id=str(role_id)):
            if await self.persistence.roles.get(role_id) is not None:
                raise ConflictError("Role already exists", role_id=str(role_id))
            role = await self.persistence.roles.add(Role(id=role_id, title=title.value, created_at=utcnow()))

        logger.info("role_created", role_id=str(role_id), title=role.title)
        return role

    async def delete_role(self, role_id: str | UUID) -> Role:
        parsed_id = parse_role_id(role_id)

        with unexpected_error_guard(logger, "role_delete_failed", role_id=str(parsed_id)):
            try:
                role = await self.persistence.roles.delete(parsed_id)
            except IntegrityError as exc:
                raise ConflictError("Role is assigned to employees", role_id=str(parsed_id)) from exc
            if role is None:
                raise NotFoundError("Role does not exist", role_id=str(parsed_id))

        logger.info("role_deleted", role_id=str(parsed_id))
        return role

    async def update_employee_role(self, employee_id: UUID, role_id: UUID) -> Employee:
        with unexpected_error_guard(logger, "employee_role_update_failed", employee_id=str(employee_id)):
            employee, role = await asyncio.gather(
                self.persistence.employees.get(employee_id),
                self.persistence.roles.get(role_id),
            )
            if employee is None:
                raise NotFoundError("Employee not found", employee_id=str(employee_id))
            if role is None:
                raise NotFoundError("Role does not exist", role_id=str(role_id))
            updated = await self.persistence.employees.update(
                employee_id,
                {"role_id": role_id, "updated_at": utcnow()},
            )
            if updated is None:
                raise NotFoundError("Employee not found", employee_id=str(employee_id))

        logger.info("employee_role_updated", employee_id=str(employee_id), role_id=str(role_id))
        return updated

    @staticmethod
    def serialize_role(role: Role) -> dict[str, object]:
        return {
            "id": str(role.id),
            "title": role.title,
            "created_at": role.created_at.isoformat(),
        }

    @staticmethod
    def serialize_employee(employee: Employee) -> dict[str, object]:
        return {
            "id": str(employee.id),
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "email": employee.email,
            "role_id": str(employee.role_id),
        }
