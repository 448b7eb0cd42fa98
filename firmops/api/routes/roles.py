"""Role administration endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from firmops.core.auth import CallerContext, require_roles
from firmops.core.scope import RoleTitle
from firmops.db.dependencies import get_persistence
from firmops.repositories import Persistence
from firmops.services.role_service import RoleCreateData, RoleService

router = APIRouter(prefix="/roles", tags=["roles"])
employees_router = APIRouter(prefix="/employees", tags=["roles"])

require_admin = require_roles(RoleTitle.ADMIN)


class RoleCreatePayload(BaseModel):
    # Parsed as a UUID by RoleService.create_role.
    id: str = Field(min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=50)


class EmployeeRolePayload(BaseModel):
    role_id: UUID


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: RoleCreatePayload,
    context: CallerContext = Depends(require_admin),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    role = await RoleService(persistence).create_role(RoleCreateData(id=payload.id, title=payload.title))
    return RoleService.serialize_role(role)


@router.delete("/{role_id}")
async def delete_role(
    role_id: str,
    context: CallerContext = Depends(require_admin),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    role = await RoleService(persistence).delete_role(role_id)
    return RoleService.serialize_role(role)


@employees_router.patch("/{employee_id}/role")
async def update_employee_role(
    employee_id: UUID,
    payload: EmployeeRolePayload,
    context: CallerContext = Depends(require_admin),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    employee = await RoleService(persistence).update_employee_role(employee_id, payload.role_id)
    return RoleService.serialize_employee(employee)
