"""Caller identity extraction and role guard utilities."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from firmops.core.config import get_settings
from firmops.core.scope import RoleTitle, Scope, has_role_title, resolve_scope
from firmops.db.dependencies import get_persistence
from firmops.repositories import Persistence


@dataclass(frozen=True)
class CallerContext:
    """Authenticated request actor resolved from headers and stored records."""

    employee_id: UUID
    email: str
    first_name: str
    last_name: str
    role_id: UUID | None
    role_title: str | None

    @property
    def scope(self) -> Scope:
        return resolve_scope(self.role_title)

    @property
    def is_admin(self) -> bool:
        return has_role_title(self.role_title, {RoleTitle.ADMIN})


def _resolve_identity(x_user_email: str | None) -> str:
    if x_user_email and x_user_email.strip():
        return x_user_email.strip().lower()

    settings = get_settings()
    if settings.auth_allow_dev_principal:
        return settings.auth_dev_email.strip().lower()

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Missing identity header. Expected X-User-Email or enable development principal fallback.",
    )


def get_caller_email(x_user_email: str | None = Header(default=None, alias="X-User-Email")) -> str:
    """Caller email asserted by the upstream authenticator."""

    return _resolve_identity(x_user_email)


async def get_caller_context(
    email: str = Depends(get_caller_email),
    persistence: Persistence = Depends(get_persistence),
) -> CallerContext:
    """Resolve the caller's employee record and role."""

    employee, role = await asyncio.gather(
        persistence.employees.get_by_email(email),
        persistence.roles.get_by_employee_email(email),
    )
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Caller is not a registered employee.",
        )

    return CallerContext(
        employee_id=employee.id,
        email=employee.email,
        first_name=employee.first_name,
        last_name=employee.last_name,
        role_id=role.id if role else None,
        role_title=role.title if role else None,
    )


def require_roles(*roles: RoleTitle):
    """Dependency factory requiring the caller's role to be one of ``roles``."""

    allowed = set(roles)

    def dependency(context: CallerContext = Depends(get_caller_context)) -> CallerContext:
        if not has_role_title(context.role_title, allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role permissions for this operation.",
            )
        return context

    return dependency


STAFF_ROLES = (RoleTitle.ADMIN, RoleTitle.LEGAL, RoleTitle.ACCOUNTING)
