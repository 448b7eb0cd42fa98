"""Role titles and the visibility scope each one grants."""

from __future__ import annotations

import enum


class RoleTitle(str, enum.Enum):
    """Canonical role titles stored on ``roles.title``."""

    ADMIN = "ADMIN"
    LEGAL = "LEGAL"
    ACCOUNTING = "ACCOUNTING"
    NO_ROLE = "NO_ROLE"


class Scope(str, enum.Enum):
    ALL = "all"
    OWN_ONLY = "own_only"
    NONE = "none"


ROLE_SCOPES: dict[RoleTitle, Scope] = {
    RoleTitle.ADMIN: Scope.ALL,
    RoleTitle.ACCOUNTING: Scope.ALL,
    RoleTitle.LEGAL: Scope.OWN_ONLY,
    RoleTitle.NO_ROLE: Scope.NONE,
}


def normalize_role_title(title: str | None) -> RoleTitle | None:
    """Map a stored title to its canonical member, ignoring case and padding."""

    if not title:
        return None
    try:
        return RoleTitle(title.strip().upper())
    except ValueError:
        return None


def resolve_scope(title: str | None) -> Scope:
    """Resolve which resource subset a role title may see.

    Unknown and absent titles resolve to ``Scope.NONE``.
    """

    role = normalize_role_title(title)
    if role is None:
        return Scope.NONE
    return ROLE_SCOPES[role]


def has_role_title(title: str | None, allowed: set[RoleTitle]) -> bool:
    return normalize_role_title(title) in allowed
