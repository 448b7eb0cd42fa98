"""Shared handling for PATCH-style update inputs."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, ClassVar

from firmops.core.errors import ValidationError


class PartialUpdate:
    """Mixin for update dataclasses.

    ``None`` attributes mean "not sent". Fields the caller explicitly set to
    null are listed in ``cleared`` and become ``None`` in :meth:`changes`,
    provided they are in ``CLEARABLE``.
    """

    __slots__ = ()

    CLEARABLE: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def from_fields(cls, values: dict[str, Any]) -> Any:
        """Build from ``model_dump(exclude_unset=True)`` output."""

        return cls(
            **{name: value for name, value in values.items() if value is not None},
            cleared=frozenset(name for name, value in values.items() if value is None),
        )

    def changes(self) -> dict[str, object]:
        cleared: frozenset[str] = getattr(self, "cleared")
        not_clearable = sorted(cleared - self.CLEARABLE)
        if not_clearable:
            raise ValidationError(f"{', '.join(not_clearable)} cannot be null.", fields=not_clearable)

        changes: dict[str, object] = {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if item.name != "cleared" and getattr(self, item.name) is not None
        }
        changes.update(dict.fromkeys(cleared))
        return changes
