"""Session-per-call repository base."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from firmops.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class SessionRepository(Generic[ModelT]):
    """Basic find/create/update/delete for one entity kind.

    Every call opens and closes its own session, so two calls awaited
    together never share a connection. ``get``/``update``/``delete`` return
    ``None`` when the record is absent; database errors propagate.
    """

    model: type[ModelT]

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self.sessions = sessions

    async def _one(self, statement: Select[Any]) -> Any:
        async with self.sessions() as session:
            return await session.scalar(statement)

    async def _many(self, statement: Select[Any]) -> list[Any]:
        async with self.sessions() as session:
            return list((await session.scalars(statement)).all())

    async def get(self, record_id: UUID) -> ModelT | None:
        async with self.sessions() as session:
            return await session.get(self.model, record_id)

    async def add(self, row: ModelT) -> ModelT:
        async with self.sessions() as session:
            session.add(row)
            await session.commit()
            return row

    async def update(self, record_id: UUID, changes: Mapping[str, Any]) -> ModelT | None:
        async with self.sessions() as session:
            row = await session.get(self.model, record_id)
            if row is None:
                return None
            for field_name, value in changes.items():
                setattr(row, field_name, value)
            await session.commit()
            return row

    async def delete(self, record_id: UUID) -> ModelT | None:
        async with self.sessions() as session:
            row = await session.get(self.model, record_id)
            if row is None:
                return None
            await session.delete(row)
            await session.commit()
            return row


def unique_ids(values: Iterable[UUID]) -> list[UUID]:
    return list(dict.fromkeys(values))
