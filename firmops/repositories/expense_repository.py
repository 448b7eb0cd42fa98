"""Expense report persistence.

Reports are always loaded together with their line items.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from firmops.models.entities import ExpenseReport
from firmops.repositories.base import SessionRepository


class ExpenseRepository(SessionRepository[ExpenseReport]):
    model = ExpenseReport

    async def list_all(self) -> list[ExpenseReport]:
        return await self._many(
            select(ExpenseReport).order_by(ExpenseReport.start_date.desc(), ExpenseReport.title.asc())
        )

    async def list_by_employee(self, employee_id: UUID) -> list[ExpenseReport]:
        return await self._many(
            select(ExpenseReport)
            .where(ExpenseReport.employee_id == employee_id)
            .order_by(ExpenseReport.start_date.desc(), ExpenseReport.title.asc())
        )
