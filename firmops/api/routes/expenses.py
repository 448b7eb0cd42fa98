"""Expense report endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from firmops.core.auth import get_caller_email
from firmops.db.dependencies import get_persistence
from firmops.models.entities import ExpenseReportStatus
from firmops.repositories import Persistence
from firmops.services.expense_service import ExpenseLineData, ExpenseReportCreateData, ExpenseService

router = APIRouter(prefix="/expenses", tags=["expenses"])


class ExpenseLinePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=70)
    justification: str = Field(min_length=1, max_length=255)
    total_amount: Decimal = Field(ge=0, max_digits=12)
    expense_date: date = Field(alias="date")
    supplier: str | None = Field(default=None, max_length=70)
    status: str | None = Field(default=None, max_length=32)
    category: str | None = Field(default=None, max_length=70)
    url_file: str | None = Field(default=None, max_length=512)


class ExpenseReportCreatePayload(BaseModel):
    title: str = Field(min_length=1, max_length=70)
    description: str = Field(min_length=1, max_length=255)
    start_date: date
    end_date: date | None = None
    status: ExpenseReportStatus = ExpenseReportStatus.PENDING
    url_voucher: str | None = Field(default=None, max_length=512)
    expenses: list[ExpenseLinePayload] = Field(default_factory=list)


@router.get("")
async def list_expense_reports(
    caller_email: str = Depends(get_caller_email),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    summaries = await ExpenseService(persistence).list_expense_reports(caller_email)
    return {"items": [ExpenseService.serialize_summary(summary) for summary in summaries]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_expense_report(
    payload: ExpenseReportCreatePayload,
    caller_email: str = Depends(get_caller_email),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    data = ExpenseReportCreateData(
        title=payload.title,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=payload.status,
        url_voucher=payload.url_voucher,
        expenses=[
            ExpenseLineData(
                title=line.title,
                justification=line.justification,
                total_amount=line.total_amount,
                expense_date=line.expense_date,
                supplier=line.supplier,
                status=line.status,
                category=line.category,
                url_file=line.url_file,
            )
            for line in payload.expenses
        ],
    )
    summary = await ExpenseService(persistence).create_expense_report(caller_email, data)
    return ExpenseService.serialize_summary(summary)


@router.get("/{report_id}")
async def get_expense_report(
    report_id: UUID,
    caller_email: str = Depends(get_caller_email),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    summary = await ExpenseService(persistence).get_report_by_id(report_id, caller_email)
    return ExpenseService.serialize_summary(summary)


@router.delete("/{report_id}")
async def delete_expense_report(
    report_id: UUID,
    caller_email: str = Depends(get_caller_email),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, object]:
    summary = await ExpenseService(persistence).delete_expense_report(report_id, caller_email)
    return ExpenseService.serialize_summary(summary)
