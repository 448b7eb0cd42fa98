"""Expense report engine: role-scoped listing, ownership checks, exact totals."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

import structlog

from firmops.core.config import get_settings
from firmops.core.errors import (
    NotFoundError,
    UnauthorizedError,
    UnexpectedError,
    ValidationError,
    unexpected_error_guard,
)
from firmops.core.money import exceeds_scale, sum_amounts
from firmops.core.scope import Scope, resolve_scope
from firmops.models.entities import Employee, Expense, ExpenseReport, ExpenseReportStatus, utcnow
from firmops.repositories import Persistence

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class ExpenseLineData:
    title: str
    justification: str
    total_amount: Decimal
    expense_date: date
    supplier: str | None = None
    status: str | None = None
    category: str | None = None
    url_file: str | None = None


@dataclass(slots=True)
class ExpenseReportCreateData:
    title: str
    description: str
    start_date: date
    end_date: date | None = None
    status: ExpenseReportStatus = ExpenseReportStatus.PENDING
    url_voucher: str | None = None
    expenses: list[ExpenseLineData] = field(default_factory=list)


@dataclass(slots=True)
class ExpenseReportSummary:
    """An expense report with its total recomputed from the line items."""

    report: ExpenseReport
    total_amount: Decimal
    author: Employee | None = None

    @property
    def expenses(self) -> list[Expense]:
        return list(self.report.expenses)


def summarize_report(report: ExpenseReport, author: Employee | None = None) -> ExpenseReportSummary:
    return ExpenseReportSummary(
        report=report,
        total_amount=sum_amounts(expense.total_amount for expense in report.expenses),
        author=author,
    )


class ExpenseService:
    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence
        self.settings = get_settings()

    async def list_expense_reports(self, caller_email: str) -> list[ExpenseReportSummary]:
        """Reports visible to the caller, each with a freshly computed total.

        LEGAL callers see their own reports; ADMIN and ACCOUNTING see all of
        them. Any other role has no defined scope and fails.
        """

        with unexpected_error_guard(logger, "expense_report_list_failed", caller_email=caller_email):
            role, employee = await asyncio.gather(
                self.persistence.roles.get_by_employee_email(caller_email),
                self.persistence.employees.get_by_email(caller_email),
            )
            if role is None or employee is None:
                raise NotFoundError("Employee not found", caller_email=caller_email)

            scope = resolve_scope(role.title)
            if scope is Scope.OWN_ONLY:
                reports = await self.persistence.expenses.list_by_employee(employee.id)
            elif scope is Scope.ALL:
                reports = await self.persistence.expenses.list_all()
            else:
                logger.error(
                    "expense_report_scope_undefined",
                    caller_email=caller_email,
                    role_title=role.title,
                )
                raise UnexpectedError(caller_email=caller_email)

            authors = await self.persistence.employees.list_by_ids(report.employee_id for report in reports)

        authors_by_id = {author.id: author for author in authors}
        return [summarize_report(report, authors_by_id.get(report.employee_id)) for report in reports]

    async def _authorized_report(
        self,
        report_id: UUID,
        caller_email: str,
    ) -> tuple[ExpenseReport, Employee | None]:
        """Fetch the report if the caller may act on it; returns it with its author."""

        employee, role, report = await asyncio.gather(
            self.persistence.employees.get_by_email(caller_email),
            self.persistence.roles.get_by_employee_email(caller_email),
            self.persistence.expenses.get(report_id),
        )
        if employee is None:
            raise NotFoundError("Employee not found", caller_email=caller_email)
        if report is None:
            raise NotFoundError("Expense report not found", report_id=str(report_id))

        if report.employee_id == employee.id:
            return report, employee
        if resolve_scope(role.title if role else None) is not Scope.ALL:
            logger.warning(
                "expense_report_forbidden",
                report_id=str(report_id),
                employee_id=str(employee.id),
            )
            raise UnauthorizedError("Unauthorized employee", report_id=str(report_id))

        author = await self.persistence.employees.get(report.employee_id)
        return report, author

    async def get_report_by_id(self, report_id: UUID, caller_email: str) -> ExpenseReportSummary:
        with unexpected_error_guard(logger, "expense_report_fetch_failed", report_id=str(report_id)):
            report, author = await self._authorized_report(report_id, caller_email)
        return summarize_report(report, author)

    async def create_expense_report(
        self,
        caller_email: str,
        data: ExpenseReportCreateData,
    ) -> ExpenseReportSummary:
        scale = self.settings.money_scale
        for line in data.expenses:
            if exceeds_scale(line.total_amount, scale):
                raise ValidationError(
                    f"total_amount must have at most {scale} fractional digits.",
                    title=line.title,
                )
        if data.end_date is not None and data.end_date < data.start_date:
            raise ValidationError("end_date must be greater than or equal to start_date.")

        with unexpected_error_guard(logger, "expense_report_create_failed", caller_email=caller_email):
            employee = await self.persistence.employees.get_by_email(caller_email)
            if employee is None:
                raise NotFoundError("Employee not found", caller_email=caller_email)

            now = utcnow()
            report = ExpenseReport(
                employee_id=employee.id,
                title=data.title.strip(),
                description=data.description.strip(),
                start_date=data.start_date,
                end_date=data.end_date,
                status=data.status,
                url_voucher=data.url_voucher,
                created_at=now,
                expenses=[
                    Expense(
                        title=line.title.strip(),
                        justification=line.justification.strip(),
                        supplier=line.supplier,
                        total_amount=line.total_amount,
                        status=line.status,
                        category=line.category,
                        expense_date=line.expense_date,
                        url_file=line.url_file,
                        created_at=now,
                    )
                    for line in data.expenses
                ],
            )
            await self.persistence.expenses.add(report)

        logger.info(
            "expense_report_created",
            report_id=str(report.id),
            employee_id=str(employee.id),
            expense_count=len(data.expenses),
        )
        return summarize_report(report, employee)

    async def delete_expense_report(self, report_id: UUID, caller_email: str) -> ExpenseReportSummary:
        """Delete a report the caller owns, or any report for ADMIN and ACCOUNTING."""

        with unexpected_error_guard(logger, "expense_report_delete_failed", report_id=str(report_id)):
            report, author = await self._authorized_report(report_id, caller_email)
            deleted = await self.persistence.expenses.delete(report.id)
            if deleted is None:
                raise NotFoundError("Expense report not found", report_id=str(report_id))

        logger.info("expense_report_deleted", report_id=str(report_id), caller_email=caller_email)
        return summarize_report(deleted, author)

    @staticmethod
    def serialize_expense(expense: Expense) -> dict[str, object]:
        return {
            "id": str(expense.id),
            "report_id": str(expense.report_id),
            "title": expense.title,
            "justification": expense.justification,
            "supplier": expense.supplier,
            "total_amount": str(expense.total_amount),
            "status": expense.status,
            "category": expense.category,
            "date": expense.expense_date.isoformat(),
            "url_file": expense.url_file,
        }

    @classmethod
    def serialize_summary(cls, summary: ExpenseReportSummary) -> dict[str, object]:
        report = summary.report
        payload: dict[str, object] = {
            "id": str(report.id),
            "employee_id": str(report.employee_id),
            "title": report.title,
            "description": report.description,
            "start_date": report.start_date.isoformat(),
            "end_date": report.end_date.isoformat() if report.end_date else None,
            "status": report.status.value,
            "url_voucher": report.url_voucher,
            "expenses": [cls.serialize_expense(expense) for expense in summary.expenses],
            "total_amount": str(summary.total_amount),
        }
        if summary.author is not None:
            payload["employee"] = {
                "first_name": summary.author.first_name,
                "last_name": summary.author.last_name,
            }
        return payload
