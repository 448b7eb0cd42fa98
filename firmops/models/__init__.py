"""ORM model package."""

from firmops.models.entities import (
    Company,
    Department,
    Employee,
    EmployeeTask,
    Expense,
    ExpenseReport,
    ExpenseReportStatus,
    Project,
    ProjectPeriodicity,
    ProjectStatus,
    Role,
    Task,
    TaskStatus,
)

__all__ = [
    "Company",
    "Department",
    "Employee",
    "EmployeeTask",
    "Expense",
    "ExpenseReport",
    "ExpenseReportStatus",
    "Project",
    "ProjectPeriodicity",
    "ProjectStatus",
    "Role",
    "Task",
    "TaskStatus",
]
