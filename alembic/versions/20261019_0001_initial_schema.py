"""initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


task_status = postgresql.ENUM(
    "Not started",
    "In progress",
    "Under revision",
    "Delayed",
    "Postponed",
    "Done",
    "Cancelled",
    "Default",
    name="task_status",
    create_type=False,
)
project_status = postgresql.ENUM(
    "In quotation",
    "Not started",
    "In progress",
    "Under revision",
    "Delayed",
    "Postponed",
    "Done",
    "Cancelled",
    name="project_status",
    create_type=False,
)
project_periodicity = postgresql.ENUM(
    "One time",
    "Weekly",
    "Biweekly",
    "Monthly",
    "Bimonthly",
    "Quarterly",
    "Semiannual",
    "Annual",
    name="project_periodicity",
    create_type=False,
)
department = postgresql.ENUM("Legal", "Accounting", "Legal and accounting", name="department", create_type=False)
expense_report_status = postgresql.ENUM(
    "Pending", "Payed", "Cancelled", name="expense_report_status", create_type=False
)

ENUMS = (task_status, project_status, project_periodicity, department, expense_report_status)


def upgrade() -> None:
    for enum_type in ENUMS:
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "companies",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=70), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("landline_phone", sa.String(length=20), nullable=True),
        sa.Column("rfc", sa.String(length=13), nullable=True),
        sa.Column("tax_residence", sa.String(length=255), nullable=True),
        sa.Column("constitution_date", sa.Date(), nullable=True),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_companies_archived", "companies", ["archived"])

    op.create_table(
        "roles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "employees",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("first_name", sa.String(length=70), nullable=False),
        sa.Column("last_name", sa.String(length=70), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("role_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("roles.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_employees_role_id", "employees", ["role_id"])

    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("name", sa.String(length=70), nullable=False),
        sa.Column("matter", sa.String(length=255), nullable=True),
        sa.Column("description", sa.String(length=256), nullable=True),
        sa.Column("category", sa.String(length=70), nullable=False),
        sa.Column("status", project_status, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("periodicity", project_periodicity, nullable=False),
        sa.Column("is_chargeable", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("area", department, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_projects_company_id", "projects", ["company_id"])
    op.create_index("ix_projects_area_status", "projects", ["area", "status"])

    op.create_table(
        "tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("title", sa.String(length=70), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("status", task_status, nullable=False),
        sa.Column("waiting_for", sa.String(length=70), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("worked_hours", sa.Numeric(8, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("project_id", "title", name="uq_tasks_project_title"),
    )
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])

    op.create_table(
        "employee_tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("employee_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("task_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tasks.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("task_id", name="uq_employee_tasks_task_id"),
    )
    op.create_index("ix_employee_tasks_employee_id", "employee_tasks", ["employee_id"])

    op.create_table(
        "expense_reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("employee_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("title", sa.String(length=70), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", expense_report_status, nullable=False),
        sa.Column("url_voucher", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_expense_reports_employee_id", "expense_reports", ["employee_id"])

    op.create_table(
        "expenses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "report_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("expense_reports.id"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=70), nullable=False),
        sa.Column("justification", sa.String(length=255), nullable=False),
        sa.Column("supplier", sa.String(length=70), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=True),
        sa.Column("category", sa.String(length=70), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("url_file", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_expenses_report_id", "expenses", ["report_id"])


def downgrade() -> None:
    op.drop_index("ix_expenses_report_id", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_expense_reports_employee_id", table_name="expense_reports")
    op.drop_table("expense_reports")
    op.drop_index("ix_employee_tasks_employee_id", table_name="employee_tasks")
    op.drop_table("employee_tasks")
    op.drop_index("ix_tasks_project_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("ix_projects_area_status", table_name="projects")
    op.drop_index("ix_projects_company_id", table_name="projects")
    op.drop_table("projects")
    op.drop_index("ix_employees_role_id", table_name="employees")
    op.drop_table("employees")
    op.drop_table("roles")
    op.drop_index("ix_companies_archived", table_name="companies")
    op.drop_table("companies")

    for enum_type in reversed(ENUMS):
        enum_type.drop(op.get_bind(), checkfirst=True)
