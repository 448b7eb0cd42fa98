from __future__ import annotations

import asyncio
from collections.abc import Generator, Iterable
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

import firmops.models  # noqa: F401
from firmops.db.base import Base
from firmops.db.dependencies import get_persistence
from firmops.db.session import build_session_factory
from firmops.main import create_app
from firmops.models import (
    Company,
    Department,
    Employee,
    EmployeeTask,
    Expense,
    ExpenseReport,
    Project,
    ProjectStatus,
    Role,
    Task,
    TaskStatus,
)
from firmops.repositories import Persistence


@pytest.fixture()
def engine(tmp_path: Path) -> Generator[AsyncEngine, None, None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'firmops.db'}", poolclass=NullPool)

    async def create_schema() -> None:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    asyncio.run(create_schema())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture()
def persistence(engine: AsyncEngine) -> Persistence:
    return Persistence(build_session_factory(engine))


class Seeder:
    """Writes fixture rows straight through the repositories."""

    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence

    def role(self, title: str) -> Role:
        return asyncio.run(self.persistence.roles.add(Role(title=title)))

    def employee(self, email: str, role: Role, first_name: str = "Alex", last_name: str = "Rivera") -> Employee:
        return asyncio.run(
            self.persistence.employees.add(
                Employee(first_name=first_name, last_name=last_name, email=email, role_id=role.id)
            )
        )

    def company(self, name: str = "Acme Holdings", archived: bool = False) -> Company:
        return asyncio.run(self.persistence.companies.add(Company(name=name, archived=archived)))

    def project(
        self,
        company: Company,
        name: str = "Annual audit",
        status: ProjectStatus = ProjectStatus.IN_PROGRESS,
        area: Department = Department.LEGAL,
        end_date: date | None = None,
    ) -> Project:
        return asyncio.run(
            self.persistence.projects.add(
                Project(
                    company_id=company.id,
                    name=name,
                    category="Compliance",
                    status=status,
                    area=area,
                    start_date=date(2026, 1, 5),
                    end_date=end_date,
                )
            )
        )

    def task(self, project: Project, title: str, status: TaskStatus = TaskStatus.NOT_STARTED) -> Task:
        return asyncio.run(
            self.persistence.tasks.add(
                Task(
                    project_id=project.id,
                    title=title,
                    description=f"{title} description",
                    status=status,
                    start_date=date(2026, 1, 6),
                )
            )
        )

    def assign(self, task: Task, employee: Employee) -> EmployeeTask:
        return asyncio.run(self.persistence.assignments.assign(task.id, employee.id))

    def expense_report(
        self,
        employee: Employee,
        title: str = "Client visit",
        amounts: Iterable[str] = (),
    ) -> ExpenseReport:
        report = ExpenseReport(
            employee_id=employee.id,
            title=title,
            description=f"{title} expenses",
            start_date=date(2026, 3, 1),
            expenses=[
                Expense(
                    title=f"Line {index}",
                    justification="Travel",
                    total_amount=Decimal(amount),
                    expense_date=date(2026, 3, index + 1),
                )
                for index, amount in enumerate(amounts)
            ],
        )
        return asyncio.run(self.persistence.expenses.add(report))


@pytest.fixture()
def seed(persistence: Persistence) -> Seeder:
    return Seeder(persistence)


@pytest.fixture()
def client(persistence: Persistence) -> Generator[TestClient, None, None]:
    app = create_app()
    app.dependency_overrides[get_persistence] = lambda: persistence
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()