"""Persistence collaborator consumed by the service layer."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from firmops.repositories.company_repository import CompanyRepository
from firmops.repositories.expense_repository import ExpenseRepository
from firmops.repositories.people_repository import EmployeeRepository, RoleRepository
from firmops.repositories.project_repository import ProjectRepository
from firmops.repositories.task_repository import EmployeeTaskRepository, TaskRepository


class Persistence:
    """One repository per entity kind, all sharing a session factory."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self.sessions = sessions
        self.companies = CompanyRepository(sessions)
        self.projects = ProjectRepository(sessions)
        self.tasks = TaskRepository(sessions)
        self.assignments = EmployeeTaskRepository(sessions)
        self.employees = EmployeeRepository(sessions)
        self.roles = RoleRepository(sessions)
        self.expenses = ExpenseRepository(sessions)


__all__ = [
    "CompanyRepository",
    "EmployeeRepository",
    "EmployeeTaskRepository",
    "ExpenseRepository",
    "Persistence",
    "ProjectRepository",
    "RoleRepository",
    "TaskRepository",
]
