"""Caller landing data: assigned projects and their companies."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from firmops.core.errors import NotFoundError, unexpected_error_guard
from firmops.models.entities import Company, Project
from firmops.repositories import Persistence
from firmops.services.project_service import order_done_last

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class HomeInfo:
    projects: list[Project]
    companies: list[Company]


class HomeService:
    def __init__(self, persistence: Persistence) -> None:
        self.persistence = persistence

    async def get_home(self, caller_email: str) -> HomeInfo:
        """Projects reachable through the caller's task assignments."""

        with unexpected_error_guard(logger, "home_fetch_failed", caller_email=caller_email):
            employee = await self.persistence.employees.get_by_email(caller_email)
            if employee is None:
                raise NotFoundError("Employee not found", caller_email=caller_email)

            links = await self.persistence.assignments.list_by_employee(employee.id)
            tasks = await self.persistence.tasks.list_by_ids(link.task_id for link in links)
            projects = await self.persistence.projects.list_by_ids(task.project_id for task in tasks)
            companies = await self.persistence.companies.list_by_ids(project.company_id for project in projects)

        return HomeInfo(projects=order_done_last(projects), companies=companies)
