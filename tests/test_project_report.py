from __future__ import annotations

import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient

from firmops.core.errors import NotFoundError
from firmops.models import TaskStatus
from firmops.repositories import Persistence
from firmops.services.project_report_service import (
    ProjectReportService,
    compute_task_statistics,
    initialize_statistics,
    normalize_status_key,
)


def _headers(email: str) -> dict[str, str]:
    return {"X-User-Email": email}


def test_initialize_statistics_has_fixed_shape() -> None:
    assert initialize_statistics(4) == {
        "total": 4,
        "done": 0,
        "inprogress": 0,
        "underrevision": 0,
        "delayed": 0,
        "postponed": 0,
        "notstarted": 0,
        "cancelled": 0,
    }


def test_normalize_status_key_strips_spaces_and_case() -> None:
    assert normalize_status_key(" In  Progress ") == "inprogress"
    assert normalize_status_key(TaskStatus.UNDER_REVISION) == "underrevision"
    assert normalize_status_key("Not started") == "notstarted"


def test_compute_task_statistics_counts_every_known_status() -> None:
    statuses = [
        TaskStatus.DONE,
        TaskStatus.DONE,
        TaskStatus.IN_PROGRESS,
        TaskStatus.UNDER_REVISION,
        TaskStatus.DELAYED,
        TaskStatus.POSTPONED,
        TaskStatus.NOT_STARTED,
        TaskStatus.CANCELLED,
    ]

    statistics = compute_task_statistics(statuses)

    assert statistics["total"] == 8
    assert statistics["done"] == 2
    assert sum(value for key, value in statistics.items() if key != "total") == 8


def test_compute_task_statistics_skips_unknown_statuses() -> None:
    statistics = compute_task_statistics([TaskStatus.DEFAULT, "On hold", "Done"])

    assert statistics["total"] == 3
    assert statistics["done"] == 1
    assert sum(value for key, value in statistics.items() if key != "total") == 1
    assert set(statistics) == set(initialize_statistics(0))


def test_build_report_resolves_assignees_and_statistics(seed, persistence: Persistence) -> None:
    role = seed.role("LEGAL")
    employee = seed.employee("casey.morgan@firm.test", role, first_name="Casey", last_name="Morgan")
    company = seed.company("Northwind")
    project = seed.project(company, name="Tax filing")
    filed = seed.task(project, "File return", status=TaskStatus.DONE)
    seed.task(project, "Collect invoices", status=TaskStatus.IN_PROGRESS)
    seed.task(project, "Archive", status=TaskStatus.DEFAULT)
    seed.assign(filed, employee)

    report = asyncio.run(ProjectReportService(persistence).build_report(project.id))

    assert report.project.company_name == "Northwind"
    assert report.project.project.id == project.id
    assert report.statistics["total"] == 3
    assert report.statistics["done"] == 1
    assert report.statistics["inprogress"] == 1

    views = {view.task.title: view for view in report.tasks}
    assert views["File return"].employee_first_name == "Casey"
    assert views["File return"].employee_last_name == "Morgan"
    assert views["Collect invoices"].employee_first_name is None


def test_build_report_for_project_without_tasks(seed, persistence: Persistence) -> None:
    project = seed.project(seed.company())

    report = asyncio.run(ProjectReportService(persistence).build_report(project.id))

    assert report.tasks == []
    assert report.statistics == initialize_statistics(0)


def test_build_report_missing_project(persistence: Persistence) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        asyncio.run(ProjectReportService(persistence).build_report(uuid.uuid4()))

    assert exc_info.value.message == "Project not found"


def test_report_endpoint_omits_missing_assignee(client: TestClient, seed) -> None:
    role = seed.role("ADMIN")
    admin = seed.employee("admin@firm.test", role)
    project = seed.project(seed.company("Contoso"))
    assigned = seed.task(project, "Draft contract", status=TaskStatus.UNDER_REVISION)
    seed.task(project, "Sign contract")
    seed.assign(assigned, admin)

    response = client.get(f"/api/v1/projects/{project.id}/report", headers=_headers(admin.email))

    assert response.status_code == 200
    body = response.json()
    assert body["project"]["company_name"] == "Contoso"
    assert body["statistics"]["underrevision"] == 1
    assert body["statistics"]["notstarted"] == 1
    tasks = {task["title"]: task for task in body["tasks"]}
    assert tasks["Draft contract"]["employee_first_name"] == "Alex"
    assert "employee_first_name" not in tasks["Sign contract"]


def test_report_endpoint_missing_project_is_404(client: TestClient, seed) -> None:
    admin = seed.employee("admin@firm.test", seed.role("ADMIN"))

    response = client.get(f"/api/v1/projects/{uuid.uuid4()}/report", headers=_headers(admin.email))

    assert response.status_code == 404
    assert response.json() == {"detail": "Project not found"}
