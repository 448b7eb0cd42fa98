from __future__ import annotations

import asyncio
import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient

from firmops.core.errors import UnexpectedError, ValidationError
from firmops.models import Department, Project, ProjectStatus
from firmops.repositories import Persistence
from firmops.services.project_service import ProjectService, ProjectUpdateData, areas_for_role, order_done_last


def _headers(email: str) -> dict[str, str]:
    return {"X-User-Email": email}


def _project(name: str, status: ProjectStatus, end_date: date | None = None) -> Project:
    return Project(name=name, status=status, end_date=end_date)


def test_order_done_last_partitions_and_sorts_groups() -> None:
    projects = [
        _project("Zeta", ProjectStatus.DONE, date(2025, 1, 31)),
        _project("Beta", ProjectStatus.IN_PROGRESS),
        _project("Omega", ProjectStatus.DONE, date(2025, 6, 30)),
        _project("Alpha", ProjectStatus.IN_PROGRESS),
        _project("Gamma", ProjectStatus.DELAYED),
    ]

    ordered = [project.name for project in order_done_last(projects)]

    assert ordered == ["Gamma", "Alpha", "Beta", "Omega", "Zeta"]


def test_order_done_last_keeps_every_item() -> None:
    projects = [_project(f"P{index}", status) for index, status in enumerate(ProjectStatus)]

    ordered = order_done_last(projects)

    assert len(ordered) == len(projects)
    done_positions = [index for index, project in enumerate(ordered) if project.status is ProjectStatus.DONE]
    assert done_positions == [len(ordered) - 1]


def test_areas_for_role() -> None:
    assert areas_for_role("ADMIN") is None
    assert areas_for_role("legal") == (Department.LEGAL, Department.LEGAL_AND_ACCOUNTING)
    assert areas_for_role("ACCOUNTING") == (Department.ACCOUNTING, Department.LEGAL_AND_ACCOUNTING)
    assert areas_for_role("NO_ROLE") == ()
    assert areas_for_role("unknown") == ()


def test_list_projects_for_role_scopes_by_department(seed, persistence: Persistence) -> None:
    seed.employee("legal@firm.test", seed.role("LEGAL"))
    seed.employee("accounting@firm.test", seed.role("ACCOUNTING"))
    seed.employee("admin@firm.test", seed.role("ADMIN"))
    seed.employee("nobody@firm.test", seed.role("NO_ROLE"))
    company = seed.company()
    seed.project(company, name="Litigation", area=Department.LEGAL)
    seed.project(company, name="Payroll", area=Department.ACCOUNTING)
    seed.project(company, name="Merger", area=Department.LEGAL_AND_ACCOUNTING, status=ProjectStatus.DONE)
    service = ProjectService(persistence)

    def names(email: str) -> list[str]:
        return [project.name for project in asyncio.run(service.list_projects_for_role(email))]

    assert names("legal@firm.test") == ["Litigation", "Merger"]
    assert names("accounting@firm.test") == ["Payroll", "Merger"]
    assert names("admin@firm.test") == ["Litigation", "Payroll", "Merger"]
    assert names("nobody@firm.test") == []


def test_company_lifecycle(client: TestClient, seed) -> None:
    seed.employee("admin@firm.test", seed.role("ADMIN"))
    headers = _headers("admin@firm.test")

    created = client.post(
        "/api/v1/companies",
        headers=headers,
        json={"name": "Globex", "rfc": "gbx010101aaa", "constitution_date": "2001-01-01"},
    )
    company_id = created.json()["id"]
    renamed = client.patch(f"/api/v1/companies/{company_id}", headers=headers, json={"name": "Globex SA"})
    archived = client.post(f"/api/v1/companies/{company_id}/archive", headers=headers)
    unarchived = client.get("/api/v1/companies/unarchived", headers=headers)
    everything = client.get("/api/v1/companies", headers=headers)

    assert created.status_code == 201
    assert created.json()["rfc"] == "GBX010101AAA"
    assert renamed.json()["name"] == "Globex SA"
    assert renamed.json()["rfc"] == "GBX010101AAA"
    assert archived.json()["archived"] is True
    assert unarchived.json()["items"] == []
    assert [item["id"] for item in everything.json()["items"]] == [company_id]

    restored = client.post(f"/api/v1/companies/{company_id}/archive", headers=headers)
    deleted = client.delete(f"/api/v1/companies/{company_id}", headers=headers)
    missing = client.get(f"/api/v1/companies/{company_id}", headers=headers)

    assert restored.json()["archived"] is False
    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_create_project_requires_company(client: TestClient, seed) -> None:
    seed.employee("admin@firm.test", seed.role("ADMIN"))

    response = client.post(
        "/api/v1/projects",
        headers=_headers("admin@firm.test"),
        json={
            "company_id": str(uuid.uuid4()),
            "name": "Due diligence",
            "category": "Corporate",
            "area": "Legal",
            "start_date": "2026-01-01",
        },
    )

    assert response.status_code == 422
    assert response.json() == {"detail": "Company does not exist"}


def test_project_endpoints(client: TestClient, seed) -> None:
    seed.employee("admin@firm.test", seed.role("ADMIN"))
    company = seed.company("Initech")
    headers = _headers("admin@firm.test")

    created = client.post(
        "/api/v1/projects",
        headers=headers,
        json={
            "company_id": str(company.id),
            "name": "Trademark",
            "category": "IP",
            "area": "Legal",
            "start_date": "2026-01-01",
        },
    )
    project_id = created.json()["id"]
    fetched = client.get(f"/api/v1/projects/{project_id}", headers=headers)
    done = client.patch(
        f"/api/v1/projects/{project_id}/status",
        headers=headers,
        json={"status": "Done"},
    )
    updated = client.patch(f"/api/v1/projects/{project_id}", headers=headers, json={"is_chargeable": True})
    by_company = client.get(f"/api/v1/companies/{company.id}/projects", headers=headers)
    tasks = client.get(f"/api/v1/projects/{project_id}/tasks", headers=headers)

    assert created.status_code == 201
    assert created.json()["status"] == "In quotation"
    assert fetched.json()["company_name"] == "Initech"
    assert done.json()["status"] == "Done"
    assert updated.json()["is_chargeable"] is True
    assert updated.json()["status"] == "Done"
    assert [item["id"] for item in by_company.json()["items"]] == [project_id]
    assert tasks.json() == {"items": []}

    deleted = client.delete(f"/api/v1/projects/{project_id}", headers=headers)
    missing = client.get(f"/api/v1/projects/{project_id}", headers=headers)

    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_get_project_with_missing_company_is_unexpected(persistence: Persistence) -> None:
    orphan = asyncio.run(
        persistence.projects.add(
            Project(
                company_id=uuid.uuid4(),
                name="Orphan",
                category="Corporate",
                area=Department.LEGAL,
                status=ProjectStatus.IN_PROGRESS,
                start_date=date(2026, 1, 5),
            )
        )
    )

    with pytest.raises(UnexpectedError):
        asyncio.run(ProjectService(persistence).get_project(orphan.id))


def test_update_project_rejects_end_before_start(seed, persistence: Persistence) -> None:
    project = seed.project(seed.company())
    service = ProjectService(persistence)

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(service.update_project(project.id, ProjectUpdateData(end_date=date(2025, 12, 31))))
    assert exc_info.value.message == "end_date must be greater than or equal to start_date."

    with pytest.raises(ValidationError):
        asyncio.run(
            service.update_project(
                project.id,
                ProjectUpdateData(start_date=date(2026, 3, 1), end_date=date(2026, 2, 1)),
            )
        )

    moved = asyncio.run(service.update_project(project.id, ProjectUpdateData(end_date=date(2026, 1, 5))))
    assert moved.end_date == date(2026, 1, 5)


def test_patch_project_clears_end_date_and_checks_dates(client: TestClient, seed) -> None:
    seed.employee("admin@firm.test", seed.role("ADMIN"))
    project = seed.project(seed.company(), end_date=date(2026, 6, 30))
    headers = _headers("admin@firm.test")

    too_early = client.patch(f"/api/v1/projects/{project.id}", headers=headers, json={"end_date": "2025-01-01"})
    cleared = client.patch(
        f"/api/v1/projects/{project.id}",
        headers=headers,
        json={"end_date": None, "matter": None},
    )
    rejected = client.patch(f"/api/v1/projects/{project.id}", headers=headers, json={"name": None})

    assert too_early.status_code == 422
    assert cleared.status_code == 200
    assert cleared.json()["end_date"] is None
    assert cleared.json()["name"] == "Annual audit"
    assert rejected.status_code == 422


def test_patch_company_clears_optional_fields(client: TestClient, seed) -> None:
    seed.employee("admin@firm.test", seed.role("ADMIN"))
    headers = _headers("admin@firm.test")
    created = client.post(
        "/api/v1/companies",
        headers=headers,
        json={"name": "Hooli", "rfc": "hoo010101aaa", "email": "legal@hooli.test"},
    )
    company_id = created.json()["id"]

    cleared = client.patch(f"/api/v1/companies/{company_id}", headers=headers, json={"rfc": None})

    assert cleared.status_code == 200
    assert cleared.json()["rfc"] is None
    assert cleared.json()["email"] == "legal@hooli.test"
