from __future__ import annotations

import asyncio
import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient

from firmops.core.errors import NotFoundError, ValidationError
from firmops.models import TaskStatus
from firmops.repositories import Persistence
from firmops.services.task_service import TaskCreateData, TaskService, TaskUpdateData


def _headers(email: str) -> dict[str, str]:
    return {"X-User-Email": email}


def _create_data(project_id: uuid.UUID, title: str = "Prepare filing", **extra) -> TaskCreateData:
    return TaskCreateData(
        project_id=project_id,
        title=title,
        description="Quarterly filing",
        start_date=date(2026, 2, 2),
        **extra,
    )


def test_create_task_requires_existing_project(persistence: Persistence) -> None:
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(TaskService(persistence).create_task(_create_data(uuid.uuid4())))

    assert exc_info.value.message == "Project does not exist"
    assert asyncio.run(persistence.tasks.list_all()) == []


def test_create_task_returns_none_for_duplicate(seed, persistence: Persistence) -> None:
    project = seed.project(seed.company())
    service = TaskService(persistence)

    first = asyncio.run(service.create_task(_create_data(project.id)))
    second = asyncio.run(service.create_task(_create_data(project.id)))

    assert first is not None
    assert first.status is TaskStatus.NOT_STARTED
    assert second is None
    assert len(asyncio.run(persistence.tasks.list_by_project(project.id))) == 1


def test_create_task_with_assignee(seed, persistence: Persistence) -> None:
    employee = seed.employee("jordan@firm.test", seed.role("LEGAL"))
    project = seed.project(seed.company())

    task = asyncio.run(TaskService(persistence).create_task(_create_data(project.id, employee_id=employee.id)))

    links = asyncio.run(persistence.assignments.list_by_employee(employee.id))
    assert [link.task_id for link in links] == [task.id]


def test_find_tasks_by_employee_id(seed, persistence: Persistence) -> None:
    employee = seed.employee("jordan@firm.test", seed.role("LEGAL"))
    idle = seed.employee("sam@firm.test", seed.role("ACCOUNTING"))
    project = seed.project(seed.company())
    first = seed.task(project, "Review bylaws")
    second = seed.task(project, "Register shares")
    seed.task(project, "Unassigned")
    seed.assign(first, employee)
    seed.assign(second, employee)
    service = TaskService(persistence)

    tasks = asyncio.run(service.find_tasks_by_employee_id(employee.id))

    assert {task.id for task in tasks} == {first.id, second.id}
    assert asyncio.run(service.find_tasks_by_employee_id(idle.id)) == []


def test_find_tasks_for_unknown_employee(persistence: Persistence) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        asyncio.run(TaskService(persistence).find_tasks_by_employee_id(uuid.uuid4()))

    assert exc_info.value.message == "Employee not found"


def test_assign_task_replaces_previous_assignee(seed, persistence: Persistence) -> None:
    role = seed.role("LEGAL")
    first = seed.employee("first@firm.test", role)
    second = seed.employee("second@firm.test", role)
    task = seed.task(seed.project(seed.company()), "Negotiate lease")
    service = TaskService(persistence)

    asyncio.run(service.assign_task(task.id, first.id))
    asyncio.run(service.assign_task(task.id, second.id))

    links = asyncio.run(persistence.assignments.list_for_tasks([task.id]))
    assert [link.employee_id for link in links] == [second.id]


def test_update_task_keeps_omitted_fields(seed, persistence: Persistence) -> None:
    task = seed.task(seed.project(seed.company()), "Draft memo")

    updated = asyncio.run(
        TaskService(persistence).update_task(task.id, TaskUpdateData(status=TaskStatus.DELAYED, waiting_for="Client"))
    )

    assert updated.status is TaskStatus.DELAYED
    assert updated.waiting_for == "Client"
    assert updated.title == "Draft memo"
    assert updated.project_id == task.project_id


def test_delete_task_removes_assignment(seed, persistence: Persistence) -> None:
    employee = seed.employee("jordan@firm.test", seed.role("LEGAL"))
    task = seed.task(seed.project(seed.company()), "Close books")
    seed.assign(task, employee)
    service = TaskService(persistence)

    asyncio.run(service.delete_task(task.id))

    assert asyncio.run(persistence.assignments.list_by_employee(employee.id)) == []
    with pytest.raises(NotFoundError):
        asyncio.run(service.delete_task(task.id))


def test_create_task_endpoint(client: TestClient, seed) -> None:
    seed.employee("legal@firm.test", seed.role("LEGAL"))
    project = seed.project(seed.company())
    payload = {
        "project_id": str(project.id),
        "title": "Send engagement letter",
        "description": "Initial letter",
        "start_date": "2026-02-03",
    }

    created = client.post("/api/v1/tasks", headers=_headers("legal@firm.test"), json=payload)
    duplicate = client.post("/api/v1/tasks", headers=_headers("legal@firm.test"), json=payload)

    assert created.status_code == 201
    assert created.json()["status"] == "Not started"
    assert duplicate.status_code == 409


def test_create_task_endpoint_unknown_project(client: TestClient, seed) -> None:
    seed.employee("legal@firm.test", seed.role("LEGAL"))

    response = client.post(
        "/api/v1/tasks",
        headers=_headers("legal@firm.test"),
        json={
            "project_id": str(uuid.uuid4()),
            "title": "Orphan",
            "description": "No project",
            "start_date": "2026-02-03",
        },
    )

    assert response.status_code == 422
    assert response.json() == {"detail": "Project does not exist"}


def test_task_routes_require_staff_role(client: TestClient, seed) -> None:
    seed.employee("nobody@firm.test", seed.role("NO_ROLE"))
    task = seed.task(seed.project(seed.company()), "Restricted")

    response = client.get(f"/api/v1/tasks/{task.id}", headers=_headers("nobody@firm.test"))

    assert response.status_code == 403


def test_status_and_assignee_endpoints(client: TestClient, seed) -> None:
    employee = seed.employee("accounting@firm.test", seed.role("ACCOUNTING"))
    task = seed.task(seed.project(seed.company()), "Reconcile")
    headers = _headers("accounting@firm.test")

    status_response = client.patch(f"/api/v1/tasks/{task.id}/status", headers=headers, json={"status": "Done"})
    assign_response = client.put(
        f"/api/v1/tasks/{task.id}/assignee",
        headers=headers,
        json={"employee_id": str(employee.id)},
    )
    tasks_response = client.get(f"/api/v1/employees/{employee.id}/tasks", headers=headers)

    assert status_response.status_code == 200
    assert status_response.json()["status"] == "Done"
    assert assign_response.status_code == 200
    assert [item["id"] for item in tasks_response.json()["items"]] == [str(task.id)]


def test_update_task_clears_explicit_nulls(seed, persistence: Persistence) -> None:
    task = seed.task(seed.project(seed.company()), "Draft memo")
    service = TaskService(persistence)
    asyncio.run(service.update_task(task.id, TaskUpdateData(due_date=date(2026, 2, 1), waiting_for="Client")))

    updated = asyncio.run(
        service.update_task(task.id, TaskUpdateData.from_fields({"due_date": None, "status": TaskStatus.DONE}))
    )

    assert updated.due_date is None
    assert updated.waiting_for == "Client"
    assert updated.status is TaskStatus.DONE


def test_update_task_rejects_null_for_required_field(seed, persistence: Persistence) -> None:
    task = seed.task(seed.project(seed.company()), "Draft memo")

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(TaskService(persistence).update_task(task.id, TaskUpdateData.from_fields({"title": None})))

    assert exc_info.value.message == "title cannot be null."


def test_patch_task_with_null_due_date_clears_it(client: TestClient, seed) -> None:
    seed.employee("legal@firm.test", seed.role("LEGAL"))
    project = seed.project(seed.company())
    headers = _headers("legal@firm.test")
    created = client.post(
        "/api/v1/tasks",
        headers=headers,
        json={
            "project_id": str(project.id),
            "title": "File annual report",
            "description": "State filing",
            "start_date": "2026-01-10",
            "due_date": "2026-02-01",
        },
    )
    task_id = created.json()["id"]

    cleared = client.patch(f"/api/v1/tasks/{task_id}", headers=headers, json={"due_date": None})
    untouched = client.patch(f"/api/v1/tasks/{task_id}", headers=headers, json={"waiting_for": "Notary"})
    rejected = client.patch(f"/api/v1/tasks/{task_id}", headers=headers, json={"title": None})

    assert created.json()["due_date"] == "2026-02-01"
    assert cleared.status_code == 200
    assert cleared.json()["due_date"] is None
    assert untouched.json()["due_date"] is None
    assert untouched.json()["waiting_for"] == "Notary"
    assert rejected.status_code == 422
    assert rejected.json() == {"detail": "title cannot be null."}
