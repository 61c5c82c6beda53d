"""
Tests for projects and the cached project list
"""
from fastapi import status
from staffdesk.core.events import view_cache
from staffdesk.models.task import Task
from staffdesk.schemas.project import ProjectCreate, ProjectUpdate
from staffdesk.schemas.task import TaskCreate
from staffdesk.services import project_service, task_service
from staffdesk.services.project_service import PROJECTS_VIEW
from staffdesk.tests.conftest import auth_headers


def test_create_and_list_projects(client, project_manager):
    headers = auth_headers(project_manager)
    created = client.post("/api/v1/projects", json={"customer_name": "Ikoyi Towers"}, headers=headers)

    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["project_status"] == "ACTIVE"
    listed = client.get("/api/v1/projects", headers=headers)
    assert [p["customer_name"] for p in listed.json()] == ["Ikoyi Towers"]


def test_completed_projects_listed_last(db, project_manager):
    first = project_service.create_project(db, ProjectCreate(customer_name="Alpha"), project_manager.id)
    project_service.create_project(db, ProjectCreate(customer_name="Beta"), project_manager.id)
    project_service.create_project(db, ProjectCreate(customer_name="Gamma", project_status="COMPLETED"), project_manager.id)
    project_service.create_project(db, ProjectCreate(customer_name="Delta"), project_manager.id)

    names = [p["customer_name"] for p in project_service.list_projects(db)]

    assert names == ["Delta", "Beta", "Alpha", "Gamma"]
    assert first.id in [p["id"] for p in project_service.list_projects(db)]


def test_project_write_invalidates_cached_list(db, project_manager):
    project = project_service.create_project(db, ProjectCreate(customer_name="Alpha"), project_manager.id)
    project_service.list_projects(db)
    assert view_cache.get(PROJECTS_VIEW) is not None

    project_service.update_project(
        db, project.id, ProjectUpdate(project_status="ON_HOLD"), project_manager.id
    )

    assert view_cache.get(PROJECTS_VIEW) is None
    assert project_service.list_projects(db)[0]["project_status"] == "ON_HOLD"


def test_status_endpoint(client, db, network_manager):
    project = project_service.create_project(db, ProjectCreate(customer_name="Alpha"), network_manager.id)

    response = client.post(
        f"/api/v1/projects/{project.id}/status",
        json={"project_status": "COMPLETED"},
        headers=auth_headers(network_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["project_status"] == "COMPLETED"

    filtered = client.get(
        "/api/v1/projects", params={"status": "COMPLETED"}, headers=auth_headers(network_manager)
    )
    assert [p["id"] for p in filtered.json()] == [project.id]


def test_delete_project_keeps_tasks(db, project_manager):
    project = project_service.create_project(db, ProjectCreate(customer_name="Alpha"), project_manager.id)
    task = task_service.create_task(db, TaskCreate(title="Survey", project_id=project.id), project_manager)

    project_service.delete_project(db, project.id, project_manager.id)

    db.expire_all()
    assert db.get(Task, task.id).project_id is None
    assert project_service.list_projects(db) == []


def test_employee_cannot_see_projects(client, employee):
    response = client.get("/api/v1/projects", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_missing_project_is_404(client, project_manager):
    response = client.get("/api/v1/projects/42", headers=auth_headers(project_manager))
    assert response.status_code == status.HTTP_404_NOT_FOUND
