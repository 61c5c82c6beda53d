"""
Tests for growth tasks and their weekly completions
"""
from datetime import timedelta
import pytest
from fastapi import HTTPException, status
from staffdesk.models.growth_task import GrowthTask, GrowthTaskCompletion
from staffdesk.models.profile import Role
from staffdesk.schemas.growth_task import GrowthTaskCreate
from staffdesk.services import growth_task_service
from staffdesk.tests.conftest import auth_headers
from staffdesk.utils.datetime_utils import now_utc


@pytest.fixture
def referral_task(db, super_admin):
    return growth_task_service.create_task(
        db,
        GrowthTaskCreate(
            title="Refer a customer",
            description="Bring in one new subscriber",
            target_roles=[Role.NETWORK_MANAGER, Role.EMPLOYEE],
        ),
        super_admin,
    )


def test_super_admin_creates_task(client, super_admin):
    response = client.post(
        "/api/v1/growth-tasks",
        json={"title": "Post on socials", "description": "Share the promo", "target_roles": ["PROJECT_MANAGER"]},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["target_roles"] == ["PROJECT_MANAGER"]
    assert response.json()["is_active"] is True


def test_task_needs_a_role(client, super_admin):
    response = client.post(
        "/api/v1/growth-tasks",
        json={"title": "Post on socials", "description": "Share the promo", "target_roles": []},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_hr_cannot_manage_tasks(client, hr_manager):
    response = client.get("/api/v1/growth-tasks", headers=auth_headers(hr_manager))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_available_only_for_targeted_roles(client, referral_task, employee, project_manager):
    mine = client.get("/api/v1/growth-tasks/available", headers=auth_headers(employee))
    assert [t["title"] for t in mine.json()] == ["Refer a customer"]
    assert mine.json()[0]["last_completed_at"] is None

    other = client.get("/api/v1/growth-tasks/available", headers=auth_headers(project_manager))
    assert other.json() == []


def test_completion_hides_task_for_a_week(client, db, referral_task, employee):
    response = client.post(
        f"/api/v1/growth-tasks/{referral_task.id}/complete", headers=auth_headers(employee)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["available_again_at"].endswith("Z")

    assert client.get("/api/v1/growth-tasks/available", headers=auth_headers(employee)).json() == []
    again = client.post(f"/api/v1/growth-tasks/{referral_task.id}/complete", headers=auth_headers(employee))
    assert again.status_code == status.HTTP_409_CONFLICT


def test_task_returns_after_a_week(db, referral_task, employee):
    growth_task_service.complete_task(db, referral_task.id, employee)
    later = now_utc() + timedelta(days=7, minutes=1)

    available = growth_task_service.list_available(db, employee, now=later)
    assert [t["id"] for t in available] == [referral_task.id]
    assert available[0]["last_completed_at"] is not None

    growth_task_service.complete_task(db, referral_task.id, employee, now=later)
    assert db.query(GrowthTaskCompletion).filter(GrowthTaskCompletion.user_id == employee.id).count() == 1


def test_untargeted_or_inactive_task_cannot_be_completed(db, referral_task, project_manager, employee, super_admin):
    with pytest.raises(HTTPException) as exc_info:
        growth_task_service.complete_task(db, referral_task.id, project_manager)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN

    referral_task.is_active = False
    db.commit()
    with pytest.raises(HTTPException) as exc_info:
        growth_task_service.complete_task(db, referral_task.id, employee)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_update_and_delete(client, db, referral_task, employee, super_admin):
    growth_task_service.complete_task(db, referral_task.id, employee)

    updated = client.patch(
        f"/api/v1/growth-tasks/{referral_task.id}",
        json={"is_active": False, "target_roles": ["EMPLOYEE", "EMPLOYEE"]},
        headers=auth_headers(super_admin),
    )
    assert updated.json()["is_active"] is False
    assert updated.json()["target_roles"] == ["EMPLOYEE"]

    deleted = client.delete(f"/api/v1/growth-tasks/{referral_task.id}", headers=auth_headers(super_admin))
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert db.query(GrowthTask).count() == 0
    assert db.query(GrowthTaskCompletion).count() == 0
