"""
Tests for staff account management
"""
import pytest
from fastapi import status
from staffdesk.core.config import settings
from staffdesk.models.profile import Profile, Role
from staffdesk.models.salary import SalaryInfo
from staffdesk.services import profile_service
from staffdesk.tests.conftest import auth_headers


def _payload(**overrides):
    payload = {
        "email": "New.Hire@Example.com",
        "full_name": "New Hire",
        "password": "welcome1",
        "role": "EMPLOYEE",
    }
    payload.update(overrides)
    return payload


def test_hr_creates_employee(client, hr_manager):
    response = client.post("/api/v1/profiles", json=_payload(), headers=auth_headers(hr_manager))

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["email"] == "new.hire@example.com"
    assert data["strike_count"] == 0
    assert data["is_terminated"] is False
    assert "password_hash" not in data


@pytest.mark.parametrize("role", ["HR_MANAGER", "SUPER_ADMIN"])
def test_hr_cannot_grant_privileged_roles(client, hr_manager, role):
    response = client.post("/api/v1/profiles", json=_payload(role=role), headers=auth_headers(hr_manager))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_super_admin_can_create_hr_manager(client, super_admin):
    response = client.post("/api/v1/profiles", json=_payload(role="HR_MANAGER"), headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["role"] == "HR_MANAGER"


def test_duplicate_email_rejected(client, hr_manager, employee):
    response = client.post(
        "/api/v1/profiles", json=_payload(email="EMP@example.com"), headers=auth_headers(hr_manager)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_short_password_rejected(client, hr_manager):
    response = client.post("/api/v1/profiles", json=_payload(password="abc"), headers=auth_headers(hr_manager))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_employee_cannot_create_profiles(client, employee):
    response = client.post("/api/v1/profiles", json=_payload(), headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_profile_email(client, db, hr_manager, employee):
    response = client.patch(
        f"/api/v1/profiles/{employee.id}",
        json={"email": "Ada.Obi@example.com", "department": "Field Ops"},
        headers=auth_headers(hr_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "ada.obi@example.com"
    login = client.post("/api/v1/auth/login", json={"email": "ada.obi@example.com", "password": "secret123"})
    assert login.status_code == status.HTTP_200_OK


def test_hr_cannot_edit_super_admin(client, hr_manager, super_admin):
    response = client.patch(
        f"/api/v1/profiles/{super_admin.id}", json={"full_name": "Renamed"}, headers=auth_headers(hr_manager)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_reset_password(client, hr_manager, employee):
    response = client.post(
        f"/api/v1/profiles/{employee.id}/reset-password",
        json={"new_password": "brand-new-1"},
        headers=auth_headers(hr_manager),
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT

    old = client.post("/api/v1/auth/login", json={"email": "emp@example.com", "password": "secret123"})
    new = client.post("/api/v1/auth/login", json={"email": "emp@example.com", "password": "brand-new-1"})
    assert old.status_code == status.HTTP_401_UNAUTHORIZED
    assert new.status_code == status.HTTP_200_OK


def test_delete_profile_removes_salary(client, db, super_admin, employee):
    response = client.delete(f"/api/v1/profiles/{employee.id}", headers=auth_headers(super_admin))

    assert response.status_code == status.HTTP_204_NO_CONTENT
    db.expire_all()
    assert db.query(Profile).filter(Profile.id == employee.id).first() is None
    assert db.query(SalaryInfo).count() == 0


def test_super_admin_cannot_delete_self(client, super_admin):
    response = client.delete(f"/api/v1/profiles/{super_admin.id}", headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_list_profiles_excludes_terminated(client, hr_manager, employee, make_profile):
    make_profile(Role.EMPLOYEE, is_terminated=True)

    everyone = client.get("/api/v1/profiles", headers=auth_headers(hr_manager)).json()
    active = client.get(
        "/api/v1/profiles", params={"include_terminated": False}, headers=auth_headers(hr_manager)
    ).json()

    assert len(everyone) == len(active) + 1


def test_bootstrap_admin_runs_once(db, monkeypatch):
    monkeypatch.setattr(settings, "INITIAL_ADMIN_EMAIL", "Boss@Example.com")
    monkeypatch.setattr(settings, "INITIAL_ADMIN_PASSWORD", "boss-pass-1")

    admin = profile_service.bootstrap_admin(db)

    assert admin.email == "boss@example.com"
    assert admin.role == Role.SUPER_ADMIN.value
    assert profile_service.bootstrap_admin(db) is None
    assert profile_service.authenticate(db, "boss@example.com", "boss-pass-1").id == admin.id
