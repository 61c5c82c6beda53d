"""
Tests for employee audit forms and their review
"""
import pytest
from fastapi import HTTPException, status
from staffdesk.models.employee_audit import EmployeeAudit, EmployeeAuditStatus
from staffdesk.models.profile import Role
from staffdesk.schemas.employee_audit import EmployeeAuditCreate, EmployeeAuditReview
from staffdesk.services import employee_audit_service
from staffdesk.tests.conftest import auth_headers


def _form(**overrides):
    form = {
        "name": "Ada Obi",
        "current_job_title": "Field Technician",
        "job_description": "Installs and maintains customer links",
        "department": "Network",
        "salary": "22000",
        "manages_staff": True,
        "number_of_employees": 2,
        "employment_history": [
            {"date_from": "2019-01", "date_to": "2023-06", "employer_name": "Netcom", "post_held": "Installer"},
        ],
        "education": [{"institution": "Yabatech", "qualifications": "OND Electrical"}],
        "skills_competency": [{"skill": "Fibre splicing", "rating": "expert"}],
        "signature": "A. Obi",
        "declaration_date": "2026-03-01T09:00:00Z",
    }
    form.update(overrides)
    return form


@pytest.fixture
def audit(db, employee):
    return employee_audit_service.submit_audit(db, EmployeeAuditCreate(**_form()), employee)


def test_submit_own_audit(client, db, employee):
    response = client.post("/api/v1/employee-audits", json=_form(), headers=auth_headers(employee))

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["user_id"] == employee.id
    assert data["status"] == "SUBMITTED"
    assert data["employment_history"][0]["employer_name"] == "Netcom"
    assert data["skills_competency"] == [{"skill": "Fibre splicing", "rating": "expert"}]
    assert data["submitted_at"].endswith("Z")
    stored = db.query(EmployeeAudit).one()
    assert stored.education[0]["institution"] == "Yabatech"


@pytest.mark.parametrize("overrides", [
    {"signature": "  "},
    {"job_description": ""},
    {"manages_staff": False, "number_of_employees": 4},
])
def test_invalid_audit_is_rejected(client, employee, overrides):
    response = client.post("/api/v1/employee-audits", json=_form(**overrides), headers=auth_headers(employee))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_employee_sees_only_own_audits(client, db, audit, make_profile):
    colleague = make_profile(Role.EMPLOYEE)
    employee_audit_service.submit_audit(db, EmployeeAuditCreate(**_form(name="Colleague")), colleague)

    own = client.get("/api/v1/employee-audits", headers=auth_headers(colleague))
    assert [item["name"] for item in own.json()["items"]] == ["Colleague"]

    other = client.get(f"/api/v1/employee-audits/{audit.id}", headers=auth_headers(colleague))
    assert other.status_code == status.HTTP_403_FORBIDDEN

    filtered = client.get(
        "/api/v1/employee-audits", params={"user_id": audit.user_id}, headers=auth_headers(colleague)
    )
    assert filtered.status_code == status.HTTP_403_FORBIDDEN


def test_hr_lists_every_audit(client, db, audit, hr_manager, make_profile):
    colleague = make_profile(Role.EMPLOYEE)
    employee_audit_service.submit_audit(db, EmployeeAuditCreate(**_form(name="Colleague")), colleague)

    response = client.get("/api/v1/employee-audits", headers=auth_headers(hr_manager))
    assert response.json()["total"] == 2

    one = client.get(
        "/api/v1/employee-audits", params={"user_id": colleague.id}, headers=auth_headers(hr_manager)
    )
    assert [item["user_id"] for item in one.json()["items"]] == [colleague.id]


def test_review_marks_audit_reviewed(client, audit, hr_manager):
    response = client.post(
        f"/api/v1/employee-audits/{audit.id}/review",
        json={"final_rating": "Exceeds expectations", "audit_comments": "Records complete"},
        headers=auth_headers(hr_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "REVIEWED"
    assert data["final_rating"] == "Exceeds expectations"
    assert data["reviewed_by"] == hr_manager.id


def test_review_twice_conflicts(db, audit, super_admin):
    review = EmployeeAuditReview(final_rating="Meets expectations")
    employee_audit_service.review_audit(db, audit.id, review, super_admin)

    with pytest.raises(HTTPException) as exc_info:
        employee_audit_service.review_audit(db, audit.id, review, super_admin)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT
    assert db.get(EmployeeAudit, audit.id).status == EmployeeAuditStatus.REVIEWED.value


def test_employee_cannot_review(client, audit, employee):
    response = client.post(
        f"/api/v1/employee-audits/{audit.id}/review",
        json={"final_rating": "Outstanding"},
        headers=auth_headers(employee),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
