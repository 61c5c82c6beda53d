"""
Tests for the public biodata form and its review
"""
import pytest
from fastapi import HTTPException, status
from staffdesk.models.audit_log import AuditLog
from staffdesk.models.biodata import BiodataStatus, BiodataSubmission
from staffdesk.schemas.biodata import BiodataCreate
from staffdesk.services import biodata_service
from staffdesk.tests.conftest import auth_headers


def _form(**overrides):
    form = {
        "company_hired_to": "Lekki Fibre Ltd",
        "candidate_name": "Chidi Okafor",
        "phone_number": "08031234567",
        "date_of_birth": "1994-05-17",
        "gender": "male",
        "residential_address": "12 Admiralty Way, Lekki",
        "state": "Lagos",
        "marital_status": "single",
        "last_employer_name_address": "Netcom, Victoria Island",
        "last_employer_contact": "hr@netcom.example",
        "first_previous_employer": "Netcom",
        "second_previous_employer": "Spectranet",
        "next_of_kin_contact": "08039876543",
        "next_of_kin_address": "4 Allen Avenue, Ikeja",
        "cv_path": "biodata/chidi/cv.pdf",
    }
    form.update(overrides)
    return form


@pytest.fixture
def submission(db):
    return biodata_service.submit_biodata(db, BiodataCreate(**_form()))


def test_public_submission_needs_no_auth(client, db):
    response = client.post("/api/v1/biodata", json=_form())

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "PENDING"
    stored = db.query(BiodataSubmission).one()
    assert stored.gender == "MALE"
    assert stored.marital_status == "SINGLE"
    assert stored.cv_path == "biodata/chidi/cv.pdf"
    assert db.query(AuditLog).filter(AuditLog.action == "BIODATA_SUBMIT").count() == 1


@pytest.mark.parametrize("overrides", [
    {"phone_number": "0803"},
    {"candidate_name": "   "},
    {"gender": "other"},
    {"date_of_birth": "2999-01-01"},
])
def test_invalid_submission_is_rejected(client, db, overrides):
    response = client.post("/api/v1/biodata", json=_form(**overrides))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert db.query(BiodataSubmission).count() == 0


def test_hr_lists_newest_first(client, db, hr_manager):
    first = biodata_service.submit_biodata(db, BiodataCreate(**_form(candidate_name="First")))
    second = biodata_service.submit_biodata(db, BiodataCreate(**_form(candidate_name="Second")))

    response = client.get("/api/v1/biodata", headers=auth_headers(hr_manager))

    assert response.status_code == status.HTTP_200_OK
    assert [item["id"] for item in response.json()["items"]] == [second.id, first.id]


def test_employee_cannot_read_submissions(client, submission, employee):
    response = client.get("/api/v1/biodata", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_approve_with_notes(client, db, submission, hr_manager):
    response = client.post(
        f"/api/v1/biodata/{submission.id}/review",
        json={"status": "APPROVED", "notes": "  Guarantors verified  "},
        headers=auth_headers(hr_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "APPROVED"
    assert data["notes"] == "Guarantors verified"
    assert data["reviewed_by"] == hr_manager.id
    assert data["reviewed_at"].endswith("Z")
    assert db.query(AuditLog).filter(AuditLog.action == "BIODATA_APPROVED").count() == 1


def test_reject_then_review_again_conflicts(db, submission, super_admin):
    rejected = biodata_service.review_submission(db, submission.id, BiodataStatus.REJECTED, super_admin)
    assert rejected.status == BiodataStatus.REJECTED.value
    assert rejected.notes is None

    with pytest.raises(HTTPException) as exc_info:
        biodata_service.review_submission(db, submission.id, BiodataStatus.APPROVED, super_admin)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_pending_is_not_a_decision(client, submission, hr_manager):
    response = client.post(
        f"/api/v1/biodata/{submission.id}/review",
        json={"status": "PENDING"},
        headers=auth_headers(hr_manager),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_status_filter_and_detail(client, db, submission, hr_manager):
    biodata_service.review_submission(db, submission.id, BiodataStatus.APPROVED, hr_manager)
    biodata_service.submit_biodata(db, BiodataCreate(**_form(candidate_name="Still Pending")))

    pending = client.get("/api/v1/biodata", params={"status": "PENDING"}, headers=auth_headers(hr_manager))
    assert [item["candidate_name"] for item in pending.json()["items"]] == ["Still Pending"]

    detail = client.get(f"/api/v1/biodata/{submission.id}", headers=auth_headers(hr_manager))
    assert detail.json()["next_of_kin_address"] == "4 Allen Avenue, Ikeja"

    missing = client.get("/api/v1/biodata/999", headers=auth_headers(hr_manager))
    assert missing.status_code == status.HTTP_404_NOT_FOUND
