"""
Tests for attendance/salary reports and CSV exports
"""
import csv
import io
from datetime import date, datetime
from decimal import Decimal
from fastapi import status
from staffdesk.models.attendance import Attendance, AttendanceStatus
from staffdesk.models.audit_log import AuditLog
from staffdesk.models.profile import Role
from staffdesk.services import report_service
from staffdesk.tests.conftest import auth_headers


def _add_records(db, user_id):
    db.add_all([
        Attendance(
            user_id=user_id,
            date=date(2026, 3, 2),
            status=AttendanceStatus.PRESENT.value,
            clock_in=datetime(2026, 3, 2, 8, 0),
            clock_out=datetime(2026, 3, 2, 17, 0),
            deduction_amount=Decimal("0"),
        ),
        Attendance(
            user_id=user_id,
            date=date(2026, 3, 3),
            status=AttendanceStatus.ABSENT.value,
            deduction_amount=Decimal("1000.00"),
        ),
        Attendance(
            user_id=user_id,
            date=date(2026, 3, 4),
            status=AttendanceStatus.PRESENT.value,
            clock_in=datetime(2026, 3, 4, 8, 30),
            deduction_amount=Decimal("0"),
        ),
        # Outside the exported range
        Attendance(
            user_id=user_id,
            date=date(2026, 4, 1),
            status=AttendanceStatus.ABSENT.value,
            deduction_amount=Decimal("1000.00"),
        ),
    ])
    db.commit()


def _read_csv(response):
    return list(csv.reader(io.StringIO(response.text)))


def test_attendance_csv_one_row_per_record(client, db, hr_manager, employee):
    """Header row plus exactly one row per record in range"""
    _add_records(db, employee.id)

    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"user_id": employee.id, "from": "2026-03-01", "to": "2026-03-31"},
        headers=auth_headers(hr_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/csv")
    assert "attendance_report_Ada_Obi_" in response.headers["content-disposition"]
    rows = _read_csv(response)
    assert rows[0] == ["Date", "Status", "Clock In", "Clock Out", "Deduction"]
    assert rows[1:] == [
        ["2026-03-02", "PRESENT", "2026-03-02T08:00:00Z", "2026-03-02T17:00:00Z", "0.00"],
        ["2026-03-03", "ABSENT", "N/A", "N/A", "1000.00"],
        ["2026-03-04", "PRESENT", "2026-03-04T08:30:00Z", "N/A", "0.00"],
    ]


def test_attendance_csv_empty_range_has_only_header(client, db, employee):
    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"user_id": employee.id, "from": "2025-01-01", "to": "2025-01-31"},
        headers=auth_headers(employee),
    )
    assert response.status_code == status.HTTP_200_OK
    assert _read_csv(response) == [["Date", "Status", "Clock In", "Clock Out", "Deduction"]]


def test_attendance_csv_writes_audit_row(client, db, hr_manager, employee):
    _add_records(db, employee.id)
    client.get(
        "/api/v1/reports/attendance.csv",
        params={"user_id": employee.id, "from": "2026-03-01", "to": "2026-03-31"},
        headers=auth_headers(hr_manager),
    )

    audit = db.query(AuditLog).filter(AuditLog.action == "REPORT_EXPORT").one()
    assert audit.actor_id == hr_manager.id
    assert audit.meta_json["report_type"] == "attendance"
    assert audit.meta_json["row_count"] == 3


def test_employee_cannot_export_someone_else(client, db, employee, make_profile):
    other = make_profile(Role.EMPLOYEE, base_salary="30000")
    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"user_id": other.id, "from": "2026-03-01", "to": "2026-03-31"},
        headers=auth_headers(employee),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db.query(AuditLog).filter(AuditLog.action == "REPORT_EXPORT").count() == 0


def test_inverted_range_is_rejected(client, employee):
    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"user_id": employee.id, "from": "2026-03-31", "to": "2026-03-01"},
        headers=auth_headers(employee),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_attendance_report_summary(client, db, hr_manager, employee):
    _add_records(db, employee.id)

    response = client.get(
        "/api/v1/reports/attendance",
        params={"user_id": employee.id, "from": "2026-03-01", "to": "2026-03-31"},
        headers=auth_headers(hr_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["employee"]["full_name"] == "Ada Obi"
    assert data["summary"] == {
        "present_days": 2,
        "absent_days": 1,
        "total_deductions": "1000.00",
        "total_days": 3,
    }
    assert len(data["records"]) == 3


def test_salary_csv(client, db, employee):
    response = client.get(
        "/api/v1/reports/salary.csv",
        params={"user_id": employee.id},
        headers=auth_headers(employee),
    )

    assert response.status_code == status.HTTP_200_OK
    assert _read_csv(response) == [
        ["Field", "Value"],
        ["Base Salary", "22000.00"],
        ["Daily Rate", "1000.00"],
        ["Current Salary", "22000.00"],
        ["Total Deductions", "0.00"],
    ]


def test_salary_csv_without_salary_row(client, db, hr_manager, make_profile):
    unpaid = make_profile(Role.EMPLOYEE)
    response = client.get(
        "/api/v1/reports/salary.csv",
        params={"user_id": unpaid.id},
        headers=auth_headers(hr_manager),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_report_filename_strips_unsafe_characters(make_profile):
    profile = make_profile(Role.EMPLOYEE, full_name="Zoë O'Neil / Ops")
    assert report_service.report_filename("salary", profile, date(2026, 3, 1)) == (
        "salary_report_Zo_O_Neil_Ops_2026-03-01.csv"
    )


def test_manager_exports_every_employee(client, db, hr_manager, employee, make_profile):
    other = make_profile(Role.EMPLOYEE, full_name="Bola Ade", base_salary="30000")
    _add_records(db, employee.id)
    db.add(Attendance(user_id=other.id, date=date(2026, 3, 2), status=AttendanceStatus.PRESENT.value))
    db.commit()

    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"from": "2026-03-01", "to": "2026-03-31"},
        headers=auth_headers(hr_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    assert "attendance_report_all_" in response.headers["content-disposition"]
    rows = _read_csv(response)
    assert rows[0] == ["Employee", "Date", "Status", "Clock In", "Clock Out", "Deduction"]
    assert len(rows) == 5
    assert sorted({r[0] for r in rows[1:]}) == ["Ada Obi", "Bola Ade"]


def test_employee_cannot_export_everyone(client, employee):
    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"from": "2026-03-01", "to": "2026-03-31"},
        headers=auth_headers(employee),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
