"""
Tests for deduction recalculation, the monthly reset and salary endpoints
"""
from datetime import date
from decimal import Decimal
from fastapi import status
from staffdesk.core.constants import SETTING_ABSENCE_DEDUCTION_PERCENTAGE, SETTING_MONTHLY_RESET_LAST_RUN
from staffdesk.models.attendance import Attendance, AttendanceStatus
from staffdesk.models.salary import SalaryInfo
from staffdesk.services import payroll_service
from staffdesk.services.settings_service import get_setting, upsert_setting
from staffdesk.tests.conftest import auth_headers


def _salary(db, user_id):
    db.expire_all()
    return db.query(SalaryInfo).filter(SalaryInfo.user_id == user_id).one()


def _absent(db, user_id, day, amount="1000.00"):
    db.add(Attendance(
        user_id=user_id,
        date=date(2026, 3, day),
        status=AttendanceStatus.ABSENT.value,
        deduction_amount=Decimal(amount),
    ))


def test_recalculate_uses_current_percentage(db, employee):
    _absent(db, employee.id, 2)
    _absent(db, employee.id, 3)
    db.add(Attendance(user_id=employee.id, date=date(2026, 3, 4), status=AttendanceStatus.PRESENT.value))
    salary = _salary(db, employee.id)
    salary.total_deductions = Decimal("2000.00")
    salary.current_salary = Decimal("20000.00")
    db.commit()
    upsert_setting(db, SETTING_ABSENCE_DEDUCTION_PERCENTAGE, "50")

    result = payroll_service.recalculate_deductions(db)

    assert result == {"attendance_updated": 2, "salaries_updated": 1}
    salary = _salary(db, employee.id)
    assert salary.total_deductions == Decimal("1000.00")
    assert salary.current_salary == Decimal("21000.00")
    amounts = sorted(r.deduction_amount for r in db.query(Attendance).all())
    assert amounts == [Decimal("0.00"), Decimal("500.00"), Decimal("500.00")]


def test_recalculate_floors_current_salary_at_zero(db, make_profile):
    low = make_profile(base_salary="2200")  # daily rate 100.00
    for day in range(1, 26):
        _absent(db, low.id, day, "100.00")
    db.commit()

    payroll_service.recalculate_deductions(db)

    salary = _salary(db, low.id)
    assert salary.total_deductions == Decimal("2500.00")
    assert salary.current_salary == Decimal("0.00")


def test_recalculate_resets_users_without_charges(db, employee):
    salary = _salary(db, employee.id)
    salary.total_deductions = Decimal("5000.00")
    salary.current_salary = Decimal("17000.00")
    db.commit()

    payroll_service.recalculate_deductions(db)

    salary = _salary(db, employee.id)
    assert salary.total_deductions == Decimal("0.00")
    assert salary.current_salary == Decimal("22000.00")


def test_monthly_reset(db, employee):
    salary = _salary(db, employee.id)
    salary.total_deductions = Decimal("3000.00")
    salary.current_salary = Decimal("19000.00")
    db.commit()

    result = payroll_service.reset_monthly_salary(db)

    assert result == {"reset": 1, "total": 1}
    salary = _salary(db, employee.id)
    assert salary.current_salary == Decimal("22000.00")
    assert salary.total_deductions == Decimal("0.00")
    last_run = get_setting(db, SETTING_MONTHLY_RESET_LAST_RUN)
    assert last_run is not None and last_run.endswith("Z")


def test_monthly_reset_endpoint(client, super_admin, employee):
    response = client.post("/api/v1/admin/jobs/reset-monthly-salary", headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True
    assert response.json()["reset"] == 1


def test_check_suspension_expiry_endpoint(client, super_admin):
    response = client.post("/api/v1/admin/jobs/check-suspension-expiry", headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"completed": 0, "message": "Completed 0 expired suspensions"}


def test_set_salary_derives_daily_rate_and_keeps_deductions(client, db, hr_manager, employee):
    salary = _salary(db, employee.id)
    salary.total_deductions = Decimal("1000.00")
    salary.current_salary = Decimal("21000.00")
    db.commit()

    response = client.put(
        f"/api/v1/salary/{employee.id}",
        json={"base_salary": "44000"},
        headers=auth_headers(hr_manager),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["daily_rate"] == "2000.00"
    assert data["total_deductions"] == "1000.00"
    assert data["current_salary"] == "43000.00"


def test_clear_deductions(client, db, hr_manager, employee):
    _absent(db, employee.id, 2)
    salary = _salary(db, employee.id)
    salary.total_deductions = Decimal("1000.00")
    salary.current_salary = Decimal("21000.00")
    db.commit()

    response = client.post(f"/api/v1/salary/{employee.id}/clear-deductions", headers=auth_headers(hr_manager))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["current_salary"] == "22000.00"
    db.expire_all()
    assert db.query(Attendance).one().deduction_amount == Decimal("0.00")


def test_employee_reads_own_salary_only(client, employee, make_profile):
    other = make_profile(base_salary="10000")
    assert client.get("/api/v1/salary/me", headers=auth_headers(employee)).status_code == status.HTTP_200_OK
    response = client.get(f"/api/v1/salary/{other.id}", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN
