"""
Report service - attendance and salary reports
"""
import re
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload
from staffdesk.core.deps import has_role
from staffdesk.models.attendance import Attendance, AttendanceStatus
from staffdesk.models.profile import Profile, MANAGER_ROLES
from staffdesk.services.salary_service import get_salary_or_404
from staffdesk.utils.datetime_utils import iso_z

ATTENDANCE_HEADERS = ["Date", "Status", "Clock In", "Clock Out", "Deduction"]
ALL_ATTENDANCE_HEADERS = ["Employee"] + ATTENDANCE_HEADERS
SALARY_HEADERS = ["Field", "Value"]

NOT_AVAILABLE = "N/A"


def _is_report_manager(profile: Profile) -> bool:
    return has_role(profile, *MANAGER_ROLES)


def get_report_employee(db: Session, current_user: Profile, user_id: int) -> Profile:
    """Managers may report on anyone; everyone else only on themselves."""
    if user_id != current_user.id and not _is_report_manager(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only export your own reports"
        )
    employee = db.query(Profile).filter(Profile.id == user_id).first()
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Profile with id {user_id} not found"
        )
    return employee


def report_filename(kind: str, employee: Optional[Profile], on: date) -> str:
    if employee is None:
        return f"{kind}_report_all_{on.isoformat()}.csv"
    name = re.sub(r"[^A-Za-z0-9]+", "_", employee.full_name).strip("_") or str(employee.id)
    return f"{kind}_report_{name}_{on.isoformat()}.csv"


def get_attendance_records(
    db: Session,
    current_user: Profile,
    user_id: Optional[int],
    from_date: date,
    to_date: date,
) -> List[Attendance]:
    """
    Attendance rows in [from_date, to_date], oldest first.

    With user_id the rows of that employee; without it every employee's
    rows (managers only).

    Raises:
        HTTPException: 400 on an inverted range, 403 outside the caller's scope
    """
    if from_date > to_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must be <= to_date"
        )

    query = db.query(Attendance).options(joinedload(Attendance.user)).filter(
        Attendance.date >= from_date,
        Attendance.date <= to_date,
    )
    if user_id is None:
        if not _is_report_manager(current_user):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only managers can export every employee's attendance"
            )
    else:
        get_report_employee(db, current_user, user_id)
        query = query.filter(Attendance.user_id == user_id)
    return query.order_by(Attendance.date, Attendance.user_id, Attendance.id).all()


def attendance_csv_rows(records: List[Attendance], with_employee: bool = False) -> List[Dict]:
    """One CSV row per attendance record; missing clock times read N/A."""
    rows = []
    for record in records:
        row = {
            "Date": record.date.isoformat(),
            "Status": record.status,
            "Clock In": iso_z(record.clock_in) or NOT_AVAILABLE,
            "Clock Out": iso_z(record.clock_out) or NOT_AVAILABLE,
            "Deduction": record.deduction_amount,
        }
        if with_employee:
            row["Employee"] = record.user.full_name
        rows.append(row)
    return rows


def attendance_summary(records: List[Attendance]) -> Dict:
    present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT.value)
    absent = sum(1 for r in records if r.status == AttendanceStatus.ABSENT.value)
    total_deductions = sum((Decimal(str(r.deduction_amount or 0)) for r in records), Decimal("0"))
    return {
        "present_days": present,
        "absent_days": absent,
        "total_deductions": total_deductions,
        "total_days": len(records),
    }


def salary_csv_rows(db: Session, current_user: Profile, user_id: int) -> List[Dict]:
    get_report_employee(db, current_user, user_id)
    salary = get_salary_or_404(db, user_id)
    return [
        {"Field": "Base Salary", "Value": salary.base_salary},
        {"Field": "Daily Rate", "Value": salary.daily_rate},
        {"Field": "Current Salary", "Value": salary.current_salary},
        {"Field": "Total Deductions", "Value": salary.total_deductions},
    ]
