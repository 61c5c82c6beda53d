"""
Reports and exports endpoints
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user
from staffdesk.models.profile import Profile
from staffdesk.schemas.attendance import AttendanceOut
from staffdesk.schemas.profile import ProfileRef
from staffdesk.services.audit_service import log_audit
from staffdesk.services.report_service import (
    ALL_ATTENDANCE_HEADERS,
    ATTENDANCE_HEADERS,
    SALARY_HEADERS,
    attendance_csv_rows,
    attendance_summary,
    get_attendance_records,
    get_report_employee,
    report_filename,
    salary_csv_rows,
)
from staffdesk.utils.csv_export import stream_csv
from staffdesk.utils.datetime_utils import today_utc
from staffdesk.utils.json_serializer import sanitize_for_json

router = APIRouter()


@router.get("/attendance")
async def attendance_report(
    user_id: int = Query(..., description="Employee"),
    from_date: date = Query(..., alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: date = Query(..., alias="to", description="End date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """
    Attendance report for one employee

    Returns the records of the range with present/absent day counts and the
    total deducted. Managers may query anyone; employees only themselves.
    """
    records = get_attendance_records(db, current_user, user_id, from_date, to_date)
    employee = get_report_employee(db, current_user, user_id)
    return {
        "employee": ProfileRef.model_validate(employee).model_dump(),
        "from": from_date.isoformat(),
        "to": to_date.isoformat(),
        "summary": sanitize_for_json(attendance_summary(records)),
        "records": [AttendanceOut.model_validate(r).model_dump(mode="json") for r in records],
    }


@router.get("/attendance.csv")
async def export_attendance_csv(
    user_id: Optional[int] = Query(None, description="Employee (omit for everyone, managers only)"),
    from_date: date = Query(..., alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: date = Query(..., alias="to", description="End date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """
    Export attendance as CSV

    One row per attendance record in the range:
    Date, Status, Clock In, Clock Out, Deduction (missing clock times read N/A).
    Without user_id every employee is exported with a leading Employee column.
    """
    records = get_attendance_records(db, current_user, user_id, from_date, to_date)
    if user_id is None:
        employee = None
        headers = ALL_ATTENDANCE_HEADERS
    else:
        employee = get_report_employee(db, current_user, user_id)
        headers = ATTENDANCE_HEADERS
    rows = attendance_csv_rows(records, with_employee=employee is None)

    log_audit(
        db=db,
        actor_id=current_user.id,
        action="REPORT_EXPORT",
        entity_type="report",
        entity_id=None,
        meta={
            "report_type": "attendance",
            "user_id": user_id,
            "from_date": str(from_date),
            "to_date": str(to_date),
            "row_count": len(rows)
        }
    )

    return stream_csv(headers, rows, report_filename("attendance", employee, today_utc()))


@router.get("/salary.csv")
async def export_salary_csv(
    user_id: int = Query(..., description="Employee"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Export salary figures as Field,Value rows"""
    rows = salary_csv_rows(db, current_user, user_id)
    employee = get_report_employee(db, current_user, user_id)

    log_audit(
        db=db,
        actor_id=current_user.id,
        action="REPORT_EXPORT",
        entity_type="report",
        entity_id=None,
        meta={"report_type": "salary", "user_id": user_id}
    )

    return stream_csv(SALARY_HEADERS, rows, report_filename("salary", employee, today_utc()))
