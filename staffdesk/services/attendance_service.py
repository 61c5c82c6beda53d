"""
Attendance service - clock in/out, history and the daily absence charge
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from staffdesk.core.constants import SETTING_ABSENCE_DEDUCTION_PERCENTAGE
from staffdesk.core.deps import has_role
from staffdesk.models.attendance import Attendance, AttendanceStatus
from staffdesk.models.profile import Profile, Role, MANAGER_ROLES
from staffdesk.models.salary import SalaryInfo
from staffdesk.services.audit_service import log_audit
from staffdesk.services.salary_service import (
    apply_fixed_deduction,
    credit_fixed_deduction,
    get_salary,
    to_money,
)
from staffdesk.services.settings_service import get_decimal_setting
from staffdesk.utils.datetime_utils import now_utc, today_utc

logger = logging.getLogger(__name__)

# Roles allowed to read other people's attendance
ATTENDANCE_VIEWER_ROLES = MANAGER_ROLES + (Role.PROJECT_MANAGER,)


def absence_charge(daily_rate: Decimal, percentage: Decimal) -> Decimal:
    """Amount charged for one absent day."""
    return to_money(Decimal(str(daily_rate)) * Decimal(str(percentage)) / Decimal("100"))


def get_today(db: Session, user_id: int) -> Optional[Attendance]:
    return db.query(Attendance).filter(
        Attendance.user_id == user_id,
        Attendance.date == today_utc()
    ).first()


def mark_attendance(db: Session, user: Profile) -> Attendance:
    """
    Mark today's attendance as PRESENT.

    Upserts on (user, date); marking twice keeps the first clock-in.
    A row already charged as ABSENT has its charge credited back.
    """
    if user.is_suspended:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Suspended employees cannot mark attendance"
        )

    record = get_today(db, user.id)
    if record is not None and record.clock_in is not None:
        return record

    refunded = Decimal("0")
    if record is None:
        record = Attendance(user_id=user.id, date=today_utc())
        db.add(record)
    elif to_money(record.deduction_amount) > 0:
        salary = get_salary(db, user.id, for_update=True)
        if salary is not None:
            refunded = credit_fixed_deduction(salary, record.deduction_amount)
        record.deduction_amount = Decimal("0")
    record.status = AttendanceStatus.PRESENT.value
    record.clock_in = now_utc()
    db.flush()

    log_audit(
        db=db,
        actor_id=user.id,
        action="ATTENDANCE_MARK",
        entity_type="attendance",
        entity_id=record.id,
        meta={"date": record.date, "refunded": refunded},
        commit=False,
    )
    db.commit()
    db.refresh(record)
    return record


def clock_out(db: Session, user: Profile) -> Attendance:
    """
    Record today's clock-out.

    Raises:
        HTTPException: 404 if not clocked in today, 409 if already clocked out
    """
    record = get_today(db, user.id)
    if record is None or record.clock_in is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No clock-in found for today"
        )
    if record.clock_out is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already clocked out today"
        )

    record.clock_out = now_utc()
    log_audit(
        db=db,
        actor_id=user.id,
        action="ATTENDANCE_CLOCK_OUT",
        entity_type="attendance",
        entity_id=record.id,
        commit=False,
    )
    db.commit()
    db.refresh(record)
    return record


def list_attendance(
    db: Session,
    current_user: Profile,
    user_id: Optional[int] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> List[Attendance]:
    """
    Attendance history, newest first.

    Employees only ever see their own rows; managers may pass user_id or
    leave it empty for everyone.
    """
    if from_date and to_date and from_date > to_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must be <= to_date"
        )

    query = db.query(Attendance)
    if has_role(current_user, *ATTENDANCE_VIEWER_ROLES):
        if user_id:
            query = query.filter(Attendance.user_id == user_id)
    else:
        if user_id and user_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only view your own attendance"
            )
        query = query.filter(Attendance.user_id == current_user.id)

    if from_date:
        query = query.filter(Attendance.date >= from_date)
    if to_date:
        query = query.filter(Attendance.date <= to_date)
    return query.order_by(Attendance.date.desc(), Attendance.id.desc()).all()


def _charge_absence(
    db: Session,
    salary: SalaryInfo,
    record: Optional[Attendance],
    target_date: date,
    percentage: Decimal,
) -> Decimal:
    charge = absence_charge(salary.daily_rate, percentage)
    apply_fixed_deduction(salary, charge)
    if record is None:
        record = Attendance(
            user_id=salary.user_id,
            date=target_date,
            status=AttendanceStatus.ABSENT.value,
        )
        db.add(record)
    record.deduction_amount = charge
    return charge


def process_daily_attendance(db: Session, target_date: Optional[date] = None) -> Dict[str, int]:
    """
    Charge every employee with no attendance (or an ABSENT row) on target_date.

    Each employee is committed on its own, so one failing employee does not
    undo the others. Rows that already carry a deduction are not charged
    again, which makes re-running the job for the same day safe.

    Returns:
        Dict with processed, absent, skipped and failed counts
    """
    target_date = target_date or today_utc()
    percentage = get_decimal_setting(db, SETTING_ABSENCE_DEDUCTION_PERCENTAGE)
    logger.info("Processing attendance for date: %s (deduction %s%%)", target_date, percentage)

    salaries = db.query(SalaryInfo).join(Profile, Profile.id == SalaryInfo.user_id).filter(
        Profile.is_terminated == False  # noqa: E712
    ).order_by(SalaryInfo.user_id).all()

    counts = {"processed": 0, "absent": 0, "skipped": 0, "failed": 0}
    for salary in salaries:
        user_id = salary.user_id
        try:
            record = db.query(Attendance).filter(
                Attendance.user_id == user_id,
                Attendance.date == target_date
            ).first()
            is_absent = record is None or record.status == AttendanceStatus.ABSENT.value
            if is_absent and record is not None and to_money(record.deduction_amount) > 0:
                counts["skipped"] += 1
            elif is_absent:
                charge = _charge_absence(db, salary, record, target_date, percentage)
                db.commit()
                counts["absent"] += 1
                logger.info("Applied deduction of %s for absent employee %s", charge, user_id)
            counts["processed"] += 1
        except SQLAlchemyError:
            db.rollback()
            counts["failed"] += 1
            logger.exception("attendance processing failed for user %s", user_id)

    log_audit(
        db=db,
        actor_id=None,
        action="ATTENDANCE_DAILY_PROCESS",
        entity_type="attendance",
        meta={"date": target_date, **counts},
    )
    logger.info(
        "Processing complete. Processed: %s, Absent: %s, Skipped: %s, Failed: %s",
        counts["processed"], counts["absent"], counts["skipped"], counts["failed"],
    )
    return counts
