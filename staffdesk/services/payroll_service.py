"""
Payroll jobs - deduction recalculation and the monthly salary reset
"""
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from staffdesk.core.constants import (
    SETTING_ABSENCE_DEDUCTION_PERCENTAGE,
    SETTING_MONTHLY_RESET_LAST_RUN,
)
from staffdesk.models.attendance import Attendance
from staffdesk.models.salary import SalaryInfo
from staffdesk.services.attendance_service import absence_charge
from staffdesk.services.audit_service import log_audit
from staffdesk.services.salary_service import to_money
from staffdesk.services.settings_service import get_decimal_setting, upsert_setting
from staffdesk.utils.datetime_utils import iso_z, now_utc

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def recalculate_deductions(db: Session) -> Dict[str, int]:
    """
    Recompute every charged attendance row with the current absence
    percentage and rebuild salary totals from them.

    Salaries are first reset to base; each user's total is then the sum of
    their recomputed rows and current_salary = max(0, base - total).
    Runs as one transaction.
    """
    percentage = get_decimal_setting(db, SETTING_ABSENCE_DEDUCTION_PERCENTAGE)
    logger.info("Starting recalculation of all historical deductions using %s%%", percentage)

    try:
        salaries = {s.user_id: s for s in db.query(SalaryInfo).with_for_update().all()}
        for salary in salaries.values():
            salary.total_deductions = ZERO
            salary.current_salary = to_money(salary.base_salary)

        charged = db.query(Attendance).filter(Attendance.deduction_amount > 0).all()
        totals = defaultdict(lambda: ZERO)
        updated = 0
        for record in charged:
            salary = salaries.get(record.user_id)
            if salary is None:
                logger.warning("no salary row for user %s, attendance %s left as is", record.user_id, record.id)
                continue
            record.deduction_amount = absence_charge(salary.daily_rate, percentage)
            totals[record.user_id] += record.deduction_amount
            updated += 1

        for user_id, total in totals.items():
            salary = salaries[user_id]
            salary.total_deductions = to_money(total)
            salary.current_salary = max(ZERO, to_money(salary.base_salary) - salary.total_deductions)

        log_audit(
            db=db,
            actor_id=None,
            action="DEDUCTIONS_RECALCULATE",
            entity_type="salary_info",
            meta={"percentage": percentage, "attendance_updated": updated, "salaries_updated": len(totals)},
            commit=False,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("deduction recalculation failed")
        raise

    logger.info("Updated %s attendance records and %s salaries", updated, len(totals))
    return {"attendance_updated": updated, "salaries_updated": len(totals)}


def reset_monthly_salary(db: Session) -> Dict[str, int]:
    """Put every salary back to base with no deductions and stamp the run time."""
    now = now_utc()
    logger.info("Starting monthly salary reset for %s-%02d", now.year, now.month)

    try:
        salaries = db.query(SalaryInfo).with_for_update().all()
        for salary in salaries:
            salary.current_salary = to_money(salary.base_salary)
            salary.total_deductions = ZERO
        upsert_setting(
            db,
            SETTING_MONTHLY_RESET_LAST_RUN,
            iso_z(now),
            description="Last time the monthly salary reset ran",
            commit=False,
        )
        log_audit(
            db=db,
            actor_id=None,
            action="SALARY_MONTHLY_RESET",
            entity_type="salary_info",
            meta={"reset": len(salaries)},
            commit=False,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("monthly salary reset failed")
        raise

    logger.info("Monthly salary reset complete. Reset %s records", len(salaries))
    return {"reset": len(salaries), "total": len(salaries)}
