"""
Salary service - salary rows and the deduction arithmetic shared by
suspensions and absence processing.

Every write keeps current_salary == base_salary - total_deductions except
where noted (recalculation floors current_salary at zero).
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.core.config import settings
from staffdesk.core.constants import SETTING_WORKING_DAYS_PER_MONTH
from staffdesk.models.attendance import Attendance
from staffdesk.models.profile import Profile
from staffdesk.models.salary import SalaryInfo
from staffdesk.services.audit_service import log_audit
from staffdesk.services.settings_service import get_decimal_setting

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Round to cents, half up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def get_salary(db: Session, user_id: int, for_update: bool = False) -> Optional[SalaryInfo]:
    query = db.query(SalaryInfo).filter(SalaryInfo.user_id == user_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_salary_or_404(db: Session, user_id: int) -> SalaryInfo:
    salary = get_salary(db, user_id)
    if salary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No salary information found"
        )
    return salary


def compute_daily_rate(db: Session, base_salary: Decimal) -> Decimal:
    working_days = get_decimal_setting(db, SETTING_WORKING_DAYS_PER_MONTH)
    return to_money(Decimal(base_salary) / working_days)


def set_salary(db: Session, user_id: int, base_salary: Decimal, actor_id: int) -> SalaryInfo:
    """
    Create or update the salary row of a profile.

    The daily rate is derived from the working_days_per_month setting.
    Existing deductions are kept on update.
    """
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Profile with id {user_id} not found"
        )

    base_salary = to_money(base_salary)
    daily_rate = compute_daily_rate(db, base_salary)
    salary = get_salary(db, user_id)
    if salary is None:
        salary = SalaryInfo(
            user_id=user_id,
            base_salary=base_salary,
            daily_rate=daily_rate,
            current_salary=base_salary,
            total_deductions=Decimal("0"),
            currency=settings.CURRENCY,
        )
        db.add(salary)
    else:
        salary.base_salary = base_salary
        salary.daily_rate = daily_rate
        salary.current_salary = base_salary - to_money(salary.total_deductions)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="SALARY_SET",
        entity_type="salary_info",
        entity_id=user_id,
        meta={"base_salary": base_salary, "daily_rate": daily_rate},
        commit=False,
    )
    db.commit()
    db.refresh(salary)
    return salary


def clear_deductions(db: Session, user_id: int, actor_id: int) -> SalaryInfo:
    """Restore current salary to base and zero the user's attendance deductions."""
    salary = get_salary_or_404(db, user_id)
    cleared = to_money(salary.total_deductions)
    salary.total_deductions = Decimal("0")
    salary.current_salary = to_money(salary.base_salary)
    db.query(Attendance).filter(Attendance.user_id == user_id).update(
        {Attendance.deduction_amount: Decimal("0")}, synchronize_session=False
    )
    log_audit(
        db=db,
        actor_id=actor_id,
        action="SALARY_CLEAR_DEDUCTIONS",
        entity_type="salary_info",
        entity_id=user_id,
        meta={"cleared": cleared},
        commit=False,
    )
    db.commit()
    db.refresh(salary)
    logger.info("deductions cleared: user_id=%s amount=%s", user_id, cleared)
    return salary


def apply_percentage_deduction(salary: SalaryInfo, percentage: Decimal) -> Decimal:
    """
    Debit percentage of the current salary. Does not commit.

    deduction = current_salary * percentage / 100
    """
    percentage = Decimal(str(percentage))
    if percentage <= 0:
        return Decimal("0")
    current = to_money(salary.current_salary)
    deduction = to_money(current * percentage / Decimal("100"))
    salary.current_salary = current - deduction
    salary.total_deductions = to_money(salary.total_deductions) + deduction
    return deduction


def apply_fixed_deduction(salary: SalaryInfo, amount: Decimal) -> Decimal:
    """Debit a fixed amount (absence charge). Does not commit."""
    amount = to_money(amount)
    salary.total_deductions = to_money(salary.total_deductions) + amount
    salary.current_salary = to_money(salary.base_salary) - salary.total_deductions
    return amount


def credit_fixed_deduction(salary: SalaryInfo, amount: Decimal) -> Decimal:
    """Reverse an absence charge. Does not commit."""
    amount = min(to_money(amount), to_money(salary.total_deductions))
    salary.total_deductions = to_money(salary.total_deductions) - amount
    salary.current_salary = max(Decimal("0"), to_money(salary.base_salary) - salary.total_deductions)
    return amount
