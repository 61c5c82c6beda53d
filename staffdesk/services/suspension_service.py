"""
Suspension service - strikes, suspensions and their salary side effects.

Lifecycle:
- Managers raise suspensions as PENDING; a super-admin raising one creates
  it ACTIVE straight away.
- Strike 3 terminates the employee instead of creating a suspension.
- Approval (PENDING/APPROVED -> ACTIVE) adds the strike to the profile,
  marks it suspended and debits salary_deduction_percentage of the current
  salary. Status change, profile and salary writes commit together.
- Rejection touches only the suspension row.
- Expired ACTIVE suspensions are completed by a scheduled job.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from staffdesk.core.config import settings
from staffdesk.core.constants import MAX_SUSPENSION_DAYS, TERMINATION_STRIKE
from staffdesk.core.deps import has_role, is_super_admin
from staffdesk.models.profile import Profile, MANAGER_ROLES
from staffdesk.models.suspension import Suspension, SuspensionStatus, can_transition
from staffdesk.services.audit_service import log_audit
from staffdesk.services.salary_service import apply_percentage_deduction, get_salary
from staffdesk.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


@dataclass
class SuspensionOutcome:
    suspension: Optional[Suspension]
    terminated: bool = False
    deduction_amount: Decimal = Decimal("0")

    @property
    def message(self) -> str:
        if self.terminated:
            return "Employee Terminated"
        if self.suspension is not None and self.suspension.status == SuspensionStatus.ACTIVE.value:
            return "Suspension activated successfully"
        return "Suspension request submitted for approval"


def _validate_request(
    reason: str,
    duration_days: int,
    strike_number: int,
    salary_deduction_percentage: Decimal,
) -> None:
    if not reason or not reason.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reason is required")
    if duration_days < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duration must be at least 1 day")
    if duration_days > MAX_SUSPENSION_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Duration cannot exceed {MAX_SUSPENSION_DAYS} days"
        )
    if strike_number < 0 or strike_number > TERMINATION_STRIKE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Strike number must be between 0 and {TERMINATION_STRIKE}"
        )
    if salary_deduction_percentage < 0 or salary_deduction_percentage > 100:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Salary deduction percentage must be between 0 and 100"
        )


def _get_target_profile(db: Session, user_id: int, for_update: bool = False) -> Profile:
    query = db.query(Profile).filter(Profile.id == user_id)
    if for_update:
        query = query.with_for_update()
    profile = query.first()
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Profile with id {user_id} not found"
        )
    return profile


def _apply_activation(db: Session, suspension: Suspension) -> Decimal:
    """
    Add the strike, flag the profile as suspended and take the salary
    deduction. Runs inside the caller's transaction; does not commit.
    """
    profile = _get_target_profile(db, suspension.user_id, for_update=True)
    profile.strike_count = (profile.strike_count or 0) + (suspension.strike_number or 0)
    profile.is_suspended = True
    profile.suspension_end_date = suspension.suspension_end

    deduction = Decimal("0")
    pct = Decimal(str(suspension.salary_deduction_percentage or 0))
    if pct > 0:
        salary = get_salary(db, suspension.user_id, for_update=True)
        if salary is None:
            logger.warning(
                "suspension %s carries a %s%% deduction but user %s has no salary row",
                suspension.id, pct, suspension.user_id,
            )
        else:
            deduction = apply_percentage_deduction(salary, pct)
    return deduction


def _terminate(db: Session, profile: Profile, actor: Profile, reason: str) -> SuspensionOutcome:
    profile.is_terminated = True
    log_audit(
        db=db,
        actor_id=actor.id,
        action="EMPLOYEE_TERMINATE",
        entity_type="profiles",
        entity_id=profile.id,
        meta={"strike_number": TERMINATION_STRIKE, "reason": reason},
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("termination failed: user_id=%s", profile.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to terminate employee"
        )
    logger.info("employee terminated on strike %s: user_id=%s actor_id=%s", TERMINATION_STRIKE, profile.id, actor.id)
    return SuspensionOutcome(suspension=None, terminated=True)


def create_suspension(
    db: Session,
    user_id: int,
    reason: str,
    created_by: Profile,
    duration_days: Optional[int] = None,
    strike_number: int = 0,
    salary_deduction_percentage: Decimal = Decimal("0"),
) -> SuspensionOutcome:
    """
    Raise a suspension (or terminate on strike 3).

    Args:
        db: Database session
        user_id: Profile being disciplined
        reason: Why (required)
        created_by: Manager raising it; super-admins create it ACTIVE
        duration_days: Length of the suspension, defaults to DEFAULT_SUSPENSION_DAYS
        strike_number: 0 (warning) to 3 (termination)
        salary_deduction_percentage: Share of current salary debited on activation

    Returns:
        SuspensionOutcome

    Raises:
        HTTPException: If validation fails or the write fails
    """
    if duration_days is None:
        duration_days = settings.DEFAULT_SUSPENSION_DAYS
    salary_deduction_percentage = Decimal(str(salary_deduction_percentage))
    _validate_request(reason, duration_days, strike_number, salary_deduction_percentage)

    if not has_role(created_by, *MANAGER_ROLES):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only managers can create suspensions"
        )

    target = _get_target_profile(db, user_id)
    if target.is_terminated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Employee is already terminated"
        )

    if strike_number == TERMINATION_STRIKE:
        return _terminate(db, target, created_by, reason.strip())

    now = now_utc()
    suspension = Suspension(
        user_id=user_id,
        created_by=created_by.id,
        reason=reason.strip(),
        suspension_end=now + timedelta(days=duration_days),
        strike_number=strike_number,
        salary_deduction_percentage=salary_deduction_percentage,
        status=SuspensionStatus.PENDING.value,
    )

    self_approved = is_super_admin(created_by)
    if self_approved:
        suspension.status = SuspensionStatus.ACTIVE.value
        suspension.approved_by = created_by.id
        suspension.suspension_start = now

    deduction = Decimal("0")
    try:
        db.add(suspension)
        db.flush()
        if self_approved:
            deduction = _apply_activation(db, suspension)
        log_audit(
            db=db,
            actor_id=created_by.id,
            action="SUSPENSION_CREATE",
            entity_type="suspensions",
            entity_id=suspension.id,
            meta={
                "user_id": user_id,
                "status": suspension.status,
                "strike_number": strike_number,
                "salary_deduction_percentage": salary_deduction_percentage,
                "deduction_amount": deduction,
            },
            commit=False,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("suspension create failed: user_id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create suspension"
        )

    db.refresh(suspension)
    logger.info(
        "suspension created: suspension_id=%s user_id=%s status=%s strike=%s deduction=%s",
        suspension.id, user_id, suspension.status, strike_number, deduction,
    )
    return SuspensionOutcome(suspension=suspension, deduction_amount=deduction)


def _get_suspension_for_update(db: Session, suspension_id: int) -> Suspension:
    suspension = db.query(Suspension).filter(Suspension.id == suspension_id).with_for_update().first()
    if not suspension:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Suspension with id {suspension_id} not found"
        )
    return suspension


def approve_suspension(db: Session, suspension_id: int, approver: Profile) -> SuspensionOutcome:
    """
    Activate a pending suspension and apply its strike and deduction.

    The status check runs under a row lock, so a second approval of the same
    suspension fails with 409 instead of charging the employee twice.
    """
    if not is_super_admin(approver):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only super admins can approve suspensions"
        )

    suspension = _get_suspension_for_update(db, suspension_id)
    before_status = SuspensionStatus(suspension.status)
    if not can_transition(before_status, SuspensionStatus.ACTIVE):
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot approve suspension with status {before_status.value}"
        )

    try:
        suspension.status = SuspensionStatus.ACTIVE.value
        suspension.approved_by = approver.id
        suspension.suspension_start = now_utc()
        deduction = _apply_activation(db, suspension)
        log_audit(
            db=db,
            actor_id=approver.id,
            action="SUSPENSION_APPROVE",
            entity_type="suspensions",
            entity_id=suspension.id,
            meta={
                "user_id": suspension.user_id,
                "strike_number": suspension.strike_number,
                "deduction_amount": deduction,
            },
            commit=False,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("suspension approve failed: suspension_id=%s", suspension_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to activate suspension"
        )

    db.refresh(suspension)
    logger.info(
        "suspension status transition: suspension_id=%s before=%s after=ACTIVE action=approve",
        suspension_id, before_status.value,
    )
    return SuspensionOutcome(suspension=suspension, deduction_amount=deduction)


def reject_suspension(db: Session, suspension_id: int, actor: Profile) -> Suspension:
    """Reject a suspension. Rejecting an already rejected one changes nothing."""
    if not is_super_admin(actor):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only super admins can reject suspensions"
        )

    suspension = _get_suspension_for_update(db, suspension_id)
    before_status = SuspensionStatus(suspension.status)
    if before_status == SuspensionStatus.REJECTED:
        db.rollback()
        return suspension
    if not can_transition(before_status, SuspensionStatus.REJECTED):
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot reject suspension with status {before_status.value}"
        )

    suspension.status = SuspensionStatus.REJECTED.value
    log_audit(
        db=db,
        actor_id=actor.id,
        action="SUSPENSION_REJECT",
        entity_type="suspensions",
        entity_id=suspension.id,
        meta={"user_id": suspension.user_id},
        commit=False,
    )
    db.commit()
    db.refresh(suspension)
    logger.info(
        "suspension status transition: suspension_id=%s before=%s after=REJECTED action=reject",
        suspension_id, before_status.value,
    )
    return suspension


def complete_expired_suspensions(db: Session, now: Optional[datetime] = None) -> int:
    """
    Complete ACTIVE suspensions whose end has passed and lift the suspended
    flag from their profiles.

    Returns:
        Number of suspensions completed
    """
    now = now or now_utc()
    expired = db.query(Suspension).filter(
        Suspension.status == SuspensionStatus.ACTIVE.value,
        Suspension.suspension_end < now,
    ).with_for_update().all()
    logger.info("Found %s expired suspensions", len(expired))
    if not expired:
        return 0

    user_ids = {s.user_id for s in expired}
    for suspension in expired:
        suspension.status = SuspensionStatus.COMPLETED.value

    # Users who still have another ACTIVE suspension running stay suspended
    still_active = {
        user_id for (user_id,) in db.query(Suspension.user_id).filter(
            Suspension.status == SuspensionStatus.ACTIVE.value,
            Suspension.user_id.in_(user_ids),
            Suspension.suspension_end >= now,
        ).all()
    }
    released = user_ids - still_active
    if released:
        db.query(Profile).filter(Profile.id.in_(released)).update(
            {Profile.is_suspended: False, Profile.suspension_end_date: None},
            synchronize_session=False,
        )
    log_audit(
        db=db,
        actor_id=None,
        action="SUSPENSION_EXPIRE",
        entity_type="suspensions",
        meta={"suspension_ids": [s.id for s in expired], "released_user_ids": sorted(released)},
        commit=False,
    )
    db.commit()
    logger.info("Successfully completed %s suspensions", len(expired))
    return len(expired)


def list_suspensions(
    db: Session,
    current_user: Profile,
    status_filter: Optional[SuspensionStatus] = None,
    user_id: Optional[int] = None,
) -> List[Suspension]:
    """
    List suspensions with role-based scope.

    - Managers: all suspensions
    - Everyone else: own suspensions only
    """
    query = db.query(Suspension)
    if has_role(current_user, *MANAGER_ROLES):
        if user_id:
            query = query.filter(Suspension.user_id == user_id)
    else:
        query = query.filter(Suspension.user_id == current_user.id)
    if status_filter:
        query = query.filter(Suspension.status == status_filter.value)
    return query.order_by(Suspension.created_at.desc(), Suspension.id.desc()).all()


def get_suspension(db: Session, suspension_id: int, current_user: Profile) -> Suspension:
    suspension = db.query(Suspension).filter(Suspension.id == suspension_id).first()
    if not suspension:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Suspension not found"
        )
    if not has_role(current_user, *MANAGER_ROLES) and suspension.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return suspension
