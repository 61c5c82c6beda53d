"""
Employee audit service - self-assessment submission and consultant review
"""
import logging
from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload
from staffdesk.core.deps import has_role
from staffdesk.models.employee_audit import EmployeeAudit, EmployeeAuditStatus
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.employee_audit import EmployeeAuditCreate, EmployeeAuditReview
from staffdesk.services.audit_service import log_audit
from staffdesk.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

# Roles that read every audit and record the consultant's review
AUDIT_REVIEW_ROLES = (Role.SUPER_ADMIN, Role.HR_MANAGER)


def is_audit_reviewer(profile: Profile) -> bool:
    return has_role(profile, *AUDIT_REVIEW_ROLES)


def submit_audit(db: Session, data: EmployeeAuditCreate, user: Profile) -> EmployeeAudit:
    """Store the current user's audit form as SUBMITTED."""
    audit = EmployeeAudit(
        user_id=user.id,
        status=EmployeeAuditStatus.SUBMITTED.value,
        submitted_at=now_utc(),
        **data.model_dump(),
    )
    db.add(audit)
    db.flush()
    log_audit(
        db=db,
        actor_id=user.id,
        action="EMPLOYEE_AUDIT_SUBMIT",
        entity_type="employee_audits",
        entity_id=audit.id,
        meta={"current_job_title": audit.current_job_title},
        commit=False,
    )
    db.commit()
    db.refresh(audit)
    return audit


def get_audit(db: Session, audit_id: int, current_user: Profile) -> EmployeeAudit:
    audit = db.query(EmployeeAudit).filter(EmployeeAudit.id == audit_id).first()
    if not audit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee audit with id {audit_id} not found"
        )
    if audit.user_id != current_user.id and not is_audit_reviewer(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return audit


def list_audits(
    db: Session,
    current_user: Profile,
    user_id: Optional[int] = None,
    status_filter: Optional[EmployeeAuditStatus] = None,
) -> List[EmployeeAudit]:
    """
    List audits, newest first.

    - Reviewers: every audit, optionally for one user
    - Everyone else: their own
    """
    query = db.query(EmployeeAudit).options(joinedload(EmployeeAudit.user))
    if is_audit_reviewer(current_user):
        if user_id:
            query = query.filter(EmployeeAudit.user_id == user_id)
    else:
        if user_id and user_id != current_user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        query = query.filter(EmployeeAudit.user_id == current_user.id)
    if status_filter:
        query = query.filter(EmployeeAudit.status == status_filter.value)
    return query.order_by(EmployeeAudit.submitted_at.desc(), EmployeeAudit.id.desc()).all()


def review_audit(db: Session, audit_id: int, data: EmployeeAuditReview, reviewer: Profile) -> EmployeeAudit:
    """
    Record the consultant's assessment and mark the audit REVIEWED.

    Raises:
        HTTPException: 404 unknown id, 409 already reviewed
    """
    audit = db.query(EmployeeAudit).filter(EmployeeAudit.id == audit_id).with_for_update().first()
    if not audit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee audit with id {audit_id} not found"
        )
    if audit.status != EmployeeAuditStatus.SUBMITTED.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Employee audit has already been reviewed"
        )

    for field, value in data.model_dump().items():
        setattr(audit, field, value)
    audit.status = EmployeeAuditStatus.REVIEWED.value
    audit.reviewed_by = reviewer.id
    audit.reviewed_at = now_utc()
    log_audit(
        db=db,
        actor_id=reviewer.id,
        action="EMPLOYEE_AUDIT_REVIEW",
        entity_type="employee_audits",
        entity_id=audit.id,
        meta={"final_rating": audit.final_rating},
        commit=False,
    )
    db.commit()
    db.refresh(audit)
    logger.info("employee audit reviewed: id=%s user_id=%s reviewer_id=%s", audit.id, audit.user_id, reviewer.id)
    return audit
