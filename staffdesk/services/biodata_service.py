"""
Biodata service - public candidate intake and HR review
"""
import logging
from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.models.biodata import BiodataStatus, BiodataSubmission
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.biodata import BiodataCreate
from staffdesk.services.audit_service import log_audit
from staffdesk.utils.datetime_utils import now_utc
from staffdesk.utils.enums import enum_values

logger = logging.getLogger(__name__)

# Roles that read and decide submissions
BIODATA_REVIEW_ROLES = (Role.SUPER_ADMIN, Role.HR_MANAGER)


def submit_biodata(db: Session, data: BiodataCreate) -> BiodataSubmission:
    """Store a candidate's form as PENDING. No account is involved."""
    submission = BiodataSubmission(status=BiodataStatus.PENDING.value, **enum_values(data.model_dump()))
    db.add(submission)
    db.flush()
    log_audit(
        db=db,
        actor_id=None,
        action="BIODATA_SUBMIT",
        entity_type="biodata_submissions",
        entity_id=submission.id,
        meta={"candidate_name": submission.candidate_name, "company_hired_to": submission.company_hired_to},
        commit=False,
    )
    db.commit()
    db.refresh(submission)
    logger.info("biodata submitted: id=%s company=%s", submission.id, submission.company_hired_to)
    return submission


def get_submission(db: Session, submission_id: int) -> BiodataSubmission:
    submission = db.query(BiodataSubmission).filter(BiodataSubmission.id == submission_id).first()
    if not submission:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Biodata submission with id {submission_id} not found"
        )
    return submission


def list_submissions(db: Session, status_filter: Optional[BiodataStatus] = None) -> List[BiodataSubmission]:
    """Newest first."""
    query = db.query(BiodataSubmission)
    if status_filter:
        query = query.filter(BiodataSubmission.status == status_filter.value)
    return query.order_by(BiodataSubmission.created_at.desc(), BiodataSubmission.id.desc()).all()


def review_submission(
    db: Session,
    submission_id: int,
    decision: BiodataStatus,
    reviewer: Profile,
    notes: Optional[str] = None,
) -> BiodataSubmission:
    """
    Approve or reject a PENDING submission.

    Raises:
        HTTPException: 400 for PENDING as a decision, 404 unknown id,
            409 if the submission was already decided
    """
    if decision == BiodataStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Decision must be APPROVED or REJECTED"
        )
    submission = db.query(BiodataSubmission).filter(
        BiodataSubmission.id == submission_id
    ).with_for_update().first()
    if not submission:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Biodata submission with id {submission_id} not found"
        )
    if submission.status != BiodataStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Submission already {submission.status}"
        )

    submission.status = decision.value
    submission.notes = notes.strip() if notes and notes.strip() else None
    submission.reviewed_by = reviewer.id
    submission.reviewed_at = now_utc()
    log_audit(
        db=db,
        actor_id=reviewer.id,
        action=f"BIODATA_{decision.value}",
        entity_type="biodata_submissions",
        entity_id=submission.id,
        meta={"notes": submission.notes},
        commit=False,
    )
    db.commit()
    db.refresh(submission)
    logger.info(
        "biodata review: id=%s status=%s reviewer_id=%s", submission.id, submission.status, reviewer.id
    )
    return submission
