"""
Biodata endpoints: public intake form and HR review
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, require_roles
from staffdesk.models.biodata import BiodataStatus
from staffdesk.models.profile import Profile
from staffdesk.schemas.biodata import (
    BiodataCreate,
    BiodataListResponse,
    BiodataOut,
    BiodataReceipt,
    BiodataReview,
)
from staffdesk.services import biodata_service
from staffdesk.services.biodata_service import BIODATA_REVIEW_ROLES

router = APIRouter()

_reviewers = require_roles(*BIODATA_REVIEW_ROLES)


@router.post("", response_model=BiodataReceipt, status_code=status.HTTP_201_CREATED)
async def submit_biodata(
    data: BiodataCreate,
    db: Session = Depends(get_db)
):
    """
    Submit a candidate biodata form (no auth)

    Documents are uploaded to object storage first; only their keys are sent here.
    """
    submission = biodata_service.submit_biodata(db, data)
    return BiodataReceipt(id=submission.id, status=submission.status)


@router.get("", response_model=BiodataListResponse)
async def list_submissions(
    status_filter: Optional[BiodataStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_reviewers)
):
    items = biodata_service.list_submissions(db, status_filter=status_filter)
    return BiodataListResponse(items=items, total=len(items))


@router.get("/{submission_id}", response_model=BiodataOut)
async def get_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_reviewers)
):
    return biodata_service.get_submission(db, submission_id)


@router.post("/{submission_id}/review", response_model=BiodataOut)
async def review_submission(
    submission_id: int,
    data: BiodataReview,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_reviewers)
):
    """Approve or reject a pending submission, with optional notes"""
    return biodata_service.review_submission(db, submission_id, data.status, current_user, notes=data.notes)
