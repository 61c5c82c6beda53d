"""
Employee audit endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user, require_roles
from staffdesk.models.employee_audit import EmployeeAuditStatus
from staffdesk.models.profile import Profile
from staffdesk.schemas.employee_audit import (
    EmployeeAuditCreate,
    EmployeeAuditListResponse,
    EmployeeAuditOut,
    EmployeeAuditReview,
)
from staffdesk.services import employee_audit_service
from staffdesk.services.employee_audit_service import AUDIT_REVIEW_ROLES

router = APIRouter()


@router.post("", response_model=EmployeeAuditOut, status_code=status.HTTP_201_CREATED)
async def submit_audit(
    data: EmployeeAuditCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return employee_audit_service.submit_audit(db, data, current_user)


@router.get("", response_model=EmployeeAuditListResponse)
async def list_audits(
    user_id: Optional[int] = Query(None),
    status_filter: Optional[EmployeeAuditStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """HR sees every audit; employees see their own"""
    items = employee_audit_service.list_audits(db, current_user, user_id=user_id, status_filter=status_filter)
    return EmployeeAuditListResponse(items=items, total=len(items))


@router.get("/{audit_id}", response_model=EmployeeAuditOut)
async def get_audit(
    audit_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return employee_audit_service.get_audit(db, audit_id, current_user)


@router.post("/{audit_id}/review", response_model=EmployeeAuditOut)
async def review_audit(
    audit_id: int,
    data: EmployeeAuditReview,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(*AUDIT_REVIEW_ROLES))
):
    return employee_audit_service.review_audit(db, audit_id, data, current_user)
