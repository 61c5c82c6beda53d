"""
Suspension endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user, require_roles
from staffdesk.models.profile import Profile, Role
from staffdesk.models.suspension import SuspensionStatus
from staffdesk.schemas.suspension import SuspensionActionResponse, SuspensionCreate, SuspensionOut
from staffdesk.services import suspension_service
from staffdesk.services.suspension_service import SuspensionOutcome

router = APIRouter()


def _action_response(outcome: SuspensionOutcome) -> SuspensionActionResponse:
    return SuspensionActionResponse(
        message=outcome.message,
        terminated=outcome.terminated,
        deduction_amount=outcome.deduction_amount,
        suspension=SuspensionOut.model_validate(outcome.suspension) if outcome.suspension else None,
    )


@router.post("", response_model=SuspensionActionResponse, status_code=status.HTTP_201_CREATED)
async def create_suspension(
    data: SuspensionCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.HR_MANAGER, Role.NETWORK_MANAGER))
):
    """
    Raise a suspension

    - strike_number 3 terminates the employee; no suspension is stored
    - super-admins create it ACTIVE with its strike and deduction applied
    - anyone else creates it PENDING for super-admin approval
    """
    outcome = suspension_service.create_suspension(
        db,
        user_id=data.user_id,
        reason=data.reason,
        created_by=current_user,
        duration_days=data.duration_days,
        strike_number=data.strike_number,
        salary_deduction_percentage=data.salary_deduction_percentage,
    )
    return _action_response(outcome)


@router.get("", response_model=List[SuspensionOut])
async def list_suspensions(
    status_filter: Optional[SuspensionStatus] = Query(None, alias="status"),
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Managers see every suspension; employees see their own"""
    return suspension_service.list_suspensions(db, current_user, status_filter=status_filter, user_id=user_id)


@router.get("/{suspension_id}", response_model=SuspensionOut)
async def get_suspension(
    suspension_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return suspension_service.get_suspension(db, suspension_id, current_user)


@router.post("/{suspension_id}/approve", response_model=SuspensionActionResponse)
async def approve_suspension(
    suspension_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    """
    Activate a suspension (super-admin only)

    Applies the strike, the suspended flag and the salary deduction in one
    transaction. Approving an already active suspension returns 409.
    """
    outcome = suspension_service.approve_suspension(db, suspension_id, current_user)
    return _action_response(outcome)


@router.post("/{suspension_id}/reject", response_model=SuspensionOut)
async def reject_suspension(
    suspension_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    return suspension_service.reject_suspension(db, suspension_id, current_user)
