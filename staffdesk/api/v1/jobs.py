"""
Scheduled job endpoints (super-admin or cron caller)
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, require_roles
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.attendance import DailyProcessRequest, DailyProcessResponse
from staffdesk.schemas.suspension import ExpiryRunResponse
from staffdesk.services import attendance_service, payroll_service, suspension_service

router = APIRouter()


@router.post("/process-daily-attendance", response_model=DailyProcessResponse)
async def process_daily_attendance(
    data: Optional[DailyProcessRequest] = None,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    """Charge the absence deduction to everyone without attendance for the day"""
    counts = attendance_service.process_daily_attendance(db, data.target_date if data else None)
    return DailyProcessResponse(
        message=(
            f"Successfully processed {counts['processed']} employees, "
            f"{counts['absent']} marked absent with deductions"
        ),
        **counts,
    )


@router.post("/recalculate-deductions")
async def recalculate_deductions(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    """Recompute every absence deduction with the current percentage"""
    result = payroll_service.recalculate_deductions(db)
    return {"success": True, **result}


@router.post("/reset-monthly-salary")
async def reset_monthly_salary(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    result = payroll_service.reset_monthly_salary(db)
    return {
        "success": True,
        "message": f"Successfully reset {result['reset']} employee salaries for the new month",
        **result,
    }


@router.post("/check-suspension-expiry", response_model=ExpiryRunResponse)
async def check_suspension_expiry(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    completed = suspension_service.complete_expired_suspensions(db)
    return ExpiryRunResponse(completed=completed, message=f"Completed {completed} expired suspensions")
