"""
Salary endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user, require_roles
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.salary import SalaryOut, SalarySetRequest
from staffdesk.services import salary_service

router = APIRouter()


@router.get("/me", response_model=SalaryOut)
async def get_my_salary(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return salary_service.get_salary_or_404(db, current_user.id)


@router.get("/{user_id}", response_model=SalaryOut)
async def get_salary(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.HR_MANAGER))
):
    return salary_service.get_salary_or_404(db, user_id)


@router.put("/{user_id}", response_model=SalaryOut)
async def set_salary(
    user_id: int,
    data: SalarySetRequest,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.HR_MANAGER))
):
    """
    Set the base salary

    daily_rate = base_salary / working_days_per_month. Existing deductions
    are kept.
    """
    return salary_service.set_salary(db, user_id, data.base_salary, current_user.id)


@router.post("/{user_id}/clear-deductions", response_model=SalaryOut)
async def clear_deductions(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.HR_MANAGER))
):
    """Restore current salary to base and zero the attendance deductions"""
    return salary_service.clear_deductions(db, user_id, current_user.id)
