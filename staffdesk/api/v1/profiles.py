"""
Profile (staff account) endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user, require_roles
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.profile import ProfileCreate, ProfileUpdate, ProfileOut, PasswordReset
from staffdesk.services import profile_service

router = APIRouter()

_staff_viewers = require_roles(Role.HR_MANAGER, Role.NETWORK_MANAGER, Role.PROJECT_MANAGER)


@router.get("/me", response_model=ProfileOut)
async def get_me(current_user: Profile = Depends(get_current_user)):
    """Current user's profile"""
    return current_user


@router.get("", response_model=List[ProfileOut])
async def list_profiles(
    role: Optional[Role] = Query(None, description="Filter by role"),
    include_terminated: bool = Query(True),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_staff_viewers)
):
    return profile_service.list_profiles(db, role=role, include_terminated=include_terminated)


@router.post("", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile_data: ProfileCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.HR_MANAGER))
):
    """
    Create a staff account

    HR managers may create employees, network managers and project managers;
    super-admins may create any role.
    """
    return profile_service.create_profile(db, profile_data, current_user)


@router.get("/{profile_id}", response_model=ProfileOut)
async def get_profile(
    profile_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_staff_viewers)
):
    return profile_service.get_profile(db, profile_id)


@router.patch("/{profile_id}", response_model=ProfileOut)
async def update_profile(
    profile_id: int,
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.HR_MANAGER))
):
    return profile_service.update_profile(db, profile_id, profile_data, current_user)


@router.post("/{profile_id}/reset-password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    profile_id: int,
    data: PasswordReset,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.HR_MANAGER))
):
    profile_service.reset_password(db, profile_id, data.new_password, current_user)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    profile_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    """Delete a staff account and its salary, attendance and suspensions (super-admin only)"""
    profile_service.delete_profile(db, profile_id, current_user)
