"""
System settings endpoints
"""
from typing import Dict, List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.core.constants import (
    SETTING_COMPANY_NAME,
    SETTING_LOGIN_PAGE_SUBTITLE,
    SETTING_LOGIN_PAGE_TITLE,
)
from staffdesk.core.deps import get_db, get_current_user, require_roles
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.settings import SettingOut, SettingUpdate, SettingsBulkUpdate
from staffdesk.services import settings_service

router = APIRouter()

# Keys the login page reads before anyone is signed in
PUBLIC_SETTING_KEYS = (SETTING_COMPANY_NAME, SETTING_LOGIN_PAGE_TITLE, SETTING_LOGIN_PAGE_SUBTITLE)


@router.get("/public")
async def get_public_settings(db: Session = Depends(get_db)) -> Dict[str, str]:
    """Branding shown on the login page (no auth)"""
    values = {}
    for key in PUBLIC_SETTING_KEYS:
        value = settings_service.get_setting(db, key)
        if value is not None:
            values[key] = value
    return values


@router.get("", response_model=List[SettingOut])
async def list_settings(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return settings_service.list_settings(db)


@router.put("", response_model=List[SettingOut])
async def update_settings(
    data: SettingsBulkUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    """Save several settings; nothing is written if any value is out of range"""
    return settings_service.upsert_settings(db, data.settings)


@router.get("/{key}", response_model=SettingOut)
async def get_setting(
    key: str,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    row = settings_service.get_setting_row(db, key)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Setting '{key}' not found")
    return row


@router.put("/{key}", response_model=SettingOut)
async def update_setting(
    key: str,
    data: SettingUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_roles(Role.SUPER_ADMIN))
):
    """
    Create or update one setting

    absence_deduction_percentage must be 0-100 and working_days_per_month
    1-31.
    """
    return settings_service.upsert_setting(db, key, data.setting_value, description=data.description)
