"""
System settings service - key/value configuration rows
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.core.constants import (
    DEFAULT_SYSTEM_SETTINGS,
    SETTING_ABSENCE_DEDUCTION_PERCENTAGE,
    SETTING_WORKING_DAYS_PER_MONTH,
)
from staffdesk.models.system_setting import SystemSetting

logger = logging.getLogger(__name__)


def _validate_setting(key: str, value: str) -> str:
    """Range-check the numeric settings the payroll code depends on."""
    if key == SETTING_ABSENCE_DEDUCTION_PERCENTAGE:
        try:
            pct = Decimal(value)
        except InvalidOperation:
            pct = None
        # NaN and Infinity parse but cannot be range-checked
        if pct is None or not pct.is_finite():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="absence_deduction_percentage must be a number"
            )
        if pct < 0 or pct > 100:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Deduction percentage must be between 0 and 100"
            )
        return str(pct)
    if key == SETTING_WORKING_DAYS_PER_MONTH:
        try:
            days = int(value)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="working_days_per_month must be an integer"
            )
        if days < 1 or days > 31:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Working days must be between 1 and 31"
            )
        return str(days)
    return value


def list_settings(db: Session) -> List[SystemSetting]:
    return db.query(SystemSetting).order_by(SystemSetting.setting_key).all()


def get_setting_row(db: Session, key: str) -> Optional[SystemSetting]:
    return db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()


def get_setting(db: Session, key: str, default: Optional[str] = None) -> Optional[str]:
    row = get_setting_row(db, key)
    if row is None:
        return default
    return row.setting_value


def get_decimal_setting(db: Session, key: str) -> Decimal:
    """Numeric setting, falling back to the seeded default when absent."""
    default = DEFAULT_SYSTEM_SETTINGS[key][0]
    return Decimal(get_setting(db, key, default))


def upsert_setting(
    db: Session,
    key: str,
    value: str,
    description: Optional[str] = None,
    commit: bool = True,
) -> SystemSetting:
    """Insert or update a setting keyed on setting_key."""
    value = _validate_setting(key, value)
    row = db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()
    if row is None:
        row = SystemSetting(setting_key=key, setting_value=value, description=description)
        db.add(row)
    else:
        row.setting_value = value
        if description is not None:
            row.description = description
    if commit:
        db.commit()
        db.refresh(row)
    else:
        db.flush()
    return row


def upsert_settings(db: Session, values: Dict[str, str]) -> List[SystemSetting]:
    """Save several settings together; nothing is written if any value is invalid."""
    for key, value in values.items():
        _validate_setting(key, value)
    rows = [upsert_setting(db, key, value, commit=False) for key, value in values.items()]
    db.commit()
    for row in rows:
        db.refresh(row)
    logger.info("system settings updated: keys=%s", sorted(values))
    return rows


def seed_default_settings(db: Session) -> None:
    """Create the default settings that do not exist yet."""
    existing = {key for (key,) in db.query(SystemSetting.setting_key).all()}
    for key, (value, description) in DEFAULT_SYSTEM_SETTINGS.items():
        if key not in existing:
            db.add(SystemSetting(setting_key=key, setting_value=value, description=description))
            logger.info("Seeded system setting %s=%s", key, value)
    db.commit()
