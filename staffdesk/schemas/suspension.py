"""
Suspension schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from staffdesk.core.constants import MAX_SUSPENSION_DAYS
from staffdesk.models.suspension import SuspensionStatus
from staffdesk.schemas.common import serialize_dt
from staffdesk.schemas.profile import ProfileRef


class SuspensionCreate(BaseModel):
    """Schema for raising a suspension (strike 3 terminates instead)"""
    user_id: int = Field(..., description="Employee being suspended")
    reason: str = Field(..., min_length=1, description="Reason (required)")
    duration_days: Optional[int] = Field(
        None, gt=0, le=MAX_SUSPENSION_DAYS, description="Length in days (defaults to server setting)"
    )
    strike_number: int = Field(0, ge=0, le=3, description="0 = warning, 3 = termination")
    salary_deduction_percentage: Decimal = Field(
        Decimal("0"), ge=0, le=100, description="Share of current salary deducted on activation"
    )

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Reason is required")
        return v.strip()


class SuspensionOut(BaseModel):
    """Schema for suspension output"""
    id: int
    user_id: int
    user: Optional[ProfileRef] = None
    created_by: int
    approved_by: Optional[int] = None
    status: SuspensionStatus
    suspension_start: Optional[datetime] = None
    suspension_end: datetime
    reason: str
    strike_number: int
    salary_deduction_percentage: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("suspension_start", "suspension_end", "created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class SuspensionActionResponse(BaseModel):
    """Result of create/approve: either a suspension or a termination"""
    message: str
    terminated: bool = False
    deduction_amount: Decimal = Decimal("0")
    suspension: Optional[SuspensionOut] = None


class ExpiryRunResponse(BaseModel):
    completed: int
    message: str
