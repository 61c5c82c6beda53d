"""
Profile schemas
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from staffdesk.models.profile import Role
from staffdesk.core.security import validate_password
from staffdesk.schemas.common import serialize_dt


class ProfileCreate(BaseModel):
    """Schema for creating a staff account"""
    email: str = Field(..., min_length=3, description="Login e-mail (unique)")
    full_name: str = Field(..., min_length=1, description="Full name")
    password: str = Field(..., description="Initial password")
    role: Role = Field(default=Role.EMPLOYEE, description="Account role")
    phone: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid e-mail address")
        return v

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, v):
        return validate_password(v)


class ProfileUpdate(BaseModel):
    """Schema for updating a profile; email changes update the login e-mail too"""
    email: Optional[str] = None
    full_name: Optional[str] = Field(None, min_length=1)
    role: Optional[Role] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    is_approved: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid e-mail address")
        return v


class PasswordReset(BaseModel):
    """Schema for password reset"""
    new_password: str = Field(..., description="New password")

    @field_validator("new_password", mode="before")
    @classmethod
    def check_password(cls, v):
        return validate_password(v)


class ProfileOut(BaseModel):
    """Schema for profile output"""
    id: int
    email: str
    full_name: str
    role: Role
    phone: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    is_approved: bool
    strike_count: int
    is_suspended: bool
    suspension_end_date: Optional[datetime] = None
    is_terminated: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("suspension_end_date", "created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class ProfileRef(BaseModel):
    """Minimal profile for nested output"""
    id: int
    full_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)
