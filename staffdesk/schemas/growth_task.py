"""
Growth task schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from staffdesk.models.profile import Role
from staffdesk.schemas.common import serialize_dt


def _unique_roles(v: Optional[List[Role]]) -> Optional[List[Role]]:
    if v is None:
        return v
    if not v:
        raise ValueError("Select at least one role")
    return list(dict.fromkeys(v))


class GrowthTaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    target_roles: List[Role] = Field(..., description="Roles the task is shown to")
    is_active: bool = True

    @field_validator("target_roles")
    @classmethod
    def check_roles(cls, v):
        return _unique_roles(v)


class GrowthTaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    target_roles: Optional[List[Role]] = None
    is_active: Optional[bool] = None

    @field_validator("target_roles")
    @classmethod
    def check_roles(cls, v):
        return _unique_roles(v)


class GrowthTaskOut(BaseModel):
    id: int
    title: str
    description: str
    target_roles: List[Role]
    is_active: bool
    created_by: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class AvailableGrowthTask(BaseModel):
    """A growth task the current user can complete now"""
    id: int
    title: str
    description: str
    last_completed_at: Optional[datetime] = None

    @field_serializer("last_completed_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class GrowthTaskCompletionOut(BaseModel):
    task_id: int
    user_id: int
    completed_at: datetime
    available_again_at: datetime

    @field_serializer("completed_at", "available_again_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)
