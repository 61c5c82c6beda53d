"""
Project schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from staffdesk.models.project import ProjectStatus
from staffdesk.schemas.common import serialize_dt


class ProjectCreate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    notes: Optional[str] = None
    project_status: ProjectStatus = ProjectStatus.ACTIVE


class ProjectUpdate(BaseModel):
    customer_name: Optional[str] = Field(None, min_length=1)
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    notes: Optional[str] = None
    project_status: Optional[ProjectStatus] = None


class ProjectStatusUpdate(BaseModel):
    project_status: ProjectStatus


class ProjectOut(BaseModel):
    id: int
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    notes: Optional[str] = None
    project_status: ProjectStatus
    created_by: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)
