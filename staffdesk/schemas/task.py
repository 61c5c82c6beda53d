"""
Task schemas
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from staffdesk.models.task import TaskPriority, TaskStatus
from staffdesk.schemas.common import serialize_dt
from staffdesk.schemas.profile import ProfileRef


class _TaskFields(BaseModel):
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[int] = None
    project_id: Optional[int] = None
    due_date: Optional[date] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    installation_address: Optional[str] = None
    routers_used: int = Field(0, ge=0)
    poe_adapters_used: int = Field(0, ge=0)
    poles_used: int = Field(0, ge=0)
    anchors_used: int = Field(0, ge=0)


class TaskCreate(_TaskFields):
    """Schema for creating a task"""
    title: str = Field(..., min_length=1, description="Task title")


class TaskUpdate(BaseModel):
    """Schema for editing task details (status has its own endpoint)"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[int] = None
    project_id: Optional[int] = None
    due_date: Optional[date] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    installation_address: Optional[str] = None
    routers_used: Optional[int] = Field(None, ge=0)
    poe_adapters_used: Optional[int] = Field(None, ge=0)
    poles_used: Optional[int] = Field(None, ge=0)
    anchors_used: Optional[int] = Field(None, ge=0)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus = Field(..., description="Requested status")


class TaskReviewRequest(BaseModel):
    """Approve or reject a task that is under review"""
    approve: bool = Field(..., description="True to approve, False to send back")
    reason: Optional[str] = Field(None, description="Required when rejecting")


class TaskOut(BaseModel):
    """Schema for task output"""
    id: int
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    assigned_to: Optional[int] = None
    assignee: Optional[ProfileRef] = None
    created_by: int
    project_id: Optional[int] = None
    due_date: Optional[date] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    installation_address: Optional[str] = None
    routers_used: int
    poe_adapters_used: int
    poles_used: int
    anchors_used: int
    inventory_deducted: bool
    completed_at: Optional[datetime] = None
    is_paid: bool = False
    paid_at: Optional[datetime] = None
    paid_by: Optional[int] = None
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("completed_at", "paid_at", "deleted_at", "created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class TaskPaymentUpdate(BaseModel):
    """Mark a completed task paid or unpaid"""
    is_paid: bool


class TaskListResponse(BaseModel):
    items: List[TaskOut]
    total: int


class TaskMessageCreate(BaseModel):
    message: str = Field(..., min_length=1)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class TaskMessageOut(BaseModel):
    id: int
    task_id: int
    sender_id: int
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class TaskAttachmentCreate(BaseModel):
    """Attachment metadata; the file itself lives in object storage"""
    file_name: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1, description="Object key in the task-images bucket")


class TaskAttachmentOut(BaseModel):
    id: int
    task_id: int
    uploaded_by: int
    file_name: str
    file_path: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)
