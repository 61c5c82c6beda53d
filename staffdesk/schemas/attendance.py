"""
Attendance schemas
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from staffdesk.models.attendance import AttendanceStatus
from staffdesk.schemas.common import serialize_dt


class AttendanceOut(BaseModel):
    """Schema for attendance output. Datetimes in UTC."""
    id: int
    user_id: int
    date: date
    status: AttendanceStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    deduction_amount: Decimal

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("clock_in", "clock_out", when_used="always")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)


class AttendanceListResponse(BaseModel):
    """Schema for attendance list response"""
    items: List[AttendanceOut]
    total: int


class DailyProcessRequest(BaseModel):
    """Schema for running the daily absence job"""
    target_date: Optional[date] = Field(None, description="Day to process (defaults to today, UTC)")


class DailyProcessResponse(BaseModel):
    processed: int
    absent: int
    skipped: int
    failed: int
    message: str
