"""
Salary schemas
"""
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from staffdesk.schemas.common import serialize_dt


class SalarySetRequest(BaseModel):
    """Schema for setting a base salary"""
    base_salary: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Monthly base salary")


class SalaryOut(BaseModel):
    """Schema for salary output"""
    id: int
    user_id: int
    base_salary: Decimal
    current_salary: Decimal
    total_deductions: Decimal
    daily_rate: Decimal
    currency: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)
