"""
System settings schemas
"""
from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from staffdesk.schemas.common import serialize_dt


class SettingOut(BaseModel):
    id: int
    setting_key: str
    setting_value: str
    description: Optional[str] = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class SettingUpdate(BaseModel):
    """Schema for updating one setting"""
    setting_value: str = Field(..., description="New value")
    description: Optional[str] = None


class SettingsBulkUpdate(BaseModel):
    """Schema for saving several settings at once"""
    settings: Dict[str, str] = Field(..., min_length=1, description="setting_key -> value")
