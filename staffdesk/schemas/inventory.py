"""
Inventory schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from staffdesk.models.inventory import InventoryItemType
from staffdesk.schemas.common import serialize_dt


class InventoryItemCreate(BaseModel):
    item_name: str = Field(..., min_length=1)
    item_type: InventoryItemType
    description: Optional[str] = None
    quantity: int = Field(0, ge=0)
    unit_price: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class InventoryItemUpdate(BaseModel):
    item_name: Optional[str] = Field(None, min_length=1)
    item_type: Optional[InventoryItemType] = None
    description: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class InventoryItemOut(BaseModel):
    id: int
    item_name: str
    item_type: InventoryItemType
    description: Optional[str] = None
    quantity: int
    unit_price: Decimal
    last_restocked_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("last_restocked_at", "created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class InventoryDeduction(BaseModel):
    item_id: int
    type: InventoryItemType
    used: int
    before: int
    after: int


class InventoryDeductionResponse(BaseModel):
    deducted: bool
    message: str
    deductions: List[InventoryDeduction] = []
