"""
Inventory item model
"""
from decimal import Decimal
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, CheckConstraint
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class InventoryItemType(str, enum.Enum):
    ROUTER = "ROUTER"
    POE_ADAPTER = "POE_ADAPTER"
    POLE = "POLE"
    ANCHOR = "ANCHOR"
    OTHER = "OTHER"


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    item_name = Column(String, nullable=False)
    item_type = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    last_restocked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_items_quantity_non_negative"),
    )
