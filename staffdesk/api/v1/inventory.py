"""
Inventory endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, require_roles
from staffdesk.models.inventory import InventoryItemType
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.inventory import (
    InventoryDeductionResponse,
    InventoryItemCreate,
    InventoryItemOut,
    InventoryItemUpdate,
)
from staffdesk.services import inventory_service
from staffdesk.utils.enums import enum_values

router = APIRouter()

_stock_keepers = require_roles(Role.NETWORK_MANAGER, Role.PROJECT_MANAGER)


@router.get("", response_model=List[InventoryItemOut])
async def list_items(
    item_type: Optional[InventoryItemType] = Query(None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_stock_keepers)
):
    return inventory_service.list_items(db, item_type=item_type)


@router.post("", response_model=InventoryItemOut, status_code=status.HTTP_201_CREATED)
async def create_item(
    data: InventoryItemCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_stock_keepers)
):
    return inventory_service.create_item(db, enum_values(data.model_dump()), current_user.id)


@router.patch("/{item_id}", response_model=InventoryItemOut)
async def update_item(
    item_id: int,
    data: InventoryItemUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_stock_keepers)
):
    """Update an item; stamps last_restocked_at"""
    return inventory_service.update_item(
        db, item_id, enum_values(data.model_dump(exclude_unset=True)), current_user.id
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_stock_keepers)
):
    inventory_service.delete_item(db, item_id, current_user.id)


@router.post("/deduct-task/{task_id}", response_model=InventoryDeductionResponse)
async def deduct_task_inventory(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_stock_keepers)
):
    """
    Deduct the equipment a completed task used

    Returns 400 unless the task is COMPLETED; repeating it changes nothing.
    """
    return inventory_service.deduct_inventory_for_task(db, task_id)
