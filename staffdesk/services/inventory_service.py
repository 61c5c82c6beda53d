"""
Inventory service - stock items and the equipment deduction for completed tasks
"""
import logging
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.models.inventory import InventoryItem, InventoryItemType
from staffdesk.models.task import Task, TaskStatus
from staffdesk.services.audit_service import log_audit
from staffdesk.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

# Task usage column -> inventory type it consumes
TASK_EQUIPMENT_COLUMNS = (
    ("routers_used", InventoryItemType.ROUTER),
    ("poe_adapters_used", InventoryItemType.POE_ADAPTER),
    ("poles_used", InventoryItemType.POLE),
    ("anchors_used", InventoryItemType.ANCHOR),
)


def list_items(db: Session, item_type: Optional[InventoryItemType] = None) -> List[InventoryItem]:
    query = db.query(InventoryItem)
    if item_type:
        query = query.filter(InventoryItem.item_type == item_type.value)
    return query.order_by(InventoryItem.item_name).all()


def get_item(db: Session, item_id: int) -> InventoryItem:
    item = db.query(InventoryItem).filter(InventoryItem.id == item_id).first()
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Inventory item with id {item_id} not found"
        )
    return item


def create_item(db: Session, data: Dict, actor_id: int) -> InventoryItem:
    item = InventoryItem(**data)
    if item.quantity:
        item.last_restocked_at = now_utc()
    db.add(item)
    db.flush()
    log_audit(
        db=db,
        actor_id=actor_id,
        action="INVENTORY_CREATE",
        entity_type="inventory_items",
        entity_id=item.id,
        meta=data,
        commit=False,
    )
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, item_id: int, data: Dict, actor_id: int) -> InventoryItem:
    """Update an item; every update stamps last_restocked_at."""
    item = get_item(db, item_id)
    before_quantity = item.quantity
    for field, value in data.items():
        setattr(item, field, value)
    item.last_restocked_at = now_utc()
    log_audit(
        db=db,
        actor_id=actor_id,
        action="INVENTORY_UPDATE",
        entity_type="inventory_items",
        entity_id=item.id,
        meta={"before_quantity": before_quantity, **data},
        commit=False,
    )
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, item_id: int, actor_id: int) -> None:
    item = get_item(db, item_id)
    db.delete(item)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="INVENTORY_DELETE",
        entity_type="inventory_items",
        entity_id=item_id,
        meta={"item_name": item.item_name},
        commit=False,
    )
    db.commit()


def deduct_task_inventory(db: Session, task: Task, commit: bool = True) -> Dict:
    """
    Subtract the equipment a completed task used from stock.

    For each equipment type the first item of that type is reduced,
    floored at zero; types without an item in stock are skipped. The task
    is then flagged so a second call does nothing.

    Args:
        db: Database session
        task: Task to settle (must be COMPLETED)
        commit: Commit here; pass False to join the caller's unit of work

    Returns:
        Dict with "deducted" flag, "message" and per-item "deductions"

    Raises:
        HTTPException: 400 if the task is not completed
    """
    if task.inventory_deducted:
        logger.info("Inventory already deducted for task %s", task.id)
        return {"deducted": False, "message": "Inventory already deducted", "deductions": []}

    if task.status != TaskStatus.COMPLETED.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Task must be completed to deduct inventory"
        )

    deductions = []
    for column, item_type in TASK_EQUIPMENT_COLUMNS:
        used = getattr(task, column) or 0
        if used <= 0:
            continue
        item = db.query(InventoryItem).filter(
            InventoryItem.item_type == item_type.value
        ).order_by(InventoryItem.id).with_for_update().first()
        if item is None:
            logger.warning("no %s in inventory, skipping %s used on task %s", item_type.value, used, task.id)
            continue
        before = item.quantity
        item.quantity = max(0, before - used)
        deductions.append({"item_id": item.id, "type": item_type.value, "used": used, "before": before, "after": item.quantity})

    task.inventory_deducted = True
    log_audit(
        db=db,
        actor_id=None,
        action="INVENTORY_TASK_DEDUCT",
        entity_type="tasks",
        entity_id=task.id,
        meta={"deductions": deductions},
        commit=False,
    )
    if commit:
        db.commit()
    else:
        db.flush()
    logger.info("inventory deducted for task %s: %s", task.id, deductions)
    return {"deducted": True, "message": "Inventory deducted successfully", "deductions": deductions}


def deduct_inventory_for_task(db: Session, task_id: int) -> Dict:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return deduct_task_inventory(db, task)
