"""
Tests for inventory items and the task equipment deduction
"""
import pytest
from fastapi import HTTPException, status
from staffdesk.models.inventory import InventoryItem, InventoryItemType
from staffdesk.models.task import Task, TaskStatus
from staffdesk.services import inventory_service
from staffdesk.tests.conftest import auth_headers


@pytest.fixture
def stock(db):
    items = [
        InventoryItem(item_name="Router A", item_type=InventoryItemType.ROUTER.value, quantity=10),
        InventoryItem(item_name="Router B", item_type=InventoryItemType.ROUTER.value, quantity=10),
        InventoryItem(item_name="PoE 24V", item_type=InventoryItemType.POE_ADAPTER.value, quantity=1),
    ]
    db.add_all(items)
    db.commit()
    return items


@pytest.fixture
def completed_task(db, network_manager):
    task = Task(
        title="Mast install",
        created_by=network_manager.id,
        status=TaskStatus.COMPLETED.value,
        routers_used=2,
        poe_adapters_used=3,
        poles_used=1,
    )
    db.add(task)
    db.commit()
    return task


def test_deduction_hits_first_item_and_floors_at_zero(db, stock, completed_task):
    result = inventory_service.deduct_task_inventory(db, completed_task)

    assert result["deducted"] is True
    assert result["message"] == "Inventory deducted successfully"
    router_a, router_b, poe = stock
    db.expire_all()
    assert router_a.quantity == 8
    assert router_b.quantity == 10
    assert poe.quantity == 0
    # No pole in stock: skipped
    assert [d["type"] for d in result["deductions"]] == ["ROUTER", "POE_ADAPTER"]
    assert result["deductions"][1] == {"item_id": poe.id, "type": "POE_ADAPTER", "used": 3, "before": 1, "after": 0}


def test_deduction_runs_once(db, stock, completed_task):
    inventory_service.deduct_task_inventory(db, completed_task)
    second = inventory_service.deduct_task_inventory(db, completed_task)

    assert second == {"deducted": False, "message": "Inventory already deducted", "deductions": []}
    db.expire_all()
    assert stock[0].quantity == 8


def test_deduction_requires_completed_task(db, stock, network_manager):
    task = Task(title="Open job", created_by=network_manager.id, status=TaskStatus.IN_PROGRESS.value, routers_used=1)
    db.add(task)
    db.commit()

    with pytest.raises(HTTPException) as exc_info:
        inventory_service.deduct_task_inventory(db, task)
    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST


def test_deduct_endpoint(client, stock, completed_task, network_manager):
    headers = auth_headers(network_manager)

    first = client.post(f"/api/v1/inventory/deduct-task/{completed_task.id}", headers=headers)
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["deducted"] is True

    second = client.post(f"/api/v1/inventory/deduct-task/{completed_task.id}", headers=headers)
    assert second.json()["deducted"] is False

    missing = client.post("/api/v1/inventory/deduct-task/999", headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_item_crud(client, network_manager):
    headers = auth_headers(network_manager)

    created = client.post(
        "/api/v1/inventory",
        json={"item_name": "Galvanised pole", "item_type": "POLE", "quantity": 4, "unit_price": "15000.00"},
        headers=headers,
    )
    assert created.status_code == status.HTTP_201_CREATED
    item_id = created.json()["id"]
    assert created.json()["last_restocked_at"] is not None

    updated = client.patch(f"/api/v1/inventory/{item_id}", json={"quantity": 12}, headers=headers)
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["quantity"] == 12

    listed = client.get("/api/v1/inventory", params={"item_type": "POLE"}, headers=headers)
    assert [i["item_name"] for i in listed.json()] == ["Galvanised pole"]

    assert client.delete(f"/api/v1/inventory/{item_id}", headers=headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/v1/inventory", headers=headers).json() == []


def test_employee_cannot_manage_inventory(client, employee):
    response = client.get("/api/v1/inventory", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_negative_quantity_rejected(client, network_manager):
    response = client.post(
        "/api/v1/inventory",
        json={"item_name": "Anchor", "item_type": "ANCHOR", "quantity": -1},
        headers=auth_headers(network_manager),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
