"""
Tests for task status flow, review, the bin and task messages
"""
import pytest
from fastapi import HTTPException, status
from staffdesk.models.inventory import InventoryItem, InventoryItemType
from staffdesk.models.task import Task, TaskMessage, TaskStatus
from staffdesk.schemas.task import TaskCreate
from staffdesk.services import task_service
from staffdesk.tests.conftest import auth_headers


@pytest.fixture
def task(db, network_manager, employee):
    return task_service.create_task(
        db,
        TaskCreate(title="Install router at Lekki", assigned_to=employee.id, routers_used=1),
        network_manager,
    )


def _set_status(db, task, value):
    task.status = value.value
    db.commit()


def test_create_task_endpoint(client, network_manager, employee):
    response = client.post(
        "/api/v1/tasks",
        json={"title": "Survey site", "assigned_to": employee.id, "priority": "HIGH"},
        headers=auth_headers(network_manager),
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "PENDING"
    assert data["priority"] == "HIGH"
    assert data["created_by"] == network_manager.id


def test_employee_cannot_create_task(client, employee):
    response = client.post("/api/v1/tasks", json={"title": "Nope"}, headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_assignee_completion_goes_to_review(db, task, employee):
    _set_status(db, task, TaskStatus.IN_PROGRESS)

    updated = task_service.update_task_status(db, task.id, TaskStatus.COMPLETED, employee)

    assert updated.status == TaskStatus.UNDER_REVIEW.value
    assert updated.completed_at is None


def test_assignee_cannot_cancel(db, task, employee):
    with pytest.raises(HTTPException) as exc_info:
        task_service.update_task_status(db, task.id, TaskStatus.CANCELLED, employee)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN


def test_other_employee_cannot_touch_task(db, task, make_profile):
    stranger = make_profile()
    with pytest.raises(HTTPException) as exc_info:
        task_service.update_task_status(db, task.id, TaskStatus.IN_PROGRESS, stranger)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN


def test_invalid_transition_is_conflict(db, task, network_manager):
    with pytest.raises(HTTPException) as exc_info:
        task_service.update_task_status(db, task.id, TaskStatus.COMPLETED, network_manager)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_same_status_is_noop(db, task, employee):
    unchanged = task_service.update_task_status(db, task.id, TaskStatus.PENDING, employee)
    assert unchanged.status == TaskStatus.PENDING.value


def test_manager_completion_deducts_inventory(db, task, network_manager):
    db.add(InventoryItem(item_name="TP-Link", item_type=InventoryItemType.ROUTER.value, quantity=5))
    _set_status(db, task, TaskStatus.IN_PROGRESS)

    done = task_service.update_task_status(db, task.id, TaskStatus.COMPLETED, network_manager)

    assert done.status == TaskStatus.COMPLETED.value
    assert done.completed_at is not None
    assert done.inventory_deducted is True
    assert db.query(InventoryItem).one().quantity == 4


def test_review_approve(db, task, project_manager):
    _set_status(db, task, TaskStatus.UNDER_REVIEW)

    approved = task_service.review_task(db, task.id, True, project_manager)

    assert approved.status == TaskStatus.COMPLETED.value
    assert approved.completed_at is not None


def test_review_reject_posts_reason(db, task, project_manager):
    _set_status(db, task, TaskStatus.UNDER_REVIEW)

    rejected = task_service.review_task(db, task.id, False, project_manager, reason="Cable not clipped")

    assert rejected.status == TaskStatus.IN_PROGRESS.value
    message = db.query(TaskMessage).filter(TaskMessage.task_id == task.id).one()
    assert message.message == "Task rejected: Cable not clipped"
    assert message.sender_id == project_manager.id


def test_review_reject_requires_reason(db, task, project_manager):
    _set_status(db, task, TaskStatus.UNDER_REVIEW)
    with pytest.raises(HTTPException) as exc_info:
        task_service.review_task(db, task.id, False, project_manager, reason="  ")
    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
    db.expire_all()
    assert db.get(Task, task.id).status == TaskStatus.UNDER_REVIEW.value


def test_review_requires_under_review(db, task, project_manager):
    with pytest.raises(HTTPException) as exc_info:
        task_service.review_task(db, task.id, True, project_manager)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_bin_restore_and_permanent_delete(client, db, task, network_manager, super_admin):
    headers = auth_headers(network_manager)

    binned = client.delete(f"/api/v1/tasks/{task.id}", headers=headers)
    assert binned.status_code == status.HTTP_200_OK
    assert binned.json()["is_deleted"] is True
    assert client.get("/api/v1/tasks", headers=headers).json()["total"] == 0
    assert client.get("/api/v1/tasks/bin", headers=headers).json()["total"] == 1

    restored = client.post(f"/api/v1/tasks/{task.id}/restore", headers=headers)
    assert restored.status_code == status.HTTP_200_OK
    assert restored.json()["deleted_by"] is None

    again = client.post(f"/api/v1/tasks/{task.id}/restore", headers=headers)
    assert again.status_code == status.HTTP_409_CONFLICT

    # Permanent delete needs the task in the bin and a super-admin
    not_binned = client.delete(f"/api/v1/tasks/{task.id}/permanent", headers=auth_headers(super_admin))
    assert not_binned.status_code == status.HTTP_409_CONFLICT
    client.delete(f"/api/v1/tasks/{task.id}", headers=headers)
    denied = client.delete(f"/api/v1/tasks/{task.id}/permanent", headers=headers)
    assert denied.status_code == status.HTTP_403_FORBIDDEN
    gone = client.delete(f"/api/v1/tasks/{task.id}/permanent", headers=auth_headers(super_admin))
    assert gone.status_code == status.HTTP_204_NO_CONTENT
    assert db.query(Task).count() == 0


def test_only_deleter_or_super_admin_restores(db, task, network_manager, project_manager, super_admin):
    task_service.soft_delete_task(db, task.id, network_manager)

    with pytest.raises(HTTPException) as exc_info:
        task_service.restore_task(db, task.id, project_manager)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN

    restored = task_service.restore_task(db, task.id, super_admin)
    assert restored.is_deleted is False


def test_binned_task_rejects_status_change(db, task, network_manager):
    task_service.soft_delete_task(db, task.id, network_manager)
    with pytest.raises(HTTPException) as exc_info:
        task_service.update_task_status(db, task.id, TaskStatus.IN_PROGRESS, network_manager)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_employee_lists_only_assigned_tasks(client, db, task, network_manager, make_profile):
    other = make_profile()
    task_service.create_task(db, TaskCreate(title="Other job", assigned_to=other.id), network_manager)

    response = client.get("/api/v1/tasks", headers=auth_headers(other))
    assert [t["title"] for t in response.json()["items"]] == ["Other job"]
    assert client.get("/api/v1/tasks/bin", headers=auth_headers(other)).status_code == status.HTTP_403_FORBIDDEN


def test_messages_refresh_after_post(client, task, employee, network_manager):
    url = f"/api/v1/tasks/{task.id}/messages"
    assert client.get(url, headers=auth_headers(employee)).json() == []

    posted = client.post(url, json={"message": "On my way"}, headers=auth_headers(employee))
    assert posted.status_code == status.HTTP_201_CREATED

    messages = client.get(url, headers=auth_headers(network_manager)).json()
    assert [m["message"] for m in messages] == ["On my way"]


def test_attachments(client, task, employee):
    url = f"/api/v1/tasks/{task.id}/attachments"
    created = client.post(
        url,
        json={"file_name": "site.jpg", "file_path": f"tasks/{task.id}/site.jpg"},
        headers=auth_headers(employee),
    )
    assert created.status_code == status.HTTP_201_CREATED

    listed = client.get(url, headers=auth_headers(employee)).json()
    assert [a["file_name"] for a in listed] == ["site.jpg"]

    deleted = client.delete(f"{url}/{created.json()['id']}", headers=auth_headers(employee))
    assert deleted.status_code == status.HTTP_204_NO_CONTENT


def test_mark_completed_task_paid_and_unpaid(db, task, hr_manager):
    _set_status(db, task, TaskStatus.COMPLETED)

    paid = task_service.mark_task_paid(db, task.id, True, hr_manager)
    assert paid.is_paid is True
    assert paid.paid_by == hr_manager.id
    assert paid.paid_at is not None

    unpaid = task_service.mark_task_paid(db, task.id, False, hr_manager)
    assert unpaid.is_paid is False
    assert unpaid.paid_at is None
    assert unpaid.paid_by is None


def test_only_completed_tasks_can_be_paid(db, task, hr_manager):
    _set_status(db, task, TaskStatus.UNDER_REVIEW)
    with pytest.raises(HTTPException) as exc_info:
        task_service.mark_task_paid(db, task.id, True, hr_manager)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_binned_task_cannot_be_paid(db, task, network_manager, hr_manager):
    _set_status(db, task, TaskStatus.COMPLETED)
    task_service.soft_delete_task(db, task.id, network_manager)
    with pytest.raises(HTTPException) as exc_info:
        task_service.mark_task_paid(db, task.id, True, hr_manager)
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_payment_lists_split_paid_and_unpaid(client, db, task, network_manager, hr_manager):
    other = task_service.create_task(db, TaskCreate(title="Mount pole"), network_manager)
    binned = task_service.create_task(db, TaskCreate(title="Old job"), network_manager)
    for t in (task, other, binned):
        _set_status(db, t, TaskStatus.COMPLETED)
    task_service.soft_delete_task(db, binned.id, network_manager)

    response = client.post(
        f"/api/v1/tasks/{task.id}/payment", json={"is_paid": True}, headers=auth_headers(hr_manager)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_paid"] is True
    assert response.json()["paid_at"].endswith("Z")

    paid = client.get("/api/v1/tasks/payments", params={"paid": True}, headers=auth_headers(hr_manager))
    unpaid = client.get("/api/v1/tasks/payments", params={"paid": False}, headers=auth_headers(hr_manager))
    assert [t["id"] for t in paid.json()["items"]] == [task.id]
    assert [t["id"] for t in unpaid.json()["items"]] == [other.id]


def test_employee_cannot_mark_payment(client, db, task, employee):
    _set_status(db, task, TaskStatus.COMPLETED)
    response = client.post(
        f"/api/v1/tasks/{task.id}/payment", json={"is_paid": True}, headers=auth_headers(employee)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
