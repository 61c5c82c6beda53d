"""
Task endpoints: tasks, review, bin, messages and attachments
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user, require_roles
from staffdesk.models.profile import Profile
from staffdesk.models.task import TaskStatus
from staffdesk.schemas.task import (
    TaskAttachmentCreate,
    TaskAttachmentOut,
    TaskCreate,
    TaskListResponse,
    TaskMessageCreate,
    TaskMessageOut,
    TaskOut,
    TaskPaymentUpdate,
    TaskReviewRequest,
    TaskStatusUpdate,
    TaskUpdate,
)
from staffdesk.services import task_service
from staffdesk.services.task_service import TASK_MANAGER_ROLES, TASK_PAYMENT_ROLES

router = APIRouter()

_task_managers = require_roles(*TASK_MANAGER_ROLES)
_task_payers = require_roles(*TASK_PAYMENT_ROLES)


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_managers)
):
    return task_service.create_task(db, data, current_user)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    assigned_to: Optional[int] = Query(None),
    project_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Task managers see every task; employees see tasks assigned to them"""
    items = task_service.list_tasks(
        db,
        current_user,
        status_filter=status_filter,
        assigned_to=assigned_to,
        project_id=project_id,
    )
    return TaskListResponse(items=items, total=len(items))


@router.get("/bin", response_model=TaskListResponse)
async def list_bin(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_managers)
):
    items = task_service.list_tasks(db, current_user, in_bin=True)
    return TaskListResponse(items=items, total=len(items))


@router.get("/payments", response_model=TaskListResponse)
async def list_payment_tasks(
    paid: Optional[bool] = Query(None, description="True for paid, False for unpaid, omit for both"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_payers)
):
    """Completed tasks awaiting or past technician payout"""
    items = task_service.list_payment_tasks(db, paid=paid)
    return TaskListResponse(items=items, total=len(items))


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return task_service.get_task(db, task_id, current_user)


@router.patch("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_managers)
):
    return task_service.update_task(db, task_id, data, current_user)


@router.post("/{task_id}/status", response_model=TaskOut)
async def update_task_status(
    task_id: int,
    data: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """
    Change task status

    An assignee asking for COMPLETED puts the task UNDER_REVIEW.
    Manager completion deducts the equipment used from inventory.
    """
    return task_service.update_task_status(db, task_id, data.status, current_user)


@router.post("/{task_id}/review", response_model=TaskOut)
async def review_task(
    task_id: int,
    data: TaskReviewRequest,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_managers)
):
    return task_service.review_task(db, task_id, data.approve, current_user, reason=data.reason)


@router.post("/{task_id}/payment", response_model=TaskOut)
async def mark_task_paid(
    task_id: int,
    data: TaskPaymentUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_payers)
):
    return task_service.mark_task_paid(db, task_id, data.is_paid, current_user)


@router.delete("/{task_id}", response_model=TaskOut)
async def move_to_bin(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_managers)
):
    return task_service.soft_delete_task(db, task_id, current_user)


@router.post("/{task_id}/restore", response_model=TaskOut)
async def restore_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_managers)
):
    return task_service.restore_task(db, task_id, current_user)


@router.delete("/{task_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_permanently(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_task_managers)
):
    task_service.permanently_delete_task(db, task_id, current_user)


@router.get("/{task_id}/messages", response_model=List[TaskMessageOut])
async def list_messages(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return task_service.list_messages(db, task_id, current_user)


@router.post("/{task_id}/messages", response_model=TaskMessageOut, status_code=status.HTTP_201_CREATED)
async def post_message(
    task_id: int,
    data: TaskMessageCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return task_service.post_message(db, task_id, current_user, data.message)


@router.get("/{task_id}/attachments", response_model=List[TaskAttachmentOut])
async def list_attachments(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return task_service.list_attachments(db, task_id, current_user)


@router.post("/{task_id}/attachments", response_model=TaskAttachmentOut, status_code=status.HTTP_201_CREATED)
async def add_attachment(
    task_id: int,
    data: TaskAttachmentCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Register an uploaded file; the content itself lives in object storage"""
    return task_service.add_attachment(db, task_id, current_user, data.file_name, data.file_path)


@router.delete("/{task_id}/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(
    task_id: int,
    attachment_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    task_service.delete_attachment(db, task_id, attachment_id, current_user)
