"""
Task service - field tasks, review, bin, messages and attachments

Status changes go through TASK_TRANSITIONS. Assignees cannot complete a
task themselves: asking for COMPLETED puts it UNDER_REVIEW for a manager.
Completion by a manager stamps completed_at and settles the equipment
used against inventory in the same transaction.
"""
import logging
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import has_role, is_super_admin
from staffdesk.core.events import change_feed, view_cache
from staffdesk.models.profile import Profile, Role
from staffdesk.models.project import Project
from staffdesk.models.task import Task, TaskAttachment, TaskMessage, TaskStatus, TASK_TRANSITIONS
from staffdesk.schemas.task import TaskCreate, TaskMessageOut, TaskUpdate
from staffdesk.services.audit_service import log_audit
from staffdesk.services.inventory_service import deduct_task_inventory
from staffdesk.utils.datetime_utils import now_utc
from staffdesk.utils.enums import enum_values

logger = logging.getLogger(__name__)

# Roles that create, assign, review and bin tasks
TASK_MANAGER_ROLES = (Role.SUPER_ADMIN, Role.NETWORK_MANAGER, Role.PROJECT_MANAGER)

# Roles that settle technician payouts
TASK_PAYMENT_ROLES = (Role.SUPER_ADMIN, Role.HR_MANAGER)

TASK_MESSAGES_TABLE = "task_messages"
TASK_MESSAGES_VIEW = "task_messages"

view_cache.bind(change_feed, TASK_MESSAGES_TABLE, TASK_MESSAGES_VIEW)


def is_task_manager(profile: Profile) -> bool:
    return has_role(profile, *TASK_MANAGER_ROLES)


def _get_task(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task with id {task_id} not found"
        )
    return task


def _ensure_can_view(task: Task, current_user: Profile) -> None:
    if is_task_manager(current_user):
        return
    if task.assigned_to != current_user.id or task.is_deleted:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


def _ensure_not_binned(task: Task) -> None:
    if task.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Task is in the bin; restore it first"
        )


def _validate_links(db: Session, assigned_to: Optional[int], project_id: Optional[int]) -> None:
    if assigned_to is not None:
        assignee = db.query(Profile).filter(Profile.id == assigned_to).first()
        if not assignee:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Profile with id {assigned_to} not found"
            )
        if assignee.is_terminated:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot assign a task to a terminated employee"
            )
    if project_id is not None:
        if not db.query(Project).filter(Project.id == project_id).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Project with id {project_id} not found"
            )


def get_task(db: Session, task_id: int, current_user: Profile) -> Task:
    task = _get_task(db, task_id)
    _ensure_can_view(task, current_user)
    return task


def list_tasks(
    db: Session,
    current_user: Profile,
    status_filter: Optional[TaskStatus] = None,
    assigned_to: Optional[int] = None,
    project_id: Optional[int] = None,
    in_bin: bool = False,
) -> List[Task]:
    """
    List tasks with role-based scope.

    - Task managers: all tasks, optionally filtered by assignee
    - Everyone else: tasks assigned to them
    Binned tasks are only listed when in_bin is set (managers only).
    """
    query = db.query(Task)
    if is_task_manager(current_user):
        if assigned_to:
            query = query.filter(Task.assigned_to == assigned_to)
    else:
        if in_bin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        query = query.filter(Task.assigned_to == current_user.id)

    query = query.filter(Task.is_deleted == in_bin)
    if status_filter:
        query = query.filter(Task.status == status_filter.value)
    if project_id:
        query = query.filter(Task.project_id == project_id)

    if in_bin:
        return query.order_by(Task.deleted_at.desc(), Task.id.desc()).all()
    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def create_task(db: Session, data: TaskCreate, creator: Profile) -> Task:
    _validate_links(db, data.assigned_to, data.project_id)
    values = enum_values(data.model_dump())
    task = Task(created_by=creator.id, status=TaskStatus.PENDING.value, **values)
    db.add(task)
    db.flush()
    log_audit(
        db=db,
        actor_id=creator.id,
        action="TASK_CREATE",
        entity_type="tasks",
        entity_id=task.id,
        meta={"title": task.title, "assigned_to": task.assigned_to, "project_id": task.project_id},
        commit=False,
    )
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, task_id: int, data: TaskUpdate, actor: Profile) -> Task:
    task = _get_task(db, task_id)
    _ensure_not_binned(task)
    values = enum_values(data.model_dump(exclude_unset=True))
    _validate_links(db, values.get("assigned_to"), values.get("project_id"))
    if task.inventory_deducted and any(k.endswith("_used") for k in values):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Equipment usage cannot change after inventory was deducted"
        )
    for field, value in values.items():
        setattr(task, field, value)
    log_audit(
        db=db,
        actor_id=actor.id,
        action="TASK_UPDATE",
        entity_type="tasks",
        entity_id=task.id,
        meta=values,
        commit=False,
    )
    db.commit()
    db.refresh(task)
    return task


def _transition(db: Session, task: Task, target: TaskStatus, actor: Profile, action: str) -> str:
    """
    Move task to target. Does not commit.

    Returns:
        The status the task had before
    """
    before = TaskStatus(task.status)
    if target not in TASK_TRANSITIONS[before]:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move task from {before.value} to {target.value}"
        )
    task.status = target.value
    if target == TaskStatus.COMPLETED:
        task.completed_at = now_utc()
        deduct_task_inventory(db, task, commit=False)
    elif before == TaskStatus.COMPLETED:
        task.completed_at = None
    log_audit(
        db=db,
        actor_id=actor.id,
        action="TASK_STATUS",
        entity_type="tasks",
        entity_id=task.id,
        meta={"before": before.value, "after": target.value, "action": action},
        commit=False,
    )
    return before.value


def update_task_status(db: Session, task_id: int, requested: TaskStatus, actor: Profile) -> Task:
    """
    Change task status.

    Managers may make any transition the table allows. The assignee may
    start, pause or finish the task; finishing becomes UNDER_REVIEW.
    """
    task = _get_task(db, task_id)
    _ensure_can_view(task, actor)
    _ensure_not_binned(task)

    target = requested
    if not is_task_manager(actor):
        if requested == TaskStatus.COMPLETED:
            target = TaskStatus.UNDER_REVIEW
        if target not in (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.UNDER_REVIEW):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Assignees cannot set status {requested.value}"
            )

    if task.status == target.value:
        return task

    before = _transition(db, task, target, actor, action="status_update")
    db.commit()
    db.refresh(task)
    logger.info(
        "task status transition: task_id=%s before=%s after=%s action=status_update actor_id=%s",
        task.id, before, target.value, actor.id,
    )
    return task


def review_task(db: Session, task_id: int, approve: bool, reviewer: Profile, reason: Optional[str] = None) -> Task:
    """
    Approve (UNDER_REVIEW -> COMPLETED) or send back (-> IN_PROGRESS) a task.

    Rejection posts "Task rejected: <reason>" to the task's messages.
    """
    task = _get_task(db, task_id)
    _ensure_not_binned(task)
    if task.status != TaskStatus.UNDER_REVIEW.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Task is not under review (status {task.status})"
        )

    if approve:
        before = _transition(db, task, TaskStatus.COMPLETED, reviewer, action="review_approve")
        db.commit()
    else:
        if not reason or not reason.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Rejection reason is required"
            )
        before = _transition(db, task, TaskStatus.IN_PROGRESS, reviewer, action="review_reject")
        db.add(TaskMessage(task_id=task.id, sender_id=reviewer.id, message=f"Task rejected: {reason.strip()}"))
        db.commit()
        change_feed.publish(TASK_MESSAGES_TABLE, "INSERT", scope_id=task.id)

    db.refresh(task)
    logger.info(
        "task status transition: task_id=%s before=%s after=%s action=%s",
        task.id, before, task.status, "review_approve" if approve else "review_reject",
    )
    return task


def soft_delete_task(db: Session, task_id: int, actor: Profile) -> Task:
    """Move a task to the bin."""
    task = _get_task(db, task_id)
    if task.is_deleted:
        return task
    task.is_deleted = True
    task.deleted_at = now_utc()
    task.deleted_by = actor.id
    log_audit(
        db=db,
        actor_id=actor.id,
        action="TASK_BIN",
        entity_type="tasks",
        entity_id=task.id,
        commit=False,
    )
    db.commit()
    db.refresh(task)
    return task


def restore_task(db: Session, task_id: int, actor: Profile) -> Task:
    """Take a task out of the bin (super-admin or whoever binned it)."""
    task = _get_task(db, task_id)
    if not task.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Task is not in the bin"
        )
    if not is_super_admin(actor) and task.deleted_by != actor.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only super admins or the user who deleted the task can restore it"
        )
    task.is_deleted = False
    task.deleted_at = None
    task.deleted_by = None
    log_audit(
        db=db,
        actor_id=actor.id,
        action="TASK_RESTORE",
        entity_type="tasks",
        entity_id=task.id,
        commit=False,
    )
    db.commit()
    db.refresh(task)
    return task


def permanently_delete_task(db: Session, task_id: int, actor: Profile) -> None:
    """Delete a binned task with its messages and attachments (super-admin only)."""
    if not is_super_admin(actor):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only super admins can permanently delete tasks"
        )
    task = _get_task(db, task_id)
    if not task.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only tasks in the bin can be permanently deleted"
        )
    db.delete(task)
    log_audit(
        db=db,
        actor_id=actor.id,
        action="TASK_DELETE",
        entity_type="tasks",
        entity_id=task_id,
        meta={"title": task.title},
        commit=False,
    )
    db.commit()
    change_feed.publish(TASK_MESSAGES_TABLE, "DELETE", scope_id=task_id)


def list_payment_tasks(db: Session, paid: Optional[bool] = None) -> List[Task]:
    """Completed tasks outside the bin, most recently completed first."""
    query = db.query(Task).filter(
        Task.status == TaskStatus.COMPLETED.value,
        Task.is_deleted == False,
    )
    if paid is not None:
        query = query.filter(Task.is_paid == paid)
    return query.order_by(Task.completed_at.desc(), Task.id.desc()).all()


def mark_task_paid(db: Session, task_id: int, is_paid: bool, actor: Profile) -> Task:
    """
    Record the technician payout for a completed task.

    Marking unpaid clears paid_at and paid_by. Setting the current value
    again is a no-op.

    Raises:
        HTTPException: 404 unknown task, 409 binned or not COMPLETED
    """
    task = _get_task(db, task_id)
    _ensure_not_binned(task)
    if task.status != TaskStatus.COMPLETED.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only completed tasks can be paid"
        )
    if bool(task.is_paid) == is_paid:
        return task

    task.is_paid = is_paid
    task.paid_at = now_utc() if is_paid else None
    task.paid_by = actor.id if is_paid else None
    log_audit(
        db=db,
        actor_id=actor.id,
        action="TASK_PAID" if is_paid else "TASK_UNPAID",
        entity_type="tasks",
        entity_id=task.id,
        meta={"assigned_to": task.assigned_to},
        commit=False,
    )
    db.commit()
    db.refresh(task)
    logger.info("task payment: task_id=%s is_paid=%s actor_id=%s", task.id, is_paid, actor.id)
    return task


def list_messages(db: Session, task_id: int, current_user: Profile) -> List[Dict]:
    """Messages of a task, oldest first. Served from the view cache between writes."""
    task = _get_task(db, task_id)
    _ensure_can_view(task, current_user)

    cached = view_cache.get(TASK_MESSAGES_VIEW, task_id)
    if cached is not None:
        return cached

    messages = db.query(TaskMessage).filter(TaskMessage.task_id == task_id).order_by(TaskMessage.id).all()
    rows = [TaskMessageOut.model_validate(m).model_dump(mode="json") for m in messages]
    view_cache.set(TASK_MESSAGES_VIEW, rows, task_id)
    return rows


def post_message(db: Session, task_id: int, sender: Profile, message: str) -> TaskMessage:
    task = _get_task(db, task_id)
    _ensure_can_view(task, sender)
    _ensure_not_binned(task)
    row = TaskMessage(task_id=task_id, sender_id=sender.id, message=message)
    db.add(row)
    db.commit()
    db.refresh(row)
    change_feed.publish(TASK_MESSAGES_TABLE, "INSERT", row_id=row.id, scope_id=task_id)
    return row


def list_attachments(db: Session, task_id: int, current_user: Profile) -> List[TaskAttachment]:
    task = _get_task(db, task_id)
    _ensure_can_view(task, current_user)
    return db.query(TaskAttachment).filter(TaskAttachment.task_id == task_id).order_by(TaskAttachment.id).all()


def add_attachment(db: Session, task_id: int, uploader: Profile, file_name: str, file_path: str) -> TaskAttachment:
    task = _get_task(db, task_id)
    _ensure_can_view(task, uploader)
    _ensure_not_binned(task)
    attachment = TaskAttachment(task_id=task_id, uploaded_by=uploader.id, file_name=file_name, file_path=file_path)
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    return attachment


def delete_attachment(db: Session, task_id: int, attachment_id: int, actor: Profile) -> None:
    attachment = db.query(TaskAttachment).filter(
        TaskAttachment.id == attachment_id,
        TaskAttachment.task_id == task_id
    ).first()
    if not attachment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attachment not found")
    if attachment.uploaded_by != actor.id and not is_task_manager(actor):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    db.delete(attachment)
    db.commit()
