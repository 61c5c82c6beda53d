"""
Growth task service

Super-admins publish growth tasks for chosen roles. Staff in those roles
complete each task at most once a week; completing it again overwrites the
previous completion.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.models.growth_task import GrowthTask, GrowthTaskCompletion
from staffdesk.models.profile import Profile
from staffdesk.schemas.growth_task import GrowthTaskCreate, GrowthTaskUpdate
from staffdesk.services.audit_service import log_audit
from staffdesk.utils.datetime_utils import ensure_utc, now_utc
from staffdesk.utils.enums import enum_to_str

logger = logging.getLogger(__name__)

# A completed task comes back after this long
REPEAT_INTERVAL = timedelta(days=7)


def _role_values(roles) -> List[str]:
    return [enum_to_str(r) for r in roles]


def _get_task(db: Session, task_id: int) -> GrowthTask:
    task = db.query(GrowthTask).filter(GrowthTask.id == task_id).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Growth task with id {task_id} not found"
        )
    return task


def list_tasks(db: Session) -> List[GrowthTask]:
    return db.query(GrowthTask).order_by(GrowthTask.created_at.desc(), GrowthTask.id.desc()).all()


def create_task(db: Session, data: GrowthTaskCreate, creator: Profile) -> GrowthTask:
    task = GrowthTask(
        title=data.title,
        description=data.description,
        target_roles=_role_values(data.target_roles),
        is_active=data.is_active,
        created_by=creator.id,
    )
    db.add(task)
    db.flush()
    log_audit(
        db=db,
        actor_id=creator.id,
        action="GROWTH_TASK_CREATE",
        entity_type="growth_tasks",
        entity_id=task.id,
        meta={"title": task.title, "target_roles": task.target_roles},
        commit=False,
    )
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, task_id: int, data: GrowthTaskUpdate, actor: Profile) -> GrowthTask:
    task = _get_task(db, task_id)
    values = data.model_dump(exclude_unset=True)
    if values.get("target_roles") is not None:
        values["target_roles"] = _role_values(values["target_roles"])
    for field, value in values.items():
        if value is not None:
            setattr(task, field, value)
    log_audit(
        db=db,
        actor_id=actor.id,
        action="GROWTH_TASK_UPDATE",
        entity_type="growth_tasks",
        entity_id=task.id,
        meta=values,
        commit=False,
    )
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task_id: int, actor: Profile) -> None:
    task = _get_task(db, task_id)
    db.delete(task)
    log_audit(
        db=db,
        actor_id=actor.id,
        action="GROWTH_TASK_DELETE",
        entity_type="growth_tasks",
        entity_id=task_id,
        meta={"title": task.title},
        commit=False,
    )
    db.commit()


def _completions_by_task(db: Session, user_id: int) -> Dict[int, GrowthTaskCompletion]:
    rows = db.query(GrowthTaskCompletion).filter(GrowthTaskCompletion.user_id == user_id).all()
    return {row.task_id: row for row in rows}


def _is_targeted(task: GrowthTask, user: Profile) -> bool:
    return enum_to_str(user.role) in (task.target_roles or [])


def _is_due(completion: Optional[GrowthTaskCompletion], now: datetime) -> bool:
    if completion is None:
        return True
    return ensure_utc(completion.completed_at) <= now - REPEAT_INTERVAL


def list_available(db: Session, user: Profile, now: Optional[datetime] = None) -> List[Dict]:
    """
    Active tasks aimed at the user's role that they have not completed in
    the last week, oldest task first.
    """
    now = now or now_utc()
    completions = _completions_by_task(db, user.id)
    tasks = db.query(GrowthTask).filter(GrowthTask.is_active == True).order_by(GrowthTask.id).all()
    available = []
    for task in tasks:
        if not _is_targeted(task, user):
            continue
        completion = completions.get(task.id)
        if not _is_due(completion, now):
            continue
        available.append({
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "last_completed_at": ensure_utc(completion.completed_at) if completion else None,
        })
    return available


def complete_task(db: Session, task_id: int, user: Profile, now: Optional[datetime] = None) -> Dict:
    """
    Record that user completed a growth task.

    Raises:
        HTTPException: 404 unknown task, 403 task not aimed at the user's
            role, 409 inactive or completed within the last week
    """
    now = now or now_utc()
    task = _get_task(db, task_id)
    if not _is_targeted(task, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This growth task is not assigned to your role"
        )
    if not task.is_active:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Growth task is not active"
        )

    completion = db.query(GrowthTaskCompletion).filter(
        GrowthTaskCompletion.task_id == task_id,
        GrowthTaskCompletion.user_id == user.id,
    ).with_for_update().first()
    if not _is_due(completion, now):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Growth task already completed this week"
        )

    if completion is None:
        completion = GrowthTaskCompletion(task_id=task_id, user_id=user.id, completed_at=now)
        db.add(completion)
    else:
        completion.completed_at = now
    db.commit()
    logger.info("growth task completed: task_id=%s user_id=%s", task_id, user.id)
    return {
        "task_id": task_id,
        "user_id": user.id,
        "completed_at": now,
        "available_again_at": now + REPEAT_INTERVAL,
    }
