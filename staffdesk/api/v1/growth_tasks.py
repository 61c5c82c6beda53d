"""
Growth task endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user, require_roles
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.growth_task import (
    AvailableGrowthTask,
    GrowthTaskCompletionOut,
    GrowthTaskCreate,
    GrowthTaskOut,
    GrowthTaskUpdate,
)
from staffdesk.services import growth_task_service

router = APIRouter()

_super_admin = require_roles(Role.SUPER_ADMIN)


@router.get("", response_model=List[GrowthTaskOut])
async def list_growth_tasks(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_super_admin)
):
    return growth_task_service.list_tasks(db)


@router.post("", response_model=GrowthTaskOut, status_code=status.HTTP_201_CREATED)
async def create_growth_task(
    data: GrowthTaskCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_super_admin)
):
    return growth_task_service.create_task(db, data, current_user)


@router.get("/available", response_model=List[AvailableGrowthTask])
async def list_available_growth_tasks(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Tasks for the caller's role not completed in the last 7 days"""
    return growth_task_service.list_available(db, current_user)


@router.patch("/{task_id}", response_model=GrowthTaskOut)
async def update_growth_task(
    task_id: int,
    data: GrowthTaskUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_super_admin)
):
    return growth_task_service.update_task(db, task_id, data, current_user)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_growth_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_super_admin)
):
    growth_task_service.delete_task(db, task_id, current_user)


@router.post("/{task_id}/complete", response_model=GrowthTaskCompletionOut)
async def complete_growth_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return growth_task_service.complete_task(db, task_id, current_user)
