"""
Project endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, require_roles
from staffdesk.models.profile import Profile, Role
from staffdesk.models.project import ProjectStatus
from staffdesk.schemas.project import ProjectCreate, ProjectOut, ProjectStatusUpdate, ProjectUpdate
from staffdesk.services import project_service

router = APIRouter()

_project_managers = require_roles(Role.PROJECT_MANAGER, Role.NETWORK_MANAGER)


@router.get("", response_model=List[ProjectOut])
async def list_projects(
    status_filter: Optional[ProjectStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_project_managers)
):
    """Newest first, completed projects last"""
    return project_service.list_projects(db, status_filter=status_filter)


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_project_managers)
):
    return project_service.create_project(db, data, current_user.id)


@router.get("/{project_id}", response_model=ProjectOut)
async def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_project_managers)
):
    return project_service.get_project(db, project_id)


@router.patch("/{project_id}", response_model=ProjectOut)
async def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_project_managers)
):
    return project_service.update_project(db, project_id, data, current_user.id)


@router.post("/{project_id}/status", response_model=ProjectOut)
async def update_project_status(
    project_id: int,
    data: ProjectStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_project_managers)
):
    return project_service.update_project(
        db, project_id, ProjectUpdate(project_status=data.project_status), current_user.id
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(_project_managers)
):
    project_service.delete_project(db, project_id, current_user.id)
