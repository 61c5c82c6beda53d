"""
Project service - customer installations
"""
import logging
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy import case
from sqlalchemy.orm import Session
from staffdesk.core.events import change_feed, view_cache
from staffdesk.models.project import Project, ProjectStatus
from staffdesk.schemas.project import ProjectCreate, ProjectOut, ProjectUpdate
from staffdesk.services.audit_service import log_audit
from staffdesk.utils.enums import enum_values

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "projects"
PROJECTS_VIEW = "projects"

view_cache.bind(change_feed, PROJECTS_TABLE, PROJECTS_VIEW)


def get_project(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project with id {project_id} not found"
        )
    return project


def list_projects(db: Session, status_filter: Optional[ProjectStatus] = None) -> List[Dict]:
    """
    Projects newest first with completed ones last.

    The unfiltered list is served from the view cache until a project
    write invalidates it.
    """
    if status_filter is None:
        cached = view_cache.get(PROJECTS_VIEW)
        if cached is not None:
            return cached

    query = db.query(Project)
    if status_filter:
        query = query.filter(Project.project_status == status_filter.value)
    completed_last = case((Project.project_status == ProjectStatus.COMPLETED.value, 1), else_=0)
    projects = query.order_by(completed_last, Project.created_at.desc(), Project.id.desc()).all()
    rows = [ProjectOut.model_validate(p).model_dump(mode="json") for p in projects]

    if status_filter is None:
        view_cache.set(PROJECTS_VIEW, rows)
    return rows


def create_project(db: Session, data: ProjectCreate, actor_id: int) -> Project:
    values = enum_values(data.model_dump())
    project = Project(created_by=actor_id, **values)
    db.add(project)
    db.flush()
    log_audit(
        db=db,
        actor_id=actor_id,
        action="PROJECT_CREATE",
        entity_type="projects",
        entity_id=project.id,
        meta=values,
        commit=False,
    )
    db.commit()
    db.refresh(project)
    change_feed.publish(PROJECTS_TABLE, "INSERT", row_id=project.id)
    return project


def update_project(db: Session, project_id: int, data: ProjectUpdate, actor_id: int) -> Project:
    project = get_project(db, project_id)
    values = enum_values(data.model_dump(exclude_unset=True))
    before_status = project.project_status
    for field, value in values.items():
        setattr(project, field, value)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="PROJECT_UPDATE",
        entity_type="projects",
        entity_id=project.id,
        meta={"before_status": before_status, **values},
        commit=False,
    )
    db.commit()
    db.refresh(project)
    if before_status != project.project_status:
        logger.info(
            "project status transition: project_id=%s before=%s after=%s",
            project.id, before_status, project.project_status,
        )
    change_feed.publish(PROJECTS_TABLE, "UPDATE", row_id=project.id)
    return project


def delete_project(db: Session, project_id: int, actor_id: int) -> None:
    """Delete a project; its tasks stay and lose the link."""
    project = get_project(db, project_id)
    for task in project.tasks:
        task.project_id = None
    db.delete(project)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="PROJECT_DELETE",
        entity_type="projects",
        entity_id=project_id,
        meta={"customer_name": project.customer_name},
        commit=False,
    )
    db.commit()
    change_feed.publish(PROJECTS_TABLE, "DELETE", row_id=project_id)
