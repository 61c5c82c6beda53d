"""
Audit logging service
"""
from sqlalchemy.orm import Session
from staffdesk.models.audit_log import AuditLog
from staffdesk.utils.datetime_utils import now_utc
from staffdesk.utils.json_serializer import sanitize_for_json
from typing import Optional, Dict, Any


def log_audit(
    db: Session,
    actor_id: Optional[int],
    action: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
    commit: bool = True,
) -> AuditLog:
    """
    Create an audit log entry

    Args:
        db: Database session
        actor_id: ID of the user performing the action (None for scheduled jobs)
        action: Action type (e.g., "SUSPENSION_CREATE", "TASK_STATUS", "REPORT_EXPORT")
        entity_type: Type of entity (e.g., "suspensions", "tasks", "report")
        entity_id: ID of the affected entity (optional)
        meta: Additional metadata as dictionary (optional)
        commit: Commit immediately; pass False to join the caller's unit of work

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        meta_json=sanitize_for_json(meta) if meta is not None else None,
        created_at=now_utc()
    )
    db.add(audit_log)
    if commit:
        db.commit()
        db.refresh(audit_log)
    return audit_log
