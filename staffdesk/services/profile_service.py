"""
Profile service - staff accounts and the initial super-admin
"""
import logging
from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from staffdesk.core.config import settings
from staffdesk.core.deps import is_super_admin, has_role
from staffdesk.core.security import hash_password, verify_password
from staffdesk.models.profile import Profile, Role
from staffdesk.schemas.profile import ProfileCreate, ProfileUpdate
from staffdesk.services.audit_service import log_audit
from staffdesk.services.settings_service import seed_default_settings
from staffdesk.utils.enums import enum_to_str, enum_values

logger = logging.getLogger(__name__)

# Roles an HR manager may hand out
HR_ASSIGNABLE_ROLES = (Role.EMPLOYEE, Role.NETWORK_MANAGER, Role.PROJECT_MANAGER)


def _check_role_grant(actor: Profile, role: Role) -> None:
    if is_super_admin(actor):
        return
    if has_role(actor, Role.HR_MANAGER) and role in HR_ASSIGNABLE_ROLES:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"You cannot assign role {role.value}"
    )


def _ensure_email_free(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Profile).filter(Profile.email == email)
    if exclude_id is not None:
        query = query.filter(Profile.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Profile with email '{email}' already exists"
        )


def get_profile(db: Session, profile_id: int) -> Profile:
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Profile with id {profile_id} not found"
        )
    return profile


def list_profiles(db: Session, role: Optional[Role] = None, include_terminated: bool = True) -> List[Profile]:
    query = db.query(Profile)
    if role:
        query = query.filter(Profile.role == role.value)
    if not include_terminated:
        query = query.filter(Profile.is_terminated == False)  # noqa: E712
    return query.order_by(Profile.full_name, Profile.id).all()


def create_profile(db: Session, data: ProfileCreate, actor: Profile) -> Profile:
    """
    Create a staff account.

    Super-admins may create any role; HR managers only employees,
    network managers and project managers.

    Raises:
        HTTPException: 403 on a role the actor cannot grant, 400 on a taken e-mail
    """
    _check_role_grant(actor, data.role)
    _ensure_email_free(db, data.email)

    values = enum_values(data.model_dump(exclude={"password"}))
    profile = Profile(password_hash=hash_password(data.password), **values)
    db.add(profile)
    db.flush()
    log_audit(
        db=db,
        actor_id=actor.id,
        action="PROFILE_CREATE",
        entity_type="profiles",
        entity_id=profile.id,
        meta={"email": profile.email, "role": profile.role},
        commit=False,
    )
    db.commit()
    db.refresh(profile)
    logger.info("profile created: profile_id=%s role=%s actor_id=%s", profile.id, profile.role, actor.id)
    return profile


def update_profile(db: Session, profile_id: int, data: ProfileUpdate, actor: Profile) -> Profile:
    """Update profile details; a new e-mail becomes the login e-mail."""
    profile = get_profile(db, profile_id)
    values = data.model_dump(exclude_unset=True)

    if is_super_admin(profile) and not is_super_admin(actor):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only super admins can edit super admins")
    if values.get("role") is not None:
        _check_role_grant(actor, values["role"])
    if values.get("email") and values["email"] != profile.email:
        _ensure_email_free(db, values["email"], exclude_id=profile.id)

    values = enum_values(values)
    before = {k: enum_to_str(getattr(profile, k)) for k in values}
    for field, value in values.items():
        setattr(profile, field, value)
    log_audit(
        db=db,
        actor_id=actor.id,
        action="PROFILE_UPDATE",
        entity_type="profiles",
        entity_id=profile.id,
        meta={"before": before, "after": values},
        commit=False,
    )
    db.commit()
    db.refresh(profile)
    return profile


def reset_password(db: Session, profile_id: int, new_password: str, actor: Profile) -> None:
    profile = get_profile(db, profile_id)
    profile.password_hash = hash_password(new_password)
    log_audit(
        db=db,
        actor_id=actor.id,
        action="PROFILE_PASSWORD_RESET",
        entity_type="profiles",
        entity_id=profile.id,
        commit=False,
    )
    db.commit()


def delete_profile(db: Session, profile_id: int, actor: Profile) -> None:
    """Delete a profile and everything keyed on it (super-admin only)."""
    if not is_super_admin(actor):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only super admins can delete users")
    if profile_id == actor.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    profile = get_profile(db, profile_id)
    email = profile.email
    db.delete(profile)
    log_audit(
        db=db,
        actor_id=actor.id,
        action="PROFILE_DELETE",
        entity_type="profiles",
        entity_id=profile_id,
        meta={"email": email},
        commit=False,
    )
    db.commit()
    logger.info("profile deleted: profile_id=%s actor_id=%s", profile_id, actor.id)


def authenticate(db: Session, email: str, password: str) -> Profile:
    """
    Check credentials.

    Raises:
        HTTPException: 401 on bad credentials, 403 if terminated or unapproved
    """
    profile = db.query(Profile).filter(Profile.email == email.strip().lower()).first()
    if not profile or not profile.password_hash or not verify_password(password, profile.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if profile.is_terminated:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account terminated")
    if not profile.is_approved:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account pending approval")
    return profile


def bootstrap_admin(db: Session) -> Optional[Profile]:
    """
    Seed default settings and create the first super-admin from
    INITIAL_ADMIN_EMAIL / INITIAL_ADMIN_PASSWORD when none exists.
    """
    seed_default_settings(db)

    if db.query(Profile).filter(Profile.role == Role.SUPER_ADMIN.value).first():
        return None
    if not settings.INITIAL_ADMIN_EMAIL or not settings.INITIAL_ADMIN_PASSWORD:
        logger.warning("No super admin exists and INITIAL_ADMIN_EMAIL/INITIAL_ADMIN_PASSWORD are not set")
        return None

    admin = Profile(
        email=settings.INITIAL_ADMIN_EMAIL.strip().lower(),
        full_name="Super Admin",
        role=Role.SUPER_ADMIN.value,
        password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
        is_approved=True,
    )
    db.add(admin)
    db.flush()
    log_audit(
        db=db,
        actor_id=None,
        action="BOOTSTRAP_ADMIN",
        entity_type="profiles",
        entity_id=admin.id,
        meta={"email": admin.email},
        commit=False,
    )
    db.commit()
    db.refresh(admin)
    logger.info("Bootstrapped super admin %s", admin.email)
    return admin
