"""
Dependencies and guards for FastAPI endpoints
"""
from typing import Generator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from staffdesk.db.session import SessionLocal
from staffdesk.core.security import decode_token
from staffdesk.models.profile import Profile, Role
from staffdesk.utils.enums import enum_to_str


security = HTTPBearer()


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Profile:
    """
    Get current authenticated user from JWT token
    """
    try:
        payload = decode_token(credentials.credentials)
        # JWT 'sub' is a string
        profile_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if profile.is_terminated:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account terminated"
        )
    if not profile.is_approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account pending approval"
        )

    return profile


def has_role(profile: Profile, *roles: Role) -> bool:
    return enum_to_str(profile.role) in {r.value for r in roles}


def is_super_admin(profile: Profile) -> bool:
    return has_role(profile, Role.SUPER_ADMIN)


def require_roles(*allowed_roles: Role):
    """
    Dependency factory for role-based access control

    Usage:
        @router.get("/hr-only")
        async def hr_endpoint(user: Profile = Depends(require_roles(Role.HR_MANAGER))):
            ...
    """
    def role_checker(current_user: Profile = Depends(get_current_user)) -> Profile:
        # Super-admins pass every role gate
        if is_super_admin(current_user):
            return current_user

        if not has_role(current_user, *allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker
