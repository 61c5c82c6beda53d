"""
Authentication endpoints
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db
from staffdesk.core.security import create_access_token
from staffdesk.schemas.auth import LoginRequest, TokenResponse
from staffdesk.services.audit_service import log_audit
from staffdesk.services.profile_service import authenticate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate with e-mail and password and return a JWT.

    Terminated and unapproved accounts are refused with 403.
    """
    profile = authenticate(db, login_data.email, login_data.password)

    # JWT 'sub' claim must be a string
    access_token = create_access_token(data={"sub": str(profile.id), "role": profile.role})

    # A failed audit write must not block the login
    try:
        log_audit(
            db=db,
            actor_id=profile.id,
            action="AUTH_LOGIN_SUCCESS",
            entity_type="auth",
            meta={"email": profile.email, "role": profile.role}
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Failed to log audit for login: %s", e)

    return TokenResponse(access_token=access_token, token_type="bearer")
