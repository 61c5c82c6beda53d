"""
Staffdesk backend - application entry point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from staffdesk.api.router import api_router
from staffdesk.core.config import settings
from staffdesk.core.errors import (
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from staffdesk.core.logging import setup_logging
from staffdesk.db.session import SessionLocal, create_sqlite_tables
from staffdesk.services.profile_service import bootstrap_admin

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    parsed = urlparse(url)
    if parsed.scheme.startswith("sqlite") or not parsed.password:
        return url
    netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
    if parsed.port:
        netloc += f":{parsed.port}"
    return urlunparse(parsed._replace(netloc=netloc))


app = FastAPI(
    title="Staffdesk Backend",
    description="Staff, attendance, payroll deductions, suspensions and field tasks",
    version=settings.VERSION or "1.0.0"
)

# CORS must be added before other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api/v1
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_log_config() -> None:
    """Log DATABASE_URL at startup so it can be verified against Alembic."""
    logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))


@app.on_event("startup")
def bootstrap_database() -> None:
    """Create SQLite tables, seed default settings and the first super-admin."""
    create_sqlite_tables()
    db = SessionLocal()
    try:
        bootstrap_admin(db)
    except OperationalError as e:
        db.rollback()
        if "no such table" in str(e).lower():
            logger.warning("Database tables not ready yet, run alembic upgrade head")
        else:
            logger.error("Database error during admin bootstrap: %s", e)
    finally:
        db.close()
