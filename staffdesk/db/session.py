"""
Database session management
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from staffdesk.core.config import settings
from staffdesk.db.base import Base

_engine_kwargs = {"pool_pre_ping": True, "echo": False}
if settings.DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
    if ":memory:" in settings.DATABASE_URL:
        _engine_kwargs["poolclass"] = StaticPool

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_sqlite_tables() -> None:
    """Create all tables for SQLite databases (other backends use Alembic)"""
    if "sqlite" in settings.DATABASE_URL:
        import staffdesk.models  # noqa: F401 - register models on Base.metadata
        Base.metadata.create_all(bind=engine)
