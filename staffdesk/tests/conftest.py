"""
Pytest configuration and fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("APP_ENV", "local")

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine
from staffdesk.main import app
from staffdesk.db.base import Base
from staffdesk.core.deps import get_db
from staffdesk.core.events import view_cache
from staffdesk.core.security import create_access_token, hash_password
from staffdesk.models import Profile, Role, SalaryInfo  # noqa: F401 - registers every model
from staffdesk.services.settings_service import seed_default_settings


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def clear_view_cache():
    """Cached views must not leak between tests that reuse row ids"""
    view_cache.clear()
    yield
    view_cache.clear()


@pytest.fixture(scope="function")
def db():
    """Create a fresh database with default settings for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    seed_default_settings(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db):
    """Factory: make_profile(Role.EMPLOYEE, email=..., base_salary=...)"""
    counter = {"n": 0}

    def _make(role: Role = Role.EMPLOYEE, email: str = None, password: str = "secret123", base_salary=None, **fields):
        counter["n"] += 1
        profile = Profile(
            email=email or f"{role.value.lower()}{counter['n']}@example.com",
            full_name=fields.pop("full_name", f"{role.value.title()} {counter['n']}"),
            role=role.value,
            password_hash=hash_password(password),
            **fields,
        )
        db.add(profile)
        db.flush()
        if base_salary is not None:
            base = Decimal(str(base_salary))
            db.add(SalaryInfo(
                user_id=profile.id,
                base_salary=base,
                current_salary=base,
                total_deductions=Decimal("0"),
                daily_rate=(base / Decimal("22")).quantize(Decimal("0.01")),
                currency="NGN",
            ))
        db.commit()
        db.refresh(profile)
        return profile

    return _make


def auth_headers(profile: Profile) -> dict:
    token = create_access_token(data={"sub": str(profile.id), "role": profile.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def super_admin(make_profile):
    return make_profile(Role.SUPER_ADMIN, email="admin@example.com", full_name="Super Admin")


@pytest.fixture
def hr_manager(make_profile):
    return make_profile(Role.HR_MANAGER, email="hr@example.com", full_name="HR Manager")


@pytest.fixture
def network_manager(make_profile):
    return make_profile(Role.NETWORK_MANAGER, email="net@example.com", full_name="Network Manager")


@pytest.fixture
def project_manager(make_profile):
    return make_profile(Role.PROJECT_MANAGER, email="pm@example.com", full_name="Project Manager")


@pytest.fixture
def employee(make_profile):
    """Employee earning 22000 a month (daily rate 1000.00)"""
    return make_profile(Role.EMPLOYEE, email="emp@example.com", full_name="Ada Obi", base_salary="22000")
