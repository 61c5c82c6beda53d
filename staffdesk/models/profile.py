"""
Profile model - identity, role and disciplinary state of a staff member
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from staffdesk.db.base import Base


class Role(str, enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    HR_MANAGER = "HR_MANAGER"
    NETWORK_MANAGER = "NETWORK_MANAGER"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    EMPLOYEE = "EMPLOYEE"


# Roles allowed to raise suspensions and run the management screens
MANAGER_ROLES = (Role.SUPER_ADMIN, Role.HR_MANAGER, Role.NETWORK_MANAGER)


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.EMPLOYEE.value)
    phone = Column(String, nullable=True)
    department = Column(String, nullable=True)
    position = Column(String, nullable=True)
    hire_date = Column(Date, nullable=True)
    password_hash = Column(String, nullable=True)
    is_approved = Column(Boolean, default=True, nullable=False)

    strike_count = Column(Integer, default=0, nullable=False)
    is_suspended = Column(Boolean, default=False, nullable=False)
    suspension_end_date = Column(DateTime(timezone=True), nullable=True)
    is_terminated = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        CheckConstraint("strike_count >= 0", name="ck_profiles_strike_count_non_negative"),
    )

    salary = relationship("SalaryInfo", back_populates="profile", uselist=False, cascade="all, delete-orphan")
