"""
Suspension model and its lifecycle
"""
from decimal import Decimal
import enum
from sqlalchemy import Column, Integer, DateTime, ForeignKey, String, Text, Numeric, CheckConstraint
from sqlalchemy.orm import relationship, backref
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class SuspensionStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


SUSPENSION_TRANSITIONS = {
    SuspensionStatus.PENDING: {SuspensionStatus.ACTIVE, SuspensionStatus.APPROVED, SuspensionStatus.REJECTED},
    SuspensionStatus.APPROVED: {SuspensionStatus.ACTIVE, SuspensionStatus.REJECTED},
    SuspensionStatus.ACTIVE: {SuspensionStatus.COMPLETED},
    SuspensionStatus.COMPLETED: set(),
    SuspensionStatus.REJECTED: set(),
}


def can_transition(current: SuspensionStatus, target: SuspensionStatus) -> bool:
    return target in SUSPENSION_TRANSITIONS[current]


class Suspension(Base):
    __tablename__ = "suspensions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    approved_by = Column(Integer, ForeignKey("profiles.id"), nullable=True)
    status = Column(String, nullable=False, default=SuspensionStatus.PENDING.value, index=True)
    suspension_start = Column(DateTime(timezone=True), nullable=True)
    suspension_end = Column(DateTime(timezone=True), nullable=False)
    reason = Column(Text, nullable=False)
    strike_number = Column(Integer, nullable=False, default=0)  # 0 = warning
    salary_deduction_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        CheckConstraint("strike_number >= 0 AND strike_number <= 3", name="ck_suspensions_strike_number"),
        CheckConstraint(
            "salary_deduction_percentage >= 0 AND salary_deduction_percentage <= 100",
            name="ck_suspensions_deduction_percentage",
        ),
    )

    user = relationship(
        "Profile",
        foreign_keys=[user_id],
        backref=backref("suspensions", cascade="all, delete-orphan", passive_deletes=True),
    )
    creator = relationship("Profile", foreign_keys=[created_by])
    approver = relationship("Profile", foreign_keys=[approved_by])
