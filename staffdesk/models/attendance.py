"""
Attendance model - one row per user per day
"""
from decimal import Decimal
import enum
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, String, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship, backref
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    ON_LEAVE = "ON_LEAVE"


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(String, nullable=False, default=AttendanceStatus.PRESENT.value)
    clock_in = Column(DateTime(timezone=True), nullable=True)
    clock_out = Column(DateTime(timezone=True), nullable=True)
    deduction_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
    )

    user = relationship(
        "Profile",
        backref=backref("attendance_records", cascade="all, delete-orphan", passive_deletes=True),
    )
