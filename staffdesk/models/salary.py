"""
Salary model - one row per profile
"""
from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class SalaryInfo(Base):
    __tablename__ = "salary_info"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    base_salary = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    current_salary = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    total_deductions = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    daily_rate = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    currency = Column(String(3), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    profile = relationship("Profile", back_populates="salary")
