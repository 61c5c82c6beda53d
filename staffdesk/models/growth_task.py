"""
Growth task models - recurring company-growth tasks and who completed them
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class GrowthTask(Base):
    __tablename__ = "growth_tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    target_roles = Column(JSON, nullable=False, default=list)  # list of Role values
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    completions = relationship("GrowthTaskCompletion", back_populates="task", cascade="all, delete-orphan")


class GrowthTaskCompletion(Base):
    """Latest completion of a growth task by a user; one row per (task, user)"""
    __tablename__ = "growth_task_completions"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("growth_tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="uq_growth_task_completions_task_user"),
    )

    task = relationship("GrowthTask", back_populates="completions")
