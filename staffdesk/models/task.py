"""
Task models - field tasks, their chat messages and attachments
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class TaskStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    UNDER_REVIEW = "UNDER_REVIEW"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


TASK_TRANSITIONS = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED},
    TaskStatus.IN_PROGRESS: {TaskStatus.PENDING, TaskStatus.UNDER_REVIEW, TaskStatus.COMPLETED, TaskStatus.CANCELLED},
    TaskStatus.UNDER_REVIEW: {TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS},
    TaskStatus.COMPLETED: set(),
    TaskStatus.CANCELLED: {TaskStatus.PENDING},
}


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String, nullable=False, default=TaskPriority.MEDIUM.value)
    status = Column(String, nullable=False, default=TaskStatus.PENDING.value, index=True)
    assigned_to = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)
    due_date = Column(Date, nullable=True)

    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    installation_address = Column(Text, nullable=True)

    # Equipment consumed on site, deducted from inventory on completion
    routers_used = Column(Integer, nullable=False, default=0)
    poe_adapters_used = Column(Integer, nullable=False, default=0)
    poles_used = Column(Integer, nullable=False, default=0)
    anchors_used = Column(Integer, nullable=False, default=0)
    inventory_deducted = Column(Boolean, nullable=False, default=False)

    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Technician payout for completed work
    is_paid = Column(Boolean, nullable=False, default=False, index=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    paid_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    assignee = relationship("Profile", foreign_keys=[assigned_to])
    project = relationship("Project", back_populates="tasks")
    messages = relationship("TaskMessage", back_populates="task", cascade="all, delete-orphan", order_by="TaskMessage.id")
    attachments = relationship("TaskAttachment", back_populates="task", cascade="all, delete-orphan")


class TaskMessage(Base):
    __tablename__ = "task_messages"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    task = relationship("Task", back_populates="messages")
    sender = relationship("Profile")


class TaskAttachment(Base):
    __tablename__ = "task_attachments"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    uploaded_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)  # object key inside the task-images bucket
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    task = relationship("Task", back_populates="attachments")
