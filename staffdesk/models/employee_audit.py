"""
Employee audit model - self-assessment forms and the consultant's review
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, Numeric
from sqlalchemy.orm import relationship, backref
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class EmployeeAuditStatus(str, enum.Enum):
    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"


class EmployeeAudit(Base):
    __tablename__ = "employee_audits"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    current_job_title = Column(String, nullable=False)
    job_description = Column(Text, nullable=False)
    job_description_attached = Column(Boolean, nullable=False, default=False)
    department = Column(String, nullable=True)
    grade = Column(String, nullable=True)
    salary = Column(Numeric(12, 2), nullable=True)
    other_financial_benefit = Column(Text, nullable=True)
    home_address = Column(Text, nullable=True)
    home_telephone = Column(String, nullable=True)
    manages_staff = Column(Boolean, nullable=False, default=False)
    number_of_employees = Column(Integer, nullable=True)
    management_experience = Column(Text, nullable=True)
    people_supervised = Column(Text, nullable=True)

    # Repeating sections, each a list of objects
    employment_history = Column(JSON, nullable=False, default=list)
    unpaid_roles = Column(JSON, nullable=False, default=list)
    education = Column(JSON, nullable=False, default=list)
    training = Column(JSON, nullable=False, default=list)
    professional_membership = Column(JSON, nullable=False, default=list)
    skills_competency = Column(JSON, nullable=False, default=list)

    signature = Column(String, nullable=False)
    declaration_date = Column(DateTime(timezone=True), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(String, nullable=False, default=EmployeeAuditStatus.SUBMITTED.value, index=True)

    # Filled in by the reviewing consultant
    audit_comments = Column(Text, nullable=True)
    competency_rating = Column(String, nullable=True)
    engagement_status = Column(String, nullable=True)
    file_record_status = Column(String, nullable=True)
    performance_scores = Column(Text, nullable=True)
    final_rating = Column(String, nullable=True)
    final_consultant_comments = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship(
        "Profile",
        foreign_keys=[user_id],
        backref=backref("employee_audits", cascade="all, delete-orphan", passive_deletes=True),
    )
