"""
Employee audit schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, model_validator, ConfigDict
from staffdesk.models.employee_audit import EmployeeAuditStatus
from staffdesk.schemas.common import serialize_dt
from staffdesk.schemas.profile import ProfileRef


class EmploymentHistoryEntry(BaseModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    employer_name: Optional[str] = None
    employer_address: Optional[str] = None
    nature_of_business: Optional[str] = None
    post_held: Optional[str] = None
    reason_for_leaving: Optional[str] = None
    salary_on_leaving: Optional[str] = None


class UnpaidRoleEntry(BaseModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    institution: Optional[str] = None
    nature_of_service: Optional[str] = None
    role_duties: Optional[str] = None


class EducationEntry(BaseModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    institution: Optional[str] = None
    qualifications: Optional[str] = None
    grade: Optional[str] = None


class TrainingEntry(BaseModel):
    institution: Optional[str] = None
    course_title: Optional[str] = None
    dates: Optional[str] = None


class MembershipEntry(BaseModel):
    institution: Optional[str] = None
    membership_status: Optional[str] = None
    admission_date: Optional[str] = None


class SkillEntry(BaseModel):
    skill: Optional[str] = None
    rating: Optional[str] = None


class EmployeeAuditCreate(BaseModel):
    """Self-assessment form filled in by an employee"""
    name: str = Field(..., min_length=1)
    current_job_title: str = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1)
    job_description_attached: bool = False
    department: Optional[str] = None
    grade: Optional[str] = None
    salary: Optional[Decimal] = Field(None, ge=0)
    other_financial_benefit: Optional[str] = None
    home_address: Optional[str] = None
    home_telephone: Optional[str] = None
    manages_staff: bool = False
    number_of_employees: Optional[int] = Field(None, ge=0)
    management_experience: Optional[str] = None
    people_supervised: Optional[str] = None
    employment_history: List[EmploymentHistoryEntry] = Field(default_factory=list)
    unpaid_roles: List[UnpaidRoleEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    training: List[TrainingEntry] = Field(default_factory=list)
    professional_membership: List[MembershipEntry] = Field(default_factory=list)
    skills_competency: List[SkillEntry] = Field(default_factory=list)
    signature: str = Field(..., min_length=1, description="Typed signature")
    declaration_date: datetime

    @field_validator("name", "current_job_title", "job_description", "signature")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    @model_validator(mode="after")
    def staff_count_needs_manager(self):
        if self.number_of_employees and not self.manages_staff:
            raise ValueError("number_of_employees requires manages_staff")
        return self


class EmployeeAuditReview(BaseModel):
    """Consultant's assessment; marks the audit REVIEWED"""
    audit_comments: Optional[str] = None
    competency_rating: Optional[str] = None
    engagement_status: Optional[str] = None
    file_record_status: Optional[str] = None
    performance_scores: Optional[str] = None
    final_rating: str = Field(..., min_length=1)
    final_consultant_comments: Optional[str] = None


class EmployeeAuditSummary(BaseModel):
    id: int
    user_id: int
    user: Optional[ProfileRef] = None
    name: str
    current_job_title: str
    department: Optional[str] = None
    status: EmployeeAuditStatus
    final_rating: Optional[str] = None
    submitted_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("submitted_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class EmployeeAuditOut(EmployeeAuditSummary):
    job_description: str
    job_description_attached: bool
    grade: Optional[str] = None
    salary: Optional[Decimal] = None
    other_financial_benefit: Optional[str] = None
    home_address: Optional[str] = None
    home_telephone: Optional[str] = None
    manages_staff: bool
    number_of_employees: Optional[int] = None
    management_experience: Optional[str] = None
    people_supervised: Optional[str] = None
    employment_history: List[EmploymentHistoryEntry]
    unpaid_roles: List[UnpaidRoleEntry]
    education: List[EducationEntry]
    training: List[TrainingEntry]
    professional_membership: List[MembershipEntry]
    skills_competency: List[SkillEntry]
    signature: str
    declaration_date: datetime
    audit_comments: Optional[str] = None
    competency_rating: Optional[str] = None
    engagement_status: Optional[str] = None
    file_record_status: Optional[str] = None
    performance_scores: Optional[str] = None
    final_consultant_comments: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None

    @field_serializer("submitted_at", "declaration_date", "reviewed_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class EmployeeAuditListResponse(BaseModel):
    items: List[EmployeeAuditSummary]
    total: int
