"""
Biodata submission schemas
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from staffdesk.models.biodata import BiodataStatus, Gender, MaritalStatus
from staffdesk.schemas.common import serialize_dt


class BiodataCreate(BaseModel):
    """Candidate intake form (submitted without an account)"""
    company_hired_to: str = Field(..., min_length=1)
    candidate_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=10, description="At least 10 characters")
    date_of_birth: date
    gender: Gender
    residential_address: str = Field(..., min_length=1)
    nationality: Optional[str] = None
    state: str = Field(..., min_length=1)
    marital_status: MaritalStatus
    last_employer_name_address: str = Field(..., min_length=1)
    last_employer_contact: str = Field(..., min_length=1)
    first_previous_employer: str = Field(..., min_length=1)
    second_previous_employer: str = Field(..., min_length=1)
    pension_pin: Optional[str] = None
    pension_provider_name: Optional[str] = None
    certification: Optional[str] = None
    next_of_kin_contact: str = Field(..., min_length=1)
    next_of_kin_address: str = Field(..., min_length=1)

    utility_bill_path: Optional[str] = None
    education_certificate_path: Optional[str] = None
    birth_certificate_path: Optional[str] = None
    passport_photo_path: Optional[str] = None
    id_card_path: Optional[str] = None
    cv_path: Optional[str] = None
    first_guarantor_form_path: Optional[str] = None
    first_guarantor_id_path: Optional[str] = None
    second_guarantor_form_path: Optional[str] = None
    second_guarantor_id_path: Optional[str] = None

    @field_validator("gender", "marital_status", mode="before")
    @classmethod
    def upper_choice(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator(
        "company_hired_to",
        "candidate_name",
        "phone_number",
        "residential_address",
        "state",
        "last_employer_name_address",
        "last_employer_contact",
        "first_previous_employer",
        "second_previous_employer",
        "next_of_kin_contact",
        "next_of_kin_address",
    )
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    @field_validator("date_of_birth")
    @classmethod
    def born_in_the_past(cls, v: date) -> date:
        if v >= date.today():
            raise ValueError("Date of birth must be in the past")
        return v


class BiodataReview(BaseModel):
    """Approve or reject a submission"""
    status: BiodataStatus = Field(..., description="APPROVED or REJECTED")
    notes: Optional[str] = Field(None, description="Reviewer notes")

    @field_validator("status")
    @classmethod
    def decision_only(cls, v: BiodataStatus) -> BiodataStatus:
        if v == BiodataStatus.PENDING:
            raise ValueError("Status must be APPROVED or REJECTED")
        return v


class BiodataSummary(BaseModel):
    """Row in the review list"""
    id: int
    company_hired_to: str
    candidate_name: str
    phone_number: str
    state: str
    status: BiodataStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class BiodataOut(BiodataSummary):
    """Full submission with review details"""
    date_of_birth: date
    gender: Gender
    residential_address: str
    nationality: Optional[str] = None
    marital_status: MaritalStatus
    last_employer_name_address: str
    last_employer_contact: str
    first_previous_employer: str
    second_previous_employer: str
    pension_pin: Optional[str] = None
    pension_provider_name: Optional[str] = None
    certification: Optional[str] = None
    next_of_kin_contact: str
    next_of_kin_address: str
    utility_bill_path: Optional[str] = None
    education_certificate_path: Optional[str] = None
    birth_certificate_path: Optional[str] = None
    passport_photo_path: Optional[str] = None
    id_card_path: Optional[str] = None
    cv_path: Optional[str] = None
    first_guarantor_form_path: Optional[str] = None
    first_guarantor_id_path: Optional[str] = None
    second_guarantor_form_path: Optional[str] = None
    second_guarantor_id_path: Optional[str] = None
    notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    updated_at: datetime

    @field_serializer("created_at", "reviewed_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return serialize_dt(dt)


class BiodataReceipt(BaseModel):
    """What a candidate sees after submitting"""
    id: int
    status: BiodataStatus
    message: str = "Your biodata has been submitted successfully."


class BiodataListResponse(BaseModel):
    items: List[BiodataSummary]
    total: int
