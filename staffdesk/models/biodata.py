"""
Biodata submission model - candidate intake forms reviewed by HR
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from staffdesk.db.base import Base


class BiodataStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Gender(str, enum.Enum):
    FEMALE = "FEMALE"
    MALE = "MALE"


class MaritalStatus(str, enum.Enum):
    SINGLE = "SINGLE"
    MARRIED = "MARRIED"
    DIVORCED = "DIVORCED"


# Uploaded documents, stored as object keys in the biodata-documents bucket
BIODATA_DOCUMENT_FIELDS = (
    "utility_bill_path",
    "education_certificate_path",
    "birth_certificate_path",
    "passport_photo_path",
    "id_card_path",
    "cv_path",
    "first_guarantor_form_path",
    "first_guarantor_id_path",
    "second_guarantor_form_path",
    "second_guarantor_id_path",
)


class BiodataSubmission(Base):
    __tablename__ = "biodata_submissions"

    id = Column(Integer, primary_key=True, index=True)
    company_hired_to = Column(String, nullable=False)
    candidate_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String, nullable=False)
    residential_address = Column(Text, nullable=False)
    nationality = Column(String, nullable=True)
    state = Column(String, nullable=False)
    marital_status = Column(String, nullable=False)

    last_employer_name_address = Column(Text, nullable=False)
    last_employer_contact = Column(String, nullable=False)
    first_previous_employer = Column(Text, nullable=False)
    second_previous_employer = Column(Text, nullable=False)
    pension_pin = Column(String, nullable=True)
    pension_provider_name = Column(String, nullable=True)
    certification = Column(Text, nullable=True)
    next_of_kin_contact = Column(String, nullable=False)
    next_of_kin_address = Column(Text, nullable=False)

    utility_bill_path = Column(String, nullable=True)
    education_certificate_path = Column(String, nullable=True)
    birth_certificate_path = Column(String, nullable=True)
    passport_photo_path = Column(String, nullable=True)
    id_card_path = Column(String, nullable=True)
    cv_path = Column(String, nullable=True)
    first_guarantor_form_path = Column(String, nullable=True)
    first_guarantor_id_path = Column(String, nullable=True)
    second_guarantor_form_path = Column(String, nullable=True)
    second_guarantor_id_path = Column(String, nullable=True)

    status = Column(String, nullable=False, default=BiodataStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    reviewer = relationship("Profile", foreign_keys=[reviewed_by])
