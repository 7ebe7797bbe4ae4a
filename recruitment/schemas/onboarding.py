"""
Pydantic schemas for onboarding links, forms and the declaration checklist.
"""

from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from recruitment.schemas.base import CandidateOwnedRead


# --- Declaration checklist ---------------------------------------------------


class ChecklistItem(BaseModel):
    """One acknowledgement the candidate has to tick."""

    id: str
    text: str = ""
    sub_items: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("sub_items", "subItems"),
    )
    checked: bool = False


class DeclarationChecklist(BaseModel):
    """Two ordered lists of items plus the final declaration."""

    ketentuan: List[ChecklistItem] = Field(default_factory=list)
    sanksi: List[ChecklistItem] = Field(default_factory=list)
    final_declaration: ChecklistItem = Field(
        default_factory=lambda: ChecklistItem(id="final"),
        validation_alias=AliasChoices("final_declaration", "finalDeclaration"),
    )

    model_config = ConfigDict(populate_by_name=True)


# --- Links --------------------------------------------------------------------


class OnboardingLinkRead(BaseModel):
    id: UUID
    candidate_id: UUID
    token: str
    issued_at: datetime
    expires_at: datetime
    used_at: Optional[datetime] = None
    state: Literal["active", "expired", "used"]
    url: str


class IssueLinkRequest(BaseModel):
    ttl_days: Optional[int] = Field(default=None, ge=1, le=365)


class PublicOnboardingView(BaseModel):
    """What the public onboarding page learns from a valid token."""

    candidate_id: UUID
    full_name: str
    expires_at: datetime


# --- Form ----------------------------------------------------------------------


class CandidateFormFields(BaseModel):
    """Fields the candidate may fill through the public link."""

    id_number: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = None
    ktp_rt_rw: Optional[str] = Field(default=None, max_length=20)
    ktp_village: Optional[str] = Field(default=None, max_length=100)
    ktp_sub_district: Optional[str] = Field(default=None, max_length=100)
    ktp_city: Optional[str] = Field(default=None, max_length=100)
    ktp_province: Optional[str] = Field(default=None, max_length=100)
    domicile_address: Optional[str] = None
    place_of_birth: Optional[str] = Field(default=None, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[Literal["male", "female"]] = None
    religion: Optional[str] = Field(default=None, max_length=30)
    marital_status: Optional[str] = Field(default=None, max_length=20)

    bank_name: Optional[str] = Field(default=None, max_length=100)
    bank_account_number: Optional[str] = Field(default=None, max_length=50)
    bank_account_holder: Optional[str] = Field(default=None, max_length=200)
    npwp_number: Optional[str] = Field(default=None, max_length=32)

    emergency_contact_name: Optional[str] = Field(default=None, max_length=200)
    emergency_contact_relationship: Optional[str] = Field(default=None, max_length=50)
    emergency_contact_phone: Optional[str] = Field(default=None, max_length=50)

    model_config = ConfigDict(extra="ignore")


class RecruiterFormUpdate(CandidateFormFields):
    """Recruiter review edits; adds the employment terms."""

    employment_start_date: Optional[date] = None
    employment_duration_months: Optional[int] = Field(default=None, ge=1, le=120)
    employment_salary: Optional[str] = Field(default=None, max_length=50)


class OnboardingSubmission(CandidateFormFields):
    """Final submit from the public page: last field values plus the checklist."""

    declaration: DeclarationChecklist = Field(
        validation_alias=AliasChoices("declaration", "declaration_checklist"),
    )


class OnboardingFormRead(CandidateOwnedRead, RecruiterFormUpdate):
    declaration: DeclarationChecklist

    submitted_at: Optional[datetime] = None
    data_reviewed_at: Optional[datetime] = None
    data_reviewed_by: Optional[str] = None
    submitted_for_hrd_at: Optional[datetime] = None
    hrd_approved_at: Optional[datetime] = None
    hrd_rejected_at: Optional[datetime] = None
    hrd_decided_by: Optional[str] = None
    hrd_comment: Optional[str] = None
    hrd_decision: Optional[str] = None
    locked_at: Optional[datetime] = None


class PublicFormRead(BaseModel):
    """Form as shown to the candidate, with the documents already uploaded."""

    form: OnboardingFormRead
    uploaded_document_types: List[str]
