"""
Pydantic schemas for the HRD approval workflow.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from recruitment.schemas.onboarding import OnboardingFormRead


class EmploymentTerms(BaseModel):
    start_date: date
    duration_months: int
    salary: str


class ContractDraftRequest(BaseModel):
    """Handed to the contract-creation collaborator when HRD approves."""

    tenant_id: UUID
    candidate_id: UUID
    form_id: UUID
    employment_terms: EmploymentTerms
    approved_by: str
    approved_at: datetime


class RejectRequest(BaseModel):
    comment: Optional[str] = None


class PendingHrdRead(OnboardingFormRead):
    candidate_name: Optional[str] = None


class HrdDecisionRead(BaseModel):
    id: UUID
    form_id: UUID
    candidate_id: UUID
    decision: str
    comment: Optional[str] = None
    actor: str
    decided_at: datetime

    model_config = ConfigDict(from_attributes=True)
