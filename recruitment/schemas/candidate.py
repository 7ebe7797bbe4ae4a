"""
Pydantic schemas for candidates and their status history.
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from recruitment.core.pipeline import CandidateStatus
from recruitment.schemas.base import TenantScopedRead


class CandidateCreate(BaseModel):
    """Payload a recruiter sends to register a candidate."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    employment_type: Literal["internal", "external"] = "external"


class CandidateRead(TenantScopedRead):
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    employment_type: str
    status: CandidateStatus
    created_by: Optional[str] = None


class TransitionRequest(BaseModel):
    """Request to move a candidate to another pipeline status."""

    target_status: CandidateStatus
    reason: Optional[str] = None


class StatusEventRead(BaseModel):
    id: UUID
    candidate_id: UUID
    from_status: CandidateStatus
    to_status: CandidateStatus
    actor: str
    reason: Optional[str] = None
    occurred_at: datetime

    model_config = ConfigDict(from_attributes=True)
