"""
Pydantic schemas for onboarding document uploads.
"""

from typing import Literal, Optional

from pydantic import BaseModel

from recruitment.schemas.base import CandidateOwnedRead


DocumentType = Literal["ktp", "kk", "skck"]


class OnboardingDocumentRead(CandidateOwnedRead):
    document_type: DocumentType
    file_ref: str
    original_filename: Optional[str] = None
    content_type: str
    size_bytes: int
    extracted_data: Optional[dict] = None
    ocr_confidence: Optional[float] = None
    needs_review: bool = False
    uploaded_by: Optional[str] = None


class DocumentUploadResult(BaseModel):
    """Outcome of an accepted upload. Prefill fields are present only for a gated KTP."""

    document: OnboardingDocumentRead
    extracted_data: Optional[dict] = None
    confidence: Optional[float] = None
    needs_review: bool = False
