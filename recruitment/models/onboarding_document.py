"""
OnboardingDocument model.

Identity documents uploaded through the onboarding link. For KTP uploads the
OCR confidence is kept, and the extracted fields only when the gate accepted
them.
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import JsonColumn, TenantScopedModel


class OnboardingDocument(TenantScopedModel):
    """Uploaded ktp / kk / skck file reference."""

    __tablename__ = "onboarding_document"

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidate.id", ondelete="RESTRICT"),
        nullable=False,
    )
    document_type: Mapped[str] = mapped_column(String(10), nullable=False)
    file_ref: Mapped[str] = mapped_column(String(500), nullable=False)
    original_filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)
    extracted_data: Mapped[Optional[dict]] = mapped_column(JsonColumn, nullable=True)
    ocr_confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    needs_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    uploaded_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_onboarding_document_candidate_type", "candidate_id", "document_type"),
    )
