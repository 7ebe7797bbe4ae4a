"""
OnboardingLink model.

Single-use, expiring token that lets a candidate open their onboarding form
without logging in.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import TenantScopedModel


class OnboardingLink(TenantScopedModel):
    """Onboarding link bound to exactly one candidate."""

    __tablename__ = "onboarding_link"

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidate.id", ondelete="RESTRICT"),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_onboarding_link_candidate_issued", "candidate_id", "issued_at"),
    )
