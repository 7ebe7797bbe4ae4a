"""
HrdDecision model.

Append-only history of HRD decisions and queue changes. The form carries only the
current decision; this table keeps every one, including decisions later
reopened for rework.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import TenantScopedModel


class HrdDecision(TenantScopedModel):
    """One HRD decision on an onboarding form."""

    __tablename__ = "hrd_decision"

    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("onboarding_form.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidate.id", ondelete="RESTRICT"),
        nullable=False,
    )
    # approved | rejected | reopened | withdrawn
    decision: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    actor: Mapped[str] = mapped_column(String(100), nullable=False)
    decided_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
