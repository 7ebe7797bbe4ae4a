"""
CandidateStatusEvent model.

Append-only audit log of pipeline transitions. Rows are never updated.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import TenantScopedModel
from recruitment.models.candidate import CandidateStatusColumn
from recruitment.core.pipeline import CandidateStatus


class CandidateStatusEvent(TenantScopedModel):
    """One recorded status transition."""

    __tablename__ = "candidate_status_event"

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidate.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    from_status: Mapped[CandidateStatus] = mapped_column(CandidateStatusColumn, nullable=False)
    to_status: Mapped[CandidateStatus] = mapped_column(CandidateStatusColumn, nullable=False)
    actor: Mapped[str] = mapped_column(String(100), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
