"""
Candidate model.

Represents a person moving through the recruitment pipeline. The ``status``
column is written only by the pipeline service.
"""

from typing import Optional

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.core.pipeline import CandidateStatus
from recruitment.models.base_model import TenantScopedModel


def _status_values(enum_cls):
    return [member.value for member in enum_cls]


CandidateStatusColumn = Enum(
    CandidateStatus,
    name="candidate_status",
    native_enum=False,
    length=32,
    values_callable=_status_values,
)


class Candidate(TenantScopedModel):
    """Candidate table - identity, contact and the authoritative pipeline status."""

    __tablename__ = "candidate"

    full_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    # Contact information
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    # internal | external
    employment_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="external",
    )

    status: Mapped[CandidateStatus] = mapped_column(
        CandidateStatusColumn,
        nullable=False,
        default=CandidateStatus.NEW,
        index=True,
    )

    created_by: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
