"""
OnboardingForm model.

One row per candidate, filled progressively by document extraction, the
candidate's own edits and the recruiter's review.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import JsonColumn, TenantScopedModel


class OnboardingForm(TenantScopedModel):
    """Onboarding form data, declaration checklist and review milestones."""

    __tablename__ = "onboarding_form"

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidate.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )

    # Personal info (KTP)
    id_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ktp_rt_rw: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    ktp_village: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    ktp_sub_district: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    ktp_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    ktp_province: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    domicile_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    place_of_birth: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    religion: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    marital_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Financial info
    bank_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bank_account_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    bank_account_holder: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    npwp_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    # Emergency contact
    emergency_contact_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    emergency_contact_relationship: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    emergency_contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Employment terms (filled by recruiter)
    employment_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    employment_duration_months: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    employment_salary: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Declaration checklist: {"ketentuan": [...], "sanksi": [...], "final_declaration": {...}}
    declaration: Mapped[dict] = mapped_column(JsonColumn, nullable=False)

    # Milestones
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    data_reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    data_reviewed_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    submitted_for_hrd_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    hrd_approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    hrd_rejected_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    hrd_decided_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    hrd_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    locked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "hrd_approved_at IS NULL OR hrd_rejected_at IS NULL",
            name="ck_onboarding_form_single_decision",
        ),
    )

    @property
    def hrd_decision(self) -> Optional[str]:
        if self.hrd_approved_at is not None:
            return "approved"
        if self.hrd_rejected_at is not None:
            return "rejected"
        return None
