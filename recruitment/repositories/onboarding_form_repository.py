"""
Repository for onboarding form database operations.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.candidate import Candidate
from recruitment.models.onboarding_form import OnboardingForm
from recruitment.utils.time import utc_now


class OnboardingFormRepository:
    """CRUD plus the conditional writes used by the HRD workflow."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_candidate(self, tenant_id: UUID, candidate_id: UUID) -> Optional[OnboardingForm]:
        result = await self.db.execute(
            select(OnboardingForm).where(
                OnboardingForm.tenant_id == tenant_id,
                OnboardingForm.candidate_id == candidate_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, tenant_id: UUID, form_id: UUID) -> Optional[OnboardingForm]:
        result = await self.db.execute(
            select(OnboardingForm).where(
                OnboardingForm.tenant_id == tenant_id,
                OnboardingForm.id == form_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, tenant_id: UUID, candidate_id: UUID, declaration: dict) -> OnboardingForm:
        form = OnboardingForm(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            candidate_id=candidate_id,
            declaration=declaration,
        )
        self.db.add(form)
        await self.db.flush()
        await self.db.refresh(form)
        return form

    async def update_fields(self, form: OnboardingForm, values: Dict[str, Any]) -> OnboardingForm:
        """Last-write-wins per field."""
        for field, value in values.items():
            setattr(form, field, value)
        form.updated_at = utc_now()
        await self.db.flush()
        await self.db.refresh(form)
        return form

    async def patch_unlocked(self, form: OnboardingForm, values: Dict[str, Any]) -> bool:
        """
        Apply ``values`` only while ``locked_at`` is still unset.

        A decision landing between the caller's read and this write makes the
        UPDATE match nothing, so a locked form is never modified.
        """
        result = await self.db.execute(
            update(OnboardingForm)
            .where(OnboardingForm.id == form.id, OnboardingForm.locked_at.is_(None))
            .values(**values, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(form)
        return result.rowcount == 1

    async def record_decision(
        self,
        form: OnboardingForm,
        decision_column: str,
        decided_at: datetime,
        actor: str,
        comment: Optional[str] = None,
    ) -> bool:
        """
        Compare-and-set the HRD decision.

        Succeeds only if the form is awaiting HRD and neither decision
        timestamp is set; exactly one concurrent caller can win.
        """
        values = {
            decision_column: decided_at,
            "hrd_decided_by": actor,
            "locked_at": decided_at,
            "updated_at": decided_at,
        }
        if comment is not None:
            values["hrd_comment"] = comment
        result = await self.db.execute(
            update(OnboardingForm)
            .where(
                OnboardingForm.id == form.id,
                OnboardingForm.submitted_for_hrd_at.is_not(None),
                OnboardingForm.hrd_approved_at.is_(None),
                OnboardingForm.hrd_rejected_at.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(form)
        return result.rowcount == 1

    async def clear_rejection(self, form: OnboardingForm, reopened_at: datetime) -> bool:
        """Reset a rejected form for rework; no-op unless it is currently rejected."""
        result = await self.db.execute(
            update(OnboardingForm)
            .where(
                OnboardingForm.id == form.id,
                OnboardingForm.hrd_rejected_at.is_not(None),
                OnboardingForm.hrd_approved_at.is_(None),
            )
            .values(
                hrd_rejected_at=None,
                hrd_decided_by=None,
                submitted_for_hrd_at=None,
                data_reviewed_at=None,
                data_reviewed_by=None,
                locked_at=None,
                updated_at=reopened_at,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(form)
        return result.rowcount == 1

    async def withdraw_hrd_request(self, form: OnboardingForm, withdrawn_at: datetime) -> bool:
        """Take an undecided form out of the HRD queue; no-op once HRD has decided."""
        result = await self.db.execute(
            update(OnboardingForm)
            .where(
                OnboardingForm.id == form.id,
                OnboardingForm.submitted_for_hrd_at.is_not(None),
                OnboardingForm.hrd_approved_at.is_(None),
                OnboardingForm.hrd_rejected_at.is_(None),
            )
            .values(submitted_for_hrd_at=None, updated_at=withdrawn_at)
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(form)
        return result.rowcount == 1

    async def list_pending_hrd(self, tenant_id: UUID) -> List[Tuple[OnboardingForm, str]]:
        """Forms sent to HRD without a decision yet, oldest request first."""
        result = await self.db.execute(
            select(OnboardingForm, Candidate.full_name)
            .join(Candidate, Candidate.id == OnboardingForm.candidate_id)
            .where(
                OnboardingForm.tenant_id == tenant_id,
                OnboardingForm.submitted_for_hrd_at.is_not(None),
                OnboardingForm.hrd_approved_at.is_(None),
                OnboardingForm.hrd_rejected_at.is_(None),
            )
            .order_by(OnboardingForm.submitted_for_hrd_at.asc())
        )
        return [(form, name) for form, name in result.all()]
