"""
Onboarding form store.

Holds the progressively filled form. Patches are last-write-wins per field
and are refused once the form is locked by an HRD decision. The declaration
is only checked at submit time, not here.
"""

import logging
from typing import Any, Dict, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.errors import FormLocked, FormNotFound, IncompleteOnboarding
from recruitment.models.candidate import Candidate
from recruitment.models.onboarding_form import OnboardingForm
from recruitment.repositories.onboarding_form_repository import OnboardingFormRepository
from recruitment.schemas.onboarding import CandidateFormFields, RecruiterFormUpdate
from recruitment.services.declaration import default_declaration_checklist
from recruitment.services.onboarding_link_service import OnboardingLinkService
from recruitment.utils.time import utc_now

logger = logging.getLogger(__name__)


def _as_values(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


class OnboardingFormService:
    """Service for onboarding form reads and edits."""

    def __init__(self, db: AsyncSession, links: Optional[OnboardingLinkService] = None):
        self.db = db
        self.repository = OnboardingFormRepository(db)
        self.links = links or OnboardingLinkService(db)

    async def get_or_create(self, ctx: RequestContext, candidate_id: UUID) -> OnboardingForm:
        """Return the candidate's form, creating an empty one with a fresh checklist. Does not commit."""
        form = await self.repository.get_by_candidate(ctx.tenant_id, candidate_id)
        if form is not None:
            return form
        form = await self.repository.create(
            tenant_id=ctx.tenant_id,
            candidate_id=candidate_id,
            declaration=default_declaration_checklist().model_dump(),
        )
        logger.info("Created onboarding form %s for candidate %s", form.id, candidate_id)
        return form

    async def get(self, ctx: RequestContext, candidate_id: UUID) -> OnboardingForm:
        form = await self.repository.get_by_candidate(ctx.tenant_id, candidate_id)
        if form is None:
            raise FormNotFound(candidate_id)
        return form

    async def get_by_id(self, ctx: RequestContext, form_id: UUID) -> OnboardingForm:
        form = await self.repository.get_by_id(ctx.tenant_id, form_id)
        if form is None:
            raise FormNotFound(form_id)
        return form

    async def apply_patch(self, form: OnboardingForm, values: Dict[str, Any]) -> OnboardingForm:
        """Write ``values`` unless the form is locked. Does not commit."""
        if form.locked_at is not None:
            raise FormLocked(form.locked_at)
        if not await self.repository.patch_unlocked(form, values):
            raise FormLocked(form.locked_at)
        return form

    async def patch(
        self,
        ctx: RequestContext,
        candidate_id: UUID,
        data: Union[CandidateFormFields, Dict[str, Any]],
    ) -> OnboardingForm:
        form = await self.get(ctx, candidate_id)
        await self.apply_patch(form, _as_values(data))
        await self.db.commit()
        return form

    async def get_by_token(self, token: str) -> Tuple[OnboardingForm, Candidate]:
        """Resolve the link, then read (or create) the candidate's form."""
        candidate = await self.links.resolve(token)
        ctx = RequestContext.for_candidate(candidate.tenant_id, candidate.id)
        form = await self.get_or_create(ctx, candidate.id)
        await self.db.commit()
        return form, candidate

    async def patch_by_token(self, token: str, data: CandidateFormFields) -> OnboardingForm:
        """Progressive save from the public page."""
        candidate = await self.links.resolve(token)
        ctx = RequestContext.for_candidate(candidate.tenant_id, candidate.id)
        form = await self.get_or_create(ctx, candidate.id)
        await self.apply_patch(form, _as_values(data))
        await self.db.commit()
        return form

    async def update_by_recruiter(
        self,
        ctx: RequestContext,
        candidate_id: UUID,
        data: RecruiterFormUpdate,
    ) -> OnboardingForm:
        """Recruiter corrections and employment terms."""
        form = await self.get(ctx, candidate_id)
        await self.apply_patch(form, _as_values(data))
        await self.db.commit()
        logger.info("Onboarding form %s updated by %s", form.id, ctx.actor)
        return form

    async def mark_data_reviewed(self, ctx: RequestContext, candidate_id: UUID) -> OnboardingForm:
        """Recruiter confirms the submitted data."""
        form = await self.get(ctx, candidate_id)
        if form.submitted_at is None:
            raise IncompleteOnboarding(["submitted_at"])
        await self.apply_patch(form, {"data_reviewed_at": utc_now(), "data_reviewed_by": ctx.actor})
        await self.db.commit()
        logger.info("Onboarding form %s reviewed by %s", form.id, ctx.actor)
        return form
