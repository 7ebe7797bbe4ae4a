"""
Final submission from the public onboarding page.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.core.pipeline import CandidateStatus
from recruitment.errors import FormLocked, LinkAlreadyUsed, MissingDocuments
from recruitment.models.onboarding_form import OnboardingForm
from recruitment.repositories.onboarding_document_repository import OnboardingDocumentRepository
from recruitment.schemas.onboarding import OnboardingSubmission
from recruitment.services.candidate_pipeline_service import CandidatePipelineService
from recruitment.services.declaration import merge_with_template, validate_for_submission
from recruitment.services.document_intake_service import REQUIRED_DOCUMENT_TYPES
from recruitment.services.onboarding_form_service import OnboardingFormService
from recruitment.services.onboarding_link_service import OnboardingLinkService
from recruitment.utils.time import utc_now

logger = logging.getLogger(__name__)


class PublicOnboardingService:
    """Submit an onboarding form through its link."""

    def __init__(self, db: AsyncSession, pipeline: CandidatePipelineService):
        self.db = db
        self.pipeline = pipeline
        self.links = OnboardingLinkService(db)
        self.forms = OnboardingFormService(db, links=self.links)
        self.documents = OnboardingDocumentRepository(db)

    async def submit(self, token: str, submission: OnboardingSubmission) -> OnboardingForm:
        """
        Validate and submit the form, complete onboarding and consume the link.

        Nothing is written unless every check passes: declaration fully
        acknowledged, KTP and KK uploaded, form not locked, candidate still in
        ``onboarding``.
        """
        link = await self.links.resolve_link(token)
        ctx = RequestContext.for_candidate(link.tenant_id, link.candidate_id)
        candidate = await self.pipeline.get_candidate(ctx, link.candidate_id)

        declaration = validate_for_submission(merge_with_template(submission.declaration))

        uploaded = await self.documents.types_for_candidate(ctx.tenant_id, candidate.id)
        missing = [doc_type for doc_type in REQUIRED_DOCUMENT_TYPES if doc_type not in uploaded]
        if missing:
            raise MissingDocuments(missing)

        form = await self.forms.get_or_create(ctx, candidate.id)
        if form.locked_at is not None:
            raise FormLocked(form.locked_at)

        values = submission.model_dump(exclude_unset=True, exclude={"declaration"})
        values["declaration"] = declaration.model_dump()
        values["submitted_at"] = utc_now()
        await self.forms.apply_patch(form, values)

        event = await self.pipeline.advance(
            ctx, candidate, CandidateStatus.ONBOARDING_COMPLETED, reason="Onboarding form submitted"
        )

        if not await self.links.consume(link):
            # A retried submit got here first; keep its result.
            used_at = link.used_at
            await self.db.rollback()
            raise LinkAlreadyUsed(used_at)

        await self.db.commit()
        logger.info("Candidate %s submitted onboarding form %s", candidate.id, form.id)
        await self.pipeline.notify(ctx, event)
        return form
