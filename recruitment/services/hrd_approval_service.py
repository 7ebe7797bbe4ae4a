"""
HRD approval workflow.

Decisions are written with a single conditional UPDATE on the form, so of
two concurrent approve/reject calls exactly one wins. Contract requests and
notifications go out only after the decision is committed.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.core.pipeline import CandidateStatus
from recruitment.errors import (
    AlreadyDecided,
    CommentRequired,
    FormLocked,
    FormNotFound,
    IncompleteOnboarding,
)
from recruitment.models.candidate import Candidate
from recruitment.models.hrd_decision import HrdDecision
from recruitment.models.onboarding_form import OnboardingForm
from recruitment.repositories.hrd_decision_repository import HrdDecisionRepository
from recruitment.repositories.onboarding_form_repository import OnboardingFormRepository
from recruitment.schemas.hrd import ContractDraftRequest, EmploymentTerms, PendingHrdRead
from recruitment.services.candidate_pipeline_service import CandidatePipelineService
from recruitment.services.collaborators.base import ContractCreator, Notifier, best_effort
from recruitment.utils.time import utc_now

logger = logging.getLogger(__name__)

EMPLOYMENT_TERM_FIELDS = (
    "employment_start_date",
    "employment_duration_months",
    "employment_salary",
)


def missing_for_contract(form: Optional[OnboardingForm]) -> List[str]:
    """What still blocks a contract request, in the order a recruiter fixes it."""
    if form is None:
        return ["onboarding_form"]
    missing = []
    if form.submitted_at is None:
        missing.append("submitted_at")
    if form.data_reviewed_at is None:
        missing.append("data_reviewed_at")
    missing.extend(name for name in EMPLOYMENT_TERM_FIELDS if getattr(form, name) in (None, ""))
    return missing


def employment_terms(form: OnboardingForm) -> EmploymentTerms:
    missing = [name for name in EMPLOYMENT_TERM_FIELDS if getattr(form, name) in (None, "")]
    if missing:
        raise IncompleteOnboarding(missing)
    return EmploymentTerms(
        start_date=form.employment_start_date,
        duration_months=form.employment_duration_months,
        salary=form.employment_salary,
    )


class HrdApprovalService:
    """Service for the HRD queue and its decisions."""

    def __init__(
        self,
        db: AsyncSession,
        pipeline: Optional[CandidatePipelineService] = None,
        contracts: Optional[ContractCreator] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.db = db
        self.forms = OnboardingFormRepository(db)
        self.decisions = HrdDecisionRepository(db)
        self.pipeline = pipeline or CandidatePipelineService(db, notifier=notifier)
        self.contracts = contracts
        self.notifier = notifier

    async def intake(self, ctx: RequestContext, candidate: Candidate) -> None:
        """
        Queue the candidate's form for HRD. Runs when the candidate enters
        ``contract_requested``, inside that transition's unit of work.
        """
        form = await self.forms.get_by_candidate(ctx.tenant_id, candidate.id)
        missing = missing_for_contract(form)
        if missing:
            raise IncompleteOnboarding(missing)
        if not await self.forms.patch_unlocked(form, {"submitted_for_hrd_at": utc_now()}):
            raise FormLocked(form.locked_at)
        logger.info("Onboarding form %s queued for HRD by %s", form.id, ctx.actor)

    async def withdraw(self, ctx: RequestContext, candidate: Candidate) -> None:
        """
        Pull an undecided form out of the HRD queue. Runs when the candidate
        is rejected, inside that transition's unit of work.
        """
        form = await self.forms.get_by_candidate(ctx.tenant_id, candidate.id)
        if form is None:
            return
        withdrawn_at = utc_now()
        if await self.forms.withdraw_hrd_request(form, withdrawn_at):
            await self.decisions.append(
                tenant_id=ctx.tenant_id,
                form_id=form.id,
                candidate_id=candidate.id,
                decision="withdrawn",
                actor=ctx.actor,
                decided_at=withdrawn_at,
            )
            logger.info("Onboarding form %s withdrawn from HRD by %s", form.id, ctx.actor)

    async def list_pending(self, ctx: RequestContext) -> List[PendingHrdRead]:
        rows = await self.forms.list_pending_hrd(ctx.tenant_id)
        return [
            PendingHrdRead.model_validate(form).model_copy(update={"candidate_name": name})
            for form, name in rows
        ]

    async def get_form(self, ctx: RequestContext, form_id: UUID) -> OnboardingForm:
        form = await self.forms.get_by_id(ctx.tenant_id, form_id)
        if form is None:
            raise FormNotFound(form_id)
        return form

    async def decisions_for_form(self, ctx: RequestContext, form_id: UUID) -> List[HrdDecision]:
        await self.get_form(ctx, form_id)
        return await self.decisions.list_for_form(ctx.tenant_id, form_id)

    async def approve(self, ctx: RequestContext, form_id: UUID) -> ContractDraftRequest:
        """Approve the onboarding, hire the candidate and request a contract draft."""
        form = await self.get_form(ctx, form_id)
        terms = employment_terms(form)

        approved_at = utc_now()
        if not await self.forms.record_decision(form, "hrd_approved_at", approved_at, ctx.actor):
            raise self._refusal(ctx, form, "approve")

        await self.decisions.append(
            tenant_id=ctx.tenant_id,
            form_id=form.id,
            candidate_id=form.candidate_id,
            decision="approved",
            actor=ctx.actor,
            decided_at=approved_at,
        )
        candidate = await self.pipeline.get_candidate(ctx, form.candidate_id)
        event = await self.pipeline.advance(
            ctx, candidate, CandidateStatus.HIRED, reason="HRD approved", decision=True
        )
        await self.db.commit()
        logger.info("HRD approved form %s for candidate %s by %s", form.id, form.candidate_id, ctx.actor)

        request = ContractDraftRequest(
            tenant_id=ctx.tenant_id,
            candidate_id=form.candidate_id,
            form_id=form.id,
            employment_terms=terms,
            approved_by=ctx.actor,
            approved_at=approved_at,
        )
        if self.contracts is not None:
            await best_effort(
                f"Contract request for candidate {form.candidate_id}",
                self.contracts.request_contract(request),
            )
        await self.pipeline.notify(ctx, event)
        await self._notify_decision(ctx, form, "approved")
        return request

    async def reject(self, ctx: RequestContext, form_id: UUID, comment: Optional[str]) -> OnboardingForm:
        """Reject with a mandatory comment; the candidate goes back to the recruiter."""
        comment = (comment or "").strip()
        if not comment:
            raise CommentRequired()

        form = await self.get_form(ctx, form_id)
        rejected_at = utc_now()
        if not await self.forms.record_decision(form, "hrd_rejected_at", rejected_at, ctx.actor, comment=comment):
            raise self._refusal(ctx, form, "reject")

        await self.decisions.append(
            tenant_id=ctx.tenant_id,
            form_id=form.id,
            candidate_id=form.candidate_id,
            decision="rejected",
            actor=ctx.actor,
            decided_at=rejected_at,
            comment=comment,
        )
        candidate = await self.pipeline.get_candidate(ctx, form.candidate_id)
        event = await self.pipeline.advance(
            ctx, candidate, CandidateStatus.ONBOARDING_COMPLETED, reason=comment, decision=True
        )
        await self.db.commit()
        logger.info("HRD rejected form %s for candidate %s by %s", form.id, form.candidate_id, ctx.actor)

        await self.pipeline.notify(ctx, event)
        await self._notify_decision(ctx, form, "rejected", comment)
        return form

    async def reopen(self, ctx: RequestContext, form_id: UUID) -> OnboardingForm:
        """Unlock a rejected form so the recruiter can fix it and request again."""
        form = await self.get_form(ctx, form_id)
        if form.hrd_approved_at is not None:
            raise AlreadyDecided(form.id, "approved")
        if form.hrd_rejected_at is None:
            return form

        reopened_at = utc_now()
        if await self.forms.clear_rejection(form, reopened_at):
            await self.decisions.append(
                tenant_id=ctx.tenant_id,
                form_id=form.id,
                candidate_id=form.candidate_id,
                decision="reopened",
                actor=ctx.actor,
                decided_at=reopened_at,
            )
            await self.db.commit()
            logger.info("Onboarding form %s reopened by %s", form.id, ctx.actor)
        return form

    @staticmethod
    def _refusal(ctx: RequestContext, form: OnboardingForm, action: str) -> Exception:
        """Explain a lost decision write from the refreshed form."""
        decision = form.hrd_decision
        if decision is None and form.submitted_for_hrd_at is None:
            logger.info("%s on form %s by %s refused: not awaiting HRD", action.capitalize(), form.id, ctx.actor)
            return IncompleteOnboarding(["submitted_for_hrd_at"])
        logger.info("%s on form %s by %s lost: already %s", action.capitalize(), form.id, ctx.actor, decision)
        return AlreadyDecided(form.id, decision)

    async def _notify_decision(
        self,
        ctx: RequestContext,
        form: OnboardingForm,
        decision: str,
        comment: Optional[str] = None,
    ) -> None:
        if self.notifier is None:
            return
        await best_effort(
            f"HRD decision notification for form {form.id}",
            self.notifier.hrd_decided(
                tenant_id=ctx.tenant_id,
                candidate_id=form.candidate_id,
                form_id=form.id,
                decision=decision,
                actor=ctx.actor,
                comment=comment,
            ),
        )
