"""
Wires the pipeline's on-enter hooks.

Entering ``onboarding`` issues a link and prepares the form; entering
``contract_requested`` queues the form for HRD; rejecting the candidate
takes an undecided form back out of that queue.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.core.pipeline import CandidateStatus
from recruitment.models.candidate import Candidate
from recruitment.services.candidate_pipeline_service import CandidatePipelineService
from recruitment.services.collaborators.base import ContractCreator, Notifier
from recruitment.services.hrd_approval_service import HrdApprovalService
from recruitment.services.onboarding_form_service import OnboardingFormService
from recruitment.services.onboarding_link_service import OnboardingLinkService


def build_pipeline(db: AsyncSession, notifier: Optional[Notifier] = None) -> CandidatePipelineService:
    links = OnboardingLinkService(db)
    forms = OnboardingFormService(db, links=links)
    pipeline = CandidatePipelineService(db, notifier=notifier)
    hrd = HrdApprovalService(db, pipeline=pipeline, notifier=notifier)

    async def start_onboarding(ctx: RequestContext, candidate: Candidate) -> None:
        await links.issue_link(ctx, candidate.id, commit=False)
        await forms.get_or_create(ctx, candidate.id)

    pipeline.hooks[CandidateStatus.ONBOARDING] = start_onboarding
    pipeline.hooks[CandidateStatus.CONTRACT_REQUESTED] = hrd.intake
    pipeline.hooks[CandidateStatus.REJECTED] = hrd.withdraw
    return pipeline


def build_hrd_service(
    db: AsyncSession,
    contracts: Optional[ContractCreator] = None,
    notifier: Optional[Notifier] = None,
) -> HrdApprovalService:
    return HrdApprovalService(
        db,
        pipeline=build_pipeline(db, notifier=notifier),
        contracts=contracts,
        notifier=notifier,
    )
