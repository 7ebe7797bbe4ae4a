"""
Default collaborators that only log.

Deployments wire real contract and notification services in their place.
"""

import logging
from typing import Optional
from uuid import UUID

from recruitment.schemas.hrd import ContractDraftRequest

logger = logging.getLogger(__name__)


class LoggingContractCreator:
    async def request_contract(self, request: ContractDraftRequest) -> None:
        logger.info(
            "Contract draft requested for candidate %s (form %s), start %s, %s months",
            request.candidate_id,
            request.form_id,
            request.employment_terms.start_date,
            request.employment_terms.duration_months,
        )


class LoggingNotifier:
    async def stage_changed(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        from_status: str,
        to_status: str,
        actor: str,
    ) -> None:
        logger.info("Candidate %s reached %s (from %s) by %s", candidate_id, to_status, from_status, actor)

    async def hrd_decided(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        form_id: UUID,
        decision: str,
        actor: str,
        comment: Optional[str] = None,
    ) -> None:
        logger.info("HRD %s onboarding %s for candidate %s", decision, form_id, candidate_id)
