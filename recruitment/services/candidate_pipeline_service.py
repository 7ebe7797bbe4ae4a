"""
Candidate pipeline business logic service.

The only place a candidate's status is written. Every change goes through
``advance``: table lookup, on-enter hook, conditional status update, audit
event, in that order.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.core.pipeline import CandidateStatus, is_allowed, is_decision_only
from recruitment.errors import CandidateNotFound, InvalidTransition
from recruitment.models.candidate import Candidate
from recruitment.models.candidate_status_event import CandidateStatusEvent
from recruitment.repositories.candidate_repository import CandidateRepository
from recruitment.repositories.status_event_repository import StatusEventRepository
from recruitment.schemas.candidate import CandidateCreate
from recruitment.services.collaborators.base import Notifier, best_effort
from recruitment.utils.time import utc_now

logger = logging.getLogger(__name__)

# Runs inside the transition's unit of work, before the status is written.
EnterHook = Callable[[RequestContext, Candidate], Awaitable[None]]


def _status_value(status: Union[CandidateStatus, str]) -> str:
    return getattr(status, "value", status)


class CandidatePipelineService:
    """Service for candidate creation, reads and status transitions."""

    def __init__(
        self,
        db: AsyncSession,
        hooks: Optional[Dict[CandidateStatus, EnterHook]] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.db = db
        self.repository = CandidateRepository(db)
        self.events = StatusEventRepository(db)
        self.hooks = dict(hooks or {})
        self.notifier = notifier

    async def create_candidate(self, ctx: RequestContext, data: CandidateCreate) -> Candidate:
        """Create a candidate in the ``new`` status."""
        candidate = await self.repository.create(ctx.tenant_id, data, created_by=ctx.actor)
        await self.db.commit()
        logger.info("Candidate %s created by %s", candidate.id, ctx.actor)
        return candidate

    async def get_candidate(self, ctx: RequestContext, candidate_id: UUID) -> Candidate:
        candidate = await self.repository.get_by_id(ctx.tenant_id, candidate_id)
        if candidate is None:
            raise CandidateNotFound(candidate_id)
        return candidate

    async def list_candidates(
        self,
        ctx: RequestContext,
        limit: int = 50,
        offset: int = 0,
        status: Optional[CandidateStatus] = None,
    ) -> List[Candidate]:
        return await self.repository.list(ctx.tenant_id, limit=limit, offset=offset, status=status)

    async def history(self, ctx: RequestContext, candidate_id: UUID) -> List[CandidateStatusEvent]:
        """Recorded transitions for a candidate, oldest first."""
        await self.get_candidate(ctx, candidate_id)
        return await self.events.list_for_candidate(ctx.tenant_id, candidate_id)

    async def transition(
        self,
        ctx: RequestContext,
        candidate_id: UUID,
        target: Union[CandidateStatus, str],
        reason: Optional[str] = None,
    ) -> Candidate:
        """
        Move a candidate to ``target`` on behalf of a recruiter.

        Edges reserved for HRD decisions are refused here. Raises
        ``InvalidTransition`` without writing anything when the move is not
        in the table.
        """
        candidate = await self.get_candidate(ctx, candidate_id)
        event = await self.advance(ctx, candidate, target, reason=reason)
        await self.db.commit()
        await self.notify(ctx, event)
        return candidate

    async def advance(
        self,
        ctx: RequestContext,
        candidate: Candidate,
        target: Union[CandidateStatus, str],
        reason: Optional[str] = None,
        decision: bool = False,
    ) -> CandidateStatusEvent:
        """
        Apply one transition inside the caller's unit of work. Does not commit.

        ``decision`` unlocks the edges only an HRD decision may take.
        """
        current = CandidateStatus(candidate.status)
        try:
            target = CandidateStatus(target)
        except ValueError:
            raise InvalidTransition(current.value, str(target))

        if not is_allowed(current, target):
            raise InvalidTransition(current.value, target.value)
        if is_decision_only(current, target) and not decision:
            raise InvalidTransition(current.value, target.value)

        hook = self.hooks.get(target)
        if hook is not None:
            await hook(ctx, candidate)

        if not await self.repository.compare_and_set_status(candidate, current, target):
            # Someone moved the candidate between our read and this write.
            raise InvalidTransition(_status_value(candidate.status), target.value)

        event = await self.events.append(
            tenant_id=ctx.tenant_id,
            candidate_id=candidate.id,
            from_status=current,
            to_status=target,
            actor=ctx.actor,
            occurred_at=utc_now(),
            reason=reason,
        )
        logger.info(
            "Candidate %s moved %s -> %s by %s",
            candidate.id,
            current.value,
            target.value,
            ctx.actor,
        )
        return event

    async def notify(self, ctx: RequestContext, event: CandidateStatusEvent) -> None:
        """Tell the notifier about a committed transition. Never raises."""
        if self.notifier is None:
            return
        await best_effort(
            f"Stage notification for candidate {event.candidate_id}",
            self.notifier.stage_changed(
                tenant_id=ctx.tenant_id,
                candidate_id=event.candidate_id,
                from_status=_status_value(event.from_status),
                to_status=_status_value(event.to_status),
                actor=event.actor,
            ),
        )
