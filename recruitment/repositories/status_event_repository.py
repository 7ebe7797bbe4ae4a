"""
Repository for the append-only candidate status log.
"""

import uuid
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.pipeline import CandidateStatus
from recruitment.models.candidate_status_event import CandidateStatusEvent


class StatusEventRepository:
    """Insert and read transition records. There is deliberately no update or delete."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        from_status: CandidateStatus,
        to_status: CandidateStatus,
        actor: str,
        occurred_at: datetime,
        reason: Optional[str] = None,
    ) -> CandidateStatusEvent:
        event = CandidateStatusEvent(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            candidate_id=candidate_id,
            from_status=from_status,
            to_status=to_status,
            actor=actor,
            reason=reason,
            occurred_at=occurred_at,
        )
        self.db.add(event)
        await self.db.flush()
        await self.db.refresh(event)
        return event

    async def list_for_candidate(self, tenant_id: UUID, candidate_id: UUID) -> List[CandidateStatusEvent]:
        result = await self.db.execute(
            select(CandidateStatusEvent)
            .where(
                CandidateStatusEvent.tenant_id == tenant_id,
                CandidateStatusEvent.candidate_id == candidate_id,
            )
            .order_by(CandidateStatusEvent.occurred_at.asc())
        )
        return list(result.scalars().all())
