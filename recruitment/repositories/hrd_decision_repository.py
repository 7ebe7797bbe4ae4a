"""
Repository for the append-only HRD decision history.
"""

import uuid
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.hrd_decision import HrdDecision


class HrdDecisionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self,
        tenant_id: UUID,
        form_id: UUID,
        candidate_id: UUID,
        decision: str,
        actor: str,
        decided_at: datetime,
        comment: Optional[str] = None,
    ) -> HrdDecision:
        record = HrdDecision(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            form_id=form_id,
            candidate_id=candidate_id,
            decision=decision,
            comment=comment,
            actor=actor,
            decided_at=decided_at,
        )
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def list_for_form(self, tenant_id: UUID, form_id: UUID) -> List[HrdDecision]:
        result = await self.db.execute(
            select(HrdDecision)
            .where(HrdDecision.tenant_id == tenant_id, HrdDecision.form_id == form_id)
            .order_by(HrdDecision.decided_at.asc())
        )
        return list(result.scalars().all())
