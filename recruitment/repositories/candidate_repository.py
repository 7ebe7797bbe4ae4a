"""
Candidate repository - database operations for Candidate.
"""

from typing import List, Optional
from uuid import UUID
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.pipeline import CandidateStatus
from recruitment.models.candidate import Candidate
from recruitment.schemas.candidate import CandidateCreate
from recruitment.utils.time import utc_now


class CandidateRepository:
    """Repository for Candidate database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        tenant_id: UUID,
        limit: int = 50,
        offset: int = 0,
        status: Optional[CandidateStatus] = None,
    ) -> List[Candidate]:
        """List candidates for a tenant, optionally by status."""
        query = select(Candidate).where(Candidate.tenant_id == tenant_id)

        if status is not None:
            query = query.where(Candidate.status == status)

        query = query.order_by(Candidate.created_at.desc(), Candidate.full_name.asc()).limit(limit).offset(offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, tenant_id: UUID, candidate_id: UUID) -> Optional[Candidate]:
        """Get a candidate by ID for a specific tenant."""
        result = await self.db.execute(
            select(Candidate).where(
                Candidate.id == candidate_id,
                Candidate.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, tenant_id: UUID, data: CandidateCreate, created_by: Optional[str] = None) -> Candidate:
        """Create a new candidate in the ``new`` status."""
        candidate = Candidate(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            status=CandidateStatus.NEW,
            created_by=created_by,
            **data.model_dump(),
        )
        self.db.add(candidate)
        await self.db.flush()
        await self.db.refresh(candidate)
        return candidate

    async def compare_and_set_status(
        self,
        candidate: Candidate,
        expected: CandidateStatus,
        new_status: CandidateStatus,
    ) -> bool:
        """
        Move the candidate to ``new_status`` only if it is still ``expected``.

        Single conditional UPDATE; returns False when another writer got there first.
        """
        result = await self.db.execute(
            update(Candidate)
            .where(
                Candidate.id == candidate.id,
                Candidate.tenant_id == candidate.tenant_id,
                Candidate.status == expected,
            )
            .values(status=new_status, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(candidate)
        return result.rowcount == 1
