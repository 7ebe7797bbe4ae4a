"""
Repository for onboarding link database operations.
"""

import uuid
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.onboarding_link import OnboardingLink


class OnboardingLinkRepository:
    """Persist links and consume them with a conditional write."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        token: str,
        issued_at: datetime,
        expires_at: datetime,
        created_by: Optional[str] = None,
    ) -> OnboardingLink:
        link = OnboardingLink(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            candidate_id=candidate_id,
            token=token,
            issued_at=issued_at,
            expires_at=expires_at,
            created_by=created_by,
        )
        self.db.add(link)
        await self.db.flush()
        await self.db.refresh(link)
        return link

    async def get_by_token(self, token: str) -> Optional[OnboardingLink]:
        """Look up a link by token. Not tenant-filtered: the token is the credential."""
        result = await self.db.execute(select(OnboardingLink).where(OnboardingLink.token == token))
        return result.scalar_one_or_none()

    async def latest_for_candidate(self, tenant_id: UUID, candidate_id: UUID) -> Optional[OnboardingLink]:
        result = await self.db.execute(
            select(OnboardingLink)
            .where(
                OnboardingLink.tenant_id == tenant_id,
                OnboardingLink.candidate_id == candidate_id,
            )
            .order_by(OnboardingLink.issued_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def consume(self, link: OnboardingLink, used_at: datetime) -> bool:
        """Set ``used_at`` if still unset. Returns True only for the call that set it."""
        result = await self.db.execute(
            update(OnboardingLink)
            .where(OnboardingLink.id == link.id, OnboardingLink.used_at.is_(None))
            .values(used_at=used_at, updated_at=used_at)
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(link)
        return result.rowcount == 1
