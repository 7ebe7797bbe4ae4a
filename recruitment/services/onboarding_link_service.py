"""
Onboarding link issuing and validation.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.config import settings
from recruitment.core.context import RequestContext
from recruitment.errors import CandidateNotFound, LinkAlreadyUsed, LinkExpired, LinkNotFound
from recruitment.models.candidate import Candidate
from recruitment.models.onboarding_link import OnboardingLink
from recruitment.repositories.candidate_repository import CandidateRepository
from recruitment.repositories.onboarding_link_repository import OnboardingLinkRepository
from recruitment.schemas.onboarding import OnboardingLinkRead
from recruitment.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)

# 32 bytes -> 256 bits of entropy, 43 url-safe characters
TOKEN_BYTES = 32


def generate_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def link_state(link: OnboardingLink) -> str:
    if link.used_at is not None:
        return "used"
    if utc_now() >= as_utc(link.expires_at):
        return "expired"
    return "active"


def build_link_url(token: str) -> str:
    return f"{settings.PUBLIC_ONBOARDING_BASE_URL.rstrip('/')}/{token}"


class OnboardingLinkService:
    """Mints, resolves and consumes single-use onboarding links."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = OnboardingLinkRepository(db)
        self.candidates = CandidateRepository(db)

    async def issue_link(
        self,
        ctx: RequestContext,
        candidate_id: UUID,
        ttl: Optional[timedelta] = None,
        commit: bool = True,
    ) -> OnboardingLink:
        """
        Issue a new link for the candidate.

        Older links are left in place; ``latest_link`` only ever surfaces the
        most recent one.
        """
        candidate = await self.candidates.get_by_id(ctx.tenant_id, candidate_id)
        if candidate is None:
            raise CandidateNotFound(candidate_id)

        ttl = ttl or timedelta(days=settings.ONBOARDING_LINK_TTL_DAYS)
        issued_at = utc_now()
        link = await self.repository.create(
            tenant_id=ctx.tenant_id,
            candidate_id=candidate_id,
            token=generate_token(),
            issued_at=issued_at,
            expires_at=issued_at + ttl,
            created_by=ctx.actor,
        )
        logger.info(
            "Issued onboarding link %s for candidate %s, expires %s",
            link.id,
            candidate_id,
            link.expires_at,
        )
        if commit:
            await self.db.commit()
        return link

    async def resolve_link(self, token: str) -> OnboardingLink:
        """Return the link if usable, else raise the precise link error."""
        link = await self.repository.get_by_token(token)
        if link is None:
            raise LinkNotFound()
        if link.used_at is not None:
            raise LinkAlreadyUsed(link.used_at)
        if utc_now() >= as_utc(link.expires_at):
            raise LinkExpired(link.expires_at)
        return link

    async def resolve_with_link(self, token: str) -> Tuple[OnboardingLink, Candidate]:
        link = await self.resolve_link(token)
        candidate = await self.candidates.get_by_id(link.tenant_id, link.candidate_id)
        if candidate is None:
            raise LinkNotFound()
        return link, candidate

    async def resolve(self, token: str) -> Candidate:
        _, candidate = await self.resolve_with_link(token)
        return candidate

    async def consume(self, link: OnboardingLink) -> bool:
        """Set ``used_at`` on the link; False if another request already did."""
        consumed = await self.repository.consume(link, utc_now())
        if consumed:
            logger.info("Onboarding link %s consumed", link.id)
        return consumed

    async def mark_used(self, token: str, commit: bool = True) -> OnboardingLink:
        """Mark the link used. Repeated calls are no-ops."""
        link = await self.repository.get_by_token(token)
        if link is None:
            raise LinkNotFound()
        if link.used_at is None:
            await self.consume(link)
            if commit:
                await self.db.commit()
        return link

    async def latest_link(self, ctx: RequestContext, candidate_id: UUID) -> Optional[OnboardingLinkRead]:
        link = await self.repository.latest_for_candidate(ctx.tenant_id, candidate_id)
        if link is None:
            return None
        return OnboardingLinkRead(
            id=link.id,
            candidate_id=link.candidate_id,
            token=link.token,
            issued_at=link.issued_at,
            expires_at=link.expires_at,
            used_at=link.used_at,
            state=link_state(link),
            url=build_link_url(link.token),
        )
