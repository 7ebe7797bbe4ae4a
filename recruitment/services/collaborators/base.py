"""
Interfaces for the collaborators the pipeline hands work to.

Contract creation and notifications are fire-and-forget: the pipeline has
already committed when they run, and their failures are logged, not raised.
"""

import logging
from typing import Awaitable, Optional, Protocol
from uuid import UUID

from recruitment.schemas.hrd import ContractDraftRequest

logger = logging.getLogger(__name__)


class ContractCreator(Protocol):
    """Receives approved onboarding as a contract draft request."""

    async def request_contract(self, request: ContractDraftRequest) -> None:
        ...


class Notifier(Protocol):
    """Best-effort stage and decision events."""

    async def stage_changed(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        from_status: str,
        to_status: str,
        actor: str,
    ) -> None:
        ...

    async def hrd_decided(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        form_id: UUID,
        decision: str,
        actor: str,
        comment: Optional[str] = None,
    ) -> None:
        ...


class FileStorage(Protocol):
    """Opaque put/get-by-reference store for uploaded files."""

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        ...

    async def get(self, ref: str) -> bytes:
        ...


async def best_effort(description: str, call: Awaitable[None]) -> bool:
    """Await a collaborator call; log and report failure instead of raising."""
    try:
        await call
    except Exception:
        logger.exception("%s failed; pipeline state is unaffected", description)
        return False
    return True
