"""
Request-scoped caller context.

Every pipeline call receives one of these explicitly instead of reading
identity from ambient state.
"""

from dataclasses import dataclass, field
from typing import FrozenSet
from uuid import UUID

from recruitment.core.permissions import check_permission


@dataclass(frozen=True)
class RequestContext:
    """Resolved identity of the caller: tenant, user and permissions."""

    tenant_id: UUID
    user_id: str
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def actor(self) -> str:
        return self.user_id

    def has(self, permission: str) -> bool:
        return check_permission(self.permissions, permission)

    @classmethod
    def for_candidate(cls, tenant_id: UUID, candidate_id: UUID) -> "RequestContext":
        """Context for unauthenticated calls made through an onboarding link."""
        return cls(tenant_id=tenant_id, user_id=f"candidate:{candidate_id}")
