"""
Shared read-schema bases for rows stored per tenant.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TenantScopedRead(BaseModel):
    """Columns every tenant-scoped row carries (see ``TenantScopedModel``)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    created_at: datetime
    updated_at: datetime


class CandidateOwnedRead(TenantScopedRead):
    """A row that hangs off a single candidate: its form or its documents."""

    candidate_id: UUID
