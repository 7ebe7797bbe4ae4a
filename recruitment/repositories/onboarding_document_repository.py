"""
Repository for onboarding document records.
"""

import uuid
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.onboarding_document import OnboardingDocument


class OnboardingDocumentRepository:
    """Insert and list uploaded documents."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        tenant_id: UUID,
        candidate_id: UUID,
        document_type: str,
        file_ref: str,
        content_type: str,
        size_bytes: int,
        original_filename: Optional[str] = None,
        uploaded_by: Optional[str] = None,
    ) -> OnboardingDocument:
        document = OnboardingDocument(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            candidate_id=candidate_id,
            document_type=document_type,
            file_ref=file_ref,
            content_type=content_type,
            size_bytes=size_bytes,
            original_filename=original_filename,
            uploaded_by=uploaded_by,
            needs_review=False,
        )
        self.db.add(document)
        await self.db.flush()
        await self.db.refresh(document)
        return document

    async def save(self, document: OnboardingDocument) -> OnboardingDocument:
        await self.db.flush()
        await self.db.refresh(document)
        return document

    async def list_for_candidate(self, tenant_id: UUID, candidate_id: UUID) -> List[OnboardingDocument]:
        result = await self.db.execute(
            select(OnboardingDocument)
            .where(
                OnboardingDocument.tenant_id == tenant_id,
                OnboardingDocument.candidate_id == candidate_id,
            )
            .order_by(OnboardingDocument.created_at.asc())
        )
        return list(result.scalars().all())

    async def types_for_candidate(self, tenant_id: UUID, candidate_id: UUID) -> Set[str]:
        result = await self.db.execute(
            select(OnboardingDocument.document_type)
            .where(
                OnboardingDocument.tenant_id == tenant_id,
                OnboardingDocument.candidate_id == candidate_id,
            )
            .distinct()
        )
        return set(result.scalars().all())

    async def get_by_id(self, tenant_id: UUID, document_id: UUID) -> Optional[OnboardingDocument]:
        result = await self.db.execute(
            select(OnboardingDocument).where(
                OnboardingDocument.tenant_id == tenant_id,
                OnboardingDocument.id == document_id,
            )
        )
        return result.scalar_one_or_none()
