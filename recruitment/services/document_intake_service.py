"""
Document intake and the KTP confidence gate.

Uploads come in through an onboarding link. Type and size are checked before
anything is stored. KTP uploads go to the OCR capability; the result is
normalized to canonical fields straight away and only then gated.
"""

import asyncio
import logging
import mimetypes
import uuid
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.config import settings
from recruitment.core.context import RequestContext
from recruitment.errors import (
    DocumentNotFound,
    ExtractionUnavailable,
    FileTooLarge,
    LowConfidence,
    UnsupportedFileType,
)
from recruitment.models.onboarding_document import OnboardingDocument
from recruitment.repositories.onboarding_document_repository import OnboardingDocumentRepository
from recruitment.schemas.document import DocumentUploadResult, OnboardingDocumentRead
from recruitment.services.collaborators.base import FileStorage
from recruitment.services.confidence_gate import evaluate_confidence
from recruitment.services.ocr.base import OcrExtraction, OcrExtractor
from recruitment.services.ocr.ktp_fields import map_ktp_to_form, normalize_ocr_fields
from recruitment.services.onboarding_form_service import OnboardingFormService
from recruitment.services.onboarding_link_service import OnboardingLinkService

logger = logging.getLogger(__name__)

IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})

ALLOWED_CONTENT_TYPES: Dict[str, frozenset] = {
    "ktp": IMAGE_TYPES,
    "kk": IMAGE_TYPES | {"application/pdf"},
    "skck": IMAGE_TYPES | {"application/pdf"},
}

REQUIRED_DOCUMENT_TYPES = ("ktp", "kk")

_CONTENT_TYPE_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}

FieldMapper = Callable[[Mapping[str, str]], Dict[str, Any]]


def normalize_content_type(content_type: Optional[str], filename: Optional[str] = None) -> Optional[str]:
    """Lower-case, strip parameters, and fall back to the file extension."""
    value = (content_type or "").split(";")[0].strip().lower()
    if not value or value == "application/octet-stream":
        guessed, _ = mimetypes.guess_type(filename or "")
        value = (guessed or value).lower()
    value = _CONTENT_TYPE_ALIASES.get(value, value)
    return value or None


def check_upload(
    document_type: str,
    content_type: Optional[str],
    size: int,
    max_bytes: Optional[int] = None,
) -> None:
    """Raise ``UnsupportedFileType`` or ``FileTooLarge``; nothing else is looked at."""
    allowed = ALLOWED_CONTENT_TYPES.get(document_type)
    if allowed is None:
        raise UnsupportedFileType(document_type, content_type, [])
    if content_type not in allowed:
        raise UnsupportedFileType(document_type, content_type, allowed)
    limit = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    if size > limit:
        raise FileTooLarge(size, limit)


class DocumentIntakeService:
    """Accepts onboarding documents and prefills the form from KTP extraction."""

    def __init__(
        self,
        db: AsyncSession,
        extractor: Optional[OcrExtractor],
        storage: FileStorage,
        field_mapper: FieldMapper = map_ktp_to_form,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
    ):
        self.db = db
        self.extractor = extractor
        self.storage = storage
        self.field_mapper = field_mapper
        self.timeout = settings.OCR_TIMEOUT_SECONDS if timeout is None else timeout
        self.max_bytes = max_bytes
        self.repository = OnboardingDocumentRepository(db)
        self.links = OnboardingLinkService(db)
        self.forms = OnboardingFormService(db, links=self.links)

    @property
    def upload_limit(self) -> int:
        return settings.MAX_UPLOAD_BYTES if self.max_bytes is None else self.max_bytes

    async def upload_document(
        self,
        token: str,
        data: bytes,
        document_type: str,
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
        size: Optional[int] = None,
    ) -> DocumentUploadResult:
        """
        ``size`` is the full upload size when ``data`` was read only up to
        ``upload_limit + 1`` bytes.
        """
        candidate = await self.links.resolve(token)
        content_type = normalize_content_type(content_type, filename)
        check_upload(document_type, content_type, max(size or 0, len(data)), self.upload_limit)

        ctx = RequestContext.for_candidate(candidate.tenant_id, candidate.id)
        extension = mimetypes.guess_extension(content_type) or ""
        key = f"{candidate.tenant_id}/{candidate.id}/{document_type}/{uuid.uuid4().hex}{extension}"
        file_ref = await self.storage.put(key, data, content_type)

        document = await self.repository.create(
            tenant_id=candidate.tenant_id,
            candidate_id=candidate.id,
            document_type=document_type,
            file_ref=file_ref,
            content_type=content_type,
            size_bytes=len(data),
            original_filename=filename,
            uploaded_by=ctx.actor,
        )
        logger.info(
            "Stored %s document %s for candidate %s (%d bytes)",
            document_type,
            document.id,
            candidate.id,
            len(data),
        )

        if document_type != "ktp":
            await self.db.commit()
            return DocumentUploadResult(document=OnboardingDocumentRead.model_validate(document))

        extraction = await self._extract(document, data, content_type)
        fields = normalize_ocr_fields(extraction.fields)
        decision = evaluate_confidence(extraction.confidence)
        if decision.confidence != extraction.confidence:
            logger.warning("OCR returned an unusable confidence %r for KTP %s", extraction.confidence, document.id)
        document.ocr_confidence = decision.confidence

        if not decision.prefill:
            await self.repository.save(document)
            await self.db.commit()
            logger.info(
                "KTP %s rejected by confidence gate (%.3f) for candidate %s",
                document.id,
                decision.confidence,
                candidate.id,
            )
            raise LowConfidence(decision.confidence, settings.KTP_REJECT_BELOW, document.id)

        document.extracted_data = fields
        document.needs_review = decision.needs_review
        await self.repository.save(document)

        values = {key: value for key, value in self.field_mapper(fields).items() if value is not None}
        form = await self.forms.get_or_create(ctx, candidate.id)
        if values:
            await self.forms.apply_patch(form, values)
        await self.db.commit()
        logger.info(
            "KTP %s prefilled %d form fields for candidate %s (confidence %.3f, review=%s)",
            document.id,
            len(values),
            candidate.id,
            decision.confidence,
            decision.needs_review,
        )
        return DocumentUploadResult(
            document=OnboardingDocumentRead.model_validate(document),
            extracted_data=fields,
            confidence=decision.confidence,
            needs_review=decision.needs_review,
        )

    async def _extract(self, document: OnboardingDocument, data: bytes, content_type: str) -> OcrExtraction:
        """Run OCR under the timeout; a missing or slow extractor means manual entry."""
        if self.extractor is None:
            await self.db.commit()
            logger.warning("No OCR extractor configured; KTP %s needs manual entry", document.id)
            raise ExtractionUnavailable(document.id)
        try:
            return await asyncio.wait_for(self.extractor.extract(data, content_type), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            await self.db.commit()
            logger.warning("OCR timed out after %ss for KTP %s", self.timeout, document.id)
            raise ExtractionUnavailable(document.id)

    async def list_documents(self, ctx: RequestContext, candidate_id: uuid.UUID):
        return await self.repository.list_for_candidate(ctx.tenant_id, candidate_id)

    async def uploaded_types(self, ctx: RequestContext, candidate_id: uuid.UUID):
        return await self.repository.types_for_candidate(ctx.tenant_id, candidate_id)

    async def read_content(self, ctx: RequestContext, document_id: uuid.UUID) -> Tuple[OnboardingDocument, bytes]:
        document = await self.repository.get_by_id(ctx.tenant_id, document_id)
        if document is None:
            raise DocumentNotFound(document_id)
        return document, await self.storage.get(document.file_ref)
