"""
Public onboarding router - endpoints reached through an onboarding link.

No session is established: every call re-validates the token. The three link
failures share one external response; the precise kind is only logged.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.core.dependencies import get_db, get_file_storage, get_notifier, get_ocr_extractor
from recruitment.errors import AppError, LinkError
from recruitment.schemas.document import DocumentType, DocumentUploadResult
from recruitment.schemas.onboarding import (
    CandidateFormFields,
    OnboardingFormRead,
    OnboardingSubmission,
    PublicFormRead,
    PublicOnboardingView,
)
from recruitment.services.collaborators import FileStorage, Notifier
from recruitment.services.document_intake_service import DocumentIntakeService
from recruitment.services.ocr import OcrExtractor
from recruitment.services.onboarding_form_service import OnboardingFormService
from recruitment.services.onboarding_link_service import OnboardingLinkService
from recruitment.services.pipeline_factory import build_pipeline
from recruitment.services.public_onboarding_service import PublicOnboardingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public/onboarding", tags=["public-onboarding"])

LINK_INVALID_MESSAGE = "Link invalid or expired"


@contextmanager
def link_guard(action: str, token: str):
    """Log the precise link failure and re-raise it as a generic ``link_invalid``."""
    try:
        yield
    except LinkError as exc:
        logger.warning("Public onboarding %s refused: %s (token %s...)", action, exc.code, token[:6])
        raise AppError(LINK_INVALID_MESSAGE, status_code=404, code="link_invalid") from None


@router.get("/{token}", response_model=PublicOnboardingView)
async def resolve_link(token: str, db: AsyncSession = Depends(get_db)):
    with link_guard("resolve", token):
        link, candidate = await OnboardingLinkService(db).resolve_with_link(token)
    return PublicOnboardingView(
        candidate_id=candidate.id,
        full_name=candidate.full_name,
        expires_at=link.expires_at,
    )


@router.get("/{token}/form", response_model=PublicFormRead)
async def get_form(
    token: str,
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    """The form plus the document types already uploaded."""
    with link_guard("form read", token):
        form, candidate = await OnboardingFormService(db).get_by_token(token)
    ctx = RequestContext.for_candidate(candidate.tenant_id, candidate.id)
    uploaded = await DocumentIntakeService(db, None, storage).uploaded_types(ctx, candidate.id)
    return PublicFormRead(
        form=OnboardingFormRead.model_validate(form),
        uploaded_document_types=sorted(uploaded),
    )


@router.patch("/{token}/form", response_model=OnboardingFormRead)
async def save_form(token: str, data: CandidateFormFields, db: AsyncSession = Depends(get_db)):
    """Progressive save. 409 ``form_locked`` after an HRD decision."""
    with link_guard("form save", token):
        return await OnboardingFormService(db).patch_by_token(token, data)


@router.post(
    "/{token}/documents",
    response_model=DocumentUploadResult,
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    token: str,
    document_type: DocumentType = Form(...),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    extractor: Optional[OcrExtractor] = Depends(get_ocr_extractor),
    storage: FileStorage = Depends(get_file_storage),
):
    """
    Upload a KTP, KK or SKCK.

    KTP uploads are read by OCR: 422 ``low_confidence`` asks for a clearer
    photo, 503 ``extraction_unavailable`` means the fields must be typed in.
    """
    service = DocumentIntakeService(db, extractor, storage)
    data = await file.read(service.upload_limit + 1)
    with link_guard("upload", token):
        return await service.upload_document(
            token,
            data,
            document_type,
            content_type=file.content_type,
            filename=file.filename,
            size=file.size,
        )


@router.post("/{token}/submit", response_model=OnboardingFormRead)
async def submit_form(
    token: str,
    data: OnboardingSubmission,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Final submit. 422 ``missing_acknowledgements`` lists every unchecked item id."""
    service = PublicOnboardingService(db, build_pipeline(db, notifier=notifier))
    with link_guard("submit", token):
        return await service.submit(token, data)
