"""
Candidate router - recruiter-facing pipeline and onboarding endpoints.
"""

from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.core.dependencies import (
    get_db,
    get_file_storage,
    get_notifier,
    get_request_context,
    require_permission,
)
from recruitment.core.permissions import Permissions
from recruitment.core.pipeline import CandidateStatus
from recruitment.errors import AppError, DocumentNotFound
from recruitment.schemas.candidate import CandidateCreate, CandidateRead, StatusEventRead, TransitionRequest
from recruitment.schemas.document import OnboardingDocumentRead
from recruitment.schemas.onboarding import (
    IssueLinkRequest,
    OnboardingFormRead,
    OnboardingLinkRead,
    RecruiterFormUpdate,
)
from recruitment.services.collaborators import FileStorage, Notifier
from recruitment.services.document_intake_service import DocumentIntakeService
from recruitment.services.onboarding_form_service import OnboardingFormService
from recruitment.services.onboarding_link_service import OnboardingLinkService
from recruitment.services.pipeline_factory import build_pipeline

router = APIRouter(prefix="/candidates", tags=["candidates"])


@router.post("", response_model=CandidateRead, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    data: CandidateCreate,
    ctx: RequestContext = Depends(require_permission(Permissions.CANDIDATES_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    """Register a candidate in the ``new`` status."""
    return await build_pipeline(db).create_candidate(ctx, data)


@router.get("", response_model=List[CandidateRead])
async def list_candidates(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    status: Optional[CandidateStatus] = None,
):
    """List candidates with pagination, optionally filtered by status."""
    return await build_pipeline(db).list_candidates(ctx, limit=limit, offset=offset, status=status)


@router.get("/{candidate_id}", response_model=CandidateRead)
async def get_candidate(
    candidate_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await build_pipeline(db).get_candidate(ctx, candidate_id)


@router.post("/{candidate_id}/transitions", response_model=CandidateRead)
async def transition_candidate(
    candidate_id: UUID,
    data: TransitionRequest,
    ctx: RequestContext = Depends(require_permission(Permissions.CANDIDATES_WRITE)),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Move a candidate to another status.

    Returns 409 ``invalid_transition`` when the move is not allowed from the
    current status; ``hired`` is only reachable through HRD approval.
    """
    pipeline = build_pipeline(db, notifier=notifier)
    return await pipeline.transition(ctx, candidate_id, data.target_status, reason=data.reason)


@router.get("/{candidate_id}/history", response_model=List[StatusEventRead])
async def candidate_history(
    candidate_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await build_pipeline(db).history(ctx, candidate_id)


@router.post(
    "/{candidate_id}/onboarding-link",
    response_model=OnboardingLinkRead,
    status_code=status.HTTP_201_CREATED,
)
async def issue_onboarding_link(
    candidate_id: UUID,
    data: Optional[IssueLinkRequest] = None,
    ctx: RequestContext = Depends(require_permission(Permissions.CANDIDATES_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    """Issue a fresh link; it becomes the one shown for the candidate."""
    service = OnboardingLinkService(db)
    ttl = timedelta(days=data.ttl_days) if data and data.ttl_days else None
    await service.issue_link(ctx, candidate_id, ttl=ttl)
    return await service.latest_link(ctx, candidate_id)


@router.get("/{candidate_id}/onboarding-link", response_model=OnboardingLinkRead)
async def get_onboarding_link(
    candidate_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    """Most recently issued link and whether it is still active."""
    link = await OnboardingLinkService(db).latest_link(ctx, candidate_id)
    if link is None:
        raise AppError(
            f"No onboarding link issued for candidate {candidate_id}",
            {"candidate_id": str(candidate_id)},
            status_code=404,
            code="link_not_issued",
        )
    return link


@router.get("/{candidate_id}/onboarding-form", response_model=OnboardingFormRead)
async def get_onboarding_form(
    candidate_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await OnboardingFormService(db).get(ctx, candidate_id)


@router.put("/{candidate_id}/onboarding-form", response_model=OnboardingFormRead)
async def update_onboarding_form(
    candidate_id: UUID,
    data: RecruiterFormUpdate,
    ctx: RequestContext = Depends(require_permission(Permissions.ONBOARDING_REVIEW)),
    db: AsyncSession = Depends(get_db),
):
    """Recruiter edits, including employment terms. 409 once the form is locked."""
    return await OnboardingFormService(db).update_by_recruiter(ctx, candidate_id, data)


@router.post("/{candidate_id}/onboarding-form/review", response_model=OnboardingFormRead)
async def review_onboarding_form(
    candidate_id: UUID,
    ctx: RequestContext = Depends(require_permission(Permissions.ONBOARDING_REVIEW)),
    db: AsyncSession = Depends(get_db),
):
    """Confirm the submitted data."""
    return await OnboardingFormService(db).mark_data_reviewed(ctx, candidate_id)


@router.get("/{candidate_id}/documents", response_model=List[OnboardingDocumentRead])
async def list_documents(
    candidate_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    return await DocumentIntakeService(db, None, storage).list_documents(ctx, candidate_id)


@router.get("/{candidate_id}/documents/{document_id}/content")
async def download_document(
    candidate_id: UUID,
    document_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    """Raw bytes of an uploaded document."""
    document, content = await DocumentIntakeService(db, None, storage).read_content(ctx, document_id)
    if document.candidate_id != candidate_id:
        raise DocumentNotFound(document_id)
    return Response(content=content, media_type=document.content_type)
