"""
HRD router - approval queue and decisions.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.context import RequestContext
from recruitment.core.dependencies import get_contract_creator, get_db, get_notifier, require_permission
from recruitment.core.permissions import Permissions
from recruitment.schemas.hrd import ContractDraftRequest, HrdDecisionRead, PendingHrdRead, RejectRequest
from recruitment.schemas.onboarding import OnboardingFormRead
from recruitment.services.collaborators import ContractCreator, Notifier
from recruitment.services.pipeline_factory import build_hrd_service

router = APIRouter(prefix="/hrd", tags=["hrd"])


@router.get("/pending", response_model=List[PendingHrdRead])
async def list_pending(
    ctx: RequestContext = Depends(require_permission(Permissions.HRD_DECIDE)),
    db: AsyncSession = Depends(get_db),
):
    """Forms waiting for an HRD decision, oldest request first."""
    return await build_hrd_service(db).list_pending(ctx)


@router.post("/forms/{form_id}/approve", response_model=ContractDraftRequest)
async def approve_form(
    form_id: UUID,
    ctx: RequestContext = Depends(require_permission(Permissions.HRD_DECIDE)),
    db: AsyncSession = Depends(get_db),
    contracts: ContractCreator = Depends(get_contract_creator),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Approve and hire. 409 ``already_decided`` if another decision won, 422
    ``incomplete_onboarding`` if the form is not waiting on HRD.
    """
    service = build_hrd_service(db, contracts=contracts, notifier=notifier)
    return await service.approve(ctx, form_id)


@router.post("/forms/{form_id}/reject", response_model=OnboardingFormRead)
async def reject_form(
    form_id: UUID,
    data: RejectRequest,
    ctx: RequestContext = Depends(require_permission(Permissions.HRD_DECIDE)),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Reject with a comment; the candidate returns to ``onboarding_completed``."""
    service = build_hrd_service(db, notifier=notifier)
    return await service.reject(ctx, form_id, data.comment)


@router.post("/forms/{form_id}/reopen", response_model=OnboardingFormRead)
async def reopen_form(
    form_id: UUID,
    ctx: RequestContext = Depends(require_permission(Permissions.ONBOARDING_REVIEW)),
    db: AsyncSession = Depends(get_db),
):
    """Unlock a rejected form for rework."""
    return await build_hrd_service(db).reopen(ctx, form_id)


@router.get("/forms/{form_id}/decisions", response_model=List[HrdDecisionRead])
async def form_decisions(
    form_id: UUID,
    ctx: RequestContext = Depends(require_permission(Permissions.HRD_DECIDE)),
    db: AsyncSession = Depends(get_db),
):
    return await build_hrd_service(db).decisions_for_form(ctx, form_id)
