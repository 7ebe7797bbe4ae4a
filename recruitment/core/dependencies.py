"""
FastAPI dependencies for the application.
"""

from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends, Header

from recruitment.core.config import settings
from recruitment.core.context import RequestContext
from recruitment.db.session import get_db  # noqa: F401  re-exported for routers
from recruitment.errors import AppError
from recruitment.services.collaborators import (
    ContractCreator,
    FileStorage,
    LocalFileStorage,
    LoggingContractCreator,
    LoggingNotifier,
    Notifier,
)
from recruitment.services.ocr import HttpOcrExtractor, OcrExtractor


async def get_request_context(
    x_tenant_id: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
    x_permissions: Optional[str] = Header(None),
) -> RequestContext:
    """
    Build the caller context from headers set by the identity layer.

    Raises 400 if X-Tenant-ID is missing or not a UUID, 401 if X-User-ID is missing.
    """
    if not x_tenant_id:
        raise AppError("X-Tenant-ID header is required", status_code=400, code="tenant_required")
    try:
        tenant_id = UUID(x_tenant_id)
    except ValueError:
        raise AppError("X-Tenant-ID must be a UUID", status_code=400, code="tenant_invalid")
    if not x_user_id:
        raise AppError("X-User-ID header is required", status_code=401, code="unauthenticated")

    permissions = frozenset(p.strip() for p in (x_permissions or "").split(",") if p.strip())
    return RequestContext(tenant_id=tenant_id, user_id=x_user_id, permissions=permissions)


def require_permission(permission: str) -> Callable:
    """
    Dependency factory that checks if the caller has a specific permission.

    Usage:
        @router.post("/endpoint")
        async def endpoint(ctx: RequestContext = Depends(require_permission(Permissions.HRD_DECIDE))):
            ...
    """

    async def permission_checker(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not ctx.has(permission):
            raise AppError(
                f"Permission '{permission}' required",
                {"permission": permission},
                status_code=403,
                code="forbidden",
            )
        return ctx

    return permission_checker


# Collaborators. Tests and deployments swap these through app.dependency_overrides.


def get_ocr_extractor() -> Optional[OcrExtractor]:
    if not settings.OCR_SERVICE_URL:
        return None
    return HttpOcrExtractor(
        settings.OCR_SERVICE_URL,
        api_key=settings.OCR_API_KEY,
        timeout=settings.OCR_TIMEOUT_SECONDS,
    )


def get_file_storage() -> FileStorage:
    return LocalFileStorage(settings.DOCUMENT_STORAGE_ROOT)


def get_notifier() -> Notifier:
    return LoggingNotifier()


def get_contract_creator() -> ContractCreator:
    return LoggingContractCreator()
