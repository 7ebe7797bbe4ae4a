"""Structured errors for the recruitment pipeline.

Every expected, caller-recoverable condition is an ``AppError`` subclass with
a stable ``code`` and structured ``details`` so clients can render guidance.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    status_code: int = 400
    code: str = "app_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message
        self.details = details

    @property
    def payload(self) -> Dict[str, Any]:
        return build_error_payload(self.code, self.message, self.details)


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=build_error_payload("internal_error", "Internal server error"),
    )


# --- State machine -----------------------------------------------------------


class InvalidTransition(AppError):
    status_code = 409
    code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot move candidate from '{current}' to '{requested}'",
            {"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class CandidateNotFound(AppError):
    status_code = 404
    code = "candidate_not_found"

    def __init__(self, candidate_id: Any):
        super().__init__(f"Candidate {candidate_id} not found", {"candidate_id": str(candidate_id)})


# --- Onboarding links ----------------------------------------------------------


class LinkError(AppError):
    """Base for the three onboarding-link failure kinds."""

    status_code = 404
    code = "link_invalid"


class LinkNotFound(LinkError):
    code = "link_not_found"

    def __init__(self):
        super().__init__("Onboarding link not found")


class LinkExpired(LinkError):
    status_code = 410
    code = "link_expired"

    def __init__(self, expires_at: Any):
        super().__init__("Onboarding link has expired", {"expires_at": str(expires_at)})


class LinkAlreadyUsed(LinkError):
    status_code = 410
    code = "link_already_used"

    def __init__(self, used_at: Any):
        super().__init__("Onboarding link has already been used", {"used_at": str(used_at)})


# --- Document intake -------------------------------------------------------------


class UnsupportedFileType(AppError):
    status_code = 415
    code = "unsupported_file_type"

    def __init__(self, document_type: str, content_type: Optional[str], allowed: Iterable[str]):
        allowed = sorted(allowed)
        super().__init__(
            f"File type '{content_type}' is not accepted for {document_type}",
            {"document_type": document_type, "content_type": content_type, "allowed": allowed},
        )


class FileTooLarge(AppError):
    status_code = 413
    code = "file_too_large"

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File is {size} bytes; the limit is {limit} bytes",
            {"size": size, "limit": limit},
        )


class DocumentNotFound(AppError):
    status_code = 404
    code = "document_not_found"

    def __init__(self, document_id: Any):
        super().__init__(f"Document {document_id} not found", {"document_id": str(document_id)})


class LowConfidence(AppError):
    """The KTP was stored but the OCR result is too weak to prefill the form."""

    status_code = 422
    code = "low_confidence"

    def __init__(self, confidence: float, threshold: float, document_id: Any):
        super().__init__(
            "The ID card could not be read clearly. Please upload a sharper photo.",
            {"confidence": confidence, "threshold": threshold, "document_id": str(document_id)},
        )
        self.confidence = confidence
        self.document_id = document_id


class ExtractionUnavailable(AppError):
    """OCR did not answer in time; the upload is stored, fields must be typed in."""

    status_code = 503
    code = "extraction_unavailable"

    def __init__(self, document_id: Any):
        super().__init__(
            "Automatic reading is unavailable right now. Please fill in the fields manually.",
            {"document_id": str(document_id)},
        )
        self.document_id = document_id


# --- Onboarding form ----------------------------------------------------------------


class FormNotFound(AppError):
    status_code = 404
    code = "form_not_found"

    def __init__(self, reference: Any):
        super().__init__(f"Onboarding form {reference} not found", {"reference": str(reference)})


class FormLocked(AppError):
    status_code = 409
    code = "form_locked"

    def __init__(self, locked_at: Any):
        super().__init__("Onboarding form is locked", {"locked_at": str(locked_at)})


class MissingAcknowledgements(AppError):
    status_code = 422
    code = "missing_acknowledgements"

    def __init__(self, ids: list[str]):
        super().__init__(
            "All declaration items must be acknowledged before submitting",
            {"ids": list(ids)},
        )
        self.ids = list(ids)


class MissingDocuments(AppError):
    status_code = 422
    code = "missing_documents"

    def __init__(self, document_types: list[str]):
        super().__init__(
            "Required documents have not been uploaded",
            {"document_types": list(document_types)},
        )
        self.document_types = list(document_types)


class IncompleteOnboarding(AppError):
    status_code = 422
    code = "incomplete_onboarding"

    def __init__(self, missing: list[str]):
        super().__init__(
            "Onboarding data is not ready for a contract request",
            {"missing": list(missing)},
        )
        self.missing = list(missing)


# --- HRD approval -------------------------------------------------------------------


class AlreadyDecided(AppError):
    status_code = 409
    code = "already_decided"

    def __init__(self, form_id: Any, decision: Optional[str] = None):
        super().__init__(
            "This onboarding has already been decided",
            {"form_id": str(form_id), "decision": decision},
        )


class CommentRequired(AppError):
    status_code = 422
    code = "comment_required"

    def __init__(self):
        super().__init__("A comment is required when rejecting")
