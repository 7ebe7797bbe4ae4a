"""
Schemas package.

Import all schemas here for easy access.
"""

from recruitment.schemas.candidate import CandidateCreate, CandidateRead, TransitionRequest, StatusEventRead
from recruitment.schemas.onboarding import (
    ChecklistItem,
    DeclarationChecklist,
    OnboardingLinkRead,
    CandidateFormFields,
    RecruiterFormUpdate,
    OnboardingSubmission,
    OnboardingFormRead,
)
from recruitment.schemas.document import OnboardingDocumentRead, DocumentUploadResult
from recruitment.schemas.hrd import ContractDraftRequest, EmploymentTerms, HrdDecisionRead, PendingHrdRead

__all__ = [
    "CandidateCreate",
    "CandidateRead",
    "TransitionRequest",
    "StatusEventRead",
    "ChecklistItem",
    "DeclarationChecklist",
    "OnboardingLinkRead",
    "CandidateFormFields",
    "RecruiterFormUpdate",
    "OnboardingSubmission",
    "OnboardingFormRead",
    "OnboardingDocumentRead",
    "DocumentUploadResult",
    "ContractDraftRequest",
    "EmploymentTerms",
    "PendingHrdRead",
    "HrdDecisionRead",
]
