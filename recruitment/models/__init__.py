"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from recruitment.models.candidate import Candidate
from recruitment.models.candidate_status_event import CandidateStatusEvent
from recruitment.models.onboarding_link import OnboardingLink
from recruitment.models.onboarding_form import OnboardingForm
from recruitment.models.onboarding_document import OnboardingDocument
from recruitment.models.hrd_decision import HrdDecision

# Export all models
__all__ = [
    "Candidate",
    "CandidateStatusEvent",
    "OnboardingLink",
    "OnboardingForm",
    "OnboardingDocument",
    "HrdDecision",
]
