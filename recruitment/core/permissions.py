"""
Permission helpers for the recruitment pipeline.

The identity layer in front of this service resolves the caller and forwards
their permissions; this module only names them and checks membership.
"""

from typing import Iterable


class Permissions:
    """Permissions understood by the pipeline endpoints."""
    CANDIDATES_WRITE = "candidates:write"
    ONBOARDING_REVIEW = "onboarding:review"
    HRD_DECIDE = "hrd:decide"

    # All permissions list for validation
    ALL = [CANDIDATES_WRITE, ONBOARDING_REVIEW, HRD_DECIDE]

    # candidates:write  - recruiters create candidates and move them along the pipeline
    # onboarding:review - recruiters edit/review submitted onboarding data
    # hrd:decide        - HRD approves or rejects contract requests


def check_permission(granted: Iterable[str], required: str) -> bool:
    """
    Check if the required permission is among the granted ones.

    Args:
        granted: Permissions carried by the request context
        required: The permission an endpoint needs

    Returns:
        True if the permission is granted, False otherwise
    """
    if not required:
        return False
    return required in set(granted or ())
