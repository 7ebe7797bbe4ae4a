"""
Candidate pipeline statuses and the static transition table.

The table is immutable module data keyed by (from, to) pairs; nothing else
decides whether a status change is legal.
"""

import enum
from types import MappingProxyType
from typing import FrozenSet, Mapping


class CandidateStatus(str, enum.Enum):
    """Closed set of pipeline statuses, in happy-path order."""

    NEW = "new"
    SCREENING = "screening"
    SCREENED_PASS = "screened_pass"
    SCREENED_FAIL = "screened_fail"
    SUBMITTED = "submitted"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_PASSED = "interview_passed"
    INTERVIEW_FAILED = "interview_failed"
    ONBOARDING = "onboarding"
    ONBOARDING_COMPLETED = "onboarding_completed"
    CONTRACT_REQUESTED = "contract_requested"
    HIRED = "hired"
    REJECTED = "rejected"


S = CandidateStatus

TERMINAL_STATUSES: FrozenSet[CandidateStatus] = frozenset(
    {S.HIRED, S.REJECTED, S.SCREENED_FAIL, S.INTERVIEW_FAILED}
)

_FORWARD = {
    S.NEW: {S.SCREENING},
    S.SCREENING: {S.SCREENED_PASS, S.SCREENED_FAIL},
    S.SCREENED_PASS: {S.SUBMITTED},
    S.SUBMITTED: {S.INTERVIEW_SCHEDULED},
    S.INTERVIEW_SCHEDULED: {S.INTERVIEW_PASSED, S.INTERVIEW_FAILED},
    S.INTERVIEW_PASSED: {S.ONBOARDING},
    S.ONBOARDING: {S.ONBOARDING_COMPLETED},
    S.ONBOARDING_COMPLETED: {S.CONTRACT_REQUESTED},
    S.CONTRACT_REQUESTED: {S.HIRED, S.ONBOARDING_COMPLETED},
}

# Edges only an HRD decision may take: approval hires, rejection hands the
# candidate back to the recruiter.
DECISION_ONLY: FrozenSet[tuple] = frozenset(
    {
        (S.CONTRACT_REQUESTED, S.HIRED),
        (S.CONTRACT_REQUESTED, S.ONBOARDING_COMPLETED),
    }
)


def _build_table() -> Mapping[CandidateStatus, FrozenSet[CandidateStatus]]:
    table = {}
    for status in CandidateStatus:
        if status in TERMINAL_STATUSES:
            table[status] = frozenset()
            continue
        table[status] = frozenset(_FORWARD.get(status, set()) | {S.REJECTED})
    return MappingProxyType(table)


ALLOWED_NEXT: Mapping[CandidateStatus, FrozenSet[CandidateStatus]] = _build_table()

ALLOWED_PAIRS: FrozenSet[tuple] = frozenset(
    (current, target) for current, targets in ALLOWED_NEXT.items() for target in targets
)


def is_allowed(current: CandidateStatus, target: CandidateStatus) -> bool:
    return (current, target) in ALLOWED_PAIRS


def is_decision_only(current: CandidateStatus, target: CandidateStatus) -> bool:
    return (current, target) in DECISION_ONLY


def is_terminal(status: CandidateStatus) -> bool:
    return status in TERMINAL_STATUSES
