"""
Confidence gate for KTP extraction results.

Half-open intervals: [0, reject_below) rejects, [reject_below, review_below)
prefills with a review flag, [review_below, 1] prefills silently.
"""

import enum
import math
from dataclasses import dataclass
from typing import Optional

from recruitment.core.config import settings


class GateOutcome(str, enum.Enum):
    REJECT = "reject"
    REVIEW = "review"
    ACCEPT = "accept"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    confidence: float

    @property
    def prefill(self) -> bool:
        return self.outcome is not GateOutcome.REJECT

    @property
    def needs_review(self) -> bool:
        return self.outcome is GateOutcome.REVIEW


def evaluate_confidence(
    confidence: float,
    reject_below: Optional[float] = None,
    review_below: Optional[float] = None,
) -> GateDecision:
    """
    Place ``confidence`` in its interval. A score that is not a finite number
    in [0, 1] is unusable: it rejects and is recorded as 0.0.
    """
    reject_below = settings.KTP_REJECT_BELOW if reject_below is None else reject_below
    review_below = settings.KTP_REVIEW_BELOW if review_below is None else review_below

    if not (math.isfinite(confidence) and 0.0 <= confidence <= 1.0):
        return GateDecision(outcome=GateOutcome.REJECT, confidence=0.0)
    if confidence < reject_below:
        outcome = GateOutcome.REJECT
    elif confidence < review_below:
        outcome = GateOutcome.REVIEW
    else:
        outcome = GateOutcome.ACCEPT
    return GateDecision(outcome=outcome, confidence=confidence)
