"""Manual review state machine for transactions.

States are derived from the ``manual_review`` sub-document:

    UNREVIEWED      manual_review is absent/null
    REVIEWED_SAFE   last review marked the transaction safe
    REVIEWED_FRAUD  last review marked the transaction fraud

Both decisions are allowed from every state. A new review replaces the
previous audit record entirely; only the latest review survives.

Side effects per decision:

    mark_fraud -> fraud_detected=True,  risk_level="high", risk_score=max(score, 90)
    mark_safe  -> fraud_detected=False, risk_level="low",  risk_score=min(score, 10)

A missing current score is treated as 0.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from risk_monitor.core.errors import ValidationError
from risk_monitor.domain.risk import RiskLevel

FRAUD_RISK_FLOOR = 90
SAFE_RISK_CEILING = 10


class ReviewAction(str, Enum):
    MARK_SAFE = "mark_safe"
    MARK_FRAUD = "mark_fraud"


class ReviewOutcome(str, Enum):
    SAFE = "safe"
    FRAUD = "fraud"


class ReviewState(str, Enum):
    UNREVIEWED = "UNREVIEWED"
    REVIEWED_SAFE = "REVIEWED_SAFE"
    REVIEWED_FRAUD = "REVIEWED_FRAUD"


def parse_action(value: Any) -> ReviewAction:
    """Validate a reviewer decision literal."""
    try:
        return ReviewAction(value)
    except ValueError:
        raise ValidationError(
            'Invalid action. Must be "mark_safe" or "mark_fraud"',
            details={"action": value, "allowed": [a.value for a in ReviewAction]},
        ) from None


def state_of(manual_review: dict[str, Any] | None) -> ReviewState:
    """Current review state of a transaction."""
    if not manual_review or not manual_review.get("reviewed"):
        return ReviewState.UNREVIEWED
    if manual_review.get("marked_as") == ReviewOutcome.FRAUD.value:
        return ReviewState.REVIEWED_FRAUD
    return ReviewState.REVIEWED_SAFE


def clamp_risk_score(action: ReviewAction, current: int | None) -> int:
    """Risk score after a review. Never lowers a fraud score, never raises a safe one."""
    score = current or 0
    if action is ReviewAction.MARK_FRAUD:
        return max(score, FRAUD_RISK_FLOOR)
    return min(score, SAFE_RISK_CEILING)


@dataclass(frozen=True)
class ManualReview:
    """Audit record stamped on a transaction by a review."""

    reviewed: bool
    reviewed_at: datetime
    marked_as: ReviewOutcome
    notes: str
    retrain_model: bool

    def to_document(self) -> dict[str, Any]:
        return {
            "reviewed": self.reviewed,
            "reviewed_at": self.reviewed_at.isoformat(),
            "marked_as": self.marked_as.value,
            "notes": self.notes,
            "retrain_model": self.retrain_model,
        }


@dataclass(frozen=True)
class ReviewUpdate:
    """Field values a review writes, apart from the clamped risk score."""

    action: ReviewAction
    manual_review: ManualReview
    fraud_detected: bool
    risk_level: RiskLevel
    updated_at: datetime

    @property
    def target_state(self) -> ReviewState:
        if self.action is ReviewAction.MARK_FRAUD:
            return ReviewState.REVIEWED_FRAUD
        return ReviewState.REVIEWED_SAFE


def build_review_update(
    action: ReviewAction,
    notes: str | None = None,
    retrain_model: bool | None = None,
    now: datetime | None = None,
) -> ReviewUpdate:
    """Compute the update for a reviewer decision.

    ``retrain_model`` defaults to True unless explicitly False.
    """
    now = now or datetime.now(UTC)
    is_fraud = action is ReviewAction.MARK_FRAUD
    review = ManualReview(
        reviewed=True,
        reviewed_at=now,
        marked_as=ReviewOutcome.FRAUD if is_fraud else ReviewOutcome.SAFE,
        notes=notes or "",
        retrain_model=retrain_model is not False,
    )
    return ReviewUpdate(
        action=action,
        manual_review=review,
        fraud_detected=is_fraud,
        risk_level=RiskLevel.HIGH if is_fraud else RiskLevel.LOW,
        updated_at=now,
    )
