"""Risk score helpers.

``risk_level`` is a label derived from ``risk_score``:

    score < 30   -> low
    score < 70   -> medium
    otherwise    -> high

Confidence values (``chargeback_confidence``, ``confidence_score``) are
stored as fractions in [0, 1]. Producers that send a percentage (e.g. 15
meaning 15%) are converted once, on write, by ``normalize_confidence``.
"""

from enum import Enum

LOW_RISK_MAX = 30
MEDIUM_RISK_MAX = 70

MIN_RISK_SCORE = 0
MAX_RISK_SCORE = 100


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def risk_level_for_score(score: int) -> RiskLevel:
    """Map a 0-100 risk score to its label."""
    if score < LOW_RISK_MAX:
        return RiskLevel.LOW
    if score < MEDIUM_RISK_MAX:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def effective_risk_level(score: int | None, stored_level: str | None) -> str | None:
    """Risk level exposed on read: recomputed from the score when there is one."""
    if score is None:
        return stored_level
    return risk_level_for_score(score).value


def normalize_confidence(value: float | None) -> float | None:
    """Convert a confidence to the canonical 0-1 fraction.

    Values in (1, 100] are read as percentages. Anything outside [0, 100]
    is rejected.
    """
    if value is None:
        return None
    if value < 0 or value > 100:
        raise ValueError("confidence must be a fraction in [0, 1] or a percentage in [0, 100]")
    if value > 1:
        return value / 100
    return float(value)
