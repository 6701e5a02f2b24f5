"""Unit tests for the manual review state machine."""

from datetime import UTC, datetime

import pytest

from risk_monitor.core.errors import ValidationError
from risk_monitor.domain.review import (
    ReviewAction,
    ReviewOutcome,
    ReviewState,
    build_review_update,
    clamp_risk_score,
    parse_action,
    state_of,
)
from risk_monitor.domain.risk import RiskLevel

REVIEWED_AT = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


class TestParseAction:
    def test_accepts_both_decisions(self):
        assert parse_action("mark_safe") is ReviewAction.MARK_SAFE
        assert parse_action("mark_fraud") is ReviewAction.MARK_FRAUD

    @pytest.mark.parametrize("value", ["approve", "MARK_FRAUD", "", None])
    def test_rejects_anything_else(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_action(value)
        assert exc_info.value.message == 'Invalid action. Must be "mark_safe" or "mark_fraud"'
        assert exc_info.value.details["allowed"] == ["mark_safe", "mark_fraud"]


class TestClampRiskScore:
    @pytest.mark.parametrize("score", [0, 10, 45, 89, 90, 100])
    def test_fraud_never_lowers_score_below_90(self, score):
        clamped = clamp_risk_score(ReviewAction.MARK_FRAUD, score)
        assert clamped >= 90
        assert clamped == max(score, 90)

    @pytest.mark.parametrize("score", [0, 9, 10, 11, 45, 100])
    def test_safe_never_raises_score_above_10(self, score):
        clamped = clamp_risk_score(ReviewAction.MARK_SAFE, score)
        assert clamped <= 10
        assert clamped == min(score, 10)

    def test_missing_score_treated_as_zero(self):
        assert clamp_risk_score(ReviewAction.MARK_FRAUD, None) == 90
        assert clamp_risk_score(ReviewAction.MARK_SAFE, None) == 0

    @pytest.mark.parametrize("action", list(ReviewAction))
    @pytest.mark.parametrize("score", [0, 10, 50, 90, 100])
    def test_clamp_is_idempotent(self, action, score):
        once = clamp_risk_score(action, score)
        assert clamp_risk_score(action, once) == once


class TestBuildReviewUpdate:
    def test_fraud_update(self):
        update = build_review_update(ReviewAction.MARK_FRAUD, notes="card testing", now=REVIEWED_AT)
        assert update.fraud_detected is True
        assert update.risk_level is RiskLevel.HIGH
        assert update.updated_at == REVIEWED_AT
        assert update.target_state is ReviewState.REVIEWED_FRAUD
        assert update.manual_review.to_document() == {
            "reviewed": True,
            "reviewed_at": REVIEWED_AT.isoformat(),
            "marked_as": "fraud",
            "notes": "card testing",
            "retrain_model": True,
        }

    def test_safe_update(self):
        update = build_review_update(ReviewAction.MARK_SAFE, now=REVIEWED_AT)
        assert update.fraud_detected is False
        assert update.risk_level is RiskLevel.LOW
        assert update.manual_review.marked_as is ReviewOutcome.SAFE
        assert update.manual_review.notes == ""
        assert update.target_state is ReviewState.REVIEWED_SAFE

    @pytest.mark.parametrize("retrain,expected", [(None, True), (True, True), (False, False)])
    def test_retrain_defaults_to_true_unless_false(self, retrain, expected):
        update = build_review_update(ReviewAction.MARK_SAFE, retrain_model=retrain, now=REVIEWED_AT)
        assert update.manual_review.retrain_model is expected

    def test_same_decision_twice_gives_same_fields(self):
        first = build_review_update(ReviewAction.MARK_FRAUD, notes="n", now=REVIEWED_AT)
        second = build_review_update(ReviewAction.MARK_FRAUD, notes="n", now=REVIEWED_AT)
        assert first == second


class TestStateOf:
    def test_unreviewed(self):
        assert state_of(None) is ReviewState.UNREVIEWED
        assert state_of({}) is ReviewState.UNREVIEWED

    def test_reviewed_states_follow_last_decision(self):
        fraud = build_review_update(ReviewAction.MARK_FRAUD, now=REVIEWED_AT).manual_review
        safe = build_review_update(ReviewAction.MARK_SAFE, now=REVIEWED_AT).manual_review
        assert state_of(fraud.to_document()) is ReviewState.REVIEWED_FRAUD
        assert state_of(safe.to_document()) is ReviewState.REVIEWED_SAFE
