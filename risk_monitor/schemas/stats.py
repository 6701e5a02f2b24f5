"""Statistics response schemas.

Aggregates come in unrounded from ``risk_monitor.domain.metrics``; the
``from_stats`` constructors are the only place they are rounded.
"""

from risk_monitor.domain.metrics import (
    CustomerMetrics,
    FraudStats,
    SubscriptionStats,
    TransactionStats,
    round_half_away,
)
from risk_monitor.schemas.common import CamelModel


class TransactionStatsResponse(CamelModel):
    total_transactions: int
    total_amount: float
    average_amount: float
    successful_transactions: int
    failed_transactions: int
    refunded_transactions: int
    disputed_transactions: int
    success_rate: float
    refund_rate: float
    dispute_rate: float

    @classmethod
    def from_stats(cls, stats: TransactionStats) -> "TransactionStatsResponse":
        return cls(
            total_transactions=stats.total_transactions,
            total_amount=round_half_away(stats.total_amount),
            average_amount=round_half_away(stats.average_amount),
            successful_transactions=stats.successful_transactions,
            failed_transactions=stats.failed_transactions,
            refunded_transactions=stats.refunded_transactions,
            disputed_transactions=stats.disputed_transactions,
            success_rate=round_half_away(stats.success_rate),
            refund_rate=round_half_away(stats.refund_rate),
            dispute_rate=round_half_away(stats.dispute_rate),
        )


class DashboardTransactionStats(TransactionStatsResponse):
    """Transaction stats with the revenue aliases shown on the dashboard."""

    total_revenue: float
    average_transaction_value: float

    @classmethod
    def from_stats(cls, stats: TransactionStats) -> "DashboardTransactionStats":
        base = TransactionStatsResponse.from_stats(stats)
        return cls(
            **base.model_dump(),
            total_revenue=base.total_amount,
            average_transaction_value=base.average_amount,
        )


class SubscriptionStatsResponse(CamelModel):
    total_subscriptions: int
    active_subscriptions: int
    canceled_subscriptions: int
    trial_subscriptions: int
    total_revenue: float
    average_revenue: float
    mrr: float
    arr: float
    churn_rate: float
    active_rate: float

    @classmethod
    def from_stats(cls, stats: SubscriptionStats) -> "SubscriptionStatsResponse":
        return cls(
            total_subscriptions=stats.total_subscriptions,
            active_subscriptions=stats.active_subscriptions,
            canceled_subscriptions=stats.canceled_subscriptions,
            trial_subscriptions=stats.trial_subscriptions,
            total_revenue=round_half_away(stats.total_revenue),
            average_revenue=round_half_away(stats.average_revenue),
            mrr=round_half_away(stats.mrr),
            arr=round_half_away(stats.arr),
            churn_rate=round_half_away(stats.churn_rate),
            active_rate=round_half_away(stats.active_rate),
        )


class FraudStatsResponse(CamelModel):
    total_checks: int
    fraud_detected: int
    average_confidence: float
    fraud_rate: float

    @classmethod
    def from_stats(cls, stats: FraudStats) -> "FraudStatsResponse":
        return cls(
            total_checks=stats.total_checks,
            fraud_detected=stats.fraud_detected,
            average_confidence=round_half_away(stats.average_confidence),
            fraud_rate=round_half_away(stats.fraud_rate),
        )


class CustomerStatsResponse(CamelModel):
    total_customers: int


class CustomerMetricsResponse(CamelModel):
    """Per-customer activity shown in the customer details view."""

    total_transactions: int
    successful_transactions: int
    success_rate: float
    total_spent: float
    average_transaction_value: float
    fraud_detected: int
    fraud_rate: float
    active_subscriptions: int
    total_subscriptions: int

    @classmethod
    def from_metrics(cls, metrics: CustomerMetrics) -> "CustomerMetricsResponse":
        transactions = metrics.transactions
        return cls(
            total_transactions=transactions.total_transactions,
            successful_transactions=transactions.successful_transactions,
            success_rate=round_half_away(transactions.success_rate),
            total_spent=round_half_away(transactions.total_amount),
            average_transaction_value=round_half_away(transactions.average_amount),
            fraud_detected=metrics.fraud.fraud_detected,
            fraud_rate=round_half_away(metrics.fraud.fraud_rate),
            active_subscriptions=metrics.subscriptions.active_subscriptions,
            total_subscriptions=metrics.subscriptions.total_subscriptions,
        )


class ChargebackPredictionStatsResponse(CamelModel):
    total_predictions: int


class SubscriptionForecastStatsResponse(CamelModel):
    total_forecasts: int
