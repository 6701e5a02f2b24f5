"""Dashboard and cross-collection search schemas."""

from pydantic import Field

from risk_monitor.schemas.common import CamelModel
from risk_monitor.schemas.customer import CustomerResponse
from risk_monitor.schemas.fraud_result import FraudResultResponse
from risk_monitor.schemas.stats import (
    ChargebackPredictionStatsResponse,
    CustomerStatsResponse,
    DashboardTransactionStats,
    FraudStatsResponse,
    SubscriptionForecastStatsResponse,
    SubscriptionStatsResponse,
)
from risk_monitor.schemas.subscription import SubscriptionResponse
from risk_monitor.schemas.transaction import TransactionResponse


class DashboardStats(CamelModel):
    transactions: DashboardTransactionStats
    subscriptions: SubscriptionStatsResponse
    fraud: FraudStatsResponse
    customers: CustomerStatsResponse
    forecasts: SubscriptionForecastStatsResponse
    chargebacks: ChargebackPredictionStatsResponse


class DashboardResponse(CamelModel):
    """Combined dashboard view. Recent records appear only when requested."""

    success: bool = True
    stats: DashboardStats
    recent_transactions: list[TransactionResponse] | None = None
    recent_customers: list[CustomerResponse] | None = None
    recent_subscriptions: list[SubscriptionResponse] | None = None
    recent_fraud_results: list[FraudResultResponse] | None = None


class SearchResults(CamelModel):
    customers: list[CustomerResponse] = Field(default_factory=list)
    transactions: list[TransactionResponse] = Field(default_factory=list)
    subscriptions: list[SubscriptionResponse] = Field(default_factory=list)
