"""Schemas package for request/response models."""

from risk_monitor.schemas.customer import CustomerAnalyticsResponse, CustomerCreate, CustomerResponse
from risk_monitor.schemas.dashboard import DashboardResponse, DashboardStats, SearchResults
from risk_monitor.schemas.envelope import (
    ErrorEnvelope,
    ItemEnvelope,
    ListEnvelope,
    MessageEnvelope,
    StatsEnvelope,
)
from risk_monitor.schemas.fraud_result import FraudResultCreate, FraudResultResponse
from risk_monitor.schemas.prediction import (
    ChargebackPredictionCreate,
    ChargebackPredictionResponse,
    SubscriptionForecastCreate,
    SubscriptionForecastResponse,
)
from risk_monitor.schemas.stats import (
    ChargebackPredictionStatsResponse,
    CustomerMetricsResponse,
    CustomerStatsResponse,
    DashboardTransactionStats,
    FraudStatsResponse,
    SubscriptionForecastStatsResponse,
    SubscriptionStatsResponse,
    TransactionStatsResponse,
)
from risk_monitor.schemas.subscription import SubscriptionCreate, SubscriptionResponse
from risk_monitor.schemas.transaction import (
    ManualReviewResponse,
    ReviewResultResponse,
    TransactionCreate,
    TransactionResponse,
    TransactionReviewRequest,
)

__all__ = [
    # Envelopes
    "ItemEnvelope",
    "ListEnvelope",
    "StatsEnvelope",
    "MessageEnvelope",
    "ErrorEnvelope",
    # Transactions
    "TransactionCreate",
    "TransactionResponse",
    "TransactionReviewRequest",
    "ManualReviewResponse",
    "ReviewResultResponse",
    "TransactionStatsResponse",
    # Customers
    "CustomerCreate",
    "CustomerResponse",
    "CustomerStatsResponse",
    "CustomerMetricsResponse",
    "CustomerAnalyticsResponse",
    # Subscriptions
    "SubscriptionCreate",
    "SubscriptionResponse",
    "SubscriptionStatsResponse",
    # Fraud results
    "FraudResultCreate",
    "FraudResultResponse",
    "FraudStatsResponse",
    # Predictions
    "ChargebackPredictionCreate",
    "ChargebackPredictionResponse",
    "ChargebackPredictionStatsResponse",
    "SubscriptionForecastCreate",
    "SubscriptionForecastResponse",
    "SubscriptionForecastStatsResponse",
    # Dashboard
    "DashboardResponse",
    "DashboardStats",
    "DashboardTransactionStats",
    "SearchResults",
]
