"""Repositories for model outputs: chargeback predictions and revenue forecasts.

Tables: payment_intelligence.chargeback_predictions,
payment_intelligence.subscription_forecasts
"""

from risk_monitor.persistence.base import BaseRepository


class ChargebackPredictionRepository(BaseRepository):
    table = "chargeback_predictions"
    columns = (
        "transaction_id",
        "chargeback_predicted",
        "confidence_score",
        "created_at",
    )


class SubscriptionForecastRepository(BaseRepository):
    table = "subscription_forecasts"
    columns = (
        "subscription_id",
        "forecasted",
        "forecasted_at",
        "predicted_revenue",
    )
    order_column = "forecasted_at"
