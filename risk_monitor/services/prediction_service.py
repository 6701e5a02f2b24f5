"""Service for append-only model outputs: chargeback predictions and revenue forecasts."""

from datetime import UTC, datetime
from typing import Any

from risk_monitor.persistence.store import Store
from risk_monitor.schemas.prediction import ChargebackPredictionCreate, SubscriptionForecastCreate


class PredictionService:
    def __init__(self, store: Store):
        self.store = store

    async def list_chargeback_predictions(self, limit: int, skip: int = 0) -> tuple[list[dict[str, Any]], int]:
        repo = self.store.chargeback_predictions
        return await repo.get_all(limit=limit, skip=skip), await repo.count()

    async def count_chargeback_predictions(self) -> int:
        return await self.store.chargeback_predictions.count()

    async def create_chargeback_prediction(self, payload: ChargebackPredictionCreate) -> dict[str, Any]:
        record = payload.model_dump()
        record["created_at"] = payload.created_at or datetime.now(UTC)
        return await self.store.chargeback_predictions.insert_one(record)

    async def list_subscription_forecasts(self, limit: int, skip: int = 0) -> tuple[list[dict[str, Any]], int]:
        repo = self.store.subscription_forecasts
        return await repo.get_all(limit=limit, skip=skip), await repo.count()

    async def count_subscription_forecasts(self) -> int:
        return await self.store.subscription_forecasts.count()

    async def create_subscription_forecast(self, payload: SubscriptionForecastCreate) -> dict[str, Any]:
        record = payload.model_dump()
        record["forecasted_at"] = payload.forecasted_at or datetime.now(UTC)
        return await self.store.subscription_forecasts.insert_one(record)
