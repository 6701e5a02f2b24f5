"""Fraud check result service."""

from datetime import UTC, datetime
from typing import Any

from risk_monitor.domain.metrics import FraudStats
from risk_monitor.persistence.store import Store
from risk_monitor.schemas.fraud_result import FraudResultCreate


class FraudResultService:
    def __init__(self, store: Store):
        self.store = store
        self.repo = store.fraud_results

    async def list_fraud_results(
        self, limit: int, skip: int = 0, email: str | None = None
    ) -> tuple[list[dict[str, Any]], int]:
        if email:
            items = await self.repo.get_by_email(email, limit=limit, skip=skip)
        else:
            items = await self.repo.get_all(limit=limit, skip=skip)
        return items, await self.repo.count()

    async def get_stats(self) -> tuple[FraudStats, int]:
        stats = await self.repo.get_stats()
        return stats, stats.total_checks

    async def create_fraud_result(self, payload: FraudResultCreate) -> dict[str, Any]:
        record = payload.model_dump()
        record["timestamp"] = payload.timestamp or datetime.now(UTC)
        return await self.repo.insert_one(record)
