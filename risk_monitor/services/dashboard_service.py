"""Dashboard and cross-collection search.

Both fan out independent reads with ``asyncio.gather``. Each branch opens
its own store, so no session is shared between concurrent tasks.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from risk_monitor.core.errors import ValidationError
from risk_monitor.domain.metrics import FraudStats, SubscriptionStats, TransactionStats
from risk_monitor.persistence.store import Store, StoreFactory

logger = logging.getLogger(__name__)
T = TypeVar("T")


@dataclass
class DashboardSnapshot:
    transaction_stats: TransactionStats
    subscription_stats: SubscriptionStats
    fraud_stats: FraudStats
    customer_count: int
    forecast_count: int
    prediction_count: int
    recent: dict[str, list[dict[str, Any]]] | None = None


@dataclass
class SearchSnapshot:
    customers: list[dict[str, Any]] = field(default_factory=list)
    transactions: list[dict[str, Any]] = field(default_factory=list)
    subscriptions: list[dict[str, Any]] = field(default_factory=list)


class _FanOut:
    def __init__(self, store_factory: StoreFactory):
        self.store_factory = store_factory

    async def _read(self, fn: Callable[[Store], Awaitable[T]]) -> T:
        async with self.store_factory() as store:
            return await fn(store)


class DashboardService(_FanOut):
    """Aggregated view across every collection."""

    async def get_dashboard(self, include_data: bool = False, recent_limit: int = 10) -> DashboardSnapshot:
        (
            transaction_stats,
            subscription_stats,
            fraud_stats,
            customer_count,
            forecast_count,
            prediction_count,
        ) = await asyncio.gather(
            self._read(lambda s: s.transactions.get_stats()),
            self._read(lambda s: s.subscriptions.get_stats()),
            self._read(lambda s: s.fraud_results.get_stats()),
            self._read(lambda s: s.customers.count()),
            self._read(lambda s: s.subscription_forecasts.count()),
            self._read(lambda s: s.chargeback_predictions.count()),
        )

        snapshot = DashboardSnapshot(
            transaction_stats=transaction_stats,
            subscription_stats=subscription_stats,
            fraud_stats=fraud_stats,
            customer_count=customer_count,
            forecast_count=forecast_count,
            prediction_count=prediction_count,
        )

        if include_data:
            transactions, customers, subscriptions, fraud_results = await asyncio.gather(
                self._read(lambda s: s.transactions.get_all(limit=recent_limit)),
                self._read(lambda s: s.customers.get_all(limit=recent_limit)),
                self._read(lambda s: s.subscriptions.get_all(limit=recent_limit)),
                self._read(lambda s: s.fraud_results.get_all(limit=recent_limit)),
            )
            snapshot.recent = {
                "transactions": transactions,
                "customers": customers,
                "subscriptions": subscriptions,
                "fraud_results": fraud_results,
            }

        return snapshot


class SearchService(_FanOut):
    """Search customers and transactions, alongside the most recent subscriptions."""

    async def search_all(self, query: str | None, limit: int = 20) -> SearchSnapshot:
        if not query or not query.strip():
            raise ValidationError("Search query is required", details={"field": "q"})
        term = query.strip()

        customers, transactions, subscriptions = await asyncio.gather(
            self._read(lambda s: s.customers.search(term, limit=limit)),
            self._read(lambda s: s.transactions.search(term, limit=limit)),
            self._read(lambda s: s.subscriptions.get_all(limit=limit)),
        )
        logger.debug(
            "Search completed",
            extra={"customers": len(customers), "transactions": len(transactions)},
        )
        return SearchSnapshot(customers=customers, transactions=transactions, subscriptions=subscriptions)
