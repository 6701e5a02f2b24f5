"""Data access façade over the six collections.

A ``Store`` bundles one repository per collection on a single session.
``open_store`` gives each concurrent branch of a fan-out its own session,
since an ``AsyncSession`` must not be shared between tasks.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from risk_monitor.core.database import Database
from risk_monitor.persistence.customer_repository import CustomerRepository
from risk_monitor.persistence.fraud_result_repository import FraudResultRepository
from risk_monitor.persistence.prediction_repository import (
    ChargebackPredictionRepository,
    SubscriptionForecastRepository,
)
from risk_monitor.persistence.subscription_repository import SubscriptionRepository
from risk_monitor.persistence.transaction_repository import TransactionRepository


class Store:
    """Repositories for every collection, sharing one session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.customers = CustomerRepository(session)
        self.transactions = TransactionRepository(session)
        self.subscriptions = SubscriptionRepository(session)
        self.subscription_forecasts = SubscriptionForecastRepository(session)
        self.fraud_results = FraudResultRepository(session)
        self.chargeback_predictions = ChargebackPredictionRepository(session)

    @property
    def collections(self) -> dict[str, object]:
        return {
            "customers": self.customers,
            "transactions": self.transactions,
            "subscriptions": self.subscriptions,
            "subscription_forecasts": self.subscription_forecasts,
            "fraud_results": self.fraud_results,
            "chargeback_predictions": self.chargeback_predictions,
        }

    async def clear_all(self) -> dict[str, int]:
        """Delete every record in every collection. Returns deleted counts."""
        deleted = {}
        for name, repo in self.collections.items():
            deleted[name] = await repo.clear()
        return deleted


StoreFactory = Callable[[], AbstractAsyncContextManager[Store]]


@asynccontextmanager
async def open_store(database: Database) -> AsyncIterator[Store]:
    """Yield a Store bound to a fresh session."""
    async with database.session() as session:
        yield Store(session)
