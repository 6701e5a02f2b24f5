"""In-memory stand-ins for the persistence façade.

Each fake repository exposes the same methods as its SQL counterpart and
keeps rows as plain dicts, so services and routes can be exercised without
PostgreSQL. Unique business keys raise ``IntegrityError`` like the real
constraints do.
"""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator, Iterable, Mapping
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError

from risk_monitor.domain.metrics import (
    ACTIVE,
    CANCELED,
    FAILED,
    SUCCEEDED,
    FraudStats,
    SubscriptionStats,
    TransactionStats,
)
from risk_monitor.domain.review import ReviewUpdate, clamp_risk_score
from risk_monitor.persistence.base import BaseRepository
from risk_monitor.persistence.customer_repository import CustomerRepository
from risk_monitor.persistence.fraud_result_repository import FraudResultRepository
from risk_monitor.persistence.prediction_repository import (
    ChargebackPredictionRepository,
    SubscriptionForecastRepository,
)
from risk_monitor.persistence.subscription_repository import SubscriptionRepository
from risk_monitor.persistence.transaction_repository import TransactionRepository


class FakeRepository:
    """Rows for one collection, held in insertion order."""

    def __init__(self, repository: type[BaseRepository], unique: tuple[str, ...] = ()):
        self.table = repository.table
        self.columns = repository.columns
        self.order_column = repository.order_column
        self.unique = unique
        self.records: list[dict[str, Any]] = []

    def _newest_first(self, rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(rows, key=lambda r: (r[self.order_column], str(r["id"])), reverse=True)

    def _page(self, rows: Iterable[dict[str, Any]], limit: int, skip: int = 0) -> list[dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._newest_first(rows)[skip : skip + limit]]

    def _find(self, **match: Any) -> dict[str, Any] | None:
        for row in self.records:
            if all(row.get(k) == v for k, v in match.items()):
                return copy.deepcopy(row)
        return None

    async def get_all(self, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return self._page(self.records, limit, skip)

    async def get_by_id(self, record_id: UUID) -> dict[str, Any] | None:
        return self._find(id=record_id)

    async def count(self) -> int:
        return len(self.records)

    def _prepare(self, record: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(record) - set(self.columns) - {"id"}
        if unknown:
            raise ValueError(f"Unknown columns for {self.table}: {sorted(unknown)}")
        params = {column: copy.deepcopy(record.get(column)) for column in self.columns}
        params["id"] = record.get("id") or uuid4()
        for key in self.unique:
            if any(row[key] == params[key] for row in self.records):
                raise IntegrityError(
                    f"INSERT INTO {self.table}", {key: params[key]}, Exception("duplicate key value")
                )
        return params

    async def insert_one(self, record: Mapping[str, Any]) -> dict[str, Any]:
        params = self._prepare(record)
        self.records.append(params)
        return copy.deepcopy(params)

    async def insert_many(self, records: Iterable[Mapping[str, Any]]) -> list[UUID]:
        batch: list[dict[str, Any]] = []
        for record in records:
            params = self._prepare(record)
            for key in self.unique:
                if any(row[key] == params[key] for row in batch):
                    raise IntegrityError(
                        f"INSERT INTO {self.table}", {key: params[key]}, Exception("duplicate key value")
                    )
            batch.append(params)
        self.records.extend(batch)
        return [params["id"] for params in batch]

    async def clear(self) -> int:
        deleted = len(self.records)
        self.records.clear()
        return deleted


def _contains(value: str | None, query: str) -> bool:
    return value is not None and query.lower() in value.lower()


class FakeTransactionRepository(FakeRepository):
    def __init__(self):
        super().__init__(TransactionRepository, unique=("transaction_id",))

    async def get_by_transaction_id(self, transaction_id: str) -> dict[str, Any] | None:
        return self._find(transaction_id=transaction_id)

    async def get_by_email(self, email: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return self._page((r for r in self.records if r["email"] == email), limit, skip)

    async def get_by_status(self, status: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return self._page((r for r in self.records if r["status"] == status), limit, skip)

    def _in_range(self, row: dict[str, Any], start: datetime | None, end: datetime | None) -> bool:
        if start is not None and row["created_at"] < start:
            return False
        if end is not None and row["created_at"] > end:
            return False
        return True

    async def get_by_date_range(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
        skip: int = 0,
    ) -> list[dict[str, Any]]:
        return self._page((r for r in self.records if self._in_range(r, start, end)), limit, skip)

    async def search(self, query: str, limit: int = 20) -> list[dict[str, Any]]:
        rows = (
            r for r in self.records
            if _contains(r["transaction_id"], query) or _contains(r["email"], query)
        )
        return self._page(rows, limit)

    async def get_stats(
        self,
        email: str | None = None,
        status: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> TransactionStats:
        rows = [
            r for r in self.records
            if self._in_range(r, start, end)
            and (email is None or r["email"] == email)
            and (status is None or r["status"] == status)
        ]
        return TransactionStats(
            total_transactions=len(rows),
            total_amount=sum((Decimal(str(r["amount"])) for r in rows), Decimal(0)),
            successful_transactions=sum(1 for r in rows if r["status"] == SUCCEEDED),
            failed_transactions=sum(1 for r in rows if r["status"] == FAILED),
            refunded_transactions=sum(1 for r in rows if r["refunded"]),
            disputed_transactions=sum(1 for r in rows if r["disputed"]),
        )

    async def apply_review(self, transaction_id: str, update: ReviewUpdate) -> dict[str, Any] | None:
        for row in self.records:
            if row["transaction_id"] != transaction_id:
                continue
            row["risk_score"] = clamp_risk_score(update.action, row["risk_score"])
            row["risk_level"] = update.risk_level.value
            row["fraud_detected"] = update.fraud_detected
            row["manual_review"] = update.manual_review.to_document()
            row["updated_at"] = update.updated_at
            return {
                "transaction_id": row["transaction_id"],
                "updated_at": update.updated_at,
                "manual_review": update.manual_review.to_document(),
                "fraud_detected": update.fraud_detected,
                "risk_level": update.risk_level.value,
                "risk_score": row["risk_score"],
            }
        return None


class FakeCustomerRepository(FakeRepository):
    def __init__(self):
        super().__init__(CustomerRepository, unique=("email",))

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        return self._find(email=email)

    async def search(self, query: str, limit: int = 20) -> list[dict[str, Any]]:
        rows = (r for r in self.records if _contains(r["email"], query) or _contains(r["name"], query))
        return self._page(rows, limit)


class FakeSubscriptionRepository(FakeRepository):
    def __init__(self):
        super().__init__(SubscriptionRepository, unique=("subscription_id",))

    async def get_by_subscription_id(self, subscription_id: str) -> dict[str, Any] | None:
        return self._find(subscription_id=subscription_id)

    async def get_by_email(self, email: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return self._page((r for r in self.records if r["email"] == email), limit, skip)

    async def get_by_status(self, status: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return self._page((r for r in self.records if r["status"] == status), limit, skip)

    async def get_stats(self, email: str | None = None) -> SubscriptionStats:
        rows = [r for r in self.records if email is None or r["email"] == email]
        amounts: dict[str | None, Decimal] = {}
        for row in rows:
            if row["status"] != ACTIVE:
                continue
            charge = Decimal(str(row["price_amount"])) * row["quantity"]
            amounts[row["interval"]] = amounts.get(row["interval"], Decimal(0)) + charge
        return SubscriptionStats(
            total_subscriptions=len(rows),
            active_subscriptions=sum(1 for r in rows if r["status"] == ACTIVE),
            canceled_subscriptions=sum(1 for r in rows if r["status"] == CANCELED),
            trial_subscriptions=sum(1 for r in rows if r["trial_start"] and r["trial_end"]),
            total_revenue=sum((Decimal(str(r["price_amount"])) for r in rows), Decimal(0)),
            active_amounts_by_interval=amounts,
        )


class FakeFraudResultRepository(FakeRepository):
    def __init__(self):
        super().__init__(FraudResultRepository)

    async def get_by_email(self, email: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return self._page((r for r in self.records if r["email"] == email), limit, skip)

    async def get_stats(self, email: str | None = None) -> FraudStats:
        rows = [r for r in self.records if email is None or r["email"] == email]
        total = len(rows)
        confidence = sum((Decimal(str(r["confidence"])) for r in rows), Decimal(0))
        return FraudStats(
            total_checks=total,
            fraud_detected=sum(1 for r in rows if r["fraud_detected"]),
            average_confidence=confidence / total if total else Decimal(0),
        )


class FakeStore:
    """Same attribute surface as ``risk_monitor.persistence.store.Store``."""

    def __init__(self):
        self.customers = FakeCustomerRepository()
        self.transactions = FakeTransactionRepository()
        self.subscriptions = FakeSubscriptionRepository()
        self.subscription_forecasts = FakeRepository(SubscriptionForecastRepository)
        self.fraud_results = FakeFraudResultRepository()
        self.chargeback_predictions = FakeRepository(ChargebackPredictionRepository)

    @property
    def collections(self) -> dict[str, FakeRepository]:
        return {
            "customers": self.customers,
            "transactions": self.transactions,
            "subscriptions": self.subscriptions,
            "subscription_forecasts": self.subscription_forecasts,
            "fraud_results": self.fraud_results,
            "chargeback_predictions": self.chargeback_predictions,
        }

    async def clear_all(self) -> dict[str, int]:
        return {name: await repo.clear() for name, repo in self.collections.items()}

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        return {name: copy.deepcopy(repo.records) for name, repo in self.collections.items()}


def store_factory_for(store: FakeStore):
    """A ``StoreFactory`` that always hands out the same fake store."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeStore]:
        yield store

    return factory
