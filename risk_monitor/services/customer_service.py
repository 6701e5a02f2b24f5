"""Customer service."""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from risk_monitor.core.errors import ConflictError, NotFoundError
from risk_monitor.domain.metrics import CustomerMetrics
from risk_monitor.persistence.store import Store
from risk_monitor.schemas.customer import CustomerCreate

logger = logging.getLogger(__name__)


class CustomerService:
    """Service for customer operations."""

    def __init__(self, store: Store):
        self.store = store
        self.repo = store.customers

    async def list_customers(
        self,
        limit: int,
        skip: int = 0,
        email: str | None = None,
        search: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """List customers. Precedence: search, then exact email, then all."""
        if search:
            items = await self.repo.search(search, limit=limit)
        elif email:
            customer = await self.repo.get_by_email(email)
            items = [customer] if customer is not None else []
        else:
            items = await self.repo.get_all(limit=limit, skip=skip)

        total = await self.repo.count()
        return items, total

    async def get_customer(self, customer_id: UUID) -> dict[str, Any]:
        customer = await self.repo.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found", details={"customer_id": str(customer_id)})
        return customer

    async def get_customer_analytics(self, email: str, limit: int = 100) -> dict[str, Any]:
        """A customer's activity metrics and most recent records, looked up by email."""
        customer = await self.repo.get_by_email(email)
        if customer is None:
            raise NotFoundError("Customer not found", details={"email": email})

        metrics = CustomerMetrics(
            transactions=await self.store.transactions.get_stats(email=email),
            subscriptions=await self.store.subscriptions.get_stats(email=email),
            fraud=await self.store.fraud_results.get_stats(email=email),
        )
        return {
            "customer": customer,
            "metrics": metrics,
            "transactions": await self.store.transactions.get_by_email(email, limit=limit),
            "subscriptions": await self.store.subscriptions.get_by_email(email, limit=limit),
            "fraud_results": await self.store.fraud_results.get_by_email(email, limit=limit),
        }

    async def count(self) -> int:
        return await self.repo.count()

    async def create_customer(self, payload: CustomerCreate) -> dict[str, Any]:
        """Register a customer. An existing email is a conflict and nothing is written."""
        if await self.repo.get_by_email(payload.email) is not None:
            raise ConflictError(
                "Customer with this email already exists",
                details={"email": payload.email},
            )

        record = payload.model_dump()
        record["created_at"] = payload.created_at or datetime.now(UTC)

        try:
            created = await self.repo.insert_one(record)
        except IntegrityError as exc:
            raise ConflictError(
                "Customer with this email already exists",
                details={"email": payload.email},
            ) from exc

        logger.info("Customer created", extra={"customer_id": str(created["id"])})
        return created
