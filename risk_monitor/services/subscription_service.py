"""Subscription service."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from risk_monitor.core.errors import ConflictError
from risk_monitor.domain.metrics import SubscriptionStats
from risk_monitor.persistence.store import Store
from risk_monitor.schemas.subscription import SubscriptionCreate

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service for subscription operations."""

    def __init__(self, store: Store):
        self.store = store
        self.repo = store.subscriptions

    async def list_subscriptions(
        self,
        limit: int,
        skip: int = 0,
        email: str | None = None,
        status: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """List subscriptions. Precedence: email, then status, then all."""
        if email:
            items = await self.repo.get_by_email(email, limit=limit, skip=skip)
        elif status:
            items = await self.repo.get_by_status(status, limit=limit, skip=skip)
        else:
            items = await self.repo.get_all(limit=limit, skip=skip)

        total = await self.repo.count()
        return items, total

    async def get_stats(self) -> tuple[SubscriptionStats, int]:
        stats = await self.repo.get_stats()
        return stats, stats.total_subscriptions

    async def create_subscription(self, payload: SubscriptionCreate) -> dict[str, Any]:
        """Record a subscription. Period and anchor timestamps default to now."""
        now = datetime.now(UTC)
        record = payload.model_dump()
        for field in ("current_period_start", "current_period_end", "billing_cycle_anchor", "created_at"):
            if record[field] is None:
                record[field] = now

        try:
            created = await self.repo.insert_one(record)
        except IntegrityError as exc:
            raise ConflictError(
                "Subscription with this subscription_id already exists",
                details={"subscription_id": payload.subscription_id},
            ) from exc

        logger.info(
            "Subscription created",
            extra={"subscription_id": payload.subscription_id, "status": payload.status},
        )
        return created
