"""Subscription repository.

Table: payment_intelligence.subscriptions
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text

from risk_monitor.domain.metrics import ACTIVE, CANCELED, SubscriptionStats
from risk_monitor.persistence.base import BaseRepository


class SubscriptionRepository(BaseRepository):
    """Repository for payment_intelligence.subscriptions data access."""

    table = "subscriptions"
    columns = (
        "subscription_id",
        "email",
        "gateway",
        "status",
        "current_period_start",
        "current_period_end",
        "plan_id",
        "plan_name",
        "product_id",
        "price_amount",
        "currency",
        "interval",
        "quantity",
        "cancel_at_period_end",
        "canceled_at",
        "ended_at",
        "trial_start",
        "trial_end",
        "metadata",
        "latest_invoice",
        "collection_method",
        "default_payment_method",
        "billing_cycle_anchor",
        "created_at",
    )
    json_columns = frozenset({"metadata"})

    async def get_by_subscription_id(self, subscription_id: str) -> dict[str, Any] | None:
        return await self._fetch_one("subscription_id = :subscription_id", {"subscription_id": subscription_id})

    async def get_by_email(self, email: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return await self._fetch_many("email = :email", {"email": email}, limit=limit, skip=skip)

    async def get_by_status(self, status: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return await self._fetch_many("status = :status", {"status": status}, limit=limit, skip=skip)

    async def get_stats(self, email: str | None = None) -> SubscriptionStats:
        """Status counts, total price and active charge per billing interval.

        ``email`` restricts every aggregate to one customer's subscriptions.
        """
        where = "WHERE email = :email" if email is not None else ""
        scope = {"email": email} if email is not None else {}
        totals = await self.session.execute(
            text(f"""
                SELECT
                    COUNT(*) AS total,
                    COUNT(*) FILTER (WHERE status = :active) AS active,
                    COUNT(*) FILTER (WHERE status = :canceled) AS canceled,
                    COUNT(*) FILTER (
                        WHERE trial_start IS NOT NULL AND trial_end IS NOT NULL
                    ) AS trialing,
                    COALESCE(SUM(price_amount), 0) AS total_revenue
                FROM {self.qualified_table}
                {where}
            """),
            {**scope, "active": ACTIVE, "canceled": CANCELED},
        )
        row = totals.mappings().one()

        active_where = "WHERE status = :active"
        if email is not None:
            active_where += " AND email = :email"
        by_interval = await self.session.execute(
            text(f"""
                SELECT "interval", COALESCE(SUM(price_amount * quantity), 0) AS amount
                FROM {self.qualified_table}
                {active_where}
                GROUP BY "interval"
            """),
            {**scope, "active": ACTIVE},
        )
        amounts: dict[str | None, Decimal] = {
            r["interval"]: r["amount"] for r in by_interval.mappings().all()
        }

        return SubscriptionStats(
            total_subscriptions=row["total"] or 0,
            active_subscriptions=row["active"] or 0,
            canceled_subscriptions=row["canceled"] or 0,
            trial_subscriptions=row["trialing"] or 0,
            total_revenue=row["total_revenue"],
            active_amounts_by_interval=amounts,
        )
