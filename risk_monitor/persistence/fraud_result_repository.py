"""Fraud detection result repository.

Table: payment_intelligence.fraud_results
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text

from risk_monitor.domain.metrics import FraudStats
from risk_monitor.persistence.base import BaseRepository


class FraudResultRepository(BaseRepository):
    """Repository for payment_intelligence.fraud_results data access."""

    table = "fraud_results"
    columns = (
        "transaction_id",
        "email",
        "fraud_detected",
        "confidence",
        "reasons",
        "timestamp",
    )
    json_columns = frozenset({"reasons"})
    order_column = "timestamp"

    async def get_by_email(self, email: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        return await self._fetch_many("email = :email", {"email": email}, limit=limit, skip=skip)

    async def get_stats(self, email: str | None = None) -> FraudStats:
        where = "WHERE email = :email" if email is not None else ""
        result = await self.session.execute(
            text(f"""
                SELECT
                    COUNT(*) AS total_checks,
                    COUNT(*) FILTER (WHERE fraud_detected) AS fraud_detected,
                    AVG(confidence) AS average_confidence
                FROM {self.qualified_table}
                {where}
            """),
            {"email": email} if email is not None else {},
        )
        row = result.mappings().one()
        average = row["average_confidence"]
        return FraudStats(
            total_checks=row["total_checks"] or 0,
            fraud_detected=row["fraud_detected"] or 0,
            average_confidence=Decimal(str(average)) if average is not None else Decimal(0),
        )
