"""Transaction repository.

Table: payment_intelligence.transactions

``transaction_id`` is the business key supplied by the payment gateway.
It is distinct from ``id``, the storage key assigned on insert.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB

from risk_monitor.domain.metrics import FAILED, SUCCEEDED, TransactionStats
from risk_monitor.domain.review import FRAUD_RISK_FLOOR, SAFE_RISK_CEILING, ReviewAction, ReviewUpdate
from risk_monitor.persistence.base import BaseRepository, contains_pattern


class TransactionRepository(BaseRepository):
    """Repository for payment_intelligence.transactions data access."""

    table = "transactions"
    columns = (
        "transaction_id",
        "email",
        "amount",
        "currency",
        "gateway",
        "status",
        "payment_method",
        "card_brand",
        "card_country",
        "fingerprint",
        "funding_type",
        "three_d_secure",
        "cvc_check",
        "address_line1_check",
        "postal_code_check",
        "risk_level",
        "risk_score",
        "seller_message",
        "network_status",
        "outcome_type",
        "ip_address",
        "billing_name",
        "billing_email",
        "billing_phone",
        "billing_address_country",
        "billing_address_line1",
        "billing_address_line2",
        "billing_address_postal_code",
        "billing_address_city",
        "billing_address_state",
        "refunded",
        "amount_refunded",
        "disputed",
        "captured",
        "paid",
        "chargeback_confidence",
        "chargeback_predicted",
        "fraud_detected",
        "manual_review",
        "created_at",
        "updated_at",
    )
    json_columns = frozenset({"manual_review"})

    async def get_by_transaction_id(self, transaction_id: str) -> dict[str, Any] | None:
        """Get a transaction by its business key."""
        return await self._fetch_one("transaction_id = :transaction_id", {"transaction_id": transaction_id})

    async def get_by_email(self, email: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        """Transactions for an exact email, newest first."""
        return await self._fetch_many("email = :email", {"email": email}, limit=limit, skip=skip)

    async def get_by_status(self, status: str, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        """Transactions with an exact status, newest first."""
        return await self._fetch_many("status = :status", {"status": status}, limit=limit, skip=skip)

    async def get_by_date_range(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
        skip: int = 0,
    ) -> list[dict[str, Any]]:
        """Transactions created within [start, end]. Either bound may be omitted."""
        where, params = self._date_filter(start, end)
        return await self._fetch_many(where, params, limit=limit, skip=skip)

    async def search(self, query: str, limit: int = 20) -> list[dict[str, Any]]:
        """Case-insensitive substring match on transaction_id or email."""
        return await self._fetch_many(
            "(transaction_id ILIKE :pattern ESCAPE '\\' OR email ILIKE :pattern ESCAPE '\\')",
            {"pattern": contains_pattern(query)},
            limit=limit,
        )

    @staticmethod
    def _date_filter(start: datetime | None, end: datetime | None) -> tuple[str | None, dict[str, Any]]:
        clauses = []
        params: dict[str, Any] = {}
        if start is not None:
            clauses.append("created_at >= :start")
            params["start"] = start
        if end is not None:
            clauses.append("created_at <= :end")
            params["end"] = end
        return (" AND ".join(clauses) or None), params

    async def get_stats(
        self,
        email: str | None = None,
        status: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> TransactionStats:
        """Aggregate counts and amounts over the transactions matching the filters."""
        date_where, params = self._date_filter(start, end)
        clauses = [date_where] if date_where else []
        if email is not None:
            clauses.append("email = :email")
            params["email"] = email
        if status is not None:
            clauses.append("status = :status")
            params["status"] = status
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        result = await self.session.execute(
            text(f"""
                SELECT
                    COUNT(*) AS total_transactions,
                    COALESCE(SUM(amount), 0) AS total_amount,
                    COUNT(*) FILTER (WHERE status = :succeeded) AS successful_transactions,
                    COUNT(*) FILTER (WHERE status = :failed) AS failed_transactions,
                    COUNT(*) FILTER (WHERE refunded) AS refunded_transactions,
                    COUNT(*) FILTER (WHERE disputed) AS disputed_transactions
                FROM {self.qualified_table}
                {where}
            """),
            {**params, "succeeded": SUCCEEDED, "failed": FAILED},
        )
        row = result.mappings().one()
        return TransactionStats(
            total_transactions=row["total_transactions"] or 0,
            total_amount=row["total_amount"],
            successful_transactions=row["successful_transactions"] or 0,
            failed_transactions=row["failed_transactions"] or 0,
            refunded_transactions=row["refunded_transactions"] or 0,
            disputed_transactions=row["disputed_transactions"] or 0,
        )

    async def apply_review(self, transaction_id: str, update: ReviewUpdate) -> dict[str, Any] | None:
        """Write a review decision in one statement.

        The risk score clamp is evaluated by the database against the
        current row, so there is no separate read. Returns None when no
        transaction has the given key.
        """
        if update.action is ReviewAction.MARK_FRAUD:
            clamp = f"GREATEST(COALESCE(risk_score, 0), {FRAUD_RISK_FLOOR})"
        else:
            clamp = f"LEAST(COALESCE(risk_score, 0), {SAFE_RISK_CEILING})"

        statement = text(f"""
            UPDATE {self.qualified_table}
            SET risk_score = {clamp},
                risk_level = :risk_level,
                fraud_detected = :fraud_detected,
                manual_review = :manual_review,
                updated_at = :updated_at
            WHERE transaction_id = :transaction_id
            RETURNING transaction_id, risk_score
        """).bindparams(bindparam("manual_review", type_=JSONB))

        result = await self.session.execute(
            statement,
            {
                "transaction_id": transaction_id,
                "risk_level": update.risk_level.value,
                "fraud_detected": update.fraud_detected,
                "manual_review": update.manual_review.to_document(),
                "updated_at": update.updated_at,
            },
        )
        row = result.mappings().first()
        if row is None:
            return None

        return {
            "transaction_id": row["transaction_id"],
            "updated_at": update.updated_at,
            "manual_review": update.manual_review.to_document(),
            "fraud_detected": update.fraud_detected,
            "risk_level": update.risk_level.value,
            "risk_score": row["risk_score"],
        }
