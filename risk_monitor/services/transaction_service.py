"""Transaction service: listing, recording and manual review."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from risk_monitor.core.errors import ConflictError, NotFoundError
from risk_monitor.domain.metrics import TransactionStats
from risk_monitor.domain.review import build_review_update, parse_action, state_of
from risk_monitor.persistence.store import Store
from risk_monitor.schemas.transaction import TransactionCreate, TransactionReviewRequest

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for transaction operations."""

    def __init__(self, store: Store):
        self.store = store
        self.repo = store.transactions

    async def list_transactions(
        self,
        limit: int,
        skip: int = 0,
        email: str | None = None,
        status: str | None = None,
        search: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """List transactions with one filter applied.

        Precedence: search, then email, then status, then date range.
        The returned count is the unfiltered collection total.
        """
        if search:
            items = await self.repo.search(search, limit=limit)
        elif email:
            items = await self.repo.get_by_email(email, limit=limit, skip=skip)
        elif status:
            items = await self.repo.get_by_status(status, limit=limit, skip=skip)
        elif start is not None or end is not None:
            items = await self.repo.get_by_date_range(start, end, limit=limit, skip=skip)
        else:
            items = await self.repo.get_all(limit=limit, skip=skip)

        total = await self.repo.count()
        return items, total

    async def get_transaction(self, transaction_id: str) -> dict[str, Any]:
        transaction = await self.repo.get_by_transaction_id(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction not found", details={"transaction_id": transaction_id})
        return transaction

    async def get_stats(
        self,
        email: str | None = None,
        status: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> tuple[TransactionStats, int]:
        stats = await self.repo.get_stats(email=email, status=status, start=start, end=end)
        total = await self.repo.count()
        return stats, total

    async def create_transaction(self, payload: TransactionCreate) -> dict[str, Any]:
        """Record a transaction. ``created_at`` defaults to now, ``updated_at`` is always now."""
        existing = await self.repo.get_by_transaction_id(payload.transaction_id)
        if existing is not None:
            raise ConflictError(
                "Transaction with this transaction_id already exists",
                details={"transaction_id": payload.transaction_id},
            )

        now = datetime.now(UTC)
        record = payload.model_dump()
        record["created_at"] = payload.created_at or now
        record["updated_at"] = now
        record["manual_review"] = None

        try:
            created = await self.repo.insert_one(record)
        except IntegrityError as exc:
            raise ConflictError(
                "Transaction with this transaction_id already exists",
                details={"transaction_id": payload.transaction_id},
            ) from exc

        logger.info(
            "Transaction recorded",
            extra={"transaction_id": payload.transaction_id, "status": payload.status},
        )
        return created

    async def review_transaction(self, request: TransactionReviewRequest) -> dict[str, Any]:
        """Apply a reviewer decision and return exactly the fields it changed."""
        action = parse_action(request.action)
        update = build_review_update(action, notes=request.notes, retrain_model=request.retrain_model)
        existing = await self.repo.get_by_transaction_id(request.transaction_id)
        result = None
        if existing is not None:
            result = await self.repo.apply_review(request.transaction_id, update)
        if result is None:
            raise NotFoundError(
                "Transaction not found",
                details={"transaction_id": request.transaction_id},
            )

        logger.info(
            "Transaction reviewed",
            extra={
                "transaction_id": request.transaction_id,
                "previous_state": state_of(existing.get("manual_review")).value,
                "review_state": update.target_state.value,
                "marked_as": update.manual_review.marked_as.value,
                "risk_score": result["risk_score"],
                "retrain_model": update.manual_review.retrain_model,
            },
        )
        return result
