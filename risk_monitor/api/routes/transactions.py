"""API routes for payment transactions and manual review."""

from fastapi import APIRouter, Depends, Query

from risk_monitor.core.dependencies import (
    PaginationDep,
    StoreDep,
    is_true,
    parse_iso_datetime,
)
from risk_monitor.domain.review import ReviewOutcome
from risk_monitor.schemas.envelope import ItemEnvelope, ListEnvelope, StatsEnvelope
from risk_monitor.schemas.stats import TransactionStatsResponse
from risk_monitor.schemas.transaction import (
    ReviewResultResponse,
    TransactionCreate,
    TransactionResponse,
    TransactionReviewRequest,
)
from risk_monitor.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def get_transaction_service(store: StoreDep) -> TransactionService:
    """Get transaction service instance."""
    return TransactionService(store)


@router.get(
    "",
    response_model=ListEnvelope[TransactionResponse] | StatsEnvelope[TransactionStatsResponse],
    response_model_exclude_unset=True,
)
async def list_transactions(
    pagination: PaginationDep,
    email: str | None = None,
    status: str | None = None,
    search: str | None = None,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    stats: str | None = Query(None, description='"true" returns aggregates instead of records'),
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """List transactions, or their aggregates when ``stats=true``.

    Filter precedence: search, email, status, date range. ``totalCount``
    is always the unfiltered total.
    """
    start = parse_iso_datetime(start_date, "startDate")
    end = parse_iso_datetime(end_date, "endDate")

    if is_true(stats):
        aggregates, total = await service.get_stats(email=email, status=status, start=start, end=end)
        return {
            "success": True,
            "stats": TransactionStatsResponse.from_stats(aggregates),
            "total_count": total,
        }

    items, total = await service.list_transactions(
        limit=pagination.limit,
        skip=pagination.skip,
        email=email,
        status=status,
        search=search,
        start=start,
        end=end,
    )
    return {
        "success": True,
        "data": items,
        "total_count": total,
        "limit": pagination.limit,
        "skip": pagination.skip,
    }


@router.post(
    "",
    response_model=ItemEnvelope[TransactionResponse],
    response_model_exclude_unset=True,
    status_code=201,
)
async def create_transaction(
    request: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Record a transaction."""
    created = await service.create_transaction(request)
    return {"success": True, "data": created}


@router.patch(
    "",
    response_model=ItemEnvelope[ReviewResultResponse],
    response_model_exclude_unset=True,
)
async def review_transaction(
    request: TransactionReviewRequest,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Mark a transaction safe or fraud.

    Returns exactly the fields the review wrote.
    """
    result = await service.review_transaction(request)
    outcome = result["manual_review"]["marked_as"]
    label = "safe" if outcome == ReviewOutcome.SAFE.value else "fraud"
    return {
        "success": True,
        "message": f"Transaction marked as {label} successfully",
        "data": result,
    }


@router.get(
    "/{transaction_id}",
    response_model=ItemEnvelope[TransactionResponse],
    response_model_exclude_unset=True,
)
async def get_transaction(
    transaction_id: str,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Get a transaction by its gateway transaction id."""
    return {"success": True, "data": await service.get_transaction(transaction_id)}
