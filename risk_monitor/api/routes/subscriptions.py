"""API routes for subscriptions."""

from fastapi import APIRouter, Depends, Query

from risk_monitor.core.dependencies import PaginationDep, StoreDep, is_true
from risk_monitor.schemas.envelope import ItemEnvelope, ListEnvelope, StatsEnvelope
from risk_monitor.schemas.stats import SubscriptionStatsResponse
from risk_monitor.schemas.subscription import SubscriptionCreate, SubscriptionResponse
from risk_monitor.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def get_subscription_service(store: StoreDep) -> SubscriptionService:
    return SubscriptionService(store)


@router.get(
    "",
    response_model=ListEnvelope[SubscriptionResponse] | StatsEnvelope[SubscriptionStatsResponse],
    response_model_exclude_unset=True,
)
async def list_subscriptions(
    pagination: PaginationDep,
    email: str | None = None,
    status: str | None = None,
    stats: str | None = Query(None),
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    """List subscriptions, or MRR/ARR/churn aggregates when ``stats=true``."""
    if is_true(stats):
        aggregates, total = await service.get_stats()
        return {
            "success": True,
            "stats": SubscriptionStatsResponse.from_stats(aggregates),
            "total_count": total,
        }

    items, total = await service.list_subscriptions(
        limit=pagination.limit, skip=pagination.skip, email=email, status=status
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
    response_model=ItemEnvelope[SubscriptionResponse],
    response_model_exclude_unset=True,
    status_code=201,
)
async def create_subscription(
    request: SubscriptionCreate,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    return {"success": True, "data": await service.create_subscription(request)}
