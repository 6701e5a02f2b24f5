"""API routes for the combined dashboard view and cross-collection search."""

from fastapi import APIRouter, Depends, Query

from risk_monitor.core.dependencies import SettingsDep, StoreFactoryDep, is_true
from risk_monitor.core.errors import ValidationError
from risk_monitor.schemas.dashboard import DashboardResponse, SearchResults
from risk_monitor.schemas.envelope import ItemEnvelope
from risk_monitor.schemas.stats import (
    ChargebackPredictionStatsResponse,
    CustomerStatsResponse,
    DashboardTransactionStats,
    FraudStatsResponse,
    SubscriptionForecastStatsResponse,
    SubscriptionStatsResponse,
)
from risk_monitor.services.dashboard_service import DashboardService, SearchService

router = APIRouter(tags=["dashboard"])


def get_dashboard_service(store_factory: StoreFactoryDep) -> DashboardService:
    return DashboardService(store_factory)


def get_search_service(store_factory: StoreFactoryDep) -> SearchService:
    return SearchService(store_factory)


@router.get("/dashboard", response_model=DashboardResponse, response_model_exclude_unset=True)
async def get_dashboard(
    settings: SettingsDep,
    include_data: str | None = Query(None, alias="includeData"),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """All collection statistics, plus the most recent records when ``includeData=true``."""
    snapshot = await service.get_dashboard(
        include_data=is_true(include_data),
        recent_limit=settings.pagination.dashboard_recent_limit,
    )
    body = {
        "success": True,
        "stats": {
            "transactions": DashboardTransactionStats.from_stats(snapshot.transaction_stats),
            "subscriptions": SubscriptionStatsResponse.from_stats(snapshot.subscription_stats),
            "fraud": FraudStatsResponse.from_stats(snapshot.fraud_stats),
            "customers": CustomerStatsResponse(total_customers=snapshot.customer_count),
            "forecasts": SubscriptionForecastStatsResponse(total_forecasts=snapshot.forecast_count),
            "chargebacks": ChargebackPredictionStatsResponse(total_predictions=snapshot.prediction_count),
        },
    }
    if snapshot.recent is not None:
        body["recent_transactions"] = snapshot.recent["transactions"]
        body["recent_customers"] = snapshot.recent["customers"]
        body["recent_subscriptions"] = snapshot.recent["subscriptions"]
        body["recent_fraud_results"] = snapshot.recent["fraud_results"]
    return body


@router.get("/search", response_model=ItemEnvelope[SearchResults], response_model_exclude_unset=True)
async def search_all(
    settings: SettingsDep,
    q: str | None = Query(None, description="Case-insensitive substring"),
    limit: str | None = Query(None),
    service: SearchService = Depends(get_search_service),
) -> dict:
    """Search customers and transactions; recent subscriptions are listed alongside."""
    max_limit = settings.pagination.max_limit
    try:
        page_size = int(limit) if limit else settings.pagination.search_limit
    except ValueError:
        page_size = 0
    if not 1 <= page_size <= max_limit:
        raise ValidationError(f"Limit must be between 1 and {max_limit}", details={"limit": limit})

    results = await service.search_all(q, limit=page_size)
    return {
        "success": True,
        "data": {
            "customers": results.customers,
            "transactions": results.transactions,
            "subscriptions": results.subscriptions,
        },
    }
