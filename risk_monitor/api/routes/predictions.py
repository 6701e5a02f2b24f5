"""API routes for chargeback predictions and subscription revenue forecasts.

Both collections are append-only: list, create and count.
"""

from fastapi import APIRouter, Depends, Query

from risk_monitor.core.dependencies import PaginationDep, StoreDep, is_true
from risk_monitor.schemas.envelope import ItemEnvelope, ListEnvelope, StatsEnvelope
from risk_monitor.schemas.prediction import (
    ChargebackPredictionCreate,
    ChargebackPredictionResponse,
    SubscriptionForecastCreate,
    SubscriptionForecastResponse,
)
from risk_monitor.schemas.stats import (
    ChargebackPredictionStatsResponse,
    SubscriptionForecastStatsResponse,
)
from risk_monitor.services.prediction_service import PredictionService

router = APIRouter(tags=["predictions"])


def get_prediction_service(store: StoreDep) -> PredictionService:
    return PredictionService(store)


@router.get(
    "/chargeback_predictions",
    response_model=(
        ListEnvelope[ChargebackPredictionResponse]
        | StatsEnvelope[ChargebackPredictionStatsResponse]
    ),
    response_model_exclude_unset=True,
)
async def list_chargeback_predictions(
    pagination: PaginationDep,
    stats: str | None = Query(None),
    service: PredictionService = Depends(get_prediction_service),
) -> dict:
    if is_true(stats):
        total = await service.count_chargeback_predictions()
        return {
            "success": True,
            "stats": ChargebackPredictionStatsResponse(total_predictions=total),
            "total_count": total,
        }

    items, total = await service.list_chargeback_predictions(limit=pagination.limit, skip=pagination.skip)
    return {"success": True, "data": items, "total_count": total, "limit": pagination.limit}


@router.post(
    "/chargeback_predictions",
    response_model=ItemEnvelope[ChargebackPredictionResponse],
    response_model_exclude_unset=True,
    status_code=201,
)
async def create_chargeback_prediction(
    request: ChargebackPredictionCreate,
    service: PredictionService = Depends(get_prediction_service),
) -> dict:
    return {"success": True, "data": await service.create_chargeback_prediction(request)}


@router.get(
    "/subscription_forecasts",
    response_model=(
        ListEnvelope[SubscriptionForecastResponse]
        | StatsEnvelope[SubscriptionForecastStatsResponse]
    ),
    response_model_exclude_unset=True,
)
async def list_subscription_forecasts(
    pagination: PaginationDep,
    stats: str | None = Query(None),
    service: PredictionService = Depends(get_prediction_service),
) -> dict:
    if is_true(stats):
        total = await service.count_subscription_forecasts()
        return {
            "success": True,
            "stats": SubscriptionForecastStatsResponse(total_forecasts=total),
            "total_count": total,
        }

    items, total = await service.list_subscription_forecasts(limit=pagination.limit, skip=pagination.skip)
    return {"success": True, "data": items, "total_count": total, "limit": pagination.limit}


@router.post(
    "/subscription_forecasts",
    response_model=ItemEnvelope[SubscriptionForecastResponse],
    response_model_exclude_unset=True,
    status_code=201,
)
async def create_subscription_forecast(
    request: SubscriptionForecastCreate,
    service: PredictionService = Depends(get_prediction_service),
) -> dict:
    return {"success": True, "data": await service.create_subscription_forecast(request)}
