"""API routes for fraud check results."""

from fastapi import APIRouter, Depends, Query

from risk_monitor.core.dependencies import PaginationDep, StoreDep, is_true
from risk_monitor.schemas.envelope import ItemEnvelope, ListEnvelope, StatsEnvelope
from risk_monitor.schemas.fraud_result import FraudResultCreate, FraudResultResponse
from risk_monitor.schemas.stats import FraudStatsResponse
from risk_monitor.services.fraud_result_service import FraudResultService

router = APIRouter(prefix="/fraud_results", tags=["fraud-results"])


def get_fraud_result_service(store: StoreDep) -> FraudResultService:
    return FraudResultService(store)


@router.get(
    "",
    response_model=ListEnvelope[FraudResultResponse] | StatsEnvelope[FraudStatsResponse],
    response_model_exclude_unset=True,
)
async def list_fraud_results(
    pagination: PaginationDep,
    email: str | None = None,
    stats: str | None = Query(None),
    service: FraudResultService = Depends(get_fraud_result_service),
) -> dict:
    if is_true(stats):
        aggregates, total = await service.get_stats()
        return {
            "success": True,
            "stats": FraudStatsResponse.from_stats(aggregates),
            "total_count": total,
        }

    items, total = await service.list_fraud_results(
        limit=pagination.limit, skip=pagination.skip, email=email
    )
    return {"success": True, "data": items, "total_count": total, "limit": pagination.limit}


@router.post(
    "",
    response_model=ItemEnvelope[FraudResultResponse],
    response_model_exclude_unset=True,
    status_code=201,
)
async def create_fraud_result(
    request: FraudResultCreate,
    service: FraudResultService = Depends(get_fraud_result_service),
) -> dict:
    return {"success": True, "data": await service.create_fraud_result(request)}
