"""API routes for customers."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from risk_monitor.core.dependencies import PaginationDep, StoreDep, is_true
from risk_monitor.schemas.customer import CustomerAnalyticsResponse, CustomerCreate, CustomerResponse
from risk_monitor.schemas.envelope import ItemEnvelope, ListEnvelope, StatsEnvelope
from risk_monitor.schemas.stats import CustomerMetricsResponse, CustomerStatsResponse
from risk_monitor.services.customer_service import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


def get_customer_service(store: StoreDep) -> CustomerService:
    """Get customer service instance."""
    return CustomerService(store)


@router.get(
    "",
    response_model=ListEnvelope[CustomerResponse] | StatsEnvelope[CustomerStatsResponse],
    response_model_exclude_unset=True,
)
async def list_customers(
    pagination: PaginationDep,
    email: str | None = None,
    search: str | None = None,
    stats: str | None = Query(None),
    service: CustomerService = Depends(get_customer_service),
) -> dict:
    """List customers. Filter precedence: search, email."""
    if is_true(stats):
        total = await service.count()
        return {
            "success": True,
            "stats": CustomerStatsResponse(total_customers=total),
            "total_count": total,
        }

    items, total = await service.list_customers(
        limit=pagination.limit, skip=pagination.skip, email=email, search=search
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
    response_model=ItemEnvelope[CustomerResponse],
    response_model_exclude_unset=True,
    status_code=201,
)
async def create_customer(
    request: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
) -> dict:
    """Register a customer. 409 if the email is already taken."""
    return {"success": True, "data": await service.create_customer(request)}


@router.get(
    "/analytics",
    response_model=ItemEnvelope[CustomerAnalyticsResponse],
    response_model_exclude_unset=True,
)
async def get_customer_analytics(
    pagination: PaginationDep,
    email: str = Query(..., min_length=1),
    service: CustomerService = Depends(get_customer_service),
) -> dict:
    """Activity metrics for one customer plus their most recent records. 404 for an unknown email."""
    analytics = await service.get_customer_analytics(email, limit=pagination.limit)
    analytics["metrics"] = CustomerMetricsResponse.from_metrics(analytics["metrics"])
    return {"success": True, "data": analytics}


@router.get(
    "/{customer_id}",
    response_model=ItemEnvelope[CustomerResponse],
    response_model_exclude_unset=True,
)
async def get_customer(
    customer_id: UUID,
    service: CustomerService = Depends(get_customer_service),
) -> dict:
    return {"success": True, "data": await service.get_customer(customer_id)}
