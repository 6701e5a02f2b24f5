"""API routes package."""

from fastapi import APIRouter

from risk_monitor.api.routes.admin import router as admin_router
from risk_monitor.api.routes.customers import router as customers_router
from risk_monitor.api.routes.dashboard import router as dashboard_router
from risk_monitor.api.routes.fraud_results import router as fraud_results_router
from risk_monitor.api.routes.predictions import router as predictions_router
from risk_monitor.api.routes.subscriptions import router as subscriptions_router
from risk_monitor.api.routes.transactions import router as transactions_router

# Create API router with all sub-routers
api_router = APIRouter()

# Register all route modules
api_router.include_router(transactions_router)
api_router.include_router(customers_router)
api_router.include_router(subscriptions_router)
api_router.include_router(fraud_results_router)
api_router.include_router(predictions_router)
api_router.include_router(dashboard_router)
api_router.include_router(admin_router)


__all__ = [
    "api_router",
    "transactions_router",
    "customers_router",
    "subscriptions_router",
    "fraud_results_router",
    "predictions_router",
    "dashboard_router",
    "admin_router",
]
