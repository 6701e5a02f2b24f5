"""Administrative routes. Disabled unless FEATURE_ENABLE_ADMIN_RESET is set outside prod."""

from fastapi import APIRouter, Depends

from risk_monitor.core.dependencies import SettingsDep, StoreDep
from risk_monitor.schemas.envelope import MessageEnvelope
from risk_monitor.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service(store: StoreDep, settings: SettingsDep) -> AdminService:
    return AdminService(store, settings)


@router.delete("/collections", response_model=MessageEnvelope, response_model_exclude_unset=True)
async def clear_collections(service: AdminService = Depends(get_admin_service)) -> dict:
    """Delete every record in every collection."""
    deleted = await service.clear_all_collections()
    return {"success": True, "message": "All collections cleared", "data": {"deleted": deleted}}
