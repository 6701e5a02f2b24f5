"""Administrative reset of every collection."""

import logging

from risk_monitor.core.config import Settings
from risk_monitor.core.errors import ForbiddenError
from risk_monitor.persistence.store import Store

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, store: Store, settings: Settings):
        self.store = store
        self.settings = settings

    async def clear_all_collections(self) -> dict[str, int]:
        """Delete every record in every collection.

        Raises:
            ForbiddenError: If the reset flag is off or the environment is prod.
        """
        if not self.settings.admin_reset_allowed:
            raise ForbiddenError(
                "Clearing collections is disabled in this environment",
                details={
                    "env": self.settings.app.env.value,
                    "enable_admin_reset": self.settings.features.enable_admin_reset,
                },
            )
        deleted = await self.store.clear_all()
        logger.warning("Collections cleared by admin request", extra={"deleted": deleted})
        return deleted
