# ============================================================================
# STORAGE HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Azure Storage reachability
# PURPOSE: Verify the four storage backends answer
# CREATED: 18 OCT 2026
# ============================================================================
"""
Storage Health Checks

Storage checks (priority 20):
- StorageCheck: one metadata call per backend via StorageFacade.check_backends
"""

import asyncio
from typing import Optional

from core.errors import RetailStorageError
from health.core import HealthCheckPlugin, HealthCheckResult, HealthCheckCategory
from services.storage_facade import StorageFacade


class StorageCheck(HealthCheckPlugin):
    """
    Azure Storage health check.

    One metadata call per backend, so the cost does not grow with the
    number of stored records. Backends that are not provisioned yet are
    healthy; they are created on first use.
    """

    name = "storage"
    category = HealthCheckCategory.STORAGE
    timeout_seconds = 15.0

    def __init__(self, facade: Optional[StorageFacade]):
        self.facade = facade

    async def check(self) -> HealthCheckResult:
        if self.facade is None:
            return HealthCheckResult.unhealthy(
                message="Azure Storage not configured",
                hint="Set RETAIL_STORAGE_CONNECTION_STRING or RETAIL_STORAGE_ACCOUNT",
            )

        try:
            provisioned = await asyncio.to_thread(self.facade.check_backends)
        except RetailStorageError as e:
            return HealthCheckResult.unhealthy(
                message=f"Storage connection failed: {e}",
                resource=e.resource,
            )

        return HealthCheckResult.healthy(message="Storage connected", provisioned=provisioned)


__all__ = ["StorageCheck"]
