# ============================================================================
# REMOTE FUNCTION HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Function app reachability
# PURPOSE: Report whether the remote execution path is usable
# CREATED: 18 OCT 2026
# ============================================================================
"""
Remote Function Health Checks

Remote checks (priority 40, not required for readiness):
- FunctionAppCheck: bare GET against the AddCustomer endpoint

The portal keeps working through the direct path when the function app is
missing or down, so failures here are reported as degraded.
"""

import asyncio

from health.core import HealthCheckPlugin, HealthCheckResult, HealthCheckCategory
from services.function_gateway import FunctionGateway


class FunctionAppCheck(HealthCheckPlugin):
    """Function app connectivity check."""

    name = "function_app"
    category = HealthCheckCategory.REMOTE
    timeout_seconds = 15.0
    required_for_ready = False

    def __init__(self, gateway: FunctionGateway):
        self.gateway = gateway

    async def check(self) -> HealthCheckResult:
        if not self.gateway.is_configured:
            return HealthCheckResult.degraded(
                message="Azure Functions not configured",
                hint="Set RETAIL_FUNCTIONS_BASE_URL and RETAIL_FUNCTIONS_KEY",
            )

        result = await asyncio.to_thread(self.gateway.test_connection)

        if not result.reached_remote:
            return HealthCheckResult.degraded(
                message=result.message,
                outcome=result.outcome.value,
                base_url=self.gateway.base_url,
            )

        return HealthCheckResult.healthy(
            message="Function app reachable",
            status_code=result.status_code,
            base_url=self.gateway.base_url,
        )


__all__ = ["FunctionAppCheck"]
