# ============================================================================
# STARTUP HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Startup health checks
# PURPOSE: Process and configuration checks
# CREATED: 18 OCT 2026
# ============================================================================
"""
Startup Health Checks

Checks that run first (priority 10):
- ProcessCheck: Always healthy if the process is running
- ConfigurationCheck: Storage and function app settings present
"""

import os
import platform
import sys

from core.config import AppConfig
from health.core import HealthCheckPlugin, HealthCheckResult, HealthCheckCategory
from health.registry import register_check


@register_check(category="startup")
class ProcessCheck(HealthCheckPlugin):
    """Healthy whenever it runs."""

    name = "process"
    timeout_seconds = 1.0

    async def check(self) -> HealthCheckResult:
        return HealthCheckResult.healthy(
            message="Process running",
            python_version=sys.version.split()[0],
            platform=platform.platform(),
            pid=os.getpid(),
        )


class ConfigurationCheck(HealthCheckPlugin):
    """
    Quick configuration check.

    Missing storage settings are unhealthy (the direct path and all reads
    need them). Missing function app settings are only degraded: requests
    fall back to the direct path.
    """

    name = "configuration"
    category = HealthCheckCategory.STARTUP
    timeout_seconds = 1.0

    def __init__(self, config: AppConfig):
        self.config = config

    async def check(self) -> HealthCheckResult:
        summary = self.config.summary()

        if not self.config.has_storage_config:
            return HealthCheckResult.unhealthy(
                message="Azure Storage not configured",
                hint="Set RETAIL_STORAGE_CONNECTION_STRING or RETAIL_STORAGE_ACCOUNT",
                **summary,
            )

        if not self.config.has_functions_config:
            return HealthCheckResult.degraded(
                message="Azure Functions not configured, remote path unavailable",
                hint="Set RETAIL_FUNCTIONS_BASE_URL and RETAIL_FUNCTIONS_KEY",
                **summary,
            )

        return HealthCheckResult.healthy(message="All required config present", **summary)


__all__ = [
    "ProcessCheck",
    "ConfigurationCheck",
]
