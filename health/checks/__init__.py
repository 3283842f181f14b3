# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Health check implementations
# PURPOSE: Specific health checks for portal components
# CREATED: 18 OCT 2026
# ============================================================================
"""
Health Check Plugins

Startup Checks (priority 10):
- process: Basic process health (self-registered)
- configuration: Storage and function app settings present

Storage Checks (priority 20):
- storage: All four backends answer

Remote Checks (priority 40):
- function_app: Function app reachable (not required for /readyz)

Checks with dependencies are added at startup:
    register_portal_checks(config, facade, gateway)
"""

from typing import Optional

from core.config import AppConfig
from health.registry import HealthCheckRegistry, get_registry
from health.checks.startup import ProcessCheck, ConfigurationCheck
from health.checks.storage import StorageCheck
from health.checks.remote import FunctionAppCheck


def register_portal_checks(
    config: AppConfig,
    facade,
    gateway,
    registry: Optional[HealthCheckRegistry] = None,
) -> HealthCheckRegistry:
    """Register the checks that need the portal's services."""
    if registry is None:
        registry = get_registry()
    registry.register(ConfigurationCheck(config))
    registry.register(StorageCheck(facade))
    registry.register(FunctionAppCheck(gateway))
    return registry


__all__ = [
    "ProcessCheck",
    "ConfigurationCheck",
    "StorageCheck",
    "FunctionAppCheck",
    "register_portal_checks",
]
