# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Health check plugin system
# PURPOSE: Liveness/readiness probes and health monitoring
# CREATED: 18 OCT 2026
# ============================================================================
"""
Health Check Module

Plugin-based health checks for the retail storage portal:
- /livez: Process alive (instant)
- /readyz: Ready to accept work (required checks pass)
- /health: Comprehensive status (all plugins)

Usage:
    from health import health_router
    from health.checks import register_portal_checks

    register_portal_checks(config, facade, gateway)
    app.include_router(health_router)
"""

from health.core import (
    HealthStatus,
    HealthCheckResult,
    HealthCheckPlugin,
    HealthCheckCategory,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    get_registry,
)
from health.executor import HealthCheckExecutor
from health.router import health_router

__all__ = [
    # Core types
    "HealthStatus",
    "HealthCheckResult",
    "HealthCheckPlugin",
    "HealthCheckCategory",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "get_registry",
    # Executor
    "HealthCheckExecutor",
    # Router
    "health_router",
]
