# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Probe endpoints
# PURPOSE: /livez, /readyz, /health and /health/{name} for the portal
# CREATED: 18 OCT 2026
# ============================================================================
"""
Health Check Router

Mounted at the application root, next to the /api/v1 routes:

    GET /livez               200 while the process answers; no backend calls
    GET /readyz              200 when every required check passes, else 503
    GET /health              every check, plus counts per category
    GET /health/{check_name} one check; 404 for an unknown name

/health and /health/{check_name} answer 200 (healthy), 206 (degraded) or
503 (unhealthy). A degraded function app therefore shows as 206 on
/health while /readyz stays 200.
"""

from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE
from core.logging import ComponentType, get_logger
from health.core import AggregatedHealthResult, HealthStatus
from health.executor import HealthCheckExecutor
from health.registry import HealthCheckRegistry, get_registry

logger = get_logger(__name__, ComponentType.HEALTH)

health_router = APIRouter(tags=["Health"])

HTTP_CODES = {
    HealthStatus.HEALTHY: 200,
    HealthStatus.DEGRADED: 206,
    HealthStatus.UNHEALTHY: 503,
}

# /readyz is polled by the platform; keep it well under its probe timeout
READY_BUDGET_SECONDS = 10.0
HEALTH_BUDGET_SECONDS = 60.0


def _category_counts(
    registry: HealthCheckRegistry,
    result: AggregatedHealthResult,
) -> Dict[str, Dict[str, int]]:
    counts: Dict[str, Dict[str, int]] = {}
    for name, check_result in result.checks.items():
        check = registry.get(name)
        if check is None:
            continue
        bucket = counts.setdefault(
            check.category.value, {status.value: 0 for status in HealthStatus}
        )
        bucket[check_result.status.value] += 1
    return counts


@health_router.get("/livez")
async def liveness_probe():
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


@health_router.get("/readyz")
async def readiness_probe():
    """Degraded required checks still count as ready."""
    registry = get_registry()
    if not len(registry):
        return {"status": "ready", "message": "No checks registered"}

    result = await HealthCheckExecutor(
        registry, overall_timeout=READY_BUDGET_SECONDS
    ).execute_required()
    elapsed = round(result.total_duration_ms, 2)

    if result.status is HealthStatus.UNHEALTHY:
        failing = result.failing()
        logger.warning(f"Not ready, failing checks: {sorted(failing)}")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": failing, "total_duration_ms": elapsed},
        )

    return {"status": "ready", "checks_passed": len(result.checks), "total_duration_ms": elapsed}


@health_router.get("/health")
async def full_health_check():
    registry = get_registry()
    if not len(registry):
        return {"status": "healthy", "message": "No checks registered", "checks": {}}

    result = await HealthCheckExecutor(
        registry, overall_timeout=HEALTH_BUDGET_SECONDS
    ).execute_all()

    body: Dict[str, Any] = result.to_dict()
    body.update(
        version=__version__,
        build_date=BUILD_DATE,
        summary=_category_counts(registry, result),
    )
    return JSONResponse(status_code=HTTP_CODES[result.status], content=body)


@health_router.get("/health/{check_name}")
async def single_health_check(check_name: str):
    result = await HealthCheckExecutor().execute_single(check_name)
    if result is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Health check not found: {check_name}"},
        )
    return JSONResponse(status_code=HTTP_CODES[result.status], content=result.to_dict())


__all__ = ["health_router", "HTTP_CODES"]
