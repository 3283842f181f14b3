# ============================================================================
# DIAGNOSTICS API ROUTES
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - Configuration and connectivity diagnostics
# PURPOSE: Operator-facing config check and function app connection test
# CREATED: 18 OCT 2026
# ============================================================================
"""
Diagnostics API Routes

ENDPOINT SUMMARY:
-----------------
| Endpoint                   | Behavior                                  |
|----------------------------|-------------------------------------------|
| GET /diagnostics/config    | Settings present/missing, optional probes |
| GET /diagnostics/functions | Bare GET against the AddCustomer endpoint |

Neither endpoint writes anything: the function test does not submit test
customers or messages. Secrets are reported as SET/MISSING only.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from core.config import AppConfig
from core.logging import ComponentType, get_logger
from services import FunctionGateway, StorageFacade
from .schemas import RemoteCheckResponse

logger = get_logger(__name__, ComponentType.API)

router = APIRouter(prefix="/diagnostics", tags=["Diagnostics"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_config: Optional[AppConfig] = None
_facade: Optional[StorageFacade] = None
_gateway: Optional[FunctionGateway] = None


def set_diagnostics(
    config: AppConfig,
    facade: Optional[StorageFacade],
    gateway: FunctionGateway,
):
    """Set service instances for dependency injection."""
    global _config, _facade, _gateway
    _config = config
    _facade = facade
    _gateway = gateway


def _check_function_connection() -> RemoteCheckResponse:
    result = _gateway.test_connection()
    return RemoteCheckResponse(
        configured=_gateway.is_configured,
        outcome=result.outcome.value,
        status_code=result.status_code,
        message=result.message,
        details=_gateway.describe(),
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/config")
def check_configuration(
    quick: bool = Query(False, description="Only report settings; skip connection probes"),
):
    """
    Report configuration and, unless ``quick``, probe both execution paths.

    Returns one status line per item under ``checks``.
    """
    if _config is None:
        return JSONResponse(status_code=503, content={"error": "Diagnostics not initialized"})

    summary = _config.summary()
    checks: List[str] = [
        f"Storage Connection: {'SET' if _config.has_storage_config else 'MISSING'}",
        f"Functions BaseUrl: {_config.functions_base_url or 'MISSING'}",
        f"Functions Key: {'SET' if _config.functions_key else 'MISSING'}",
    ]
    body: Dict[str, Any] = {"configuration": summary, "checks": checks}

    if quick:
        return body

    remote = _check_function_connection()
    checks.append(
        f"Function Connection Test: {remote.outcome} ({remote.status_code}) {remote.message}"
    )

    if _facade is None:
        checks.append("Storage Connection Failed: storage not configured")
    else:
        stats = _facade.compute_stats()
        if stats.error:
            checks.append(f"Storage Connection Failed: {stats.error}")
        else:
            checks.append(
                f"Storage Connection: Working (Customers: {stats.customer_count}, "
                f"Images: {stats.image_count}, Contracts: {stats.contract_count}, "
                f"Queue: {stats.queue_message_count})"
            )
        body["stats"] = stats.model_dump()

    body["functions"] = remote.model_dump()
    return body


@router.get("/functions", response_model=RemoteCheckResponse)
def test_functions():
    """Function app reachability, without submitting any data."""
    if _gateway is None:
        return JSONResponse(status_code=503, content={"error": "Diagnostics not initialized"})

    response = _check_function_connection()
    logger.info(f"Function connection test: {response.outcome} ({response.status_code})")
    return response


__all__ = ["router", "set_diagnostics"]
