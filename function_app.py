# ============================================================================
# RETAIL STORAGE - Azure Function App
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Function app - Remote execution path for the portal
# PURPOSE: Serve AddCustomer/UploadImage/SendQueueMessage/UploadContract
# CREATED: 18 OCT 2026
# ============================================================================
"""
Retail Storage Function App

Azure Functions V2 entry point. The portal's remote path (FunctionGateway)
calls these endpoints with a function key; each one performs the action
against Azure Storage through the same StorageFacade the portal's direct
path uses.

Endpoints:
- /api/livez - Liveness probe (anonymous, always available)
- /api/readyz - Readiness probe (anonymous, startup validation state)
- /api/AddCustomer, /api/UploadImage, /api/SendQueueMessage,
  /api/UploadContract - function-level auth
"""

import json
import os

import azure.functions as func

from core.logging import ComponentType, configure_logging, get_logger

# ============================================================================
# CREATE APP FIRST (before any imports that might fail)
# ============================================================================

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__, ComponentType.FUNCTION)
logger.info("Retail Storage Function App Starting")

# ============================================================================
# EARLY PROBES (Before validation - always available)
# ============================================================================


def _json_response(data: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(data, default=str),
        status_code=status_code,
        headers={"Content-Type": "application/json"},
    )


@app.route(route="livez", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def liveness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """GET /api/livez - 200 whenever the worker process answers."""
    return _json_response({"alive": True, "service": "retail-storage-functions"})


@app.route(route="readyz", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def readiness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """GET /api/readyz - 200 if startup validation passed, else 503."""
    from function.startup import STARTUP_STATE

    if STARTUP_STATE.all_passed:
        return _json_response({"ready": True, "service": "retail-storage-functions"})

    return _json_response(
        {
            "ready": False,
            "service": "retail-storage-functions",
            "failed_checks": STARTUP_STATE.failed_check_names(),
            "details": STARTUP_STATE.to_dict(),
        },
        status_code=503,
    )


# ============================================================================
# STARTUP VALIDATION
# ============================================================================
# If validation fails, only /livez and /readyz are available.

from function.startup import validate_startup, STARTUP_STATE

validate_startup()

if STARTUP_STATE.all_passed:
    from function.blueprints.retail_bp import retail_bp

    app.register_functions(retail_bp)
    logger.info("Registered: retail_bp (AddCustomer, UploadImage, SendQueueMessage, UploadContract)")
else:
    logger.error("STARTUP VALIDATION FAILED - only /api/livez and /api/readyz available")
    for check in STARTUP_STATE.failed_checks():
        logger.error(f"  FAILED: {check.name} - {check.error_message}")


__all__ = ["app"]
