# ============================================================================
# RETAIL STORAGE PORTAL - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - FastAPI application entry point
# PURPOSE: Portal API over Azure Storage and the retail function app
# CREATED: 18 OCT 2026
# ============================================================================
"""
Retail Storage Portal Main Application

FastAPI application that:
1. Provides the HTTP API for customers, images, contracts and messages
2. Runs each action directly against Azure Storage or through the
   retail function app
3. Exposes health probes and configuration diagnostics

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, EPOCH
from core.config import AppConfig, get_config
from core.errors import ConfigurationMissing, RetailStorageError
from services import (
    DirectRetailOperations,
    FunctionGateway,
    OperationsSelector,
    RemoteRetailOperations,
    StorageFacade,
)
from api import (
    router,
    set_services,
    retail_error_handler,
    diagnostics_router,
    set_diagnostics,
)

# Probes
from health import health_router, get_registry
from health.checks import register_portal_checks

# Logging before anything else writes a line
from core.logging import configure_logging, get_logger, log_context, new_request_id

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


@dataclass
class PortalServices:
    """Services wired at startup; ``facade`` is None without storage config."""
    config: AppConfig
    facade: Optional[StorageFacade]
    gateway: FunctionGateway
    selector: OperationsSelector


def build_services(config: AppConfig) -> PortalServices:
    """Create the facade, gateway and strategy selector from configuration."""
    facade = None
    try:
        facade = StorageFacade.from_config(config)
        logger.info("Storage facade initialized")
    except ConfigurationMissing as e:
        logger.warning(f"Direct path unavailable: {e}")

    gateway = FunctionGateway.from_config(config)
    if not gateway.is_configured:
        logger.warning("Remote path unavailable: Azure Functions configuration missing")

    selector = OperationsSelector(
        direct=DirectRetailOperations(facade) if facade is not None else None,
        remote=RemoteRetailOperations(gateway),
        default_path=config.default_path,
    )
    return PortalServices(config=config, facade=facade, gateway=gateway, selector=selector)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Wires services into the routers and registers health checks.
    """
    logger.info(f"Starting Retail Storage Portal v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    config = get_config()
    services = build_services(config)

    # Optional: provision storage on startup (for development)
    if services.facade is not None and os.environ.get("AUTO_INITIALIZE_STORAGE", "").lower() == "true":
        logger.info("Auto-initialize enabled, provisioning storage...")
        try:
            services.facade.initialize_all()
        except RetailStorageError as e:
            logger.warning(f"Storage initialization failed: {e}")

    set_services(services.facade, services.selector)
    set_diagnostics(config, services.facade, services.gateway)

    register_portal_checks(config, services.facade, services.gateway)
    logger.info(f"Health checks initialized ({len(get_registry())} checks registered)")

    app.state.services = services

    yield

    logger.info("Retail Storage Portal stopped")


# Application
app = FastAPI(
    title="Retail Storage Portal",
    description="Customer profiles, product images, contracts and order messages on Azure Storage",
    version=__version__,
    lifespan=lifespan,
)

# Browser clients of the portal UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request id on every log line written while serving the request
@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or new_request_id()
    with log_context(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Portal errors -> one-line JSON failure bodies
app.add_exception_handler(RetailStorageError, retail_error_handler)

# /livez, /readyz, /health at the root
app.include_router(health_router)

# Portal API
app.include_router(router, prefix="/api/v1")

# Configuration and connectivity diagnostics
app.include_router(diagnostics_router, prefix="/api/v1")


# Service banner
@app.get("/")
async def root():
    """Service name, build and docs location."""
    return {
        "service": "Retail Storage Portal",
        "version": __version__,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
