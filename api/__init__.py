# ============================================================================
# API MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for the retail storage portal
# CREATED: 18 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for the retail storage portal.
"""

from .routes import router, set_services, retail_error_handler
from .diagnostics_routes import router as diagnostics_router, set_diagnostics
from .schemas import (
    ActionResponse,
    CustomerCreate,
    MessageCreate,
    ErrorResponse,
)

__all__ = [
    "router",
    "set_services",
    "retail_error_handler",
    "diagnostics_router",
    "set_diagnostics",
    "ActionResponse",
    "CustomerCreate",
    "MessageCreate",
    "ErrorResponse",
]
