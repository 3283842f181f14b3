# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - Business logic layer
# PURPOSE: Storage facade, remote gateway and action strategies
# CREATED: 18 OCT 2026
# ============================================================================
"""
Services Module

Business logic for the retail storage portal. Services coordinate between
repositories (direct path) and the remote function app (remote path).

Usage:
    from services import StorageFacade, DirectRetailOperations

    facade = StorageFacade.from_config(get_config())
    outcome = DirectRetailOperations(facade).send_message("hello")
"""

from .storage_facade import StorageFacade, generate_blob_name
from .function_gateway import FunctionGateway
from .retail_operations import (
    ActionOutcome,
    RetailOperations,
    DirectRetailOperations,
    RemoteRetailOperations,
    OperationsSelector,
)

__all__ = [
    "StorageFacade",
    "generate_blob_name",
    "FunctionGateway",
    "ActionOutcome",
    "RetailOperations",
    "DirectRetailOperations",
    "RemoteRetailOperations",
    "OperationsSelector",
]
