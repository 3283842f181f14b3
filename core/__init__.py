# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core module initialization
# PURPOSE: Export core contracts, errors and models
# CREATED: 18 OCT 2026
# ============================================================================

from core.contracts import ResourceKind, RemoteOperation, RemoteOutcome, ExecutionPath
from core.errors import (
    RetailStorageError,
    ConfigurationMissing,
    BackendUnavailable,
    NotFound,
    ValidationFailed,
    http_status_for,
)
from core.models import (
    CustomerRecord,
    ReadResult,
    LeasedMessage,
    DownloadedObject,
    StorageStats,
    UploadedFile,
    FunctionEnvelope,
    RemoteResult,
)

__all__ = [
    # Enums
    "ResourceKind",
    "RemoteOperation",
    "RemoteOutcome",
    "ExecutionPath",
    # Errors
    "RetailStorageError",
    "ConfigurationMissing",
    "BackendUnavailable",
    "NotFound",
    "ValidationFailed",
    "http_status_for",
    # Models
    "CustomerRecord",
    "ReadResult",
    "LeasedMessage",
    "DownloadedObject",
    "StorageStats",
    "UploadedFile",
    "FunctionEnvelope",
    "RemoteResult",
]
