# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Model exports
# PURPOSE: Central export point for portal models
# CREATED: 18 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models and value types shared by the storage facade, the remote
function gateway and the HTTP handlers.
"""

from core.models.customer import CUSTOMER_PARTITION, CustomerRecord
from core.models.storage import ReadResult, LeasedMessage, DownloadedObject, StorageStats
from core.models.upload import UploadedFile, safe_filename
from core.models.remote import FunctionEnvelope, RemoteResult

__all__ = [
    # Customer
    "CUSTOMER_PARTITION",
    "CustomerRecord",
    # Storage
    "ReadResult",
    "LeasedMessage",
    "DownloadedObject",
    "StorageStats",
    # Uploads
    "UploadedFile",
    "safe_filename",
    # Remote
    "FunctionEnvelope",
    "RemoteResult",
]
