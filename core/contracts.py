# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Foundation - Core enums shared across layers
# PURPOSE: Resource kinds, remote operations, execution paths and outcomes
# CREATED: 18 OCT 2026
# ============================================================================
"""
Base contracts for the retail storage portal.

These enums cross boundaries:
- HTTP (FastAPI handlers, query parameters)
- Remote function calls (operation names in the URL)
- Logging (context fields)
"""

from enum import Enum


class ResourceKind(str, Enum):
    """The four backend kinds behind the storage facade."""
    RECORD = "record"      # Table storage (customer profiles)
    BLOB = "blob"          # Blob container (product images)
    QUEUE = "queue"        # Storage queue (order messages)
    FILE = "file"          # File share (contracts)


class RemoteOperation(str, Enum):
    """
    Named operations exposed by the serverless function app.

    The value is the path segment used in ``{base}/api/{operation}``.
    """
    ADD_CUSTOMER = "AddCustomer"
    UPLOAD_IMAGE = "UploadImage"
    SEND_QUEUE_MESSAGE = "SendQueueMessage"
    UPLOAD_CONTRACT = "UploadContract"


class RemoteOutcome(str, Enum):
    """
    Classification of a remote function call.

    ACCEPTED and REJECTED mean the remote answered; the other values mean
    the request never produced a usable answer.
    """
    ACCEPTED = "accepted"              # 2xx and envelope did not report failure
    REJECTED = "rejected"              # Remote answered with failure
    UNREACHABLE = "unreachable"        # Connection/transport error
    TIMEOUT = "timeout"                # Transport timed out
    NOT_CONFIGURED = "not_configured"  # Base URL or key missing, no call made

    @property
    def reached_remote(self) -> bool:
        """True if the remote endpoint produced a response."""
        return self in (RemoteOutcome.ACCEPTED, RemoteOutcome.REJECTED)


class ExecutionPath(str, Enum):
    """Strategy used by request handlers for a logical action."""
    DIRECT = "direct"    # Storage facade
    REMOTE = "remote"    # Remote function gateway


__all__ = [
    "ResourceKind",
    "RemoteOperation",
    "RemoteOutcome",
    "ExecutionPath",
]
