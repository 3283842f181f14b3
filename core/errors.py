# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Foundation - Typed errors shared by facade, gateway and handlers
# PURPOSE: Distinguish configuration, backend, lookup and validation faults
# CREATED: 18 OCT 2026
# ============================================================================
"""
Error Taxonomy

Every caller-facing fault in the portal is one of:

- ConfigurationMissing: a required endpoint, key or connection string is
  absent. Raised before any I/O is attempted.
- BackendUnavailable: transport or service fault talking to a storage
  backend or remote endpoint.
- NotFound: the requested record, blob or file does not exist.
- ValidationFailed: disallowed extension, oversized or empty payload.
  Raised before any I/O is attempted.

All of them carry the operation and resource they relate to so that
handlers can log and report a one-line message.
"""

from typing import Optional


class RetailStorageError(Exception):
    """Base exception for portal operations."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        resource: Optional[str] = None,
    ):
        self.operation = operation
        self.resource = resource
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationMissing(RetailStorageError):
    """Required configuration is absent."""


class BackendUnavailable(RetailStorageError):
    """A storage backend or remote endpoint could not serve the request."""


class NotFound(RetailStorageError):
    """The addressed record, blob or file does not exist."""


class ValidationFailed(RetailStorageError):
    """Input rejected before any backend call."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        self.field = field
        self.value = value
        super().__init__(message, operation=operation)


def http_status_for(exc: RetailStorageError) -> int:
    """HTTP status used by both the portal API and the function app."""
    if isinstance(exc, ValidationFailed):
        return 400
    if isinstance(exc, NotFound):
        return 404
    if isinstance(exc, ConfigurationMissing):
        return 503
    if isinstance(exc, BackendUnavailable):
        return 502
    return 500


__all__ = [
    "http_status_for",
    "RetailStorageError",
    "ConfigurationMissing",
    "BackendUnavailable",
    "NotFound",
    "ValidationFailed",
]
