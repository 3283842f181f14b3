# ============================================================================
# BASE REPOSITORY - SDK ERROR TRANSLATION
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Shared repository behaviour
# PURPOSE: Map Azure SDK faults onto portal errors, one log format
# CREATED: 18 OCT 2026
# ============================================================================
"""
Base Repository

Every storage repository (table, blob container, queue, file share) owns
exactly one Azure resource, named by ``resource_name``. SDK calls run
inside ``_error_context`` so callers only ever see portal errors:

    ResourceNotFoundError -> NotFound
    RetailStorageError    -> unchanged
    anything else         -> BackendUnavailable

Log lines written inside an error context carry the resource name as
``resource`` in the logging context.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError

from core.errors import BackendUnavailable, NotFound, RetailStorageError
from core.logging import ComponentType, get_logger, log_context

# Row keys and blob names can be long; keep log lines readable
MAX_LOGGED_ID = 48


def _short(entity_id: str) -> str:
    if len(entity_id) <= MAX_LOGGED_ID:
        return entity_id
    return entity_id[:MAX_LOGGED_ID] + "..."


class BaseRepository(ABC):
    """Shared error translation and logging for one Azure Storage resource."""

    resource_kind: str = "storage"

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        self.logger = get_logger(
            f"{__name__}.{type(self).__name__}", ComponentType.REPOSITORY
        )

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None) -> Iterator[None]:
        """
        Run SDK calls for ``operation`` with portal error translation.

        Example:
            with self._error_context("insert customer", record.row_key):
                table.create_entity(entity=record.to_entity())
        """
        with log_context(resource=self.resource_name):
            try:
                yield
            except RetailStorageError:
                raise
            except ResourceNotFoundError as e:
                target = entity_id or self.resource_name
                self.logger.info(f"{operation}: '{_short(target)}' not found")
                raise NotFound(
                    f"{self.resource_kind} '{target}' not found",
                    operation=operation,
                    resource=self.resource_name,
                ) from e
            except Exception as e:
                subject = f" for {_short(entity_id)}" if entity_id else ""
                message = f"{operation} failed{subject}: {e}"
                self.logger.error(message, extra={"error_type": type(e).__name__})
                raise BackendUnavailable(
                    message,
                    operation=operation,
                    resource=self.resource_name,
                ) from e

    def _create_if_missing(self, operation: str, create: Callable[[], object]) -> bool:
        """
        Provision the resource. True if created now, False if it already existed.
        """
        with self._error_context(operation):
            try:
                create()
            except ResourceExistsError:
                self.logger.debug(f"{self.resource_kind} '{self.resource_name}' already exists")
                return False
        self.logger.info(f"Created {self.resource_kind} '{self.resource_name}'")
        return True

    def _log_done(self, action: str, entity_id: str, **details) -> None:
        """``<action>: <id>`` at INFO, with ``details`` as structured fields."""
        with log_context(resource=self.resource_name):
            self.logger.info(f"{action}: {_short(entity_id)}", extra=details)


__all__ = ["BaseRepository", "MAX_LOGGED_ID"]
