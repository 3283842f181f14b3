# ============================================================================
# RETAIL OPERATIONS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Service - Direct and remote strategies for the four user actions
# PURPOSE: One capability interface, two interchangeable execution paths
# CREATED: 18 OCT 2026
# ============================================================================
"""
Retail Operations

The four user-facing actions (register customer, upload image, send
message, upload contract) can run either against the storage facade
(DIRECT) or through the remote function app (REMOTE). Both strategies
share one template:

    validate  ->  perform (path-specific)  ->  notify order queue

Design:
  - RetailOperations ABC owns validation and notification; subclasses only
    implement the path-specific ``_perform_*`` hooks and ``_notify``.
  - Validation runs before any backend or network call.
  - A failed notification is logged and reported as ``notified=False``;
    it never turns a successful action into a failure.
  - OperationsSelector picks a strategy per request, falling back to
    DIRECT when REMOTE is requested but the gateway is not configured.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from core.contracts import ExecutionPath
from core.errors import ConfigurationMissing, RetailStorageError
from core.logging import ComponentType, get_logger, log_context
from core.models import RemoteResult, UploadedFile
from services.function_gateway import FunctionGateway
from services.storage_facade import StorageFacade
from services.validation import (
    validate_contract,
    validate_customer_name,
    validate_image,
    validate_message,
)

logger = get_logger(__name__, ComponentType.SERVICE)


# ============================================================================
# RESULT
# ============================================================================

@dataclass
class ActionOutcome:
    """
    Result of one user action.

    ``notified`` is None when the action does not notify (sending a queue
    message is itself the notification).
    """
    success: bool
    message: str
    url: Optional[str] = None
    notified: Optional[bool] = None
    path: Optional[ExecutionPath] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "url": self.url,
            "notified": self.notified,
            "path": self.path.value if self.path else None,
        }


# ============================================================================
# BASE STRATEGY
# ============================================================================

class RetailOperations(ABC):
    """Template for the four user actions; subclasses supply the path."""

    path: ClassVar[ExecutionPath]

    # ------------------------------------------------------------------
    # PUBLIC ACTIONS
    # ------------------------------------------------------------------

    def register_customer(self, name: str, email: str = "", phone: str = "") -> ActionOutcome:
        name = validate_customer_name(name)
        with log_context(operation="register_customer", path=self.path.value):
            logger.info(f"Starting AddCustomer for: {name}")
            outcome = self._perform_register_customer(name, email or "", phone or "")
            return self._finish(outcome, f"New customer registered: {name}")

    def upload_image(self, upload: Optional[UploadedFile]) -> ActionOutcome:
        upload = validate_image(upload)
        with log_context(operation="upload_image", path=self.path.value):
            logger.info(f"Starting UploadImage for: {upload.filename}")
            outcome = self._perform_upload_image(upload)
            return self._finish(outcome, f"Image uploaded: {upload.filename}")

    def send_message(self, message: str) -> ActionOutcome:
        message = validate_message(message)
        with log_context(operation="send_message", path=self.path.value):
            logger.info(f"Starting SendMessage with: {message}")
            return self._perform_send_message(message)

    def upload_contract(self, upload: Optional[UploadedFile]) -> ActionOutcome:
        upload = validate_contract(upload)
        with log_context(operation="upload_contract", path=self.path.value):
            logger.info(f"Starting UploadContract for: {upload.filename}")
            outcome = self._perform_upload_contract(upload)
            return self._finish(outcome, f"Contract uploaded: {upload.filename}")

    def _finish(self, outcome: ActionOutcome, notification: str) -> ActionOutcome:
        """Mirror a successful mutation to the order queue."""
        if outcome.success:
            outcome.notified = self._notify(notification)
            if not outcome.notified:
                logger.warning(f"Action succeeded but notification failed: {notification}")
        else:
            logger.warning(f"Action failed: {outcome.message}")
        return outcome

    # ------------------------------------------------------------------
    # PATH-SPECIFIC HOOKS
    # ------------------------------------------------------------------

    @abstractmethod
    def _perform_register_customer(self, name: str, email: str, phone: str) -> ActionOutcome:
        ...

    @abstractmethod
    def _perform_upload_image(self, upload: UploadedFile) -> ActionOutcome:
        ...

    @abstractmethod
    def _perform_send_message(self, message: str) -> ActionOutcome:
        ...

    @abstractmethod
    def _perform_upload_contract(self, upload: UploadedFile) -> ActionOutcome:
        ...

    @abstractmethod
    def _notify(self, text: str) -> bool:
        """Post a notification to the order queue. Returns False on failure."""


# ============================================================================
# DIRECT (storage facade)
# ============================================================================

class DirectRetailOperations(RetailOperations):
    """
    Runs actions in-process against the storage facade.

    Backend faults propagate as RetailStorageError subclasses.
    """

    path = ExecutionPath.DIRECT

    def __init__(self, facade: StorageFacade):
        self.facade = facade

    def _perform_register_customer(self, name: str, email: str, phone: str) -> ActionOutcome:
        record = self.facade.create_customer(name, email, phone)
        return ActionOutcome(
            success=True,
            message=f"Customer {record.name} added successfully",
            path=self.path,
        )

    def _perform_upload_image(self, upload: UploadedFile) -> ActionOutcome:
        upload.rewind()
        url = self.facade.upload_blob(
            upload.stream, upload.filename, upload.content_type, upload.size
        )
        return ActionOutcome(
            success=True,
            message=f"Image '{upload.filename}' uploaded successfully to Azure Storage!",
            url=url,
            path=self.path,
        )

    def _perform_send_message(self, message: str) -> ActionOutcome:
        self.facade.enqueue(message)
        return ActionOutcome(success=True, message="Message sent to queue", path=self.path)

    def _perform_upload_contract(self, upload: UploadedFile) -> ActionOutcome:
        upload.rewind()
        name = self.facade.upload_file(upload.stream, upload.filename, upload.size)
        return ActionOutcome(
            success=True,
            message=f"Contract '{name}' uploaded successfully",
            path=self.path,
        )

    def _notify(self, text: str) -> bool:
        try:
            self.facade.enqueue(text)
        except RetailStorageError as e:
            logger.warning(f"Notification not sent: {e}")
            return False
        return True


# ============================================================================
# REMOTE (function gateway)
# ============================================================================

class RemoteRetailOperations(RetailOperations):
    """
    Runs actions through the remote function app.

    Remote failures become unsuccessful outcomes carrying the remote's
    message; nothing is raised past validation.
    """

    path = ExecutionPath.REMOTE

    def __init__(self, gateway: FunctionGateway):
        self.gateway = gateway

    def _outcome(self, result: RemoteResult, fallback: str) -> ActionOutcome:
        return ActionOutcome(
            success=result.success,
            message=result.message or fallback,
            url=result.url,
            path=self.path,
        )

    def _perform_register_customer(self, name: str, email: str, phone: str) -> ActionOutcome:
        return self._outcome(
            self.gateway.add_customer(name, email, phone), "Failed to add customer"
        )

    def _perform_upload_image(self, upload: UploadedFile) -> ActionOutcome:
        return self._outcome(self.gateway.upload_image(upload), "Failed to upload image")

    def _perform_send_message(self, message: str) -> ActionOutcome:
        return self._outcome(
            self.gateway.send_queue_message(message), "Failed to send message"
        )

    def _perform_upload_contract(self, upload: UploadedFile) -> ActionOutcome:
        return self._outcome(
            self.gateway.upload_contract(upload), "Failed to upload contract"
        )

    def _notify(self, text: str) -> bool:
        return self.gateway.send_queue_message(text).success


# ============================================================================
# SELECTION
# ============================================================================

class OperationsSelector:
    """
    Picks the strategy for a request.

    Either strategy may be absent when its configuration is missing.
    """

    def __init__(
        self,
        direct: Optional[DirectRetailOperations],
        remote: Optional[RemoteRetailOperations],
        default_path: ExecutionPath = ExecutionPath.REMOTE,
    ):
        self.direct = direct
        self.remote = remote
        self.default_path = default_path

    @property
    def remote_available(self) -> bool:
        return self.remote is not None and self.remote.gateway.is_configured

    def select(self, requested: Union[ExecutionPath, str, None] = None) -> RetailOperations:
        """
        Resolve a requested path to a strategy.

        REMOTE falls back to DIRECT when the gateway is not configured.

        Raises:
            ConfigurationMissing: no usable strategy
            ValueError: unknown path name
        """
        path = ExecutionPath(requested) if requested else self.default_path

        if path is ExecutionPath.REMOTE:
            if self.remote_available:
                return self.remote
            if self.direct is not None:
                logger.warning("Remote functions not configured, falling back to direct path")
                return self.direct
        elif self.direct is not None:
            return self.direct

        raise ConfigurationMissing(
            f"No configured execution path for '{path.value}'",
            operation="select_path",
        )


__all__ = [
    "ActionOutcome",
    "RetailOperations",
    "DirectRetailOperations",
    "RemoteRetailOperations",
    "OperationsSelector",
]
