# ============================================================================
# QUEUE STORAGE INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Azure Queue Storage operations
# PURPOSE: Order messages on the order-queue with lease + acknowledge
# CREATED: 18 OCT 2026
# ============================================================================
"""
Queue Storage Infrastructure

QueueRepository wraps one storage queue. Payloads are UTF-8 text encoded
as base64 on the wire.

Consumption is a two-step handshake:
    leases = repo.receive(max_messages=5, visibility_timeout=30)
    ... process ...
    repo.delete(lease)          # acknowledge

A lease that is never acknowledged becomes visible again after its
visibility timeout (at-least-once delivery).
"""

import base64
import binascii
import threading
from typing import List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.queue import QueueClient, QueueServiceClient

from core.config import ResourceNames, get_defaults
from core.errors import RetailStorageError
from core.models import LeasedMessage
from infrastructure.base_repository import BaseRepository


def encode_payload(text: str) -> str:
    """UTF-8 text -> base64 wire form."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_payload(wire: str) -> str:
    """
    base64 wire form -> UTF-8 text.

    Raises:
        ValueError: if the payload is not valid base64 UTF-8
    """
    try:
        return base64.b64decode(wire, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Undecodable queue payload: {e}") from e


class QueueRepository(BaseRepository):
    """Azure Storage queue repository."""

    resource_kind = "queue"

    def __init__(
        self,
        service_client: QueueServiceClient,
        queue_name: Optional[str] = None,
        max_dequeue_count: Optional[int] = None,
    ):
        super().__init__(queue_name or ResourceNames().order_queue)
        self.max_dequeue_count = max_dequeue_count or get_defaults().queue.max_dequeue_count
        self._service = service_client
        self._queue: Optional[QueueClient] = None
        self._queue_lock = threading.Lock()

    def _queue_client(self) -> QueueClient:
        if self._queue is None:
            with self._queue_lock:
                if self._queue is None:
                    self._queue = self._service.get_queue_client(self.resource_name)
        return self._queue

    def ensure_queue(self) -> bool:
        """Create the queue if missing. Returns True if it was created."""
        return self._create_if_missing("ensure queue", self._queue_client().create_queue)

    def send(self, text: str) -> str:
        """Send a text message. Returns the backend message id."""
        with self._error_context("send message"):
            sent = self._queue_client().send_message(encode_payload(text))
        message_id = getattr(sent, "id", None) or ""
        self._log_done("Queue message sent", message_id or "?", chars=len(text))
        return message_id

    def receive(self, max_messages: int, visibility_timeout: int) -> List[LeasedMessage]:
        """
        Receive up to ``max_messages`` under a visibility timeout.

        Messages that cannot be decoded are not returned. They stay on the
        queue and reappear after the timeout until they have been delivered
        ``max_dequeue_count`` times, then they are deleted.
        """
        leases: List[LeasedMessage] = []
        with self._error_context("receive messages"):
            received = list(
                self._queue_client().receive_messages(
                    messages_per_page=max_messages,
                    max_messages=max_messages,
                    visibility_timeout=visibility_timeout,
                )
            )

        for message in received:
            try:
                content = decode_payload(message.content)
            except ValueError as e:
                self._drop_if_poisoned(message, e)
                continue
            leases.append(
                LeasedMessage(
                    message_id=message.id,
                    pop_receipt=message.pop_receipt,
                    content=content,
                    dequeue_count=message.dequeue_count or 1,
                )
            )
        return leases

    def _drop_if_poisoned(self, message, error: ValueError) -> None:
        dequeue_count = message.dequeue_count or 1
        if dequeue_count < self.max_dequeue_count:
            self.logger.warning(
                f"Skipping message {message.id} (dequeue_count={dequeue_count}): {error}"
            )
            return

        self.logger.error(
            f"Deleting undecodable message {message.id} after {dequeue_count} deliveries: {error}"
        )
        try:
            with self._error_context("delete poison message", message.id):
                self._queue_client().delete_message(message.id, message.pop_receipt)
        except RetailStorageError as e:
            # Still leased; retried on its next delivery
            self.logger.error(f"Could not delete message {message.id}: {e}")

    def queue_exists(self) -> bool:
        """Metadata call only. Raises BackendUnavailable on fault."""
        with self._error_context("queue properties"):
            try:
                self._queue_client().get_queue_properties()
            except ResourceNotFoundError:
                return False
        return True

    def delete(self, lease: LeasedMessage) -> None:
        """Acknowledge a leased message."""
        with self._error_context("delete message", lease.message_id):
            self._queue_client().delete_message(lease.message_id, lease.pop_receipt)

    def approximate_count(self) -> int:
        """Approximate depth from queue metadata; 0 if the queue does not exist."""
        with self._error_context("queue properties"):
            try:
                properties = self._queue_client().get_queue_properties()
            except ResourceNotFoundError:
                return 0
        return properties.approximate_message_count or 0


__all__ = ["QueueRepository", "encode_payload", "decode_payload"]
