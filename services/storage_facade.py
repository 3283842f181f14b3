# ============================================================================
# STORAGE FACADE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Service - Uniform surface over table/blob/queue/file backends
# PURPOSE: CRUD-ish operations per resource kind with one error contract
# CREATED: 18 OCT 2026
# ============================================================================
"""
Storage Facade

One entry point over the four storage backends:

    customerprofiles (table)   -> create/list/get/delete records
    product-images   (blob)    -> upload/list/download/delete blobs
    order-queue      (queue)   -> enqueue, lease/acknowledge, depth
    contracts        (share)   -> upload/list/download/delete/exists files

Each backend container is provisioned lazily (create-if-not-exists) the
first time an operation needs it.

Error contract:
    list reads     -> ReadResult, never raise (``error`` set on fault)
    scalar reads   -> queue_depth / file_exists fail soft to 0 / False
    writes         -> raise BackendUnavailable (ValidationFailed on bad input)
    point reads    -> raise NotFound / BackendUnavailable
    deletes        -> True if removed, False if already absent;
                      raise BackendUnavailable on fault
    stats          -> all-zero snapshot with ``error`` set on fault
    check backends -> raise BackendUnavailable (readiness checks)
"""

import threading
import uuid
from pathlib import PurePath
from typing import BinaryIO, Callable, Dict, List, Optional, Set

from core.config import AppConfig, QueueDefaults, ResourceNames, get_defaults
from core.contracts import ResourceKind
from core.errors import NotFound, RetailStorageError, ValidationFailed
from core.logging import ComponentType, get_logger, log_context
from core.models import (
    CustomerRecord,
    DownloadedObject,
    LeasedMessage,
    ReadResult,
    StorageStats,
    safe_filename,
)
from infrastructure import (
    BlobRepository,
    CustomerTableRepository,
    FileShareRepository,
    QueueRepository,
    StorageClients,
    blob_name_from_url,
)

logger = get_logger(__name__, ComponentType.SERVICE)


def generate_blob_name(original_name: str) -> str:
    """
    Collision-resistant blob name: ``<uuid4>_<stem><ext>``.

    Only the basename of ``original_name`` is used.
    """
    filename = safe_filename(original_name)
    if not filename:
        raise ValidationFailed("A file name is required", field="filename")
    path = PurePath(filename)
    return f"{uuid.uuid4()}_{path.stem}{path.suffix}"


class StorageFacade:
    """
    Uniform CRUD surface over the four storage backends.

    Usage:
        facade = StorageFacade.from_config(get_config())
        url = facade.upload_blob(stream, "photo.png", "image/png")
        facade.enqueue("Image uploaded: photo.png")
    """

    def __init__(
        self,
        customers: CustomerTableRepository,
        images: BlobRepository,
        queue: QueueRepository,
        contracts: FileShareRepository,
        queue_defaults: Optional[QueueDefaults] = None,
    ):
        self.customers = customers
        self.images = images
        self.queue = queue
        self.contracts = contracts
        self.queue_defaults = queue_defaults or get_defaults().queue

        self._ensured: Set[ResourceKind] = set()
        self._ensure_lock = threading.Lock()

    @classmethod
    def from_clients(
        cls,
        clients: StorageClients,
        names: Optional[ResourceNames] = None,
    ) -> "StorageFacade":
        names = names or ResourceNames()
        return cls(
            customers=CustomerTableRepository(
                clients.table_service(),
                names.customer_table,
                names.customer_partition,
            ),
            images=BlobRepository(clients.blob_service(), names.image_container),
            queue=QueueRepository(clients.queue_service(), names.order_queue),
            contracts=FileShareRepository(clients.share_service(), names.contract_share),
        )

    @classmethod
    def from_config(cls, config: AppConfig) -> "StorageFacade":
        """Build from configuration. Raises ConfigurationMissing if storage is unset."""
        return cls.from_clients(StorageClients.from_config(config))

    # ========================================================================
    # PROVISIONING
    # ========================================================================

    def _ensure(self, kind: ResourceKind, force: bool = False) -> None:
        """Create the backend container for ``kind`` once per process."""
        if kind in self._ensured and not force:
            return

        with self._ensure_lock:
            if kind in self._ensured and not force:
                return
            if kind is ResourceKind.RECORD:
                self.customers.ensure_table()
            elif kind is ResourceKind.BLOB:
                self.images.ensure_container()
            elif kind is ResourceKind.QUEUE:
                self.queue.ensure_queue()
            elif kind is ResourceKind.FILE:
                self.contracts.ensure_share()
            self._ensured.add(kind)

    def initialize_all(self) -> None:
        """Idempotently ensure all four backend containers exist."""
        with log_context(operation="initialize_all"):
            try:
                for kind in ResourceKind:
                    self._ensure(kind, force=True)
            except RetailStorageError as e:
                logger.error(f"Error initializing storage: {e}")
                raise
            logger.info("All storage components initialized")

    # ========================================================================
    # RECORDS (table)
    # ========================================================================

    def create_record(self, record: CustomerRecord) -> CustomerRecord:
        """Insert a customer row. Raises BackendUnavailable."""
        with log_context(operation="create_record", resource=self.customers.resource_name):
            try:
                self._ensure(ResourceKind.RECORD)
                return self.customers.insert(record)
            except RetailStorageError as e:
                logger.error(f"Error adding customer {record.name}: {e}")
                raise

    def create_customer(self, name: str, email: str = "", phone: str = "") -> CustomerRecord:
        """Create a record with a freshly generated row key."""
        return self.create_record(CustomerRecord.new(name, email, phone))

    def list_records(self) -> ReadResult[CustomerRecord]:
        with log_context(operation="list_records", resource=self.customers.resource_name):
            try:
                self._ensure(ResourceKind.RECORD)
                return ReadResult.success(self.customers.list_all())
            except RetailStorageError as e:
                logger.error(f"Error retrieving customers: {e}")
                return ReadResult.failure(str(e))

    def get_record(self, row_key: str) -> CustomerRecord:
        """Point lookup. Raises NotFound / BackendUnavailable."""
        with log_context(operation="get_record", resource=self.customers.resource_name):
            return self.customers.get(row_key)

    def delete_record(self, row_key: str) -> bool:
        with log_context(operation="delete_record", resource=self.customers.resource_name):
            return self.customers.delete(row_key)

    # ========================================================================
    # BLOBS (product images)
    # ========================================================================

    def upload_blob(
        self,
        stream: BinaryIO,
        original_name: str,
        content_type: Optional[str] = None,
        length: Optional[int] = None,
    ) -> str:
        """
        Upload under a generated ``<uuid>_<stem><ext>`` name.

        Returns:
            Addressable URL of the new blob
        """
        blob_name = generate_blob_name(original_name)
        with log_context(operation="upload_blob", resource=self.images.resource_name):
            logger.info(f"Starting image upload: {original_name}, size: {length} bytes")
            try:
                self._ensure(ResourceKind.BLOB)
                url = self.images.upload(blob_name, stream, content_type, length)
            except RetailStorageError as e:
                logger.error(f"Error uploading image {original_name}: {e}")
                raise
            logger.info(f"Image uploaded successfully. Blob URL: {url}")
            return url

    def list_blobs(self) -> ReadResult[str]:
        """All blob URLs; empty (not an error) if the container does not exist yet."""
        with log_context(operation="list_blobs", resource=self.images.resource_name):
            try:
                urls = self.images.list_urls()
            except RetailStorageError as e:
                logger.error(f"Error retrieving images from blob storage: {e}")
                return ReadResult.failure(str(e))
            logger.info(f"Retrieved {len(urls)} images from storage")
            return ReadResult.success(urls)

    def delete_blob(self, blob_url: str) -> bool:
        """Delete the blob named by the URL's trailing segment."""
        with log_context(operation="delete_blob", resource=self.images.resource_name):
            blob_name = blob_name_from_url(blob_url)
            if not blob_name:
                return False
            return self.images.delete(blob_name)

    def download_blob(self, blob_url: str) -> DownloadedObject:
        """Streamed download of the blob named by the URL's trailing segment."""
        with log_context(operation="download_blob", resource=self.images.resource_name):
            blob_name = blob_name_from_url(blob_url)
            if not blob_name:
                raise NotFound(
                    f"No blob name in URL '{blob_url}'",
                    operation="download_blob",
                    resource=self.images.resource_name,
                )
            return self.images.download(blob_name)

    # ========================================================================
    # QUEUE (order messages)
    # ========================================================================

    def enqueue(self, text: str) -> str:
        """Send a message. Returns the backend message id."""
        with log_context(operation="enqueue", resource=self.queue.resource_name):
            try:
                self._ensure(ResourceKind.QUEUE)
                message_id = self.queue.send(text)
            except RetailStorageError as e:
                logger.error(f"Error sending queue message: {e}")
                raise
            logger.info(f"Queue message sent: {text}")
            return message_id

    def receive_messages(
        self,
        max_messages: Optional[int] = None,
        visibility_timeout: Optional[int] = None,
    ) -> List[LeasedMessage]:
        """
        Lease up to ``max_messages`` messages without acknowledging them.

        Each lease must be passed to acknowledge() once processed; otherwise
        the message is redelivered after the visibility timeout.
        """
        with log_context(operation="receive_messages", resource=self.queue.resource_name):
            self._ensure(ResourceKind.QUEUE)
            return self.queue.receive(
                self.queue_defaults.clamp(max_messages),
                visibility_timeout or self.queue_defaults.visibility_timeout_seconds,
            )

    def acknowledge(self, lease: LeasedMessage) -> None:
        """Delete a processed message from the queue."""
        with log_context(operation="acknowledge", resource=self.queue.resource_name):
            self.queue.delete(lease)

    def dequeue_up_to(
        self,
        max_messages: Optional[int] = None,
        handler: Optional[Callable[[str], None]] = None,
    ) -> ReadResult[str]:
        """
        Receive, process, then acknowledge up to ``max_messages`` messages.

        ``handler`` runs on each decoded payload before it is acknowledged.
        A payload whose handler raises is not acknowledged and is
        redelivered after the visibility timeout.

        Returns:
            ReadResult of the processed payloads, in receive order
        """
        with log_context(operation="dequeue", resource=self.queue.resource_name):
            try:
                leases = self.receive_messages(max_messages)
            except RetailStorageError as e:
                logger.error(f"Error retrieving queue messages: {e}")
                return ReadResult.failure(str(e))

            processed: List[str] = []
            ack_errors: List[str] = []
            for lease in leases:
                if handler is not None:
                    try:
                        handler(lease.content)
                    except Exception as e:
                        logger.warning(
                            f"Handler failed for message {lease.message_id}, "
                            f"left for redelivery: {e}"
                        )
                        continue
                try:
                    self.queue.delete(lease)
                except RetailStorageError as e:
                    logger.warning(f"Acknowledge failed for message {lease.message_id}: {e}")
                    ack_errors.append(str(e))
                processed.append(lease.content)

            if ack_errors:
                return ReadResult.failure("; ".join(ack_errors), items=processed)
            return ReadResult.success(processed)

    def queue_depth(self) -> int:
        """Approximate message count; 0 on fault."""
        with log_context(operation="queue_depth", resource=self.queue.resource_name):
            try:
                self._ensure(ResourceKind.QUEUE)
                return self.queue.approximate_count()
            except RetailStorageError as e:
                logger.warning(f"Error getting queue count: {e}")
                return 0

    # ========================================================================
    # FILES (contracts)
    # ========================================================================

    def upload_file(self, stream: BinaryIO, file_name: str, length: Optional[int] = None) -> str:
        """
        Write a file at the share root under its original (base)name.

        An existing file of the same name is replaced.

        Returns:
            The stored file name
        """
        name = safe_filename(file_name)
        if not name:
            raise ValidationFailed("A file name is required", field="filename")

        with log_context(operation="upload_file", resource=self.contracts.resource_name):
            try:
                self._ensure(ResourceKind.FILE)
                if self.contracts.exists(name):
                    logger.warning(f"Contract '{name}' already exists and will be replaced")
                self.contracts.upload(name, stream, length)
            except RetailStorageError as e:
                logger.error(f"Error uploading contract {name}: {e}")
                raise
            logger.info(f"Contract uploaded: {name}")
            return name

    def list_files(self) -> ReadResult[str]:
        with log_context(operation="list_files", resource=self.contracts.resource_name):
            try:
                self._ensure(ResourceKind.FILE)
                return ReadResult.success(self.contracts.list_names())
            except RetailStorageError as e:
                logger.error(f"Error retrieving contracts: {e}")
                return ReadResult.failure(str(e))

    def download_file(self, file_name: str) -> DownloadedObject:
        """Streamed download. Raises NotFound / BackendUnavailable."""
        with log_context(operation="download_file", resource=self.contracts.resource_name):
            return self.contracts.download(safe_filename(file_name))

    def delete_file(self, file_name: str) -> bool:
        with log_context(operation="delete_file", resource=self.contracts.resource_name):
            return self.contracts.delete(safe_filename(file_name))

    def file_exists(self, file_name: str) -> bool:
        """True if the file exists; False when missing or on fault."""
        with log_context(operation="file_exists", resource=self.contracts.resource_name):
            try:
                return self.contracts.exists(safe_filename(file_name))
            except RetailStorageError as e:
                logger.warning(f"Error checking contract existence {file_name}: {e}")
                return False

    # ========================================================================
    # STATS
    # ========================================================================

    def check_backends(self) -> Dict[str, bool]:
        """
        One metadata call per backend, independent of data volume.

        Returns whether each backend container is provisioned, keyed by
        resource name. Raises BackendUnavailable when a backend does not
        answer.
        """
        with log_context(operation="check_backends"):
            return {
                self.customers.resource_name: self.customers.table_exists(),
                self.images.resource_name: self.images.container_exists(),
                self.queue.resource_name: self.queue.queue_exists(),
                self.contracts.resource_name: self.contracts.share_exists(),
            }

    def compute_stats(self) -> StorageStats:
        """
        Count entities in each backend, one after another.

        Missing backend containers count as zero. Any fault yields an
        all-zero snapshot with ``error`` set.
        """
        with log_context(operation="compute_stats"):
            try:
                return StorageStats(
                    customer_count=self.customers.count(),
                    image_count=self.images.count(),
                    queue_message_count=self.queue.approximate_count(),
                    contract_count=self.contracts.count(),
                )
            except RetailStorageError as e:
                logger.error(f"Error getting storage stats: {e}")
                return StorageStats(error=str(e))


__all__ = ["StorageFacade", "generate_blob_name"]
