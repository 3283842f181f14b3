# ============================================================================
# BLOB STORAGE INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Azure Blob Storage operations
# PURPOSE: Product image blobs in the product-images container
# CREATED: 18 OCT 2026
# ============================================================================
"""
Blob Storage Infrastructure

BlobRepository wraps one blob container:
- upload: stream upload with content type, returns the blob URL
- list_names / list_urls: enumerate blobs (empty if the container is missing)
- download: streamed download
- delete: returns False if the blob was already gone

Blobs are addressed by name; URLs are resolved back to names with
blob_name_from_url.
"""

import threading
from pathlib import Path
from typing import BinaryIO, List, Optional
from urllib.parse import unquote, urlparse

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from core.config import ResourceNames
from core.errors import NotFound
from core.models import DownloadedObject
from infrastructure.base_repository import BaseRepository


def blob_name_from_url(blob_url: str) -> str:
    """
    Trailing path segment of a blob URL, URL-decoded.

    Query strings (SAS tokens) are ignored. A bare name is returned as-is.
    """
    path = urlparse(blob_url).path if "://" in blob_url else blob_url
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])


class BlobRepository(BaseRepository):
    """
    Azure Blob Storage repository for one container.

    Usage:
        repo = BlobRepository(clients.blob_service(), "product-images")
        url = repo.upload("abc_photo.png", stream, "image/png")
    """

    resource_kind = "blob container"

    def __init__(self, service_client: BlobServiceClient, container: Optional[str] = None):
        super().__init__(container or ResourceNames().image_container)
        self._service = service_client
        self._container_client: Optional[ContainerClient] = None
        self._container_lock = threading.Lock()

    def _get_container_client(self) -> ContainerClient:
        """
        Get cached container client.

        Thread-safe with double-checked locking pattern.
        """
        if self._container_client is not None:
            return self._container_client

        with self._container_lock:
            if self._container_client is None:
                self._container_client = self._service.get_container_client(self.resource_name)
                self.logger.debug(f"Created container client for: {self.resource_name}")
            return self._container_client

    # ========================================================================
    # CONTAINER
    # ========================================================================

    def ensure_container(self) -> bool:
        """Create the container if missing. Returns True if it was created."""
        return self._create_if_missing(
            "ensure container",
            self._get_container_client().create_container,
        )

    def container_exists(self) -> bool:
        """Metadata call only. Raises BackendUnavailable on fault."""
        with self._error_context("check container"):
            return self._get_container_client().exists()

    # ========================================================================
    # BLOB OPERATIONS
    # ========================================================================

    def blob_url(self, blob_name: str) -> str:
        """Addressable URL of a blob (no network call)."""
        return self._get_container_client().get_blob_client(blob_name).url

    def upload(
        self,
        blob_name: str,
        stream: BinaryIO,
        content_type: Optional[str] = None,
        length: Optional[int] = None,
    ) -> str:
        """
        Stream upload, overwriting any blob of the same name.

        Returns:
            Addressable URL of the blob
        """
        if not content_type or content_type == "application/octet-stream":
            content_type = self._detect_content_type(blob_name)

        self.logger.info(f"Creating blob: {blob_name} ({content_type}, {length} bytes)")

        with self._error_context("upload blob", blob_name):
            blob_client = self._get_container_client().get_blob_client(blob_name)
            blob_client.upload_blob(
                stream,
                overwrite=True,
                length=length,
                content_settings=ContentSettings(content_type=content_type),
            )
            url = self.blob_url(blob_name)

        self._log_done("Uploaded blob", blob_name, url=url)
        return url

    def list_names(self) -> List[str]:
        """Blob names in backend order; empty if the container does not exist."""
        with self._error_context("list blobs"):
            try:
                return [blob.name for blob in self._get_container_client().list_blobs()]
            except ResourceNotFoundError:
                self.logger.info(f"Container '{self.resource_name}' does not exist yet")
                return []

    def list_urls(self) -> List[str]:
        return [self.blob_url(name) for name in self.list_names()]

    def count(self) -> int:
        return len(self.list_names())

    def download(self, blob_name: str) -> DownloadedObject:
        """Streamed download. Raises NotFound if the blob does not exist."""
        with self._error_context("download blob", blob_name):
            downloader = self._get_container_client().get_blob_client(blob_name).download_blob()

        content_settings = getattr(downloader.properties, "content_settings", None)
        content_type = getattr(content_settings, "content_type", None)
        return DownloadedObject(
            name=blob_name,
            chunks=downloader.chunks,
            size=downloader.size,
            content_type=content_type or self._detect_content_type(blob_name),
        )

    def delete(self, blob_name: str) -> bool:
        """Delete a blob. Returns True if deleted, False if not found."""
        try:
            with self._error_context("delete blob", blob_name):
                self._get_container_client().delete_blob(blob_name)
        except NotFound:
            return False
        self._log_done("Deleted blob", blob_name)
        return True

    # ========================================================================
    # UTILITY METHODS
    # ========================================================================

    def _detect_content_type(self, path: str) -> str:
        """Auto-detect content type from file extension."""
        ext = Path(path).suffix.lower()
        content_types = {
            ".jpg": "image/jpeg",
            ".jpeg": "image/jpeg",
            ".png": "image/png",
            ".gif": "image/gif",
            ".bmp": "image/bmp",
            ".webp": "image/webp",
        }
        return content_types.get(ext, "application/octet-stream")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "BlobRepository",
    "blob_name_from_url",
]
