# ============================================================================
# FILE SHARE INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Azure Files operations
# PURPOSE: Contract documents at the root of the contracts share
# CREATED: 18 OCT 2026
# ============================================================================
"""
File Share Infrastructure

FileShareRepository wraps one Azure file share and works on its root
directory only (flat namespace). Files are addressed by name.
"""

import threading
from typing import BinaryIO, List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.fileshare import ShareClient, ShareServiceClient

from core.config import ResourceNames
from core.errors import NotFound
from core.models import DownloadedObject
from infrastructure.base_repository import BaseRepository


class FileShareRepository(BaseRepository):
    """Flat file store on the root of an Azure file share."""

    resource_kind = "file share"

    def __init__(self, service_client: ShareServiceClient, share_name: Optional[str] = None):
        super().__init__(share_name or ResourceNames().contract_share)
        self._service = service_client
        self._share: Optional[ShareClient] = None
        self._share_lock = threading.Lock()

    def _share_client(self) -> ShareClient:
        if self._share is None:
            with self._share_lock:
                if self._share is None:
                    self._share = self._service.get_share_client(self.resource_name)
        return self._share

    def ensure_share(self) -> bool:
        """Create the share if missing. Returns True if it was created."""
        return self._create_if_missing("ensure share", self._share_client().create_share)

    def share_exists(self) -> bool:
        """Metadata call only. Raises BackendUnavailable on fault."""
        with self._error_context("share properties"):
            try:
                self._share_client().get_share_properties()
            except ResourceNotFoundError:
                return False
        return True

    def upload(self, file_name: str, stream: BinaryIO, length: Optional[int] = None) -> str:
        """Create (or replace) a file at the share root."""
        with self._error_context("upload file", file_name):
            self._share_client().get_file_client(file_name).upload_file(stream, length=length)
        self._log_done("Uploaded file", file_name, bytes=length)
        return file_name

    def exists(self, file_name: str) -> bool:
        """True if the file exists. Raises BackendUnavailable on fault."""
        try:
            with self._error_context("file properties", file_name):
                self._share_client().get_file_client(file_name).get_file_properties()
        except NotFound:
            return False
        return True

    def list_names(self) -> List[str]:
        """File names at the share root; empty if the share does not exist."""
        with self._error_context("list files"):
            try:
                items = list(self._share_client().get_directory_client().list_directories_and_files())
            except ResourceNotFoundError:
                self.logger.info(f"Share '{self.resource_name}' does not exist yet")
                return []
        return [item["name"] for item in items if not item["is_directory"]]

    def count(self) -> int:
        return len(self.list_names())

    def download(self, file_name: str) -> DownloadedObject:
        """Streamed download. Raises NotFound if the file does not exist."""
        with self._error_context("download file", file_name):
            downloader = self._share_client().get_file_client(file_name).download_file()

        return DownloadedObject(
            name=file_name,
            chunks=downloader.chunks,
            size=downloader.size,
        )

    def delete(self, file_name: str) -> bool:
        """Delete a file. Returns True if deleted, False if not found."""
        try:
            with self._error_context("delete file", file_name):
                self._share_client().get_file_client(file_name).delete_file()
        except NotFound:
            return False
        self._log_done("Deleted file", file_name)
        return True


__all__ = ["FileShareRepository"]
