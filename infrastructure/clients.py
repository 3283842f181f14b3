# ============================================================================
# STORAGE CLIENT FACTORY
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Azure Storage service clients
# PURPOSE: Lazily build table/blob/queue/file-share clients for one account
# CREATED: 18 OCT 2026
# ============================================================================
"""
Storage Client Factory

Builds the four Azure Storage service clients for one storage account.

Auth modes:
- Connection string (RETAIL_STORAGE_CONNECTION_STRING)
- Account name + DefaultAzureCredential, or ManagedIdentityCredential when
  AZURE_CLIENT_ID is set

Clients are created lazily on first use and cached for the lifetime of the
process; the Azure SDK clients are safe for concurrent reuse.
"""

import os
import threading
from typing import Any, Dict, Optional

from azure.data.tables import TableServiceClient
from azure.storage.blob import BlobServiceClient
from azure.storage.fileshare import ShareServiceClient
from azure.storage.queue import QueueServiceClient

from core.config import AppConfig
from core.errors import ConfigurationMissing
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.REPOSITORY)


class StorageClients:
    """
    Lazily-constructed Azure Storage service clients for one account.

    Usage:
        clients = StorageClients.from_config(get_config())
        table_service = clients.table_service()
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        account_name: Optional[str] = None,
    ):
        if not connection_string and not account_name:
            raise ConfigurationMissing(
                "Storage is not configured. Set RETAIL_STORAGE_CONNECTION_STRING "
                "or RETAIL_STORAGE_ACCOUNT.",
                operation="storage_clients",
            )

        self.connection_string = connection_string
        self.account_name = account_name

        self._clients: Dict[str, Any] = {}
        self._clients_lock = threading.Lock()
        self._credential = None

        logger.info(
            "StorageClients initialized "
            f"(auth={'connection_string' if connection_string else 'credential'}, "
            f"account={account_name or 'from connection string'})"
        )

    @classmethod
    def from_config(cls, config: AppConfig) -> "StorageClients":
        return cls(
            connection_string=config.storage_connection_string,
            account_name=config.storage_account_name or None,
        )

    @property
    def uses_connection_string(self) -> bool:
        return bool(self.connection_string)

    # ========================================================================
    # CREDENTIAL
    # ========================================================================

    def _get_credential(self):
        """Get Azure credential (lazy initialization)."""
        if self._credential is None:
            client_id = os.environ.get("AZURE_CLIENT_ID")
            if client_id:
                from azure.identity import ManagedIdentityCredential
                self._credential = ManagedIdentityCredential(client_id=client_id)
                logger.debug("ManagedIdentityCredential initialized with client_id")
            else:
                from azure.identity import DefaultAzureCredential
                self._credential = DefaultAzureCredential()
                logger.debug("DefaultAzureCredential initialized")
        return self._credential

    def _account_url(self, service: str) -> str:
        return f"https://{self.account_name}.{service}.core.windows.net"

    # ========================================================================
    # CLIENT CACHE
    # ========================================================================

    def _get_or_create(self, key: str, factory):
        """
        Get or create a cached service client.

        Thread-safe with double-checked locking pattern.
        """
        # Fast path: check without lock
        if key in self._clients:
            return self._clients[key]

        with self._clients_lock:
            if key in self._clients:
                return self._clients[key]

            client = factory()
            self._clients[key] = client
            logger.debug(f"Created {key} service client")
            return client

    def table_service(self) -> TableServiceClient:
        def build():
            if self.uses_connection_string:
                return TableServiceClient.from_connection_string(self.connection_string)
            return TableServiceClient(
                endpoint=self._account_url("table"),
                credential=self._get_credential(),
            )
        return self._get_or_create("table", build)

    def blob_service(self) -> BlobServiceClient:
        def build():
            if self.uses_connection_string:
                return BlobServiceClient.from_connection_string(self.connection_string)
            return BlobServiceClient(
                account_url=self._account_url("blob"),
                credential=self._get_credential(),
            )
        return self._get_or_create("blob", build)

    def queue_service(self) -> QueueServiceClient:
        def build():
            if self.uses_connection_string:
                return QueueServiceClient.from_connection_string(self.connection_string)
            return QueueServiceClient(
                account_url=self._account_url("queue"),
                credential=self._get_credential(),
            )
        return self._get_or_create("queue", build)

    def share_service(self) -> ShareServiceClient:
        def build():
            if self.uses_connection_string:
                return ShareServiceClient.from_connection_string(self.connection_string)
            # Token auth against file shares requires an explicit intent
            return ShareServiceClient(
                account_url=self._account_url("file"),
                credential=self._get_credential(),
                token_intent="backup",
            )
        return self._get_or_create("share", build)


__all__ = ["StorageClients"]
