# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Azure Storage repositories
# PURPOSE: Table, blob, queue and file share access
# CREATED: 18 OCT 2026
# ============================================================================
"""
Infrastructure module for the retail storage portal.

Provides:
- StorageClients: lazily-built Azure Storage service clients
- CustomerTableRepository: customer profile rows
- BlobRepository: product image blobs
- QueueRepository: order messages
- FileShareRepository: contract documents

Usage:
    from infrastructure import StorageClients, BlobRepository

    clients = StorageClients.from_config(get_config())
    images = BlobRepository(clients.blob_service(), "product-images")
    url = images.upload("abc_photo.png", stream, "image/png")
"""

from infrastructure.base_repository import BaseRepository
from infrastructure.clients import StorageClients
from infrastructure.table_storage import CustomerTableRepository
from infrastructure.storage import BlobRepository, blob_name_from_url
from infrastructure.queue_storage import QueueRepository, encode_payload, decode_payload
from infrastructure.file_share import FileShareRepository

__all__ = [
    "BaseRepository",
    "StorageClients",
    "CustomerTableRepository",
    "BlobRepository",
    "blob_name_from_url",
    "QueueRepository",
    "encode_payload",
    "decode_payload",
    "FileShareRepository",
]
