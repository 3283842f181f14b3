# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - Default configuration values
# PURPOSE: Backend resource names, upload rules and queue settings
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Backend resource names are fixed and not configurable. Upload rules and
queue settings are immutable dataclasses; the queue settings can be
overridden via environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Optional, Tuple


MB = 1024 * 1024


@dataclass(frozen=True)
class ResourceNames:
    """Names of the four backend containers."""
    customer_table: str = "customerprofiles"
    image_container: str = "product-images"
    order_queue: str = "order-queue"
    contract_share: str = "contracts"

    # Partition holding every customer row
    customer_partition: str = "Customer"


@dataclass(frozen=True)
class UploadRule:
    """
    Allowed extensions and size ceiling for one upload flow.

    Extensions are compared case-insensitively and include the dot.
    """
    label: str
    allowed_extensions: Tuple[str, ...]
    max_size_bytes: int
    type_hint: str = ""

    @property
    def max_size_mb(self) -> int:
        return self.max_size_bytes // MB

    def extension_of(self, filename: str) -> str:
        """Lower-cased extension (with dot) of a filename, '' if none."""
        return PurePath(filename or "").suffix.lower()

    def allows_extension(self, filename: str) -> bool:
        return self.extension_of(filename) in self.allowed_extensions


IMAGE_UPLOAD_RULE = UploadRule(
    label="image",
    allowed_extensions=(".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"),
    max_size_bytes=10 * MB,
    type_hint="JPG, PNG, GIF, BMP, or WebP images",
)

CONTRACT_UPLOAD_RULE = UploadRule(
    label="contract",
    allowed_extensions=(".pdf", ".doc", ".docx", ".txt", ".xlsx", ".xls", ".ppt", ".pptx"),
    max_size_bytes=100 * MB,
    type_hint="PDF, Word, Excel, PowerPoint, or Text files",
)


@dataclass(frozen=True)
class QueueDefaults:
    """
    Defaults for order queue consumption.

    A received message stays invisible for ``visibility_timeout_seconds``;
    if it is not acknowledged within that window it is delivered again.
    """
    visibility_timeout_seconds: int = 30
    max_messages: int = 10
    max_messages_ceiling: int = 32  # Azure Storage queue receive limit
    # Undecodable messages are deleted once delivered this many times
    max_dequeue_count: int = 5

    def clamp(self, requested: Optional[int]) -> int:
        """Clamp a requested batch size into 1..ceiling."""
        if requested is None:
            return self.max_messages
        return max(1, min(int(requested), self.max_messages_ceiling))

    @classmethod
    def from_env(cls) -> "QueueDefaults":
        """Create from environment variables."""
        return cls(
            visibility_timeout_seconds=int(os.getenv("RETAIL_QUEUE_VISIBILITY_TIMEOUT", 30)),
            max_messages=int(os.getenv("RETAIL_QUEUE_MAX_MESSAGES", 10)),
            max_dequeue_count=int(os.getenv("RETAIL_QUEUE_MAX_DEQUEUE_COUNT", 5)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    resources: ResourceNames = field(default_factory=ResourceNames)
    images: UploadRule = IMAGE_UPLOAD_RULE
    contracts: UploadRule = CONTRACT_UPLOAD_RULE
    queue: QueueDefaults = field(default_factory=QueueDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(queue=QueueDefaults.from_env())


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MB",
    "ResourceNames",
    "UploadRule",
    "IMAGE_UPLOAD_RULE",
    "CONTRACT_UPLOAD_RULE",
    "QueueDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
