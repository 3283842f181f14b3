# ============================================================================
# STORAGE RESULT MODELS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core model - Read results, queue leases, downloads, stats
# PURPOSE: Value types returned by the storage facade
# CREATED: 18 OCT 2026
# EXPORTS: ReadResult, LeasedMessage, DownloadedObject, StorageStats
# DEPENDENCIES: pydantic
# ============================================================================
"""
Storage Result Models

Value types returned by StorageFacade:

- ReadResult: fail-soft list read. ``items`` is always a list; ``error`` is
  None when the backend answered, otherwise a one-line description. An
  empty result and a failed read are therefore distinguishable.
- LeasedMessage: a received queue message that must be acknowledged.
- DownloadedObject: streamed blob/file content.
- StorageStats: derived per-backend counts, never persisted.
"""

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


@dataclass
class ReadResult(Generic[T]):
    """Result of a fail-soft list read."""
    items: List[T] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True if the backend answered (the list may still be empty)."""
        return self.error is None

    @classmethod
    def success(cls, items: Iterable[T]) -> "ReadResult[T]":
        return cls(items=list(items))

    @classmethod
    def failure(cls, error: str, items: Optional[Iterable[T]] = None) -> "ReadResult[T]":
        return cls(items=list(items or []), error=error)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class LeasedMessage:
    """
    A queue message received under a visibility timeout.

    The message stays invisible to other consumers until it is
    acknowledged (deleted) or the timeout expires, after which it is
    delivered again.
    """
    message_id: str
    pop_receipt: str
    content: str
    dequeue_count: int = 1


@dataclass
class DownloadedObject:
    """Streamed content of a blob or file."""
    name: str
    chunks: Callable[[], Iterator[bytes]]
    size: Optional[int] = None
    content_type: str = "application/octet-stream"

    def iter_chunks(self) -> Iterator[bytes]:
        return self.chunks()

    def read(self) -> bytes:
        """Read the whole payload into memory."""
        return b"".join(self.chunks())


class StorageStats(BaseModel):
    """
    Snapshot of entity counts across the four backends.

    ``error`` is set when the snapshot is the fail-soft all-zero result.
    """
    customer_count: int = Field(default=0, ge=0)
    image_count: int = Field(default=0, ge=0)
    queue_message_count: int = Field(default=0, ge=0)
    contract_count: int = Field(default=0, ge=0)
    error: Optional[str] = None

    def as_tuple(self) -> tuple:
        return (
            self.customer_count,
            self.image_count,
            self.queue_message_count,
            self.contract_count,
        )


__all__ = [
    "ReadResult",
    "LeasedMessage",
    "DownloadedObject",
    "StorageStats",
]
