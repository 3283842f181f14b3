# ============================================================================
# UPLOADED FILE MODEL
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core model - Incoming file payload
# PURPOSE: Framework-neutral view of a multipart file upload
# CREATED: 18 OCT 2026
# EXPORTS: UploadedFile
# ============================================================================
"""
Uploaded File

Wraps a multipart upload from either FastAPI (``UploadFile``) or Azure
Functions (werkzeug ``FileStorage``) so that validation, the storage facade
and the remote gateway all see the same shape.
"""

import io
import os
from dataclasses import dataclass
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any, BinaryIO, Optional


def safe_filename(filename: Optional[str]) -> str:
    """
    Basename of a client-supplied filename.

    Browsers may send full client paths (``C:\\docs\\a.pdf``); only the last
    component is kept.
    """
    if not filename:
        return ""
    name = PureWindowsPath(filename).name
    return PurePosixPath(name).name.strip()


def _is_seekable(stream: BinaryIO) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable and seekable())


def _measure(stream: BinaryIO) -> int:
    """Length of a seekable stream, leaving the position at the start."""
    if not _is_seekable(stream):
        return 0
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


@dataclass
class UploadedFile:
    """A file received from a client."""
    filename: str
    stream: BinaryIO
    size: int
    content_type: str = "application/octet-stream"

    @classmethod
    def from_bytes(
        cls,
        filename: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> "UploadedFile":
        return cls(
            filename=safe_filename(filename),
            stream=io.BytesIO(data),
            size=len(data),
            content_type=content_type or "application/octet-stream",
        )

    @classmethod
    def from_stream(
        cls,
        filename: Optional[str],
        stream: BinaryIO,
        content_type: Optional[str] = None,
        size: Optional[int] = None,
    ) -> "UploadedFile":
        if size is None:
            size = _measure(stream)
        return cls(
            filename=safe_filename(filename),
            stream=stream,
            size=size,
            content_type=content_type or "application/octet-stream",
        )

    @classmethod
    def from_upload(cls, upload: Any) -> "UploadedFile":
        """Build from a FastAPI/Starlette ``UploadFile``."""
        return cls.from_stream(
            upload.filename,
            upload.file,
            content_type=upload.content_type,
            size=getattr(upload, "size", None),
        )

    @classmethod
    def from_file_storage(cls, storage: Any) -> "UploadedFile":
        """Build from a werkzeug ``FileStorage`` (Azure Functions ``req.files``)."""
        return cls.from_stream(
            storage.filename,
            storage.stream,
            content_type=storage.content_type or storage.mimetype,
        )

    @property
    def is_empty(self) -> bool:
        return self.size <= 0

    def rewind(self) -> None:
        if _is_seekable(self.stream):
            self.stream.seek(0)


__all__ = ["UploadedFile", "safe_filename"]
