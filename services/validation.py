# ============================================================================
# INPUT VALIDATION
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Service - Request validation before any backend call
# PURPOSE: Reject empty, mistyped or oversized uploads and blank inputs
# CREATED: 18 OCT 2026
# ============================================================================
"""
Input Validation

Cheap checks that run before the storage facade or the remote gateway is
touched. Every check raises ValidationFailed with the one-line message the
user sees; nothing here performs I/O.
"""

from typing import Optional

from core.config import CONTRACT_UPLOAD_RULE, IMAGE_UPLOAD_RULE, UploadRule
from core.errors import ValidationFailed
from core.models import UploadedFile


def validate_upload(rule: UploadRule, upload: Optional[UploadedFile]) -> UploadedFile:
    """
    Check an upload against a rule.

    Order: presence, extension, size. Extension match is case-insensitive.

    Returns:
        The same upload, for chaining

    Raises:
        ValidationFailed
    """
    if upload is None or not upload.filename or upload.is_empty:
        raise ValidationFailed(
            f"Please select a {rule.label} file to upload",
            field=f"{rule.label}File",
        )

    if not rule.allows_extension(upload.filename):
        raise ValidationFailed(
            f"Invalid file type. Please upload {rule.type_hint}.",
            field=f"{rule.label}File",
            value=rule.extension_of(upload.filename) or upload.filename,
        )

    if upload.size > rule.max_size_bytes:
        raise ValidationFailed(
            f"File size must be less than {rule.max_size_mb}MB.",
            field=f"{rule.label}File",
            value=str(upload.size),
        )

    return upload


def validate_image(upload: Optional[UploadedFile]) -> UploadedFile:
    return validate_upload(IMAGE_UPLOAD_RULE, upload)


def validate_contract(upload: Optional[UploadedFile]) -> UploadedFile:
    return validate_upload(CONTRACT_UPLOAD_RULE, upload)


def validate_message(message: Optional[str]) -> str:
    """Non-blank queue message text."""
    if not message or not message.strip():
        raise ValidationFailed("Please enter a message", field="message")
    return message


def validate_customer_name(name: Optional[str]) -> str:
    if not name or not name.strip():
        raise ValidationFailed("Customer name is required", field="name")
    return name.strip()


__all__ = [
    "validate_upload",
    "validate_image",
    "validate_contract",
    "validate_message",
    "validate_customer_name",
]
