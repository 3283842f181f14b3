# ============================================================================
# VALIDATION TESTS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Tests - Upload and input validation
# PURPOSE: Verify rejection rules and that nothing reaches a backend first
# CREATED: 18 OCT 2026
# ============================================================================
"""
Validation Tests

Run with:
    pytest tests/test_validation.py -v
"""

from unittest.mock import MagicMock

import pytest

from core.config import MB
from core.errors import ValidationFailed
from core.models import UploadedFile
from services import DirectRetailOperations, RemoteRetailOperations
from services.validation import (
    validate_contract,
    validate_customer_name,
    validate_image,
    validate_message,
)


def _sized(filename, size):
    upload = UploadedFile.from_bytes(filename, b"x")
    upload.size = size
    return upload


class TestImageRule:

    @pytest.mark.parametrize("name", ["a.jpg", "a.JPEG", "a.png", "a.gif", "a.bmp", "a.WebP"])
    def test_allowed(self, name):
        assert validate_image(UploadedFile.from_bytes(name, b"1")).filename == name

    def test_missing(self):
        with pytest.raises(ValidationFailed, match="Please select a image file"):
            validate_image(None)

    def test_empty_payload(self):
        with pytest.raises(ValidationFailed, match="select a image"):
            validate_image(UploadedFile.from_bytes("a.png", b""))

    def test_wrong_extension(self):
        with pytest.raises(ValidationFailed, match="Invalid file type") as exc:
            validate_image(UploadedFile.from_bytes("setup.exe", b"MZ"))
        assert exc.value.value == ".exe"

    def test_at_limit_allowed(self):
        validate_image(_sized("big.png", 10 * MB))

    def test_over_limit(self):
        with pytest.raises(ValidationFailed, match="less than 10MB"):
            validate_image(_sized("big.png", 10 * MB + 1))


class TestContractRule:

    @pytest.mark.parametrize("name", ["a.pdf", "a.DOCX", "a.txt", "a.xls", "a.pptx"])
    def test_allowed(self, name):
        validate_contract(UploadedFile.from_bytes(name, b"1"))

    def test_archive_rejected(self):
        with pytest.raises(ValidationFailed, match="PDF, Word"):
            validate_contract(UploadedFile.from_bytes("bundle.zip", b"PK"))

    def test_over_limit(self):
        with pytest.raises(ValidationFailed, match="less than 100MB"):
            validate_contract(_sized("huge.pdf", 100 * MB + 1))


class TestTextInputs:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_message(self, value):
        with pytest.raises(ValidationFailed, match="Please enter a message"):
            validate_message(value)

    def test_name_is_stripped(self):
        assert validate_customer_name("  Ada ") == "Ada"

    def test_blank_name(self):
        with pytest.raises(ValidationFailed, match="Customer name is required"):
            validate_customer_name(" ")


class TestValidationBeforeBackend:
    """Rejected input never reaches storage or the network."""

    def test_direct_image_rejected_before_storage(self, facade, images, queue):
        ops = DirectRetailOperations(facade)

        with pytest.raises(ValidationFailed):
            ops.upload_image(UploadedFile.from_bytes("setup.exe", b"MZ"))

        assert images.calls == []
        assert queue.calls == []

    def test_direct_contract_rejected_before_storage(self, facade, contracts, queue):
        ops = DirectRetailOperations(facade)

        with pytest.raises(ValidationFailed):
            ops.upload_contract(UploadedFile.from_bytes("bundle.zip", b"PK"))

        assert contracts.calls == []
        assert queue.calls == []

    def test_remote_rejected_before_network(self):
        gateway = MagicMock()
        ops = RemoteRetailOperations(gateway)

        with pytest.raises(ValidationFailed):
            ops.upload_contract(UploadedFile.from_bytes("bundle.zip", b"PK"))
        with pytest.raises(ValidationFailed):
            ops.send_message("  ")

        assert gateway.mock_calls == []
