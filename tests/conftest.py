# ============================================================================
# TEST FIXTURES
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Tests - Shared fixtures
# PURPOSE: In-memory repository fakes and a wired storage facade
# CREATED: 18 OCT 2026
# ============================================================================
"""
Shared Test Fixtures

In-memory stand-ins for the four repositories, with the same method
surface as infrastructure/*. Each fake records every call in ``calls`` so
tests can assert that validation happened before any backend access.

The queue fake models leases: received messages are hidden until they are
deleted or ``expire_leases()`` is called (visibility timeout elapsed).
"""

import uuid
from typing import Dict, List, Optional

import pytest

from core.config import reset_config, reset_defaults
from core.errors import BackendUnavailable, NotFound
from core.models import CustomerRecord, DownloadedObject, LeasedMessage
from services.storage_facade import StorageFacade


class _Recorder:
    def __init__(self):
        self.calls: List[str] = []
        self.created = False
        self.fail_with: Optional[Exception] = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with


class FakeCustomerTable(_Recorder):
    resource_name = "customerprofiles"

    def __init__(self):
        super().__init__()
        self.rows: Dict[str, CustomerRecord] = {}

    def ensure_table(self):
        self._record("ensure_table")
        self.created = True

    def table_exists(self):
        self._record("table_exists")
        return self.created

    def insert(self, record):
        self._record("insert")
        self.rows[record.row_key] = record
        return record

    def list_all(self):
        self._record("list_all")
        return list(self.rows.values())

    def get(self, row_key):
        self._record("get")
        if row_key not in self.rows:
            raise NotFound(f"table '{row_key}' not found", operation="get customer")
        return self.rows[row_key]

    def delete(self, row_key):
        self._record("delete")
        return self.rows.pop(row_key, None) is not None

    def count(self):
        self._record("count")
        return len(self.rows)


class FakeBlobContainer(_Recorder):
    resource_name = "product-images"
    base_url = "https://acct.blob.core.windows.net/product-images"

    def __init__(self):
        super().__init__()
        self.blobs: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}

    def ensure_container(self):
        self._record("ensure_container")
        self.created = True
        return True

    def container_exists(self):
        self._record("container_exists")
        return self.created

    def upload(self, blob_name, stream, content_type=None, length=None):
        self._record("upload")
        self.blobs[blob_name] = stream.read()
        self.content_types[blob_name] = content_type or "application/octet-stream"
        return f"{self.base_url}/{blob_name}"

    def list_names(self):
        self._record("list_names")
        return list(self.blobs)

    def list_urls(self):
        return [f"{self.base_url}/{name}" for name in self.list_names()]

    def count(self):
        return len(self.list_names())

    def download(self, blob_name):
        self._record("download")
        if blob_name not in self.blobs:
            raise NotFound(f"blob container '{blob_name}' not found")
        data = self.blobs[blob_name]
        return DownloadedObject(
            name=blob_name,
            chunks=lambda: iter([data[:4], data[4:]]),
            size=len(data),
            content_type=self.content_types[blob_name],
        )

    def delete(self, blob_name):
        self._record("delete")
        return self.blobs.pop(blob_name, None) is not None


class FakeQueue(_Recorder):
    resource_name = "order-queue"

    def __init__(self):
        super().__init__()
        self.visible: List[LeasedMessage] = []
        self.leased: Dict[str, LeasedMessage] = {}

    def ensure_queue(self):
        self._record("ensure_queue")
        self.created = True
        return True

    def queue_exists(self):
        self._record("queue_exists")
        return self.created

    def send(self, text):
        self._record("send")
        message_id = str(uuid.uuid4())
        self.visible.append(LeasedMessage(message_id, "", text, 0))
        return message_id

    def receive(self, max_messages, visibility_timeout):
        self._record("receive")
        batch, self.visible = self.visible[:max_messages], self.visible[max_messages:]
        leases = []
        for message in batch:
            lease = LeasedMessage(
                message.message_id,
                str(uuid.uuid4()),
                message.content,
                message.dequeue_count + 1,
            )
            self.leased[lease.message_id] = lease
            leases.append(lease)
        return leases

    def delete(self, lease):
        self._record("delete")
        current = self.leased.get(lease.message_id)
        if current is None or current.pop_receipt != lease.pop_receipt:
            raise NotFound(f"queue '{lease.message_id}' not found")
        del self.leased[lease.message_id]

    def approximate_count(self):
        self._record("approximate_count")
        return len(self.visible) + len(self.leased)

    def expire_leases(self):
        """Simulate the visibility timeout elapsing."""
        self.visible.extend(self.leased.values())
        self.leased.clear()


class FakeFileShare(_Recorder):
    resource_name = "contracts"

    def __init__(self):
        super().__init__()
        self.files: Dict[str, bytes] = {}

    def ensure_share(self):
        self._record("ensure_share")
        self.created = True
        return True

    def share_exists(self):
        self._record("share_exists")
        return self.created

    def upload(self, file_name, stream, length=None):
        self._record("upload")
        self.files[file_name] = stream.read()
        return file_name

    def exists(self, file_name):
        self._record("exists")
        return file_name in self.files

    def list_names(self):
        self._record("list_names")
        return list(self.files)

    def count(self):
        return len(self.list_names())

    def download(self, file_name):
        self._record("download")
        if file_name not in self.files:
            raise NotFound(f"file share '{file_name}' not found")
        data = self.files[file_name]
        return DownloadedObject(name=file_name, chunks=lambda: iter([data]), size=len(data))

    def delete(self, file_name):
        self._record("delete")
        return self.files.pop(file_name, None) is not None


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_config()
    reset_defaults()
    yield
    reset_config()
    reset_defaults()


@pytest.fixture
def customers():
    return FakeCustomerTable()


@pytest.fixture
def images():
    return FakeBlobContainer()


@pytest.fixture
def queue():
    return FakeQueue()


@pytest.fixture
def contracts():
    return FakeFileShare()


@pytest.fixture
def facade(customers, images, queue, contracts):
    return StorageFacade(customers, images, queue, contracts)


@pytest.fixture
def backend_down():
    return BackendUnavailable("connection refused", operation="test")
