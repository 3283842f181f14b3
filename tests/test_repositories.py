# ============================================================================
# STORAGE REPOSITORY TESTS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Tests - Azure SDK wrappers
# PURPOSE: Verify SDK calls, error translation and payload encoding
# CREATED: 18 OCT 2026
# ============================================================================
"""
Storage Repository Tests

The Azure service clients are MagicMocks; no network traffic.

Run with:
    pytest tests/test_repositories.py -v
"""

import base64
import io
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    ServiceRequestError,
)

from core.errors import BackendUnavailable, ConfigurationMissing, NotFound
from core.models import CustomerRecord, LeasedMessage
from infrastructure import (
    BlobRepository,
    CustomerTableRepository,
    FileShareRepository,
    QueueRepository,
    StorageClients,
    blob_name_from_url,
    decode_payload,
    encode_payload,
)


# ============================================================================
# HELPERS
# ============================================================================

class TestHelpers:

    def test_payload_encoding(self):
        wire = encode_payload("Image uploaded: café.png")

        assert wire == base64.b64encode("Image uploaded: café.png".encode()).decode()
        assert decode_payload(wire) == "Image uploaded: café.png"

    def test_undecodable_payload(self):
        with pytest.raises(ValueError):
            decode_payload("not base64!!")

    @pytest.mark.parametrize(
        "url,name",
        [
            ("https://acct.blob.core.windows.net/product-images/abc_photo.png", "abc_photo.png"),
            ("https://acct.blob.core.windows.net/product-images/abc_my%20photo.png?sv=x", "abc_my photo.png"),
            ("abc_photo.png", "abc_photo.png"),
            ("https://acct.blob.core.windows.net/", ""),
        ],
    )
    def test_blob_name_from_url(self, url, name):
        assert blob_name_from_url(url) == name

    def test_clients_require_configuration(self):
        with pytest.raises(ConfigurationMissing):
            StorageClients()


# ============================================================================
# TABLE
# ============================================================================

class TestCustomerTable:

    @pytest.fixture
    def table(self):
        return MagicMock()

    @pytest.fixture
    def repo(self, table):
        service = MagicMock()
        service.get_table_client.return_value = table
        return CustomerTableRepository(service)

    def test_insert_writes_entity(self, repo, table):
        record = CustomerRecord.new("Ada", "a@x.io", "555")

        repo.insert(record)

        entity = table.create_entity.call_args.kwargs["entity"]
        assert entity == {
            "PartitionKey": "Customer",
            "RowKey": record.row_key,
            "Name": "Ada",
            "Email": "a@x.io",
            "Phone": "555",
        }

    def test_list_maps_entities(self, repo, table):
        table.list_entities.return_value = [
            {"PartitionKey": "Customer", "RowKey": "r1", "Name": "Ada"},
        ]

        (record,) = repo.list_all()

        assert (record.row_key, record.name, record.email) == ("r1", "Ada", "")

    def test_get_missing_is_not_found(self, repo, table):
        table.get_entity.side_effect = ResourceNotFoundError("gone")

        with pytest.raises(NotFound):
            repo.get("r1")

    def test_delete_missing_returns_false(self, repo, table):
        table.get_entity.side_effect = ResourceNotFoundError("gone")

        assert repo.delete("r1") is False
        table.delete_entity.assert_not_called()

    def test_delete_existing(self, repo, table):
        assert repo.delete("r1") is True
        table.delete_entity.assert_called_once_with(partition_key="Customer", row_key="r1")

    def test_fault_is_backend_unavailable(self, repo, table):
        table.create_entity.side_effect = ServiceRequestError("dns failure")

        with pytest.raises(BackendUnavailable) as exc:
            repo.insert(CustomerRecord.new("Ada"))
        assert exc.value.resource == "customerprofiles"

    def test_count_missing_table_is_zero(self, repo, table):
        table.list_entities.side_effect = ResourceNotFoundError("no table")
        assert repo.count() == 0

    def test_table_exists_queries_by_name(self, repo):
        repo._service.query_tables.return_value = iter([{"name": "customerprofiles"}])

        assert repo.table_exists() is True
        repo._service.query_tables.assert_called_once_with("TableName eq 'customerprofiles'")

        repo._service.query_tables.return_value = iter([])
        assert repo.table_exists() is False

    def test_table_exists_fault_raises(self, repo):
        repo._service.query_tables.side_effect = ServiceRequestError("dns failure")
        with pytest.raises(BackendUnavailable):
            repo.table_exists()


# ============================================================================
# BLOB
# ============================================================================

class TestBlobRepository:

    @pytest.fixture
    def container(self):
        container = MagicMock()
        container.get_blob_client.side_effect = lambda name: MagicMock(
            url=f"https://acct.blob.core.windows.net/product-images/{name}"
        )
        return container

    @pytest.fixture
    def repo(self, container):
        service = MagicMock()
        service.get_container_client.return_value = container
        return BlobRepository(service)

    def test_upload_overwrites_and_detects_type(self, repo, container):
        url = repo.upload("abc_photo.png", io.BytesIO(b"1"), None, 1)

        assert url.endswith("/product-images/abc_photo.png")
        blob_client = container.get_blob_client.call_args_list[-1]
        assert blob_client.args == ("abc_photo.png",)

    def test_upload_kwargs(self, repo):
        blob_client = MagicMock(url="https://acct/product-images/x.gif")
        repo._get_container_client().get_blob_client.side_effect = None
        repo._get_container_client().get_blob_client.return_value = blob_client

        repo.upload("x.gif", io.BytesIO(b"g"), "application/octet-stream", 1)

        kwargs = blob_client.upload_blob.call_args.kwargs
        assert kwargs["overwrite"] is True
        assert kwargs["content_settings"].content_type == "image/gif"

    def test_ensure_container_existing(self, repo, container):
        container.create_container.side_effect = ResourceExistsError("exists")
        assert repo.ensure_container() is False

    def test_list_missing_container_is_empty(self, repo, container):
        container.list_blobs.side_effect = ResourceNotFoundError("no container")
        assert repo.list_names() == []
        assert repo.count() == 0

    def test_list_urls(self, repo, container):
        container.list_blobs.return_value = [SimpleNamespace(name="a.png")]
        assert repo.list_urls() == ["https://acct.blob.core.windows.net/product-images/a.png"]

    def test_delete_missing_returns_false(self, repo, container):
        container.delete_blob.side_effect = ResourceNotFoundError("gone")
        assert repo.delete("a.png") is False

    def test_delete_fault_raises(self, repo, container):
        container.delete_blob.side_effect = HttpResponseError("throttled")
        with pytest.raises(BackendUnavailable):
            repo.delete("a.png")

    def test_container_exists_is_metadata_only(self, repo, container):
        container.exists.return_value = False

        assert repo.container_exists() is False
        container.list_blobs.assert_not_called()


# ============================================================================
# QUEUE
# ============================================================================

class TestQueueRepository:

    @pytest.fixture
    def queue_client(self):
        return MagicMock()

    @pytest.fixture
    def repo(self, queue_client):
        service = MagicMock()
        service.get_queue_client.return_value = queue_client
        return QueueRepository(service)

    def test_send_encodes(self, repo, queue_client):
        queue_client.send_message.return_value = SimpleNamespace(id="m1")

        assert repo.send("order 42") == "m1"
        queue_client.send_message.assert_called_once_with(encode_payload("order 42"))

    def test_receive_decodes_and_skips_garbage(self, repo, queue_client):
        queue_client.receive_messages.return_value = [
            SimpleNamespace(id="m1", pop_receipt="p1", content=encode_payload("hi"), dequeue_count=1),
            SimpleNamespace(id="m2", pop_receipt="p2", content="%%%", dequeue_count=3),
        ]

        leases = repo.receive(max_messages=5, visibility_timeout=30)

        assert leases == [LeasedMessage("m1", "p1", "hi", 1)]
        kwargs = queue_client.receive_messages.call_args.kwargs
        assert kwargs["max_messages"] == 5
        assert kwargs["visibility_timeout"] == 30

    def test_undecodable_message_deleted_at_max_dequeue_count(self, repo, queue_client):
        queue_client.receive_messages.return_value = [
            SimpleNamespace(id="m2", pop_receipt="p2", content="%%%", dequeue_count=5),
        ]

        assert repo.receive(max_messages=5, visibility_timeout=30) == []
        queue_client.delete_message.assert_called_once_with("m2", "p2")

    def test_undecodable_message_below_threshold_is_kept(self, queue_client):
        service = MagicMock()
        service.get_queue_client.return_value = queue_client
        repo = QueueRepository(service, max_dequeue_count=10)
        queue_client.receive_messages.return_value = [
            SimpleNamespace(id="m2", pop_receipt="p2", content="%%%", dequeue_count=9),
        ]

        assert repo.receive(max_messages=1, visibility_timeout=30) == []
        queue_client.delete_message.assert_not_called()

    def test_failed_poison_delete_does_not_block_receive(self, repo, queue_client):
        queue_client.receive_messages.return_value = [
            SimpleNamespace(id="m2", pop_receipt="p2", content="%%%", dequeue_count=7),
            SimpleNamespace(id="m3", pop_receipt="p3", content=encode_payload("ok"), dequeue_count=1),
        ]
        queue_client.delete_message.side_effect = HttpResponseError("lease lost")

        leases = repo.receive(max_messages=5, visibility_timeout=30)

        assert leases == [LeasedMessage("m3", "p3", "ok", 1)]

    def test_ensure_queue(self, repo, queue_client):
        assert repo.ensure_queue() is True
        queue_client.create_queue.assert_called_once_with()

        queue_client.create_queue.side_effect = ResourceExistsError("exists")
        assert repo.ensure_queue() is False

    def test_queue_exists(self, repo, queue_client):
        assert repo.queue_exists() is True

        queue_client.get_queue_properties.side_effect = ResourceNotFoundError("no queue")
        assert repo.queue_exists() is False

    def test_delete_uses_pop_receipt(self, repo, queue_client):
        repo.delete(LeasedMessage("m1", "p1", "hi"))
        queue_client.delete_message.assert_called_once_with("m1", "p1")

    def test_missing_queue_depth_is_zero(self, repo, queue_client):
        queue_client.get_queue_properties.side_effect = ResourceNotFoundError("no queue")
        assert repo.approximate_count() == 0

    def test_depth(self, repo, queue_client):
        queue_client.get_queue_properties.return_value = SimpleNamespace(approximate_message_count=7)
        assert repo.approximate_count() == 7


# ============================================================================
# FILE SHARE
# ============================================================================

class TestFileShareRepository:

    @pytest.fixture
    def share(self):
        return MagicMock()

    @pytest.fixture
    def repo(self, share):
        service = MagicMock()
        service.get_share_client.return_value = share
        return FileShareRepository(service)

    def test_list_ignores_directories(self, repo, share):
        share.get_directory_client.return_value.list_directories_and_files.return_value = [
            {"name": "lease.pdf", "is_directory": False},
            {"name": "archive", "is_directory": True},
        ]
        assert repo.list_names() == ["lease.pdf"]

    def test_exists(self, repo, share):
        assert repo.exists("lease.pdf") is True

        share.get_file_client.return_value.get_file_properties.side_effect = (
            ResourceNotFoundError("gone")
        )
        assert repo.exists("lease.pdf") is False

    def test_download_missing(self, repo, share):
        share.get_file_client.return_value.download_file.side_effect = ResourceNotFoundError("gone")
        with pytest.raises(NotFound):
            repo.download("lease.pdf")

    def test_upload_passes_length(self, repo, share):
        stream = io.BytesIO(b"%PDF")

        assert repo.upload("lease.pdf", stream, 4) == "lease.pdf"
        share.get_file_client.assert_called_with("lease.pdf")
        share.get_file_client.return_value.upload_file.assert_called_once_with(stream, length=4)

    def test_delete_existing(self, repo, share):
        assert repo.delete("lease.pdf") is True
        share.get_file_client.assert_called_with("lease.pdf")
        share.get_file_client.return_value.delete_file.assert_called_once_with()

    def test_delete_missing_returns_false(self, repo, share):
        share.get_file_client.return_value.delete_file.side_effect = ResourceNotFoundError("gone")
        assert repo.delete("lease.pdf") is False

    def test_delete_fault_raises(self, repo, share):
        share.get_file_client.return_value.delete_file.side_effect = HttpResponseError("throttled")

        with pytest.raises(BackendUnavailable) as exc:
            repo.delete("lease.pdf")
        assert exc.value.resource == "contracts"

    def test_ensure_share(self, repo, share):
        assert repo.ensure_share() is True
        share.create_share.assert_called_once_with()

        share.create_share.side_effect = ResourceExistsError("exists")
        assert repo.ensure_share() is False

    def test_share_exists(self, repo, share):
        assert repo.share_exists() is True

        share.get_share_properties.side_effect = ResourceNotFoundError("no share")
        assert repo.share_exists() is False

    def test_share_exists_fault_raises(self, repo, share):
        share.get_share_properties.side_effect = ServiceRequestError("dns failure")
        with pytest.raises(BackendUnavailable):
            repo.share_exists()
