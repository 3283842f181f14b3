# ============================================================================
# FUNCTION GATEWAY TESTS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Tests - Remote function gateway
# PURPOSE: Verify request shape, outcome classification and key handling
# CREATED: 18 OCT 2026
# ============================================================================
"""
Function Gateway Tests

httpx.Client is patched; no network traffic.

Run with:
    pytest tests/test_function_gateway.py -v
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from core.contracts import RemoteOperation, RemoteOutcome
from core.logging import log_context
from core.models import UploadedFile
from services.function_gateway import NOT_CONFIGURED_MESSAGE, FunctionGateway

BASE = "https://retail-func.azurewebsites.net"
KEY = "s3cret-key"


def _response(status_code=200, text='{"Success": true, "Message": "ok", "Url": ""}'):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    return resp


@pytest.fixture
def http_client():
    """Patch httpx.Client and yield the client used inside ``with``."""
    with patch("services.function_gateway.httpx.Client") as client_cls:
        client = MagicMock()
        client_cls.return_value.__enter__.return_value = client
        client_cls.return_value.__exit__.return_value = False
        client.request.return_value = _response()
        yield client


@pytest.fixture
def gateway():
    return FunctionGateway(BASE + "/", KEY)


class TestConfiguration:

    def test_endpoint_shape(self, gateway):
        assert gateway.endpoint(RemoteOperation.UPLOAD_IMAGE) == f"{BASE}/api/UploadImage"

    @pytest.mark.parametrize("base_url,key", [("", KEY), (BASE, ""), (None, None)])
    def test_not_configured_makes_no_call(self, http_client, base_url, key):
        gw = FunctionGateway(base_url, key)

        result = gw.add_customer("Ada", "", "")

        assert not gw.is_configured
        assert result.outcome is RemoteOutcome.NOT_CONFIGURED
        assert result.success is False
        assert result.message == NOT_CONFIGURED_MESSAGE
        http_client.request.assert_not_called()

    def test_describe_hides_key(self, gateway):
        info = gateway.describe()

        assert info["function_key"] == "SET"
        assert KEY not in str(info)
        assert info["endpoints"]["AddCustomer"] == f"{BASE}/api/AddCustomer"


class TestRequests:

    def test_add_customer_sends_text_parts_and_key(self, gateway, http_client):
        gateway.add_customer("Ada", "ada@example.com", "555")

        method, url = http_client.request.call_args.args
        kwargs = http_client.request.call_args.kwargs
        assert method == "POST"
        assert url == f"{BASE}/api/AddCustomer"
        assert kwargs["params"] == {"code": KEY}
        assert kwargs["files"] == {
            "name": (None, "Ada", None),
            "email": (None, "ada@example.com", None),
            "phone": (None, "555", None),
        }

    def test_upload_image_sends_file_part(self, gateway, http_client):
        upload = UploadedFile.from_bytes("photo.png", b"png-bytes", "image/png")
        upload.stream.read()

        gateway.upload_image(upload)

        files = http_client.request.call_args.kwargs["files"]
        filename, stream, content_type = files["imageFile"]
        assert filename == "photo.png"
        assert content_type == "image/png"
        assert stream.read() == b"png-bytes"

    def test_upload_contract_uses_contract_field(self, gateway, http_client):
        gateway.upload_contract(UploadedFile.from_bytes("lease.pdf", b"%PDF"))

        assert list(http_client.request.call_args.kwargs["files"]) == ["contractFile"]
        assert http_client.request.call_args.args[1] == f"{BASE}/api/UploadContract"

    def test_send_queue_message(self, gateway, http_client):
        gateway.send_queue_message("order 42")

        assert http_client.request.call_args.kwargs["files"] == {"message": (None, "order 42", None)}

    def test_test_connection_is_bare_get(self, gateway, http_client):
        gateway.test_connection()

        assert http_client.request.call_args.args == ("GET", f"{BASE}/api/AddCustomer")
        assert http_client.request.call_args.kwargs["files"] is None


class TestOutcomes:

    def test_accepted_envelope(self, gateway, http_client):
        http_client.request.return_value = _response(
            200, '{"Success": true, "Message": "Image uploaded", "Url": "https://x/y.png"}'
        )

        result = gateway.upload_image(UploadedFile.from_bytes("y.png", b"1"))

        assert result.outcome is RemoteOutcome.ACCEPTED
        assert result.success
        assert result.message == "Image uploaded"
        assert result.url == "https://x/y.png"
        assert result.status_code == 200

    def test_rejected_envelope_keeps_remote_message(self, gateway, http_client):
        body = '{"Success": false, "Message": "Invalid file type"}'
        http_client.request.return_value = _response(400, body)

        result = gateway.upload_image(UploadedFile.from_bytes("y.png", b"1"))

        assert result.outcome is RemoteOutcome.REJECTED
        assert result.reached_remote
        assert result.message == "Invalid file type"
        assert result.body == body

    def test_envelope_failure_on_2xx_is_rejected(self, gateway, http_client):
        http_client.request.return_value = _response(200, '{"Success": false, "Message": "no"}')

        result = gateway.send_queue_message("x")

        assert result.outcome is RemoteOutcome.REJECTED
        assert not result.success

    def test_non_json_2xx_is_success_with_raw_body(self, gateway, http_client):
        http_client.request.return_value = _response(200, "Customer added")

        result = gateway.add_customer("Ada", "", "")

        assert result.success
        assert result.message == "Customer added"
        assert result.body == "Customer added"

    def test_non_json_error_body(self, gateway, http_client):
        http_client.request.return_value = _response(500, "")

        result = gateway.add_customer("Ada", "", "")

        assert result.outcome is RemoteOutcome.REJECTED
        assert result.message == "HTTP 500"

    def test_connect_error_is_unreachable(self, gateway, http_client):
        http_client.request.side_effect = httpx.ConnectError("connection refused")

        result = gateway.add_customer("Ada", "", "")

        assert result.outcome is RemoteOutcome.UNREACHABLE
        assert not result.reached_remote
        assert "connection refused" in result.message

    def test_timeout_is_timeout(self, gateway, http_client):
        http_client.request.side_effect = httpx.ReadTimeout("read timed out")

        result = gateway.upload_contract(UploadedFile.from_bytes("lease.pdf", b"%PDF"))

        assert result.outcome is RemoteOutcome.TIMEOUT
        assert result.success is False

    def test_result_to_dict_omits_key(self, gateway, http_client):
        result = gateway.add_customer("Ada", "", "")

        data = result.to_dict()

        assert data["operation"] == "AddCustomer"
        assert data["outcome"] == "accepted"
        assert KEY not in str(data)


class TestRequestCorrelation:

    def test_request_id_forwarded(self, gateway, http_client):
        with log_context(request_id="req-123"):
            gateway.send_queue_message("x")

        assert http_client.request.call_args.kwargs["headers"] == {"X-Request-ID": "req-123"}

    def test_no_request_id_no_header(self, gateway, http_client):
        gateway.send_queue_message("x")

        assert http_client.request.call_args.kwargs["headers"] is None
