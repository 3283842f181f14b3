# ============================================================================
# REMOTE FUNCTION GATEWAY
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Service - Sync HTTP client for the retail function app
# PURPOSE: Invoke AddCustomer/UploadImage/SendQueueMessage/UploadContract remotely
# CREATED: 18 OCT 2026
# ============================================================================
"""
Remote Function Gateway

Sync httpx client for the serverless function app (function_app.py). Every
call is a multipart POST to:

    <base>/api/<Operation>?code=<key>

and every call returns a RemoteResult, never raises. The outcome separates
"the function app answered no" (REJECTED) from transport failures
(UNREACHABLE, TIMEOUT) and from missing configuration (NOT_CONFIGURED, in
which case no request is made).

The access key travels as the ``code`` query parameter and is redacted
from everything that is logged.
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from core.config import AppConfig, get_config
from core.contracts import RemoteOperation, RemoteOutcome
from core.logging import ComponentType, get_current_context, get_logger, log_context
from core.models import RemoteResult, UploadedFile

logger = get_logger(__name__, ComponentType.GATEWAY)

# Timeout: 10s connect, 120s read/write (large contract uploads)
DEFAULT_TIMEOUT = httpx.Timeout(connect=10.0, read=120.0, write=120.0, pool=10.0)

NOT_CONFIGURED_MESSAGE = "Azure Functions configuration missing"

# httpx encodes text parts as multipart only when ``files`` is used
Multipart = Dict[str, Tuple[Optional[str], Any, Optional[str]]]


def _text_part(value: str) -> Tuple[None, str, None]:
    return (None, value or "", None)


def _file_part(upload: UploadedFile) -> Tuple[str, Any, str]:
    upload.rewind()
    return (upload.filename, upload.stream, upload.content_type)


class FunctionGateway:
    """Sync HTTP client for the retail function app."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        function_key: Optional[str] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        self._base_url = (base_url or "").rstrip("/")
        self._function_key = function_key or ""
        self._timeout = timeout or DEFAULT_TIMEOUT

    @classmethod
    def from_config(cls, config: Optional[AppConfig] = None) -> "FunctionGateway":
        config = config or get_config()
        return cls(config.functions_base_url, config.functions_key)

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url and self._function_key)

    @property
    def base_url(self) -> str:
        return self._base_url

    def endpoint(self, operation: RemoteOperation) -> str:
        """Endpoint URL without the access key."""
        return f"{self._base_url}/api/{operation.value}"

    def _redacted(self, operation: RemoteOperation) -> str:
        return f"{self.endpoint(operation)}?code=***"

    def _request(
        self,
        method: str,
        operation: RemoteOperation,
        files: Optional[Multipart] = None,
    ) -> RemoteResult:
        """
        Make one request to the function app.

        Returns a RemoteResult for every path, including transport failures.
        """
        if not self.is_configured:
            logger.error(f"{NOT_CONFIGURED_MESSAGE}: cannot call {operation.value}")
            return RemoteResult.failure(
                operation, RemoteOutcome.NOT_CONFIGURED, NOT_CONFIGURED_MESSAGE
            )

        target = self._redacted(operation)
        # Same request id on both sides of the call
        request_id = get_current_context().request_id
        headers = {"X-Request-ID": request_id} if request_id else None

        with log_context(operation=operation.value, path="remote"):
            logger.info(f"Calling function: {method} {target}")
            try:
                with httpx.Client(timeout=self._timeout) as client:
                    resp = client.request(
                        method,
                        self.endpoint(operation),
                        params={"code": self._function_key},
                        files=files,
                        headers=headers,
                    )
            except httpx.TimeoutException as e:
                logger.error(f"Function timeout: {target}: {e}")
                return RemoteResult.failure(
                    operation, RemoteOutcome.TIMEOUT, f"Function call timed out: {e}"
                )
            except httpx.HTTPError as e:
                logger.error(f"Cannot reach function at {target}: {e}")
                return RemoteResult.failure(
                    operation, RemoteOutcome.UNREACHABLE, f"Function unreachable: {e}"
                )

            result = RemoteResult.from_response(operation, resp.status_code, resp.text)
            log = logger.info if result.success else logger.warning
            log(f"Function {operation.value} -> {resp.status_code}: {resp.text}")
            return result

    # ------------------------------------------------------------------
    # OPERATIONS
    # ------------------------------------------------------------------

    def add_customer(self, name: str, email: str, phone: str) -> RemoteResult:
        """POST /api/AddCustomer (name, email, phone)"""
        return self._request(
            "POST",
            RemoteOperation.ADD_CUSTOMER,
            files={
                "name": _text_part(name),
                "email": _text_part(email),
                "phone": _text_part(phone),
            },
        )

    def upload_image(self, upload: UploadedFile) -> RemoteResult:
        """POST /api/UploadImage (imageFile)"""
        return self._request(
            "POST",
            RemoteOperation.UPLOAD_IMAGE,
            files={"imageFile": _file_part(upload)},
        )

    def send_queue_message(self, message: str) -> RemoteResult:
        """POST /api/SendQueueMessage (message)"""
        return self._request(
            "POST",
            RemoteOperation.SEND_QUEUE_MESSAGE,
            files={"message": _text_part(message)},
        )

    def upload_contract(self, upload: UploadedFile) -> RemoteResult:
        """POST /api/UploadContract (contractFile)"""
        return self._request(
            "POST",
            RemoteOperation.UPLOAD_CONTRACT,
            files={"contractFile": _file_part(upload)},
        )

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def test_connection(self) -> RemoteResult:
        """Bare GET against the AddCustomer endpoint."""
        return self._request("GET", RemoteOperation.ADD_CUSTOMER)

    def describe(self) -> Dict[str, Any]:
        """Configuration view safe for diagnostics."""
        return {
            "base_url": self._base_url or None,
            "function_key": "SET" if self._function_key else "MISSING",
            "endpoints": {op.value: self.endpoint(op) for op in RemoteOperation}
            if self._base_url else {},
        }


__all__ = ["FunctionGateway", "DEFAULT_TIMEOUT", "NOT_CONFIGURED_MESSAGE"]
