# ============================================================================
# RETAIL BLUEPRINT
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Function app - Remote operations served over the storage facade
# PURPOSE: AddCustomer, UploadImage, SendQueueMessage, UploadContract
# CREATED: 18 OCT 2026
# ============================================================================
"""
Retail Blueprint

Server side of the remote function gateway. Function-level auth (the
caller passes ``?code=<key>``):

- GET/POST /api/AddCustomer     - name, email, phone (form or JSON)
- POST /api/UploadImage         - imageFile (multipart)
- POST /api/SendQueueMessage    - message (form or JSON)
- POST /api/UploadContract      - contractFile (multipart)

Every response is the envelope ``{"Success", "Message", "Url"}``.
Validation failures are 400, missing configuration 503, backend faults 502.

The ``handle_*`` functions hold the logic so they can be called with a
plain ``func.HttpRequest``; the decorated functions only bind routes.
"""

import threading
from typing import Callable, Optional

import azure.functions as func

from core.config import get_config
from core.errors import RetailStorageError, http_status_for
from core.logging import ComponentType, get_logger, log_context, new_request_id
from core.models import FunctionEnvelope, UploadedFile
from services.storage_facade import StorageFacade
from services.validation import (
    validate_contract,
    validate_customer_name,
    validate_image,
    validate_message,
)

logger = get_logger(__name__, ComponentType.FUNCTION)
retail_bp = func.Blueprint()


# ============================================================================
# FACADE (one per worker process)
# ============================================================================

_facade: Optional[StorageFacade] = None
_facade_lock = threading.Lock()


def get_facade() -> StorageFacade:
    """Get the process-wide storage facade, building it on first use."""
    global _facade
    if _facade is None:
        with _facade_lock:
            if _facade is None:
                _facade = StorageFacade.from_config(get_config())
    return _facade


def set_facade(facade: Optional[StorageFacade]) -> None:
    """Replace the process-wide facade (for testing)."""
    global _facade
    _facade = facade


# ============================================================================
# REQUEST HELPERS
# ============================================================================

def _envelope_response(envelope: FunctionEnvelope, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        envelope.to_json(),
        status_code=status_code,
        headers={"Content-Type": "application/json"},
    )


def _field(req: func.HttpRequest, name: str) -> str:
    """Read a text field from the form, a JSON body or the query string."""
    value = req.form.get(name)
    if value is None:
        try:
            body = req.get_json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get(name) is not None:
            value = str(body[name])
    if value is None:
        value = req.params.get(name)
    return value or ""


def _file(req: func.HttpRequest, name: str) -> Optional[UploadedFile]:
    storage = req.files.get(name)
    if storage is None or not storage.filename:
        return None
    return UploadedFile.from_file_storage(storage)


def _run(
    req: func.HttpRequest,
    operation: str,
    action: Callable[[], FunctionEnvelope],
) -> func.HttpResponse:
    """Execute an action, mapping portal errors to an envelope and status."""
    request_id = req.headers.get("x-request-id") or new_request_id()
    with log_context(operation=operation, path="function", request_id=request_id):
        try:
            envelope = action()
        except RetailStorageError as e:
            status = http_status_for(e)
            log = logger.warning if status < 500 else logger.error
            log(f"{operation} failed ({status}): {e}")
            return _envelope_response(FunctionEnvelope.fail(e.message), status)

        logger.info(f"{operation} succeeded: {envelope.message}")
        return _envelope_response(envelope)


# ============================================================================
# HANDLERS
# ============================================================================

def handle_add_customer(req: func.HttpRequest) -> func.HttpResponse:
    if req.method.upper() == "GET":
        return _envelope_response(FunctionEnvelope.ok("AddCustomer endpoint reachable"))

    def action() -> FunctionEnvelope:
        name = validate_customer_name(_field(req, "name"))
        record = get_facade().create_customer(name, _field(req, "email"), _field(req, "phone"))
        return FunctionEnvelope.ok(f"Customer {record.name} added successfully")

    return _run(req, "AddCustomer", action)


def handle_upload_image(req: func.HttpRequest) -> func.HttpResponse:
    def action() -> FunctionEnvelope:
        upload = validate_image(_file(req, "imageFile"))
        url = get_facade().upload_blob(
            upload.stream, upload.filename, upload.content_type, upload.size
        )
        return FunctionEnvelope.ok(f"Image '{upload.filename}' uploaded successfully", url)

    return _run(req, "UploadImage", action)


def handle_send_queue_message(req: func.HttpRequest) -> func.HttpResponse:
    def action() -> FunctionEnvelope:
        message = validate_message(_field(req, "message"))
        get_facade().enqueue(message)
        return FunctionEnvelope.ok("Message sent to queue")

    return _run(req, "SendQueueMessage", action)


def handle_upload_contract(req: func.HttpRequest) -> func.HttpResponse:
    def action() -> FunctionEnvelope:
        upload = validate_contract(_file(req, "contractFile"))
        name = get_facade().upload_file(upload.stream, upload.filename, upload.size)
        return FunctionEnvelope.ok(f"Contract '{name}' uploaded successfully")

    return _run(req, "UploadContract", action)


# ============================================================================
# ROUTES
# ============================================================================

@retail_bp.route(route="AddCustomer", methods=["GET", "POST"], auth_level=func.AuthLevel.FUNCTION)
def add_customer(req: func.HttpRequest) -> func.HttpResponse:
    return handle_add_customer(req)


@retail_bp.route(route="UploadImage", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def upload_image(req: func.HttpRequest) -> func.HttpResponse:
    return handle_upload_image(req)


@retail_bp.route(route="SendQueueMessage", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def send_queue_message(req: func.HttpRequest) -> func.HttpResponse:
    return handle_send_queue_message(req)


@retail_bp.route(route="UploadContract", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def upload_contract(req: func.HttpRequest) -> func.HttpResponse:
    return handle_upload_contract(req)


__all__ = [
    "retail_bp",
    "get_facade",
    "set_facade",
    "handle_add_customer",
    "handle_upload_image",
    "handle_send_queue_message",
    "handle_upload_contract",
]
