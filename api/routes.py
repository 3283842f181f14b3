# ============================================================================
# API ROUTES
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - FastAPI route definitions
# PURPOSE: HTTP endpoints for customers, images, contracts, messages, stats
# CREATED: 18 OCT 2026
# ============================================================================
"""
API Routes

FastAPI routes for the retail storage portal.

Mutations (POST) run through a RetailOperations strategy chosen with the
``path`` query parameter (``remote`` or ``direct``, default from config).
Reads, downloads and deletes go straight to the storage facade.

Routes are plain ``def``: the Azure SDK clients block, so Starlette runs
each request in its thread pool.

Error mapping (see ``retail_error_handler``):
    ValidationFailed      -> 400
    NotFound              -> 404
    ConfigurationMissing  -> 503
    BackendUnavailable    -> 502
"""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, File, Query, Request, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from core.contracts import ExecutionPath
from core.errors import (
    ConfigurationMissing,
    NotFound,
    RetailStorageError,
    http_status_for,
)
from core.logging import ComponentType, get_logger, log_context
from core.models import DownloadedObject, StorageStats, UploadedFile
from services import ActionOutcome, OperationsSelector, RetailOperations, StorageFacade
from .schemas import (
    ActionResponse,
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
    DeleteResponse,
    ErrorResponse,
    ExistsResponse,
    ItemListResponse,
    MessageCreate,
    QueueCountResponse,
)

logger = get_logger(__name__, ComponentType.API)

router = APIRouter()

PATH_HELP = "Execution path: remote (function app) or direct (storage)"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    502: {"model": ErrorResponse, "description": "Storage or function app failure"},
    503: {"model": ErrorResponse, "description": "Not configured"},
}


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# These will be set by the main app at startup

_facade: Optional[StorageFacade] = None
_selector: Optional[OperationsSelector] = None


def set_services(facade: Optional[StorageFacade], selector: Optional[OperationsSelector]):
    """Set service instances for dependency injection."""
    global _facade, _selector
    _facade = facade
    _selector = selector


def get_facade() -> StorageFacade:
    if _facade is None:
        raise ConfigurationMissing("Azure Storage is not configured", operation="storage")
    return _facade


def get_operations(path: Optional[ExecutionPath]) -> RetailOperations:
    if _selector is None:
        raise ConfigurationMissing("Services not initialized", operation="select_path")
    return _selector.select(path)


# ============================================================================
# ERROR MAPPING
# ============================================================================

async def retail_error_handler(request: Request, exc: RetailStorageError) -> JSONResponse:
    """Render any RetailStorageError as a one-line failure body."""
    status = http_status_for(exc)
    log = logger.warning if status < 500 else logger.error
    log(f"{request.method} {request.url.path} -> {status}: {exc}")
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


def _action_response(outcome: ActionOutcome) -> JSONResponse:
    """201 for a successful action, 502 when the backend or remote refused it."""
    status = 201 if outcome.success else 502
    body = ActionResponse(**outcome.to_dict())
    return JSONResponse(status_code=status, content=body.model_dump())


def content_disposition(name: str) -> str:
    """
    Attachment header safe for any stored name.

    Header values must be latin-1, so non-ASCII names go in the RFC 5987
    ``filename*`` parameter with an ASCII ``filename`` fallback.
    """
    fallback = "".join(
        ch if " " <= ch < "\x7f" and ch not in '"\\' else "_" for ch in name
    )
    quoted = quote(name, safe="")
    if quoted == name:
        return f'attachment; filename="{name}"'
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quoted}"


def _download_response(obj: DownloadedObject) -> StreamingResponse:
    headers = {"Content-Disposition": content_disposition(obj.name)}
    if obj.size is not None:
        headers["Content-Length"] = str(obj.size)
    return StreamingResponse(obj.iter_chunks(), media_type=obj.content_type, headers=headers)


# ============================================================================
# CUSTOMERS
# ============================================================================

@router.post(
    "/customers",
    response_model=ActionResponse,
    status_code=201,
    tags=["Customers"],
    responses=ERROR_RESPONSES,
)
def add_customer(
    request: CustomerCreate,
    path: Optional[ExecutionPath] = Query(None, description=PATH_HELP),
):
    """
    Register a customer profile.

    A "New customer registered" notification is posted to the order queue.
    """
    outcome = get_operations(path).register_customer(request.name, request.email, request.phone)
    return _action_response(outcome)


@router.get("/customers", response_model=CustomerListResponse, tags=["Customers"])
def list_customers():
    """List customer profiles. A storage fault is reported in ``error``."""
    result = get_facade().list_records()
    return CustomerListResponse.from_result(result)


@router.get("/customers/{row_key}", response_model=CustomerResponse, tags=["Customers"])
def get_customer(row_key: str):
    record = get_facade().get_record(row_key)
    return CustomerResponse.from_record(record)


@router.delete("/customers/{row_key}", response_model=DeleteResponse, tags=["Customers"])
def delete_customer(row_key: str):
    if not get_facade().delete_record(row_key):
        raise NotFound(f"Customer not found: {row_key}", operation="delete_record")
    return DeleteResponse(success=True, message=f"Customer {row_key} deleted")


# ============================================================================
# IMAGES
# ============================================================================

@router.post(
    "/images",
    response_model=ActionResponse,
    status_code=201,
    tags=["Images"],
    responses=ERROR_RESPONSES,
)
def upload_image(
    imageFile: Optional[UploadFile] = File(None),
    path: Optional[ExecutionPath] = Query(None, description=PATH_HELP),
):
    """Upload a product image (JPG, PNG, GIF, BMP or WebP, max 10MB)."""
    upload = UploadedFile.from_upload(imageFile) if imageFile is not None else None
    outcome = get_operations(path).upload_image(upload)
    return _action_response(outcome)


@router.get("/images", response_model=ItemListResponse, tags=["Images"])
def list_images():
    """URLs of all stored images."""
    return ItemListResponse.from_result(get_facade().list_blobs())


@router.get("/images/download", tags=["Images"])
def download_image(url: str = Query(..., description="Blob URL returned by upload or list")):
    return _download_response(get_facade().download_blob(url))


@router.delete("/images", response_model=DeleteResponse, tags=["Images"])
def delete_image(url: str = Query(..., description="Blob URL returned by upload or list")):
    if not get_facade().delete_blob(url):
        raise NotFound(f"Image not found: {url}", operation="delete_blob")
    return DeleteResponse(success=True, message="Image deleted")


# ============================================================================
# CONTRACTS
# ============================================================================

@router.post(
    "/contracts",
    response_model=ActionResponse,
    status_code=201,
    tags=["Contracts"],
    responses=ERROR_RESPONSES,
)
def upload_contract(
    contractFile: Optional[UploadFile] = File(None),
    path: Optional[ExecutionPath] = Query(None, description=PATH_HELP),
):
    """
    Upload a contract (PDF, Word, Excel, PowerPoint or text, max 100MB).

    A contract with the same name is replaced.
    """
    upload = UploadedFile.from_upload(contractFile) if contractFile is not None else None
    outcome = get_operations(path).upload_contract(upload)
    return _action_response(outcome)


@router.get("/contracts", response_model=ItemListResponse, tags=["Contracts"])
def list_contracts():
    return ItemListResponse.from_result(get_facade().list_files())


@router.get("/contracts/{file_name}/exists", response_model=ExistsResponse, tags=["Contracts"])
def contract_exists(file_name: str):
    return ExistsResponse(name=file_name, exists=get_facade().file_exists(file_name))


@router.get("/contracts/{file_name}", tags=["Contracts"])
def download_contract(file_name: str):
    logger.info(f"Downloading contract: {file_name}")
    return _download_response(get_facade().download_file(file_name))


@router.delete("/contracts/{file_name}", response_model=DeleteResponse, tags=["Contracts"])
def delete_contract(file_name: str):
    if not get_facade().delete_file(file_name):
        raise NotFound(f"Contract not found: {file_name}", operation="delete_file")
    return DeleteResponse(success=True, message=f"Contract '{file_name}' deleted")


# ============================================================================
# MESSAGES
# ============================================================================

@router.post(
    "/messages",
    response_model=ActionResponse,
    status_code=201,
    tags=["Messages"],
    responses=ERROR_RESPONSES,
)
def send_message(
    request: MessageCreate,
    path: Optional[ExecutionPath] = Query(None, description=PATH_HELP),
):
    outcome = get_operations(path).send_message(request.message)
    return _action_response(outcome)


@router.get("/messages", response_model=ItemListResponse, tags=["Messages"])
def receive_messages(
    max_messages: int = Query(10, ge=1, le=32, description="Messages to consume"),
):
    """
    Consume up to ``max_messages`` messages.

    Returned messages are acknowledged and removed from the queue.
    """
    facade = get_facade()
    with log_context(operation="receive_messages"):
        result = facade.dequeue_up_to(max_messages)
        logger.info(f"Consumed {len(result)} queue messages")
    return ItemListResponse.from_result(result)


@router.get("/messages/count", response_model=QueueCountResponse, tags=["Messages"])
def message_count():
    return QueueCountResponse(count=get_facade().queue_depth())


# ============================================================================
# STORAGE
# ============================================================================

@router.get("/storage/stats", response_model=StorageStats, tags=["Storage"])
def storage_stats():
    """Entity counts per backend. A storage fault yields zeros with ``error`` set."""
    return get_facade().compute_stats()


@router.post("/storage/initialize", response_model=ActionResponse, tags=["Storage"])
def initialize_storage():
    """Create the table, container, queue and share if missing (idempotent)."""
    get_facade().initialize_all()
    return ActionResponse(
        success=True,
        message="All storage components initialized",
        path=ExecutionPath.DIRECT.value,
    )
