# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - Structured logging with request context
# PURPOSE: One log line format for the portal API and the function app
# CREATED: 18 OCT 2026
# ============================================================================
"""
Structured Logging

Every log line carries the component that wrote it plus whatever request
context is active:

    request_id  - X-Request-ID of the HTTP request being served
    operation   - facade / gateway / action name (upload_blob, AddCustomer)
    resource    - backend container (customerprofiles, order-queue, ...)
    path        - execution path (direct, remote, function)

Context lives in a ContextVar, so it follows a request from the async
middleware into the threadpool that runs the sync routes, and into
``asyncio.to_thread`` health checks.

Output is either human-readable (default) or one JSON object per line
(``LOG_FORMAT=json``) for Application Insights / Log Analytics.

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.SERVICE)

    with log_context(operation="upload_blob", resource="product-images"):
        logger.info("Uploading image", extra={"size": 1024})
"""

import json
import logging
import os
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union


class ComponentType(str, Enum):
    """Which layer wrote a log line."""
    API = "api"
    SERVICE = "service"
    REPOSITORY = "repository"
    GATEWAY = "gateway"
    FUNCTION = "function"
    HEALTH = "health"


# Libraries that log every HTTP round trip at INFO
NOISY_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "httpx",
    "httpcore",
)


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """Request-scoped fields attached to every log line."""
    request_id: Optional[str] = None
    operation: Optional[str] = None
    resource: Optional[str] = None
    path: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **kwargs) -> "LogContext":
        """New context with ``kwargs`` layered over this one."""
        extra = {**self.extra, **(kwargs.pop("extra", None) or {})}
        known = {f.name for f in fields(self)}
        unknown = {k: v for k, v in kwargs.items() if k not in known}
        updates = {k: v for k, v in kwargs.items() if k in known}
        return replace(self, extra={**extra, **unknown}, **updates)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, extras flattened in."""
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        data.update(self.extra)
        return data


_current: ContextVar[LogContext] = ContextVar("retail_log_context", default=LogContext())


def get_current_context() -> LogContext:
    return _current.get()


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Layer fields over the active logging context for the enclosed block.

    Unknown keyword arguments are kept as extra fields.

    Example:
        with log_context(operation="register_customer", path="direct"):
            logger.info("Registering customer")
    """
    ctx = _current.get().merged(**kwargs)
    token = _current.set(ctx)
    try:
        yield ctx
    finally:
        _current.reset(token)


def new_request_id() -> str:
    return uuid.uuid4().hex[:16]


# ============================================================================
# FORMATTERS
# ============================================================================

def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "data", None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data = dict(_record_data(record))
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": data.pop("component", None),
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict()
        if context:
            entry["context"] = context
        if data:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line format for local runs:

        2026-10-18 09:14:02 INFO     services.storage_facade [req=ab12 op=upload_blob]: ...
    """

    CONTEXT_KEYS = (("request_id", "req"), ("operation", "op"), ("path", "path"))

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        context = get_current_context()

        tags = " ".join(
            f"{short}={getattr(context, key)}"
            for key, short in self.CONTEXT_KEYS
            if getattr(context, key)
        )
        line = f"{stamp} {record.levelname:<8} {record.name}"
        if tags:
            line += f" [{tags}]"
        line += f": {record.getMessage()}"

        data = {k: v for k, v in _record_data(record).items() if k != "component"}
        if data:
            line += f" {data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGER FACTORY
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """Adapter that moves ``extra`` and the component onto ``record.data``."""

    def process(self, msg, kwargs):
        data = dict(kwargs.get("extra") or {})
        component = self.extra.get("component") if self.extra else None
        if component:
            data.setdefault("component", component)
        kwargs["extra"] = {"data": data}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Context-aware logger for a module, tagged with its component."""
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component is not None else None},
    )


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Install a single stdout handler on the root logger.

    Safe to call more than once; previous root handlers are replaced.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "new_request_id",
]
