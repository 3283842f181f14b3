# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Probe result types and check interface
# PURPOSE: What a portal health check returns and how results combine
# CREATED: 18 OCT 2026
# ============================================================================
"""
Health Check Core Types

A check answers with one of three levels; combining results keeps the
worst one:

    healthy    the component works
    degraded   the portal still serves requests (function app missing,
               requests fall back to the direct path)
    unhealthy  the portal cannot serve requests (storage unreachable)

Checks are grouped by what they look at. The group fixes the default run
order: startup (10), storage (20), remote (40).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional


class HealthStatus(str, Enum):
    """Outcome level of a check."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def aggregate(cls, statuses: Iterable["HealthStatus"]) -> "HealthStatus":
        """Worst of ``statuses``; healthy when there are none."""
        return max(statuses, key=_SEVERITY.__getitem__, default=cls.HEALTHY)


_SEVERITY = {
    HealthStatus.HEALTHY: 0,
    HealthStatus.DEGRADED: 1,
    HealthStatus.UNHEALTHY: 2,
}


class HealthCheckCategory(str, Enum):
    """What a check looks at."""
    STARTUP = "startup"
    STORAGE = "storage"
    REMOTE = "remote"

    @property
    def default_priority(self) -> int:
        return _RUN_ORDER[self]


_RUN_ORDER = {
    HealthCheckCategory.STARTUP: 10,
    HealthCheckCategory.STORAGE: 20,
    HealthCheckCategory.REMOTE: 40,
}


@dataclass
class HealthCheckResult:
    """Answer of a single check. ``duration_ms`` is filled in by the executor."""
    status: HealthStatus
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def healthy(cls, message: Optional[str] = None, **details) -> "HealthCheckResult":
        return cls(HealthStatus.HEALTHY, message, details)

    @classmethod
    def degraded(cls, message: str, **details) -> "HealthCheckResult":
        return cls(HealthStatus.DEGRADED, message, details)

    @classmethod
    def unhealthy(cls, message: str, **details) -> "HealthCheckResult":
        return cls(HealthStatus.UNHEALTHY, message, details)

    @classmethod
    def from_exception(cls, e: Exception) -> "HealthCheckResult":
        return cls.unhealthy(str(e), exception_type=type(e).__name__)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": self.status.value}
        if self.message:
            body["message"] = self.message
        if self.details:
            body["details"] = self.details
        body["duration_ms"] = round(self.duration_ms, 2)
        return body


@dataclass
class AggregatedHealthResult:
    """Results of one executor run, keyed by check name in run order."""
    status: HealthStatus
    checks: Dict[str, HealthCheckResult]
    total_duration_ms: float
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def failing(self) -> Dict[str, Dict[str, Any]]:
        """Unhealthy checks only, as response dicts."""
        return {
            name: result.to_dict()
            for name, result in self.checks.items()
            if result.status is HealthStatus.UNHEALTHY
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "checks": {name: result.to_dict() for name, result in self.checks.items()},
            "total_duration_ms": round(self.total_duration_ms, 2),
            "checked_at": self.checked_at.isoformat(),
        }


class HealthCheckPlugin(ABC):
    """
    A named probe of one portal component.

    Subclasses set ``name`` and ``category`` and implement ``check()``.
    ``priority`` defaults to the category's run order. Checks with
    ``required_for_ready = False`` show up in /health but never block
    /readyz. Storage SDK and httpx calls are blocking: run them with
    ``asyncio.to_thread``.
    """

    name: str = "unnamed"
    category: HealthCheckCategory = HealthCheckCategory.STARTUP
    priority: int = 0
    timeout_seconds: float = 10.0
    required_for_ready: bool = True

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not cls.priority:
            cls.priority = cls.category.default_priority

    @abstractmethod
    async def check(self) -> HealthCheckResult:
        ...


__all__ = [
    "HealthStatus",
    "HealthCheckCategory",
    "HealthCheckResult",
    "AggregatedHealthResult",
    "HealthCheckPlugin",
]
