# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Health check registration
# PURPOSE: Hold the checks the probe endpoints run
# CREATED: 18 OCT 2026
# ============================================================================
"""
Health Check Registry

Two ways in:

- ``@register_check(...)`` on a class whose constructor takes no
  arguments (ProcessCheck). The class is instantiated at import time.
- ``registry.register(instance)`` for checks built at startup around the
  storage facade or the function gateway (register_portal_checks).

Names are unique; registering a name again replaces the earlier check.
"""

from typing import Callable, Dict, List, Optional, Type, TypeVar

from core.logging import ComponentType, get_logger
from health.core import HealthCheckCategory, HealthCheckPlugin

logger = get_logger(__name__, ComponentType.HEALTH)

CheckT = TypeVar("CheckT", bound=Type[HealthCheckPlugin])


class HealthCheckRegistry:
    """Checks by name."""

    def __init__(self):
        self._by_name: Dict[str, HealthCheckPlugin] = {}

    def register(self, check: HealthCheckPlugin) -> None:
        replaced = self._by_name.get(check.name)
        if replaced is not None:
            logger.warning(
                f"Health check '{check.name}' replaced "
                f"({type(replaced).__name__} -> {type(check).__name__})"
            )
        self._by_name[check.name] = check
        logger.debug(f"Health check '{check.name}' registered at priority {check.priority}")

    def unregister(self, name: str) -> bool:
        return self._by_name.pop(name, None) is not None

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        return self._by_name.get(name)

    def get_checks_by_priority(self) -> List[HealthCheckPlugin]:
        """Run order: priority, then registration order."""
        return sorted(self._by_name.values(), key=lambda check: check.priority)

    def get_required_checks(self) -> List[HealthCheckPlugin]:
        """The subset that gates /readyz, in run order."""
        return [check for check in self.get_checks_by_priority() if check.required_for_ready]

    def clear(self) -> None:
        self._by_name.clear()

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Process-wide registry used by the probe endpoints."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def register_check(
    category: Optional[str] = None,
    priority: Optional[int] = None,
    timeout_seconds: Optional[float] = None,
    required_for_ready: Optional[bool] = None,
) -> Callable[[CheckT], CheckT]:
    """
    Class decorator: apply overrides, then register one instance globally.

    Example:
        @register_check(category="startup", timeout_seconds=1.0)
        class ProcessCheck(HealthCheckPlugin):
            name = "process"
            ...
    """
    def decorator(cls: CheckT) -> CheckT:
        if category is not None:
            cls.category = HealthCheckCategory(category)
            cls.priority = cls.category.default_priority
        overrides = {
            "priority": priority,
            "timeout_seconds": timeout_seconds,
            "required_for_ready": required_for_ready,
        }
        for attr, value in overrides.items():
            if value is not None:
                setattr(cls, attr, value)

        get_registry().register(cls())
        return cls

    return decorator


__all__ = [
    "HealthCheckRegistry",
    "get_registry",
    "register_check",
]
