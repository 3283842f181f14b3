# ============================================================================
# FUNCTION APP STARTUP VALIDATION
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Function app - Cold start gate
# PURPOSE: Decide whether the retail endpoints are registered at all
# CREATED: 18 OCT 2026
# ============================================================================
"""
Startup Validation

Runs once at cold start, before function_app.py registers the retail
blueprint. Two steps, the second only if the first passed:

    settings  storage connection string or account name is set
    facade    the storage facade can be built from those settings

Neither step touches the network; backends are provisioned by the first
request that needs them. When a step fails, only /api/livez and
/api/readyz are registered and /api/readyz reports why.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from core.config import get_config
from core.errors import ConfigurationMissing
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.FUNCTION)


@dataclass
class ValidationResult:
    name: str
    passed: bool
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, name: str) -> "ValidationResult":
        return cls(name, True)


class StartupState:
    """Outcome of the most recent ``validate_startup()`` run."""

    STEPS = ("settings", "facade")

    def __init__(self):
        self.results: Dict[str, ValidationResult] = {
            step: ValidationResult(step, False, "NotRun", "Validation not yet run")
            for step in self.STEPS
        }

    def checks(self) -> List[ValidationResult]:
        return [self.results[step] for step in self.STEPS]

    @property
    def all_passed(self) -> bool:
        return all(result.passed for result in self.checks())

    def failed_checks(self) -> List[ValidationResult]:
        return [result for result in self.checks() if not result.passed]

    def failed_check_names(self) -> List[str]:
        return [result.name for result in self.failed_checks()]

    def to_dict(self) -> dict:
        return {
            "all_passed": self.all_passed,
            "checks": {
                result.name: {"passed": result.passed, "error": result.error_message}
                for result in self.checks()
            },
        }


STARTUP_STATE = StartupState()


def _check_settings() -> ValidationResult:
    if get_config().has_storage_config:
        return ValidationResult.ok("settings")
    return ValidationResult(
        "settings",
        False,
        "MissingEnvVar",
        "RETAIL_STORAGE_CONNECTION_STRING or RETAIL_STORAGE_ACCOUNT required",
    )


def _check_facade() -> ValidationResult:
    from function.blueprints.retail_bp import get_facade

    try:
        get_facade()
    except (ConfigurationMissing, ValueError) as e:
        # ValueError: malformed connection string
        return ValidationResult("facade", False, type(e).__name__, str(e))
    return ValidationResult.ok("facade")


_STEPS: Tuple[Tuple[str, Callable[[], ValidationResult]], ...] = (
    ("settings", _check_settings),
    ("facade", _check_facade),
)


def validate_startup(state: Optional[StartupState] = None) -> bool:
    """Run the startup steps in order, recording into ``state``."""
    state = state if state is not None else STARTUP_STATE
    blocked_by: Optional[str] = None

    for name, step in _STEPS:
        if blocked_by is None:
            result = step()
            if not result.passed:
                blocked_by = name
        else:
            result = ValidationResult(name, False, "Skipped", f"Skipped: {blocked_by} failed")
        state.results[name] = result
        logger.info(
            f"Startup {name}: "
            + ("passed" if result.passed else f"FAILED ({result.error_message})")
        )

    return state.all_passed


__all__ = ["STARTUP_STATE", "validate_startup", "ValidationResult", "StartupState"]
