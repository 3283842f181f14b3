# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Health check execution
# PURPOSE: Run checks under per-check and per-run time limits
# CREATED: 18 OCT 2026
# ============================================================================
"""
Health Check Executor

Checks run one at a time in priority order. Each gets its own
``timeout_seconds``, clipped to whatever is left of the run's
``overall_timeout``. Once the run budget is used up, the remaining checks
are reported unhealthy without being started.

A check that times out or raises never escapes the executor: it becomes an
unhealthy result and the run continues.
"""

import asyncio
import time
from typing import Dict, List, Optional

from core.logging import ComponentType, get_logger, log_context
from health.core import (
    AggregatedHealthResult,
    HealthCheckPlugin,
    HealthCheckResult,
    HealthStatus,
)
from health.registry import HealthCheckRegistry, get_registry

logger = get_logger(__name__, ComponentType.HEALTH)

BUDGET_EXHAUSTED = "Skipped: overall timeout exceeded"


def _elapsed_ms(started: float) -> float:
    return (time.monotonic() - started) * 1000


class HealthCheckExecutor:

    def __init__(
        self,
        registry: Optional[HealthCheckRegistry] = None,
        overall_timeout: float = 60.0,
    ):
        self.registry = registry if registry is not None else get_registry()
        self.overall_timeout = overall_timeout

    async def execute_all(self) -> AggregatedHealthResult:
        return await self._run(self.registry.get_checks_by_priority())

    async def execute_required(self) -> AggregatedHealthResult:
        return await self._run(self.registry.get_required_checks())

    async def execute_single(self, name: str) -> Optional[HealthCheckResult]:
        """None when no check is registered under ``name``."""
        check = self.registry.get(name)
        if check is None:
            return None
        return await self._run_one(check, check.timeout_seconds)

    async def _run(self, checks: List[HealthCheckPlugin]) -> AggregatedHealthResult:
        started = time.monotonic()
        deadline = started + self.overall_timeout
        results: Dict[str, HealthCheckResult] = {}

        for check in checks:
            left = deadline - time.monotonic()
            if left <= 0:
                logger.warning(f"Run budget of {self.overall_timeout}s spent, skipping {check.name}")
                results[check.name] = HealthCheckResult.unhealthy(BUDGET_EXHAUSTED)
            else:
                results[check.name] = await self._run_one(check, min(check.timeout_seconds, left))

        return AggregatedHealthResult(
            status=HealthStatus.aggregate(r.status for r in results.values()),
            checks=results,
            total_duration_ms=_elapsed_ms(started),
        )

    async def _run_one(self, check: HealthCheckPlugin, timeout: float) -> HealthCheckResult:
        started = time.monotonic()

        with log_context(operation=f"health:{check.name}"):
            try:
                result = await asyncio.wait_for(check.check(), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning(f"No answer within {timeout}s")
                result = HealthCheckResult.unhealthy(f"Timeout after {timeout}s")
            except Exception as e:
                logger.error(f"Check raised {type(e).__name__}: {e}")
                result = HealthCheckResult.from_exception(e)

            result.duration_ms = _elapsed_ms(started)
            logger.debug(f"{result.status.value} in {result.duration_ms:.1f}ms")
        return result


__all__ = ["HealthCheckExecutor", "BUDGET_EXHAUSTED"]
