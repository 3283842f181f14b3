# ============================================================================
# HEALTH CHECK TESTS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Tests - Health plugins, executor and probe endpoints
# PURPOSE: Verify status aggregation, readiness rules and HTTP codes
# CREATED: 18 OCT 2026
# ============================================================================
"""
Health Check Tests

Uses asyncio.run for the executor and checks, FastAPI TestClient for the
probe endpoints. Each test builds its own registry.

Run with:
    pytest tests/test_health.py -v
"""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.config import AppConfig
from core.contracts import RemoteOperation, RemoteOutcome
from core.models import RemoteResult
from health import (
    HealthCheckCategory,
    HealthCheckExecutor,
    HealthCheckPlugin,
    HealthCheckRegistry,
    HealthCheckResult,
    HealthStatus,
    health_router,
)
from health.checks import (
    ConfigurationCheck,
    FunctionAppCheck,
    ProcessCheck,
    StorageCheck,
    register_portal_checks,
)
from services import FunctionGateway


class _Static(HealthCheckPlugin):
    """Check returning a fixed result."""

    def __init__(self, name, result, required=True):
        self.name = name
        self._result = result
        self.required_for_ready = required

    async def check(self):
        return self._result


class _Slow(HealthCheckPlugin):
    name = "slow"
    timeout_seconds = 0.05

    async def check(self):
        await asyncio.sleep(1)
        return HealthCheckResult.healthy()


class _Broken(HealthCheckPlugin):
    name = "broken"

    async def check(self):
        raise RuntimeError("kaput")


def _registry(*checks):
    registry = HealthCheckRegistry()
    for check in checks:
        registry.register(check)
    return registry


@pytest.fixture
def config():
    return AppConfig(
        storage_connection_string="UseDevelopmentStorage=true",
        functions_base_url="https://retail-func.azurewebsites.net",
        functions_key="s3cret",
    )


# ============================================================================
# CORE + EXECUTOR
# ============================================================================

class TestAggregation:

    def test_worst_status_wins(self):
        assert HealthStatus.aggregate([]) == HealthStatus.HEALTHY
        assert HealthStatus.aggregate(
            [HealthStatus.HEALTHY, HealthStatus.DEGRADED]
        ) == HealthStatus.DEGRADED
        assert HealthStatus.aggregate(
            [HealthStatus.UNHEALTHY, HealthStatus.DEGRADED]
        ) == HealthStatus.UNHEALTHY

    def test_priority_from_category(self):
        assert StorageCheck.priority == 20
        assert FunctionAppCheck.priority == 40
        assert ProcessCheck.category == HealthCheckCategory.STARTUP

    def test_checks_run_in_priority_order(self, config):
        registry = register_portal_checks(config, None, FunctionGateway(), _registry())
        registry.register(ProcessCheck())

        names = [c.name for c in registry.get_checks_by_priority()]

        assert names.index("configuration") < names.index("storage") < names.index("function_app")
        assert "function_app" not in [c.name for c in registry.get_required_checks()]


class TestExecutor:

    def test_timeout_becomes_unhealthy(self):
        result = asyncio.run(HealthCheckExecutor(_registry(_Slow())).execute_all())

        assert result.status == HealthStatus.UNHEALTHY
        assert result.checks["slow"].message.startswith("Timeout")

    def test_exception_becomes_unhealthy(self):
        result = asyncio.run(HealthCheckExecutor(_registry(_Broken())).execute_all())

        check = result.checks["broken"]
        assert check.status == HealthStatus.UNHEALTHY
        assert check.details == {"exception_type": "RuntimeError"}

    def test_required_ignores_optional_checks(self):
        registry = _registry(
            _Static("ok", HealthCheckResult.healthy()),
            _Static("optional", HealthCheckResult.unhealthy("down"), required=False),
        )

        result = asyncio.run(HealthCheckExecutor(registry).execute_required())

        assert result.status == HealthStatus.HEALTHY
        assert list(result.checks) == ["ok"]

    def test_single_unknown_is_none(self):
        assert asyncio.run(HealthCheckExecutor(_registry()).execute_single("nope")) is None


# ============================================================================
# PORTAL CHECKS
# ============================================================================

class TestPortalChecks:

    def test_configuration_levels(self, config):
        assert asyncio.run(ConfigurationCheck(config).check()).status == HealthStatus.HEALTHY

        no_functions = AppConfig(storage_connection_string="UseDevelopmentStorage=true")
        assert asyncio.run(ConfigurationCheck(no_functions).check()).status == HealthStatus.DEGRADED

        assert asyncio.run(ConfigurationCheck(AppConfig()).check()).status == HealthStatus.UNHEALTHY

    def test_configuration_hides_secrets(self, config):
        result = asyncio.run(ConfigurationCheck(config).check())
        assert "s3cret" not in str(result.to_dict())

    def test_storage_reports_provisioning(self, facade):
        facade.create_customer("Ada")

        result = asyncio.run(StorageCheck(facade).check())

        assert result.status == HealthStatus.HEALTHY
        assert result.details["provisioned"] == {
            "customerprofiles": True,
            "product-images": False,
            "order-queue": False,
            "contracts": False,
        }

    def test_storage_check_never_lists_data(self, facade, customers, images, contracts):
        for i in range(3):
            facade.create_customer(f"c{i}")

        asyncio.run(StorageCheck(facade).check())

        assert "list_all" not in customers.calls
        assert "list_names" not in images.calls
        assert "list_names" not in contracts.calls

    def test_storage_fault(self, facade, queue, backend_down):
        queue.fail_with = backend_down

        result = asyncio.run(StorageCheck(facade).check())

        assert result.status == HealthStatus.UNHEALTHY
        assert "connection refused" in result.message

    def test_storage_not_configured(self):
        assert asyncio.run(StorageCheck(None).check()).status == HealthStatus.UNHEALTHY

    def test_function_app_not_configured_is_degraded(self):
        result = asyncio.run(FunctionAppCheck(FunctionGateway()).check())
        assert result.status == HealthStatus.DEGRADED

    def test_function_app_unreachable_is_degraded(self):
        gateway = MagicMock(spec=FunctionGateway)
        gateway.is_configured = True
        gateway.base_url = "https://retail-func.azurewebsites.net"
        gateway.test_connection.return_value = RemoteResult.failure(
            RemoteOperation.ADD_CUSTOMER, RemoteOutcome.UNREACHABLE, "Function unreachable"
        )

        result = asyncio.run(FunctionAppCheck(gateway).check())

        assert result.status == HealthStatus.DEGRADED
        assert result.details["outcome"] == "unreachable"

    def test_function_app_answering_is_healthy(self):
        gateway = MagicMock(spec=FunctionGateway)
        gateway.is_configured = True
        gateway.base_url = "https://retail-func.azurewebsites.net"
        gateway.test_connection.return_value = RemoteResult.from_response(
            RemoteOperation.ADD_CUSTOMER, 401, "Unauthorized"
        )

        result = asyncio.run(FunctionAppCheck(gateway).check())

        assert result.status == HealthStatus.HEALTHY
        assert result.details["status_code"] == 401


# ============================================================================
# PROBE ENDPOINTS
# ============================================================================

class TestProbeEndpoints:

    def _client(self, registry):
        app = FastAPI()
        app.include_router(health_router)
        return TestClient(app), [
            patch("health.router.get_registry", return_value=registry),
            patch("health.executor.get_registry", return_value=registry),
        ]

    def _get(self, registry, path):
        client, patches = self._client(registry)
        with patches[0], patches[1]:
            return client.get(path)

    def test_livez(self):
        resp = self._get(_registry(), "/livez")
        assert resp.json()["status"] == "alive"

    def test_readyz_ready_despite_degraded_optional(self, facade):
        registry = _registry(StorageCheck(facade), FunctionAppCheck(FunctionGateway()))

        resp = self._get(registry, "/readyz")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ready"

    def test_readyz_not_ready_without_storage(self):
        resp = self._get(_registry(StorageCheck(None)), "/readyz")

        assert resp.status_code == 503
        assert "storage" in resp.json()["checks"]

    def test_health_degraded_is_206(self, facade):
        registry = _registry(StorageCheck(facade), FunctionAppCheck(FunctionGateway()))

        resp = self._get(registry, "/health")

        body = resp.json()
        assert resp.status_code == 206
        assert body["summary"]["remote"] == {"healthy": 0, "degraded": 1, "unhealthy": 0}
        assert body["summary"]["storage"]["healthy"] == 1

    def test_single_check(self, facade):
        registry = _registry(StorageCheck(facade))

        assert self._get(registry, "/health/storage").status_code == 200
        assert self._get(registry, "/health/nope").status_code == 404
