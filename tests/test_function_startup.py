# ============================================================================
# FUNCTION APP STARTUP TESTS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Tests - Cold start gate
# PURPOSE: Verify which startup steps run and what /api/readyz would report
# CREATED: 18 OCT 2026
# ============================================================================
"""
Function App Startup Tests

Run with:
    pytest tests/test_function_startup.py -v
"""

from unittest.mock import patch

import pytest

from core.errors import ConfigurationMissing
from function.startup import StartupState, validate_startup

STORAGE_VARS = (
    "RETAIL_STORAGE_CONNECTION_STRING",
    "AZURE_STORAGE_CONNECTION_STRING",
    "RETAIL_STORAGE_ACCOUNT",
)


@pytest.fixture
def no_storage_env(monkeypatch):
    for var in STORAGE_VARS:
        monkeypatch.delenv(var, raising=False)


def test_fresh_state_reports_not_run():
    state = StartupState()

    assert not state.all_passed
    assert state.failed_check_names() == ["settings", "facade"]


def test_missing_settings_skips_facade(no_storage_env):
    state = StartupState()

    with patch("function.blueprints.retail_bp.get_facade") as get_facade:
        assert validate_startup(state) is False

    get_facade.assert_not_called()
    assert state.results["settings"].error_type == "MissingEnvVar"
    assert state.results["facade"].error_message == "Skipped: settings failed"


def test_all_steps_pass(monkeypatch):
    monkeypatch.setenv("RETAIL_STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
    state = StartupState()

    with patch("function.blueprints.retail_bp.get_facade"):
        assert validate_startup(state) is True

    assert state.failed_checks() == []
    assert state.to_dict()["checks"]["facade"] == {"passed": True, "error": None}


def test_facade_failure_is_recorded(monkeypatch):
    monkeypatch.setenv("RETAIL_STORAGE_ACCOUNT", "retailacct")
    state = StartupState()

    with patch(
        "function.blueprints.retail_bp.get_facade",
        side_effect=ConfigurationMissing("bad storage settings"),
    ):
        assert validate_startup(state) is False

    assert state.failed_check_names() == ["facade"]
    assert state.results["facade"].error_type == "ConfigurationMissing"
