# ============================================================================
# APPLICATION CONFIGURATION
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - Configuration management
# PURPOSE: Environment-based configuration for the portal and function app
# CREATED: 18 OCT 2026
# ============================================================================
"""
Application Configuration

Loads configuration from environment variables with sensible defaults.
Shared by the FastAPI portal (main.py) and the Azure Functions app
(function_app.py).

Storage auth:
- RETAIL_STORAGE_CONNECTION_STRING (or AZURE_STORAGE_CONNECTION_STRING)
  -> connection string auth
- Otherwise RETAIL_STORAGE_ACCOUNT -> DefaultAzureCredential /
  ManagedIdentityCredential against https://<account>.<kind>.core.windows.net
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.contracts import ExecutionPath

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Configuration for the retail storage portal."""

    # Storage account
    storage_connection_string: Optional[str] = None
    storage_account_name: str = ""

    # Remote function app
    functions_base_url: str = ""
    functions_key: str = ""

    # Handler strategy when the caller does not choose one
    default_path: ExecutionPath = ExecutionPath.REMOTE

    # App Info
    version: str = "0.1.0"
    service_name: str = "retail-storage-portal"

    def __post_init__(self):
        self.functions_base_url = (self.functions_base_url or "").rstrip("/")
        self.functions_key = self.functions_key or ""
        if not isinstance(self.default_path, ExecutionPath):
            self.default_path = ExecutionPath(str(self.default_path).lower())

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""
        from __version__ import __version__

        return cls(
            storage_connection_string=(
                os.environ.get("RETAIL_STORAGE_CONNECTION_STRING")
                or os.environ.get("AZURE_STORAGE_CONNECTION_STRING")
            ),
            storage_account_name=os.environ.get("RETAIL_STORAGE_ACCOUNT", ""),
            functions_base_url=os.environ.get("RETAIL_FUNCTIONS_BASE_URL", ""),
            functions_key=os.environ.get("RETAIL_FUNCTIONS_KEY", ""),
            default_path=os.environ.get("RETAIL_DEFAULT_PATH", ExecutionPath.REMOTE.value),
            version=os.environ.get("APP_VERSION", __version__),
            service_name=os.environ.get("SERVICE_NAME", "retail-storage-portal"),
        )

    @property
    def has_storage_config(self) -> bool:
        """Check if a storage account is configured (either auth mode)."""
        return bool(self.storage_connection_string or self.storage_account_name)

    @property
    def has_functions_config(self) -> bool:
        """Check if the remote function app is fully configured."""
        return bool(self.functions_base_url and self.functions_key)

    def summary(self) -> Dict[str, Any]:
        """Configuration summary safe for diagnostics (no secrets)."""
        return {
            "storage_connection_string": "SET" if self.storage_connection_string else "MISSING",
            "storage_account": self.storage_account_name or None,
            "functions_base_url": self.functions_base_url or "MISSING",
            "functions_key": "SET" if self.functions_key else "MISSING",
            "default_path": self.default_path.value,
            "version": self.version,
        }


# Global config singleton
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
        logger.info(
            f"Configuration loaded (storage={'set' if _config.has_storage_config else 'missing'}, "
            f"functions={'set' if _config.has_functions_config else 'missing'})"
        )
    return _config


def reset_config() -> None:
    """Reset configuration (for testing)."""
    global _config
    _config = None


__all__ = ["AppConfig", "get_config", "reset_config"]
