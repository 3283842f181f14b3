# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the retail storage portal.
"""

from core.config.defaults import (
    MB,
    ResourceNames,
    UploadRule,
    IMAGE_UPLOAD_RULE,
    CONTRACT_UPLOAD_RULE,
    QueueDefaults,
    get_defaults,
    reset_defaults,
)
from core.config.settings import AppConfig, get_config, reset_config

__all__ = [
    "MB",
    "ResourceNames",
    "UploadRule",
    "IMAGE_UPLOAD_RULE",
    "CONTRACT_UPLOAD_RULE",
    "QueueDefaults",
    "get_defaults",
    "reset_defaults",
    "AppConfig",
    "get_config",
    "reset_config",
]
