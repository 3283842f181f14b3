# ============================================================================
# VERSION - RETAIL STORAGE PORTAL
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# ============================================================================
"""
Version information for the Retail Storage Portal.

Single source of truth for the application version, shared by the FastAPI
portal and the function app.
"""
# Version format: major.minor.patch.build
__version__ = "0.1.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-18"

EPOCH = 1
CODENAME = "Retail Storage"
