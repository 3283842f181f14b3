# ============================================================================
# FUNCTION APP MODULE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Function app - Azure Function App components
# PURPOSE: Remote execution path for the retail portal
# CREATED: 18 OCT 2026
# ============================================================================
"""
Function App Module

Components specific to the Azure Function App deployment:
- Blueprints (HTTP endpoints)
- Startup validation
"""

__all__ = []
