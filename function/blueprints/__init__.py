# ============================================================================
# FUNCTION APP BLUEPRINTS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Function app - HTTP endpoint blueprints
# PURPOSE: Azure Functions V2 blueprints for HTTP routes
# CREATED: 18 OCT 2026
# ============================================================================
"""
Function App Blueprints

Registered by function_app.py only when startup validation passes:

    from function.blueprints.retail_bp import retail_bp
"""

__all__ = []
