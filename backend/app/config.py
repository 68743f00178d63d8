"""
Application configuration using Pydantic settings.

Re-exports the unified inventory_core.config module so backend code can keep
importing settings from the app package.

For new code, prefer importing directly from inventory_core.config:
    from inventory_core.config import get_settings, Settings
"""

from inventory_core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
