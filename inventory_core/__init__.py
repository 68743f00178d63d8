"""
Fleet Inventory Core Library.

This package holds everything shared by the API layer: configuration,
database management, models, repositories, domain validation and logging.

Usage:
    # Database
    from inventory_core.db import db, get_db
    from inventory_core.models import Country, Bus, Driver
    from inventory_core.repositories import CountryRepository

    # Config
    from inventory_core.config import get_settings, Settings

    # Logging
    from inventory_core.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"

# Users should import directly from submodules:
#   from inventory_core.db import db
#   from inventory_core.config import get_settings
#   from inventory_core.logging import get_logger
