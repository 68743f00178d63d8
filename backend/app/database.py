"""
Database session and base configuration.

Re-exports from inventory_core.db:
    from inventory_core.db import db, get_db, Base

Note: Database initialization is handled explicitly in main.py startup,
NOT at import time. This keeps configuration loading order predictable and
lets the readiness probe report an uninitialized database.
"""

from inventory_core.db import Base, db, get_db

__all__ = ["Base", "db", "get_db"]
