"""
API routers, one module per inventory area.
"""

from . import fleet, locations, operators, seat_diagrams, users

__all__ = ["fleet", "locations", "operators", "seat_diagrams", "users"]
