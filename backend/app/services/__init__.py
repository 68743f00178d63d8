"""
Backend services for Fleet Inventory.
"""

from . import (
    audit_service,
    crud_service,
    driver_record_service,
    installation_property_service,
    seat_diagram_service,
)

__all__ = [
    "audit_service",
    "crud_service",
    "driver_record_service",
    "installation_property_service",
    "seat_diagram_service",
]
