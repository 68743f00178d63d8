"""
Unified SQLAlchemy models for Fleet Inventory.

Single source of truth for all database models.

Usage:
    from inventory_core.models import Country, Bus, Driver
"""

from .base import Base
from .fleet import (
    Bus,
    BusModel,
    BusStatus,
    Chromatic,
    Driver,
    DriverMedicalCheck,
    DriverStatus,
    DriverTimeOff,
    LicensePlateType,
    MedicalCheckResult,
    MedicalCheckSource,
    SeatDiagram,
    SeatDiagramSpace,
    Technology,
    TimeOffType,
    bus_technologies,
)
from .locations import (
    Amenity,
    AmenityCategory,
    AmenityType,
    City,
    Country,
    EventType,
    Installation,
    InstallationProperty,
    InstallationSchema,
    InstallationSchemaFieldType,
    InstallationType,
    Label,
    Node,
    Population,
    State,
    installation_amenities,
    installation_type_event_types,
    label_nodes,
    population_cities,
)
from .operators import BusLine, ServiceType, Transporter
from .users import Audit, Permission, Role, User, role_permissions, user_roles

__all__ = [
    # Base
    "Base",
    # Locations
    "Country",
    "State",
    "City",
    "Population",
    "Node",
    "Installation",
    "InstallationType",
    "InstallationSchema",
    "InstallationSchemaFieldType",
    "InstallationProperty",
    "EventType",
    "Label",
    "Amenity",
    "AmenityCategory",
    "AmenityType",
    "label_nodes",
    "installation_amenities",
    "installation_type_event_types",
    "population_cities",
    # Operators
    "Transporter",
    "ServiceType",
    "BusLine",
    # Fleet
    "Technology",
    "Chromatic",
    "SeatDiagram",
    "SeatDiagramSpace",
    "BusModel",
    "Bus",
    "BusStatus",
    "LicensePlateType",
    "Driver",
    "DriverStatus",
    "DriverTimeOff",
    "TimeOffType",
    "DriverMedicalCheck",
    "MedicalCheckResult",
    "MedicalCheckSource",
    "bus_technologies",
    # Users
    "User",
    "Role",
    "Permission",
    "Audit",
    "role_permissions",
    "user_roles",
]
