"""
Repository layer for Fleet Inventory.

Usage:
    from inventory_core.repositories import CountryRepository

    with db.session() as session:
        repo = CountryRepository(session)
        country = repo.create(name="Mexico", code="MX")
"""

from .base import BaseRepository, UniqueField
from .fleet import (
    BusModelRepository,
    BusRepository,
    ChromaticRepository,
    DriverMedicalCheckRepository,
    DriverRepository,
    DriverTimeOffRepository,
    SeatDiagramRepository,
    SeatDiagramSpaceRepository,
    TechnologyRepository,
)
from .locations import (
    AmenityRepository,
    CityRepository,
    CountryRepository,
    EventTypeRepository,
    InstallationPropertyRepository,
    InstallationRepository,
    InstallationSchemaRepository,
    InstallationTypeRepository,
    LabelRepository,
    NodeRepository,
    PopulationRepository,
    StateRepository,
)
from .operators import BusLineRepository, ServiceTypeRepository, TransporterRepository
from .scopes import COMMON_SCOPES, ScopedRepository, with_scopes
from .users import AuditRepository, PermissionRepository, RoleRepository, UserRepository

__all__ = [
    "BaseRepository",
    "UniqueField",
    "ScopedRepository",
    "with_scopes",
    "COMMON_SCOPES",
    # Locations
    "CountryRepository",
    "StateRepository",
    "CityRepository",
    "PopulationRepository",
    "NodeRepository",
    "InstallationRepository",
    "InstallationTypeRepository",
    "InstallationSchemaRepository",
    "InstallationPropertyRepository",
    "EventTypeRepository",
    "LabelRepository",
    "AmenityRepository",
    # Operators
    "TransporterRepository",
    "ServiceTypeRepository",
    "BusLineRepository",
    # Fleet
    "TechnologyRepository",
    "ChromaticRepository",
    "BusModelRepository",
    "SeatDiagramRepository",
    "SeatDiagramSpaceRepository",
    "BusRepository",
    "DriverRepository",
    "DriverTimeOffRepository",
    "DriverMedicalCheckRepository",
    # Users
    "UserRepository",
    "RoleRepository",
    "PermissionRepository",
    "AuditRepository",
]
