"""
Location SQLAlchemy models: geography, nodes, installations and their catalogs.
"""

import enum
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CatalogMixin, IdMixin, TimestampMixin, unique_active_index, utc_now


class AmenityCategory(str, enum.Enum):
    BASIC = "basic"
    COMFORT = "comfort"
    TECHNOLOGY = "technology"
    SECURITY = "security"
    ACCESSIBILITY = "accessibility"
    SERVICES = "services"


class AmenityType(str, enum.Enum):
    BUS = "bus"
    INSTALLATION = "installation"
    SERVICE_TYPE = "service_type"


# =============================================================================
# Join tables
# =============================================================================

label_nodes = Table(
    "label_nodes",
    Base.metadata,
    Column("label_id", ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True),
    Column("node_id", ForeignKey("nodes.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utc_now),
)

installation_amenities = Table(
    "installation_amenities",
    Base.metadata,
    Column("installation_id", ForeignKey("installations.id", ondelete="CASCADE"), primary_key=True),
    Column("amenity_id", ForeignKey("amenities.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utc_now),
)

installation_type_event_types = Table(
    "installation_type_event_types",
    Base.metadata,
    Column(
        "installation_type_id",
        ForeignKey("installation_types.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("event_type_id", ForeignKey("event_types.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utc_now),
)

population_cities = Table(
    "population_cities",
    Base.metadata,
    Column("population_id", ForeignKey("populations.id", ondelete="CASCADE"), primary_key=True),
    Column("city_id", ForeignKey("cities.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utc_now),
)


# =============================================================================
# Geography
# =============================================================================


class Country(CatalogMixin, Base):
    """
    Country catalog entry.

    Attributes:
        name: Display name, unique among non-deleted countries
        code: ISO-like short code, unique among non-deleted countries
    """

    __tablename__ = "countries"
    __table_args__ = (
        unique_active_index("uq_countries_name_active", "name"),
        unique_active_index("uq_countries_code_active", "code"),
    )

    name: Mapped[str] = mapped_column(String(100))
    code: Mapped[str] = mapped_column(String(10))

    states: Mapped[list["State"]] = relationship("State", back_populates="country")


class State(CatalogMixin, Base):
    """
    State (first-level subdivision) of a country.

    Attributes:
        code: Unique among non-deleted states
        name: Unique per country
    """

    __tablename__ = "states"
    __table_args__ = (
        unique_active_index("uq_states_code_active", "code"),
        unique_active_index("uq_states_country_name_active", "country_id", "name"),
    )

    name: Mapped[str] = mapped_column(String(100))
    code: Mapped[str] = mapped_column(String(10))
    country_id: Mapped[int] = mapped_column(ForeignKey("countries.id"), index=True)

    country: Mapped["Country"] = relationship("Country", back_populates="states")
    cities: Mapped[list["City"]] = relationship("City", back_populates="state")


class City(CatalogMixin, Base):
    """
    City within a state. The slug is derived from the name and state code.
    """

    __tablename__ = "cities"
    __table_args__ = (unique_active_index("uq_cities_slug_active", "slug"),)

    name: Mapped[str] = mapped_column(String(100))
    slug: Mapped[str] = mapped_column(String(150))
    timezone: Mapped[str] = mapped_column(String(50), default="UTC")
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    state_id: Mapped[int] = mapped_column(ForeignKey("states.id"), index=True)

    state: Mapped["State"] = relationship("State", back_populates="cities")


class Population(CatalogMixin, Base):
    """Group of cities served as one market."""

    __tablename__ = "populations"
    __table_args__ = (unique_active_index("uq_populations_code_active", "code"),)

    code: Mapped[str] = mapped_column(String(20))
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    cities: Mapped[list["City"]] = relationship("City", secondary=population_cities)


# =============================================================================
# Nodes & installations
# =============================================================================


class Node(CatalogMixin, Base):
    """
    Geographic point where buses stop (terminal, station, stop).

    Attributes:
        code: Unique among non-deleted nodes
        slug: Generated from name and code, unique among non-deleted nodes
        radius: Geofence radius in metres, at least 1
        installation_id: Physical installation at this node (optional)
    """

    __tablename__ = "nodes"
    __table_args__ = (
        unique_active_index("uq_nodes_code_active", "code"),
        unique_active_index("uq_nodes_slug_active", "slug"),
    )

    code: Mapped[str] = mapped_column(String(20))
    name: Mapped[str] = mapped_column(String(100))
    slug: Mapped[str] = mapped_column(String(150))
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    radius: Mapped[float] = mapped_column(Float)
    city_id: Mapped[int] = mapped_column(ForeignKey("cities.id"), index=True)
    population_id: Mapped[int | None] = mapped_column(ForeignKey("populations.id"), nullable=True)
    installation_id: Mapped[int | None] = mapped_column(ForeignKey("installations.id"), nullable=True)

    city: Mapped["City"] = relationship("City")
    population: Mapped[Optional["Population"]] = relationship("Population")
    installation: Mapped[Optional["Installation"]] = relationship("Installation")
    labels: Mapped[list["Label"]] = relationship(
        "Label", secondary=label_nodes, back_populates="nodes"
    )


class Installation(CatalogMixin, Base):
    __tablename__ = "installations"

    name: Mapped[str] = mapped_column(String(150))
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    installation_type_id: Mapped[int | None] = mapped_column(
        ForeignKey("installation_types.id"), nullable=True
    )

    installation_type: Mapped[Optional["InstallationType"]] = relationship("InstallationType")
    amenities: Mapped[list["Amenity"]] = relationship("Amenity", secondary=installation_amenities)


class InstallationType(CatalogMixin, Base):
    """
    Kind of installation (terminal, office, workshop).

    Attributes:
        system_locked: Seeded types that cannot be edited or deleted
    """

    __tablename__ = "installation_types"
    __table_args__ = (unique_active_index("uq_installation_types_code_active", "code"),)

    name: Mapped[str] = mapped_column(String(100))
    code: Mapped[str] = mapped_column(String(20))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    system_locked: Mapped[bool] = mapped_column(Boolean, default=False)

    event_types: Mapped[list["EventType"]] = relationship(
        "EventType", secondary=installation_type_event_types
    )


class EventType(CatalogMixin, Base):
    """
    Operational event that can happen at an installation (boarding, fuelling).

    Attributes:
        base_time: Expected duration in minutes
        needs_cost / needs_quantity: Whether the event captures those values
        integration: Event is reported by an external integration
    """

    __tablename__ = "event_types"
    __table_args__ = (unique_active_index("uq_event_types_code_active", "code"),)

    name: Mapped[str] = mapped_column(String(100))
    code: Mapped[str] = mapped_column(String(20))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_time: Mapped[int] = mapped_column(Integer, default=0)
    needs_cost: Mapped[bool] = mapped_column(Boolean, default=False)
    needs_quantity: Mapped[bool] = mapped_column(Boolean, default=False)
    integration: Mapped[bool] = mapped_column(Boolean, default=False)


class Label(CatalogMixin, Base):
    __tablename__ = "labels"
    __table_args__ = (unique_active_index("uq_labels_name_active", "name"),)

    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(7))

    nodes: Mapped[list["Node"]] = relationship(
        "Node", secondary=label_nodes, back_populates="labels"
    )


class Amenity(CatalogMixin, Base):
    """
    Amenity offered by a bus, an installation or a service type.

    Attributes:
        category: One of AmenityCategory
        amenity_type: Which kind of entity the amenity applies to (AmenityType)
        icon_name: kebab-case icon identifier
    """

    __tablename__ = "amenities"
    __table_args__ = (
        unique_active_index("uq_amenities_name_active", "name"),
        Index("ix_amenities_type_category", "amenity_type", "category"),
    )

    name: Mapped[str] = mapped_column(String(100))
    category: Mapped[str] = mapped_column(String(30))
    amenity_type: Mapped[str] = mapped_column(String(30), default=AmenityType.BUS.value)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon_name: Mapped[str | None] = mapped_column(String(50), nullable=True)


# =============================================================================
# Installation schemas & properties
# =============================================================================


class InstallationSchemaFieldType(str, enum.Enum):
    STRING = "string"
    LONG_TEXT = "long_text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"


class InstallationSchema(CatalogMixin, Base):
    """
    Typed property definition for installations of one installation type.

    Attributes:
        name: Property key, unique within the installation type
        type: One of InstallationSchemaFieldType
        options: ``{"enumValues": [...]}`` for enum fields, empty otherwise
        required: Installations of the type must carry a value
    """

    __tablename__ = "installation_schemas"
    __table_args__ = (
        unique_active_index("uq_installation_schemas_type_name_active", "installation_type_id", "name"),
    )

    name: Mapped[str] = mapped_column(String(100))
    label: Mapped[str | None] = mapped_column(String(150), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20))
    options: Mapped[dict] = mapped_column(JSON, default=dict)
    required: Mapped[bool] = mapped_column(Boolean, default=False)
    installation_type_id: Mapped[int] = mapped_column(
        ForeignKey("installation_types.id", ondelete="CASCADE"), index=True
    )

    installation_type: Mapped["InstallationType"] = relationship("InstallationType")


class InstallationProperty(IdMixin, TimestampMixin, Base):
    """Value of one schema field for one installation, stored as text."""

    __tablename__ = "installation_properties"
    __table_args__ = (
        UniqueConstraint(
            "installation_id", "installation_schema_id", name="uq_installation_properties_schema"
        ),
    )

    installation_id: Mapped[int] = mapped_column(
        ForeignKey("installations.id", ondelete="CASCADE"), index=True
    )
    installation_schema_id: Mapped[int] = mapped_column(
        ForeignKey("installation_schemas.id", ondelete="CASCADE")
    )
    value: Mapped[str | None] = mapped_column(Text, nullable=True)

    schema: Mapped["InstallationSchema"] = relationship("InstallationSchema")
