"""
Fleet SQLAlchemy models: buses, drivers, seat diagrams and their catalogs.
"""

import enum
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
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


class BusStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    MAINTENANCE = "MAINTENANCE"
    REPAIR = "REPAIR"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    RESERVED = "RESERVED"
    IN_TRANSIT = "IN_TRANSIT"
    RETIRED = "RETIRED"


class LicensePlateType(str, enum.Enum):
    NATIONAL = "NATIONAL"
    INTERNATIONAL = "INTERNATIONAL"
    TOURISM = "TOURISM"


class DriverStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"
    IN_TRAINING = "IN_TRAINING"
    PROBATION = "PROBATION"


class TimeOffType(str, enum.Enum):
    VACATION = "VACATION"
    LEAVE = "LEAVE"
    SICK_LEAVE = "SICK_LEAVE"
    PERSONAL_DAY = "PERSONAL_DAY"
    OTHER = "OTHER"


class MedicalCheckResult(str, enum.Enum):
    FIT = "FIT"
    LIMITED = "LIMITED"
    UNFIT = "UNFIT"


class MedicalCheckSource(str, enum.Enum):
    MANUAL = "MANUAL"


bus_technologies = Table(
    "bus_technologies",
    Base.metadata,
    Column("bus_id", ForeignKey("buses.id", ondelete="CASCADE"), primary_key=True),
    Column("technology_id", ForeignKey("technologies.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utc_now),
)


# =============================================================================
# Catalogs
# =============================================================================


class Technology(CatalogMixin, Base):
    __tablename__ = "technologies"
    __table_args__ = (unique_active_index("uq_technologies_name_active", "name"),)

    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    provider: Mapped[str | None] = mapped_column(String(100), nullable=True)
    version: Mapped[str | None] = mapped_column(String(50), nullable=True)


class Chromatic(CatalogMixin, Base):
    """Paint scheme applied to a bus body."""

    __tablename__ = "chromatics"
    __table_args__ = (unique_active_index("uq_chromatics_name_active", "name"),)

    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(512), nullable=True)


# =============================================================================
# Seat diagrams
# =============================================================================


class SeatDiagram(CatalogMixin, Base):
    """
    Seat layout shared by bus models and buses.

    Attributes:
        seats_per_floor: Quick configuration the layout was generated from
        total_seats: Seat spaces currently in the layout
        is_factory_default: Layout shipped with a bus model
    """

    __tablename__ = "seat_diagrams"
    __table_args__ = (unique_active_index("uq_seat_diagrams_name_active", "name"),)

    name: Mapped[str] = mapped_column(String(150))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_capacity: Mapped[int] = mapped_column(Integer)
    num_floors: Mapped[int] = mapped_column(Integer, default=1)
    seats_per_floor: Mapped[list] = mapped_column(JSON, default=list)
    total_seats: Mapped[int] = mapped_column(Integer, default=0)
    allows_adjacent_seat: Mapped[bool] = mapped_column(Boolean, default=False)
    is_factory_default: Mapped[bool] = mapped_column(Boolean, default=False)

    spaces: Mapped[list["SeatDiagramSpace"]] = relationship(
        "SeatDiagramSpace",
        back_populates="seat_diagram",
        cascade="all, delete-orphan",
        order_by="(SeatDiagramSpace.floor_number, SeatDiagramSpace.position_y, SeatDiagramSpace.position_x)",
    )


class SeatDiagramSpace(IdMixin, TimestampMixin, Base):
    """
    One cell of a seat diagram grid.

    Attributes:
        position_x: 0-based column from the left window
        position_y: 1-based row from the front
        space_type: seat, hallway, bathroom or empty
        seat_number: Only set for seats, unique within the diagram
        meta: Derived flags (isWindow, isLegroom, rowIndex, colIndex)
    """

    __tablename__ = "seat_diagram_spaces"
    __table_args__ = (
        UniqueConstraint(
            "seat_diagram_id",
            "floor_number",
            "position_x",
            "position_y",
            name="uq_seat_diagram_spaces_position",
        ),
    )

    seat_diagram_id: Mapped[int] = mapped_column(
        ForeignKey("seat_diagrams.id", ondelete="CASCADE"), index=True
    )
    floor_number: Mapped[int] = mapped_column(Integer, default=1)
    position_x: Mapped[int] = mapped_column(Integer)
    position_y: Mapped[int] = mapped_column(Integer)
    space_type: Mapped[str] = mapped_column(String(20), default="seat")
    seat_number: Mapped[str | None] = mapped_column(String(10), nullable=True)
    seat_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    reclinement_angle: Mapped[int | None] = mapped_column(Integer, nullable=True)
    meta: Mapped[dict] = mapped_column(JSON, default=dict)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    seat_diagram: Mapped["SeatDiagram"] = relationship("SeatDiagram", back_populates="spaces")


class BusModel(CatalogMixin, Base):
    __tablename__ = "bus_models"

    manufacturer: Mapped[str] = mapped_column(String(100))
    model: Mapped[str] = mapped_column(String(100))
    year: Mapped[int] = mapped_column(Integer)
    seating_capacity: Mapped[int] = mapped_column(Integer)
    num_floors: Mapped[int] = mapped_column(Integer, default=1)
    engine_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    default_seat_diagram_id: Mapped[int | None] = mapped_column(
        ForeignKey("seat_diagrams.id"), nullable=True
    )

    default_seat_diagram: Mapped[Optional["SeatDiagram"]] = relationship("SeatDiagram")


# =============================================================================
# Buses & drivers
# =============================================================================


class Bus(CatalogMixin, Base):
    """
    Physical bus in the fleet.

    Attributes:
        economic_number: Internal fleet number, unique among non-deleted buses
        registration_number / license_plate_number: Unique among non-deleted buses
        status: Lifecycle status, changes follow BUS_STATUS_TRANSITIONS
    """

    __tablename__ = "buses"
    __table_args__ = (
        unique_active_index("uq_buses_economic_number_active", "economic_number"),
        unique_active_index("uq_buses_registration_number_active", "registration_number"),
        unique_active_index("uq_buses_license_plate_number_active", "license_plate_number"),
    )

    economic_number: Mapped[str] = mapped_column(String(20))
    registration_number: Mapped[str] = mapped_column(String(50))
    license_plate_type: Mapped[str] = mapped_column(String(20), default=LicensePlateType.NATIONAL.value)
    license_plate_number: Mapped[str] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(20), default=BusStatus.ACTIVE.value, index=True)
    model_id: Mapped[int] = mapped_column(ForeignKey("bus_models.id"), index=True)
    seat_diagram_id: Mapped[int] = mapped_column(ForeignKey("seat_diagrams.id"))
    transporter_id: Mapped[int | None] = mapped_column(ForeignKey("transporters.id"), nullable=True)
    bus_line_id: Mapped[int | None] = mapped_column(ForeignKey("bus_lines.id"), nullable=True)
    chromatic_id: Mapped[int | None] = mapped_column(ForeignKey("chromatics.id"), nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    current_kilometer: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_maintenance_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status_changed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    model: Mapped["BusModel"] = relationship("BusModel")
    seat_diagram: Mapped["SeatDiagram"] = relationship("SeatDiagram")
    technologies: Mapped[list["Technology"]] = relationship("Technology", secondary=bus_technologies)


class Driver(CatalogMixin, Base):
    """
    Bus driver.

    Attributes:
        driver_key / payroll_key: Unique among non-deleted drivers
        status: Employment status, changes follow DRIVER_STATUS_TRANSITIONS
        license_expiry: Expiry date of the driving license
    """

    __tablename__ = "drivers"
    __table_args__ = (
        unique_active_index("uq_drivers_driver_key_active", "driver_key"),
        unique_active_index("uq_drivers_payroll_key_active", "payroll_key"),
    )

    driver_key: Mapped[str] = mapped_column(String(20))
    payroll_key: Mapped[str] = mapped_column(String(20))
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    license: Mapped[str | None] = mapped_column(String(50), nullable=True)
    license_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=DriverStatus.IN_TRAINING.value, index=True)
    status_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    bus_line_id: Mapped[int | None] = mapped_column(ForeignKey("bus_lines.id"), nullable=True)


class DriverTimeOff(CatalogMixin, Base):
    """
    Planned absence of a driver.

    Attributes:
        start_date / end_date: Inclusive range; ranges of one driver never overlap
        type: One of TimeOffType
    """

    __tablename__ = "driver_time_offs"
    __table_args__ = (Index("ix_driver_time_offs_driver_dates", "driver_id", "start_date", "end_date"),)

    driver_id: Mapped[int] = mapped_column(ForeignKey("drivers.id", ondelete="CASCADE"), index=True)
    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[date] = mapped_column(Date)
    type: Mapped[str] = mapped_column(String(20))
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)


class DriverMedicalCheck(IdMixin, TimestampMixin, Base):
    """
    Medical check result of a driver. Checks are never edited or deleted.

    Attributes:
        next_check_date: check_date plus days_until_next_check
        source: How the check was recorded (MedicalCheckSource)
    """

    __tablename__ = "driver_medical_checks"

    driver_id: Mapped[int] = mapped_column(ForeignKey("drivers.id", ondelete="CASCADE"), index=True)
    check_date: Mapped[date] = mapped_column(Date)
    days_until_next_check: Mapped[int] = mapped_column(Integer)
    next_check_date: Mapped[date] = mapped_column(Date)
    result: Mapped[str] = mapped_column(String(20))
    source: Mapped[str] = mapped_column(String(20), default=MedicalCheckSource.MANUAL.value)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
