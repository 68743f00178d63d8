"""
Operator SQLAlchemy models: transporters, service types and bus lines.
"""

from typing import Optional

from sqlalchemy import JSON, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CatalogMixin, unique_active_index
from .locations import City


class Transporter(CatalogMixin, Base):
    """
    Bus company operating one or more bus lines.

    Attributes:
        code: Unique among non-deleted transporters
        headquarter_city_id: City hosting the head office (optional)
        contact_info: Free-form contact details (JSON)
    """

    __tablename__ = "transporters"
    __table_args__ = (unique_active_index("uq_transporters_code_active", "code"),)

    name: Mapped[str] = mapped_column(String(150))
    code: Mapped[str] = mapped_column(String(20))
    legal_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    headquarter_city_id: Mapped[int | None] = mapped_column(ForeignKey("cities.id"), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    contact_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    license_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    headquarter_city: Mapped[Optional["City"]] = relationship(City)
    bus_lines: Mapped[list["BusLine"]] = relationship("BusLine", back_populates="transporter")


class ServiceType(CatalogMixin, Base):
    __tablename__ = "service_types"
    __table_args__ = (
        unique_active_index("uq_service_types_name_active", "name"),
        unique_active_index("uq_service_types_code_active", "code"),
    )

    name: Mapped[str] = mapped_column(String(100))
    code: Mapped[str] = mapped_column(String(20))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class BusLine(CatalogMixin, Base):
    """
    Commercial brand of a transporter running one service type.

    Attributes:
        price_per_kilometer: Base fare per kilometre
        fleet_size: Number of buses planned for the line
    """

    __tablename__ = "bus_lines"
    __table_args__ = (unique_active_index("uq_bus_lines_code_active", "code"),)

    name: Mapped[str] = mapped_column(String(150))
    code: Mapped[str] = mapped_column(String(20))
    transporter_id: Mapped[int] = mapped_column(ForeignKey("transporters.id"), index=True)
    service_type_id: Mapped[int] = mapped_column(ForeignKey("service_types.id"), index=True)
    price_per_kilometer: Mapped[float] = mapped_column(Float, default=1.0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    fleet_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    transporter: Mapped["Transporter"] = relationship("Transporter", back_populates="bus_lines")
    service_type: Mapped["ServiceType"] = relationship("ServiceType")
