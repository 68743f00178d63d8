"""Repositories for buses, drivers, seat diagrams and fleet catalogs."""

from datetime import date

from sqlalchemy import delete, select

from inventory_core.models import (
    Bus,
    BusModel,
    Chromatic,
    Driver,
    DriverMedicalCheck,
    DriverTimeOff,
    SeatDiagram,
    SeatDiagramSpace,
    Technology,
)

from .base import BaseRepository


class TechnologyRepository(BaseRepository[Technology]):
    model = Technology
    searchable_fields = ("name", "provider", "description")


class ChromaticRepository(BaseRepository[Chromatic]):
    model = Chromatic
    searchable_fields = ("name", "description")


class BusModelRepository(BaseRepository[BusModel]):
    model = BusModel
    entity_name = "Bus model"
    searchable_fields = ("manufacturer", "model", "engine_type")


class SeatDiagramRepository(BaseRepository[SeatDiagram]):
    model = SeatDiagram
    entity_name = "Seat diagram"
    searchable_fields = ("name", "description")


class SeatDiagramSpaceRepository(BaseRepository[SeatDiagramSpace]):
    """Spaces are replaced wholesale, so they are hard deleted."""

    model = SeatDiagramSpace
    entity_name = "Seat diagram space"
    soft_delete_enabled = False

    def find_for_diagram(self, seat_diagram_id: int, floor_number: int | None = None) -> list[SeatDiagramSpace]:
        stmt = select(SeatDiagramSpace).where(SeatDiagramSpace.seat_diagram_id == seat_diagram_id)
        if floor_number is not None:
            stmt = stmt.where(SeatDiagramSpace.floor_number == floor_number)
        stmt = stmt.order_by(
            SeatDiagramSpace.floor_number, SeatDiagramSpace.position_y, SeatDiagramSpace.position_x
        )
        return self.session.scalars(stmt).all()

    def replace_for_diagram(self, seat_diagram_id: int, rows: list[dict]) -> list[SeatDiagramSpace]:
        """Delete every space of the diagram and insert ``rows`` in its place."""
        self.session.execute(
            delete(SeatDiagramSpace).where(SeatDiagramSpace.seat_diagram_id == seat_diagram_id)
        )
        spaces = [
            SeatDiagramSpace(seat_diagram_id=seat_diagram_id, **self._values(row)) for row in rows
        ]
        self.session.add_all(spaces)
        self._flush("replace", {"seat_diagram_id": seat_diagram_id})
        return spaces


class BusRepository(BaseRepository[Bus]):
    model = Bus
    searchable_fields = ("economic_number", "registration_number", "license_plate_number")

    def assign_technologies(self, bus: Bus, technologies: list[Technology]) -> Bus:
        bus.technologies = technologies
        self._flush("assign technologies to", {"id": bus.id})
        return bus


class DriverRepository(BaseRepository[Driver]):
    model = Driver
    searchable_fields = ("driver_key", "payroll_key", "first_name", "last_name", "email")


class DriverRecordMixin:
    """Lookups for records that belong to one driver."""

    def find_for_driver(self, driver_id: int, id: int):
        return self.find_one(id, [self.model.driver_id == driver_id])

    def find_all_for_driver(self, driver_id: int, order_by=None) -> list:
        return self.find_all(filters={"driver_id": driver_id}, order_by=order_by)


class DriverTimeOffRepository(DriverRecordMixin, BaseRepository[DriverTimeOff]):
    model = DriverTimeOff
    entity_name = "Time-off"
    searchable_fields = ("reason",)

    def has_overlap(
        self, driver_id: int, start_date: date, end_date: date, exclude_id: int | None = None
    ) -> bool:
        """True when another live time-off of the driver shares at least one day with the range."""
        conditions = [DriverTimeOff.start_date <= end_date, DriverTimeOff.end_date >= start_date]
        if exclude_id is not None:
            conditions.append(DriverTimeOff.id != exclude_id)
        return self.count_all({"driver_id": driver_id}, conditions) > 0


class DriverMedicalCheckRepository(DriverRecordMixin, BaseRepository[DriverMedicalCheck]):
    model = DriverMedicalCheck
    entity_name = "Medical check"
    searchable_fields = ("notes",)
