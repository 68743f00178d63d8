"""
Business rules for buses, drivers, bus models and seat diagrams.

Bus and driver status changes are checked against the transition tables in
inventory_core.constants through the shared state machines.
"""

from datetime import date, timedelta

from inventory_core.errors import FieldErrorCollector, StandardFieldErrors
from inventory_core.models import (
    BusLine,
    BusModel,
    BusStatus,
    Chromatic,
    Driver,
    DriverStatus,
    LicensePlateType,
    MedicalCheckResult,
    MedicalCheckSource,
    SeatDiagram,
    TimeOffType,
    Transporter,
)
from inventory_core.models.base import utc_now
from inventory_core.repositories import (
    BusModelRepository,
    BusRepository,
    ChromaticRepository,
    DriverMedicalCheckRepository,
    DriverRepository,
    DriverTimeOffRepository,
    SeatDiagramRepository,
    TechnologyRepository,
    UniqueField,
)
from inventory_core.seat_layout import (
    MAX_COLUMNS_PER_SIDE,
    MAX_ROWS_PER_FLOOR,
    MIN_COLUMNS_PER_SIDE,
    MIN_ROWS_PER_FLOOR,
)
from inventory_core.state_machine import bus_status_machine, driver_status_machine

from .common import changed_value, check_choice, check_range, check_relation, check_uniqueness

MIN_BUS_MODEL_YEAR = 1950


def validate_technology(repo: TechnologyRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("name", payload.get("name"))], current_id)
    collector.throw_if_errors()
    return payload


def validate_chromatic(repo: ChromaticRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("name", payload.get("name"))], current_id)
    collector.throw_if_errors()
    return payload


# =============================================================================
# Bus models & seat diagrams
# =============================================================================


def validate_bus_model(repo: BusModelRepository, payload: dict, current_id: int | None = None) -> dict:
    """
    The manufacturer, model and year combination is unique.

    A duplicate is reported on each of the three fields.
    """
    collector = FieldErrorCollector()
    current = repo.find_one(current_id) if current_id is not None else None
    key = {f: changed_value(payload, current, f) for f in ("manufacturer", "model", "year")}

    if all(v is not None for v in key.values()):
        existing = repo.find_all(filters=key)
        if any(bus_model.id != current_id for bus_model in existing):
            message = "A bus model with this manufacturer, model, and year combination already exists"
            for field, value in key.items():
                collector.add_error(field, "DUPLICATE", message, value)

    check_range(collector, "year", payload.get("year"), MIN_BUS_MODEL_YEAR, date.today().year + 1)
    check_range(collector, "seating_capacity", payload.get("seating_capacity"), minimum=1)
    check_range(collector, "num_floors", payload.get("num_floors"), 1, 2)
    check_relation(
        repo,
        collector,
        SeatDiagram,
        "default_seat_diagram_id",
        payload.get("default_seat_diagram_id"),
        "Seat diagram",
    )
    collector.throw_if_errors()
    return payload


def validate_seat_diagram(repo: SeatDiagramRepository, payload: dict, current_id: int | None = None) -> dict:
    """
    Validate a seat diagram and its quick configuration.

    ``seats_per_floor`` must describe floors 1..num_floors once each, with
    row and per-side seat counts inside the grid limits, and the generated
    seats must fit in ``max_capacity``.
    """
    collector = FieldErrorCollector()
    current = repo.find_one(current_id) if current_id is not None else None
    check_uniqueness(repo, collector, [UniqueField("name", payload.get("name"))], current_id)
    check_range(collector, "num_floors", payload.get("num_floors"), 1, 2)
    check_range(collector, "max_capacity", payload.get("max_capacity"), minimum=1)
    collector.throw_if_errors()

    floors = payload.get("seats_per_floor")
    if floors is None:
        max_capacity = payload.get("max_capacity")
        if current is not None and max_capacity is not None:
            collector.add_if(
                current.total_seats > max_capacity,
                "maxCapacity",
                "INVALID_VALUE",
                f"Current seats ({current.total_seats}) exceed the maximum capacity ({max_capacity})",
                max_capacity,
            )
            collector.throw_if_errors()
        return payload

    num_floors = changed_value(payload, current, "num_floors") or 1
    floor_numbers = sorted(f["floor_number"] for f in floors)
    collector.add_if(
        floor_numbers != list(range(1, num_floors + 1)),
        "seatsPerFloor",
        "INVALID_VALUE",
        f"Seats per floor must configure floors 1 to {num_floors} exactly once",
        floor_numbers,
    )
    for floor in floors:
        number = floor["floor_number"]
        collector.add_if(
            not MIN_ROWS_PER_FLOOR <= floor["num_rows"] <= MAX_ROWS_PER_FLOOR,
            "seatsPerFloor",
            "INVALID_VALUE",
            f"Floor {number} must have between {MIN_ROWS_PER_FLOOR} and {MAX_ROWS_PER_FLOOR} rows",
            floor["num_rows"],
        )
        for side in ("seats_left", "seats_right"):
            collector.add_if(
                not MIN_COLUMNS_PER_SIDE <= floor[side] <= MAX_COLUMNS_PER_SIDE,
                "seatsPerFloor",
                "INVALID_VALUE",
                f"Floor {number} must have between {MIN_COLUMNS_PER_SIDE} and "
                f"{MAX_COLUMNS_PER_SIDE} seats on the {side.split('_')[1]} side",
                floor[side],
            )

    max_capacity = changed_value(payload, current, "max_capacity")
    seats = sum(f["num_rows"] * (f["seats_left"] + f["seats_right"]) for f in floors)
    collector.add_if(
        max_capacity is not None and seats > max_capacity,
        "maxCapacity",
        "INVALID_VALUE",
        f"Configured seats ({seats}) exceed the maximum capacity ({max_capacity})",
        max_capacity,
    )
    collector.throw_if_errors()
    return payload


# =============================================================================
# Buses
# =============================================================================


def validate_bus(repo: BusRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(
        repo,
        collector,
        [
            UniqueField("economic_number", payload.get("economic_number")),
            UniqueField("registration_number", payload.get("registration_number")),
            UniqueField("license_plate_number", payload.get("license_plate_number")),
        ],
        current_id,
    )
    check_choice(
        collector, "license_plate_type", payload.get("license_plate_type"), [t.value for t in LicensePlateType]
    )
    check_range(collector, "current_kilometer", payload.get("current_kilometer"), minimum=0)

    status = payload.get("status")
    if status is not None:
        if status not in {s.value for s in BusStatus}:
            check_choice(collector, "status", status, [s.value for s in BusStatus])
        elif current_id is not None:
            current = repo.find_one(current_id)
            if not bus_status_machine.can_transition(current.status, status):
                collector.add(
                    StandardFieldErrors.invalid_status(
                        "Bus", current.status, status, bus_status_machine.next_states(current.status)
                    )
                )
            elif status != current.status:
                payload = {**payload, "status_changed_at": utc_now()}

    for field, model, name in (
        ("model_id", BusModel, "Bus model"),
        ("seat_diagram_id", SeatDiagram, "Seat diagram"),
        ("transporter_id", Transporter, "Transporter"),
        ("bus_line_id", BusLine, "Bus line"),
        ("chromatic_id", Chromatic, "Chromatic"),
    ):
        check_relation(repo, collector, model, field, payload.get(field), name)

    collector.throw_if_errors()
    return payload


def validate_technology_assignment(repo: BusRepository, bus_id: int, technology_ids: list[int]) -> None:
    """
    Validate a technology assignment for a bus.

    Duplicates are checked first, then the bus, then the technologies; each
    step stops at its first failure. An empty list clears the assignment.
    """
    collector = FieldErrorCollector()
    collector.add_if(
        len(set(technology_ids)) != len(technology_ids),
        "technologyIds",
        "DUPLICATE_INPUT",
        "Duplicate technology IDs are not allowed in the assignment",
        technology_ids,
    )
    collector.throw_if_errors()

    collector.add_if(
        not repo.exists_by("id", bus_id),
        "busId",
        "NOT_FOUND",
        f"Bus with id {bus_id} not found",
        bus_id,
    )
    collector.throw_if_errors()

    if not technology_ids:
        return

    existing = set(TechnologyRepository(repo.session).find_existing_ids(technology_ids))
    missing = [i for i in dict.fromkeys(technology_ids) if i not in existing]
    collector.add_if(
        bool(missing),
        "technologyIds",
        "NOT_FOUND",
        f"Technologies with ids [{', '.join(str(i) for i in missing)}] not found",
        missing,
    )
    collector.throw_if_errors()


# =============================================================================
# Drivers
# =============================================================================


def validate_driver(repo: DriverRepository, payload: dict, current_id: int | None = None) -> dict:
    """
    New drivers start in one of DRIVER_INITIAL_STATUSES; later changes follow
    the driver transition table. TERMINATED is final.
    """
    collector = FieldErrorCollector()
    check_uniqueness(
        repo,
        collector,
        [
            UniqueField("driver_key", payload.get("driver_key")),
            UniqueField("payroll_key", payload.get("payroll_key")),
        ],
        current_id,
    )

    status = payload.get("status")
    if status is not None:
        if status not in {s.value for s in DriverStatus}:
            check_choice(collector, "status", status, [s.value for s in DriverStatus])
        elif current_id is None:
            if not driver_status_machine.can_start_in(status):
                collector.add(
                    StandardFieldErrors.invalid_status(
                        "Driver", None, status, driver_status_machine.initial_states, is_create=True
                    )
                )
        else:
            current = repo.find_one(current_id)
            if not driver_status_machine.can_transition(current.status, status):
                collector.add(
                    StandardFieldErrors.invalid_status(
                        "Driver", current.status, status, driver_status_machine.next_states(current.status)
                    )
                )
            elif status != current.status:
                payload = {**payload, "status_date": date.today()}

    check_relation(repo, collector, BusLine, "bus_line_id", payload.get("bus_line_id"), "Bus line")
    collector.throw_if_errors()
    return payload


def validate_driver_time_off(
    repo: DriverTimeOffRepository, driver_id: int, payload: dict, current_id: int | None = None
) -> dict:
    """
    Time-offs of one driver never overlap, and start dates set by the
    request cannot be in the past.

    Returns the payload with ``driver_id`` set.
    """
    collector = FieldErrorCollector()
    check_relation(repo, collector, Driver, "driver_id", driver_id, "Driver")
    collector.throw_if_errors()

    current = repo.find_for_driver(driver_id, current_id) if current_id is not None else None
    check_choice(collector, "type", payload.get("type"), [t.value for t in TimeOffType])

    start_date = changed_value(payload, current, "start_date")
    end_date = changed_value(payload, current, "end_date")
    if start_date is not None and end_date is not None:
        if start_date > end_date:
            collector.add_error(
                "startDate",
                "INVALID_DATE_RANGE",
                "Start date must be less than or equal to end date",
                start_date,
            )
        else:
            collector.add_if(
                "start_date" in payload and start_date < date.today(),
                "startDate",
                "PAST_DATE_NOT_ALLOWED",
                "Start date cannot be in the past",
                start_date,
            )
            collector.add_if(
                repo.has_overlap(driver_id, start_date, end_date, exclude_id=current_id),
                "startDate",
                "OVERLAPPING_TIME_OFF",
                "This time-off period overlaps with an existing time-off",
                start_date,
            )

    collector.throw_if_errors()
    return {**payload, "driver_id": driver_id}


def validate_driver_medical_check(repo: DriverMedicalCheckRepository, driver_id: int, payload: dict) -> dict:
    """Derive ``next_check_date`` from the check date and the days until the next check."""
    collector = FieldErrorCollector()
    check_relation(repo, collector, Driver, "driver_id", driver_id, "Driver")
    collector.throw_if_errors()

    check_choice(collector, "result", payload.get("result"), [r.value for r in MedicalCheckResult])
    check_range(collector, "days_until_next_check", payload.get("days_until_next_check"), minimum=1)
    collector.throw_if_errors()

    return {
        **payload,
        "driver_id": driver_id,
        "source": MedicalCheckSource.MANUAL.value,
        "next_check_date": payload["check_date"] + timedelta(days=payload["days_until_next_check"]),
    }
