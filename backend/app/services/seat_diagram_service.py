"""
Seat diagram service functions.

A seat diagram stores its quick configuration (``seats_per_floor``) and the
grid of spaces generated from it. Creating a diagram, or changing its floors
or quick configuration, regenerates the grid. Manual edits go through
``replace_spaces`` or the grid operations and keep ``total_seats`` in sync.
"""

from collections.abc import Callable
from dataclasses import asdict

from sqlalchemy.orm import Session

from inventory_core import seat_layout
from inventory_core.domain import validate_seat_diagram
from inventory_core.logging import log_timing, seat_layout_logger as logger
from inventory_core.models import SeatDiagram, SeatDiagramSpace
from inventory_core.repositories import SeatDiagramRepository, SeatDiagramSpaceRepository
from inventory_core.seat_layout import SeatLayoutError, SeatType, SpaceSpec, SpaceType

GridOperation = Callable[[list[SpaceSpec]], list[SpaceSpec]]


# =============================================================================
# Conversion
# =============================================================================


def to_spec(space: SeatDiagramSpace | dict) -> SpaceSpec:
    """Build a SpaceSpec from a stored space or a request payload."""
    data = space if isinstance(space, dict) else {
        "floor_number": space.floor_number,
        "position_x": space.position_x,
        "position_y": space.position_y,
        "space_type": space.space_type,
        "seat_number": space.seat_number,
        "seat_type": space.seat_type,
        "reclinement_angle": space.reclinement_angle,
        "meta": space.meta,
        "active": space.active,
    }
    seat_type = data.get("seat_type")
    return SpaceSpec(
        floor_number=data.get("floor_number", 1),
        position_x=data["position_x"],
        position_y=data["position_y"],
        space_type=SpaceType(data.get("space_type") or SpaceType.SEAT),
        seat_number=data.get("seat_number"),
        seat_type=SeatType(seat_type) if seat_type else None,
        reclinement_angle=data.get("reclinement_angle"),
        meta=dict(data.get("meta") or {}),
        active=data.get("active", True),
    )


def to_row(spec: SpaceSpec) -> dict:
    return {
        "floor_number": spec.floor_number,
        "position_x": spec.position_x,
        "position_y": spec.position_y,
        "space_type": SpaceType(spec.space_type).value,
        "seat_number": spec.seat_number,
        "seat_type": SeatType(spec.seat_type).value if spec.seat_type else None,
        "reclinement_angle": spec.reclinement_angle,
        "meta": spec.meta,
        "active": spec.active,
    }


def _store_spaces(db: Session, diagram: SeatDiagram, specs: list[SpaceSpec]) -> None:
    seats = seat_layout.count_seats(specs)
    if seats > diagram.max_capacity:
        raise SeatLayoutError(f"Seats ({seats}) would exceed the maximum capacity ({diagram.max_capacity})")
    SeatDiagramSpaceRepository(db).replace_for_diagram(diagram.id, [to_row(s) for s in specs])
    diagram.total_seats = seats


# =============================================================================
# Diagrams
# =============================================================================


@log_timing("seat_diagram_creation", logger)
def create_seat_diagram(db: Session, payload: dict) -> SeatDiagram:
    """
    Create a diagram and generate its grid.

    Floors missing from ``seats_per_floor`` get the default configuration.
    """
    repo = SeatDiagramRepository(db)
    payload = dict(payload)
    if payload.get("seats_per_floor") is None:
        defaults = seat_layout.floor_configs_for([], payload.get("num_floors") or 1)
        payload["seats_per_floor"] = [asdict(f) for f in defaults]
    payload = validate_seat_diagram(repo, payload)

    floors = seat_layout.floor_configs_for(payload["seats_per_floor"], payload.get("num_floors") or 1)
    payload["seats_per_floor"] = [asdict(f) for f in floors]
    diagram = repo.create(**payload)
    _store_spaces(db, diagram, seat_layout.generate_spaces(floors))

    db.commit()
    db.refresh(diagram)
    logger.info("seat_diagram_created", id=diagram.id, total_seats=diagram.total_seats)
    return diagram


def update_seat_diagram(db: Session, diagram_id: int, payload: dict) -> SeatDiagram:
    """Update a diagram; changing floors or the quick configuration regenerates the grid."""
    repo = SeatDiagramRepository(db)
    diagram = repo.find_one(diagram_id)
    payload = dict(payload)
    if payload.get("num_floors") is None:
        payload.pop("num_floors", None)

    regenerate = "seats_per_floor" in payload or "num_floors" in payload
    if regenerate and payload.get("seats_per_floor") is None:
        # Keep the stored configuration for floors that survive the change
        floors = seat_layout.floor_configs_for(
            diagram.seats_per_floor or [], payload.get("num_floors") or diagram.num_floors
        )
        payload["seats_per_floor"] = [asdict(f) for f in floors]

    payload = validate_seat_diagram(repo, payload, current_id=diagram_id)
    if not payload:
        return diagram

    if regenerate:
        num_floors = payload.get("num_floors") or diagram.num_floors
        floors = seat_layout.floor_configs_for(payload["seats_per_floor"], num_floors)
        payload["seats_per_floor"] = [asdict(f) for f in floors]

    diagram = repo.update(diagram_id, **payload)
    if regenerate:
        _store_spaces(db, diagram, seat_layout.generate_spaces(floors))
        logger.info("seat_diagram_regenerated", id=diagram_id, total_seats=diagram.total_seats)

    db.commit()
    db.refresh(diagram)
    return diagram


# =============================================================================
# Spaces
# =============================================================================


def list_spaces(db: Session, diagram_id: int) -> list[SeatDiagramSpace]:
    SeatDiagramRepository(db).find_one(diagram_id)
    return SeatDiagramSpaceRepository(db).find_for_diagram(diagram_id)


def replace_spaces(db: Session, diagram_id: int, spaces: list[dict]) -> list[SeatDiagramSpace]:
    """Validate and store a full space configuration."""
    diagram = SeatDiagramRepository(db).find_one(diagram_id)
    specs = [to_spec(space) for space in spaces]
    seat_layout.validate_spaces(specs, diagram.num_floors)
    for floor_number in sorted({s.floor_number for s in specs}):
        specs = seat_layout.refresh_meta(specs, floor_number)

    _store_spaces(db, diagram, specs)
    db.commit()
    logger.info("seat_diagram_spaces_replaced", id=diagram_id, spaces=len(specs))
    return SeatDiagramSpaceRepository(db).find_for_diagram(diagram_id)


def _edit_grid(db: Session, diagram_id: int, floor_number: int, operation: GridOperation) -> list[SeatDiagramSpace]:
    diagram = SeatDiagramRepository(db).find_one(diagram_id)
    if not 1 <= floor_number <= diagram.num_floors:
        raise SeatLayoutError(
            f"Invalid floor number {floor_number}. Must be between 1 and {diagram.num_floors}"
        )
    spaces_repo = SeatDiagramSpaceRepository(db)
    specs = operation([to_spec(space) for space in spaces_repo.find_for_diagram(diagram_id)])
    _store_spaces(db, diagram, specs)
    db.commit()
    return spaces_repo.find_for_diagram(diagram_id)


def add_column(db: Session, diagram_id: int, floor_number: int, after_x: int) -> list[SeatDiagramSpace]:
    return _edit_grid(
        db, diagram_id, floor_number, lambda specs: seat_layout.add_column(specs, floor_number, after_x)
    )


def remove_column(db: Session, diagram_id: int, floor_number: int, x: int) -> list[SeatDiagramSpace]:
    return _edit_grid(
        db, diagram_id, floor_number, lambda specs: seat_layout.remove_column(specs, floor_number, x)
    )


def add_row(db: Session, diagram_id: int, floor_number: int) -> list[SeatDiagramSpace]:
    return _edit_grid(db, diagram_id, floor_number, lambda specs: seat_layout.add_row(specs, floor_number))


def remove_row(db: Session, diagram_id: int, floor_number: int) -> list[SeatDiagramSpace]:
    return _edit_grid(db, diagram_id, floor_number, lambda specs: seat_layout.remove_row(specs, floor_number))
