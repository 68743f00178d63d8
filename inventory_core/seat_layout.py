"""
Seat diagram layout: generation from a quick configuration and grid editing.

A floor is a grid of spaces addressed by (position_x, position_y). Columns
are 0-based from the left window; rows are 1-based from the front. Every
generated floor has a "main hallway": the column made up entirely of
hallway spaces that splits left seats from right seats. Grid edits keep a
bounded number of seat columns on each side of it.

All functions are pure: they take a list of SpaceSpec and return a new list.
Persisting the result is the caller's job (see SeatDiagramRepository).
"""

import enum
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Iterable

from .errors import FieldErrorCollector, ValidationError
from .logging import seat_layout_logger as logger

DEFAULT_RECLINEMENT_ANGLE = 120
INITIAL_SEAT_NUMBER = 1

MIN_COLUMNS_PER_SIDE = 1
MAX_COLUMNS_PER_SIDE = 3
MIN_ROWS_PER_FLOOR = 1
MAX_ROWS_PER_FLOOR = 25

DEFAULT_NUM_ROWS = 10
DEFAULT_SEATS_PER_SIDE = 2


class SpaceType(str, enum.Enum):
    SEAT = "seat"
    HALLWAY = "hallway"
    BATHROOM = "bathroom"
    EMPTY = "empty"


class SeatType(str, enum.Enum):
    REGULAR = "regular"
    PREMIUM = "premium"
    VIP = "vip"
    BUSINESS = "business"
    EXECUTIVE = "executive"


class SeatLayoutError(ValidationError):
    """A grid edit would break the floor layout rules."""


@dataclass(frozen=True)
class FloorConfig:
    floor_number: int
    num_rows: int
    seats_left: int
    seats_right: int

    @property
    def seats(self) -> int:
        return self.num_rows * (self.seats_left + self.seats_right)


def floor_configs_for(seats_per_floor: Iterable[dict], num_floors: int) -> list[FloorConfig]:
    """
    Build one FloorConfig per floor from stored ``seats_per_floor`` entries.

    Floors without an entry get DEFAULT_NUM_ROWS rows of
    DEFAULT_SEATS_PER_SIDE seats on each side.
    """
    by_floor = {entry["floor_number"]: entry for entry in seats_per_floor}
    configs = []
    for floor_number in range(1, num_floors + 1):
        entry = by_floor.get(floor_number)
        if entry is None:
            configs.append(
                FloorConfig(floor_number, DEFAULT_NUM_ROWS, DEFAULT_SEATS_PER_SIDE, DEFAULT_SEATS_PER_SIDE)
            )
        else:
            configs.append(
                FloorConfig(floor_number, entry["num_rows"], entry["seats_left"], entry["seats_right"])
            )
    return configs


@dataclass
class SpaceSpec:
    floor_number: int
    position_x: int
    position_y: int
    space_type: SpaceType = SpaceType.SEAT
    seat_number: str | None = None
    seat_type: SeatType | None = None
    reclinement_angle: int | None = None
    meta: dict = field(default_factory=dict)
    active: bool = True

    @property
    def is_seat(self) -> bool:
        return self.space_type == SpaceType.SEAT

    @property
    def position_key(self) -> tuple[int, int, int]:
        return (self.floor_number, self.position_x, self.position_y)


def _seat(floor_number: int, x: int, y: int, seat_number: str | None) -> SpaceSpec:
    return SpaceSpec(
        floor_number=floor_number,
        position_x=x,
        position_y=y,
        space_type=SpaceType.SEAT,
        seat_number=seat_number,
        seat_type=SeatType.REGULAR,
        reclinement_angle=DEFAULT_RECLINEMENT_ANGLE,
    )


def _hallway(floor_number: int, x: int, y: int) -> SpaceSpec:
    return SpaceSpec(
        floor_number=floor_number,
        position_x=x,
        position_y=y,
        space_type=SpaceType.HALLWAY,
    )


# =============================================================================
# Generation
# =============================================================================


def generate_floor_spaces(config: FloorConfig, start_number: int = INITIAL_SEAT_NUMBER) -> tuple[list[SpaceSpec], int]:
    """
    Generate the spaces of one floor.

    Seats are numbered row by row, left block then right block, starting at
    ``start_number``. Returns the spaces and the next free seat number so
    numbering continues across floors.
    """
    if config.num_rows < MIN_ROWS_PER_FLOOR:
        raise SeatLayoutError(f"Floor {config.floor_number} needs at least {MIN_ROWS_PER_FLOOR} row")
    if config.seats_left < 0 or config.seats_right < 0:
        raise SeatLayoutError(f"Floor {config.floor_number} cannot have a negative number of seats")

    counter = start_number
    hallway_x = config.seats_left
    spaces: list[SpaceSpec] = []

    for row_index in range(config.num_rows):
        y = row_index + 1
        for x in range(config.seats_left):
            spaces.append(_seat(config.floor_number, x, y, str(counter)))
            counter += 1
        spaces.append(_hallway(config.floor_number, hallway_x, y))
        for offset in range(config.seats_right):
            spaces.append(_seat(config.floor_number, hallway_x + 1 + offset, y, str(counter)))
            counter += 1

    return refresh_meta(spaces, config.floor_number), counter


def generate_spaces(floors: Iterable[FloorConfig]) -> list[SpaceSpec]:
    """Generate all floors with one seat-number counter shared across them."""
    spaces: list[SpaceSpec] = []
    counter = INITIAL_SEAT_NUMBER
    for config in sorted(floors, key=lambda f: f.floor_number):
        floor_spaces, counter = generate_floor_spaces(config, counter)
        spaces.extend(floor_spaces)
    return spaces


def total_seats(floors: Iterable[FloorConfig]) -> int:
    return sum(f.seats for f in floors)


# =============================================================================
# Inspection
# =============================================================================


def floor_spaces(spaces: Iterable[SpaceSpec], floor_number: int) -> list[SpaceSpec]:
    return [s for s in spaces if s.floor_number == floor_number]


def _columns(spaces: list[SpaceSpec]) -> list[int]:
    return sorted({s.position_x for s in spaces})


def _rows(spaces: list[SpaceSpec]) -> list[int]:
    return sorted({s.position_y for s in spaces})


def find_main_hallway(spaces: Iterable[SpaceSpec], floor_number: int) -> int | None:
    """
    Return the x of the main hallway on a floor, or None.

    Candidates are columns where every space is a hallway. When several
    qualify, the one closest to the centre of the floor wins, then the
    leftmost.
    """
    floor = floor_spaces(spaces, floor_number)
    if not floor:
        return None

    by_column: dict[int, list[SpaceSpec]] = {}
    for space in floor:
        by_column.setdefault(space.position_x, []).append(space)

    candidates = [
        x for x, column in by_column.items()
        if all(s.space_type == SpaceType.HALLWAY for s in column)
    ]
    if not candidates:
        return None

    columns = _columns(floor)
    centre = (columns[0] + columns[-1]) / 2
    return min(candidates, key=lambda x: (abs(x - centre), x))


def side_column_counts(spaces: Iterable[SpaceSpec], floor_number: int) -> tuple[int, int]:
    """Number of columns left and right of the main hallway."""
    floor = floor_spaces(spaces, floor_number)
    hallway_x = _require_hallway(floor, floor_number)
    columns = _columns(floor)
    left = sum(1 for x in columns if x < hallway_x)
    right = sum(1 for x in columns if x > hallway_x)
    return left, right


def count_seats(spaces: Iterable[SpaceSpec]) -> int:
    return sum(1 for s in spaces if s.is_seat and s.active)


def refresh_meta(spaces: list[SpaceSpec], floor_number: int) -> list[SpaceSpec]:
    """Recompute window/legroom flags for the seats of one floor."""
    floor = floor_spaces(spaces, floor_number)
    if not floor:
        return spaces
    columns = _columns(floor)
    first_column, last_column = columns[0], columns[-1]
    first_row = _rows(floor)[0]

    refreshed = []
    for space in spaces:
        if space.floor_number == floor_number:
            meta = {k: v for k, v in space.meta.items() if k not in ("isWindow", "isLegroom")}
            meta["rowIndex"] = space.position_y - 1
            meta["colIndex"] = space.position_x
            if space.is_seat:
                meta["isWindow"] = space.position_x in (first_column, last_column)
                meta["isLegroom"] = space.position_y == first_row
            space = replace(space, meta=meta)
        refreshed.append(space)
    return refreshed


def _require_hallway(floor: list[SpaceSpec], floor_number: int) -> int:
    if not floor:
        raise SeatLayoutError(f"Floor {floor_number} has no spaces")
    hallway_x = find_main_hallway(floor, floor_number)
    if hallway_x is None:
        raise SeatLayoutError(f"Floor {floor_number} has no main hallway")
    return hallway_x


def _next_seat_numbers(spaces: list[SpaceSpec], count: int) -> list[str]:
    used = {s.seat_number for s in spaces if s.seat_number}
    numeric = [int(n) for n in used if n.isdigit()]
    current = max(numeric, default=0) + 1
    numbers = []
    while len(numbers) < count:
        if str(current) not in used:
            numbers.append(str(current))
        current += 1
    return numbers


# =============================================================================
# Grid editing
# =============================================================================


def add_column(spaces: list[SpaceSpec], floor_number: int, after_x: int) -> list[SpaceSpec]:
    """
    Insert a seat column right after ``after_x``.

    Spaces right of ``after_x`` shift one column to the right. The side of
    the main hallway that gains the column must stay within
    MAX_COLUMNS_PER_SIDE.
    """
    floor = floor_spaces(spaces, floor_number)
    hallway_x = _require_hallway(floor, floor_number)
    columns = _columns(floor)
    if after_x < -1 or after_x > columns[-1]:
        raise SeatLayoutError(f"Column {after_x} does not exist on floor {floor_number}")

    left, right = side_column_counts(floor, floor_number)
    gains_left = after_x < hallway_x
    side_count = left if gains_left else right
    if side_count + 1 > MAX_COLUMNS_PER_SIDE:
        side = "left" if gains_left else "right"
        raise SeatLayoutError(
            f"Cannot add a column on the {side} side of floor {floor_number}: "
            f"maximum of {MAX_COLUMNS_PER_SIDE} columns per side"
        )

    shifted = [
        replace(s, position_x=s.position_x + 1)
        if s.floor_number == floor_number and s.position_x > after_x
        else s
        for s in spaces
    ]
    rows = _rows(floor)
    numbers = _next_seat_numbers(spaces, len(rows))
    new_x = after_x + 1
    shifted.extend(_seat(floor_number, new_x, y, number) for y, number in zip(rows, numbers))

    logger.debug("column_added", floor=floor_number, x=new_x)
    return refresh_meta(shifted, floor_number)


def remove_column(spaces: list[SpaceSpec], floor_number: int, x: int) -> list[SpaceSpec]:
    """
    Remove column ``x`` and shift the columns to its right one step left.

    The main hallway cannot be removed and each side keeps at least
    MIN_COLUMNS_PER_SIDE columns.
    """
    floor = floor_spaces(spaces, floor_number)
    hallway_x = _require_hallway(floor, floor_number)
    if x not in _columns(floor):
        raise SeatLayoutError(f"Column {x} does not exist on floor {floor_number}")
    if x == hallway_x:
        raise SeatLayoutError(f"Cannot remove the main hallway of floor {floor_number}")

    left, right = side_column_counts(floor, floor_number)
    loses_left = x < hallway_x
    side_count = left if loses_left else right
    if side_count - 1 < MIN_COLUMNS_PER_SIDE:
        side = "left" if loses_left else "right"
        raise SeatLayoutError(
            f"Cannot remove a column on the {side} side of floor {floor_number}: "
            f"minimum of {MIN_COLUMNS_PER_SIDE} column per side"
        )

    remaining = []
    for space in spaces:
        if space.floor_number == floor_number:
            if space.position_x == x:
                continue
            if space.position_x > x:
                space = replace(space, position_x=space.position_x - 1)
        remaining.append(space)

    logger.debug("column_removed", floor=floor_number, x=x)
    return refresh_meta(remaining, floor_number)


def add_row(spaces: list[SpaceSpec], floor_number: int) -> list[SpaceSpec]:
    """Append a row at the back: seats everywhere except the main hallway."""
    floor = floor_spaces(spaces, floor_number)
    hallway_x = _require_hallway(floor, floor_number)
    rows = _rows(floor)
    if len(rows) + 1 > MAX_ROWS_PER_FLOOR:
        raise SeatLayoutError(
            f"Cannot add a row to floor {floor_number}: maximum of {MAX_ROWS_PER_FLOOR} rows"
        )

    new_y = rows[-1] + 1
    seat_columns = [x for x in _columns(floor) if x != hallway_x]
    numbers = iter(_next_seat_numbers(spaces, len(seat_columns)))

    added = list(spaces)
    for x in _columns(floor):
        if x == hallway_x:
            added.append(_hallway(floor_number, x, new_y))
        else:
            added.append(_seat(floor_number, x, new_y, next(numbers)))

    logger.debug("row_added", floor=floor_number, y=new_y)
    return refresh_meta(added, floor_number)


def remove_row(spaces: list[SpaceSpec], floor_number: int) -> list[SpaceSpec]:
    """Remove the last row of a floor, keeping at least MIN_ROWS_PER_FLOOR."""
    floor = floor_spaces(spaces, floor_number)
    if not floor:
        raise SeatLayoutError(f"Floor {floor_number} has no spaces")
    rows = _rows(floor)
    if len(rows) - 1 < MIN_ROWS_PER_FLOOR:
        raise SeatLayoutError(
            f"Cannot remove a row from floor {floor_number}: minimum of {MIN_ROWS_PER_FLOOR} row"
        )

    last_y = rows[-1]
    remaining = [
        s for s in spaces
        if not (s.floor_number == floor_number and s.position_y == last_y)
    ]
    logger.debug("row_removed", floor=floor_number, y=last_y)
    return refresh_meta(remaining, floor_number)


# =============================================================================
# Validation
# =============================================================================


def validate_spaces(spaces: list[SpaceSpec], num_floors: int) -> None:
    """
    Check a full space configuration before it is stored.

    Raises FieldValidationError listing duplicate seat numbers, duplicate
    positions, seats without a number and spaces on floors that do not exist.
    """
    collector = FieldErrorCollector()

    missing_numbers = [s.position_key for s in spaces if s.is_seat and not s.seat_number]
    collector.add_if(
        bool(missing_numbers),
        "spaces",
        "INVALID_VALUE",
        "Seat number is required for seat spaces",
        [list(k) for k in missing_numbers],
    )

    number_counts = Counter(s.seat_number for s in spaces if s.is_seat and s.seat_number)
    duplicate_numbers = sorted(n for n, c in number_counts.items() if c > 1)
    collector.add_if(
        bool(duplicate_numbers),
        "spaces",
        "DUPLICATE",
        "Duplicate seat numbers found in payload",
        duplicate_numbers,
    )

    position_counts = Counter(s.position_key for s in spaces)
    duplicate_positions = sorted(k for k, c in position_counts.items() if c > 1)
    collector.add_if(
        bool(duplicate_positions),
        "spaces",
        "DUPLICATE",
        "Duplicate positions found in payload",
        [list(k) for k in duplicate_positions],
    )

    bad_floors = sorted({s.floor_number for s in spaces if not 1 <= s.floor_number <= num_floors})
    for floor_number in bad_floors:
        collector.add_error(
            "spaces",
            "INVALID_VALUE",
            f"Invalid floor number {floor_number}. Must be between 1 and {num_floors}",
            floor_number,
        )

    bad_positions = [s.position_key for s in spaces if s.position_x < 0 or s.position_y < 1]
    collector.add_if(
        bool(bad_positions),
        "spaces",
        "INVALID_VALUE",
        "Positions must have x >= 0 and y >= 1",
        [list(k) for k in bad_positions],
    )

    collector.throw_if_errors()


__all__ = [
    "DEFAULT_RECLINEMENT_ANGLE",
    "MIN_COLUMNS_PER_SIDE",
    "MAX_COLUMNS_PER_SIDE",
    "MIN_ROWS_PER_FLOOR",
    "MAX_ROWS_PER_FLOOR",
    "DEFAULT_NUM_ROWS",
    "DEFAULT_SEATS_PER_SIDE",
    "SpaceType",
    "SeatType",
    "SeatLayoutError",
    "FloorConfig",
    "floor_configs_for",
    "SpaceSpec",
    "generate_floor_spaces",
    "generate_spaces",
    "total_seats",
    "floor_spaces",
    "find_main_hallway",
    "side_column_counts",
    "count_seats",
    "refresh_meta",
    "add_column",
    "remove_column",
    "add_row",
    "remove_row",
    "validate_spaces",
]
