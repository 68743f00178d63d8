"""Building blocks shared by the entity validators."""

import re
from collections.abc import Iterable
from typing import Any

from inventory_core.db import Base
from inventory_core.errors import FieldErrorCollector, NotFoundError, StandardFieldErrors
from inventory_core.repositories.base import BaseRepository, UniqueField
from inventory_core.utils import snake_to_camel

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
KEBAB_CASE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")


def check_uniqueness(
    repo: BaseRepository,
    collector: FieldErrorCollector,
    fields: Iterable[UniqueField],
    current_id: int | None = None,
) -> FieldErrorCollector:
    """Add a DUPLICATE error for every field already held by another row."""
    for conflict in repo.check_uniqueness(fields, exclude_id=current_id):
        collector.add(
            StandardFieldErrors.duplicate(
                repo.entity_label, snake_to_camel(conflict.field), conflict.value
            )
        )
    return collector


def check_relation(
    repo: BaseRepository,
    collector: FieldErrorCollector,
    model: type[Base],
    field: str,
    value: int | None,
    relation_name: str,
) -> FieldErrorCollector:
    """Add a NOT_FOUND error when ``value`` does not reference a live row."""
    if value is None:
        return collector
    try:
        repo.validate_relation_exists(model, value, relation_name)
    except NotFoundError:
        collector.add(StandardFieldErrors.not_found(relation_name, snake_to_camel(field), value))
    return collector


def check_range(
    collector: FieldErrorCollector,
    field: str,
    value: float | None,
    minimum: float | None = None,
    maximum: float | None = None,
) -> FieldErrorCollector:
    if value is None:
        return collector
    too_low = minimum is not None and value < minimum
    too_high = maximum is not None and value > maximum
    if too_low or too_high:
        if maximum is None:
            message = f"{snake_to_camel(field)} must be at least {minimum}"
        elif minimum is None:
            message = f"{snake_to_camel(field)} must be at most {maximum}"
        else:
            message = f"{snake_to_camel(field)} must be between {minimum} and {maximum}"
        collector.add(StandardFieldErrors.invalid_value(snake_to_camel(field), message, value))
    return collector


def check_choice(
    collector: FieldErrorCollector, field: str, value: Any, choices: Iterable[str]
) -> FieldErrorCollector:
    choices = list(choices)
    if value is not None and value not in choices:
        collector.add(
            StandardFieldErrors.invalid_value(
                snake_to_camel(field),
                f"Invalid {snake_to_camel(field)} '{value}'. Allowed values: {', '.join(choices)}",
                value,
            )
        )
    return collector


def check_id_list(
    collector: FieldErrorCollector,
    field: str,
    ids: list[int],
    target_repo: BaseRepository,
    target_label: str,
    duplicate_message: str,
) -> list[int]:
    """
    Validate the ids of an assignment payload.

    Duplicates are reported as DUPLICATE_INPUT and raised immediately; ids
    that do not reference live rows become one NOT_FOUND error. Returns the
    ids in request order.
    """
    collector.add_if(len(set(ids)) != len(ids), field, "DUPLICATE_INPUT", duplicate_message, ids)
    collector.throw_if_errors()

    if not ids:
        return []
    existing = set(target_repo.find_existing_ids(ids))
    missing = [i for i in ids if i not in existing]
    if missing:
        collector.add_error(
            field,
            "NOT_FOUND",
            f"{target_label} with ids [{', '.join(str(i) for i in missing)}] not found",
            missing,
        )
    return list(ids)


def changed_value(payload: dict, current: Any, field: str) -> Any:
    """Value of ``field`` after applying ``payload`` to ``current`` (may be None)."""
    if field in payload:
        return payload[field]
    return getattr(current, field, None) if current is not None else None
