"""
Business rules for geography, nodes, installations and their catalogs.

Each ``validate_*`` function collects every violation and raises a single
FieldValidationError. Validators that derive values (slugs) return the
payload to persist.
"""

import math
import re
from datetime import date
from typing import Any

from inventory_core.errors import FieldErrorCollector, NotFoundError, StandardFieldErrors, ValidationError
from inventory_core.models import (
    AmenityCategory,
    AmenityType,
    City,
    Country,
    Installation,
    InstallationSchema,
    InstallationSchemaFieldType,
    InstallationType,
    Population,
    State,
)
from inventory_core.repositories import (
    AmenityRepository,
    CityRepository,
    CountryRepository,
    EventTypeRepository,
    InstallationRepository,
    InstallationSchemaRepository,
    InstallationTypeRepository,
    LabelRepository,
    NodeRepository,
    PopulationRepository,
    StateRepository,
    UniqueField,
)
from inventory_core.utils import create_slug

from .common import (
    HEX_COLOR,
    KEBAB_CASE,
    changed_value,
    check_id_list,
    check_range,
    check_relation,
    check_uniqueness,
)

# =============================================================================
# Geography
# =============================================================================


def validate_country(repo: CountryRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(
        repo,
        collector,
        [UniqueField("name", payload.get("name")), UniqueField("code", payload.get("code"))],
        current_id,
    )
    collector.throw_if_errors()
    return payload


def validate_state(repo: StateRepository, payload: dict, current_id: int | None = None) -> dict:
    """State codes are unique globally; names only within a country."""
    collector = FieldErrorCollector()
    current = repo.find_one(current_id) if current_id is not None else None
    country_id = changed_value(payload, current, "country_id")

    fields = [UniqueField("code", payload.get("code"))]
    if payload.get("name") is not None or "country_id" in payload:
        fields.append(
            UniqueField("name", changed_value(payload, current, "name"), scope=("country_id", country_id))
        )
    check_uniqueness(repo, collector, fields, current_id)
    check_relation(repo, collector, Country, "country_id", payload.get("country_id"), "Country")
    collector.throw_if_errors()
    return payload


def validate_city(repo: CityRepository, payload: dict, current_id: int | None = None) -> dict:
    """
    Validate a city and derive its slug from the name and the state code.

    The slug is regenerated whenever the name or the state changes.
    """
    collector = FieldErrorCollector()
    current = repo.find_one(current_id) if current_id is not None else None

    check_range(collector, "latitude", payload.get("latitude"), -90, 90)
    check_range(collector, "longitude", payload.get("longitude"), -180, 180)
    check_relation(repo, collector, State, "state_id", payload.get("state_id"), "State")
    collector.throw_if_errors()

    payload = dict(payload)
    if "name" in payload or "state_id" in payload:
        state = repo.session.get(State, changed_value(payload, current, "state_id"))
        payload["slug"] = create_slug(changed_value(payload, current, "name"), suffix=state.code)
        check_uniqueness(repo, collector, [UniqueField("slug", payload["slug"])], current_id)
    collector.throw_if_errors()
    return payload


def validate_population(repo: PopulationRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("code", payload.get("code"))], current_id)
    collector.throw_if_errors()
    return payload


def validate_population_cities(repo: PopulationRepository, population_id: int, city_ids: list[int]) -> None:
    """A city can belong to one population only."""
    collector = FieldErrorCollector()
    collector.add_if(
        len(set(city_ids)) != len(city_ids),
        "cityIds",
        "DUPLICATE_INPUT",
        "Duplicate city IDs are not allowed in the assignment",
        city_ids,
    )
    collector.throw_if_errors()

    collector.add_if(
        not repo.exists_by("id", population_id),
        "populationId",
        "NOT_FOUND",
        f"Population with id {population_id} not found",
        population_id,
    )
    collector.throw_if_errors()
    if not city_ids:
        return

    existing = set(CityRepository(repo.session).find_existing_ids(city_ids))
    missing = [i for i in city_ids if i not in existing]
    collector.add_if(
        bool(missing),
        "cityIds",
        "NOT_FOUND",
        f"Cities with IDs [{', '.join(str(i) for i in missing)}] not found",
        missing,
    )
    collector.throw_if_errors()

    taken = sorted(repo.find_city_owners(city_ids, exclude_population_id=population_id))
    collector.add_if(
        bool(taken),
        "cityIds",
        "DUPLICATE",
        f"Cities with IDs [{', '.join(str(i) for i in taken)}] are already assigned to other populations",
        taken,
    )
    collector.throw_if_errors()


# =============================================================================
# Nodes & installations
# =============================================================================


def validate_node(repo: NodeRepository, payload: dict, current_id: int | None = None) -> dict:
    """
    Validate a node and derive its slug as ``n-<name>-<code>``.

    Coordinates must be valid degrees and the geofence radius at least 1.
    """
    collector = FieldErrorCollector()
    current = repo.find_one(current_id) if current_id is not None else None

    payload = dict(payload)
    if "name" in payload or "code" in payload:
        payload["slug"] = create_slug(
            changed_value(payload, current, "name"), "n", changed_value(payload, current, "code")
        )

    check_uniqueness(
        repo,
        collector,
        [UniqueField("code", payload.get("code")), UniqueField("slug", payload.get("slug"))],
        current_id,
    )
    check_range(collector, "latitude", payload.get("latitude"), -90, 90)
    check_range(collector, "longitude", payload.get("longitude"), -180, 180)
    check_range(collector, "radius", payload.get("radius"), minimum=1)
    check_relation(repo, collector, City, "city_id", payload.get("city_id"), "City")
    check_relation(repo, collector, Population, "population_id", payload.get("population_id"), "Population")
    check_relation(
        repo, collector, Installation, "installation_id", payload.get("installation_id"), "Installation"
    )
    collector.throw_if_errors()
    return payload


def validate_node_labels(repo: NodeRepository, node_id: int, label_ids: list[int]) -> None:
    collector = FieldErrorCollector()
    collector.add_if(
        len(set(label_ids)) != len(label_ids),
        "labelIds",
        "DUPLICATE_INPUT",
        "Duplicate label IDs are not allowed in the assignment",
        label_ids,
    )
    collector.throw_if_errors()
    collector.add_if(
        not repo.exists_by("id", node_id),
        "nodeId",
        "NOT_FOUND",
        f"Node with id {node_id} not found",
        node_id,
    )
    collector.throw_if_errors()
    check_id_list(
        collector,
        "labelIds",
        label_ids,
        LabelRepository(repo.session),
        "Labels",
        "Duplicate label IDs are not allowed in the assignment",
    )
    collector.throw_if_errors()


def validate_installation(repo: InstallationRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_relation(
        repo,
        collector,
        InstallationType,
        "installation_type_id",
        payload.get("installation_type_id"),
        "Installation type",
    )
    collector.throw_if_errors()
    return payload


def validate_installation_amenities(
    repo: InstallationRepository, installation_id: int, amenity_ids: list[int]
) -> None:
    """Only amenities of type ``installation`` can be attached to an installation."""
    collector = FieldErrorCollector()
    repo.find_one(installation_id)
    amenity_repo = AmenityRepository(repo.session)
    check_id_list(
        collector,
        "amenityIds",
        amenity_ids,
        amenity_repo,
        "Amenities",
        "Duplicate amenity IDs are not allowed in the assignment",
    )
    collector.throw_if_errors()

    if amenity_ids:
        wrong_type = [
            amenity.id
            for amenity in amenity_repo.find_all(filters={"id": amenity_ids})
            if amenity.amenity_type != AmenityType.INSTALLATION.value
        ]
        collector.add_if(
            bool(wrong_type),
            "amenityIds",
            "INVALID_VALUE",
            f"Amenities with ids [{', '.join(str(i) for i in wrong_type)}] "
            f"are not of type '{AmenityType.INSTALLATION.value}'",
            wrong_type,
        )
    collector.throw_if_errors()


def validate_installation_type(
    repo: InstallationTypeRepository, payload: dict, current_id: int | None = None
) -> dict:
    collector = FieldErrorCollector()
    if current_id is not None:
        ensure_installation_type_editable(repo, current_id)
    check_uniqueness(repo, collector, [UniqueField("code", payload.get("code"))], current_id)
    collector.throw_if_errors()
    return payload


def ensure_installation_type_editable(repo: InstallationTypeRepository, installation_type_id: int) -> None:
    installation_type = repo.find_one(installation_type_id)
    if installation_type.system_locked:
        raise ValidationError(
            f"Installation type with id {installation_type_id} is system locked and cannot be modified"
        )


def validate_installation_type_event_types(
    repo: InstallationTypeRepository, installation_type_id: int, event_type_ids: list[int]
) -> None:
    collector = FieldErrorCollector()
    repo.find_one(installation_type_id)
    check_id_list(
        collector,
        "eventTypeIds",
        event_type_ids,
        EventTypeRepository(repo.session),
        "Event types",
        "Duplicate event type IDs are not allowed in the assignment",
    )
    collector.throw_if_errors()


def validate_event_type(repo: EventTypeRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("code", payload.get("code"))], current_id)
    check_range(collector, "base_time", payload.get("base_time"), minimum=0)
    collector.throw_if_errors()
    return payload


def validate_label(repo: LabelRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("name", payload.get("name"))], current_id)
    color = payload.get("color")
    collector.add_if(
        color is not None and not HEX_COLOR.match(color),
        "color",
        "INVALID_FORMAT",
        "Color must be a hex value like #1A2B3C",
        color,
    )
    collector.throw_if_errors()
    return payload


def validate_amenity(repo: AmenityRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("name", payload.get("name"))], current_id)

    amenity_type = payload.get("amenity_type")
    if amenity_type is not None and amenity_type not in {t.value for t in AmenityType}:
        collector.add(
            StandardFieldErrors.invalid_value(
                "amenityType",
                f"Amenity type must be one of: {', '.join(t.value for t in AmenityType)}",
                amenity_type,
            )
        )
    category = payload.get("category")
    if category is not None and category not in {c.value for c in AmenityCategory}:
        collector.add(
            StandardFieldErrors.invalid_value(
                "category",
                f"Amenity category must be one of: {', '.join(c.value for c in AmenityCategory)}",
                category,
            )
        )

    icon_name = payload.get("icon_name")
    collector.add_if(
        bool(icon_name) and not KEBAB_CASE.match(icon_name),
        "iconName",
        "INVALID_FORMAT",
        "Icon name must be in kebab-case format (lowercase letters, numbers, and hyphens)",
        icon_name,
    )
    collector.throw_if_errors()
    return payload


# =============================================================================
# Installation schemas & properties
# =============================================================================

FIELD_TYPE_LABELS = {t.value: t.value.replace("_", " ").capitalize() for t in InstallationSchemaFieldType}
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_installation_schema(
    repo: InstallationSchemaRepository, payload: dict, current_id: int | None = None
) -> dict:
    """
    Names are unique within an installation type.

    Only enum fields carry options, as ``{"enumValues": [...]}`` with at
    least one non-blank string. Changing an enum field to another type
    without new options clears them.
    """
    collector = FieldErrorCollector()
    current = repo.find_one(current_id) if current_id is not None else None
    installation_type_id = changed_value(payload, current, "installation_type_id")
    check_relation(
        repo,
        collector,
        InstallationType,
        "installation_type_id",
        payload.get("installation_type_id"),
        "Installation type",
    )
    check_uniqueness(
        repo,
        collector,
        [
            UniqueField(
                "name",
                changed_value(payload, current, "name"),
                scope=("installation_type_id", installation_type_id),
            )
        ],
        current_id,
    )

    field_type = changed_value(payload, current, "type")
    if (
        "type" in payload
        and "options" not in payload
        and field_type != InstallationSchemaFieldType.ENUM.value
    ):
        payload = {**payload, "options": {}}
    options = changed_value(payload, current, "options") or {}

    if field_type is not None and field_type not in FIELD_TYPE_LABELS:
        collector.add_error(
            "type",
            "UNSUPPORTED_FIELD_TYPE",
            f"Unsupported field type: {field_type}. Supported types are: {', '.join(FIELD_TYPE_LABELS)}",
            field_type,
        )
    elif field_type == InstallationSchemaFieldType.ENUM.value:
        enum_values = options.get("enumValues") if isinstance(options, dict) else None
        if not isinstance(enum_values, list):
            collector.add_error(
                "options", "INVALID_ENUM_OPTIONS", "Enum type must have enumValues array in options", options
            )
        elif not enum_values:
            collector.add_error(
                "options", "EMPTY_ENUM_OPTIONS", "Enum type must have at least one option in enumValues", options
            )
        elif not all(isinstance(v, str) and v.strip() for v in enum_values):
            collector.add_error(
                "options", "INVALID_ENUM_VALUES", "All enum values must be non-empty strings", enum_values
            )
    elif field_type is not None:
        collector.add_if(
            bool(options),
            "options",
            "INVALID_OPTIONS_FOR_TYPE",
            f"{FIELD_TYPE_LABELS[field_type]} type should not have options",
            options,
        )

    collector.throw_if_errors()
    return payload


def _is_number(text: str) -> bool:
    try:
        return not math.isnan(float(text))
    except ValueError:
        return False


def _is_date(text: str) -> bool:
    if not ISO_DATE.match(text):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def normalize_property_value(
    collector: FieldErrorCollector, schema: InstallationSchema, value: Any
) -> str | None:
    """
    Check ``value`` against its schema and return the text to store.

    Errors are keyed on the schema name. Blank values are stored as None
    and are only an error for required fields. Booleans are stored as
    ``"true"`` or ``"false"``.
    """
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = "" if value is None else str(value).strip()

    if not text:
        collector.add_if(schema.required, schema.name, "REQUIRED", f"{schema.name} is required", value)
        return None

    if schema.type == InstallationSchemaFieldType.NUMBER.value:
        collector.add_if(
            not _is_number(text), schema.name, "INVALID_NUMBER", f'"{text}" is not a valid number', value
        )
    elif schema.type == InstallationSchemaFieldType.BOOLEAN.value:
        lowered = text.lower()
        if lowered in ("true", "1"):
            return "true"
        if lowered in ("false", "0"):
            return "false"
        collector.add_error(
            schema.name,
            "INVALID_BOOLEAN",
            f'"{text}" is not a valid boolean. Use "true", "false", "1", or "0"',
            value,
        )
    elif schema.type == InstallationSchemaFieldType.DATE.value:
        collector.add_if(
            not _is_date(text),
            schema.name,
            "INVALID_DATE",
            f'"{text}" is not a valid date. Use YYYY-MM-DD format',
            value,
        )
    elif schema.type == InstallationSchemaFieldType.ENUM.value:
        enum_values = (schema.options or {}).get("enumValues")
        if not isinstance(enum_values, list):
            collector.add_error(
                schema.name, "INVALID_ENUM_SCHEMA", f"Schema {schema.name} has no enum values", value
            )
        else:
            collector.add_if(
                text not in enum_values,
                schema.name,
                "INVALID_ENUM_VALUE",
                f'"{text}" is not a valid option. Valid options are: {", ".join(enum_values)}',
                value,
            )
    return text


def cast_property_value(field_type: str, value: str | None) -> Any:
    """Stored property text as a JSON value of the schema's type."""
    if value is None or value == "":
        return None
    if field_type == InstallationSchemaFieldType.NUMBER.value:
        try:
            number = float(value)
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    if field_type == InstallationSchemaFieldType.BOOLEAN.value:
        return {"true": True, "false": False}.get(value.lower())
    return value


def validate_installation_properties(
    repo: InstallationRepository, installation_id: int, properties: list[dict]
) -> dict[int, str | None]:
    """
    Validate ``[{"name": ..., "value": ...}]`` against the schemas of the
    installation's type.

    Returns the normalized values keyed by schema id. An unknown name raises
    NotFoundError.
    """
    installation = repo.find_one(installation_id)
    collector = FieldErrorCollector()
    names = [prop["name"] for prop in properties]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    collector.add_if(
        bool(duplicates),
        "properties",
        "DUPLICATE_INPUT",
        f"Duplicate property names are not allowed: {', '.join(duplicates)}",
        duplicates,
    )
    collector.throw_if_errors()

    schemas = {}
    if installation.installation_type_id is not None:
        schema_repo = InstallationSchemaRepository(repo.session)
        schemas = {s.name: s for s in schema_repo.find_for_type(installation.installation_type_id)}

    values = {}
    for prop in properties:
        schema = schemas.get(prop["name"])
        if schema is None:
            raise NotFoundError(f"Schema with name {prop['name']} not found")
        values[schema.id] = normalize_property_value(collector, schema, prop.get("value"))
    collector.throw_if_errors()
    return values
