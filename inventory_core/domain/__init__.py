"""
Entity validators.

Every validator raises FieldValidationError listing all violations found.

Usage:
    from inventory_core.domain import validate_country

    payload = validate_country(CountryRepository(session), {"name": "Mexico", "code": "MX"})
"""

from .fleet import (
    validate_bus,
    validate_bus_model,
    validate_chromatic,
    validate_driver,
    validate_driver_medical_check,
    validate_driver_time_off,
    validate_seat_diagram,
    validate_technology,
    validate_technology_assignment,
)
from .locations import (
    cast_property_value,
    ensure_installation_type_editable,
    normalize_property_value,
    validate_amenity,
    validate_city,
    validate_country,
    validate_event_type,
    validate_installation,
    validate_installation_amenities,
    validate_installation_properties,
    validate_installation_schema,
    validate_installation_type,
    validate_installation_type_event_types,
    validate_label,
    validate_node,
    validate_node_labels,
    validate_population,
    validate_population_cities,
    validate_state,
)
from .operators import validate_bus_line, validate_service_type, validate_transporter
from .users import (
    validate_permission,
    validate_role,
    validate_role_permissions,
    validate_user,
    validate_user_roles,
)

__all__ = [
    # Locations
    "validate_country",
    "validate_state",
    "validate_city",
    "validate_population",
    "validate_population_cities",
    "validate_node",
    "validate_node_labels",
    "validate_installation",
    "validate_installation_amenities",
    "validate_installation_schema",
    "validate_installation_properties",
    "normalize_property_value",
    "cast_property_value",
    "validate_installation_type",
    "validate_installation_type_event_types",
    "ensure_installation_type_editable",
    "validate_event_type",
    "validate_label",
    "validate_amenity",
    # Operators
    "validate_transporter",
    "validate_service_type",
    "validate_bus_line",
    # Fleet
    "validate_technology",
    "validate_chromatic",
    "validate_bus_model",
    "validate_seat_diagram",
    "validate_bus",
    "validate_technology_assignment",
    "validate_driver",
    "validate_driver_time_off",
    "validate_driver_medical_check",
    # Users
    "validate_user",
    "validate_role",
    "validate_permission",
    "validate_user_roles",
    "validate_role_permissions",
]
