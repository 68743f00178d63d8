"""
Application constants for Fleet Inventory.

Contains module permission codes, the endpoint-to-module permission map,
pagination defaults and the status transition tables.
"""

# =============================================================================
# Pagination
# =============================================================================

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# =============================================================================
# Module Permissions
# =============================================================================

MODULE_PERMISSIONS = {
    # Inventory - Localities
    "COUNTRIES": "inventory_countries",
    "STATES": "inventory_states",
    "CITIES": "inventory_cities",
    "POPULATIONS": "inventory_populations",
    "NODES": "inventory_nodes",
    "INSTALLATION_TYPES": "inventory_installation_types",
    "EVENTS": "inventory_events",
    "LABELS": "inventory_labels",
    # Inventory - Operators
    "TRANSPORTERS": "inventory_transporters",
    "SERVICE_TYPES": "inventory_service_types",
    "BUS_LINES": "inventory_bus_lines",
    # Inventory - Fleet
    "BUSES": "inventory_buses",
    "BUS_MODELS": "inventory_bus_models",
    "SEAT_DIAGRAMS": "inventory_seat_diagrams",
    "DRIVERS": "inventory_drivers",
    "TECHNOLOGIES": "inventory_technologies",
    "CHROMATICS": "inventory_chromatics",
    # Inventory - General Config
    "AMENITIES": "inventory_amenities",
    # Users
    "PERMISSIONS": "users_permissions",
    "ROLES": "users_roles",
    "USERS": "users_users",
}

_M = MODULE_PERMISSIONS


def _crud_endpoints(
    service: str,
    singular: str,
    plural: str,
    modules: list[str],
    list_modules: list[str] | None = None,
) -> dict[str, list[str]]:
    """Build the standard endpoint entries for one entity.

    The unpaginated list is used to fill dropdowns in other forms, so it
    may be granted by more modules than the entity's own.
    """
    return {
        f"{service}:create{singular}": modules,
        f"{service}:get{singular}": modules,
        f"{service}:list{plural}": list_modules or modules,
        f"{service}:list{plural}Paginated": modules,
        f"{service}:update{singular}": modules,
        f"{service}:delete{singular}": modules,
        f"{service}:restore{singular}": modules,
    }


# Maps service:endpoint to the module permissions that grant access.
# An empty list means the endpoint is reserved for system administrators.
ENDPOINT_TO_MODULES: dict[str, list[str]] = {
    # Inventory - Localities
    **_crud_endpoints("inventory", "Country", "Countries", [_M["COUNTRIES"]],
                      [_M["COUNTRIES"], _M["STATES"]]),
    **_crud_endpoints("inventory", "State", "States", [_M["STATES"]],
                      [_M["STATES"], _M["CITIES"]]),
    **_crud_endpoints("inventory", "City", "Cities", [_M["CITIES"]],
                      [_M["CITIES"], _M["NODES"], _M["TRANSPORTERS"]]),
    **_crud_endpoints("inventory", "Population", "Populations", [_M["POPULATIONS"]],
                      [_M["POPULATIONS"], _M["CITIES"], _M["NODES"]]),
    "inventory:assignCitiesToPopulation": [_M["POPULATIONS"]],
    **_crud_endpoints("inventory", "Node", "Nodes", [_M["NODES"]],
                      [_M["NODES"], _M["BUSES"]]),
    "inventory:assignLabelsToNode": [_M["NODES"]],
    **_crud_endpoints("inventory", "Installation", "Installations", [_M["NODES"]]),
    "inventory:assignAmenitiesToInstallation": [_M["NODES"]],
    **_crud_endpoints("inventory", "InstallationType", "InstallationTypes",
                      [_M["INSTALLATION_TYPES"]],
                      [_M["INSTALLATION_TYPES"], _M["NODES"]]),
    "inventory:assignEventTypesToInstallationType": [_M["INSTALLATION_TYPES"]],
    **_crud_endpoints("inventory", "InstallationSchema", "InstallationSchemas",
                      [_M["INSTALLATION_TYPES"]],
                      [_M["INSTALLATION_TYPES"], _M["NODES"]]),
    "inventory:listInstallationTypeSchemas": [_M["INSTALLATION_TYPES"], _M["NODES"]],
    "inventory:getInstallationProperties": [_M["NODES"]],
    "inventory:upsertInstallationProperties": [_M["NODES"]],
    **_crud_endpoints("inventory", "EventType", "EventTypes", [_M["EVENTS"]],
                      [_M["EVENTS"], _M["INSTALLATION_TYPES"]]),
    **_crud_endpoints("inventory", "Label", "Labels", [_M["LABELS"]],
                      [_M["LABELS"], _M["NODES"]]),
    "inventory:getLabelsMetrics": [_M["LABELS"]],
    # Inventory - Operators
    **_crud_endpoints("inventory", "Transporter", "Transporters", [_M["TRANSPORTERS"]],
                      [_M["TRANSPORTERS"], _M["BUS_LINES"], _M["BUSES"]]),
    **_crud_endpoints("inventory", "ServiceType", "ServiceTypes", [_M["SERVICE_TYPES"]],
                      [_M["SERVICE_TYPES"], _M["BUS_LINES"]]),
    **_crud_endpoints("inventory", "BusLine", "BusLines", [_M["BUS_LINES"]],
                      [_M["BUS_LINES"], _M["DRIVERS"], _M["BUSES"]]),
    # Inventory - Fleet
    **_crud_endpoints("inventory", "BusModel", "BusModels", [_M["BUS_MODELS"]],
                      [_M["BUS_MODELS"], _M["BUSES"]]),
    **_crud_endpoints("inventory", "SeatDiagram", "SeatDiagrams", [_M["SEAT_DIAGRAMS"]],
                      [_M["SEAT_DIAGRAMS"], _M["BUS_MODELS"], _M["BUSES"]]),
    "inventory:listSeatDiagramSpaces": [_M["SEAT_DIAGRAMS"], _M["BUS_MODELS"]],
    "inventory:updateSeatDiagramSpaces": [_M["SEAT_DIAGRAMS"]],
    "inventory:editSeatDiagramGrid": [_M["SEAT_DIAGRAMS"]],
    **_crud_endpoints("inventory", "Bus", "Buses", [_M["BUSES"]]),
    "inventory:listBusValidNextStatuses": [_M["BUSES"]],
    "inventory:assignTechnologiesToBus": [_M["BUSES"]],
    **_crud_endpoints("inventory", "Driver", "Drivers", [_M["DRIVERS"]],
                      [_M["DRIVERS"], _M["BUSES"]]),
    "inventory:listDriverValidNextStatuses": [_M["DRIVERS"]],
    "inventory:createDriverTimeOff": [_M["DRIVERS"]],
    "inventory:getDriverTimeOff": [_M["DRIVERS"]],
    "inventory:listDriverTimeOffs": [_M["DRIVERS"]],
    "inventory:listDriverTimeOffsPaginated": [_M["DRIVERS"]],
    "inventory:updateDriverTimeOff": [_M["DRIVERS"]],
    "inventory:deleteDriverTimeOff": [_M["DRIVERS"]],
    "inventory:createDriverMedicalCheck": [_M["DRIVERS"]],
    "inventory:getDriverMedicalCheck": [_M["DRIVERS"]],
    "inventory:listDriverMedicalChecks": [_M["DRIVERS"]],
    "inventory:listDriverMedicalChecksPaginated": [_M["DRIVERS"]],
    **_crud_endpoints("inventory", "Technology", "Technologies", [_M["TECHNOLOGIES"]],
                      [_M["TECHNOLOGIES"], _M["BUSES"]]),
    **_crud_endpoints("inventory", "Chromatic", "Chromatics", [_M["CHROMATICS"]],
                      [_M["CHROMATICS"], _M["BUSES"]]),
    # Inventory - General Config
    **_crud_endpoints("inventory", "Amenity", "Amenities", [_M["AMENITIES"]],
                      [_M["AMENITIES"], _M["NODES"], _M["SERVICE_TYPES"], _M["BUS_MODELS"]]),
    # Users
    **_crud_endpoints("users", "User", "Users", [_M["USERS"]]),
    "users:assignRolesToUser": [_M["USERS"]],
    **_crud_endpoints("users", "Role", "Roles", [_M["ROLES"]],
                      [_M["ROLES"], _M["USERS"]]),
    "users:assignPermissionsToRole": [_M["ROLES"]],
    **_crud_endpoints("users", "Permission", "Permissions", [_M["PERMISSIONS"]],
                      [_M["PERMISSIONS"], _M["ROLES"]]),
    # Audits are read-only for system admins
    "users:listAuditsPaginated": [],
}


# =============================================================================
# Status Transitions
# =============================================================================

BUS_STATUS_TRANSITIONS = {
    "ACTIVE": ["MAINTENANCE", "REPAIR", "OUT_OF_SERVICE", "RESERVED", "IN_TRANSIT", "RETIRED"],
    "MAINTENANCE": ["ACTIVE", "REPAIR", "OUT_OF_SERVICE", "RETIRED"],
    "REPAIR": ["ACTIVE", "MAINTENANCE", "OUT_OF_SERVICE", "RETIRED"],
    "OUT_OF_SERVICE": ["ACTIVE", "MAINTENANCE", "REPAIR", "RETIRED"],
    "RESERVED": ["ACTIVE", "IN_TRANSIT", "MAINTENANCE"],
    "IN_TRANSIT": ["ACTIVE", "MAINTENANCE", "REPAIR"],
    "RETIRED": ["OUT_OF_SERVICE"],
}

DRIVER_STATUS_TRANSITIONS = {
    "ACTIVE": ["INACTIVE", "SUSPENDED", "ON_LEAVE", "TERMINATED"],
    "INACTIVE": ["ACTIVE", "TERMINATED"],
    "SUSPENDED": ["ACTIVE", "TERMINATED"],
    "ON_LEAVE": ["ACTIVE", "TERMINATED"],
    "TERMINATED": [],
    "IN_TRAINING": ["ACTIVE", "PROBATION", "TERMINATED"],
    "PROBATION": ["ACTIVE", "TERMINATED"],
}
DRIVER_INITIAL_STATUSES = ["IN_TRAINING", "ACTIVE", "PROBATION"]
