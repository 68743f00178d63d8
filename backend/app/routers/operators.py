"""
Transporter, service type and bus line endpoints.
"""

from inventory_core.domain import validate_bus_line, validate_service_type, validate_transporter
from inventory_core.repositories import BusLineRepository, ServiceTypeRepository, TransporterRepository

from ..schemas import (
    BusLineCreate,
    BusLineResponse,
    BusLineUpdate,
    ServiceTypeCreate,
    ServiceTypeResponse,
    ServiceTypeUpdate,
    TransporterCreate,
    TransporterResponse,
    TransporterUpdate,
)
from .crud import CrudResource, crud_router

transporters_router = crud_router(
    "/transporters",
    ["transporters"],
    CrudResource(
        singular="Transporter",
        plural="Transporters",
        repository=TransporterRepository,
        create_schema=TransporterCreate,
        update_schema=TransporterUpdate,
        response_schema=TransporterResponse,
        validator=validate_transporter,
    ),
)

service_types_router = crud_router(
    "/service-types",
    ["service-types"],
    CrudResource(
        singular="ServiceType",
        plural="ServiceTypes",
        repository=ServiceTypeRepository,
        create_schema=ServiceTypeCreate,
        update_schema=ServiceTypeUpdate,
        response_schema=ServiceTypeResponse,
        validator=validate_service_type,
    ),
)

bus_lines_router = crud_router(
    "/bus-lines",
    ["bus-lines"],
    CrudResource(
        singular="BusLine",
        plural="BusLines",
        repository=BusLineRepository,
        create_schema=BusLineCreate,
        update_schema=BusLineUpdate,
        response_schema=BusLineResponse,
        validator=validate_bus_line,
    ),
)

routers = [transporters_router, service_types_router, bus_lines_router]
