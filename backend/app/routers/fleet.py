"""
Fleet endpoints: technologies, chromatics, bus models, buses and drivers.

Buses and drivers expose the statuses they may move to next, following the
transition tables in inventory_core.constants. Driver time-offs and medical
checks are nested under ``/drivers/{driver_id}``.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from inventory_core.domain import (
    validate_bus,
    validate_bus_model,
    validate_chromatic,
    validate_driver,
    validate_technology,
    validate_technology_assignment,
)
from inventory_core.models import User
from inventory_core.repositories import (
    BusModelRepository,
    BusRepository,
    ChromaticRepository,
    DriverMedicalCheckRepository,
    DriverRepository,
    DriverTimeOffRepository,
    TechnologyRepository,
)
from inventory_core.state_machine import bus_status_machine, driver_status_machine

from ..auth.permissions import require_permission
from ..database import get_db
from ..schemas import (
    BusCreate,
    BusModelCreate,
    BusModelResponse,
    BusModelUpdate,
    BusResponse,
    BusUpdate,
    BusWithTechnologiesResponse,
    ChromaticCreate,
    ChromaticResponse,
    ChromaticUpdate,
    DriverCreate,
    DriverMedicalCheckCreate,
    DriverMedicalCheckResponse,
    DriverResponse,
    DriverTimeOffCreate,
    DriverTimeOffResponse,
    DriverTimeOffUpdate,
    DriverUpdate,
    ListRequest,
    ListResponse,
    PaginatedResponse,
    TechnologyCreate,
    TechnologyIdsRequest,
    TechnologyResponse,
    TechnologyUpdate,
)
from ..services import crud_service, driver_record_service
from .crud import CrudResource, add_crud_routes, crud_router

# =============================================================================
# Catalogs
# =============================================================================

technologies_router = crud_router(
    "/technologies",
    ["technologies"],
    CrudResource(
        singular="Technology",
        plural="Technologies",
        repository=TechnologyRepository,
        create_schema=TechnologyCreate,
        update_schema=TechnologyUpdate,
        response_schema=TechnologyResponse,
        validator=validate_technology,
    ),
)

chromatics_router = crud_router(
    "/chromatics",
    ["chromatics"],
    CrudResource(
        singular="Chromatic",
        plural="Chromatics",
        repository=ChromaticRepository,
        create_schema=ChromaticCreate,
        update_schema=ChromaticUpdate,
        response_schema=ChromaticResponse,
        validator=validate_chromatic,
    ),
)

bus_models_router = crud_router(
    "/bus-models",
    ["bus-models"],
    CrudResource(
        singular="BusModel",
        plural="BusModels",
        repository=BusModelRepository,
        create_schema=BusModelCreate,
        update_schema=BusModelUpdate,
        response_schema=BusModelResponse,
        validator=validate_bus_model,
    ),
)


# =============================================================================
# Buses
# =============================================================================

buses_router = APIRouter(prefix="/buses", tags=["buses"])


@buses_router.get("/{bus_id}/next-statuses", response_model=ListResponse[str])
def list_bus_valid_next_statuses(
    bus_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listBusValidNextStatuses")),
):
    bus = BusRepository(db).find_one(bus_id)
    return {"data": bus_status_machine.next_states(bus.status)}


@buses_router.put("/{bus_id}/technologies", response_model=BusWithTechnologiesResponse)
def assign_technologies_to_bus(
    bus_id: int,
    payload: TechnologyIdsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:assignTechnologiesToBus")),
):
    """Replace the technologies installed on a bus. An empty list clears them."""
    return crud_service.assign_related(
        db,
        BusRepository,
        TechnologyRepository,
        bus_id,
        payload.technology_ids,
        validate_technology_assignment,
        BusRepository.assign_technologies,
    )


add_crud_routes(
    buses_router,
    CrudResource(
        singular="Bus",
        plural="Buses",
        repository=BusRepository,
        create_schema=BusCreate,
        update_schema=BusUpdate,
        response_schema=BusResponse,
        validator=validate_bus,
    ),
)


# =============================================================================
# Drivers
# =============================================================================

drivers_router = APIRouter(prefix="/drivers", tags=["drivers"])


@drivers_router.get("/{driver_id}/next-statuses", response_model=ListResponse[str])
def list_driver_valid_next_statuses(
    driver_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listDriverValidNextStatuses")),
):
    driver = DriverRepository(db).find_one(driver_id)
    return {"data": driver_status_machine.next_states(driver.status)}


add_crud_routes(
    drivers_router,
    CrudResource(
        singular="Driver",
        plural="Drivers",
        repository=DriverRepository,
        create_schema=DriverCreate,
        update_schema=DriverUpdate,
        response_schema=DriverResponse,
        validator=validate_driver,
    ),
)

time_offs_router = APIRouter(prefix="/drivers/{driver_id}/time-offs", tags=["drivers"])


@time_offs_router.post("/", response_model=DriverTimeOffResponse, status_code=status.HTTP_201_CREATED)
def create_driver_time_off(
    driver_id: int,
    payload: DriverTimeOffCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:createDriverTimeOff")),
):
    return driver_record_service.create_time_off(db, driver_id, payload.model_dump(exclude_unset=True))


@time_offs_router.post("/list", response_model=PaginatedResponse[DriverTimeOffResponse])
def list_driver_time_offs_paginated(
    driver_id: int,
    request: ListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listDriverTimeOffsPaginated")),
):
    result = driver_record_service.list_records(db, DriverTimeOffRepository, driver_id, request.to_params())
    return {"data": result.data, "pagination": result.pagination.to_dict()}


@time_offs_router.post("/list/all", response_model=ListResponse[DriverTimeOffResponse])
def list_driver_time_offs(
    driver_id: int,
    request: ListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listDriverTimeOffs")),
):
    params = request.to_params()
    return {"data": driver_record_service.list_all_records(db, DriverTimeOffRepository, driver_id, params)}


@time_offs_router.get("/{time_off_id}", response_model=DriverTimeOffResponse)
def get_driver_time_off(
    driver_id: int,
    time_off_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:getDriverTimeOff")),
):
    return driver_record_service.get_record(db, DriverTimeOffRepository, driver_id, time_off_id)


@time_offs_router.put("/{time_off_id}", response_model=DriverTimeOffResponse)
def update_driver_time_off(
    driver_id: int,
    time_off_id: int,
    payload: DriverTimeOffUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:updateDriverTimeOff")),
):
    data = payload.model_dump(exclude_unset=True)
    return driver_record_service.update_time_off(db, driver_id, time_off_id, data)


@time_offs_router.delete("/{time_off_id}", response_model=DriverTimeOffResponse)
def delete_driver_time_off(
    driver_id: int,
    time_off_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:deleteDriverTimeOff")),
):
    return driver_record_service.delete_time_off(db, driver_id, time_off_id)


# Medical checks are append-only
medical_checks_router = APIRouter(prefix="/drivers/{driver_id}/medical-checks", tags=["drivers"])


@medical_checks_router.post(
    "/", response_model=DriverMedicalCheckResponse, status_code=status.HTTP_201_CREATED
)
def create_driver_medical_check(
    driver_id: int,
    payload: DriverMedicalCheckCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:createDriverMedicalCheck")),
):
    return driver_record_service.create_medical_check(db, driver_id, payload.model_dump(exclude_unset=True))


@medical_checks_router.post("/list", response_model=PaginatedResponse[DriverMedicalCheckResponse])
def list_driver_medical_checks_paginated(
    driver_id: int,
    request: ListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listDriverMedicalChecksPaginated")),
):
    result = driver_record_service.list_records(
        db, DriverMedicalCheckRepository, driver_id, request.to_params()
    )
    return {"data": result.data, "pagination": result.pagination.to_dict()}


@medical_checks_router.post("/list/all", response_model=ListResponse[DriverMedicalCheckResponse])
def list_driver_medical_checks(
    driver_id: int,
    request: ListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listDriverMedicalChecks")),
):
    checks = driver_record_service.list_all_records(
        db, DriverMedicalCheckRepository, driver_id, request.to_params()
    )
    return {"data": checks}


@medical_checks_router.get("/{medical_check_id}", response_model=DriverMedicalCheckResponse)
def get_driver_medical_check(
    driver_id: int,
    medical_check_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:getDriverMedicalCheck")),
):
    return driver_record_service.get_record(db, DriverMedicalCheckRepository, driver_id, medical_check_id)


routers = [
    technologies_router,
    chromatics_router,
    bus_models_router,
    buses_router,
    drivers_router,
    time_offs_router,
    medical_checks_router,
]
