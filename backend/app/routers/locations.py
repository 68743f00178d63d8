"""
Geography, node and installation endpoints.

Countries, states, cities and populations; nodes with their labels;
installations with their amenities and typed properties; installation types
with their event types and property schemas; and the amenity catalog.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_core.domain import (
    ensure_installation_type_editable,
    validate_amenity,
    validate_city,
    validate_country,
    validate_event_type,
    validate_installation,
    validate_installation_amenities,
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
from inventory_core.models import Label, User
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
)

from ..auth.permissions import require_permission
from ..database import get_db
from ..schemas import (
    AmenityCreate,
    AmenityIdsRequest,
    AmenityResponse,
    AmenityUpdate,
    CityCreate,
    CityIdsRequest,
    CityResponse,
    CityUpdate,
    CountryCreate,
    CountryResponse,
    CountryUpdate,
    EventTypeCreate,
    EventTypeIdsRequest,
    EventTypeResponse,
    EventTypeUpdate,
    InstallationCreate,
    InstallationPropertiesRequest,
    InstallationPropertyResponse,
    InstallationResponse,
    InstallationSchemaCreate,
    InstallationSchemaResponse,
    InstallationSchemaUpdate,
    InstallationTypeCreate,
    InstallationTypeResponse,
    InstallationTypeUpdate,
    InstallationTypeWithEventTypesResponse,
    InstallationUpdate,
    InstallationWithAmenitiesResponse,
    LabelCreate,
    LabelIdsRequest,
    LabelMetricsResponse,
    LabelResponse,
    LabelUpdate,
    ListResponse,
    NodeCreate,
    NodeResponse,
    NodeUpdate,
    NodeWithLabelsResponse,
    PopulationCreate,
    PopulationResponse,
    PopulationUpdate,
    PopulationWithCitiesResponse,
    StateCreate,
    StateResponse,
    StateUpdate,
)
from ..services import crud_service, installation_property_service
from .crud import CrudResource, add_crud_routes, crud_router

# =============================================================================
# Geography
# =============================================================================

countries_router = crud_router(
    "/countries",
    ["countries"],
    CrudResource(
        singular="Country",
        plural="Countries",
        repository=CountryRepository,
        create_schema=CountryCreate,
        update_schema=CountryUpdate,
        response_schema=CountryResponse,
        validator=validate_country,
    ),
)

states_router = crud_router(
    "/states",
    ["states"],
    CrudResource(
        singular="State",
        plural="States",
        repository=StateRepository,
        create_schema=StateCreate,
        update_schema=StateUpdate,
        response_schema=StateResponse,
        validator=validate_state,
    ),
)

cities_router = crud_router(
    "/cities",
    ["cities"],
    CrudResource(
        singular="City",
        plural="Cities",
        repository=CityRepository,
        create_schema=CityCreate,
        update_schema=CityUpdate,
        response_schema=CityResponse,
        validator=validate_city,
    ),
)

populations_router = APIRouter(prefix="/populations", tags=["populations"])


@populations_router.put("/{population_id}/cities", response_model=PopulationWithCitiesResponse)
def assign_cities_to_population(
    population_id: int,
    payload: CityIdsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:assignCitiesToPopulation")),
):
    """Replace the cities of a population. A city belongs to one population at most."""
    return crud_service.assign_related(
        db,
        PopulationRepository,
        CityRepository,
        population_id,
        payload.city_ids,
        validate_population_cities,
        PopulationRepository.assign_cities,
    )


add_crud_routes(
    populations_router,
    CrudResource(
        singular="Population",
        plural="Populations",
        repository=PopulationRepository,
        create_schema=PopulationCreate,
        update_schema=PopulationUpdate,
        response_schema=PopulationResponse,
        validator=validate_population,
    ),
)


# =============================================================================
# Nodes & labels
# =============================================================================

nodes_router = APIRouter(prefix="/nodes", tags=["nodes"])


@nodes_router.put("/{node_id}/labels", response_model=NodeWithLabelsResponse)
def assign_labels_to_node(
    node_id: int,
    payload: LabelIdsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:assignLabelsToNode")),
):
    return crud_service.assign_related(
        db,
        NodeRepository,
        LabelRepository,
        node_id,
        payload.label_ids,
        validate_node_labels,
        NodeRepository.assign_labels,
    )


add_crud_routes(
    nodes_router,
    CrudResource(
        singular="Node",
        plural="Nodes",
        repository=NodeRepository,
        create_schema=NodeCreate,
        update_schema=NodeUpdate,
        response_schema=NodeResponse,
        validator=validate_node,
    ),
)


def with_node_counts(db: Session, labels: list[Label]) -> list[dict]:
    """Label responses with the number of nodes carrying each label."""
    counts = LabelRepository(db).node_counts([label.id for label in labels])
    return [
        {**LabelResponse.model_validate(label).model_dump(), "node_count": counts.get(label.id, 0)}
        for label in labels
    ]


labels_router = APIRouter(prefix="/labels", tags=["labels"])


@labels_router.get("/metrics", response_model=LabelMetricsResponse)
def get_labels_metrics(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:getLabelsMetrics")),
):
    """Label totals and the most used labels."""
    return LabelRepository(db).metrics()


add_crud_routes(
    labels_router,
    CrudResource(
        singular="Label",
        plural="Labels",
        repository=LabelRepository,
        create_schema=LabelCreate,
        update_schema=LabelUpdate,
        response_schema=LabelResponse,
        validator=validate_label,
        enrich=with_node_counts,
    ),
)


# =============================================================================
# Installations
# =============================================================================

installations_router = APIRouter(prefix="/installations", tags=["installations"])


@installations_router.put("/{installation_id}/amenities", response_model=InstallationWithAmenitiesResponse)
def assign_amenities_to_installation(
    installation_id: int,
    payload: AmenityIdsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:assignAmenitiesToInstallation")),
):
    return crud_service.assign_related(
        db,
        InstallationRepository,
        AmenityRepository,
        installation_id,
        payload.amenity_ids,
        validate_installation_amenities,
        InstallationRepository.assign_amenities,
    )


@installations_router.get(
    "/{installation_id}/properties", response_model=ListResponse[InstallationPropertyResponse]
)
def get_installation_properties(
    installation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:getInstallationProperties")),
):
    return {"data": installation_property_service.get_properties(db, installation_id)}


@installations_router.put(
    "/{installation_id}/properties", response_model=ListResponse[InstallationPropertyResponse]
)
def upsert_installation_properties(
    installation_id: int,
    payload: InstallationPropertiesRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:upsertInstallationProperties")),
):
    properties = [p.model_dump() for p in payload.properties]
    return {"data": installation_property_service.upsert_properties(db, installation_id, properties)}


add_crud_routes(
    installations_router,
    CrudResource(
        singular="Installation",
        plural="Installations",
        repository=InstallationRepository,
        create_schema=InstallationCreate,
        update_schema=InstallationUpdate,
        response_schema=InstallationResponse,
        validator=validate_installation,
    ),
)

installation_types_router = APIRouter(prefix="/installation-types", tags=["installation-types"])


@installation_types_router.put(
    "/{installation_type_id}/event-types", response_model=InstallationTypeWithEventTypesResponse
)
def assign_event_types_to_installation_type(
    installation_type_id: int,
    payload: EventTypeIdsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:assignEventTypesToInstallationType")),
):
    return crud_service.assign_related(
        db,
        InstallationTypeRepository,
        EventTypeRepository,
        installation_type_id,
        payload.event_type_ids,
        validate_installation_type_event_types,
        InstallationTypeRepository.assign_event_types,
    )


@installation_types_router.get(
    "/{installation_type_id}/schemas", response_model=ListResponse[InstallationSchemaResponse]
)
def list_installation_type_schemas(
    installation_type_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listInstallationTypeSchemas")),
):
    return {"data": installation_property_service.list_type_schemas(db, installation_type_id)}


# System-locked types can be neither updated (validator) nor deleted (guard)
add_crud_routes(
    installation_types_router,
    CrudResource(
        singular="InstallationType",
        plural="InstallationTypes",
        repository=InstallationTypeRepository,
        create_schema=InstallationTypeCreate,
        update_schema=InstallationTypeUpdate,
        response_schema=InstallationTypeResponse,
        validator=validate_installation_type,
        delete_guard=ensure_installation_type_editable,
    ),
)

installation_schemas_router = crud_router(
    "/installation-schemas",
    ["installation-schemas"],
    CrudResource(
        singular="InstallationSchema",
        plural="InstallationSchemas",
        repository=InstallationSchemaRepository,
        create_schema=InstallationSchemaCreate,
        update_schema=InstallationSchemaUpdate,
        response_schema=InstallationSchemaResponse,
        validator=validate_installation_schema,
    ),
)

event_types_router = crud_router(
    "/event-types",
    ["event-types"],
    CrudResource(
        singular="EventType",
        plural="EventTypes",
        repository=EventTypeRepository,
        create_schema=EventTypeCreate,
        update_schema=EventTypeUpdate,
        response_schema=EventTypeResponse,
        validator=validate_event_type,
    ),
)

amenities_router = crud_router(
    "/amenities",
    ["amenities"],
    CrudResource(
        singular="Amenity",
        plural="Amenities",
        repository=AmenityRepository,
        create_schema=AmenityCreate,
        update_schema=AmenityUpdate,
        response_schema=AmenityResponse,
        validator=validate_amenity,
    ),
)

routers = [
    countries_router,
    states_router,
    cities_router,
    populations_router,
    nodes_router,
    labels_router,
    installations_router,
    installation_types_router,
    installation_schemas_router,
    event_types_router,
    amenities_router,
]
