"""
Pydantic schemas for request and response validation.

JSON bodies use camelCase; Python code uses snake_case. Every schema accepts
both on input and emits camelCase.

Create schemas list required fields; update schemas make every field
optional and routers only apply the fields the client sent
(``model_dump(exclude_unset=True)``).
"""

from datetime import date, datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from inventory_core.config import get_settings
from inventory_core.constants import DEFAULT_PAGE
from inventory_core.pagination import ListParams, OrderBy
from inventory_core.seat_layout import SeatType, SpaceType

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EntityResponse(CamelModel):
    id: int
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


# =============================================================================
# Listing & pagination
# =============================================================================


class OrderBySchema(CamelModel):
    field: str
    direction: Literal["asc", "desc"] = "asc"


class ListRequest(CamelModel):
    """
    Body of every ``POST .../list`` and ``POST .../list/all`` call.

    ``pageSize`` defaults to DEFAULT_PAGE_SIZE; larger values than
    MAX_PAGE_SIZE are clamped by the repository.
    """

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    page_size: int | None = Field(default=None, ge=1)
    order_by: list[OrderBySchema] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)
    search_term: str | None = None

    def to_params(self) -> ListParams:
        return ListParams(
            page=self.page,
            page_size=self.page_size or get_settings().default_page_size,
            order_by=[OrderBy(field=o.field, direction=o.direction) for o in self.order_by],
            filters=dict(self.filters),
            search_term=self.search_term,
        )


class PaginationSchema(CamelModel):
    current_page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class PaginatedResponse(CamelModel, Generic[T]):
    data: list[T]
    pagination: PaginationSchema


class ListResponse(CamelModel, Generic[T]):
    data: list[T]


# =============================================================================
# Geography
# =============================================================================


class CountryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=10)
    active: bool = True


class CountryUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: str | None = Field(default=None, min_length=1, max_length=10)
    active: bool | None = None


class CountryResponse(EntityResponse):
    name: str
    code: str


class StateCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=10)
    country_id: int
    active: bool = True


class StateUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: str | None = Field(default=None, min_length=1, max_length=10)
    country_id: int | None = None
    active: bool | None = None


class StateResponse(EntityResponse):
    name: str
    code: str
    country_id: int


class CityCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    state_id: int
    timezone: str = Field(default="UTC", max_length=50)
    latitude: float
    longitude: float
    active: bool = True


class CityUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    state_id: int | None = None
    timezone: str | None = Field(default=None, max_length=50)
    latitude: float | None = None
    longitude: float | None = None
    active: bool | None = None


class CityResponse(EntityResponse):
    name: str
    slug: str
    state_id: int
    timezone: str
    latitude: float
    longitude: float


class PopulationCreate(CamelModel):
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    active: bool = True


class PopulationUpdate(CamelModel):
    code: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    active: bool | None = None


class PopulationResponse(EntityResponse):
    code: str
    name: str
    description: str | None = None


class PopulationWithCitiesResponse(PopulationResponse):
    cities: list[CityResponse] = Field(default_factory=list)


# =============================================================================
# Nodes & installations
# =============================================================================


class NodeCreate(CamelModel):
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    latitude: float
    longitude: float
    radius: float
    city_id: int
    population_id: int | None = None
    installation_id: int | None = None
    active: bool = True


class NodeUpdate(CamelModel):
    code: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    latitude: float | None = None
    longitude: float | None = None
    radius: float | None = None
    city_id: int | None = None
    population_id: int | None = None
    installation_id: int | None = None
    active: bool | None = None


class NodeResponse(EntityResponse):
    code: str
    name: str
    slug: str
    latitude: float
    longitude: float
    radius: float
    city_id: int
    population_id: int | None = None
    installation_id: int | None = None


class InstallationCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    address: str | None = Field(default=None, max_length=255)
    description: str | None = None
    contact_phone: str | None = Field(default=None, max_length=30)
    contact_email: EmailStr | None = None
    website: str | None = Field(default=None, max_length=255)
    installation_type_id: int | None = None
    active: bool = True


class InstallationUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    address: str | None = Field(default=None, max_length=255)
    description: str | None = None
    contact_phone: str | None = Field(default=None, max_length=30)
    contact_email: EmailStr | None = None
    website: str | None = Field(default=None, max_length=255)
    installation_type_id: int | None = None
    active: bool | None = None


class InstallationResponse(EntityResponse):
    name: str
    address: str | None = None
    description: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    website: str | None = None
    installation_type_id: int | None = None


class InstallationTypeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=20)
    description: str | None = None
    active: bool = True


class InstallationTypeUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: str | None = Field(default=None, min_length=1, max_length=20)
    description: str | None = None
    active: bool | None = None


class InstallationTypeResponse(EntityResponse):
    name: str
    code: str
    description: str | None = None
    system_locked: bool = False


class EventTypeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=20)
    description: str | None = None
    base_time: int = 0
    needs_cost: bool = False
    needs_quantity: bool = False
    integration: bool = False
    active: bool = True


class EventTypeUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: str | None = Field(default=None, min_length=1, max_length=20)
    description: str | None = None
    base_time: int | None = None
    needs_cost: bool | None = None
    needs_quantity: bool | None = None
    integration: bool | None = None
    active: bool | None = None


class EventTypeResponse(EntityResponse):
    name: str
    code: str
    description: str | None = None
    base_time: int
    needs_cost: bool
    needs_quantity: bool
    integration: bool


class LabelCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    color: str
    active: bool = True


class LabelUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    color: str | None = None
    active: bool | None = None


class LabelResponse(EntityResponse):
    name: str
    description: str | None = None
    color: str
    node_count: int = 0


class LabelUsage(CamelModel):
    id: int
    name: str
    color: str
    node_count: int


class LabelMetricsResponse(CamelModel):
    total_labels: int
    labels_in_use: int
    most_used_labels: list[LabelUsage]


class AmenityCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    category: str
    amenity_type: str = "bus"
    description: str | None = None
    icon_name: str | None = Field(default=None, max_length=50)
    active: bool = True


class AmenityUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    category: str | None = None
    amenity_type: str | None = None
    description: str | None = None
    icon_name: str | None = Field(default=None, max_length=50)
    active: bool | None = None


class AmenityResponse(EntityResponse):
    name: str
    category: str
    amenity_type: str
    description: str | None = None
    icon_name: str | None = None


class NodeWithLabelsResponse(NodeResponse):
    labels: list[LabelResponse] = Field(default_factory=list)


class InstallationWithAmenitiesResponse(InstallationResponse):
    amenities: list[AmenityResponse] = Field(default_factory=list)


class InstallationTypeWithEventTypesResponse(InstallationTypeResponse):
    event_types: list[EventTypeResponse] = Field(default_factory=list)


class InstallationSchemaCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    label: str | None = Field(default=None, max_length=150)
    description: str | None = None
    type: str
    options: dict[str, Any] = Field(default_factory=dict)
    required: bool = False
    installation_type_id: int
    active: bool = True


class InstallationSchemaUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    label: str | None = Field(default=None, max_length=150)
    description: str | None = None
    type: str | None = None
    options: dict[str, Any] | None = None
    required: bool | None = None
    installation_type_id: int | None = None
    active: bool | None = None


class InstallationSchemaResponse(EntityResponse):
    name: str
    label: str | None = None
    description: str | None = None
    type: str
    options: dict[str, Any] = Field(default_factory=dict)
    required: bool = False
    installation_type_id: int


class PropertyInput(CamelModel):
    name: str = Field(min_length=1)
    value: str | int | float | bool | None = None


class InstallationPropertiesRequest(CamelModel):
    properties: list[PropertyInput]


class InstallationPropertyResponse(CamelModel):
    id: int | None = None
    schema_id: int
    name: str
    label: str | None = None
    description: str | None = None
    type: str
    required: bool = False
    options: dict[str, Any] = Field(default_factory=dict)
    value: Any = None


# =============================================================================
# Operators
# =============================================================================


class TransporterCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    code: str = Field(min_length=1, max_length=20)
    legal_name: str | None = Field(default=None, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    description: str | None = None
    website: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    headquarter_city_id: int | None = None
    logo_url: str | None = Field(default=None, max_length=512)
    contact_info: dict[str, Any] | None = None
    license_number: str | None = Field(default=None, max_length=50)
    active: bool = True


class TransporterUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    code: str | None = Field(default=None, min_length=1, max_length=20)
    legal_name: str | None = Field(default=None, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    description: str | None = None
    website: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    headquarter_city_id: int | None = None
    logo_url: str | None = Field(default=None, max_length=512)
    contact_info: dict[str, Any] | None = None
    license_number: str | None = Field(default=None, max_length=50)
    active: bool | None = None


class TransporterResponse(EntityResponse):
    name: str
    code: str
    legal_name: str | None = None
    address: str | None = None
    description: str | None = None
    website: str | None = None
    email: str | None = None
    phone: str | None = None
    headquarter_city_id: int | None = None
    logo_url: str | None = None
    contact_info: dict[str, Any] | None = None
    license_number: str | None = None


class ServiceTypeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=20)
    description: str | None = None
    active: bool = True


class ServiceTypeUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: str | None = Field(default=None, min_length=1, max_length=20)
    description: str | None = None
    active: bool | None = None


class ServiceTypeResponse(EntityResponse):
    name: str
    code: str
    description: str | None = None


class BusLineCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    code: str = Field(min_length=1, max_length=20)
    transporter_id: int
    service_type_id: int
    price_per_kilometer: float = 1.0
    description: str | None = None
    fleet_size: int | None = None
    website: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    active: bool = True


class BusLineUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    code: str | None = Field(default=None, min_length=1, max_length=20)
    transporter_id: int | None = None
    service_type_id: int | None = None
    price_per_kilometer: float | None = None
    description: str | None = None
    fleet_size: int | None = None
    website: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    active: bool | None = None


class BusLineResponse(EntityResponse):
    name: str
    code: str
    transporter_id: int
    service_type_id: int
    price_per_kilometer: float
    description: str | None = None
    fleet_size: int | None = None
    website: str | None = None
    email: str | None = None
    phone: str | None = None


# =============================================================================
# Fleet catalogs
# =============================================================================


class TechnologyCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    provider: str | None = Field(default=None, max_length=100)
    version: str | None = Field(default=None, max_length=50)
    active: bool = True


class TechnologyUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    provider: str | None = Field(default=None, max_length=100)
    version: str | None = Field(default=None, max_length=50)
    active: bool | None = None


class TechnologyResponse(EntityResponse):
    name: str
    description: str | None = None
    provider: str | None = None
    version: str | None = None


class ChromaticCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=512)
    active: bool = True


class ChromaticUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=512)
    active: bool | None = None


class ChromaticResponse(EntityResponse):
    name: str
    description: str | None = None
    image_url: str | None = None


class BusModelCreate(CamelModel):
    manufacturer: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int
    seating_capacity: int
    num_floors: int = 1
    engine_type: str | None = Field(default=None, max_length=50)
    default_seat_diagram_id: int | None = None
    active: bool = True


class BusModelUpdate(CamelModel):
    manufacturer: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = None
    seating_capacity: int | None = None
    num_floors: int | None = None
    engine_type: str | None = Field(default=None, max_length=50)
    default_seat_diagram_id: int | None = None
    active: bool | None = None


class BusModelResponse(EntityResponse):
    manufacturer: str
    model: str
    year: int
    seating_capacity: int
    num_floors: int
    engine_type: str | None = None
    default_seat_diagram_id: int | None = None


# =============================================================================
# Seat diagrams
# =============================================================================


class FloorSeats(CamelModel):
    """Quick configuration of one floor."""

    floor_number: int
    num_rows: int
    seats_left: int
    seats_right: int


class SeatDiagramCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    description: str | None = None
    max_capacity: int
    num_floors: int = 1
    seats_per_floor: list[FloorSeats] | None = None
    allows_adjacent_seat: bool = False
    is_factory_default: bool = False
    active: bool = True


class SeatDiagramUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    description: str | None = None
    max_capacity: int | None = None
    num_floors: int | None = None
    seats_per_floor: list[FloorSeats] | None = None
    allows_adjacent_seat: bool | None = None
    is_factory_default: bool | None = None
    active: bool | None = None


class SeatDiagramResponse(EntityResponse):
    name: str
    description: str | None = None
    max_capacity: int
    num_floors: int
    seats_per_floor: list[FloorSeats] = Field(default_factory=list)
    total_seats: int
    allows_adjacent_seat: bool
    is_factory_default: bool


class SpaceSchema(CamelModel):
    floor_number: int = 1
    position_x: int = Field(ge=0)
    position_y: int = Field(ge=1)
    space_type: SpaceType = SpaceType.SEAT
    seat_number: str | None = Field(default=None, max_length=10)
    seat_type: SeatType | None = None
    reclinement_angle: int | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
    active: bool = True


class SpaceResponse(SpaceSchema):
    id: int
    seat_diagram_id: int


class SpacesUpdateRequest(CamelModel):
    spaces: list[SpaceSchema]


class ColumnAddRequest(CamelModel):
    """Insert a seat column right after ``after_x`` (-1 inserts at the left window)."""

    after_x: int


# =============================================================================
# Buses & drivers
# =============================================================================


class BusCreate(CamelModel):
    economic_number: str = Field(min_length=1, max_length=20)
    registration_number: str = Field(min_length=1, max_length=50)
    license_plate_type: str = "NATIONAL"
    license_plate_number: str = Field(min_length=1, max_length=20)
    status: str | None = None
    model_id: int
    seat_diagram_id: int
    transporter_id: int | None = None
    bus_line_id: int | None = None
    chromatic_id: int | None = None
    purchase_date: date | None = None
    current_kilometer: float | None = None
    last_maintenance_date: date | None = None
    active: bool = True


class BusUpdate(CamelModel):
    economic_number: str | None = Field(default=None, min_length=1, max_length=20)
    registration_number: str | None = Field(default=None, min_length=1, max_length=50)
    license_plate_type: str | None = None
    license_plate_number: str | None = Field(default=None, min_length=1, max_length=20)
    status: str | None = None
    model_id: int | None = None
    seat_diagram_id: int | None = None
    transporter_id: int | None = None
    bus_line_id: int | None = None
    chromatic_id: int | None = None
    purchase_date: date | None = None
    current_kilometer: float | None = None
    last_maintenance_date: date | None = None
    active: bool | None = None


class BusResponse(EntityResponse):
    economic_number: str
    registration_number: str
    license_plate_type: str
    license_plate_number: str
    status: str
    status_changed_at: datetime | None = None
    model_id: int
    seat_diagram_id: int
    transporter_id: int | None = None
    bus_line_id: int | None = None
    chromatic_id: int | None = None
    purchase_date: date | None = None
    current_kilometer: float | None = None
    last_maintenance_date: date | None = None


class BusWithTechnologiesResponse(BusResponse):
    technologies: list[TechnologyResponse] = Field(default_factory=list)


class DriverCreate(CamelModel):
    driver_key: str = Field(min_length=1, max_length=20)
    payroll_key: str = Field(min_length=1, max_length=20)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    license: str | None = Field(default=None, max_length=50)
    license_expiry: date | None = None
    status: str | None = None
    hire_date: date | None = None
    bus_line_id: int | None = None
    active: bool = True


class DriverUpdate(CamelModel):
    driver_key: str | None = Field(default=None, min_length=1, max_length=20)
    payroll_key: str | None = Field(default=None, min_length=1, max_length=20)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    license: str | None = Field(default=None, max_length=50)
    license_expiry: date | None = None
    status: str | None = None
    hire_date: date | None = None
    bus_line_id: int | None = None
    active: bool | None = None


class DriverResponse(EntityResponse):
    driver_key: str
    payroll_key: str
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    license: str | None = None
    license_expiry: date | None = None
    status: str
    status_date: date | None = None
    hire_date: date | None = None
    bus_line_id: int | None = None


class DriverTimeOffCreate(CamelModel):
    start_date: date
    end_date: date
    type: str
    reason: str | None = None
    active: bool = True


class DriverTimeOffUpdate(CamelModel):
    start_date: date | None = None
    end_date: date | None = None
    type: str | None = None
    reason: str | None = None
    active: bool | None = None


class DriverTimeOffResponse(EntityResponse):
    driver_id: int
    start_date: date
    end_date: date
    type: str
    reason: str | None = None


class DriverMedicalCheckCreate(CamelModel):
    check_date: date
    days_until_next_check: int
    result: str
    notes: str | None = None


class DriverMedicalCheckResponse(CamelModel):
    id: int
    driver_id: int
    check_date: date
    days_until_next_check: int
    next_check_date: date
    result: str
    source: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# =============================================================================
# Users, roles & permissions
# =============================================================================


class PermissionCreate(CamelModel):
    code: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=150)
    description: str | None = None
    active: bool = True


class PermissionUpdate(CamelModel):
    code: str | None = Field(default=None, min_length=1, max_length=100)
    name: str | None = Field(default=None, min_length=1, max_length=150)
    description: str | None = None
    active: bool | None = None


class PermissionResponse(EntityResponse):
    code: str
    name: str
    description: str | None = None


class RoleCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    active: bool = True


class RoleUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    active: bool | None = None


class RoleResponse(EntityResponse):
    name: str
    description: str | None = None


class RoleWithPermissionsResponse(RoleResponse):
    permissions: list[PermissionResponse] = Field(default_factory=list)


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    is_system_admin: bool = False
    active: bool = True


class UserUpdate(CamelModel):
    username: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    is_system_admin: bool | None = None
    active: bool | None = None


class UserResponse(EntityResponse):
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    is_system_admin: bool


class UserWithRolesResponse(UserResponse):
    roles: list[RoleResponse] = Field(default_factory=list)


class AuditResponse(CamelModel):
    id: int
    user_id: int | None = None
    endpoint: str
    method: str
    path: str
    payload: dict[str, Any] | None = None
    ip_address: str | None = None
    created_at: datetime


# =============================================================================
# Assignments
# =============================================================================


class CityIdsRequest(CamelModel):
    city_ids: list[int]


class LabelIdsRequest(CamelModel):
    label_ids: list[int]


class AmenityIdsRequest(CamelModel):
    amenity_ids: list[int]


class EventTypeIdsRequest(CamelModel):
    event_type_ids: list[int]


class TechnologyIdsRequest(CamelModel):
    technology_ids: list[int]


class RoleIdsRequest(CamelModel):
    role_ids: list[int]


class PermissionIdsRequest(CamelModel):
    permission_ids: list[int]
