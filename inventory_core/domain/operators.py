"""Business rules for transporters, service types and bus lines."""

from inventory_core.errors import FieldErrorCollector, NotFoundError
from inventory_core.models import City, ServiceType
from inventory_core.repositories import (
    BusLineRepository,
    COMMON_SCOPES,
    ServiceTypeRepository,
    TransporterRepository,
    UniqueField,
    with_scopes,
)

from .common import check_range, check_relation, check_uniqueness


def validate_transporter(repo: TransporterRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("code", payload.get("code"))], current_id)
    check_relation(
        repo, collector, City, "headquarter_city_id", payload.get("headquarter_city_id"), "City"
    )
    collector.throw_if_errors()
    return payload


def validate_service_type(repo: ServiceTypeRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(
        repo,
        collector,
        [UniqueField("name", payload.get("name")), UniqueField("code", payload.get("code"))],
        current_id,
    )
    collector.throw_if_errors()
    return payload


def validate_bus_line(repo: BusLineRepository, payload: dict, current_id: int | None = None) -> dict:
    """
    Bus lines must point at an active transporter and an existing service type.
    """
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("code", payload.get("code"))], current_id)
    check_range(collector, "price_per_kilometer", payload.get("price_per_kilometer"), minimum=0)
    check_range(collector, "fleet_size", payload.get("fleet_size"), minimum=0)

    transporter_id = payload.get("transporter_id")
    if transporter_id is not None:
        transporters = with_scopes(TransporterRepository(repo.session), COMMON_SCOPES)
        try:
            transporters.scope("active").find_one(transporter_id)
        except NotFoundError as exc:
            collector.add_error("transporterId", "NOT_FOUND", exc.message, transporter_id)

    check_relation(
        repo, collector, ServiceType, "service_type_id", payload.get("service_type_id"), "Service type"
    )
    collector.throw_if_errors()
    return payload
