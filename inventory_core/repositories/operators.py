"""Repositories for transporters, service types and bus lines."""

from inventory_core.models import BusLine, ServiceType, Transporter

from .base import BaseRepository


class TransporterRepository(BaseRepository[Transporter]):
    model = Transporter
    searchable_fields = ("name", "code", "legal_name")


class ServiceTypeRepository(BaseRepository[ServiceType]):
    model = ServiceType
    entity_name = "Service type"
    searchable_fields = ("name", "code", "description")


class BusLineRepository(BaseRepository[BusLine]):
    model = BusLine
    entity_name = "Bus line"
    searchable_fields = ("name", "code", "description")
