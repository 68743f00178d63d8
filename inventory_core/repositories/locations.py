"""Repositories for geography, nodes, installations and their catalogs."""

from sqlalchemy import func, select

from inventory_core.models import (
    Amenity,
    City,
    Country,
    EventType,
    Installation,
    InstallationProperty,
    InstallationSchema,
    InstallationType,
    Label,
    Node,
    Population,
    State,
    label_nodes,
    population_cities,
)

from .base import BaseRepository


class CountryRepository(BaseRepository[Country]):
    model = Country
    searchable_fields = ("name", "code")


class StateRepository(BaseRepository[State]):
    model = State
    searchable_fields = ("name", "code")


class CityRepository(BaseRepository[City]):
    model = City
    entity_name = "City"
    searchable_fields = ("name", "slug")


class PopulationRepository(BaseRepository[Population]):
    model = Population
    searchable_fields = ("name", "code")

    def find_city_owners(self, city_ids: list[int], exclude_population_id: int | None = None) -> dict[int, int]:
        """Map each of ``city_ids`` already assigned elsewhere to its population id."""
        if not city_ids:
            return {}
        stmt = (
            select(population_cities.c.city_id, population_cities.c.population_id)
            .join(Population, Population.id == population_cities.c.population_id)
            .where(population_cities.c.city_id.in_(city_ids), Population.deleted_at.is_(None))
        )
        if exclude_population_id is not None:
            stmt = stmt.where(population_cities.c.population_id != exclude_population_id)
        return {city_id: population_id for city_id, population_id in self.session.execute(stmt)}

    def assign_cities(self, population: Population, cities: list[City]) -> Population:
        population.cities = cities
        self._flush("assign cities to", {"id": population.id})
        return population


class NodeRepository(BaseRepository[Node]):
    model = Node
    searchable_fields = ("name", "code", "slug")

    def assign_labels(self, node: Node, labels: list[Label]) -> Node:
        node.labels = labels
        self._flush("assign labels to", {"id": node.id})
        return node


class InstallationRepository(BaseRepository[Installation]):
    model = Installation
    searchable_fields = ("name", "address", "description")

    def assign_amenities(self, installation: Installation, amenities: list[Amenity]) -> Installation:
        installation.amenities = amenities
        self._flush("assign amenities to", {"id": installation.id})
        return installation


class InstallationTypeRepository(BaseRepository[InstallationType]):
    model = InstallationType
    entity_name = "Installation type"
    searchable_fields = ("name", "code", "description")

    def assign_event_types(
        self, installation_type: InstallationType, event_types: list[EventType]
    ) -> InstallationType:
        installation_type.event_types = event_types
        self._flush("assign event types to", {"id": installation_type.id})
        return installation_type


class EventTypeRepository(BaseRepository[EventType]):
    model = EventType
    entity_name = "Event type"
    searchable_fields = ("name", "code", "description")


class LabelRepository(BaseRepository[Label]):
    model = Label
    searchable_fields = ("name", "description")

    def node_counts(self, label_ids: list[int]) -> dict[int, int]:
        """Number of non-deleted nodes carrying each label."""
        if not label_ids:
            return {}
        stmt = (
            select(label_nodes.c.label_id, func.count(label_nodes.c.node_id))
            .join(Node, Node.id == label_nodes.c.node_id)
            .where(label_nodes.c.label_id.in_(label_ids), Node.deleted_at.is_(None))
            .group_by(label_nodes.c.label_id)
        )
        counts = dict(self.session.execute(stmt).all())
        return {label_id: counts.get(label_id, 0) for label_id in label_ids}

    def metrics(self, top: int = 5) -> dict:
        labels = self.find_all()
        counts = self.node_counts([label.id for label in labels])
        in_use = [label for label in labels if counts[label.id] > 0]
        in_use.sort(key=lambda label: (-counts[label.id], label.name))
        return {
            "totalLabels": len(labels),
            "labelsInUse": len(in_use),
            "mostUsedLabels": [
                {
                    "id": label.id,
                    "name": label.name,
                    "color": label.color,
                    "nodeCount": counts[label.id],
                }
                for label in in_use[:top]
            ],
        }


class AmenityRepository(BaseRepository[Amenity]):
    model = Amenity
    searchable_fields = ("name", "description")


class InstallationSchemaRepository(BaseRepository[InstallationSchema]):
    model = InstallationSchema
    entity_name = "Installation schema"
    searchable_fields = ("name", "label", "description")

    def find_for_type(self, installation_type_id: int) -> list[InstallationSchema]:
        return self.find_all(filters={"installation_type_id": installation_type_id})


class InstallationPropertyRepository(BaseRepository[InstallationProperty]):
    model = InstallationProperty
    entity_name = "Installation property"

    def find_for_installation(self, installation_id: int) -> dict[int, InstallationProperty]:
        """Properties of an installation keyed by schema id."""
        return {
            prop.installation_schema_id: prop
            for prop in self.find_all(filters={"installation_id": installation_id})
        }

    def upsert(self, installation_id: int, values: dict[int, str | None]) -> list[InstallationProperty]:
        """Create or update one property per ``{schema_id: value}`` entry."""
        existing = self.find_for_installation(installation_id)
        saved = []
        for schema_id, value in values.items():
            prop = existing.get(schema_id)
            if prop is None:
                prop = InstallationProperty(
                    installation_id=installation_id, installation_schema_id=schema_id, value=value
                )
                self.session.add(prop)
            else:
                prop.value = value
            saved.append(prop)
        self._flush("save", {"installation_id": installation_id})
        return saved
