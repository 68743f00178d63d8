"""
Typed properties of an installation.

The schemas of an installation's type define which properties it may carry.
Values are stored as text and cast back to their schema type on read.
"""

from sqlalchemy.orm import Session

from inventory_core.domain import cast_property_value, validate_installation_properties
from inventory_core.logging import get_logger
from inventory_core.models import InstallationSchema, InstallationType
from inventory_core.repositories import (
    InstallationPropertyRepository,
    InstallationRepository,
    InstallationSchemaRepository,
)

logger = get_logger("api.installations")


def list_type_schemas(db: Session, installation_type_id: int) -> list[InstallationSchema]:
    repo = InstallationSchemaRepository(db)
    repo.validate_relation_exists(InstallationType, installation_type_id, "Installation type")
    return repo.find_for_type(installation_type_id)


def get_properties(db: Session, installation_id: int) -> list[dict]:
    """Every schema of the installation's type with the installation's value, or None."""
    installation = InstallationRepository(db).find_one(installation_id)
    if installation.installation_type_id is None:
        return []
    schemas = InstallationSchemaRepository(db).find_for_type(installation.installation_type_id)
    stored = InstallationPropertyRepository(db).find_for_installation(installation_id)
    properties = []
    for schema in schemas:
        prop = stored.get(schema.id)
        properties.append(
            {
                "id": prop.id if prop else None,
                "schema_id": schema.id,
                "name": schema.name,
                "label": schema.label,
                "description": schema.description,
                "type": schema.type,
                "required": schema.required,
                "options": schema.options or {},
                "value": cast_property_value(schema.type, prop.value if prop else None),
            }
        )
    return properties


def upsert_properties(db: Session, installation_id: int, properties: list[dict]) -> list[dict]:
    values = validate_installation_properties(InstallationRepository(db), installation_id, properties)
    InstallationPropertyRepository(db).upsert(installation_id, values)
    db.commit()
    logger.info("installation_properties_saved", installation_id=installation_id, count=len(values))
    return get_properties(db, installation_id)
