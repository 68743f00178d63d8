"""
Generic CRUD service functions shared by every inventory entity.

Each function takes the request session, the entity's repository class and,
for writes, its domain validator. Writes are committed here so routers only
deal with schemas.
"""

from collections.abc import Callable, Iterable

from sqlalchemy.orm import Session

from inventory_core.db import Base
from inventory_core.logging import get_logger
from inventory_core.pagination import ListParams, PaginatedResult
from inventory_core.repositories import BaseRepository

logger = get_logger("api.crud")

Validator = Callable[..., dict]


def _commit(db: Session, entity: Base) -> Base:
    db.commit()
    db.refresh(entity)
    return entity


def create_entity(
    db: Session,
    repository_cls: type[BaseRepository],
    payload: dict,
    validator: Validator | None = None,
) -> Base:
    repo = repository_cls(db)
    if validator is not None:
        payload = validator(repo, payload)
    entity = _commit(db, repo.create(**payload))
    logger.info("entity_created", entity=repo.entity_label, id=entity.id)
    return entity


def get_entity(db: Session, repository_cls: type[BaseRepository], entity_id: int) -> Base:
    return repository_cls(db).find_one(entity_id)


def update_entity(
    db: Session,
    repository_cls: type[BaseRepository],
    entity_id: int,
    payload: dict,
    validator: Validator | None = None,
) -> Base:
    """Apply a partial update; an empty payload returns the entity unchanged."""
    repo = repository_cls(db)
    if validator is not None:
        payload = validator(repo, payload, current_id=entity_id)
    if not payload:
        return repo.find_one(entity_id)
    entity = _commit(db, repo.update(entity_id, **payload))
    logger.info("entity_updated", entity=repo.entity_label, id=entity_id, fields=sorted(payload))
    return entity


def delete_entity(
    db: Session,
    repository_cls: type[BaseRepository],
    entity_id: int,
    guard: Callable[[BaseRepository, int], None] | None = None,
) -> Base:
    """Soft delete; ``guard(repo, entity_id)`` may refuse by raising."""
    repo = repository_cls(db)
    if guard is not None:
        guard(repo, entity_id)
    entity = _commit(db, repo.delete(entity_id))
    logger.info("entity_deleted", entity=repo.entity_label, id=entity_id)
    return entity


def restore_entity(db: Session, repository_cls: type[BaseRepository], entity_id: int) -> Base:
    repo = repository_cls(db)
    entity = _commit(db, repo.restore(entity_id))
    logger.info("entity_restored", entity=repo.entity_label, id=entity_id)
    return entity


def list_entities(
    db: Session, repository_cls: type[BaseRepository], params: ListParams
) -> PaginatedResult:
    return repository_cls(db).list_paginated(params)


def list_all_entities(db: Session, repository_cls: type[BaseRepository], params: ListParams) -> list:
    return repository_cls(db).list(params)


def assign_related(
    db: Session,
    repository_cls: type[BaseRepository],
    related_cls: type[BaseRepository],
    entity_id: int,
    related_ids: Iterable[int],
    validator: Callable[[BaseRepository, int, list[int]], None],
    assign: Callable[[BaseRepository, Base, list[Base]], Base],
) -> Base:
    """
    Replace a many-to-many assignment.

    ``validator(repo, entity_id, ids)`` rejects duplicate or unknown ids;
    ``assign(repo, entity, related)`` stores the new set. An empty list
    clears the assignment.
    """
    related_ids = list(related_ids)
    repo = repository_cls(db)
    validator(repo, entity_id, related_ids)

    entity = repo.find_one(entity_id)
    related = related_cls(db).find_all(filters={"id": related_ids}) if related_ids else []
    entity = _commit(db, assign(repo, entity, list(related)))
    logger.info(
        "entities_assigned",
        entity=repo.entity_label,
        id=entity_id,
        related=related_cls(db).entity_label,
        count=len(related),
    )
    return entity
