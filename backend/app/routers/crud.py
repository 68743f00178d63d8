"""
Standard CRUD routes shared by every inventory entity.

``add_crud_routes(router, resource)`` registers, under the router's prefix:

    POST   /              create          -> 201
    POST   /list          paginated list
    POST   /list/all      unpaginated list
    GET    /{id}          get
    PUT    /{id}          partial update
    DELETE /{id}          soft delete
    POST   /{id}/restore  undo a soft delete

Each route is protected by ``require_permission`` with the endpoint names
built by ``_crud_endpoints`` in inventory_core.constants.

Routes with a fixed path (e.g. ``/labels/metrics``) must be registered
before calling ``add_crud_routes`` so ``/{id}`` does not shadow them.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from inventory_core.models import User
from inventory_core.repositories import BaseRepository

from ..auth.permissions import require_permission
from ..database import get_db
from ..schemas import ListRequest, ListResponse, PaginatedResponse
from ..services import crud_service


@dataclass
class CrudResource:
    """
    Everything the standard routes need to know about one entity.

    ``create``/``update`` replace the generic service calls when an entity
    does more than store its payload (seat diagrams regenerate their grid).
    ``delete_guard`` may refuse a delete by raising. ``enrich`` turns a list
    of entities into response items with computed fields.
    """

    singular: str
    plural: str
    repository: type[BaseRepository]
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    response_schema: type[BaseModel]
    validator: Callable[..., dict] | None = None
    service: str = "inventory"
    create: Callable[[Session, dict], Any] | None = None
    update: Callable[[Session, int, dict], Any] | None = None
    delete_guard: Callable[[BaseRepository, int], None] | None = None
    enrich: Callable[[Session, list], list] | None = None

    def endpoint(self, name: str) -> str:
        return f"{self.service}:{name}"


def add_crud_routes(router: APIRouter, resource: CrudResource) -> APIRouter:
    CreateSchema = resource.create_schema
    UpdateSchema = resource.update_schema
    Response = resource.response_schema
    singular, plural = resource.singular, resource.plural

    def enrich(db: Session, entities: list) -> list:
        return resource.enrich(db, entities) if resource.enrich else entities

    @router.post("/", response_model=Response, status_code=status.HTTP_201_CREATED)
    def create_entity(
        payload: CreateSchema,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_permission(resource.endpoint(f"create{singular}"))),
    ):
        data = payload.model_dump(exclude_unset=True)
        if resource.create is not None:
            return resource.create(db, data)
        return crud_service.create_entity(db, resource.repository, data, resource.validator)

    @router.post("/list", response_model=PaginatedResponse[Response])
    def list_entities_paginated(
        request: ListRequest,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_permission(resource.endpoint(f"list{plural}Paginated"))),
    ):
        result = crud_service.list_entities(db, resource.repository, request.to_params())
        return {"data": enrich(db, result.data), "pagination": result.pagination.to_dict()}

    @router.post("/list/all", response_model=ListResponse[Response])
    def list_entities(
        request: ListRequest,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_permission(resource.endpoint(f"list{plural}"))),
    ):
        entities = crud_service.list_all_entities(db, resource.repository, request.to_params())
        return {"data": enrich(db, entities)}

    @router.get("/{entity_id}", response_model=Response)
    def get_entity(
        entity_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_permission(resource.endpoint(f"get{singular}"))),
    ):
        entity = crud_service.get_entity(db, resource.repository, entity_id)
        return enrich(db, [entity])[0]

    @router.put("/{entity_id}", response_model=Response)
    def update_entity(
        entity_id: int,
        payload: UpdateSchema,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_permission(resource.endpoint(f"update{singular}"))),
    ):
        data = payload.model_dump(exclude_unset=True)
        if resource.update is not None:
            entity = resource.update(db, entity_id, data)
        else:
            entity = crud_service.update_entity(
                db, resource.repository, entity_id, data, resource.validator
            )
        return enrich(db, [entity])[0]

    @router.delete("/{entity_id}", response_model=Response)
    def delete_entity(
        entity_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_permission(resource.endpoint(f"delete{singular}"))),
    ):
        return crud_service.delete_entity(db, resource.repository, entity_id, resource.delete_guard)

    @router.post("/{entity_id}/restore", response_model=Response)
    def restore_entity(
        entity_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_permission(resource.endpoint(f"restore{singular}"))),
    ):
        entity = crud_service.restore_entity(db, resource.repository, entity_id)
        return enrich(db, [entity])[0]

    return router


def crud_router(prefix: str, tags: list[str], resource: CrudResource) -> APIRouter:
    """Router with only the standard routes."""
    return add_crud_routes(APIRouter(prefix=prefix, tags=tags), resource)
