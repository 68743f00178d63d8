"""
Generic repository with pagination, search, soft delete and uniqueness checks.

Every entity repository subclasses BaseRepository and sets ``model``. The
``conditions`` keyword accepted by the read operations carries extra WHERE
clauses; ScopedRepository uses it to apply named scopes.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_core.config import get_settings
from inventory_core.db import Base
from inventory_core.errors import NotFoundError, ValidationError, translate_db_error
from inventory_core.logging import repository_logger as logger
from inventory_core.models.base import utc_now
from inventory_core.pagination import (
    ListParams,
    OrderBy,
    PaginatedResult,
    create_pagination_meta,
    normalize_page,
    offset_for,
)
from inventory_core.utils import camel_to_snake

T = TypeVar("T", bound=Base)
R = TypeVar("R")

Conditions = Iterable[ColumnElement[bool]] | None


@dataclass
class UniqueField:
    """
    A value that must not be held by another non-deleted row.

    ``scope`` restricts the check to rows sharing a column value, e.g.
    ``UniqueField("name", "Jalisco", scope=("country_id", 1))``.
    """

    field: str
    value: Any
    scope: tuple[str, Any] | None = None


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD, listing and search operations.

    Usage:
        class CountryRepository(BaseRepository[Country]):
            model = Country
            searchable_fields = ("name", "code")

        repo = CountryRepository(session)
        page = repo.find_all_paginated(page=2, page_size=20, filters={"active": True})
    """

    model: type[T]
    entity_name: str | None = None
    searchable_fields: tuple[str, ...] = ()
    soft_delete_enabled: bool = True

    def __init__(self, session: Session):
        self.session = session

    @property
    def entity_label(self) -> str:
        return self.entity_name or self.model.__name__

    # =========================================================================
    # Query building
    # =========================================================================

    def _column(self, name: str):
        key = camel_to_snake(name)
        if key not in self.model.__table__.columns:
            raise ValidationError(f"Invalid filter field: {name}")
        return getattr(self.model, key)

    @property
    def _soft_deletes(self) -> bool:
        return self.soft_delete_enabled and "deleted_at" in self.model.__table__.columns

    def _not_deleted(self) -> list[ColumnElement[bool]]:
        if self._soft_deletes:
            return [self.model.deleted_at.is_(None)]
        return []

    def _filter_conditions(self, filters: dict | None) -> list[ColumnElement[bool]]:
        where = []
        for name, value in (filters or {}).items():
            column = self._column(name)
            if value is None:
                where.append(column.is_(None))
            elif isinstance(value, (list, tuple, set)):
                where.append(column.in_(list(value)))
            else:
                where.append(column == value)
        return where

    def _search_condition(self, search_term: str) -> ColumnElement[bool]:
        if not self.searchable_fields:
            raise ValidationError(f"Search is not supported for {self.entity_label}")
        return or_(
            *(
                self._column(field).icontains(search_term, autoescape=True)
                for field in self.searchable_fields
            )
        )

    def _order_clauses(self, order_by) -> list:
        clauses = []
        for item in order_by or []:
            if isinstance(item, dict):
                item = OrderBy(field=item["field"], direction=item.get("direction", "asc"))
            column = self._column(item.field)
            clauses.append(column.desc() if item.direction.lower() == "desc" else column.asc())
        if not clauses:
            clauses.append(self.model.id.asc())
        return clauses

    def build_query_expressions(
        self,
        filters: dict | None = None,
        order_by=None,
        search_term: str | None = None,
        conditions: Conditions = None,
    ) -> tuple[list[ColumnElement[bool]], list]:
        """
        Build reusable WHERE and ORDER BY clause lists.

        The WHERE list always excludes soft-deleted rows. Blank search terms
        are ignored.
        """
        where = self._not_deleted() + self._filter_conditions(filters)
        if search_term and search_term.strip():
            where.append(self._search_condition(search_term.strip()))
        where.extend(conditions or [])
        return where, self._order_clauses(order_by)

    def _values(self, data: dict) -> dict:
        values = {}
        for name, value in data.items():
            key = camel_to_snake(name)
            if key not in self.model.__table__.columns or key == "id":
                raise ValidationError(f"Invalid field for {self.entity_label}: {name}")
            values[key] = value
        return values

    def _flush(self, operation: str, data: dict | None = None) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise translate_db_error(exc, self.entity_label, operation, data) from exc

    def _paginate(self, where, order, page, page_size) -> PaginatedResult[T]:
        page, page_size = normalize_page(page, page_size, get_settings().max_page_size)
        total = self.session.scalar(select(func.count()).select_from(self.model).where(*where)) or 0
        stmt = (
            select(self.model)
            .where(*where)
            .order_by(*order)
            .offset(offset_for(page, page_size))
            .limit(page_size)
        )
        data = self.session.scalars(stmt).all()
        return PaginatedResult(data=data, pagination=create_pagination_meta(total, page, page_size))

    # =========================================================================
    # Reads
    # =========================================================================

    def find_one(self, id: int, conditions: Conditions = None) -> T:
        """Get a non-deleted record by ID or raise NotFoundError."""
        where = self._not_deleted() + [self.model.id == id, *(conditions or [])]
        entity = self.session.scalars(select(self.model).where(*where)).first()
        if entity is None:
            raise NotFoundError(f"{self.entity_label} with id {id} not found")
        return entity

    def find_all(
        self,
        filters: dict | None = None,
        order_by=None,
        search_term: str | None = None,
        conditions: Conditions = None,
    ) -> list[T]:
        where, order = self.build_query_expressions(filters, order_by, search_term, conditions)
        return self.session.scalars(select(self.model).where(*where).order_by(*order)).all()

    def find_all_by(self, field: str, value: Any, order_by=None, conditions: Conditions = None) -> list[T]:
        return self.find_all(filters={field: value}, order_by=order_by, conditions=conditions)

    def find_all_paginated(
        self,
        page: int = 1,
        page_size: int = 10,
        order_by=None,
        filters: dict | None = None,
        conditions: Conditions = None,
    ) -> PaginatedResult[T]:
        where, order = self.build_query_expressions(filters, order_by, None, conditions)
        return self._paginate(where, order, page, page_size)

    def find_by(self, field: str, value: Any, conditions: Conditions = None) -> T | None:
        where, order = self.build_query_expressions({field: value}, None, None, conditions)
        return self.session.scalars(select(self.model).where(*where).order_by(*order)).first()

    def find_by_paginated(
        self,
        field: str,
        value: Any,
        page: int = 1,
        page_size: int = 10,
        order_by=None,
        conditions: Conditions = None,
    ) -> PaginatedResult[T]:
        return self.find_all_paginated(page, page_size, order_by, {field: value}, conditions)

    def search(
        self,
        search_term: str,
        filters: dict | None = None,
        order_by=None,
        conditions: Conditions = None,
    ) -> list[T]:
        """Case-insensitive substring match across the searchable fields."""
        if not self.searchable_fields:
            raise ValidationError(f"Search is not supported for {self.entity_label}")
        return self.find_all(filters, order_by, search_term, conditions)

    def search_paginated(
        self,
        search_term: str,
        page: int = 1,
        page_size: int = 10,
        filters: dict | None = None,
        order_by=None,
        conditions: Conditions = None,
    ) -> PaginatedResult[T]:
        if not self.searchable_fields:
            raise ValidationError(f"Search is not supported for {self.entity_label}")
        where, order = self.build_query_expressions(filters, order_by, search_term, conditions)
        return self._paginate(where, order, page, page_size)

    def exists_by(self, field: str, value: Any, exclude_id: int | None = None) -> bool:
        where = self._not_deleted() + [self._column(field) == value]
        if exclude_id is not None:
            where.append(self.model.id != exclude_id)
        return self.session.scalar(select(select(self.model.id).where(*where).exists())) or False

    def count_all(self, filters: dict | None = None, conditions: Conditions = None) -> int:
        where, _ = self.build_query_expressions(filters, None, None, conditions)
        return self.session.scalar(select(func.count()).select_from(self.model).where(*where)) or 0

    def find_existing_ids(self, ids: Iterable[int]) -> list[int]:
        """Return the subset of ``ids`` that belong to non-deleted rows."""
        ids = set(ids)
        if not ids:
            return []
        where = self._not_deleted() + [self.model.id.in_(ids)]
        return sorted(self.session.scalars(select(self.model.id).where(*where)).all())

    def check_uniqueness(
        self, fields: Iterable[UniqueField], exclude_id: int | None = None
    ) -> list[UniqueField]:
        """
        Return the fields whose value is already held by another non-deleted row.

        Fields with a ``None`` value are skipped.
        """
        conflicts = []
        for unique_field in fields:
            if unique_field.value is None:
                continue
            where = self._not_deleted() + [self._column(unique_field.field) == unique_field.value]
            if unique_field.scope is not None:
                scope_field, scope_value = unique_field.scope
                where.append(self._column(scope_field) == scope_value)
            if exclude_id is not None:
                where.append(self.model.id != exclude_id)
            if self.session.scalar(select(select(self.model.id).where(*where).exists())):
                conflicts.append(unique_field)
        return conflicts

    def validate_relation_exists(self, model: type[Base], id: int, relation_name: str) -> None:
        where = [model.id == id]
        if "deleted_at" in model.__table__.columns:
            where.append(model.deleted_at.is_(None))
        if not self.session.scalar(select(select(model.id).where(*where).exists())):
            raise NotFoundError(f"{relation_name} with id {id} not found")

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, **data) -> T:
        values = self._values(data)
        instance = self.model(**values)
        self.session.add(instance)
        self._flush("create", values)
        logger.debug("entity_created", entity=self.entity_label, id=instance.id)
        return instance

    def update(self, id: int, **data) -> T:
        instance = self.find_one(id)
        values = self._values(data)
        for key, value in values.items():
            setattr(instance, key, value)
        self._flush("update", values)
        logger.debug("entity_updated", entity=self.entity_label, id=id, fields=sorted(values))
        return instance

    def delete(self, id: int) -> T:
        """Soft delete when enabled, otherwise remove the row."""
        instance = self.find_one(id)
        if self._soft_deletes:
            instance.deleted_at = utc_now()
        else:
            self.session.delete(instance)
        self._flush("delete")
        logger.debug("entity_deleted", entity=self.entity_label, id=id, soft=self._soft_deletes)
        return instance

    def restore(self, id: int) -> T:
        if not self._soft_deletes:
            raise ValidationError(f"{self.entity_label} does not support restore")
        stmt = select(self.model).where(self.model.id == id, self.model.deleted_at.is_not(None))
        instance = self.session.scalars(stmt).first()
        if instance is None:
            raise NotFoundError(f"Deleted {self.entity_label} with id {id} not found")
        instance.deleted_at = None
        self._flush("restore")
        return instance

    def delete_many(self, ids: Iterable[int]) -> int:
        """Delete every id or none; missing ids raise NotFoundError."""
        ids = sorted(set(ids))
        if not ids:
            return 0
        existing = set(self.find_existing_ids(ids))
        missing = [i for i in ids if i not in existing]
        if missing:
            raise NotFoundError(f"{self.entity_label} with ids {missing} not found")
        if self._soft_deletes:
            stmt = update(self.model).where(self.model.id.in_(ids)).values(deleted_at=utc_now())
        else:
            stmt = delete(self.model).where(self.model.id.in_(ids))
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc, self.entity_label, "delete") from exc
        return result.rowcount

    def delete_all(self) -> int:
        if self._soft_deletes:
            stmt = update(self.model).where(self.model.deleted_at.is_(None)).values(deleted_at=utc_now())
        else:
            stmt = delete(self.model)
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc, self.entity_label, "delete") from exc
        return result.rowcount

    def transaction(self, callback: Callable[["BaseRepository[T]"], R]) -> R:
        """
        Run ``callback(self)`` inside a SAVEPOINT.

        On success the savepoint is released and the changes stay in the
        enclosing transaction. An error rolls back only the work done by the
        callback and is re-raised; committing or rolling back the enclosing
        transaction is left to the session owner.
        """
        try:
            with self.session.begin_nested():
                return callback(self)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc, self.entity_label, "save") from exc

    # =========================================================================
    # List dispatch
    # =========================================================================

    def list_paginated(self, params: ListParams) -> PaginatedResult[T]:
        if params.search_term and params.search_term.strip():
            return self.search_paginated(
                params.search_term, params.page, params.page_size, params.filters, params.order_by
            )
        return self.find_all_paginated(params.page, params.page_size, params.order_by, params.filters)

    def list(self, params: ListParams):
        if params.search_term and params.search_term.strip():
            return self.search(params.search_term, params.filters, params.order_by)
        return self.find_all(params.filters, params.order_by)
