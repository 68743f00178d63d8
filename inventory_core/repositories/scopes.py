"""
Named, chainable query scopes on top of BaseRepository.

A scope is either a function ``(model) -> condition`` or a factory
``(*args) -> (model) -> condition``:

    scopes = {
        "active": lambda model: model.active.is_(True),
        "byCountry": lambda country_id: lambda model: model.country_id == country_id,
    }
    states = ScopedRepository(StateRepository(session), scopes)
    states.scope("active").scope(("byCountry", 1)).find_all()

Scope conditions are AND-ed and cleared after every terminal operation,
including ones that raise.
"""

from collections.abc import Callable
from typing import Any, Generic

from sqlalchemy import ColumnElement

from inventory_core.errors import NotFoundError, ScopeNotFoundError

from .base import BaseRepository, T

ScopeDefinition = Callable[..., Any]


class ScopedRepository(Generic[T]):
    def __init__(self, repository: BaseRepository[T], scopes: dict[str, ScopeDefinition]):
        self.repository = repository
        self.scopes = scopes
        self._conditions: list[ColumnElement[bool]] = []

    def scope(self, spec: str | tuple) -> "ScopedRepository[T]":
        if isinstance(spec, (tuple, list)):
            name, *args = spec
        else:
            name, args = spec, []
        if name not in self.scopes:
            raise ScopeNotFoundError(name)

        definition = self.scopes[name]
        build = definition(*args) if args else definition
        self._conditions.append(build(self.repository.model))
        return self

    @property
    def conditions(self) -> list[ColumnElement[bool]]:
        return list(self._conditions)

    def _run(self, operation: str, *args, **kwargs):
        conditions = list(self._conditions)
        try:
            return getattr(self.repository, operation)(*args, conditions=conditions, **kwargs)
        finally:
            self._conditions = []

    def find_one(self, id: int) -> T:
        scoped = bool(self._conditions)
        try:
            return self._run("find_one", id)
        except NotFoundError:
            if not scoped:
                raise
            raise NotFoundError(
                f"{self.repository.entity_label} with id {id} not found "
                "or does not match the applied scopes"
            ) from None

    def find_all(self, **kwargs):
        return self._run("find_all", **kwargs)

    def find_all_paginated(self, **kwargs):
        return self._run("find_all_paginated", **kwargs)

    def find_all_by(self, field: str, value: Any, **kwargs):
        return self._run("find_all_by", field, value, **kwargs)

    def find_by(self, field: str, value: Any):
        return self._run("find_by", field, value)

    def find_by_paginated(self, field: str, value: Any, **kwargs):
        return self._run("find_by_paginated", field, value, **kwargs)

    def search(self, search_term: str, **kwargs):
        return self._run("search", search_term, **kwargs)

    def search_paginated(self, search_term: str, **kwargs):
        return self._run("search_paginated", search_term, **kwargs)

    def count_all(self, **kwargs) -> int:
        return self._run("count_all", **kwargs)

    def __getattr__(self, name: str):
        # Writes and helpers are not scoped
        return getattr(self.repository, name)


def with_scopes(repository: BaseRepository[T], scopes: dict[str, ScopeDefinition]) -> ScopedRepository[T]:
    return ScopedRepository(repository, scopes)


# Scopes shared by every catalog entity
COMMON_SCOPES: dict[str, ScopeDefinition] = {
    "active": lambda model: model.active.is_(True),
    "inactive": lambda model: model.active.is_(False),
}


__all__ = ["ScopedRepository", "ScopeDefinition", "with_scopes", "COMMON_SCOPES"]
