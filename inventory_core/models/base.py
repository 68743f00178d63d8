"""
Base model class and shared column mixins for SQLAlchemy ORM.

Re-exports the Base class from the database module for convenience.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_core.db import Base

ACTIVE_ROWS = "deleted_at IS NULL"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def unique_active_index(name: str, *columns: str) -> Index:
    """
    Unique index that ignores soft-deleted rows.

    Lets a code or name be reused once the row holding it has been deleted.
    """
    return Index(
        name,
        *columns,
        unique=True,
        postgresql_where=text(ACTIVE_ROWS),
        sqlite_where=text(ACTIVE_ROWS),
    )


class IdMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class SoftDeleteMixin:
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class ActiveMixin:
    active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=text("true"))


class CatalogMixin(IdMixin, ActiveMixin, TimestampMixin, SoftDeleteMixin):
    """Columns every soft-deletable catalog entity carries."""


__all__ = [
    "Base",
    "ACTIVE_ROWS",
    "utc_now",
    "unique_active_index",
    "IdMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    "ActiveMixin",
    "CatalogMixin",
]
