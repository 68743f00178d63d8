"""
Domain errors shared by repositories, validators and the API layer.

The API layer maps each error type to an HTTP status in
backend/app/error_handlers.py:

    NotFoundError / ForeignKeyError      -> 404
    ValidationError (and subclasses)     -> 400
    InvalidStateTransitionError          -> 400
    DuplicateError                       -> 409
    AuthenticationError                  -> 401
    UnauthorizedError                    -> 403
"""

import re
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError

from .logging import get_logger

logger = get_logger("errors")


class AppError(Exception):
    """Base class for every error raised on purpose by the application."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    pass


class ValidationError(AppError):
    pass


class DuplicateError(AppError):
    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class ForeignKeyError(AppError):
    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class AuthenticationError(AppError):
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Access denied: insufficient permissions"):
        super().__init__(message)


class InvalidStateTransitionError(AppError):
    def __init__(self, entity: str, current: str, target: str, allowed: list[str]):
        allowed_text = ", ".join(allowed) if allowed else "none"
        super().__init__(
            f"Invalid {entity} status transition from {current} to {target}. "
            f"Allowed transitions: {allowed_text}"
        )
        self.current = current
        self.target = target
        self.allowed = allowed


class ScopeNotFoundError(AppError):
    def __init__(self, scope_name: str):
        super().__init__(f'Scope "{scope_name}" not found in scopes config')
        self.scope_name = scope_name


# =============================================================================
# Field-level validation
# =============================================================================


@dataclass
class FieldError:
    field: str
    code: str
    message: str
    value: Any = None

    def to_dict(self) -> dict:
        return asdict(self)


class FieldValidationError(ValidationError):
    """Validation failure carrying one entry per offending field."""

    def __init__(self, field_errors: list[FieldError]):
        self.field_errors = list(field_errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.field_errors)
        super().__init__(f"Validation failed: {summary}")


class FieldErrorCollector:
    """
    Accumulates field errors so a validator can report every violation at once.

    Usage:
        collector = FieldErrorCollector()
        collector.add_if(len(name) > 50, "name", "INVALID_VALUE", "Name is too long", name)
        collector.throw_if_errors()
    """

    def __init__(self):
        self.errors: list[FieldError] = []

    def add_error(self, field: str, code: str, message: str, value: Any = None) -> "FieldErrorCollector":
        self.errors.append(FieldError(field=field, code=code, message=message, value=value))
        return self

    def add(self, error: FieldError) -> "FieldErrorCollector":
        self.errors.append(error)
        return self

    def add_if(
        self, condition: bool, field: str, code: str, message: str, value: Any = None
    ) -> "FieldErrorCollector":
        if condition:
            self.add_error(field, code, message, value)
        return self

    def has_errors(self) -> bool:
        return bool(self.errors)

    def throw_if_errors(self) -> None:
        if self.errors:
            raise FieldValidationError(self.errors)


class StandardFieldErrors:
    """Factories for the field errors every entity validator produces."""

    @staticmethod
    def duplicate(entity: str, field: str, value: Any) -> FieldError:
        return FieldError(
            field=field,
            code="DUPLICATE",
            message=f"{entity} with {field} '{value}' already exists",
            value=value,
        )

    @staticmethod
    def not_found(entity: str, field: str, value: Any) -> FieldError:
        return FieldError(
            field=field,
            code="NOT_FOUND",
            message=f"{entity} with id {value} not found",
            value=value,
        )

    @staticmethod
    def invalid_value(field: str, message: str, value: Any) -> FieldError:
        return FieldError(field=field, code="INVALID_VALUE", message=message, value=value)

    @staticmethod
    def invalid_status(
        entity: str,
        current: str | None,
        new: str,
        allowed: list[str],
        is_create: bool = False,
    ) -> FieldError:
        allowed_text = ", ".join(allowed) if allowed else "none"
        if is_create:
            message = f"Invalid initial status {new} for {entity}. Allowed: {allowed_text}"
        else:
            message = (
                f"Invalid status transition for {entity} from {current} to {new}. "
                f"Allowed: {allowed_text}"
            )
        return FieldError(field="status", code="INVALID_STATUS", message=message, value=new)


standard_field_errors = StandardFieldErrors


# =============================================================================
# Database error translation
# =============================================================================

_PG_KEY_DETAIL = re.compile(r"Key \((?P<field>[^)]+)\)=\((?P<value>[^)]*)\)")
_PG_TABLE_DETAIL = re.compile(r'table "(?P<table>[^"]+)"')
_SQLITE_COLUMN = re.compile(r"constraint failed: (?:\w+)\.(?P<field>\w+)")


def _pg_code(exc: IntegrityError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_db_error(
    exc: Exception,
    entity_name: str,
    operation: str,
    data: dict | None = None,
) -> AppError:
    """
    Convert a database exception into the matching domain error.

    Understands PostgreSQL SQLSTATE codes (23505, 23503, 23502, 23514) and the
    message format of SQLite integrity errors. Anything unrecognised becomes
    a ValidationError describing the failed operation.
    """
    if isinstance(exc, AppError):
        return exc

    data = data or {}
    raw = str(getattr(exc, "orig", exc))

    if not isinstance(exc, IntegrityError):
        logger.error("database_error", entity=entity_name, operation=operation, error=raw)
        return ValidationError(f"Failed to {operation} {entity_name}")

    code = _pg_code(exc)
    key = _PG_KEY_DETAIL.search(raw)
    column = _SQLITE_COLUMN.search(raw)
    field = key.group("field") if key else (column.group("field") if column else None)
    value = key.group("value") if key else data.get(field) if field else None

    if code == "23505" or "UNIQUE constraint failed" in raw:
        # Composite keys report "a, b"; point at the last column
        if field and "," in field:
            field = field.split(",")[-1].strip()
            value = data.get(field, value)
        return DuplicateError(
            f"{entity_name} with {field or 'these values'} '{value}' already exists",
            field=field,
            value=value,
        )

    if code == "23503" or "FOREIGN KEY constraint failed" in raw:
        table = _PG_TABLE_DETAIL.search(raw)
        if field:
            target = table.group("table") if table else "the referenced table"
            return ForeignKeyError(
                f"{field} with value {value} does not exist in {target}",
                field=field,
                value=value,
            )
        return ForeignKeyError(f"Failed to {operation} {entity_name}: referenced record does not exist")

    if code == "23502" or "NOT NULL constraint failed" in raw:
        column_name = getattr(getattr(getattr(exc, "orig", None), "diag", None), "column_name", None)
        return ValidationError(f"{column_name or field or 'field'} is required")

    if code == "23514" or "CHECK constraint failed" in raw:
        return ValidationError(f"Failed to {operation} {entity_name}: check constraint violated")

    logger.error("integrity_error", entity=entity_name, operation=operation, code=code, error=raw)
    return ValidationError(f"Failed to {operation} {entity_name}")


__all__ = [
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DuplicateError",
    "ForeignKeyError",
    "AuthenticationError",
    "UnauthorizedError",
    "InvalidStateTransitionError",
    "ScopeNotFoundError",
    "FieldError",
    "FieldValidationError",
    "FieldErrorCollector",
    "StandardFieldErrors",
    "standard_field_errors",
    "translate_db_error",
]
