"""
Tests for database error translation and field error collection.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from inventory_core.errors import (
    DuplicateError,
    FieldErrorCollector,
    FieldValidationError,
    ForeignKeyError,
    InvalidStateTransitionError,
    NotFoundError,
    StandardFieldErrors,
    ValidationError,
    translate_db_error,
)


class FakePgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def integrity_error(message, pgcode=None):
    orig = FakePgError(message, pgcode) if pgcode else Exception(message)
    return IntegrityError("INSERT ...", {}, orig)


class TestTranslateDbError:
    def test_postgres_unique_violation(self):
        exc = integrity_error(
            'duplicate key value violates unique constraint "uq_countries_code_active"\n'
            "DETAIL:  Key (code)=(MX) already exists.",
            pgcode="23505",
        )
        error = translate_db_error(exc, "Country", "create")
        assert isinstance(error, DuplicateError)
        assert error.field == "code"
        assert error.value == "MX"
        assert error.message == "Country with code 'MX' already exists"

    def test_postgres_composite_unique_points_at_last_column(self):
        exc = integrity_error(
            "DETAIL:  Key (country_id, name)=(1, Jalisco) already exists.",
            pgcode="23505",
        )
        error = translate_db_error(exc, "State", "create", {"country_id": 1, "name": "Jalisco"})
        assert isinstance(error, DuplicateError)
        assert error.field == "name"
        assert error.value == "Jalisco"

    def test_sqlite_unique_violation(self):
        exc = integrity_error("UNIQUE constraint failed: countries.code")
        error = translate_db_error(exc, "Country", "create", {"code": "MX"})
        assert isinstance(error, DuplicateError)
        assert error.field == "code"
        assert error.value == "MX"

    def test_postgres_foreign_key_violation(self):
        exc = integrity_error(
            'insert or update on table "states" violates foreign key constraint\n'
            'DETAIL:  Key (country_id)=(42) is not present in table "countries".',
            pgcode="23503",
        )
        error = translate_db_error(exc, "State", "create")
        assert isinstance(error, ForeignKeyError)
        assert error.field == "country_id"
        assert error.value == "42"

    def test_sqlite_foreign_key_violation_without_detail(self):
        exc = integrity_error("FOREIGN KEY constraint failed")
        error = translate_db_error(exc, "State", "create")
        assert isinstance(error, ForeignKeyError)
        assert "referenced record does not exist" in error.message

    def test_not_null_violation(self):
        exc = integrity_error("NOT NULL constraint failed: countries.name")
        error = translate_db_error(exc, "Country", "create")
        assert type(error) is ValidationError
        assert error.message == "name is required"

    def test_check_violation(self):
        exc = integrity_error("new row violates check constraint", pgcode="23514")
        error = translate_db_error(exc, "Bus", "update")
        assert type(error) is ValidationError
        assert "check constraint" in error.message

    def test_non_integrity_error_becomes_validation_error(self):
        exc = OperationalError("SELECT 1", {}, Exception("database is locked"))
        error = translate_db_error(exc, "Country", "update")
        assert type(error) is ValidationError
        assert error.message == "Failed to update Country"

    def test_unknown_integrity_error_hides_driver_message(self):
        exc = integrity_error('exclusion constraint "no_overlap" violated', pgcode="23P01")
        error = translate_db_error(exc, "Driver", "create")
        assert type(error) is ValidationError
        assert error.message == "Failed to create Driver"

    def test_app_errors_pass_through(self):
        original = NotFoundError("Country with id 1 not found")
        assert translate_db_error(original, "Country", "update") is original


class TestFieldErrorCollector:
    def test_no_errors_does_not_raise(self):
        collector = FieldErrorCollector()
        collector.add_if(False, "name", "INVALID_VALUE", "never")
        assert not collector.has_errors()
        collector.throw_if_errors()

    def test_collects_every_error(self):
        collector = FieldErrorCollector()
        collector.add_error("code", "DUPLICATE", "Country with code 'MX' already exists", "MX")
        collector.add(StandardFieldErrors.not_found("Country", "countryId", 7))

        with pytest.raises(FieldValidationError) as exc_info:
            collector.throw_if_errors()

        errors = [e.to_dict() for e in exc_info.value.field_errors]
        assert errors == [
            {
                "field": "code",
                "code": "DUPLICATE",
                "message": "Country with code 'MX' already exists",
                "value": "MX",
            },
            {
                "field": "countryId",
                "code": "NOT_FOUND",
                "message": "Country with id 7 not found",
                "value": 7,
            },
        ]
        assert exc_info.value.message.startswith("Validation failed: code:")

    def test_field_validation_error_is_a_validation_error(self):
        assert issubclass(FieldValidationError, ValidationError)


def test_invalid_status_messages():
    update = StandardFieldErrors.invalid_status("Bus", "RETIRED", "ACTIVE", ["OUT_OF_SERVICE"])
    assert update.code == "INVALID_STATUS"
    assert update.message == (
        "Invalid status transition for Bus from RETIRED to ACTIVE. Allowed: OUT_OF_SERVICE"
    )

    create = StandardFieldErrors.invalid_status(
        "Driver", None, "TERMINATED", ["IN_TRAINING", "ACTIVE"], is_create=True
    )
    assert create.message == "Invalid initial status TERMINATED for Driver. Allowed: IN_TRAINING, ACTIVE"


def test_invalid_state_transition_error_lists_none_for_terminal():
    error = InvalidStateTransitionError("Driver", "TERMINATED", "ACTIVE", [])
    assert error.message.endswith("Allowed transitions: none")
