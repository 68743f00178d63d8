"""
Time-offs and medical checks of a driver.

Every record is reached through its driver, so a record id that belongs to
another driver is reported as not found.
"""

from sqlalchemy.orm import Session

from inventory_core.domain import validate_driver_medical_check, validate_driver_time_off
from inventory_core.logging import get_logger
from inventory_core.models import DriverMedicalCheck, DriverTimeOff
from inventory_core.pagination import ListParams, PaginatedResult
from inventory_core.repositories import (
    DriverMedicalCheckRepository,
    DriverRepository,
    DriverTimeOffRepository,
)
from inventory_core.repositories.fleet import DriverRecordMixin

logger = get_logger("api.drivers")


def _scoped(params: ListParams, driver_id: int) -> ListParams:
    params.filters = {**params.filters, "driverId": driver_id}
    return params


def list_records(
    db: Session, repository_cls: type[DriverRecordMixin], driver_id: int, params: ListParams
) -> PaginatedResult:
    DriverRepository(db).find_one(driver_id)
    return repository_cls(db).list_paginated(_scoped(params, driver_id))


def list_all_records(
    db: Session, repository_cls: type[DriverRecordMixin], driver_id: int, params: ListParams
) -> list:
    DriverRepository(db).find_one(driver_id)
    return repository_cls(db).list(_scoped(params, driver_id))


def get_record(db: Session, repository_cls: type[DriverRecordMixin], driver_id: int, record_id: int):
    return repository_cls(db).find_for_driver(driver_id, record_id)


# =============================================================================
# Time-offs
# =============================================================================


def create_time_off(db: Session, driver_id: int, payload: dict) -> DriverTimeOff:
    repo = DriverTimeOffRepository(db)
    payload = validate_driver_time_off(repo, driver_id, payload)
    time_off = repo.create(**payload)
    db.commit()
    db.refresh(time_off)
    logger.info("time_off_created", driver_id=driver_id, id=time_off.id)
    return time_off


def update_time_off(db: Session, driver_id: int, time_off_id: int, payload: dict) -> DriverTimeOff:
    repo = DriverTimeOffRepository(db)
    payload = validate_driver_time_off(repo, driver_id, payload, current_id=time_off_id)
    time_off = repo.update(time_off_id, **payload)
    db.commit()
    db.refresh(time_off)
    logger.info("time_off_updated", driver_id=driver_id, id=time_off_id, fields=sorted(payload))
    return time_off


def delete_time_off(db: Session, driver_id: int, time_off_id: int) -> DriverTimeOff:
    repo = DriverTimeOffRepository(db)
    repo.find_for_driver(driver_id, time_off_id)
    time_off = repo.delete(time_off_id)
    db.commit()
    db.refresh(time_off)
    logger.info("time_off_deleted", driver_id=driver_id, id=time_off_id)
    return time_off


# =============================================================================
# Medical checks
# =============================================================================


def create_medical_check(db: Session, driver_id: int, payload: dict) -> DriverMedicalCheck:
    repo = DriverMedicalCheckRepository(db)
    payload = validate_driver_medical_check(repo, driver_id, payload)
    check = repo.create(**payload)
    db.commit()
    db.refresh(check)
    logger.info("medical_check_created", driver_id=driver_id, id=check.id, result=check.result)
    return check
