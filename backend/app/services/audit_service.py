"""
Audit service - records authorised API calls and lists them.

Audit rows are written from a background task after the response has been
sent, in a session of their own. A failed write is logged and dropped so it
never affects the request that triggered it.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_core.db import db
from inventory_core.errors import AppError
from inventory_core.logging import LogContext, audit_logger as logger
from inventory_core.pagination import ListParams, PaginatedResult
from inventory_core.repositories import AuditRepository


def record_audit(
    user_id: int | None,
    endpoint: str,
    method: str,
    path: str,
    payload: dict | None = None,
    ip_address: str | None = None,
) -> None:
    with LogContext(user_id=user_id, endpoint=endpoint):
        try:
            with db.session() as session:
                AuditRepository(session).create(
                    user_id=user_id,
                    endpoint=endpoint,
                    method=method,
                    path=path,
                    payload=payload,
                    ip_address=ip_address,
                )
        except (AppError, SQLAlchemyError, RuntimeError) as exc:
            logger.error("audit_write_failed", error=str(exc))
            return
        logger.debug("audit_written")


def list_audits(db_session: Session, params: ListParams) -> PaginatedResult:
    """Newest first unless the caller asks for another order."""
    if not params.order_by:
        params.order_by = [{"field": "created_at", "direction": "desc"}]
    return AuditRepository(db_session).list_paginated(params)
