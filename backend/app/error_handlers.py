"""
Custom exception handlers for FastAPI.

Domain errors from inventory_core.errors are mapped to HTTP statuses here so
routers and services can raise them directly.

Security:
- Request IDs are logged server-side for tracing but NOT exposed to clients
- Generic error messages for 500 errors to prevent information disclosure
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory_core.errors import (
    AppError,
    AuthenticationError,
    DuplicateError,
    FieldValidationError,
    ForeignKeyError,
    NotFoundError,
    UnauthorizedError,
)
from inventory_core.logging import get_logger

logger = get_logger("backend.errors")

# First match wins; anything else derived from AppError is a 400
APP_ERROR_STATUS: list[tuple[type[AppError], int]] = [
    (NotFoundError, 404),
    (ForeignKeyError, 404),
    (DuplicateError, 409),
    (AuthenticationError, 401),
    (UnauthorizedError, 403),
]


def _get_request_id() -> str:
    """Current request ID, for server-side logging only."""
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _response_payload(detail: str, status_code: int) -> dict:
    return {
        "detail": detail,
        "status_code": status_code,
    }


def status_for(exc: AppError) -> int:
    for error_type, status_code in APP_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 400


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        status_code = status_for(exc)
        content = _response_payload(exc.message, status_code)
        if isinstance(exc, FieldValidationError):
            content["fieldErrors"] = jsonable_encoder([e.to_dict() for e in exc.field_errors])

        log = logger.warning if status_code < 500 else logger.error
        log(
            "app_error",
            error_type=type(exc).__name__,
            detail=exc.message,
            status_code=status_code,
            path=request.url.path,
            request_id=_get_request_id(),
        )
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content=content, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        logger.warning(
            "validation_error",
            errors=errors,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=422,
            content={
                **_response_payload("Validation error", 422),
                "errors": errors,
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=500,
            content=_response_payload("Internal server error", 500),
        )
