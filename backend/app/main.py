"""
FastAPI application entry point.

Uses structured logging from inventory_core.logging. Every inventory router
is mounted under ``{API_PREFIX}/v1``.
"""

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from inventory_core.db import db
from inventory_core.logging import RequestLoggingMiddleware, api_logger, configure_logging

from .config import get_settings
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import fleet, locations, operators, seat_diagrams, users

# Configure structured logging
settings = get_settings()
configure_logging(level="DEBUG" if settings.debug else "INFO")
logger = api_logger

ROUTER_MODULES = (locations, operators, fleet, seat_diagrams, users)


def validate_config_on_startup() -> None:
    """Log configuration problems; errors are fatal in production only."""
    errors, warnings = settings.validate_production_config()
    for warning in warnings:
        logger.warning("config_warning", message=warning)
    for error in errors:
        logger.error("config_error", error=error)
    if errors and settings.is_production:
        raise RuntimeError("Invalid production configuration: " + "; ".join(errors))


def create_app() -> FastAPI:
    api_prefix = f"{settings.api_prefix}/v1"

    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Accept-Encoding",
            "Origin",
            "X-Requested-With",
            "X-Request-ID",
        ],
        expose_headers=["X-Request-ID"],
    )

    # GZip compression for responses > 500 bytes
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Request logging runs inside the request ID middleware so every
    # request log line carries the id
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info("app_startup", app_name=settings.app_name)
        validate_config_on_startup()

        db.initialize(settings.database_url)
        health = db.health_check()
        if health["healthy"]:
            logger.info("database_initialized", dialect=db.dialect_name, latency_ms=health["latency_ms"])
        else:
            logger.error("database_unreachable", error=health["error"])

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("app_shutdown")

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """
        Readiness probe.

        Returns 200 when the database answers, 503 otherwise.
        """
        health = db.health_check()
        checks = {"database": health["healthy"]}
        if not health["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )
        return {"status": "ready", "checks": checks}

    # API is accessible at /api/v1/*
    for module in ROUTER_MODULES:
        for router in module.routers:
            app.include_router(router, prefix=api_prefix)

    return app


app = create_app()
