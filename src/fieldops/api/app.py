"""FastAPI application with lifespan, error handlers and router mounting."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fieldops.api.dependencies import cors_headers
from fieldops.api.routes import attendance, health, users
from fieldops.core.config import AppSettings
from fieldops.core.exceptions import RequestError
from fieldops.core.logger import configure_logging
from fieldops.core.protocols import IDocumentStore, IIdentityProvider
from fieldops.persistence import create_persistence
from fieldops.services.attendance import AttendanceService
from fieldops.services.payroll import PayrollService
from fieldops.services.profiles import ProfileService
from fieldops.services.provisioning import ProvisioningService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup and shutdown of the configured backends."""
    settings: AppSettings = app.state.settings
    logger.info("FieldOps starting (environment=%s identity=%s store=%s)",
                settings.environment, settings.identity_backend, settings.store_backend)
    yield
    logger.info("FieldOps shutting down")


def _error_headers(request: Request) -> dict[str, str]:
    if request.url.path == users.PROVISION_PATH:
        return cors_headers(request.app.state.settings)
    return {}


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": <user-safe message>}``."""

    @app.exception_handler(RequestError)
    async def _request_error(request: Request, exc: RequestError) -> JSONResponse:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code,
                            headers=_error_headers(request))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("%s %s -> 400: %d validation error(s)", request.method, request.url.path,
                    len(exc.errors()))
        return JSONResponse({"error": "Invalid request body format."}, status_code=400,
                            headers=_error_headers(request))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "An unexpected error occurred."}, status_code=500,
                            headers=_error_headers(request))


def create_app(
    settings: AppSettings | None = None,
    *,
    identity: IIdentityProvider | None = None,
    store: IDocumentStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Collaborators default to the backends named in settings; tests pass
    in-memory ones directly.
    """
    settings = settings or AppSettings()
    configure_logging(settings.log_level)

    if identity is None or store is None:
        default_identity, default_store = create_persistence(settings)
        identity = identity or default_identity
        store = store or default_store

    app = FastAPI(
        title="FieldOps ERP Core",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.identity = identity
    app.state.store = store
    app.state.provisioning = ProvisioningService(
        identity=identity, store=store, employees_path=settings.employees_path,
    )
    app.state.profiles = ProfileService(
        identity=identity, store=store, employees_path=settings.employees_path,
    )
    app.state.attendance = AttendanceService(store=store, attendance_path=settings.attendance_path)
    app.state.payroll = PayrollService(
        store=store,
        employees_path=settings.employees_path,
        attendance_path=settings.attendance_path,
        business_timezone=settings.business_timezone,
    )

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(attendance.router)
    return app
