"""
procurement_gateway.api.app

FastAPI app factory for the procurement backend.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from procurement_gateway.api.readiness import (
    DEFAULT_ROUTE_MODULES,
    RouteModule,
    install_error_handler,
    mount_routes,
    not_found_router,
    probe_router,
    resolve_routes,
)
from procurement_gateway.api.routers.health import router as health_router
from procurement_gateway.db.init_db import init_db
from procurement_gateway.db.seed import ensure_bootstrap_admin
from procurement_gateway.db.session import create_engine, create_sessionmaker
from procurement_gateway.observability.logging import configure_logging, get_logger
from procurement_gateway.observability.middleware import RequestContextMiddleware
from procurement_gateway.settings import Settings, get_settings

log = get_logger(__name__)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Error bodies are `{"message": ...}`; the client session layer displays that field.
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Unparseable or mistyped input; same body shape as every other error.
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


def create_app(
    *,
    settings: Settings,
    route_modules: Sequence[RouteModule] = DEFAULT_ROUTE_MODULES,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Routers obtain sessions via `procurement_gateway.api.deps.db_session`.
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic migrations.
            await init_db(engine)
        await ensure_bootstrap_admin(app.state.sessionmaker, settings)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Procurement Admin API",
        version="0.1.0",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    install_error_handler(app, settings)

    statuses = resolve_routes(route_modules)
    app.state.route_statuses = statuses
    app.include_router(health_router, tags=["health"])
    mount_routes(app, statuses)
    app.include_router(probe_router(statuses))
    # Last: anything unmatched above gets the diagnostic 404.
    app.include_router(not_found_router(statuses))

    log.info(
        "routes_ready",
        resolved=[s.route.name for s in statuses if s.resolved],
        unresolved=[s.route.name for s in statuses if not s.resolved],
    )
    return app


# --- Module Notes -----------------------------------------------------------
# Route groups are resolved here, at app construction, so a broken group is
# reported before uvicorn binds the port.
