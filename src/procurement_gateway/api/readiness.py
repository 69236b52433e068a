"""
procurement_gateway.api.readiness

Route readiness checks for the backend app.

Responsibilities:
- Fail fast before binding the port when a required route module is missing on disk.
- Resolve each route group's `router`, logging and skipping the ones that fail.
- Expose per-group existence probes, a diagnostic catch-all 404 and a catch-all 500.
"""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from procurement_gateway.observability.logging import get_logger
from procurement_gateway.settings import Settings

log = get_logger(__name__)

NOT_FOUND_HINT = "Make sure the backend server was restarted after adding new routes"

CATCH_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@dataclass(frozen=True, slots=True)
class RouteModule:
    name: str
    module: str
    prefix: str
    required: bool = True


DEFAULT_ROUTE_MODULES: tuple[RouteModule, ...] = (
    RouteModule(name="auth", module="procurement_gateway.api.routers.auth", prefix="/api/auth"),
    RouteModule(name="users", module="procurement_gateway.api.routers.users", prefix="/api/users"),
)


class MissingRouteModuleError(Exception):
    def __init__(self, missing: Sequence[RouteModule]) -> None:
        self.missing = tuple(missing)
        names = ", ".join(m.module for m in self.missing)
        super().__init__(f"required route module(s) not found: {names}")


@dataclass(frozen=True, slots=True)
class RouteStatus:
    route: RouteModule
    router: APIRouter | None
    error: str | None = None

    @property
    def resolved(self) -> bool:
        return self.router is not None


def module_exists(module: str) -> bool:
    try:
        return importlib.util.find_spec(module) is not None
    except (ImportError, ValueError):
        # A missing parent package raises instead of returning None.
        return False


def expected_path(module: str) -> str:
    try:
        spec = importlib.util.find_spec(module)
    except (ImportError, ValueError):
        spec = None
    if spec is not None and spec.origin:
        return spec.origin
    return module.replace(".", "/") + ".py"


def verify_route_files(modules: Sequence[RouteModule] = DEFAULT_ROUTE_MODULES) -> None:
    """
    Integrity check run by the process entrypoint before the port is bound.
    Only `required` groups count; optional ones are left to `resolve_routes`.
    """

    missing = []
    for route in modules:
        if not route.required:
            continue
        if module_exists(route.module):
            log.info("route_module_verified", name=route.name, path=expected_path(route.module))
        else:
            log.error(
                "route_module_missing",
                name=route.name,
                module=route.module,
                expected_path=expected_path(route.module),
            )
            missing.append(route)
    if missing:
        raise MissingRouteModuleError(missing)


def resolve_route(route: RouteModule) -> RouteStatus:
    try:
        module = importlib.import_module(route.module)
    except Exception as e:  # noqa: BLE001  # any import-time failure disables just this group
        error = f"{type(e).__name__}: {e}"
    else:
        router = getattr(module, "router", None)
        if isinstance(router, APIRouter):
            return RouteStatus(route=route, router=router)
        error = "module has no APIRouter named `router`"

    log.error(
        "route_module_unresolved",
        name=route.name,
        module=route.module,
        expected_path=expected_path(route.module),
        file_exists=module_exists(route.module),
        error=error,
    )
    return RouteStatus(route=route, router=None, error=error)


def resolve_routes(modules: Sequence[RouteModule] = DEFAULT_ROUTE_MODULES) -> list[RouteStatus]:
    return [resolve_route(route) for route in modules]


def mount_routes(app: FastAPI, statuses: Sequence[RouteStatus]) -> None:
    for status in statuses:
        if status.router is None:
            log.warning("route_group_skipped", name=status.route.name, prefix=status.route.prefix)
            continue
        app.include_router(status.router, prefix=status.route.prefix)
        log.info("route_group_registered", name=status.route.name, prefix=status.route.prefix)


def probe_router(statuses: Sequence[RouteStatus]) -> APIRouter:
    """
    One `GET /api/test-<name>` per group, unauthenticated, for operators to
    check a deployment without reading its logs.
    """

    router = APIRouter(prefix="/api", tags=["readiness"])
    for status in statuses:
        router.add_api_route(
            f"/test-{status.route.name}",
            _probe_endpoint(status),
            methods=["GET"],
            name=f"test_{status.route.name.replace('-', '_')}",
        )
    return router


def _probe_endpoint(status: RouteStatus):
    async def probe() -> dict[str, Any]:
        return {
            "message": f"{status.route.name.capitalize()} route test endpoint",
            "routeExists": status.resolved,
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    return probe


def not_found_router(statuses: Sequence[RouteStatus]) -> APIRouter:
    """Catch-all; must be included after every other router."""

    router = APIRouter(include_in_schema=False)

    @router.api_route("/{path:path}", methods=CATCH_ALL_METHODS)
    async def route_not_found(request: Request) -> JSONResponse:
        log.warning(
            "route_not_found",
            method=request.method,
            url=str(request.url),
            path=request.url.path,
            routes={s.route.name: s.resolved for s in statuses},
        )
        return JSONResponse(
            status_code=HTTP_404_NOT_FOUND,
            content={
                "message": "Route not found",
                "method": request.method,
                "url": _original_url(request),
                "path": request.url.path,
                "hint": NOT_FOUND_HINT,
            },
        )

    return router


def install_error_handler(app: FastAPI, settings: Settings) -> None:
    expose_errors = settings.env == "dev"

    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        log.error(
            "server_error",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "Something went wrong!",
                "error": str(exc) if expose_errors else None,
            },
        )

    app.add_exception_handler(Exception, unhandled_error)


def _original_url(request: Request) -> str:
    # Path plus query, as the client sent it.
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


# --- Module Notes -----------------------------------------------------------
# "Missing on disk" exits before serving; "failed to import" serves without that
# group. `api.__main__` runs the first, `api.app.create_app` the second.
