"""
procurement_gateway.proxy.app

ASGI host for the forwarding proxy.

Responsibilities:
- Accept any method on any path and hand it to `proxy.handler.handle` as a `ProxyEvent`.
- Own the outbound connection pool for the lifetime of the process.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response

from procurement_gateway.observability.logging import configure_logging, get_logger
from procurement_gateway.observability.middleware import RequestContextMiddleware, current_request_id
from procurement_gateway.proxy.handler import ProxyEvent, handle, resolve_backend_url
from procurement_gateway.settings import Settings

log = get_logger(__name__)

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_proxy_app(
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    configure_logging(service_name=f"{settings.service_name}-proxy", level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.backend_url = resolve_backend_url(settings.backend_api_url)
        async with httpx.AsyncClient(
            timeout=settings.proxy_timeout_s, transport=transport
        ) as http:
            app.state.http = http
            log.info("proxy_startup", backend_url=app.state.backend_url)
            yield
        log.info("proxy_shutdown")

    app = FastAPI(
        title="Procurement API Proxy",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.add_middleware(RequestContextMiddleware)

    @app.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request) -> Response:
        raw_body = await request.body()
        event = ProxyEvent(
            http_method=request.method,
            path=request.url.path,
            headers=dict(request.headers),
            query_string_parameters=dict(request.query_params) or None,
            body=raw_body.decode("utf-8", errors="replace") or None,
            request_id=current_request_id(),
        )
        result = await handle(
            event,
            backend_url=request.app.state.backend_url,
            http=request.app.state.http,
        )
        return Response(content=result.body, status_code=result.status_code, headers=result.headers)

    return app


# --- Module Notes -----------------------------------------------------------
# Multi-valued query parameters collapse to their last value, matching what edge
# platforms deliver in a parsed parameter map.
