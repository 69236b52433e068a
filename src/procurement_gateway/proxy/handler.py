"""
procurement_gateway.proxy.handler

Forwarding proxy from the static frontend origin to the backend origin.

Responsibilities:
- Answer CORS preflight without touching the backend.
- Rewrite the function-mounted path to the canonical `/api/...` backend path.
- Relay an allow-listed subset of request headers, the body and the query string.
- Tag the upstream call with the proxy's own request id.
- Relay the backend response verbatim, or a diagnostic 500 when it is unreachable.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import urlencode

import httpx

from procurement_gateway.observability.logging import get_logger

log = get_logger(__name__)

FUNCTION_MOUNT_PREFIX = "/.netlify/functions/api-proxy"
API_PREFIX = "/api"
DEFAULT_BACKEND_URL = "http://localhost:3000"

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
}

# Inbound headers relayed to the backend; everything else stays at the edge.
FORWARDED_HEADERS: tuple[str, ...] = ("Content-Type", "Authorization")

# Set by the proxy itself (not relayed from the caller) so backend logs share its id.
REQUEST_ID_HEADER = "X-Request-ID"

_BODYLESS_METHODS = frozenset({"GET", "HEAD"})


@dataclass(frozen=True, slots=True)
class ProxyEvent:
    """One incoming call as delivered by the edge platform."""

    http_method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query_string_parameters: Mapping[str, str] | None = None
    body: str | None = None
    request_id: str | None = None


@dataclass(frozen=True, slots=True)
class ProxyResponse:
    status_code: int
    headers: dict[str, str]
    body: str


def resolve_backend_url(configured: str | None) -> str:
    if not configured or configured == DEFAULT_BACKEND_URL:
        log.warning(
            "backend_url_not_set",
            fallback=DEFAULT_BACKEND_URL,
            hint="set BACKEND_API_URL in the proxy environment",
        )
        return DEFAULT_BACKEND_URL
    return configured


def normalize_path(path: str, *, mount_prefix: str = FUNCTION_MOUNT_PREFIX) -> str:
    """
    `/.netlify/functions/api-proxy/api/items` -> `/api/items`
    `/.netlify/functions/api-proxy/items`     -> `/api/items`
    `/api/items`                              -> `/api/items`
    """

    if mount_prefix in path:
        path = path.replace(mount_prefix, "", 1)
    if not path.startswith("/"):
        path = f"/{path}"
    if path != API_PREFIX and not path.startswith(f"{API_PREFIX}/"):
        path = f"{API_PREFIX}{path}" if path != "/" else API_PREFIX
    return path


def build_query_string(params: Mapping[str, str] | None) -> str:
    if not params:
        return ""
    return f"?{urlencode(dict(params))}"


def build_target_url(backend_url: str, event: ProxyEvent) -> str:
    path = normalize_path(event.path)
    return f"{backend_url.rstrip('/')}{path}{build_query_string(event.query_string_parameters)}"


def forwarded_headers(headers: Mapping[str, str], *, request_id: str | None = None) -> dict[str, str]:
    # Edge platforms deliver header names in arbitrary case.
    lowered = {k.lower(): v for k, v in headers.items()}
    out: dict[str, str] = {}
    for name in FORWARDED_HEADERS:
        value = lowered.get(name.lower())
        if value:
            out[name] = value
    if request_id:
        out[REQUEST_ID_HEADER] = request_id
    return out


def preflight_response() -> ProxyResponse:
    return ProxyResponse(status_code=200, headers=dict(CORS_HEADERS), body="")


async def handle(
    event: ProxyEvent,
    *,
    backend_url: str,
    http: httpx.AsyncClient,
) -> ProxyResponse:
    """
    Translate one incoming call. No state survives between invocations; `http`
    is only a connection pool.
    """

    method = event.http_method.upper()
    if method == "OPTIONS":
        return preflight_response()

    target_url = build_target_url(backend_url, event)
    log.info("proxying", method=method, path=normalize_path(event.path), target_url=target_url)

    content = event.body if method not in _BODYLESS_METHODS and event.body else None
    try:
        response = await http.request(
            method,
            target_url,
            headers=forwarded_headers(event.headers, request_id=event.request_id),
            content=content,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        # A misconfigured BACKEND_API_URL lands here; the body must be enough to fix it.
        message = str(e) or type(e).__name__
        log.error("proxy_error", error=message, error_type=type(e).__name__, target_url=target_url)
        return ProxyResponse(
            status_code=500,
            headers={**CORS_HEADERS, "Content-Type": "application/json"},
            body=json.dumps({"error": "Proxy error", "message": message, "targetUrl": target_url}),
        )

    headers = dict(CORS_HEADERS)
    content_type = response.headers.get("content-type")
    if content_type:
        headers["Content-Type"] = content_type
    return ProxyResponse(status_code=response.status_code, headers=headers, body=response.text)


# --- Module Notes -----------------------------------------------------------
# The body is relayed as text without reparsing, so the proxy stays agnostic of
# the backend's content types. Backend redirects are relayed, not followed.
