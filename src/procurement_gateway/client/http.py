"""
procurement_gateway.client.http

Shared HTTP client for the admin UI.

Responsibilities:
- Attach the stored bearer token to every outbound request.
- Tear down credentials and redirect to the login view on any 401.
- Classify failures (status error, no response, unreadable response, setup error) and log them.
"""

from __future__ import annotations

from typing import Any, NoReturn

import httpx

from procurement_gateway.client.credential_store import CredentialStore
from procurement_gateway.client.errors import (
    ApiProtocolError,
    ApiRequestSetupError,
    ApiStatusError,
    ApiUnavailableError,
    UnauthorizedError,
)
from procurement_gateway.client.events import UnauthorizedEvent, UnauthorizedSignal
from procurement_gateway.client.navigation import Navigator, redirect_to_login
from procurement_gateway.observability.logging import get_logger
from procurement_gateway.settings import Settings

log = get_logger(__name__)

API_BASE_PATH = "/api"
DEFAULT_TIMEOUT_S = 5.0


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """
    One instance per UI runtime. Holds no session state of its own: the token
    is read from the credential store on each request.
    """

    def __init__(
        self,
        *,
        origin: str,
        store: CredentialStore,
        navigator: Navigator,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._store = store
        self._navigator = navigator
        self._unauthorized = UnauthorizedSignal()
        self._http = httpx.AsyncClient(
            base_url=f"{origin.rstrip('/')}{API_BASE_PATH}",
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._attach_credentials]},
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        store: CredentialStore,
        navigator: Navigator,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ApiClient:
        return cls(
            origin=settings.client_origin,
            store=store,
            navigator=navigator,
            timeout=settings.client_timeout_s,
            transport=transport,
        )

    @property
    def unauthorized(self) -> UnauthorizedSignal:
        return self._unauthorized

    @property
    def default_headers(self) -> httpx.Headers:
        return self._http.headers

    async def _attach_credentials(self, request: httpx.Request) -> None:
        # The store never raises; a failed read simply sends the request unauthenticated.
        token = self._store.read()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            request = self._http.build_request(method, url, **kwargs)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            log.error("api_setup_error", method=method, url=url, error=str(e))
            raise ApiRequestSetupError(str(e), url=url) from e

        try:
            response = await self._http.send(request)
        except httpx.TransportError as e:
            # TimeoutException is a TransportError: a timeout is "no response", not a status.
            reason = str(e) or type(e).__name__
            log.error(
                "api_no_response",
                method=method,
                url=str(request.url),
                error=reason,
                hint="backend might be down",
            )
            raise ApiUnavailableError(reason, url=str(request.url)) from e
        except httpx.RequestError as e:
            reason = str(e) or type(e).__name__
            log.error(
                "api_unreadable_response",
                method=method,
                url=str(request.url),
                error=reason,
                error_type=type(e).__name__,
            )
            raise ApiProtocolError(reason, url=str(request.url)) from e

        if response.is_success:
            return response
        self._raise_for_status(request, response)

    def _raise_for_status(self, request: httpx.Request, response: httpx.Response) -> NoReturn:
        status = response.status_code
        url = str(request.url)
        has_auth = "Authorization" in request.headers
        body = _decode_body(response)

        if status == 401:
            self._handle_unauthorized(url=url, has_auth=has_auth)

        log.error("api_error", status=status, data=body, url=url, has_auth=has_auth)
        error_cls = UnauthorizedError if status == 401 else ApiStatusError
        raise error_cls(
            f"{request.method} {url} failed with status {status}",
            url=url,
            status_code=status,
            body=body,
            response=response,
        )

    def _handle_unauthorized(self, *, url: str, has_auth: bool) -> None:
        log.warning("auth_failed_clearing_credentials", url=url, has_auth=has_auth)
        self._store.remove()
        self._http.headers.pop("Authorization", None)
        redirect_to_login(self._navigator)
        self._unauthorized.emit(UnauthorizedEvent(url=url, had_auth=has_auth))

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


# --- Module Notes -----------------------------------------------------------
# Nothing here retries. A 401 during login (bad credentials) also clears the
# store; callers on the login view are not redirected again.
