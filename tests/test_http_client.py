"""
tests.test_http_client

Shared API client: credential injection, 401 recovery, failure classification.
"""

from __future__ import annotations

import httpx
import pytest

from procurement_gateway.client.credential_store import CredentialStore, MemoryStorage
from procurement_gateway.client.errors import (
    ApiError,
    ApiProtocolError,
    ApiRequestSetupError,
    ApiStatusError,
    ApiUnavailableError,
    UnauthorizedError,
)
from procurement_gateway.client.http import ApiClient
from procurement_gateway.client.models import User
from procurement_gateway.client.navigation import LOGIN_PATH, HistoryNavigator

USER = User(id=1, firstName="A", lastName="B", email="a@example.com", role="admin")


def _client(handler, *, store=None, navigator=None) -> ApiClient:
    return ApiClient(
        origin="http://backend.test",
        store=store if store is not None else CredentialStore(MemoryStorage()),
        navigator=navigator or HistoryNavigator("/items"),
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_attaches_bearer_token_and_api_base_path() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    store = CredentialStore(MemoryStorage())
    store.write("tok-1", USER)
    async with _client(handler, store=store) as client:
        await client.get("/items", params={"active": "true"})

    assert seen[0].url == httpx.URL("http://backend.test/api/items?active=true")
    assert seen[0].headers["Authorization"] == "Bearer tok-1"


@pytest.mark.asyncio
async def test_sends_unauthenticated_when_storage_is_unavailable() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    async with _client(handler, store=CredentialStore(MemoryStorage(available=False))) as client:
        await client.get("/health")

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_401_clears_store_redirects_and_signals() -> None:
    store = CredentialStore(MemoryStorage())
    store.write("tok-1", USER)
    navigator = HistoryNavigator("/items")
    events = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Invalid token"})

    async with _client(handler, store=store, navigator=navigator) as client:
        client.unauthorized.connect(events.append)
        client.default_headers["Authorization"] = "Bearer stale"
        with pytest.raises(UnauthorizedError) as exc:
            await client.get("/purchase-orders")

        assert "Authorization" not in client.default_headers

    assert exc.value.status_code == 401
    assert exc.value.server_message == "Invalid token"
    assert store.read() is None
    assert navigator.current_path == LOGIN_PATH
    assert len(events) == 1 and events[0].had_auth is True


@pytest.mark.asyncio
async def test_401_on_login_view_does_not_navigate_again() -> None:
    navigator = HistoryNavigator(LOGIN_PATH)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Invalid credentials"})

    async with _client(handler, navigator=navigator) as client:
        with pytest.raises(UnauthorizedError):
            await client.post("/auth/login", json={"email": "x", "password": "y"})

    assert navigator.history == (LOGIN_PATH,)


@pytest.mark.asyncio
async def test_server_error_carries_status_and_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "Quantity must be positive"})

    navigator = HistoryNavigator("/items")
    async with _client(handler, navigator=navigator) as client:
        with pytest.raises(ApiStatusError) as exc:
            await client.put("/items/3", json={"qty": -1})

    assert not isinstance(exc.value, UnauthorizedError)
    assert exc.value.status_code == 422
    assert exc.value.body == {"message": "Quantity must be positive"}
    assert exc.value.url == "http://backend.test/api/items/3"
    assert navigator.history == ("/items",)


@pytest.mark.asyncio
async def test_non_json_error_body_is_kept_as_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    async with _client(handler) as client:
        with pytest.raises(ApiStatusError) as exc:
            await client.delete("/items/3")

    assert exc.value.body == "Bad Gateway"
    assert exc.value.server_message is None


@pytest.mark.asyncio
async def test_no_response_is_distinct_from_status_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(ApiUnavailableError) as exc:
            await client.get("/items")

    assert not isinstance(exc.value, ApiStatusError)
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_request_construction_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("must not be sent")

    async with _client(handler) as client:
        with pytest.raises(ApiRequestSetupError):
            await client.post("/items", json={"bad": object()})


@pytest.mark.asyncio
async def test_undecodable_body_is_classified_as_protocol_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")

    async with _client(handler) as client:
        with pytest.raises(ApiProtocolError) as exc:
            await client.get("/items")

    assert exc.value.url == "http://backend.test/api/items"
    assert isinstance(exc.value.__cause__, httpx.DecodingError)


@pytest.mark.asyncio
async def test_redirect_loop_surfaces_as_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

    async with _client(handler) as client:
        with pytest.raises(ApiError) as exc:
            await client.get("/items")

    assert isinstance(exc.value, ApiProtocolError)
    assert "redirects" in str(exc.value)


class _ThrowingStorage:
    def get_item(self, key: str) -> str | None:
        raise RuntimeError("SecurityError: storage access denied")

    def set_item(self, key: str, value: str) -> None:
        raise RuntimeError("SecurityError: storage access denied")

    def remove_item(self, key: str) -> None:
        raise RuntimeError("SecurityError: storage access denied")


@pytest.mark.asyncio
async def test_throwing_storage_does_not_break_requests() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with _client(handler, store=CredentialStore(_ThrowingStorage())) as client:
        r = await client.get("/items")

    assert r.status_code == 200
    assert "Authorization" not in seen[0].headers
