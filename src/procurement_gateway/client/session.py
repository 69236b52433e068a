"""
procurement_gateway.client.session

Session lifecycle manager (bootstrapping -> authenticated | anonymous).

Responsibilities:
- Bootstrap the session from the credential store, verifying the token via `/auth/me`.
- Expose `login`/`logout` and the current `Session` to UI consumers.
- Tear the session down whenever the HTTP client reports a 401.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from procurement_gateway.client.credential_store import (
    CredentialStore,
    JsonFileStorage,
    StorageBackend,
)
from procurement_gateway.client.errors import ApiError, ApiStatusError
from procurement_gateway.client.events import UnauthorizedEvent
from procurement_gateway.client.http import ApiClient
from procurement_gateway.client.models import User
from procurement_gateway.client.navigation import Navigator
from procurement_gateway.observability.logging import get_logger
from procurement_gateway.settings import Settings

log = get_logger(__name__)

DEFAULT_VERIFY_TIMEOUT_S = 5.0

INVALID_LOGIN_RESPONSE = "Invalid response from server"
LOGIN_FAILED = "Login failed"


class SessionState(enum.StrEnum):
    bootstrapping = "bootstrapping"
    authenticated = "authenticated"
    anonymous = "anonymous"


@dataclass(slots=True)
class Session:
    """
    In-memory session for one UI runtime. Mutated only by `SessionManager`.
    """

    state: SessionState = SessionState.bootstrapping
    user: User | None = None
    loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.authenticated


@dataclass(frozen=True, slots=True)
class LoginResult:
    ok: bool
    error: str | None = None


class SessionManager:
    """
    Owns the `Session`. Consumers read `manager.session`; only the methods
    below (and the 401 subscription) write to it.
    """

    def __init__(
        self,
        *,
        client: ApiClient,
        store: CredentialStore,
        verify_timeout: float = DEFAULT_VERIFY_TIMEOUT_S,
    ) -> None:
        self._client = client
        self._store = store
        self._verify_timeout = verify_timeout
        self._session = Session()
        client.unauthorized.connect(self._on_unauthorized)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user

    @property
    def loading(self) -> bool:
        return self._session.loading

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def client(self) -> ApiClient:
        # UI data calls go through the same client so their 401s reach this manager.
        return self._client

    async def aclose(self) -> None:
        """Stop listening for 401s and release the HTTP client this manager was built with."""
        self._client.unauthorized.disconnect(self._on_unauthorized)
        await self._client.aclose()

    def _set_authenticated(self, user: User) -> None:
        self._session.user = user
        self._session.state = SessionState.authenticated

    def _set_anonymous(self) -> None:
        self._session.user = None
        self._session.state = SessionState.anonymous

    async def bootstrap(self) -> Session:
        """
        Resolve the startup state. Without a stored token this returns before
        any network call. With one, `/auth/me` races a local guard; whichever
        settles first decides, and the guard cancels the call it outlives.
        """

        token = self._store.read()
        if token is None:
            self._set_anonymous()
            self._session.loading = False
            log.info("session_bootstrap", state=self._session.state, had_token=False)
            return self._session

        try:
            async with asyncio.timeout(self._verify_timeout):
                response = await self._client.get("/auth/me")
        except TimeoutError:
            # The token was never rejected, so it stays stored for the next startup.
            log.warning("session_verify_guard_expired", timeout_s=self._verify_timeout)
            self._set_anonymous()
        except ApiError as e:
            log.warning("session_verify_failed", error=str(e), error_type=type(e).__name__)
            self._store.remove()
            self._set_anonymous()
        else:
            user = _parse_user(_json_or_none(response))
            if user is None:
                log.warning("session_verify_malformed")
                self._store.remove()
                self._set_anonymous()
            else:
                self._set_authenticated(user)
        finally:
            self._session.loading = False

        log.info("session_bootstrap", state=self._session.state, had_token=True)
        return self._session

    async def login(self, email: str, password: str) -> LoginResult:
        try:
            response = await self._client.post(
                "/auth/login", json={"email": email, "password": password}
            )
        except ApiStatusError as e:
            description = e.server_message or str(e) or LOGIN_FAILED
            log.info("login_rejected", status=e.status_code)
            return LoginResult(ok=False, error=description)
        except ApiError as e:
            log.info("login_failed", error_type=type(e).__name__)
            return LoginResult(ok=False, error=str(e) or LOGIN_FAILED)

        payload = _json_or_none(response)
        token = payload.get("token") if isinstance(payload, dict) else None
        user = _parse_user(payload.get("user")) if isinstance(payload, dict) else None
        if not token or not isinstance(token, str) or user is None:
            log.warning(
                "login_protocol_violation", has_token=bool(token), has_user=user is not None
            )
            return LoginResult(ok=False, error=INVALID_LOGIN_RESPONSE)

        if not self._store.write(token, user):
            log.warning("login_not_persisted", user_id=user.id)
        self._set_authenticated(user)
        log.info("login_succeeded", user_id=user.id, role=user.role)
        return LoginResult(ok=True)

    def logout(self) -> None:
        self._store.remove()
        was = self._session.state
        self._set_anonymous()
        self._session.loading = False
        log.info("logout", previous_state=was)

    def _on_unauthorized(self, event: UnauthorizedEvent) -> None:
        # The HTTP client already cleared the store; only in-memory state is left.
        if self._session.user is not None:
            log.info("session_revoked", url=event.url)
        self._set_anonymous()


def create_session_manager(
    settings: Settings,
    *,
    navigator: Navigator,
    storage: StorageBackend | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SessionManager:
    """
    Composition root for a UI runtime: one store, one client, one manager.
    Without an explicit `storage` the credential record lives in
    `settings.credential_store_path`.
    """

    if storage is None:
        storage = JsonFileStorage(settings.credential_store_path)
    store = CredentialStore(storage)
    client = ApiClient.from_settings(settings, store=store, navigator=navigator, transport=transport)
    return SessionManager(
        client=client, store=store, verify_timeout=settings.session_verify_timeout_s
    )


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _parse_user(data: Any) -> User | None:
    if not isinstance(data, dict):
        return None
    try:
        return User.model_validate(data)
    except ValidationError:
        return None


# --- Module Notes -----------------------------------------------------------
# Overlapping `login()` calls are not serialized here; the UI disables the login
# control while a call is in flight. State writes are last-write-wins.
