"""
tests.test_session_e2e

Client session layer against the real backend app (in-process, no network).

Responsibilities:
- Login persists a credential record that a later "page load" bootstraps from.
- A token the backend no longer accepts tears the next bootstrap down.
"""

from __future__ import annotations

import httpx
import pytest

from procurement_gateway.api.app import create_app
from procurement_gateway.client.credential_store import JsonFileStorage
from procurement_gateway.client.navigation import LOGIN_PATH, HistoryNavigator
from procurement_gateway.client.session import SessionState, create_session_manager


@pytest.mark.asyncio
async def test_login_survives_reload_and_logout_clears_it(settings, tmp_path) -> None:
    app = create_app(settings=settings)
    client_settings = settings.model_copy(
        update={"client_origin": "http://test", "credential_store_path": str(tmp_path / "session.json")}
    )

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)

        first = create_session_manager(client_settings, navigator=HistoryNavigator(LOGIN_PATH), transport=transport)
        await first.bootstrap()
        assert first.state is SessionState.anonymous

        result = await first.login(settings.bootstrap_admin_email, settings.bootstrap_admin_password)
        assert result.ok is True
        assert first.user.role == "admin"
        await first.aclose()

        # Next page load: same file, new runtime.
        second = create_session_manager(client_settings, navigator=HistoryNavigator("/"), transport=transport)
        await second.bootstrap()
        assert second.state is SessionState.authenticated
        assert second.user.email == settings.bootstrap_admin_email

        r = await second.client.get("/users")
        assert r.status_code == 200

        second.logout()
        await second.aclose()

    assert second.state is SessionState.anonymous
    assert JsonFileStorage(tmp_path / "session.json").get_item("token") is None


@pytest.mark.asyncio
async def test_bootstrap_with_foreign_token_goes_anonymous(settings, tmp_path) -> None:
    app = create_app(settings=settings)
    storage = JsonFileStorage(tmp_path / "session.json")
    storage.set_item("token", "signed-by-someone-else")
    client_settings = settings.model_copy(update={"client_origin": "http://test"})

    async with app.router.lifespan_context(app):
        navigator = HistoryNavigator("/dashboard")
        manager = create_session_manager(
            client_settings, navigator=navigator, storage=storage, transport=httpx.ASGITransport(app=app)
        )
        await manager.bootstrap()
        await manager.aclose()

    assert manager.state is SessionState.anonymous
    assert manager.loading is False
    assert storage.get_item("token") is None
    assert navigator.current_path == LOGIN_PATH
