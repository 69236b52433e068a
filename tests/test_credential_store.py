"""
tests.test_credential_store

Credential record persistence and storage-fault tolerance.
"""

from __future__ import annotations

import json

from procurement_gateway.client.credential_store import (
    TOKEN_KEY,
    USER_KEY,
    CredentialStore,
    JsonFileStorage,
    MemoryStorage,
)
from procurement_gateway.client.models import User

USER = User(id=7, firstName="Rana", lastName="Haddad", email="rana@example.com", role="viewer")


def test_write_read_remove_roundtrip_in_memory() -> None:
    storage = MemoryStorage()
    store = CredentialStore(storage)

    assert store.read() is None
    assert store.write("tok-1", USER) is True
    assert store.read() == "tok-1"
    assert store.read_user() == USER
    assert json.loads(storage.get_item(USER_KEY))["firstName"] == "Rana"

    assert store.remove() is True
    assert store.read() is None
    assert store.read_user() is None


def test_unavailable_storage_degrades_without_raising() -> None:
    store = CredentialStore(MemoryStorage(available=False))

    assert store.write("tok-1", USER) is False
    assert store.read() is None
    assert store.read_user() is None
    assert store.remove() is False


def test_no_backend_behaves_like_disabled_storage() -> None:
    store = CredentialStore()
    assert store.write("tok-1", USER) is False
    assert store.read() is None
    assert store.remove() is False


def test_storage_that_fails_after_login_still_reads_absent() -> None:
    storage = MemoryStorage()
    store = CredentialStore(storage)
    store.write("tok-1", USER)

    storage.available = False
    assert store.read() is None


def test_json_file_storage_is_shared_across_instances(tmp_path) -> None:
    path = tmp_path / "session.json"
    CredentialStore(JsonFileStorage(path)).write("tok-2", USER)

    other = CredentialStore(JsonFileStorage(path))
    assert other.read() == "tok-2"
    assert other.read_user().id == 7

    assert other.remove() is True
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_corrupt_file_and_cached_user_degrade(tmp_path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    assert CredentialStore(JsonFileStorage(path)).read() is None

    storage = MemoryStorage()
    storage.set_item(TOKEN_KEY, "tok-3")
    storage.set_item(USER_KEY, json.dumps({"email": "no-id@example.com"}))
    store = CredentialStore(storage)
    assert store.read() == "tok-3"
    assert store.read_user() is None


class ThrowingStorage:
    """Backend whose every call fails the way a locked-down browser store does."""

    def get_item(self, key: str) -> str | None:
        raise RuntimeError("SecurityError: storage access denied")

    def set_item(self, key: str, value: str) -> None:
        raise RuntimeError("SecurityError: storage access denied")

    def remove_item(self, key: str) -> None:
        raise RuntimeError("SecurityError: storage access denied")


def test_arbitrary_backend_exceptions_are_absorbed() -> None:
    store = CredentialStore(ThrowingStorage())

    assert store.read() is None
    assert store.read_user() is None
    assert store.write("tok-1", USER) is False
    assert store.remove() is False
