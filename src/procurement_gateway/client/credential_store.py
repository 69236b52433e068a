"""
procurement_gateway.client.credential_store

Durable credential record (token + cached user) with fault-tolerant access.

Responsibilities:
- Abstract the persistent key/value storage of the host (browser storage, a file).
- Read/write/remove the credential record without ever raising storage faults.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from procurement_gateway.client.models import User
from procurement_gateway.observability.logging import get_logger

log = get_logger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class StorageUnavailableError(Exception):
    pass


class StorageBackend(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """
    Process-memory storage. `available=False` emulates disabled storage
    (private browsing, quota exceeded).
    """

    def __init__(self, *, available: bool = True) -> None:
        self.available = available
        self._items: dict[str, str] = {}

    def _check(self) -> None:
        if not self.available:
            raise StorageUnavailableError("storage is disabled")

    def get_item(self, key: str) -> str | None:
        self._check()
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check()
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._check()
        self._items.pop(key, None)


class JsonFileStorage:
    """
    Key/value pairs kept in one JSON object on disk. Every call re-reads the
    file so two processes sharing it see each other's writes.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not contain a JSON object")
        return data

    def _dump(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data), encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


class CredentialStore:
    """
    Owner of the persisted credential record.

    Contract: no method raises, whatever the backend throws. Reads degrade to
    None, writes/removes report success as a bool. With no backend at all the store
    behaves like permanently disabled storage.
    """

    def __init__(self, backend: StorageBackend | None = None) -> None:
        self._backend = backend

    def read(self) -> str | None:
        if self._backend is None:
            return None
        try:
            token = self._backend.get_item(TOKEN_KEY)
        except Exception as e:  # noqa: BLE001
            log.warning("credential_read_failed", error=str(e))
            return None
        return token or None

    def read_user(self) -> User | None:
        if self._backend is None:
            return None
        try:
            raw = self._backend.get_item(USER_KEY)
        except Exception as e:  # noqa: BLE001
            log.warning("credential_read_failed", key=USER_KEY, error=str(e))
            return None
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError as e:
            log.warning("cached_user_invalid", errors=e.error_count())
            return None

    def write(self, token: str, user: User) -> bool:
        if self._backend is None:
            log.warning("credential_write_skipped", reason="no storage backend")
            return False
        try:
            self._backend.set_item(TOKEN_KEY, token)
            self._backend.set_item(USER_KEY, json.dumps(user.to_wire()))
        except Exception as e:  # noqa: BLE001
            log.warning("credential_write_failed", error=str(e))
            return False
        return True

    def remove(self) -> bool:
        if self._backend is None:
            return False
        ok = True
        # Remove keys independently so one failing key does not keep the other.
        for key in (TOKEN_KEY, USER_KEY):
            try:
                self._backend.remove_item(key)
            except Exception as e:  # noqa: BLE001
                log.warning("credential_remove_failed", key=key, error=str(e))
                ok = False
        return ok


# --- Module Notes -----------------------------------------------------------
# The store holds no in-memory copy: the HTTP client reads the token from the
# backend on every request, so a logout in another process takes effect at once
# when both share a `JsonFileStorage`.
