"""
procurement_gateway.client.navigation

Navigation seam between the HTTP client and the UI router.

Responsibilities:
- Let the HTTP client force a client-side navigation to the login view.
- Provide an in-process history implementation for headless hosts and tests.
"""

from __future__ import annotations

from typing import Protocol

LOGIN_PATH = "/login"


class Navigator(Protocol):
    @property
    def current_path(self) -> str: ...

    def navigate(self, path: str) -> None: ...


class HistoryNavigator:
    def __init__(self, initial_path: str = "/") -> None:
        self._history: list[str] = [initial_path]

    @property
    def current_path(self) -> str:
        return self._history[-1]

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._history)

    def navigate(self, path: str) -> None:
        self._history.append(path)


def redirect_to_login(navigator: Navigator) -> bool:
    # Already on the login view: navigating again would loop.
    if navigator.current_path == LOGIN_PATH:
        return False
    navigator.navigate(LOGIN_PATH)
    return True


# --- Module Notes -----------------------------------------------------------
# A UI toolkit plugs in its own router by implementing `Navigator`.
