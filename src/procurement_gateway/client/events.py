"""
procurement_gateway.client.events

Unauthorized notification emitted by the HTTP client.

Responsibilities:
- Carry "a request came back 401" from the HTTP client to the session manager
  without either importing the other's state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from procurement_gateway.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class UnauthorizedEvent:
    url: str
    had_auth: bool


UnauthorizedHandler = Callable[[UnauthorizedEvent], None]


class UnauthorizedSignal:
    """
    Single producer (`ApiClient`), synchronous delivery. Handlers run in
    subscription order, inside the response handling of the failing request.
    """

    def __init__(self) -> None:
        self._handlers: list[UnauthorizedHandler] = []

    @property
    def subscribers(self) -> int:
        return len(self._handlers)

    def connect(self, handler: UnauthorizedHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def disconnect(self, handler: UnauthorizedHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, event: UnauthorizedEvent) -> None:
        log.debug("unauthorized_emit", url=event.url, subscribers=self.subscribers)
        for handler in list(self._handlers):
            handler(event)


# --- Module Notes -----------------------------------------------------------
# Handler exceptions propagate to the caller of the failing request.
