"""
procurement_gateway.client.errors

Error taxonomy raised by the HTTP client.

Responsibilities:
- Distinguish server-side errors (a response arrived) from an unreachable backend.
- Carry status/body/url so callers can display or log without re-parsing.
"""

from __future__ import annotations

from typing import Any

import httpx


class ApiError(Exception):
    """Base class for every failure surfaced by `ApiClient`."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ApiRequestSetupError(ApiError):
    """The request could not be constructed (bad URL, unserializable body)."""


class ApiUnavailableError(ApiError):
    """No response received: connection refused, DNS failure, timeout."""


class ApiProtocolError(ApiError):
    """A response started arriving but could not be read (bad encoding, redirect loop)."""


class ApiStatusError(ApiError):
    """The backend answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None,
        status_code: int,
        body: Any,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code
        self.body = body
        self.response = response

    @property
    def server_message(self) -> str | None:
        # Backend error bodies look like {"message": "..."}.
        if isinstance(self.body, dict):
            msg = self.body.get("message")
            if isinstance(msg, str) and msg:
                return msg
        return None


class UnauthorizedError(ApiStatusError):
    """401 from any endpoint; the client has already torn down stored credentials."""


# --- Module Notes -----------------------------------------------------------
# `UnauthorizedError` subclasses `ApiStatusError` so generic handlers still see
# the status code and body.
