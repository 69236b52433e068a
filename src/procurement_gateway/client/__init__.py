"""
procurement_gateway.client

Client-side session layer.

Responsibilities:
- Credential persistence (`credential_store`).
- Shared HTTP client with credential injection and 401 recovery (`http`).
- Session lifecycle state machine (`session`).
"""

# Package marker; import from submodules directly.


# --- Module Notes -----------------------------------------------------------
# Dependency direction: session -> http -> credential_store. The store never
# imports upward, and the http client knows nothing about `Session`.
