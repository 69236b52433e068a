"""
procurement_gateway.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the backend, the forwarding proxy and the client.
- Hide secrets from repr/logging (JWT secret, bootstrap admin password).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    One settings object shared by all three processes:
    - backend API (`python -m procurement_gateway.api`)
    - forwarding proxy (`python -m procurement_gateway.proxy`)
    - client session layer (embedded in the UI runtime)
    """

    model_config = SettingsConfigDict(
        env_prefix="PGW_", case_sensitive=False, populate_by_name=True
    )

    # `dev` exposes error messages in 500 bodies; `dev`/`test` auto-create tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "procurement-gateway"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "procurement-gateway"
    jwt_audience: str = "procurement-admin"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    jwt_ttl_hours: int = 24

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./procurement.db"

    # First admin account, created at startup when both are set.
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = Field(default=None, repr=False)

    # Forwarding proxy. The backend origin keeps its unprefixed deployment name.
    backend_api_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("BACKEND_API_URL", "PGW_BACKEND_API_URL"),
    )
    proxy_host: str = "0.0.0.0"
    proxy_port: int = 8888
    proxy_timeout_s: float = 30.0

    # Client session layer
    client_origin: str = "http://localhost:3000"
    client_timeout_s: float = 5.0
    session_verify_timeout_s: float = 5.0
    credential_store_path: str = ".procurement-session.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly instead of going through the cache.
