"""
procurement_gateway.api.__main__

Entrypoint for running the backend via `python -m procurement_gateway.api`.

Responsibilities:
- Load settings.
- Verify required route modules exist; exit 1 before binding the port if not.
- Create the app and start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import sys

import uvicorn

from procurement_gateway.api.app import create_app
from procurement_gateway.api.readiness import MissingRouteModuleError, verify_route_files
from procurement_gateway.observability.logging import configure_logging, get_logger
from procurement_gateway.settings import get_settings

log = get_logger(__name__)


def main() -> int:
    settings = get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    try:
        verify_route_files()
    except MissingRouteModuleError as e:
        log.critical("startup_aborted", reason=str(e), modules=[m.module for m in e.missing])
        return 1

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
