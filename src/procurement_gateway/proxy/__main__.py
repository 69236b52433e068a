"""
procurement_gateway.proxy.__main__

Entrypoint for running the proxy via `python -m procurement_gateway.proxy`.
"""

from __future__ import annotations

import uvicorn

from procurement_gateway.proxy.app import create_proxy_app
from procurement_gateway.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_proxy_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.proxy_host,
        port=settings.proxy_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
