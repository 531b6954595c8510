"""
HTTP Server
===========
Serves a built handler with uvicorn, over TLS when a certificate is given.
"""

import uvicorn
import structlog
from starlette.types import ASGIApp

from .config import LISTEN_HOST
from .logging import RequestLoggingMiddleware
from .options import ProxyOptions

logger = structlog.get_logger(__name__)


def create_server(app: ASGIApp, opts: ProxyOptions, host: str = LISTEN_HOST) -> uvicorn.Server:
    """Wrap ``app`` with request logging and configure uvicorn for ``opts``."""
    server_config = uvicorn.Config(
        RequestLoggingMiddleware(app),
        host=host,
        port=opts.port,
        ssl_certfile=opts.ssl_cert or None,
        ssl_keyfile=opts.ssl_key or None,
        # Logging is configured by setup_logging
        log_config=None,
        access_log=False,
    )
    return uvicorn.Server(server_config)


def run_server(app: ASGIApp, opts: ProxyOptions, description: str, host: str = LISTEN_HOST) -> None:
    """Announce ``description`` and serve until interrupted."""
    server = create_server(app, opts, host)
    address = f"{host}:{opts.port}"
    print(f"{address}: {description}", flush=True)
    logger.info(
        "server_starting",
        address=address,
        tls=bool(opts.ssl_cert),
        description=description,
    )
    server.run()
