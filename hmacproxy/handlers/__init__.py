"""
Handlers Module
===============
Builds the ASGI application for each handler mode.
"""

from .apps import (
    UNAUTHORIZED_BODY,
    AuthHandler,
    AuthOnlyHandler,
    ProxyApp,
    SigningHandler,
    authenticate,
    replay_body,
    serve_lifespan,
)
from .factory import build_handler, new_http_proxy_handler
from .upstream import HOP_BY_HOP_HEADERS, UpstreamForwarder, raw_request_path

__all__ = [
    # Apps
    "UNAUTHORIZED_BODY",
    "AuthHandler",
    "AuthOnlyHandler",
    "ProxyApp",
    "SigningHandler",
    "authenticate",
    "replay_body",
    "serve_lifespan",
    # Factory
    "build_handler",
    "new_http_proxy_handler",
    # Upstream
    "HOP_BY_HOP_HEADERS",
    "UpstreamForwarder",
    "raw_request_path",
]
