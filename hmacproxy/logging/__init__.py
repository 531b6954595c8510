"""
HMAC Proxy Logging Module

Structured logging setup and request logging middleware.
"""

from .structured import (
    # Setup
    setup_logging,
    get_logger,

    # Middleware
    RequestLoggingMiddleware,

    # Context
    request_id_var,
    service_name_var,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "RequestLoggingMiddleware",
    "request_id_var",
    "service_name_var",
]
