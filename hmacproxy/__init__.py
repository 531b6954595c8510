"""
HMAC Proxy
==========
Signs outgoing requests with an HMAC signature, or authenticates signed
requests before proxying them, serving files, or acknowledging them.
"""

__version__ = "0.1.0"

# Errors
from hmacproxy.errors import (
    HmacProxyError,
    InvalidOptionsError,
    UnsupportedDigestError,
    UpstreamError,
    UpstreamUnavailableError,
    UpstreamTimeoutError,
)

# HMAC Auth
from hmacproxy.hmacauth import (
    HmacAuth,
    ValidationResult,
    digest_name_to_hash,
)

# Options
from hmacproxy.options import (
    HandlerMode,
    ProxyOptions,
    validate_options,
    register_command_line_options,
)

# Handlers
from hmacproxy.handlers import (
    build_handler,
    new_http_proxy_handler,
)

__all__ = [
    "__version__",
    # Errors
    "HmacProxyError",
    "InvalidOptionsError",
    "UnsupportedDigestError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "UpstreamTimeoutError",
    # HMAC Auth
    "HmacAuth",
    "ValidationResult",
    "digest_name_to_hash",
    # Options
    "HandlerMode",
    "ProxyOptions",
    "validate_options",
    "register_command_line_options",
    # Handlers
    "build_handler",
    "new_http_proxy_handler",
]
