"""
HMAC Proxy Configuration
========================
Environment defaults for the command line flags. Flags always win.
"""

import os
from typing import Optional

SERVICE_NAME = os.getenv("HMACPROXY_SERVICE_NAME", "hmacproxy")

DEFAULT_PORT = int(os.getenv("HMACPROXY_PORT", "0"))
DEFAULT_DIGEST = os.getenv("HMACPROXY_DIGEST", "sha1")
DEFAULT_SECRET = os.getenv("HMACPROXY_SECRET", "")
DEFAULT_SIGN_HEADER = os.getenv("HMACPROXY_SIGN_HEADER", "")
DEFAULT_HEADERS = os.getenv("HMACPROXY_HEADERS", "")
DEFAULT_UPSTREAM = os.getenv("HMACPROXY_UPSTREAM", "")
DEFAULT_FILE_ROOT = os.getenv("HMACPROXY_FILE_ROOT", "")
DEFAULT_SSL_CERT = os.getenv("HMACPROXY_SSL_CERT", "")
DEFAULT_SSL_KEY = os.getenv("HMACPROXY_SSL_KEY", "")

# Seconds; unset means the forwarder waits as long as the upstream does
_upstream_timeout = os.getenv("HMACPROXY_UPSTREAM_TIMEOUT", "")
UPSTREAM_TIMEOUT: Optional[float] = float(_upstream_timeout) if _upstream_timeout else None

LOG_LEVEL = os.getenv("HMACPROXY_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("HMACPROXY_LOG_FORMAT", "json")

LISTEN_HOST = "localhost"

# Header set by an auth_request style front end carrying the URI the client
# actually asked for
ORIGINAL_URI_HEADER = "X-Original-URI"
