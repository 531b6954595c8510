"""
HMAC Proxy Errors
=================
Exception hierarchy shared by the option validator, the authenticator and
the upstream forwarder.
"""

from typing import List, Optional


class HmacProxyError(Exception):
    """Base exception for all hmacproxy errors."""
    pass


class InvalidOptionsError(HmacProxyError):
    """Raised once, after every check has run, when options are invalid."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__(
            "Invalid options:\n  " + "\n  ".join(self.problems)
        )


class UnsupportedDigestError(HmacProxyError):
    """Raised when a digest name does not map to a known hash algorithm."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unsupported digest: {name}")


class UpstreamError(HmacProxyError):
    """Base exception for failures talking to the upstream server."""

    status_code: int = 502
    public_message: str = "bad gateway"

    def __init__(self, message: str, upstream: str = "unknown", status_code: Optional[int] = None):
        self.message = message
        self.upstream = upstream
        if status_code is not None:
            self.status_code = status_code
        super().__init__(f"[{upstream}] {message} (Status: {self.status_code})")


class UpstreamUnavailableError(UpstreamError):
    """Raised when the upstream is unreachable or the connection drops."""
    status_code = 502
    public_message = "upstream unavailable"


class UpstreamTimeoutError(UpstreamError):
    """Raised specifically on timeouts."""
    status_code = 504
    public_message = "upstream timed out"
