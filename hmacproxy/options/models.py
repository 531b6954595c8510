"""
Option Models
=============
Data models and enums for proxy configuration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import SplitResult

from ..errors import InvalidOptionsError


class HandlerMode(str, Enum):
    """Which request handler new_http_proxy_handler builds."""

    # Sign requests before proxying them to an upstream server
    SIGN_AND_PROXY = "sign_and_proxy"

    # Authenticate requests before proxying them to an upstream server
    AUTH_AND_PROXY = "auth_and_proxy"

    # Authenticate requests before returning content from file_root
    AUTH_FOR_FILES = "auth_for_files"

    # Return 202 or 401 after authenticating a request (or not)
    AUTH_ONLY = "auth_only"


@dataclass
class DigestSpec:
    """A digest name and, once validated, its hash constructor."""
    name: str = "sha1"
    hash: Optional[Callable] = None


@dataclass
class UpstreamURL:
    """Raw upstream URL from the command line and its parsed form."""
    raw: str = ""
    url: Optional[SplitResult] = None

    @property
    def origin(self) -> str:
        """scheme://host[:port] of the parsed URL."""
        if self.url is None:
            return ""
        return f"{self.url.scheme}://{self.url.netloc}"


@dataclass
class ProxyOptions:
    """
    Parameters that decide which handler to launch and configure it.

    ``mode`` is derived by validate() and never set by callers.
    """
    port: int = 0
    auth: bool = False
    digest: DigestSpec = field(default_factory=DigestSpec)
    secret: str = ""
    sign_header: str = ""
    headers: List[str] = field(default_factory=list)
    upstream: UpstreamURL = field(default_factory=UpstreamURL)
    file_root: str = ""
    ssl_cert: str = ""
    ssl_key: str = ""
    mode: Optional[HandlerMode] = None

    def validate(self) -> None:
        """
        Check every option, parse upstream and digest, and set ``mode``.

        Raises:
            InvalidOptionsError: carrying every problem found, in check order
        """
        from .validation import validate_options

        self.mode, problems = validate_options(self)
        if problems:
            raise InvalidOptionsError(problems)


def parse_header_list(value: str) -> List[str]:
    """Split a comma-separated header list, preserving order."""
    return [name.strip() for name in value.split(",") if name.strip()]
