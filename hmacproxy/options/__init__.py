"""
Proxy Options
=============
Configuration model, validation and command line registration.
"""

from .models import (
    HandlerMode,
    DigestSpec,
    UpstreamURL,
    ProxyOptions,
    parse_header_list,
)
from .validation import (
    derive_mode,
    validate_options,
    check_existence_and_permission,
)
from .flags import (
    register_command_line_options,
    options_from_namespace,
    parse_options,
)

__all__ = [
    # Models
    "HandlerMode",
    "DigestSpec",
    "UpstreamURL",
    "ProxyOptions",
    "parse_header_list",
    # Validation
    "derive_mode",
    "validate_options",
    "check_existence_and_permission",
    # Flags
    "register_command_line_options",
    "options_from_namespace",
    "parse_options",
]
