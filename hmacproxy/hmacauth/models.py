"""
HMAC Auth Models
================
Result types returned by request validation.
"""

from enum import Enum


class ValidationResult(str, Enum):
    """Outcome of validating a request signature."""
    NO_SIGNATURE = "no_signature"
    INVALID_FORMAT = "invalid_format"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    MATCH = "match"
    MISMATCH = "mismatch"
