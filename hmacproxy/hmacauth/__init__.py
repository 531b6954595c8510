"""
HMAC Auth Module
================
Request signing and signature validation with a shared secret.
"""

from .models import ValidationResult
from .digests import DIGESTS, digest_name_to_hash, hash_to_digest_name
from .signature import HmacAuth, header_values, request_uri

__all__ = [
    # Models
    "ValidationResult",
    # Digests
    "DIGESTS",
    "digest_name_to_hash",
    "hash_to_digest_name",
    # Signature
    "HmacAuth",
    "header_values",
    "request_uri",
]
