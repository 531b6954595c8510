"""
Digest Lookup
=============
Maps user-facing digest names to hashlib constructors.
"""

import hashlib
from typing import Callable, Dict

from ..errors import UnsupportedDigestError

DIGESTS: Dict[str, Callable] = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha224": hashlib.sha224,
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
}


def digest_name_to_hash(name: str) -> Callable:
    """
    Resolve a digest name such as "sha1" to its hash constructor.

    Raises:
        UnsupportedDigestError: if the name is not one of DIGESTS
    """
    try:
        return DIGESTS[name]
    except KeyError:
        raise UnsupportedDigestError(name) from None


def hash_to_digest_name(digest: Callable) -> str:
    """Reverse lookup of digest_name_to_hash."""
    for name, constructor in DIGESTS.items():
        if constructor is digest:
            return name
    raise UnsupportedDigestError(getattr(digest, "__name__", repr(digest)))
