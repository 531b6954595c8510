"""
HMAC Request Signatures
=======================
Signs outgoing requests and validates incoming ones.

The string to sign is built from raw header bytes so that both ends agree on
it regardless of how their HTTP stack decodes header values:

    METHOD\\n
    <values of covered header 1, comma joined>\\n
    ...
    <values of covered header N, comma joined>\\n
    <request URI>

The request body, when present, is fed to the MAC after the string to sign.
The header value written to the request is "<digest name> <base64 MAC>".
"""

import base64
import hmac
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

import httpx

from ..config import ORIGINAL_URI_HEADER
from .digests import DIGESTS, digest_name_to_hash, hash_to_digest_name
from .models import ValidationResult

RawHeaders = Iterable[Tuple[bytes, bytes]]


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("latin-1")


def header_values(headers: Sequence[Tuple[bytes, bytes]], name: bytes) -> List[bytes]:
    """All values of a header, in order. ``name`` must be lowercase."""
    return [value for key, value in headers if key.lower() == name]


def request_uri(path: Union[str, bytes], query: Union[str, bytes], headers: RawHeaders) -> bytes:
    """
    URI covered by the signature.

    An X-Original-URI header takes precedence so that a request rewritten by
    an auth_request style front end still validates against the URI the
    client signed.
    """
    items = list(headers)
    original = header_values(items, ORIGINAL_URI_HEADER.lower().encode("latin-1"))
    if original and original[0]:
        return original[0]
    uri = _to_bytes(path) or b"/"
    query = _to_bytes(query)
    if query:
        uri += b"?" + query
    return uri


class HmacAuth:
    """
    Signs and validates requests with a shared secret.

    Instances hold no mutable state and are safe to share between
    concurrent requests.
    """

    def __init__(
        self,
        digest_name: str,
        secret: Union[str, bytes],
        sign_header: str,
        headers: Sequence[str] = (),
    ):
        self._digest = digest_name_to_hash(digest_name)
        self._digest_name = digest_name
        self._secret = _to_bytes(secret)
        self._sign_header = sign_header
        self._sign_header_key = sign_header.lower().encode("latin-1")
        # Header names are case-insensitive; the signature header never
        # covers itself
        self._headers = tuple(
            name.lower().encode("latin-1")
            for name in headers
            if name and name.lower().encode("latin-1") != self._sign_header_key
        )

    @classmethod
    def from_hash(
        cls,
        digest: Callable,
        secret: Union[str, bytes],
        sign_header: str,
        headers: Sequence[str] = (),
    ) -> "HmacAuth":
        """Build an authenticator from an already resolved hash constructor."""
        return cls(hash_to_digest_name(digest), secret, sign_header, headers)

    @property
    def digest_name(self) -> str:
        return self._digest_name

    @property
    def sign_header(self) -> str:
        return self._sign_header

    @property
    def headers(self) -> Tuple[str, ...]:
        return tuple(name.decode("latin-1") for name in self._headers)

    def string_to_sign(self, method: str, uri: bytes, headers: RawHeaders) -> bytes:
        """Canonical byte string covered by the signature."""
        items = list(headers)
        lines = [_to_bytes(method)]
        for name in self._headers:
            lines.append(b",".join(header_values(items, name)))
        lines.append(uri)
        return b"\n".join(lines)

    def request_signature(
        self,
        method: str,
        uri: bytes,
        headers: RawHeaders,
        body: bytes = b"",
    ) -> str:
        """Compute the signature header value for a request."""
        mac = hmac.new(
            self._secret,
            self.string_to_sign(method, uri, headers),
            self._digest,
        )
        if body:
            mac.update(body)
        encoded = base64.b64encode(mac.digest()).decode("ascii")
        return f"{self._digest_name} {encoded}"

    def sign_request(self, request: httpx.Request) -> str:
        """
        Attach a freshly computed signature to an outgoing request.

        Any signature already present is overwritten. The request must have
        been built with its full body (not a stream).
        """
        headers = [
            (key, value)
            for key, value in request.headers.raw
            if key.lower() != self._sign_header_key
        ]
        signature = self.request_signature(
            request.method,
            request_uri(request.url.raw_path, b"", headers),
            headers,
            request.content,
        )
        request.headers[self._sign_header] = signature
        return signature

    def validate_request(
        self,
        method: str,
        uri: bytes,
        headers: RawHeaders,
        body: bytes = b"",
    ) -> Tuple[ValidationResult, Optional[str], Optional[str]]:
        """
        Recompute a request's signature and compare it to its header.

        Returns:
            (result, signature from the header, computed signature). The two
            signatures are diagnostic only; callers must only act on result.
        """
        items = list(headers)
        provided = header_values(items, self._sign_header_key)
        if not provided or not provided[0]:
            return ValidationResult.NO_SIGNATURE, None, None

        header_signature = provided[0].decode("latin-1")
        parts = header_signature.split(" ", 1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return ValidationResult.INVALID_FORMAT, header_signature, None
        if parts[0] not in DIGESTS:
            return ValidationResult.UNSUPPORTED_ALGORITHM, header_signature, None

        computed = self.request_signature(method, uri, items, body)
        if hmac.compare_digest(computed.encode("ascii"), provided[0]):
            return ValidationResult.MATCH, header_signature, computed
        return ValidationResult.MISMATCH, header_signature, computed
