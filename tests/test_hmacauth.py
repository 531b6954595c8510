"""
Tests for request signing and signature validation.
"""

import base64
import hashlib

import httpx
import pytest

from hmacproxy.errors import UnsupportedDigestError
from hmacproxy.hmacauth import (
    HmacAuth,
    ValidationResult,
    digest_name_to_hash,
    hash_to_digest_name,
    request_uri,
)

URL = "http://localhost/foo/bar?baz=quux"


def make_auth(**overrides):
    params = dict(
        digest_name="sha1",
        secret="foobar",
        sign_header="Test-Signature",
        headers=["Content-Type", "Date"],
    )
    params.update(overrides)
    return HmacAuth(**params)


def signed_request(auth, method="POST", url=URL, headers=None, content=b"body"):
    if headers is None:
        headers = {"Content-Type": "text/plain", "Date": "Thu, 01 Jan 2026 00:00:00 GMT"}
    request = httpx.Request(method, url, headers=headers, content=content)
    auth.sign_request(request)
    return request


def validate(auth, request, extra_headers=(), uri_path=None, content=None):
    headers = list(request.headers.raw) + list(extra_headers)
    path = uri_path if uri_path is not None else request.url.raw_path
    uri = request_uri(path, b"", headers)
    body = request.content if content is None else content
    result, _, _ = auth.validate_request(request.method, uri, headers, body)
    return result


class TestDigests:

    def test_known_digest_names(self):
        assert digest_name_to_hash("md5") is hashlib.md5
        assert hash_to_digest_name(digest_name_to_hash("sha256")) == "sha256"

    def test_unsupported_digest_raises(self):
        with pytest.raises(UnsupportedDigestError) as exc_info:
            digest_name_to_hash("unsupported")
        assert str(exc_info.value) == "unsupported digest: unsupported"

    def test_authenticator_rejects_unsupported_digest(self):
        with pytest.raises(UnsupportedDigestError):
            make_auth(digest_name="crc32")


class TestStringToSign:

    def test_string_to_sign_layout(self):
        auth = make_auth()
        headers = [(b"Content-Type", b"text/plain"), (b"Other", b"ignored")]
        assert auth.string_to_sign("GET", b"/foo?bar=baz", headers) == (
            b"GET\ntext/plain\n\n/foo?bar=baz"
        )

    def test_multiple_header_values_are_comma_joined(self):
        auth = make_auth(headers=["Accept"])
        headers = [(b"accept", b"text/html"), (b"Accept", b"application/json")]
        assert auth.string_to_sign("GET", b"/", headers) == (
            b"GET\ntext/html,application/json\n/"
        )

    def test_signature_header_never_covers_itself(self):
        auth = make_auth(headers=["Content-Type", "test-signature"])
        assert auth.headers == ("content-type",)

    def test_request_uri_prefers_original_uri_header(self):
        headers = [(b"X-Original-URI", b"/original?x=1")]
        assert request_uri(b"/auth", b"", headers) == b"/original?x=1"

    def test_request_uri_defaults_to_root(self):
        assert request_uri(b"", b"", []) == b"/"
        assert request_uri(b"/foo", b"a=b", []) == b"/foo?a=b"


class TestSigning:

    def test_signature_format(self):
        request = signed_request(make_auth())
        name, encoded = request.headers["Test-Signature"].split(" ", 1)
        assert name == "sha1"
        assert len(base64.b64decode(encoded)) == 20

    def test_signing_is_idempotent(self):
        auth = make_auth()
        request = signed_request(auth)
        first = request.headers["Test-Signature"]
        assert auth.sign_request(request) == first
        assert request.headers.get_list("Test-Signature") == [first]

    def test_signing_overwrites_existing_signature(self):
        auth = make_auth()
        request = signed_request(auth, headers={
            "Content-Type": "text/plain",
            "Test-Signature": "sha1 stale",
        })
        assert request.headers["Test-Signature"] != "sha1 stale"
        assert validate(auth, request) == ValidationResult.MATCH


class TestValidation:
    """Identically configured authenticators agree; any change disagrees."""

    def test_round_trip_matches(self):
        auth = make_auth()
        assert validate(auth, signed_request(auth)) == ValidationResult.MATCH

    def test_header_names_are_case_insensitive(self):
        signer = make_auth(headers=["content-type", "DATE"])
        validator = make_auth(headers=["Content-Type", "Date"])
        assert validate(validator, signed_request(signer)) == ValidationResult.MATCH

    def test_validation_returns_both_signatures(self):
        auth = make_auth()
        request = signed_request(auth)
        headers = list(request.headers.raw)
        result, provided, computed = auth.validate_request(
            request.method, request.url.raw_path, headers, request.content
        )
        assert result == ValidationResult.MATCH
        assert provided == computed == request.headers["Test-Signature"]

    def test_different_secret_mismatches(self):
        request = signed_request(make_auth())
        assert validate(make_auth(secret="bazquux"), request) == ValidationResult.MISMATCH

    def test_different_digest_mismatches(self):
        request = signed_request(make_auth(digest_name="md5"))
        assert validate(make_auth(), request) == ValidationResult.MISMATCH

    def test_different_sign_header_does_not_match(self):
        request = signed_request(make_auth())
        result = validate(make_auth(sign_header="X-Test-Signature"), request)
        assert result == ValidationResult.NO_SIGNATURE

    def test_different_covered_header_order_mismatches(self):
        request = signed_request(make_auth())
        result = validate(make_auth(headers=["Date", "Content-Type"]), request)
        assert result == ValidationResult.MISMATCH

    def test_changed_covered_header_value_mismatches(self):
        auth = make_auth()
        request = signed_request(auth)
        request.headers["Content-Type"] = "application/json"
        assert validate(auth, request) == ValidationResult.MISMATCH

    def test_uncovered_header_change_still_matches(self):
        auth = make_auth()
        request = signed_request(auth)
        request.headers["User-Agent"] = "something-else"
        assert validate(auth, request) == ValidationResult.MATCH

    def test_changed_body_mismatches(self):
        auth = make_auth()
        request = signed_request(auth)
        assert validate(auth, request, content=b"tampered") == ValidationResult.MISMATCH

    def test_changed_path_mismatches(self):
        auth = make_auth()
        request = signed_request(auth)
        assert validate(auth, request, uri_path=b"/other") == ValidationResult.MISMATCH

    def test_original_uri_header_is_honored(self):
        auth = make_auth()
        request = signed_request(auth)
        result = validate(
            auth,
            request,
            extra_headers=[(b"X-Original-URI", request.url.raw_path)],
            uri_path=b"/auth",
        )
        assert result == ValidationResult.MATCH

    def test_missing_signature(self):
        request = httpx.Request("GET", URL)
        assert validate(make_auth(), request) == ValidationResult.NO_SIGNATURE

    def test_malformed_signature(self):
        request = httpx.Request("GET", URL, headers={"Test-Signature": "garbage"})
        assert validate(make_auth(), request) == ValidationResult.INVALID_FORMAT

    def test_unsupported_algorithm(self):
        request = httpx.Request("GET", URL, headers={"Test-Signature": "crc32 AAAA"})
        assert validate(make_auth(), request) == ValidationResult.UNSUPPORTED_ALGORITHM


class TestFromHash:

    def test_builds_from_resolved_constructor(self):
        auth = HmacAuth.from_hash(hashlib.sha256, "foobar", "Test-Signature", ["Date"])
        assert auth.digest_name == "sha256"
        assert auth.headers == ("date",)

    def test_matches_name_based_authenticator(self):
        request = signed_request(make_auth(digest_name="sha512"))
        by_hash = HmacAuth.from_hash(
            digest_name_to_hash("sha512"), "foobar", "Test-Signature", ["Content-Type", "Date"]
        )
        assert validate(by_hash, request) == ValidationResult.MATCH

    def test_rejects_unknown_constructor(self):
        with pytest.raises(UnsupportedDigestError):
            HmacAuth.from_hash(hashlib.blake2b, "foobar", "Test-Signature")
