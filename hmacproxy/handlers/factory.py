"""
Handler Factory
===============
Maps a validated handler mode to its ASGI application and a one-line
description for the startup log.
"""

from typing import Optional, Tuple

import httpx
import structlog
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp

from .. import config
from ..hmacauth import HmacAuth
from ..options import HandlerMode, ProxyOptions, UpstreamURL
from .apps import AuthHandler, AuthOnlyHandler, ProxyApp, SigningHandler
from .upstream import UpstreamForwarder

logger = structlog.get_logger(__name__)


def sign_and_proxy_handler(
    auth: HmacAuth,
    upstream: UpstreamURL,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[ASGIApp, str]:
    description = "proxying signed requests to: " + upstream.raw
    forwarder = UpstreamForwarder(upstream.origin, timeout=timeout, transport=transport)
    return SigningHandler(auth, forwarder), description


def auth_and_proxy_handler(
    auth: HmacAuth,
    upstream: UpstreamURL,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[ASGIApp, str]:
    description = "proxying authenticated requests to: " + upstream.raw
    forwarder = UpstreamForwarder(upstream.origin, timeout=timeout, transport=transport)
    return AuthHandler(auth, ProxyApp(forwarder), on_shutdown=forwarder.aclose), description


def auth_for_files_handler(auth: HmacAuth, file_root: str) -> Tuple[ASGIApp, str]:
    description = "serving files from " + file_root + " for authenticated requests"
    # Directories answer with their index.html rather than a listing
    file_server = StaticFiles(directory=file_root, html=True)
    return AuthHandler(auth, file_server), description


def authentication_only_handler(auth: HmacAuth) -> Tuple[ASGIApp, str]:
    description = "responding Accepted/Unauthorized for auth queries"
    return AuthOnlyHandler(auth), description


def build_handler(
    mode: HandlerMode,
    auth: HmacAuth,
    upstream: Optional[UpstreamURL] = None,
    file_root: str = "",
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[ASGIApp, str]:
    """
    Build the handler for ``mode``.

    Args:
        mode: Validated handler mode
        auth: Signing/validation capability shared by every request
        upstream: Parsed upstream, required by the proxying modes
        file_root: Directory to serve, required by AUTH_FOR_FILES
        timeout: Upstream timeout in seconds, None to wait indefinitely
        transport: httpx transport override for the upstream client

    Returns:
        (ASGI application, description)
    """
    if mode == HandlerMode.SIGN_AND_PROXY:
        return sign_and_proxy_handler(auth, upstream, timeout, transport)
    if mode == HandlerMode.AUTH_AND_PROXY:
        return auth_and_proxy_handler(auth, upstream, timeout, transport)
    if mode == HandlerMode.AUTH_FOR_FILES:
        return auth_for_files_handler(auth, file_root)
    if mode == HandlerMode.AUTH_ONLY:
        return authentication_only_handler(auth)
    raise ValueError(f"unknown mode: {mode!r}")


def new_http_proxy_handler(
    opts: ProxyOptions,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[ASGIApp, str]:
    """
    Build the handler described by already validated options.

    Raises:
        ValueError: if ``opts`` has not been validated
    """
    if opts.mode is None:
        raise ValueError("options must be validated before building a handler")

    auth = HmacAuth.from_hash(opts.digest.hash, opts.secret, opts.sign_header, opts.headers)
    handler, description = build_handler(
        opts.mode,
        auth,
        upstream=opts.upstream,
        file_root=opts.file_root,
        timeout=config.UPSTREAM_TIMEOUT,
        transport=transport,
    )
    logger.info(
        "handler_built",
        mode=opts.mode.value,
        digest=opts.digest.name,
        sign_header=opts.sign_header,
        headers=list(auth.headers),
    )
    return handler, description
