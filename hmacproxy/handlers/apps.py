"""
Request Handlers
================
ASGI applications for the four handler modes.

Each handler is immutable after construction and keeps no per-request
state, so one instance serves every concurrent request. Handlers also
answer the ASGI lifespan protocol; those owning an upstream client close it
on shutdown.
"""

from typing import Awaitable, Callable, Optional

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send
import structlog

from ..hmacauth import HmacAuth, ValidationResult, request_uri
from .upstream import UpstreamForwarder, raw_request_path

logger = structlog.get_logger(__name__)

UNAUTHORIZED_BODY = "unauthorized request"

ShutdownHook = Callable[[], Awaitable[None]]


async def serve_lifespan(
    receive: Receive,
    send: Send,
    on_shutdown: Optional[ShutdownHook] = None,
) -> None:
    """Acknowledge startup, run ``on_shutdown`` before acknowledging shutdown."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            if on_shutdown is not None:
                await on_shutdown()
                logger.info("handler_shutdown")
            await send({"type": "lifespan.shutdown.complete"})
            return


async def authenticate(auth: HmacAuth, request: Request) -> ValidationResult:
    """Validate the signature on an inbound starlette request."""
    body = await request.body()
    headers = request.headers.raw
    raw_path = raw_request_path(request)
    uri = request_uri(raw_path, request.scope.get("query_string", b""), headers)
    result, _, _ = auth.validate_request(request.method, uri, headers, body)
    return result


def replay_body(body: bytes, receive: Receive) -> Receive:
    """
    Receive callable that yields an already consumed body once, then defers
    to the real one (disconnect notifications).
    """
    replayed = False

    async def replay():
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


def unauthorized_response(request: Request, result: ValidationResult) -> Response:
    """Uniform 401; the reason is logged, never returned to the client."""
    logger.warning(
        "request_unauthorized",
        method=request.method,
        path=request.url.path,
        result=result.value,
    )
    return PlainTextResponse(UNAUTHORIZED_BODY, status_code=401)


class SigningHandler:
    """Signs every request and proxies it upstream unconditionally."""

    def __init__(self, auth: HmacAuth, forwarder: UpstreamForwarder):
        self.auth = auth
        self.forwarder = forwarder

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await serve_lifespan(receive, send, on_shutdown=self.forwarder.aclose)
            return
        request = Request(scope, receive)
        response = await self.forwarder.forward(request, hook=self.auth.sign_request)
        await response(scope, receive, send)


class AuthHandler:
    """
    Passes requests with a matching signature on to ``app``.

    Lifespan events are answered here rather than by ``app``, which may not
    speak the protocol (StaticFiles). ``on_shutdown`` releases whatever
    ``app`` holds.
    """

    def __init__(self, auth: HmacAuth, app: ASGIApp, on_shutdown: Optional[ShutdownHook] = None):
        self.auth = auth
        self.app = app
        self.on_shutdown = on_shutdown

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await serve_lifespan(receive, send, on_shutdown=self.on_shutdown)
            return
        request = Request(scope, receive)
        result = await authenticate(self.auth, request)
        if result != ValidationResult.MATCH:
            response = unauthorized_response(request, result)
            await response(scope, receive, send)
            return
        await self.app(scope, replay_body(await request.body(), receive), send)


class ProxyApp:
    """Adapts an UpstreamForwarder to an ASGI application."""

    def __init__(self, forwarder: UpstreamForwarder):
        self.forwarder = forwarder

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await serve_lifespan(receive, send, on_shutdown=self.forwarder.aclose)
            return
        request = Request(scope, receive)
        response = await self.forwarder.forward(request)
        await response(scope, receive, send)


class AuthOnlyHandler:
    """Answers 202 Accepted or 401 Unauthorized and nothing else."""

    def __init__(self, auth: HmacAuth):
        self.auth = auth

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await serve_lifespan(receive, send)
            return
        request = Request(scope, receive)
        result = await authenticate(self.auth, request)
        if result != ValidationResult.MATCH:
            response = unauthorized_response(request, result)
        else:
            response = Response(status_code=202)
        await response(scope, receive, send)
