"""
Upstream Forwarding
===================
Forwards an inbound starlette request to a single upstream origin with
httpx and streams the response back.
"""

from typing import Callable, List, Optional, Tuple

import httpx
import structlog
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response, StreamingResponse

from ..errors import UpstreamError, UpstreamTimeoutError, UpstreamUnavailableError

logger = structlog.get_logger(__name__)

# RFC 7230 section 6.1; never forwarded in either direction
HOP_BY_HOP_HEADERS = frozenset({
    b"connection",
    b"keep-alive",
    b"proxy-authenticate",
    b"proxy-authorization",
    b"te",
    b"trailer",
    b"transfer-encoding",
    b"upgrade",
})

OutboundHook = Callable[[httpx.Request], None]


def _strip_hop_by_hop(headers: List[Tuple[bytes, bytes]]) -> List[Tuple[bytes, bytes]]:
    return [(key, value) for key, value in headers if key.lower() not in HOP_BY_HOP_HEADERS]


def raw_request_path(request: Request) -> bytes:
    """Undecoded request path, without the query string."""
    raw_path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
    return raw_path.split(b"?", 1)[0]


class UpstreamForwarder:
    """
    Single-host reverse proxy.

    Method, headers, query and body are preserved. Failures surface as
    UpstreamError subclasses carrying a gateway status code.
    """

    def __init__(
        self,
        origin: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.origin = origin.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.origin,
            timeout=timeout,
            transport=transport,
            follow_redirects=False,
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def _map_exception(self, exc: httpx.HTTPError) -> UpstreamError:
        if isinstance(exc, httpx.TimeoutException):
            return UpstreamTimeoutError("Request timed out", upstream=self.origin)
        if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.RemoteProtocolError)):
            return UpstreamUnavailableError(f"Failed to connect: {exc}", upstream=self.origin)
        return UpstreamError(f"Unexpected error: {exc}", upstream=self.origin)

    async def build_request(self, request: Request) -> httpx.Request:
        """Copy an inbound request into an outbound one for the upstream."""
        body = await request.body()

        headers = [
            (key, value)
            for key, value in _strip_hop_by_hop(request.headers.raw)
            if key.lower() not in (b"host", b"content-length")
        ]
        if request.client:
            forwarded = request.headers.get("x-forwarded-for")
            client_ip = request.client.host
            headers = [(k, v) for k, v in headers if k.lower() != b"x-forwarded-for"]
            value = f"{forwarded}, {client_ip}" if forwarded else client_ip
            headers.append((b"x-forwarded-for", value.encode("latin-1")))

        raw_path = raw_request_path(request)
        query = request.scope.get("query_string", b"")
        target = raw_path + (b"?" + query if query else b"")

        return self.client.build_request(
            request.method,
            httpx.URL(self.origin + target.decode("latin-1")),
            headers=headers,
            content=body,
        )

    async def send(self, outbound: httpx.Request) -> httpx.Response:
        """Send an outbound request, returning the unread streaming response."""
        try:
            return await self.client.send(outbound, stream=True)
        except httpx.HTTPError as e:
            raise self._map_exception(e)

    async def forward(self, request: Request, hook: Optional[OutboundHook] = None) -> Response:
        """
        Forward ``request`` upstream and relay the response.

        ``hook`` runs on the outbound request right before it is sent.
        """
        outbound = await self.build_request(request)
        if hook is not None:
            hook(outbound)

        try:
            upstream_response = await self.send(outbound)
        except UpstreamError as e:
            logger.warning(
                "upstream_request_failed",
                upstream=e.upstream,
                error=e.message,
                status_code=e.status_code,
                method=request.method,
                path=request.url.path,
            )
            return PlainTextResponse(e.public_message, status_code=e.status_code)

        response = StreamingResponse(
            upstream_response.aiter_raw(),
            status_code=upstream_response.status_code,
            background=BackgroundTask(upstream_response.aclose),
        )
        response.raw_headers = _strip_hop_by_hop(upstream_response.headers.raw)
        return response
