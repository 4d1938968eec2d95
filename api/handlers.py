"""FastAPI route handlers."""

import httpx
from fastapi import Request, Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.request_types import InboundRequest, ProxyResponse
from services.forwarder import BODYLESS_METHODS, Forwarder


async def to_inbound_request(request: Request) -> InboundRequest:
    """Convert a Starlette request, reading the body fully for body-carrying methods."""
    body = None
    if request.method.upper() not in BODYLESS_METHODS:
        body = await request.body()
    return InboundRequest(
        method=request.method,
        path=raw_path(request),
        query=request.url.query,
        headers=httpx.Headers(request.headers.raw),
        body=body,
    )


def raw_path(request: Request) -> str:
    """Path as the client sent it, percent-encoding intact."""
    raw = request.scope.get("raw_path")
    if raw is None:
        return request.url.path
    return raw.partition(b"?")[0].decode("latin-1")


def to_response(proxied: ProxyResponse) -> Response | StreamingResponse:
    """Convert a ProxyResponse, keeping repeated headers such as set-cookie."""
    if proxied.stream is None:
        return Response(
            content=proxied.content,
            status_code=proxied.status_code,
            headers=dict(proxied.headers),
        )

    background = BackgroundTask(proxied.close) if proxied.close else None
    response = StreamingResponse(
        proxied.stream,
        status_code=proxied.status_code,
        background=background,
    )
    response.raw_headers = list(proxied.headers.raw)
    return response


async def handle_proxy(request: Request) -> Response | StreamingResponse:
    """Handle any routed method under the mount prefix."""
    forwarder: Forwarder = request.app.state.forwarder
    inbound = await to_inbound_request(request)
    return to_response(await forwarder.handle(inbound))
