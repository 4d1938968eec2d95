"""Shared request and response data types."""

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field

import httpx


@dataclass(frozen=True)
class InboundRequest:
    """Request as received at the mount prefix, independent of any framework."""

    method: str
    path: str
    query: str = ""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes | None = None


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    method: str
    target_url: str
    headers: httpx.Headers
    body: bytes | None = None


@dataclass(frozen=True)
class ProxyResponse:
    """Response to hand back to the caller.

    Relayed upstream responses carry ``stream`` and ``close``; locally
    generated error responses carry ``content``.
    """

    status_code: int
    reason_phrase: str
    headers: httpx.Headers
    content: bytes = b""
    stream: AsyncIterator[bytes] | None = None
    close: Callable[[], Awaitable[None]] | None = None
