"""Forward mount-prefixed requests to the internal API."""

import json
import os
from collections.abc import Mapping
from functools import partial
from uuid import uuid4

import httpx

from core.config import Config, resolve_base_url
from core.exceptions import ConfigurationError, UpstreamError
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import InboundRequest, PreparedRequest, ProxyResponse
from core.router import TargetResolver
from services.upstream import UpstreamClient

ROUTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
BODYLESS_METHODS = frozenset({"GET", "HEAD"})

CONFIG_ERROR_MESSAGE = "API URL not configured"
UPSTREAM_ERROR_MESSAGE = "Proxy request failed"


class Forwarder:
    """Relay one inbound request to the internal API and its response back.

    Every call is independent. The base URL is re-read from ``environ`` on
    each call, so changing the environment takes effect without a restart.
    """

    def __init__(
        self,
        config: Config,
        upstream: UpstreamClient,
        logger: RequestLogger,
        header_builder: HeaderBuilder | None = None,
        resolver: TargetResolver | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config
        self._upstream = upstream
        self._logger = logger
        self._headers = header_builder or HeaderBuilder()
        self._resolver = resolver or TargetResolver(config.proxy.mount_prefix)
        self._environ = os.environ if environ is None else environ

    async def handle(self, request: InboundRequest) -> ProxyResponse:
        """Forward ``request`` and return the relayed or error response."""
        try:
            base_url, _ = resolve_base_url(self._config.upstream, self._environ)
        except ConfigurationError as e:
            self._logger.log_error(request.path, 500, str(e))
            return _json_error(500, CONFIG_ERROR_MESSAGE)

        request_id = uuid4().hex[:8]
        try:
            prepared = self.prepare(request, base_url)
            self._logger.log_forward(
                request.method, request.path, prepared.target_url, request_id=request_id
            )
            response = await self._upstream.send(prepared)
        except UpstreamError as e:
            self._logger.log_error(request.path, 502, f"{e.target_url}: {e}")
            return _json_error(502, UPSTREAM_ERROR_MESSAGE)

        try:
            headers = self._headers.filter_response_headers(response.headers)
        except Exception:
            await self._upstream.aclose_response(response)
            raise

        self._logger.log_response(
            request.method,
            request.path,
            response.status_code,
            response.reason_phrase,
            request_id=request_id,
        )
        return ProxyResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=headers,
            stream=response.aiter_raw(),
            close=partial(self._upstream.aclose_response, response),
        )

    def prepare(self, request: InboundRequest, base_url: str) -> PreparedRequest:
        """Build the outbound request for ``base_url``.

        Raises:
            UpstreamError: ``base_url`` is not a parseable URL
        """
        method = request.method.upper()
        return PreparedRequest(
            method=method,
            target_url=self._resolver.build_target_url(base_url, request.path, request.query),
            headers=self._headers.build_upstream_headers(request.headers, base_url),
            body=None if method in BODYLESS_METHODS else (request.body or b""),
        )


def _json_error(status_code: int, message: str) -> ProxyResponse:
    return ProxyResponse(
        status_code=status_code,
        reason_phrase=httpx.codes.get_reason_phrase(status_code),
        headers=httpx.Headers({"content-type": "application/json"}),
        content=json.dumps({"error": message}).encode(),
    )
