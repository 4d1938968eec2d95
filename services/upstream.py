"""HTTP proxying utilities for upstream requests."""

import httpx

from core.exceptions import UpstreamError
from core.request_types import PreparedRequest


class UpstreamClient:
    """Send prepared requests to the internal API with streamed responses."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, prepared: PreparedRequest) -> httpx.Response:
        """Send the request, returning as soon as response headers arrive.

        The caller owns the returned response and must close it with
        ``aclose_response`` once the body has been relayed.
        """
        try:
            request = self._client.build_request(
                prepared.method,
                prepared.target_url,
                headers=prepared.headers,
                content=prepared.body,
            )
            return await self._client.send(request, stream=True)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise UpstreamError(str(e) or type(e).__name__, prepared.target_url) from e

    async def aclose_response(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()
