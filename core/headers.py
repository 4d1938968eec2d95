"""Header handling for upstream requests and relayed responses."""

from collections.abc import Iterable

import httpx

from core.exceptions import UpstreamError

# Only meaningful for a single transport leg
HOP_BY_HOP_HEADERS = frozenset({"transfer-encoding", "connection", "keep-alive"})

# httpx frames the outbound body itself
REQUEST_FRAMING_HEADERS = HOP_BY_HOP_HEADERS | {"content-length"}


class HeaderBuilder:
    """Build upstream headers and filter upstream response headers.

    Filtering works on the raw byte pairs, so values that are not ASCII
    (UTF-8 filenames, names in custom headers) pass through untouched.
    """

    def __init__(self, excluded: Iterable[str] = HOP_BY_HOP_HEADERS):
        self.excluded = frozenset(name.lower() for name in excluded)

    def build_upstream_headers(self, headers: httpx.Headers, base_url: str) -> httpx.Headers:
        """Copy inbound headers, pointing host at the internal API."""
        host = self.upstream_host(base_url)
        upstream = _without(headers, REQUEST_FRAMING_HEADERS)
        upstream["host"] = host
        return upstream

    def filter_response_headers(self, headers: httpx.Headers) -> httpx.Headers:
        """Drop hop-by-hop headers, keeping order and repeated entries."""
        return _without(headers, self.excluded)

    @staticmethod
    def upstream_host(base_url: str) -> str:
        """Return host[:port] of the base URL.

        Raises:
            UpstreamError: the base URL cannot be parsed
        """
        try:
            url = httpx.URL(base_url)
        except (httpx.InvalidURL, ValueError) as e:
            raise UpstreamError(str(e), base_url) from e
        return url.netloc.decode("ascii")


def _without(headers: httpx.Headers, names: Iterable[str]) -> httpx.Headers:
    excluded = {name.encode("ascii") for name in names}
    return httpx.Headers(
        [(key, value) for key, value in headers.raw if key.lower() not in excluded]
    )
