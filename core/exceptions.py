"""Custom exception hierarchy for the internal API proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when the internal API base URL cannot be resolved."""


class UpstreamError(ProxyError):
    """Raised when the outbound request to the internal API fails.

    Connection refused, DNS failure, timeouts and malformed target URLs all
    end up here; they are not told apart.

    Attributes:
        message: Error message
        target_url: URL the request was sent to
    """

    def __init__(self, message: str, target_url: str | None = None) -> None:
        super().__init__(message)
        self.target_url = target_url
