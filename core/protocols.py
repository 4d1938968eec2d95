"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for operational request logging (Dashboard, ConsoleLogger).

    ``request_id`` ties a response to its forward when several requests to
    the same path are in flight.
    """

    def log_forward(
        self, method: str, path: str, target_url: str, *, request_id: str
    ) -> None: ...
    def log_response(
        self, method: str, path: str, status: int, reason: str, *, request_id: str
    ) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
