import httpx
import pytest

from core.config import Config


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self):
        self.forwards = []
        self.responses = []
        self.request_ids = []
        self.errors = []

    def log_forward(self, method, path, target_url, *, request_id):
        self.forwards.append((method, path, target_url))
        self.request_ids.append(request_id)

    def log_response(self, method, path, status, reason, *, request_id):
        self.responses.append((method, path, status, reason))
        self.request_ids.append(request_id)

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class UpstreamRecorder:
    """MockTransport handler that records requests and replies with a streamed body."""

    def __init__(self, status=200, content=b"ok", headers=None, extensions=None, error=None):
        self.requests = []
        self._status = status
        self._content = content
        self._headers = headers or []
        self._extensions = extensions or {}
        self._error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        # stream= keeps the body unread, like a real network response
        return httpx.Response(
            self._status,
            headers=self._headers,
            stream=httpx.ByteStream(self._content),
            extensions=self._extensions,
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def environ():
    return {"INTERNAL_API_URL": "http://api.internal:8080"}


@pytest.fixture
def make_upstream():
    return UpstreamRecorder
