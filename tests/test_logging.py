import pytest
from rich.console import Console

from core.config import Config
from ui import log_utils
from ui.console_logger import ConsoleLogger
from ui.dashboard import Dashboard


@pytest.fixture
def log_file(tmp_path, monkeypatch):
    path = tmp_path / "logs" / "proxy.log"
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", path)
    return path


def test_write_cli_log_appends_line(log_file):
    log_utils.write_cli_log("FORWARD", "GET /api/op/x", target="http://api.internal/x")
    log_utils.write_cli_log("ERROR", "boom", status=502)

    lines = log_file.read_text().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("FORWARD: GET /api/op/x target=http://api.internal/x")
    assert lines[1].endswith("ERROR: boom status=502")


def test_clear_logs(log_file):
    log_utils.write_cli_log("STARTUP", "Proxy started")
    log_utils.clear_logs()
    assert log_file.read_text() == ""


def test_console_logger_prints_forward_line(log_file):
    output = Console(record=True, width=200)
    logger = ConsoleLogger(output)

    logger.log_forward("GET", "/api/op/users/42", "http://api.internal/users/42", request_id="r1")
    logger.log_error("/api/op/users/42", 502, "[Errno 111] Connection refused")

    text = output.export_text()
    assert "[API Proxy] GET /api/op/users/42 -> http://api.internal/users/42" in text
    assert "[Errno 111] Connection refused" in text
    assert "ERROR" in log_file.read_text()


def test_dashboard_tracks_counts_and_status(log_file):
    dashboard = Dashboard(Config())

    dashboard.log_forward("GET", "/api/op/a", "http://api.internal/a", request_id="r1")
    dashboard.log_response("GET", "/api/op/a", 200, "OK", request_id="r1")
    dashboard.log_error("/api/op/b", 500, "Neither INTERNAL_API_URL nor API_URL is set")
    dashboard.log_error("/api/op/c", 502, "Connection refused")

    assert dashboard._request_count == {"forwarded": 1, "config_errors": 1, "upstream_errors": 1}
    assert dashboard._recent[0].status == 200
    assert len(dashboard._errors) == 2
    # Rendering must not fail without a live display
    Console(record=True, width=120).print(dashboard._build_layout())


def test_dashboard_status_lands_on_matching_request(log_file):
    dashboard = Dashboard(Config())

    dashboard.log_forward("GET", "/api/op/slow", "http://api.internal/slow", request_id="first")
    dashboard.log_forward("GET", "/api/op/slow", "http://api.internal/slow", request_id="second")
    dashboard.log_response("GET", "/api/op/slow", 404, "Not Found", request_id="first")

    newest, oldest = dashboard._recent
    assert oldest.request_id == "first"
    assert oldest.status == 404
    assert newest.status is None
    assert "id=first" in log_file.read_text()
