"""Plain console request logger, used when the live dashboard is off."""

from rich.console import Console
from rich.markup import escape

from ui.log_utils import write_cli_log

console = Console()


class ConsoleLogger:
    """Print one line per forwarded request and per error."""

    def __init__(self, output: Console | None = None):
        self._console = output or console

    def log_forward(self, method: str, path: str, target_url: str, *, request_id: str) -> None:
        self._console.print(f"[cyan][API Proxy][/cyan] {method} {escape(path)} -> {escape(target_url)}")
        write_cli_log("FORWARD", f"{method} {path}", target=target_url, id=request_id)

    def log_response(
        self, method: str, path: str, status: int, reason: str, *, request_id: str
    ) -> None:
        style = "green" if status < 400 else "yellow"
        self._console.print(f"[{style}][API Proxy][/{style}] {method} {escape(path)} <- {status} {reason}")
        write_cli_log("RESPONSE", f"{method} {path}", status=status, id=request_id)

    def log_error(self, route: str, status: int, message: str) -> None:
        self._console.print(f"[red][API Proxy] Error:[/red] {escape(route)} {status}: {escape(message)}")
        write_cli_log("ERROR", message[:200], route=route, status=status)
