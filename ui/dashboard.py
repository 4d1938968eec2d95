"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import truncate, write_cli_log

console = Console()


class ForwardInfo:
    """Info about a single forwarded request."""

    def __init__(
        self, request_id: str, method: str, path: str, target_url: str, timestamp: datetime
    ):
        self.request_id = request_id
        self.method = method
        self.path = path
        self.target_url = target_url
        self.status: int | None = None
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwards and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[ForwardInfo] = []
        self._max_recent = 10
        self._request_count = {"forwarded": 0, "config_errors": 0, "upstream_errors": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_forward(self, method: str, path: str, target_url: str, *, request_id: str) -> None:
        """Log a request about to be sent to the internal API."""
        with self._lock:
            self._request_count["forwarded"] += 1
            self._recent.insert(0, ForwardInfo(request_id, method, path, target_url, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            write_cli_log("FORWARD", f"{method} {path}", target=target_url, id=request_id)
            self._refresh()

    def log_response(
        self, method: str, path: str, status: int, reason: str, *, request_id: str
    ) -> None:
        """Attach the upstream status to the recent request with the same id."""
        with self._lock:
            for info in self._recent:
                if info.request_id == request_id:
                    info.status = status
                    break
            write_cli_log(
                "RESPONSE", f"{method} {path}", status=status, reason=reason, id=request_id
            )
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            key = "config_errors" if status == 500 else "upstream_errors"
            self._request_count[key] += 1
            self._errors.insert(0, f"{route} {status}: {truncate(message, 50)}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Internal API Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._request_count['forwarded']}", style="blue")
        stats.append("  |  ")
        stats.append(f"500: {self._request_count['config_errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"502: {self._request_count['upstream_errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build the recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Path", ratio=1)
            table.add_column("Target", ratio=2)
            table.add_column("Status", width=6)

            for info in self._recent:
                status = "…" if info.status is None else str(info.status)
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    escape(truncate(info.path, 60)),
                    escape(truncate(info.target_url, 80)),
                    status,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and usage hint."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            proxy = self.config.proxy
            content = Text(
                f"Forwarding http://{proxy.host}:{proxy.port}{proxy.mount_prefix}/* "
                f"to ${self.config.upstream.url_env} (or ${self.config.upstream.fallback_url_env})",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
