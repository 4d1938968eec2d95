"""CLI entry point for internal-api-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, load_config, resolve_base_url
from core.exceptions import ConfigurationError
from ui.console_logger import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--check":
            sys.exit(0 if print_upstream_status(config) else 1)

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    # A missing upstream only fails requests, so the server still starts
    if not print_upstream_status(config):
        console.print("[yellow]Warning:[/yellow] requests will be answered with 500 until it is set")

    clear_logs()
    dashboard = Dashboard(config) if config.proxy.dashboard else None
    logger = dashboard or ConsoleLogger()

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def print_upstream_status(config: Config) -> bool:
    """Print which environment variable supplies the internal API URL."""
    try:
        base_url, source = resolve_base_url(config.upstream)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return False
    console.print(f"[green]Upstream:[/green] {base_url} [dim](from {source})[/dim]")
    return True


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Internal API Proxy[/bold cyan]

Forwards requests under the mount prefix (default /api/op) to the internal API.

[bold]Usage:[/bold]
    internal-api-proxy              Start the proxy
    internal-api-proxy --check      Show the resolved internal API URL
    internal-api-proxy --config     Show config location
    internal-api-proxy --help       Show this help

[bold]Environment:[/bold]
    INTERNAL_API_URL    Internal API base URL, e.g. http://api.railway.internal:8080
    API_URL             Used when INTERNAL_API_URL is unset
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
