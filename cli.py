"""CLI entry point for ollama-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import ENV_FILE, load_config
from core.exceptions import ConfigurationError
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, mask, shutdown_log_executor, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        _print_help()
        return

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] Invalid configuration:\n{e}")
        sys.exit(1)

    if "--config" in args:
        console.print(f"[bold]Env file:[/bold] {ENV_FILE}{'' if ENV_FILE.exists() else ' (missing)'}")
        console.print(f"[bold]Log file:[/bold] {CLI_LOG_FILE}")
        console.print(f"[bold]Listen:[/bold] {config.proxy.host}:{config.proxy.port}")
        console.print(f"[bold]Upstream:[/bold] {config.upstream.target.base_url}")
        console.print(f"[bold]API key:[/bold] {mask(config.auth.api_key)}")
        origins = ", ".join(config.cors.allowed_origins) or "any (reflected)"
        console.print(f"[bold]CORS origins:[/bold] {origins}")
        return

    if config.auth.api_key == "your-secret-api-key-here":
        console.print("[yellow]Warning:[/yellow] API_KEY is the default placeholder, set it in the environment")

    use_dashboard = config.proxy.dashboard and "--plain" not in args and console.is_terminal

    clear_logs()
    dashboard = Dashboard(config) if use_dashboard else None
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
    else:
        console.print(f"Ollama proxy server started on port {config.proxy.port}")
        console.print(f"Proxying requests to {config.upstream.url}")
    start_time = datetime.now()
    write_cli_log(
        "STARTUP", "Proxy started", port=config.proxy.port, upstream=config.upstream.target.base_url
    )
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        shutdown_log_executor()
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Ollama Proxy[/bold cyan]

Bearer-token protected reverse proxy in front of an Ollama server.

[bold]Usage:[/bold]
    ollama-proxy              Start with live dashboard
    ollama-proxy --plain      Start with line-by-line console logging
    ollama-proxy --config     Show effective configuration
    ollama-proxy --help       Show this help

[bold]Environment (.env is also read):[/bold]
    API_KEY                   Shared secret expected as 'Authorization: Bearer <API_KEY>'
    PORT                      Listening port (default 3000)
    HOST                      Listening address (default 0.0.0.0)
    OLLAMA_URL                Upstream base URL (default http://localhost:11434)
    CORS_ALLOWED_ORIGINS      Comma-separated origins; empty reflects any origin
    MAX_BODY_SIZE             Request body ceiling in bytes (default 50MB)
    UPSTREAM_TIMEOUT          Upstream timeout in seconds (default 600)
    DASHBOARD                 Set to false to always use plain logging
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
