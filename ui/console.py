"""Line-oriented console logger for running without the live dashboard."""

from datetime import UTC, datetime

from rich.console import Console
from rich.markup import escape

from ui.log_utils import format_preview, redact_headers, submit_log, write_cli_log, write_request_log


class ConsoleLogger:
    """Print one line per event, with extra detail for POST requests."""

    def __init__(self, console: Console | None = None, *, write_files: bool = True) -> None:
        self._console = console or Console(highlight=False)
        self._write_files = write_files

    def log_request(self, method: str, path: str, headers: dict[str, str]) -> None:
        timestamp = datetime.now(UTC).isoformat()
        self._print(f"[dim]{timestamp}[/dim] - {method} {escape(path)}")
        if method == "POST":
            self._print(f"[dim]{timestamp}[/dim] - POST REQUEST DETAILS:")
            self._print(f"  Content-Type: {escape(headers.get('content-type', 'unknown'))}")
            self._print(f"  Content-Length: {escape(headers.get('content-length', 'unknown'))} bytes")
            # The body is streamed through, so its preview is printed once it is read

    def log_forward(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body_preview: bytes,
    ) -> None:
        preview = format_preview(body_preview)
        if method == "POST":
            self._print("[bold]FORWARDING POST REQUEST TO OLLAMA:[/bold]")
            self._print(f"  URL: {escape(url)}")
            self._print(f"  Headers: {escape(str(redact_headers(headers)))}")
            self._print(f"  Body Preview: {escape(preview)}")
        if self._write_files:
            submit_log(write_request_log, method, url, headers, preview=preview)

    def log_response(self, method: str, path: str, status: int, headers: dict[str, str]) -> None:
        style = "green" if status < 400 else "yellow" if status < 500 else "red"
        self._print("[bold]RECEIVED RESPONSE FROM OLLAMA:[/bold]")
        self._print(f"  Status: [{style}]{status}[/{style}]")
        self._print(f"  Headers: {escape(str(headers))}")

    def log_rejected(self, method: str, path: str, status: int) -> None:
        self._print(f"[yellow]Rejected[/yellow] {method} {escape(path)}: {status} Unauthorized")
        if method == "POST":
            self._print("  Body Preview: not read, request rejected before forwarding")
        if self._write_files:
            submit_log(write_cli_log, "REJECTED", f"{method} {path}", status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        self._print(f"[red]Error forwarding request to Ollama:[/red] {escape(message)}")
        if self._write_files:
            submit_log(write_cli_log, "ERROR", message[:200], route=route, status=status)

    def _print(self, line: str) -> None:
        self._console.print(line)
