"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import format_preview, submit_log, write_cli_log, write_request_log

console = Console()


class RequestInfo:
    """Info about a single proxied request."""

    def __init__(self, method: str, path: str, timestamp: datetime):
        self.method = method
        self.path = path[:60] + "..." if len(path) > 60 else path
        self.timestamp = timestamp
        self.status: int | None = None
        self.preview = ""


class Dashboard:
    """Real-time dashboard showing recent requests and upstream errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._requests: list[RequestInfo] = []
        self._max_requests = 10
        self._counts = {"received": 0, "forwarded": 0, "rejected": 0, "errors": 0}
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

    def log_request(self, method: str, path: str, headers: dict[str, str]) -> None:
        with self._lock:
            self._counts["received"] += 1
            self._requests.insert(0, RequestInfo(method, path, datetime.now()))
            self._requests = self._requests[: self._max_requests]
            self._refresh()

    def log_forward(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body_preview: bytes,
    ) -> None:
        preview = format_preview(body_preview)
        with self._lock:
            self._counts["forwarded"] += 1
            info = self._latest(method)
            if info:
                info.preview = preview if body_preview else ""
            self._refresh()
        submit_log(write_request_log, method, url, headers, preview=preview)

    def log_response(self, method: str, path: str, status: int, headers: dict[str, str]) -> None:
        with self._lock:
            info = self._latest(method, path)
            if info:
                info.status = status
            self._refresh()
        submit_log(write_cli_log, "UPSTREAM", f"{method} {path}", status=status)

    def log_rejected(self, method: str, path: str, status: int) -> None:
        with self._lock:
            self._counts["rejected"] += 1
            info = self._latest(method, path)
            if info:
                info.status = status
            self._refresh()
        submit_log(write_cli_log, "REJECTED", f"{method} {path}", status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._counts["errors"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
        submit_log(write_cli_log, "ERROR", message[:200], route=route, status=status)

    def _latest(self, method: str, path: str | None = None) -> RequestInfo | None:
        """Most recent pending request matching method (and path prefix)."""
        for info in self._requests:
            if info.method != method or info.status is not None:
                continue
            if path is None or info.path.startswith(path[:60]):
                return info
        return None

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
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Ollama Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Received: {self._counts['received']}")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._counts['forwarded']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._counts['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Errors: {self._counts['errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")
        stats.append("  ->  ")
        stats.append(self.config.upstream.target.base_url, style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._requests:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Path", ratio=1)
            table.add_column("Status", width=6)
            table.add_column("Body", ratio=2)

            for req in self._requests:
                table.add_row(
                    req.timestamp.strftime("%H:%M:%S"),
                    req.method,
                    req.path,
                    _status_text(req.status),
                    req.preview[:60] + "..." if len(req.preview) > 60 else req.preview,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Send requests to http://localhost:{self.config.proxy.port} "
                "with 'Authorization: Bearer <API_KEY>'",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


def _status_text(status: int | None) -> Text:
    if status is None:
        return Text("...", style="dim")
    style = "green" if status < 400 else "yellow" if status < 500 else "red"
    return Text(str(status), style=style)
