"""Dashboard bookkeeping (without starting the live display)."""

import pytest
from rich.console import Console

import ui.dashboard
from helpers import make_config
from ui.dashboard import Dashboard


@pytest.fixture
def written(monkeypatch):
    calls = []
    monkeypatch.setattr(ui.dashboard, "submit_log", lambda fn, *args, **kwargs: calls.append(args))
    return calls


def test_counts_and_statuses(written):
    dashboard = Dashboard(make_config())

    dashboard.log_request("POST", "/api/generate", {})
    dashboard.log_forward("POST", "http://ollama.test:11434/api/generate", {}, b'{"model":"llama2"}')
    dashboard.log_response("POST", "/api/generate", 200, {})
    dashboard.log_request("GET", "/api/tags", {})
    dashboard.log_rejected("GET", "/api/tags", 401)

    assert dashboard._counts == {"received": 2, "forwarded": 1, "rejected": 1, "errors": 0}
    tags, generate = dashboard._requests
    assert (tags.method, tags.status) == ("GET", 401)
    assert (generate.method, generate.status) == ("POST", 200)
    assert generate.preview == '{"model":"llama2"}'
    assert len(written) == 3


def test_errors_keep_latest_three(written):
    dashboard = Dashboard(make_config())

    for i in range(5):
        dashboard.log_error("GET /api/tags", 500, f"failure {i}")

    assert dashboard._counts["errors"] == 5
    assert dashboard._errors[0] == "GET /api/tags 500: failure 4"
    assert len(dashboard._errors) == 3


def test_layout_renders_without_live(written):
    dashboard = Dashboard(make_config())
    dashboard.log_request("GET", "/api/tags", {})

    assert dashboard._build_layout() is not None


def test_header_shows_all_counters(written):
    dashboard = Dashboard(make_config())
    dashboard.log_request("POST", "/api/generate", {})
    dashboard.log_request("GET", "/api/tags", {})
    dashboard.log_rejected("GET", "/api/tags", 401)

    console = Console(record=True, width=200)
    console.print(dashboard._build_header())
    header = console.export_text()

    assert "Received: 2" in header
    assert "Forwarded: 0" in header
    assert "Rejected: 1" in header
    assert "Errors: 0" in header
