"""Constants and fakes shared by the test modules."""

from collections.abc import Callable

import httpx

from core.config import AuthSettings, Config, CorsSettings, LimitSettings, UpstreamSettings

API_KEY = "test-secret-key"
AUTH = {"Authorization": f"Bearer {API_KEY}"}
UPSTREAM_URL = "http://ollama.test:11434"


class RecordingLogger:
    """RequestLogger that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def log_request(self, method, path, headers):
        self.events.append(("request", method, path))

    def log_forward(self, method, url, headers, body_preview):
        self.events.append(("forward", method, url, body_preview))

    def log_response(self, method, path, status, headers):
        self.events.append(("response", method, path, status))

    def log_rejected(self, method, path, status):
        self.events.append(("rejected", method, path, status))

    def log_error(self, route, status, message):
        self.events.append(("error", route, status, message))

    def of(self, kind: str) -> list[tuple]:
        return [event for event in self.events if event[0] == kind]


class FakeUpstream:
    """Mock upstream recording each request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"response": "Hi there"})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_config(**overrides) -> Config:
    data = {
        "auth": AuthSettings(api_key=API_KEY),
        "upstream": UpstreamSettings(url=UPSTREAM_URL),
        "cors": CorsSettings(),
        "limits": LimitSettings(),
    }
    data.update(overrides)
    return Config(**data)
