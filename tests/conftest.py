"""Shared fixtures: a proxy app wired to an in-process mock upstream."""

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config
from helpers import FakeUpstream, RecordingLogger, make_config


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def make_client(upstream, logger):
    """Build a TestClient for a given config; lifespan runs inside the context."""
    clients: list[TestClient] = []

    def _make(config: Config | None = None) -> TestClient:
        app = create_app(config or make_config(), logger, transport=httpx.MockTransport(upstream))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
