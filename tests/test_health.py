"""Local health endpoint."""

from helpers import AUTH


def test_health_with_valid_token(client, upstream):
    response = client.get("/health", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Ollama proxy is running"}
    assert upstream.requests == []


def test_post_health_is_forwarded(client, upstream):
    response = client.post("/health", headers=AUTH)

    assert response.status_code == 200
    assert upstream.last.url.path == "/health"
