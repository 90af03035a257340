"""Header sanitization in both directions."""

from core.headers import HeaderBuilder


def test_upstream_headers_drop_host_and_authorization():
    headers = HeaderBuilder().build_upstream_headers(
        [
            ("Host", "proxy.example.com"),
            ("Authorization", "Bearer secret"),
            ("content-type", "application/json"),
            ("x-trace", "1"),
            ("x-trace", "2"),
        ]
    )

    assert headers == [("content-type", "application/json"), ("x-trace", "1"), ("x-trace", "2")]


def test_downstream_headers_drop_cors_and_framing():
    headers = HeaderBuilder().build_downstream_headers(
        [
            ("content-type", "application/x-ndjson"),
            ("Access-Control-Allow-Origin", "*"),
            ("access-control-allow-methods", "GET"),
            ("access-control-allow-headers", "*"),
            ("access-control-expose-headers", "*"),
            ("transfer-encoding", "chunked"),
            ("set-cookie", "a=1"),
            ("set-cookie", "b=2"),
        ]
    )

    assert headers == [
        ("content-type", "application/x-ndjson"),
        ("set-cookie", "a=1"),
        ("set-cookie", "b=2"),
        ("x-powered-by", "Ollama-Proxy"),
    ]


def test_upstream_powered_by_is_replaced():
    headers = HeaderBuilder().build_downstream_headers([("X-Powered-By", "Express")])

    assert headers == [("x-powered-by", "Ollama-Proxy")]


def test_declared_length():
    assert HeaderBuilder.declared_length([("Content-Length", "42")]) == 42
    assert HeaderBuilder.declared_length([("content-length", "abc")]) is None
    assert HeaderBuilder.declared_length([("content-type", "text/plain")]) is None
