"""Header sanitization between caller, proxy and upstream."""

from collections.abc import Iterable

IDENTIFICATION_HEADER = ("x-powered-by", "Ollama-Proxy")

# Never forwarded upstream
STRIPPED_REQUEST_HEADERS = frozenset({"host", "authorization"})

# Already set by the CORS policy on every response
CORS_RESPONSE_HEADERS = frozenset({
    "access-control-allow-origin",
    "access-control-allow-methods",
    "access-control-allow-headers",
    "access-control-expose-headers",
})

# Message framing is handled by the downstream server itself
FRAMING_RESPONSE_HEADERS = frozenset({"transfer-encoding", "connection", "keep-alive"})


class HeaderBuilder:
    """Build header sets for both directions of a proxied exchange."""

    def build_upstream_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Copy every inbound header except host and authorization."""
        return [
            (key, value)
            for key, value in headers
            if key.lower() not in STRIPPED_REQUEST_HEADERS
        ]

    def build_downstream_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Copy upstream response headers, dropping CORS and framing keys."""
        downstream = [
            (key, value)
            for key, value in headers
            if key.lower() not in CORS_RESPONSE_HEADERS
            and key.lower() not in FRAMING_RESPONSE_HEADERS
            and key.lower() != IDENTIFICATION_HEADER[0]
        ]
        downstream.append(IDENTIFICATION_HEADER)
        return downstream

    @staticmethod
    def declared_length(headers: Iterable[tuple[str, str]]) -> int | None:
        """Return the declared content-length, or None when absent or unparseable."""
        for key, value in headers:
            if key.lower() == "content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None
