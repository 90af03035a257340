"""Custom exception hierarchy for the Ollama proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class UpstreamConnectionError(ProxyError):
    """Raised when the upstream cannot be reached before response headers arrive.

    Attributes:
        message: Error message
        cause: Underlying transport error text
    """

    def __init__(self, message: str, cause: str) -> None:
        super().__init__(message)
        self.cause = cause


class UpstreamStreamError(ProxyError):
    """Raised when the upstream fails after headers were relayed to the caller."""


class RequestTooLarge(ProxyError):
    """Request body exceeds size limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Request body exceeds {limit} bytes")
        self.limit = limit
