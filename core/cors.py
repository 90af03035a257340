"""Cross-origin response headers."""

ALLOW_HEADERS = "Authorization, Content-Type"
ALLOW_METHODS = "GET, POST, OPTIONS"
MAX_AGE = "1728000"


class CorsPolicy:
    """Decide which CORS headers a response carries.

    With an empty allow-list any ``Origin`` is echoed back verbatim.
    """

    def __init__(self, allowed_origins: tuple[str, ...] = ()) -> None:
        self._allowed = frozenset(allowed_origins)

    def is_preflight(self, method: str) -> bool:
        return method.upper() == "OPTIONS"

    def allowed_origin(self, origin: str | None) -> str | None:
        if not origin:
            return None
        if self._allowed and origin not in self._allowed:
            return None
        return origin

    def response_headers(self, origin: str | None, *, preflight: bool = False) -> dict[str, str]:
        headers = {}
        allowed = self.allowed_origin(origin)
        if allowed is not None:
            headers["Access-Control-Allow-Origin"] = allowed
        headers["Access-Control-Allow-Credentials"] = "true"
        headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        if preflight:
            headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
            headers["Access-Control-Max-Age"] = MAX_AGE
        return headers
