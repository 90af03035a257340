"""Bearer token check for inbound requests."""

import hmac


class AuthGate:
    """Validate the shared static bearer credential."""

    def __init__(self, api_key: str) -> None:
        self._expected = f"Bearer {api_key}".encode()

    def is_exempt(self, method: str) -> bool:
        """Preflight requests carry no credentials."""
        return method.upper() == "OPTIONS"

    def is_authorized(self, authorization: str | None) -> bool:
        """Exact, case-sensitive match compared in constant time."""
        if authorization is None:
            return False
        return hmac.compare_digest(authorization.encode("latin-1", errors="replace"), self._expected)
