"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard or plain console)."""

    def log_request(self, method: str, path: str, headers: dict[str, str]) -> None: ...
    def log_forward(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body_preview: bytes,
    ) -> None: ...
    def log_response(self, method: str, path: str, status: int, headers: dict[str, str]) -> None: ...
    def log_rejected(self, method: str, path: str, status: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
