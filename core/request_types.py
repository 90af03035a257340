"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ForwardedRequest:
    """Outbound request derived from an inbound one."""

    method: str
    url: str
    target: bytes
    headers: list[tuple[str, str]]
    has_body: bool
