"""HTTP middleware: request logging, then CORS, then bearer auth."""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from core.auth import AuthGate
from core.cors import CorsPolicy
from core.envelope import unauthorized
from core.protocols import RequestLogger

CallNext = Callable[[Request], Awaitable[Response]]


class RequestLogMiddleware:
    """Record every inbound request before any other processing."""

    def __init__(self, logger: RequestLogger) -> None:
        self._logger = logger

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        query = request.url.query
        path = f"{request.url.path}?{query}" if query else request.url.path
        self._logger.log_request(request.method, path, dict(request.headers))
        return await call_next(request)


class CorsMiddleware:
    """Attach CORS headers to every response and answer preflights directly."""

    def __init__(self, policy: CorsPolicy) -> None:
        self._policy = policy

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        origin = request.headers.get("origin")
        if self._policy.is_preflight(request.method):
            return Response(
                status_code=204,
                headers=self._policy.response_headers(origin, preflight=True),
            )

        response = await call_next(request)
        response.headers.update(self._policy.response_headers(origin))
        return response


class AuthMiddleware:
    """Reject requests without the configured bearer token."""

    def __init__(self, gate: AuthGate, logger: RequestLogger) -> None:
        self._gate = gate
        self._logger = logger

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        if self._gate.is_exempt(request.method):
            return await call_next(request)

        if not self._gate.is_authorized(request.headers.get("authorization")):
            self._logger.log_rejected(request.method, request.url.path, 401)
            return unauthorized()
        return await call_next(request)
