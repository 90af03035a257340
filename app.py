"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_health, handle_proxy
from api.middleware import AuthMiddleware, CorsMiddleware, RequestLogMiddleware
from core.auth import AuthGate
from core.config import Config
from core.cors import CorsPolicy
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.upstream import ForwardingEngine

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# httpx adds these by default; only caller-supplied values should reach the upstream
CLIENT_DEFAULT_HEADERS = ("accept", "accept-encoding", "user-agent")


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    target = config.upstream.target

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.limits.upstream_timeout),
            limits=limits,
            transport=transport,
            follow_redirects=False,
        )
        for name in CLIENT_DEFAULT_HEADERS:
            client.headers.pop(name, None)
        app.state.forwarding_engine = ForwardingEngine(
            client=client,
            target=target,
            logger=logger,
            header_builder=HeaderBuilder(),
            max_body_size=config.limits.max_body_size,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Ollama Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Registered innermost first: requests pass logging, then CORS, then auth
    app.middleware("http")(AuthMiddleware(AuthGate(config.auth.api_key), logger))
    app.middleware("http")(CorsMiddleware(CorsPolicy(config.cors.allowed_origins)))
    app.middleware("http")(RequestLogMiddleware(logger))

    @app.get("/health")
    async def health():
        return await handle_health()

    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy(request: Request, path: str):
        return await handle_proxy(request)

    return app
