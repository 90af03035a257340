"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import JSONResponse

HEALTH_BODY = {"status": "ok", "message": "Ollama proxy is running"}


async def handle_health() -> JSONResponse:
    """Fixed liveness response; still behind the auth middleware."""
    return JSONResponse(status_code=200, content=HEALTH_BODY)


async def handle_proxy(request: Request) -> Response:
    """Hand any other method/path to the forwarding engine."""
    engine = request.app.state.forwarding_engine
    return await engine.forward(request)
