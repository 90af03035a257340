"""Structured error body returned to callers."""

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    message: str
    type: str
    code: str | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


def error_response(
    status_code: int,
    message: str,
    error_type: str,
    code: str | None = None,
) -> JSONResponse:
    """Render an ErrorEnvelope; ``code`` is left out of the JSON when unset."""
    envelope = ErrorEnvelope(error=ErrorDetail(message=message, type=error_type, code=code))
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(exclude_none=True),
    )


def unauthorized() -> JSONResponse:
    return error_response(401, "Unauthorized", "invalid_request_error", "invalid_api_key")


def connection_failed(cause: str) -> JSONResponse:
    return error_response(500, f"Error connecting to Ollama server: {cause}", "server_error")


def request_too_large(limit: int) -> JSONResponse:
    return error_response(
        413,
        f"Request body exceeds {limit} bytes",
        "invalid_request_error",
        "request_too_large",
    )
