"""HTTP proxying to the upstream inference server."""

from collections.abc import AsyncIterator

import anyio
import httpx
from fastapi import Request, Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from starlette.requests import ClientDisconnect

from core.config import UpstreamTarget
from core.envelope import connection_failed, request_too_large
from core.exceptions import RequestTooLarge, UpstreamConnectionError, UpstreamStreamError
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import ForwardedRequest

PREVIEW_SIZE = 200


class ForwardingEngine:
    """Forward requests to the upstream and stream its responses back."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        target: UpstreamTarget,
        logger: RequestLogger,
        header_builder: HeaderBuilder,
        max_body_size: int,
    ) -> None:
        self._client = client
        self._base_url = target.base_url
        self._logger = logger
        self._headers = header_builder
        self._max_body_size = max_body_size

    def prepare(self, request: Request) -> ForwardedRequest:
        """Derive the outbound request: same method, same raw path and query."""
        raw_path = request.scope.get("raw_path") or request.scope["path"].encode()
        query = request.scope.get("query_string", b"")
        if query:
            raw_path = raw_path + b"?" + query

        headers = self._headers.build_upstream_headers(request.headers.items())
        declared = self._headers.declared_length(headers)
        has_body = bool(declared) or any(key.lower() == "transfer-encoding" for key, _ in headers)
        return ForwardedRequest(
            request.method,
            self._base_url + raw_path.decode("latin-1"),
            raw_path,
            headers,
            has_body,
        )

    async def forward(self, request: Request) -> Response:
        """Proxy one request; connection failures become a 500 ErrorEnvelope."""
        prepared = self.prepare(request)
        route = f"{request.method} {request.url.path}"

        try:
            body, preview = await self._open_body(request, prepared)
            self._logger.log_forward(
                prepared.method, prepared.url, dict(prepared.headers), preview
            )
            response = await self._send(prepared, body)
        except RequestTooLarge as e:
            self._logger.log_error(route, 413, str(e))
            return request_too_large(e.limit)
        except UpstreamConnectionError as e:
            self._logger.log_error(route, 500, str(e))
            return connection_failed(e.cause)
        except ClientDisconnect:
            self._logger.log_error(route, 499, "Client disconnected during upload")
            return Response(status_code=499)

        self._logger.log_response(
            request.method, request.url.path, response.status_code, dict(response.headers)
        )
        streaming = StreamingResponse(
            self._relay(response, route),
            status_code=response.status_code,
            background=BackgroundTask(self._cleanup_streaming, response),
        )
        upstream_headers = [
            (key.decode("latin-1"), value.decode("latin-1")) for key, value in response.headers.raw
        ]
        streaming.raw_headers = [
            (key.lower().encode("latin-1"), value.encode("latin-1"))
            for key, value in self._headers.build_downstream_headers(upstream_headers)
        ]
        return streaming

    async def _open_body(
        self,
        request: Request,
        prepared: ForwardedRequest,
    ) -> tuple[AsyncIterator[bytes] | None, bytes]:
        """Return the pass-through body stream and a preview of its first bytes."""
        if not prepared.has_body:
            return None, b""

        declared = self._headers.declared_length(prepared.headers)
        if declared is not None and declared > self._max_body_size:
            raise RequestTooLarge(self._max_body_size)

        stream = request.stream()
        first = b""
        async for chunk in stream:
            if chunk:
                first = chunk
                break
        return self._limited_body(first, stream), first[:PREVIEW_SIZE]

    async def _limited_body(self, first: bytes, rest: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
        sent = len(first)
        if sent > self._max_body_size:
            raise RequestTooLarge(self._max_body_size)
        if first:
            yield first
        async for chunk in rest:
            sent += len(chunk)
            if sent > self._max_body_size:
                raise RequestTooLarge(self._max_body_size)
            if chunk:
                yield chunk

    async def _send(
        self,
        prepared: ForwardedRequest,
        body: AsyncIterator[bytes] | None,
    ) -> httpx.Response:
        req = self._client.build_request(
            prepared.method,
            prepared.url,
            headers=prepared.headers,
            content=body,
            # httpx would re-quote the path; send the request-target as received
            extensions={"target": prepared.target},
        )
        try:
            return await self._client.send(req, stream=True)
        except httpx.RequestError as e:
            cause = str(e) or type(e).__name__
            raise UpstreamConnectionError(
                f"Error connecting to Ollama server: {cause}", cause
            ) from e

    async def _relay(self, response: httpx.Response, route: str) -> AsyncIterator[bytes]:
        """Yield upstream bytes untouched; headers are already committed."""
        try:
            async for chunk in response.aiter_raw():
                yield chunk
        except httpx.HTTPError as e:
            message = str(e) or type(e).__name__
            self._logger.log_error(route, response.status_code, f"Upstream stream failed: {message}")
            raise UpstreamStreamError(message) from e
        except anyio.get_cancelled_exc_class():
            self._logger.log_error(route, 499, "Client disconnected, upstream read cancelled")
            raise
        finally:
            with anyio.CancelScope(shield=True):
                await response.aclose()

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()
