import time
import httpx
import logging
from typing import Mapping
from starlette.datastructures import MutableHeaders
from starlette.responses import Response, StreamingResponse
from starlette.types import Receive, Scope
from .backends import BACKEND_HOSTS, resolve_backend_host
from .exceptions import UpstreamConnectionError, UpstreamTimeoutError
from .header_rewrite import (
    DEFAULT_USER_AGENT,
    apply_cache_policy,
    apply_cors_headers,
    rewrite_request_headers,
)
from .metrics import UPSTREAM_DURATION, UPSTREAM_ERRORS
from .path_router import raw_request_path
from .responses import preflight_response

logger = logging.getLogger(__name__)


class ProxyForwarder:
    def __init__(
        self,
        client: httpx.AsyncClient,
        backend_hosts: Mapping[str, str] = BACKEND_HOSTS,
        scheme: str = "https",
        default_user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.client = client
        self.backend_hosts = backend_hosts
        self.scheme = scheme
        self.default_user_agent = default_user_agent

    async def forward(self, scope: Scope, receive: Receive, backend: str) -> Response:
        host = resolve_backend_host(backend, self.backend_hosts)

        if scope["method"] == "OPTIONS":
            logger.info(f"Answering preflight for {scope['path']} locally")
            return preflight_response()

        headers = MutableHeaders(scope=scope)
        rewrite_request_headers(headers, host, self.default_user_agent)

        target_url = self._construct_target_url(host, scope)
        body = await self._read_body(receive)

        request = httpx.Request(
            method=scope["method"],
            url=target_url,
            headers=headers.raw,
            content=body,
        )
        backend_response = await self._send(request, backend)

        response = StreamingResponse(
            self._stream_body(backend_response),
            status_code=backend_response.status_code,
        )
        # header bytes are copied as received
        response.raw_headers = [
            (name.lower(), value) for name, value in backend_response.headers.raw
        ]
        apply_cors_headers(response.headers)
        apply_cache_policy(response.headers, backend)

        logger.info(f"Successfully proxied request to {backend} backend ({backend_response.status_code})")
        return response

    async def _send(self, request: httpx.Request, backend: str) -> httpx.Response:
        url = str(request.url)
        start = time.time()
        try:
            return await self.client.send(request, stream=True)
        except httpx.TimeoutException as e:
            UPSTREAM_ERRORS.labels(backend=backend, kind="timeout").inc()
            logger.error(f"Timeout waiting for {url}: {e!r}")
            raise UpstreamTimeoutError(f"Timed out waiting for {backend} backend",
                                       backend=backend, url=url) from e
        except httpx.RequestError as e:
            UPSTREAM_ERRORS.labels(backend=backend, kind="connection").inc()
            logger.error(f"Request error to {url}: {e!r}")
            raise UpstreamConnectionError(f"Could not reach {backend} backend",
                                          backend=backend, url=url) from e
        finally:
            UPSTREAM_DURATION.labels(backend=backend).observe(time.time() - start)

    async def _stream_body(self, backend_response: httpx.Response):
        try:
            async for chunk in backend_response.aiter_raw():
                yield chunk
        finally:
            await backend_response.aclose()

    def _construct_target_url(self, host: str, scope: Scope) -> str:
        path = raw_request_path(scope)
        query = scope.get("query_string", b"").decode("latin-1")
        url = f"{self.scheme}://{host}{path}"
        return f"{url}?{query}" if query else url

    async def _read_body(self, receive: Receive) -> bytes:
        body = b""
        more_body = True
        while more_body:
            message = await receive()
            body += message.get("body", b"")
            more_body = message.get("more_body", False)
        return body
