import asyncio
import httpx
import logging
from starlette.types import Scope, Receive, Send
from starlette.responses import PlainTextResponse, Response
from typing import Callable, Optional
from .path_router import PathRouter, Forward, NotFound, MethodNotAllowed, raw_request_path
from .forwarder import ProxyForwarder
from .responses import not_found_response, method_not_allowed_response
from .metrics import REQUEST_COUNT, ACTIVE_REQUESTS

logger = logging.getLogger(__name__)


class GatewayRouter:
    def __init__(
        self,
        path_router: Optional[PathRouter] = None,
        forwarder: Optional[ProxyForwarder] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        scheme: str = "https",
    ):
        self.path_router = path_router or PathRouter()
        if forwarder is None:
            client = client or httpx.AsyncClient(timeout=timeout)
            forwarder = ProxyForwarder(client, scheme=scheme)
        self.forwarder = forwarder

        self.cleanup_callbacks: list[Callable] = []
        self.add_cleanup_callback(self.forwarder.client.aclose)

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        if scope["type"] != "http":
            await PlainTextResponse("Unsupported", status_code=400)(scope, receive, send)
            return

        await self._handle_http(scope, receive, send)

    async def _handle_http(self, scope: Scope, receive: Receive, send: Send):
        path = raw_request_path(scope)
        method = scope["method"]
        logger.info(f"Processing request: {method} {path}")

        outcome = self.path_router.route(method, path)

        ACTIVE_REQUESTS.inc()
        try:
            response = await self._respond(outcome, path, scope, receive)
        finally:
            ACTIVE_REQUESTS.dec()

        backend = outcome.backend if isinstance(outcome, Forward) else "-"
        REQUEST_COUNT.labels(method=method, backend=backend,
                             status=str(response.status_code)).inc()
        await response(scope, receive, send)

    async def _respond(self, outcome, path: str, scope: Scope, receive: Receive) -> Response:
        if isinstance(outcome, Forward):
            logger.info(f"Routing request to {outcome.backend} backend: {path}")
            return await self.forwarder.forward(scope, receive, outcome.backend)

        if isinstance(outcome, NotFound):
            logger.info(f"No matching route found for: {path}")
            return not_found_response()

        if isinstance(outcome, MethodNotAllowed):
            logger.info(f"Method not allowed: {outcome.method}")
            return method_not_allowed_response()

        raise TypeError(f"Unexpected routing outcome: {outcome!r}")

    def add_cleanup_callback(self, cb: Callable) -> None:
        self.cleanup_callbacks.append(cb)

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send):
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                for cb in self.cleanup_callbacks:
                    result = cb()
                    if asyncio.iscoroutine(result):
                        await result
                logger.info("[gateway] Shutdown complete. All resources closed.")
                await send({"type": "lifespan.shutdown.complete"})
                return
