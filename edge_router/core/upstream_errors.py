import logging
from starlette.types import ASGIApp, Message, Scope, Receive, Send
from starlette.responses import PlainTextResponse
from .exceptions import UpstreamError, UpstreamTimeoutError

logger = logging.getLogger("edge_router.upstream.errors")


class UpstreamErrorMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except UpstreamError as e:
            if response_started:
                raise

            if isinstance(e, UpstreamTimeoutError):
                status_code, text = 504, "Gateway Timeout"
            else:
                status_code, text = 502, "Bad Gateway"

            logger.error(f"Upstream failure for {scope['method']} {scope['path']}: {e} ({status_code})")
            await PlainTextResponse(
                text,
                status_code=status_code,
                headers={
                    "Content-Type": "text/plain",
                    "Access-Control-Allow-Origin": "*",
                },
            )(scope, receive, send)
