from starlette.types import ASGIApp, Scope, Receive, Send
from edge_router.config.routes import ADMIN_PREFIX
from .path_router import raw_request_path


class MountAdminFirst:
    def __init__(self, admin_app: ASGIApp, gateway_app: ASGIApp, prefix: str = ADMIN_PREFIX) -> None:
        self.admin_app = admin_app
        self.gateway_app = gateway_app
        self.prefix = prefix

    def is_admin_request(self, scope: Scope) -> bool:
        return scope["type"] == "http" and raw_request_path(scope).startswith(self.prefix)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        app = self.admin_app if self.is_admin_request(scope) else self.gateway_app
        await app(scope, receive, send)
