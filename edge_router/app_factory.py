import httpx
from typing import Optional
from starlette.types import ASGIApp
from edge_router.config.settings import Settings
from edge_router.core.gateway_router import GatewayRouter
from edge_router.core.upstream_errors import UpstreamErrorMiddleware
from edge_router.core.trace import TraceMiddleware
from edge_router.core.admin_router import AdminRouter
from edge_router.core.mount_admin_first import MountAdminFirst


def create_app(settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None) -> ASGIApp:
    settings = settings or Settings()

    core_gateway = GatewayRouter(
        client=client,
        timeout=settings.upstream_timeout,
        scheme=settings.upstream_scheme,
    )

    gateway_app = UpstreamErrorMiddleware(core_gateway)
    gateway_app = TraceMiddleware(gateway_app)

    if not settings.admin_enabled:
        return gateway_app

    # Admin gets direct access to the unwrapped GatewayRouter instance
    admin_app = AdminRouter(core_gateway)
    return MountAdminFirst(admin_app, gateway_app)
