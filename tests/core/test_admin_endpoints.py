import pytest
import httpx
from httpx import ASGITransport
from asgi_lifespan import LifespanManager
from starlette.responses import PlainTextResponse
from edge_router.app_factory import create_app
from edge_router.core.mount_admin_first import MountAdminFirst
from edge_router.config.settings import Settings
from tests.fixtures.mock_backends import CountingBackend


@pytest.mark.anyio
async def test_admin_endpoints():
    backend = CountingBackend()
    fake_client = httpx.AsyncClient(transport=ASGITransport(app=backend))
    app = create_app(Settings(admin_enabled=True), client=fake_client)

    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            res = await client.get("/__health")
            assert res.status_code == 200
            assert "ok" in res.text.lower()

            res = await client.get("/__routes")
            assert res.status_code == 200
            assert res.json() == {
                "/api/": {"backend": "api", "host": "api.privacy-center.org"},
                "/sdk/": {"backend": "sdk", "host": "sdk.privacy-center.org"},
            }

            res = await client.get("/__nothing")
            assert res.status_code == 404

            res = await client.get("/api/still-routed")
            assert res.status_code == 200

    assert backend.call_count == 1


@pytest.mark.anyio
async def test_admin_endpoints_are_off_by_default():
    backend = CountingBackend()
    fake_client = httpx.AsyncClient(transport=ASGITransport(app=backend))
    app = create_app(client=fake_client)

    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            res = await client.get("/__health")

    assert res.status_code == 404
    assert "/api/*" in res.text
    assert backend.call_count == 0


@pytest.mark.anyio
async def test_admin_prefix_is_configurable():
    async def admin(scope, receive, send):
        await PlainTextResponse("admin")(scope, receive, send)

    async def gateway(scope, receive, send):
        await PlainTextResponse("gateway")(scope, receive, send)

    app = MountAdminFirst(admin, gateway, prefix="/_ops/")

    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        assert (await client.get("/_ops/health")).text == "admin"
        assert (await client.get("/__health")).text == "gateway"
        assert (await client.get("/%5Fops/health")).text == "gateway"
