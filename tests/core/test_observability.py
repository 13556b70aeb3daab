import pytest
import httpx
import uuid
import logging
from httpx import ASGITransport
from asgi_lifespan import LifespanManager
from starlette.responses import PlainTextResponse
from edge_router.core.gateway_router import GatewayRouter
from edge_router.core.trace import TraceMiddleware, trace_id_var
from edge_router.core.logging_setup import TraceLogFilter, configure_logging


# ----------------------------
# Helpers
# ----------------------------

def build_gateway_app(backend_app):
    transport = ASGITransport(app=backend_app)
    fake_client = httpx.AsyncClient(transport=transport)
    return TraceMiddleware(GatewayRouter(client=fake_client))


# ----------------------------
# Backends
# ----------------------------

# Backend that logs with trace ID in scope
async def backend_with_logging(scope, receive, send):
    logger = logging.getLogger("test-observability")
    logger.info(f"Log triggered by trace ID: {trace_id_var.get()}")
    headers = {k.decode(): v.decode() for k, v in scope["headers"]}
    await PlainTextResponse(headers.get("x-trace-id", "missing"))(scope, receive, send)


# ----------------------------
# Tests
# ----------------------------

@pytest.mark.anyio
async def test_trace_id_from_client_appears_in_logs(caplog):
    caplog.set_level(logging.INFO)
    app = build_gateway_app(backend_with_logging)
    given_id = str(uuid.uuid4())

    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            res = await client.get("/api/log", headers={"X-Trace-ID": given_id})

    assert res.status_code == 200
    assert f"Log triggered by trace ID: {given_id}" in caplog.text


@pytest.mark.anyio
async def test_trace_id_is_generated_but_not_exposed(caplog):
    caplog.set_level(logging.INFO)
    app = build_gateway_app(backend_with_logging)

    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            res = await client.get("/api/log")

    # the trace id is for log correlation only
    assert res.text == "missing"
    assert "x-trace-id" not in res.headers

    line = next(r.getMessage() for r in caplog.records if r.name == "test-observability")
    assert uuid.UUID(line.rsplit(" ", 1)[-1])


@pytest.mark.anyio
async def test_routing_decisions_are_logged(caplog):
    caplog.set_level(logging.INFO)
    app = build_gateway_app(backend_with_logging)

    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            await client.get("/api/users/42")
            await client.get("/unknown")
            await client.request("TRACE", "/sdk/x")

    assert "Processing request: GET /api/users/42" in caplog.text
    assert "Routing request to api backend: /api/users/42" in caplog.text
    assert "Successfully proxied request to api backend (200)" in caplog.text
    assert "No matching route found for: /unknown" in caplog.text
    assert "Method not allowed: TRACE" in caplog.text


def test_log_filter_stamps_trace_id():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert TraceLogFilter().filter(record)
    assert record.trace_id == "-"

    token = trace_id_var.set("abc")
    try:
        TraceLogFilter().filter(record)
        assert record.trace_id == "abc"
    finally:
        trace_id_var.reset(token)


def test_configure_logging_adds_trace_filter_once():
    handler = logging.StreamHandler()
    root = logging.getLogger()
    root.addHandler(handler)
    try:
        configure_logging()
        configure_logging()
        assert sum(isinstance(f, TraceLogFilter) for f in handler.filters) == 1
    finally:
        root.removeHandler(handler)
        for h in root.handlers:
            for f in [f for f in h.filters if isinstance(f, TraceLogFilter)]:
                h.removeFilter(f)
