from prometheus_client import (
    Counter,
    Summary,
    Gauge,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST
)

registry = CollectorRegistry()

REQUEST_COUNT = Counter(
    "edge_router_requests_total",
    "Total number of requests by routing outcome",
    ["method", "backend", "status"],
    registry=registry
)

UPSTREAM_DURATION = Summary(
    "edge_router_upstream_duration_seconds",
    "Time spent waiting for the backend to answer",
    ["backend"],
    registry=registry
)

ACTIVE_REQUESTS = Gauge(
    "edge_router_concurrent_requests",
    "Current number of requests being handled",
    registry=registry
)

UPSTREAM_ERRORS = Counter(
    "edge_router_upstream_errors_total",
    "Number of transport failures talking to a backend",
    ["backend", "kind"],
    registry=registry
)


def render_prometheus_metrics() -> tuple[bytes, str]:
    return generate_latest(registry), CONTENT_TYPE_LATEST
