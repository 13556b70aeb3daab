from starlette.datastructures import MutableHeaders

DEFAULT_USER_AGENT = "Fastly-Proxy/1.0"

ALLOW_METHODS_VALUE = "GET, POST, PUT, DELETE, PATCH, OPTIONS"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ALLOW_METHODS_VALUE,
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With",
    "Access-Control-Max-Age": "86400",
}

CACHE_POLICIES = {
    # one hour for static SDK assets
    "sdk": {
        "Cache-Control": "public, max-age=3600",
    },
    # Pragma and Expires for caches that ignore Cache-Control
    "api": {
        "Cache-Control": "no-cache, no-store, must-revalidate",
        "Pragma": "no-cache",
        "Expires": "0",
    },
}


def rewrite_request_headers(
    headers: MutableHeaders,
    host: str,
    default_user_agent: str = DEFAULT_USER_AGENT,
) -> MutableHeaders:
    headers["host"] = host
    headers.setdefault("user-agent", default_user_agent)
    return headers


def apply_cors_headers(headers: MutableHeaders) -> MutableHeaders:
    for name, value in CORS_HEADERS.items():
        headers[name] = value
    return headers


def apply_cache_policy(headers: MutableHeaders, backend: str) -> MutableHeaders:
    for name, value in CACHE_POLICIES.get(backend, {}).items():
        headers[name] = value
    return headers
