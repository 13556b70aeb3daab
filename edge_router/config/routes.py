ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"})

# Evaluated in order, first matching prefix wins.
ROUTE_TABLE = (
    ("/api/", "api"),
    ("/sdk/", "sdk"),
)

BACKENDS = {
    "api": "api.privacy-center.org",
    "sdk": "sdk.privacy-center.org",
}

# Only served when ADMIN_ENABLED is set.
ADMIN_PREFIX = "/__"
