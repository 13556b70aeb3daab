from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union
from urllib.parse import quote
from starlette.types import Scope
from edge_router.config.routes import ALLOWED_METHODS, ROUTE_TABLE
from .backends import BACKEND_HOSTS
from .exceptions import ConfigurationError


def raw_request_path(scope: Scope) -> str:
    # path as sent on the wire, without percent-decoding or query string
    raw_path = scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1").split("?", 1)[0]
    return quote(scope["path"])


@dataclass(frozen=True)
class Forward:
    backend: str


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class MethodNotAllowed:
    method: str


Outcome = Union[Forward, NotFound, MethodNotAllowed]


class PathRouter:
    def __init__(
        self,
        route_table: Iterable[tuple[str, str]] = ROUTE_TABLE,
        allowed_methods: Iterable[str] = ALLOWED_METHODS,
        backend_hosts: Mapping[str, str] = BACKEND_HOSTS,
    ):
        self.route_table = tuple(route_table)
        self.allowed_methods = frozenset(allowed_methods)

        for prefix, backend in self.route_table:
            if not prefix:
                raise ConfigurationError("Route prefix must not be empty")
            if backend not in backend_hosts:
                raise ConfigurationError(f"Route {prefix!r} points to unknown backend {backend!r}")

    def match(self, path: str) -> Optional[str]:
        for route_prefix, backend in self.route_table:
            if path.startswith(route_prefix):
                return backend
        return None

    def route(self, method: str, path: str) -> Outcome:
        if method not in self.allowed_methods:
            return MethodNotAllowed(method)

        backend = self.match(path)
        if backend is None:
            return NotFound()
        return Forward(backend)
