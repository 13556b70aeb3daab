from types import MappingProxyType
from typing import Mapping
from edge_router.config.routes import BACKENDS
from .exceptions import BackendResolutionError

BACKEND_HOSTS: Mapping[str, str] = MappingProxyType(dict(BACKENDS))


def resolve_backend_host(backend: str, backend_hosts: Mapping[str, str] = BACKEND_HOSTS) -> str:
    try:
        return backend_hosts[backend]
    except KeyError:
        raise BackendResolutionError(backend) from None
