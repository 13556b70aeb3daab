from typing import Optional


class EdgeRouterError(Exception):
    pass


class ConfigurationError(EdgeRouterError):
    pass


class BackendResolutionError(EdgeRouterError):
    def __init__(self, backend: str) -> None:
        super().__init__(f"Unknown backend: {backend!r}")
        self.backend = backend


class UpstreamError(EdgeRouterError):
    """Transport failure talking to a backend; never retried."""

    def __init__(self, message: str, backend: Optional[str] = None, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.backend = backend
        self.url = url


class UpstreamConnectionError(UpstreamError):
    pass


class UpstreamTimeoutError(UpstreamError):
    pass
