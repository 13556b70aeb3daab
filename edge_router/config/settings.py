import os
from dataclasses import dataclass
from typing import Mapping, Optional
from edge_router.core.exceptions import ConfigurationError

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    upstream_timeout: float = 5.0
    upstream_scheme: str = "https"
    admin_enabled: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        try:
            port = int(env.get("PORT", cls.port))
            timeout = float(env.get("UPSTREAM_TIMEOUT", cls.upstream_timeout))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        if timeout <= 0:
            raise ConfigurationError("UPSTREAM_TIMEOUT must be positive")

        scheme = env.get("UPSTREAM_SCHEME", cls.upstream_scheme).lower()
        if scheme not in ("http", "https"):
            raise ConfigurationError(f"Unsupported UPSTREAM_SCHEME: {scheme!r}")

        return cls(
            host=env.get("HOST", cls.host),
            port=port,
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
            upstream_timeout=timeout,
            upstream_scheme=scheme,
            admin_enabled=env.get("ADMIN_ENABLED", "false").strip().lower() in TRUTHY,
        )
