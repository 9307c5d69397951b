"""Registry settings — environment defaults, overridable per command."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

import structlog

log = structlog.get_logger("depcheck.config")

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"


@dataclass(frozen=True)
class RegistrySettings:
    """Connection, cache and concurrency knobs for one registry client."""

    base_url: str = DEFAULT_REGISTRY_URL
    timeout: float = 10.0
    cache_ttl: float = 3600.0
    max_concurrency: int = 10
    max_connections: int = 50
    max_keepalive_connections: int = 10

    @classmethod
    def from_env(cls) -> RegistrySettings:
        """Build settings from ``DEPCHECK_*`` environment variables.

        Supported variables:
            DEPCHECK_REGISTRY_URL     — registry base URL
            DEPCHECK_TIMEOUT          — request timeout in seconds
            DEPCHECK_CACHE_TTL        — cache TTL in seconds (0 disables)
            DEPCHECK_MAX_CONNECTIONS  — connection pool size
        """
        return cls(
            base_url=os.environ.get("DEPCHECK_REGISTRY_URL", DEFAULT_REGISTRY_URL).rstrip("/"),
            timeout=_env_float("DEPCHECK_TIMEOUT", cls.timeout),
            cache_ttl=_env_float("DEPCHECK_CACHE_TTL", cls.cache_ttl),
            max_connections=int(_env_float("DEPCHECK_MAX_CONNECTIONS", cls.max_connections)),
        )

    def with_overrides(self, **changes: object) -> RegistrySettings:
        """Return a copy with the non-None *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("config.invalid_env", name=name, value=raw, default=default)
        return default
