"""Async npm registry client with a per-client TTL cache and bounded concurrency."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from depcheck import __version__
from depcheck.core.config import RegistrySettings
from depcheck.engines.advisories.models import VulnerabilityFinding
from depcheck.engines.advisories.sources import AdvisorySource, NullAdvisorySource
from depcheck.engines.registry.cache import CacheStats, TTLCache
from depcheck.engines.registry.models import RegistryLookupResult
from depcheck.exceptions import PackageNotFoundError, RegistryError

log = structlog.get_logger("depcheck.engine")


class NpmRegistryClient:
    """Thin async wrapper around the npm registry package document endpoint.

    One instance owns one connection pool and one cache; construct it per
    invocation and close it (or use ``async with``) when done. No retries
    are attempted: a failed request is final for that package.
    """

    def __init__(
        self,
        settings: RegistrySettings | None = None,
        advisory_source: AdvisorySource | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or RegistrySettings.from_env()
        self._advisories = advisory_source or NullAdvisorySource()
        self._cache = TTLCache(self.settings.cache_ttl)
        self._limit = asyncio.Semaphore(self.settings.max_concurrency)
        self._client = httpx.AsyncClient(
            base_url=self.settings.base_url,
            headers={
                "User-Agent": f"depcheck/{__version__}",
                "Accept": "application/json",
            },
            timeout=self.settings.timeout,
            limits=httpx.Limits(
                max_connections=self.settings.max_connections,
                max_keepalive_connections=self.settings.max_keepalive_connections,
            ),
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> NpmRegistryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    @property
    def caching_enabled(self) -> bool:
        return self._cache.enabled

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    async def get_package_info(self, package_name: str) -> dict[str, Any]:
        """Return the registry document for *package_name*.

        Raises :class:`PackageNotFoundError` on 404 and :class:`RegistryError`
        on any other HTTP, transport or decoding failure.
        """
        cache_key = f"package:{package_name}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        async with self._limit:
            document = await self._fetch(package_name)

        self._cache.set(cache_key, document)
        return document

    async def get_latest_version(self, package_name: str) -> str | None:
        return _latest_tag(await self.get_package_info(package_name))

    async def get_versions(self, package_name: str) -> list[str]:
        return _version_keys(await self.get_package_info(package_name))

    async def lookup(self, package_name: str) -> RegistryLookupResult:
        """Latest version plus the full version list, from one document fetch."""
        info = await self.get_package_info(package_name)
        latest = _latest_tag(info)
        versions = _version_keys(info)
        return RegistryLookupResult(
            package_name=package_name,
            latest_version=latest,
            all_versions=versions,
            error=None if latest is not None else "no latest dist-tag",
        )

    async def get_vulnerabilities(
        self, package_name: str, version: str
    ) -> list[VulnerabilityFinding]:
        """Findings from the advisory source; failures yield an empty list."""
        cache_key = f"vuln:{package_name}:{version}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            findings = await self._advisories.lookup(package_name, version)
        except Exception as exc:
            log.warning(
                "registry.advisory_lookup_failed",
                package=package_name,
                version=version,
                error=str(exc),
            )
            return []

        self._cache.set(cache_key, findings)
        return findings

    # ── internal ───────────────────────────────────────────────────────────

    async def _fetch(self, package_name: str) -> dict[str, Any]:
        path = "/" + quote(package_name, safe="@")
        log.debug("registry.fetch", package=package_name, path=path)
        try:
            resp = await self._client.get(path)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                log.info("registry.not_found", package=package_name)
                raise PackageNotFoundError(package_name) from exc
            raise RegistryError(package_name, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise RegistryError(package_name, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise RegistryError(package_name, f"invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise RegistryError(package_name, "unexpected response shape")
        return data


def _latest_tag(info: dict[str, Any]) -> str | None:
    dist_tags = info.get("dist-tags")
    if not isinstance(dist_tags, dict):
        return None
    latest = dist_tags.get("latest")
    return latest if isinstance(latest, str) else None


def _version_keys(info: dict[str, Any]) -> list[str]:
    versions = info.get("versions")
    if not isinstance(versions, dict):
        return []
    return list(versions.keys())
