"""Tests for the registry engine: TTL cache, client, settle-all batches."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from depcheck.core.config import RegistrySettings
from depcheck.engines.advisories.models import VulnerabilityFinding
from depcheck.engines.registry.batch import lookup_all, settle_all
from depcheck.engines.registry.cache import CacheStats, TTLCache
from depcheck.engines.registry.client import NpmRegistryClient
from depcheck.exceptions import PackageNotFoundError, RegistryError

# ── TTL cache ────────────────────────────────────────────────────────────


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    def test_hit_and_miss(self):
        cache = TTLCache(60, clock=FakeClock())
        assert cache.get("a") is None
        cache.set("a", {"x": 1})
        assert cache.get("a") == {"x": 1}
        assert cache.stats() == CacheStats(hits=1, misses=1, keys=1)

    def test_expiry(self):
        clock = FakeClock()
        cache = TTLCache(10, clock=clock)
        cache.set("a", 1)
        clock.now = 9.9
        assert cache.get("a") == 1
        clock.now = 10.0
        assert cache.get("a") is None
        assert cache.stats().keys == 0

    def test_disabled(self):
        cache = TTLCache(0)
        assert cache.enabled is False
        cache.set("a", 1)
        assert cache.get("a") is None
        assert cache.stats().keys == 0

    def test_clear(self):
        cache = TTLCache(60)
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None


# ── Registry client ──────────────────────────────────────────────────────


class TestRegistryClient:
    @pytest.mark.anyio
    async def test_latest_and_versions(self, make_client):
        async with make_client() as client:
            assert await client.get_latest_version("lodash") == "4.17.21"
            assert await client.get_versions("lodash") == ["4.17.19", "4.17.20", "4.17.21"]

    @pytest.mark.anyio
    async def test_scoped_package(self, make_client):
        async with make_client() as client:
            assert await client.get_latest_version("@types/node") == "20.10.0"

    @pytest.mark.anyio
    async def test_cache_serves_repeat_lookups(self, make_client):
        calls: list[str] = []
        async with make_client(calls=calls) as client:
            await client.get_latest_version("react")
            await client.get_versions("react")
            await client.get_package_info("react")
            assert calls == ["react"]
            assert client.caching_enabled is True
            stats = client.cache_stats()
            assert stats.hits == 2
            assert stats.keys == 1

    @pytest.mark.anyio
    async def test_disabled_cache_refetches(self, make_client):
        calls: list[str] = []
        async with make_client(calls=calls, cache_ttl=0) as client:
            await client.get_latest_version("react")
            await client.get_versions("react")
            assert calls == ["react", "react"]
            assert client.caching_enabled is False

    @pytest.mark.anyio
    async def test_lookup_single_fetch(self, make_client):
        calls: list[str] = []
        async with make_client(calls=calls) as client:
            result = await client.lookup("axios")
        assert result.ok
        assert result.latest_version == "1.6.2"
        assert result.all_versions == ["1.5.0", "1.5.1", "1.6.0", "1.6.2"]
        assert calls == ["axios"]

    @pytest.mark.anyio
    async def test_lookup_single_fetch_without_cache(self, make_client):
        calls: list[str] = []
        async with make_client(calls=calls, cache_ttl=0) as client:
            result = await client.lookup("lodash")
        assert calls == ["lodash"]
        assert result.latest_version == "4.17.21"
        assert result.all_versions == ["4.17.19", "4.17.20", "4.17.21"]

    @pytest.mark.anyio
    async def test_not_found(self, make_client):
        async with make_client() as client:
            with pytest.raises(PackageNotFoundError) as exc_info:
                await client.get_package_info("left-pad")
        assert exc_info.value.package_name == "left-pad"
        assert isinstance(exc_info.value, RegistryError)
        assert str(exc_info.value) == "Package 'left-pad' not found"

    @pytest.mark.anyio
    async def test_server_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        settings = RegistrySettings(base_url="https://registry.test")
        async with NpmRegistryClient(settings, transport=transport) as client:
            with pytest.raises(RegistryError, match="HTTP 500"):
                await client.get_package_info("lodash")

    @pytest.mark.anyio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        settings = RegistrySettings(base_url="https://registry.test")
        async with NpmRegistryClient(settings, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RegistryError, match="connection refused"):
                await client.get_package_info("lodash")

    @pytest.mark.anyio
    async def test_invalid_json(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))
        settings = RegistrySettings(base_url="https://registry.test")
        async with NpmRegistryClient(settings, transport=transport) as client:
            with pytest.raises(RegistryError, match="invalid JSON"):
                await client.get_package_info("lodash")

    @pytest.mark.anyio
    async def test_missing_dist_tags(self, make_client, package_doc):
        docs = {"ghost": package_doc(None, ["1.0.0"])}
        async with make_client(docs=docs) as client:
            assert await client.get_latest_version("ghost") is None
            result = await client.lookup("ghost")
        assert result.ok is False
        assert result.all_versions == ["1.0.0"]
        assert result.error == "no latest dist-tag"

    @pytest.mark.anyio
    async def test_vulnerabilities_default_empty(self, make_client):
        async with make_client() as client:
            assert await client.get_vulnerabilities("lodash", "4.17.20") == []

    @pytest.mark.anyio
    async def test_vulnerabilities_cached(self, make_client):
        lookups: list[tuple[str, str]] = []

        class CountingSource:
            async def lookup(self, package_name, version):
                lookups.append((package_name, version))
                return [VulnerabilityFinding(id="X", severity="high")]

        async with make_client(advisory_source=CountingSource()) as client:
            first = await client.get_vulnerabilities("lodash", "4.17.20")
            second = await client.get_vulnerabilities("lodash", "4.17.20")
        assert first == second
        assert lookups == [("lodash", "4.17.20")]

    @pytest.mark.anyio
    async def test_failing_advisory_source_yields_empty(self, make_client):
        class BrokenSource:
            async def lookup(self, package_name, version):
                raise RuntimeError("advisory service down")

        async with make_client(advisory_source=BrokenSource()) as client:
            assert await client.get_vulnerabilities("lodash", "4.17.20") == []

    @pytest.mark.anyio
    async def test_concurrency_bound(self, make_client, registry_docs):
        in_flight = 0
        peak = 0

        async def slow_handler(request: httpx.Request) -> httpx.Response:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return httpx.Response(200, json=registry_docs["lodash"])

        settings = RegistrySettings(
            base_url="https://registry.test", max_concurrency=2, cache_ttl=0
        )
        transport = httpx.MockTransport(slow_handler)
        async with NpmRegistryClient(settings, transport=transport) as client:
            await asyncio.gather(*(client.get_package_info(f"pkg{i}") for i in range(6)))
        assert peak <= 2


# ── Settle-all batches ───────────────────────────────────────────────────


class TestSettleAll:
    @pytest.mark.anyio
    async def test_order_and_isolation(self):
        async def work(n: int) -> int:
            await asyncio.sleep(0.001 * (5 - n))
            if n == 2:
                raise ValueError("boom")
            return n * 10

        outcomes = await settle_all([1, 2, 3, 4], work)
        assert [o.ok for o in outcomes] == [True, False, True, True]
        assert [o.value for o in outcomes] == [10, None, 30, 40]
        assert isinstance(outcomes[1].error, ValueError)

    @pytest.mark.anyio
    async def test_limit(self):
        in_flight = 0
        peak = 0

        async def work(n: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.001)
            in_flight -= 1
            return n

        outcomes = await settle_all(list(range(10)), work, limit=3)
        assert [o.value for o in outcomes] == list(range(10))
        assert peak <= 3

    @pytest.mark.anyio
    async def test_empty(self):
        async def work(n):
            return n

        assert await settle_all([], work) == []

    @pytest.mark.anyio
    async def test_lookup_all_keeps_failures(self, make_client):
        async with make_client() as client:
            results = await lookup_all(client, ["lodash", "left-pad", "react"])
        assert [r.package_name for r in results] == ["lodash", "left-pad", "react"]
        assert [r.ok for r in results] == [True, False, True]
        assert results[1].latest_version is None
        assert "left-pad" in results[1].error


# ── Exceptions ───────────────────────────────────────────────────────────


class TestRegistryExceptions:
    def test_registry_error_message(self):
        exc = RegistryError("lodash", "HTTP 503")
        assert exc.package_name == "lodash"
        assert str(exc) == "Failed to fetch package 'lodash': HTTP 503"

    def test_not_found_goes_through_registry_error(self, monkeypatch):
        seen: list[str] = []
        original_init = RegistryError.__init__

        def recording_init(self, package_name, message=None, *, detail=None):
            seen.append(package_name)
            original_init(self, package_name, message, detail=detail)

        monkeypatch.setattr(RegistryError, "__init__", recording_init)
        exc = PackageNotFoundError("left-pad")
        assert seen == ["left-pad"]
        assert exc.package_name == "left-pad"
        assert str(exc) == "Package 'left-pad' not found"
