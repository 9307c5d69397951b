"""Shared fixtures for depcheck tests (mocked registry transport, no network)."""

from __future__ import annotations

import json

import httpx
import pytest

from depcheck.core.config import RegistrySettings
from depcheck.engines.registry.client import NpmRegistryClient

REGISTRY_URL = "https://registry.test"


def _package_doc(latest: str | None, versions: list[str]) -> dict:
    """Minimal npm registry package document."""
    doc: dict = {"versions": {v: {"version": v} for v in versions}}
    if latest is not None:
        doc["dist-tags"] = {"latest": latest}
    return doc


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def package_doc():
    return _package_doc


@pytest.fixture
def registry_docs() -> dict[str, dict]:
    """name -> registry document; names missing here answer 404."""
    return {
        "lodash": _package_doc("4.17.21", ["4.17.19", "4.17.20", "4.17.21"]),
        "react": _package_doc("18.2.0", ["17.0.1", "17.0.2", "18.0.0", "18.2.0"]),
        "axios": _package_doc("1.6.2", ["1.5.0", "1.5.1", "1.6.0", "1.6.2"]),
        "chalk": _package_doc("5.3.0", ["4.1.2", "5.3.0"]),
        "@types/node": _package_doc("20.10.0", ["20.9.0", "20.10.0"]),
    }


@pytest.fixture
def make_transport(registry_docs):
    """Factory for a mock registry; request paths are appended to *calls*."""

    def _make(docs: dict[str, dict] | None = None, calls: list[str] | None = None):
        served = registry_docs if docs is None else docs

        def handler(request: httpx.Request) -> httpx.Response:
            name = request.url.path.lstrip("/")
            if calls is not None:
                calls.append(name)
            if name in served:
                return httpx.Response(200, content=json.dumps(served[name]).encode())
            return httpx.Response(404, json={"error": "Not found"})

        return httpx.MockTransport(handler)

    return _make


@pytest.fixture
def make_client(make_transport):
    """Factory for an :class:`NpmRegistryClient` backed by the mock registry."""

    def _make(
        docs: dict[str, dict] | None = None,
        calls: list[str] | None = None,
        advisory_source=None,
        **settings_overrides,
    ) -> NpmRegistryClient:
        settings = RegistrySettings(base_url=REGISTRY_URL, **settings_overrides)
        return NpmRegistryClient(
            settings,
            advisory_source=advisory_source,
            transport=make_transport(docs, calls),
        )

    return _make


@pytest.fixture
def manifest_doc() -> dict:
    return {
        "name": "demo-app",
        "version": "1.0.0",
        "dependencies": {"lodash": "4.17.20", "react": "17.0.2"},
        "devDependencies": {"axios": "^1.5.0", "left-pad": "1.3.0"},
    }


@pytest.fixture
def manifest_file(tmp_path, manifest_doc):
    path = tmp_path / "package.json"
    path.write_text(json.dumps(manifest_doc))
    return path
