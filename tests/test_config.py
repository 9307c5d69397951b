"""Tests for environment-driven settings and logging setup."""

from __future__ import annotations

import json
import logging

import structlog

from depcheck.core.config import DEFAULT_REGISTRY_URL, RegistrySettings
from depcheck.core.logging import setup_logging


class TestRegistrySettings:
    def test_defaults(self, monkeypatch):
        for name in ("DEPCHECK_REGISTRY_URL", "DEPCHECK_TIMEOUT", "DEPCHECK_CACHE_TTL"):
            monkeypatch.delenv(name, raising=False)
        settings = RegistrySettings.from_env()
        assert settings.base_url == DEFAULT_REGISTRY_URL
        assert settings.timeout == 10.0
        assert settings.cache_ttl == 3600.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DEPCHECK_REGISTRY_URL", "https://npm.internal/")
        monkeypatch.setenv("DEPCHECK_TIMEOUT", "2.5")
        monkeypatch.setenv("DEPCHECK_CACHE_TTL", "0")
        monkeypatch.setenv("DEPCHECK_MAX_CONNECTIONS", "8")
        settings = RegistrySettings.from_env()
        assert settings.base_url == "https://npm.internal"
        assert settings.timeout == 2.5
        assert settings.cache_ttl == 0.0
        assert settings.max_connections == 8

    def test_invalid_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("DEPCHECK_TIMEOUT", "soon")
        assert RegistrySettings.from_env().timeout == 10.0

    def test_with_overrides_skips_none(self):
        base = RegistrySettings(max_concurrency=10)
        changed = base.with_overrides(max_concurrency=3, cache_ttl=None)
        assert changed.max_concurrency == 3
        assert changed.cache_ttl == base.cache_ttl
        assert base.max_concurrency == 10


class TestSetupLogging:
    def test_level_from_argument(self, monkeypatch):
        monkeypatch.delenv("DEPCHECK_LOG_LEVEL", raising=False)
        setup_logging("debug")
        assert logging.getLogger("depcheck").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("DEPCHECK_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("DEPCHECK_LOG_FORMAT", "json")
        setup_logging()
        assert logging.getLogger("depcheck").level == logging.ERROR

    def test_json_lines_on_stderr(self, monkeypatch, capsys):
        monkeypatch.setenv("DEPCHECK_LOG_FORMAT", "json")
        setup_logging("info")
        structlog.get_logger("depcheck.tests").info("registry.fetch", package="lodash")
        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "registry.fetch"
        assert record["package"] == "lodash"
        assert record["level"] == "info"
        assert record["logger"] == "depcheck.tests"
