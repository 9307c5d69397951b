"""Advisory sources — pluggable lookup of known vulnerabilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from depcheck.engines.advisories.models import VulnerabilityFinding
from depcheck.engines.manifest.versions import range_matches
from depcheck.exceptions import DepcheckError

log = structlog.get_logger("depcheck.engine")

_DATABASE_ADAPTER = TypeAdapter(dict[str, list[VulnerabilityFinding]])


class AdvisoryDatabaseError(DepcheckError):
    """Raised when an advisory database file cannot be loaded."""


@runtime_checkable
class AdvisorySource(Protocol):
    """Interface that every advisory source must satisfy."""

    async def lookup(self, package_name: str, version: str) -> list[VulnerabilityFinding]: ...


class NullAdvisorySource:
    """Source with no data: every lookup returns no findings."""

    async def lookup(self, package_name: str, version: str) -> list[VulnerabilityFinding]:
        return []


class JsonAdvisorySource:
    """Findings loaded from a local JSON file.

    The file maps package names to lists of findings::

        {"lodash": [{"id": "CVE-2021-23337", "severity": "high",
                     "affected_range": "<4.17.21", "fixed_range": ">=4.17.21"}]}

    When *version* is exact and a finding's ``affected_range`` parses, only
    findings whose range contains *version* are returned.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._findings = self._load(self.path)

    @staticmethod
    def _load(path: Path) -> dict[str, list[VulnerabilityFinding]]:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise AdvisoryDatabaseError(f"cannot read advisory file {path}: {exc}") from exc
        try:
            return _DATABASE_ADAPTER.validate_python(raw)
        except PydanticValidationError as exc:
            raise AdvisoryDatabaseError(f"invalid advisory file {path}: {exc}") from exc

    async def lookup(self, package_name: str, version: str) -> list[VulnerabilityFinding]:
        findings = self._findings.get(package_name, [])
        matched: list[VulnerabilityFinding] = []
        for finding in findings:
            if finding.affected_range and range_matches(finding.affected_range, version) is False:
                log.debug(
                    "advisories.not_affected",
                    package=package_name,
                    version=version,
                    finding=finding.id,
                )
                continue
            matched.append(finding)
        return matched
