"""Report schemas shared by the table, JSON and CSV renderers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from depcheck.engines.advisories.models import FixPlan, Severity, VulnerabilityFinding
from depcheck.engines.manifest.models import DependencyKind, DependencyStats, VersionRangeInfo
from depcheck.engines.updates.models import (
    Priority,
    Recommendation,
    UpdateBucket,
    UpdateCandidate,
    UpdateType,
)


class PackageInfo(BaseModel):
    """The project whose manifest was inspected."""

    name: str | None = None
    version: str | None = None
    path: str | None = None

    @classmethod
    def from_manifest(cls, document: dict[str, Any], path: str | None = None) -> PackageInfo:
        name = document.get("name")
        version = document.get("version")
        return cls(
            name=name if isinstance(name, str) else None,
            version=version if isinstance(version, str) else None,
            path=path,
        )


# ── check ──────────────────────────────────────────────────────────────────


class CheckItem(BaseModel):
    name: str
    current_version: str
    latest_version: str | None = None
    update_available: bool = False
    update_type: UpdateType | None = None
    vulnerabilities: list[VulnerabilityFinding] = Field(default_factory=list)
    dependency_type: DependencyKind
    range: VersionRangeInfo


class CheckSummary(BaseModel):
    total: int = 0
    up_to_date: int = 0
    outdated: int = 0
    major_updates: int = 0
    minor_updates: int = 0
    patch_updates: int = 0
    vulnerabilities: int = 0
    # Failed lookups; also counted in up_to_date.
    unknown: int = 0


class CheckReport(BaseModel):
    package: PackageInfo
    summary: CheckSummary
    dependencies: list[CheckItem]
    stats: DependencyStats


# ── update ─────────────────────────────────────────────────────────────────


class UpdateItem(BaseModel):
    name: str
    current_version: str
    current_range: VersionRangeInfo
    dependency_type: DependencyKind
    latest_version: str | None = None
    available_updates: list[UpdateCandidate] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)


class RecommendationRow(BaseModel):
    """A recommendation flattened with the dependency it belongs to."""

    package: str
    current_version: str
    dependency_type: DependencyKind
    bucket: UpdateBucket
    version: str
    priority: Priority
    breaking: bool
    rationale: str


class UpdateSummary(BaseModel):
    total: int = 0
    up_to_date: int = 0
    outdated: int = 0
    patch_updates: int = 0
    minor_updates: int = 0
    major_updates: int = 0
    unknown: int = 0


class UpdateReport(BaseModel):
    package: PackageInfo
    summary: UpdateSummary
    recommendations: list[RecommendationRow]
    packages: list[UpdateItem]
    include_major: bool = False


# ── audit ──────────────────────────────────────────────────────────────────


class AuditPackage(BaseModel):
    package: str
    current_version: str
    dependency_type: DependencyKind
    vulnerabilities: list[VulnerabilityFinding]


class AuditFindingRow(BaseModel):
    """A finding flattened with the dependency it was reported for."""

    package: str
    current_version: str
    dependency_type: DependencyKind
    finding: VulnerabilityFinding

    @property
    def severity(self) -> Severity:
        return self.finding.severity


class AuditSummary(BaseModel):
    total_vulnerabilities: int = 0
    affected_packages: int = 0
    severity_counts: dict[str, int] = Field(default_factory=dict)
    min_severity: Severity = "moderate"


class AuditReport(BaseModel):
    package: PackageInfo
    summary: AuditSummary
    vulnerabilities: list[AuditFindingRow]
    packages: list[AuditPackage]
    fixes: list[FixPlan] = Field(default_factory=list)
