"""Audit pipeline — severity-filtered findings per dependency."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import structlog

from depcheck.engines.advisories.fixes import plan_fixes
from depcheck.engines.advisories.models import Severity, VulnerabilityFinding
from depcheck.engines.advisories.severity import count_by_severity, filter_findings, sort_findings
from depcheck.engines.manifest.models import DependencyRecord
from depcheck.engines.registry.batch import settle_all
from depcheck.engines.registry.client import NpmRegistryClient
from depcheck.engines.report.models import (
    AuditFindingRow,
    AuditPackage,
    AuditReport,
    AuditSummary,
    PackageInfo,
)

log = structlog.get_logger("depcheck.engine")


def audit_dependency(
    record: DependencyRecord,
    findings: Sequence[VulnerabilityFinding],
    threshold: Severity,
) -> AuditPackage | None:
    """Findings at or above *threshold* for one dependency, or None if none."""
    kept = filter_findings(findings, threshold)
    if not kept:
        return None
    return AuditPackage(
        package=record.name,
        current_version=record.declared_version,
        dependency_type=record.kind,
        vulnerabilities=kept,
    )


def build_audit_report(
    packages: Sequence[AuditPackage],
    package: PackageInfo,
    threshold: Severity,
    with_fixes: bool = False,
) -> AuditReport:
    """Flatten findings critical first and count them per severity."""
    rows = sort_findings(
        (
            AuditFindingRow(
                package=p.package,
                current_version=p.current_version,
                dependency_type=p.dependency_type,
                finding=finding,
            )
            for p in packages
            for finding in p.vulnerabilities
        ),
        key=lambda row: row.severity,
    )
    summary = AuditSummary(
        total_vulnerabilities=len(rows),
        affected_packages=len(packages),
        severity_counts=count_by_severity(row.finding for row in rows),
        min_severity=threshold,
    )
    fixes = plan_fixes({p.package: p.vulnerabilities for p in packages}) if with_fixes else []
    return AuditReport(
        package=package,
        summary=summary,
        vulnerabilities=rows,
        packages=list(packages),
        fixes=fixes,
    )


async def run_audit(
    client: NpmRegistryClient,
    records: Mapping[str, DependencyRecord],
    package: PackageInfo,
    threshold: Severity,
    with_fixes: bool = False,
) -> AuditReport:
    """Query findings for every dependency and keep those above *threshold*.

    Exact declarations are queried by their cleaned version, anything else
    by the declared text. At most ``max_concurrency`` queries run at once.
    """
    deps = list(records.values())
    outcomes = await settle_all(
        deps,
        lambda dep: client.get_vulnerabilities(
            dep.name, dep.range.resolved_exact or dep.declared_version
        ),
        limit=client.settings.max_concurrency,
    )

    packages: list[AuditPackage] = []
    for dep, outcome in zip(deps, outcomes):
        if not outcome.ok:
            log.warning("audit.lookup_failed", package=dep.name, error=str(outcome.error))
            continue
        audited = audit_dependency(dep, outcome.value or [], threshold)
        if audited is not None:
            packages.append(audited)

    report = build_audit_report(packages, package, threshold, with_fixes)
    log.info(
        "audit.completed",
        findings=report.summary.total_vulnerabilities,
        affected=report.summary.affected_packages,
    )
    return report
