"""Check pipeline — latest versions, update type and findings per dependency."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

import structlog

from depcheck.engines.advisories.models import VulnerabilityFinding
from depcheck.engines.manifest.extractor import dependency_stats
from depcheck.engines.manifest.models import DependencyRecord
from depcheck.engines.manifest.versions import parse_version
from depcheck.engines.registry.batch import lookup_all
from depcheck.engines.registry.client import NpmRegistryClient
from depcheck.engines.registry.models import RegistryLookupResult
from depcheck.engines.report.models import CheckItem, CheckReport, CheckSummary, PackageInfo
from depcheck.engines.updates.classifier import classify_update

log = structlog.get_logger("depcheck.engine")

# Baseline for declarations that are not exact versions.
_ZERO = parse_version("0.0.0")


def check_dependency(
    record: DependencyRecord,
    lookup: RegistryLookupResult,
    vulnerabilities: Sequence[VulnerabilityFinding] = (),
) -> CheckItem:
    """Compare one declared dependency with its registry data.

    A failed lookup, or a latest version that does not parse, leaves
    ``latest_version`` unset and ``update_available`` false. Range and
    invalid declarations are compared against ``0.0.0`` and get update type
    ``unknown``.
    """
    item = CheckItem(
        name=record.name,
        current_version=record.declared_version,
        dependency_type=record.kind,
        range=record.range,
        vulnerabilities=list(vulnerabilities),
    )

    latest = parse_version(lookup.latest_version)
    if latest is None:
        if lookup.latest_version is not None:
            log.warning(
                "check.invalid_latest",
                package=record.name,
                latest=lookup.latest_version,
            )
        return item

    current = parse_version(record.range.resolved_exact) or _ZERO
    item.latest_version = lookup.latest_version
    item.update_available = latest > current
    if item.update_available:
        item.update_type = classify_update(record.range.resolved_exact, lookup.latest_version)
    return item


def build_check_report(
    items: Sequence[CheckItem],
    package: PackageInfo,
    records: Mapping[str, DependencyRecord],
) -> CheckReport:
    """Aggregate per-dependency results into summary counters.

    ``up_to_date + outdated == total``; failed lookups fall into
    ``up_to_date`` and are also counted in ``unknown``.
    """
    summary = CheckSummary(
        total=len(items),
        up_to_date=sum(1 for i in items if not i.update_available),
        outdated=sum(1 for i in items if i.update_available),
        major_updates=sum(1 for i in items if i.update_type == "major"),
        minor_updates=sum(1 for i in items if i.update_type == "minor"),
        patch_updates=sum(1 for i in items if i.update_type == "patch"),
        vulnerabilities=sum(len(i.vulnerabilities) for i in items),
        unknown=sum(1 for i in items if i.latest_version is None),
    )
    return CheckReport(
        package=package,
        summary=summary,
        dependencies=list(items),
        stats=dependency_stats(records.values()),
    )


async def run_check(
    client: NpmRegistryClient,
    records: Mapping[str, DependencyRecord],
    package: PackageInfo,
) -> CheckReport:
    """Full check: batch lookups, findings for exact versions, aggregation.

    Items follow the extraction order of *records* whatever order the
    lookups complete in.
    """
    names = list(records)
    lookups = await lookup_all(client, names)

    async def _findings(record: DependencyRecord) -> list[VulnerabilityFinding]:
        if not record.range.resolved_exact:
            return []
        return await client.get_vulnerabilities(record.name, record.range.resolved_exact)

    findings = await asyncio.gather(*(_findings(records[name]) for name in names))

    items = [
        check_dependency(records[name], lookup, found)
        for name, lookup, found in zip(names, lookups, findings)
    ]
    report = build_check_report(items, package, records)
    log.info(
        "check.completed",
        total=report.summary.total,
        outdated=report.summary.outdated,
        unknown=report.summary.unknown,
    )
    return report
