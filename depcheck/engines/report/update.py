"""Update pipeline — per-bucket recommendations for every dependency."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import structlog

from depcheck.engines.manifest.models import DependencyRecord
from depcheck.engines.registry.batch import lookup_all
from depcheck.engines.registry.client import NpmRegistryClient
from depcheck.engines.registry.models import RegistryLookupResult
from depcheck.engines.report.models import (
    PackageInfo,
    RecommendationRow,
    UpdateItem,
    UpdateReport,
    UpdateSummary,
)
from depcheck.engines.updates.recommender import (
    BUCKET_ORDER,
    find_update_candidates,
    recommend_updates,
)

log = structlog.get_logger("depcheck.engine")


def update_dependency(
    record: DependencyRecord,
    lookup: RegistryLookupResult,
    include_major: bool = False,
) -> UpdateItem:
    """Recommend updates for one dependency; none when the lookup failed."""
    item = UpdateItem(
        name=record.name,
        current_version=record.declared_version,
        current_range=record.range,
        dependency_type=record.kind,
    )
    if not lookup.ok:
        return item

    item.latest_version = lookup.latest_version
    item.available_updates = find_update_candidates(
        record.range, lookup.all_versions, include_major
    )
    item.recommendations = recommend_updates(item.available_updates, include_major)
    return item


def build_update_report(
    items: Sequence[UpdateItem],
    package: PackageInfo,
    include_major: bool = False,
) -> UpdateReport:
    """Flatten recommendations and count them.

    A dependency is up to date when it has no recommendation, which
    includes failed lookups (also counted in ``unknown``).
    """
    rows = [
        RecommendationRow(
            package=item.name,
            current_version=item.current_version,
            dependency_type=item.dependency_type,
            bucket=rec.bucket,
            version=rec.version,
            priority=rec.priority,
            breaking=rec.breaking,
            rationale=rec.rationale,
        )
        for item in items
        for rec in item.recommendations
    ]
    summary = UpdateSummary(
        total=len(items),
        up_to_date=sum(1 for i in items if not i.recommendations),
        outdated=sum(1 for i in items if i.recommendations),
        patch_updates=sum(1 for r in rows if r.bucket == "patch"),
        minor_updates=sum(1 for r in rows if r.bucket == "minor"),
        major_updates=sum(1 for r in rows if r.bucket == "major"),
        unknown=sum(1 for i in items if i.latest_version is None),
    )
    return UpdateReport(
        package=package,
        summary=summary,
        recommendations=rows,
        packages=list(items),
        include_major=include_major,
    )


def plan_dry_run(rows: Sequence[RecommendationRow]) -> dict[str, list[RecommendationRow]]:
    """Group recommendations by bucket in patch, minor, major order.

    Empty buckets are omitted. Nothing is applied.
    """
    plan: dict[str, list[RecommendationRow]] = {}
    for bucket in BUCKET_ORDER:
        selected = [r for r in rows if r.bucket == bucket]
        if selected:
            plan[bucket] = selected
    return plan


async def run_update(
    client: NpmRegistryClient,
    records: Mapping[str, DependencyRecord],
    package: PackageInfo,
    include_major: bool = False,
) -> UpdateReport:
    names = list(records)
    lookups = await lookup_all(client, names)
    items = [
        update_dependency(records[name], lookup, include_major)
        for name, lookup in zip(names, lookups)
    ]
    report = build_update_report(items, package, include_major)
    log.info(
        "update.completed",
        total=report.summary.total,
        outdated=report.summary.outdated,
        recommendations=len(report.recommendations),
    )
    return report
