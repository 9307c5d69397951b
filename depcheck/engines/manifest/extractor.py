"""Dependency extractor — walk manifest sections into dependency records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from depcheck.engines.manifest.models import (
    DependencyKind,
    DependencyRecord,
    DependencyStats,
)
from depcheck.engines.manifest.versions import analyze_version_range
from depcheck.exceptions import ManifestStructureError

log = structlog.get_logger("depcheck.engine")

# Iteration order matters: later sections win on duplicate names.
DEPENDENCY_SECTIONS: tuple[tuple[str, DependencyKind], ...] = (
    ("dependencies", "runtime"),
    ("devDependencies", "dev"),
    ("peerDependencies", "peer"),
    ("optionalDependencies", "optional"),
)


def extract_dependencies(document: Mapping[str, Any]) -> dict[str, DependencyRecord]:
    """Return declared dependencies keyed by name.

    Sections that are missing or not objects are skipped. When a name is
    declared in several sections the last one in :data:`DEPENDENCY_SECTIONS`
    order is kept.

    Raises :class:`ManifestStructureError` if *document* is not a mapping.
    """
    if not isinstance(document, Mapping):
        raise ManifestStructureError(
            f"manifest must be a JSON object, got {type(document).__name__}"
        )

    records: dict[str, DependencyRecord] = {}
    for section, kind in DEPENDENCY_SECTIONS:
        entries = document.get(section)
        if not isinstance(entries, Mapping):
            continue
        for name, version in entries.items():
            declared = version if isinstance(version, str) else str(version)
            prev = records.get(name)
            if prev is not None:
                log.debug(
                    "extractor.dep_overwritten",
                    name=name,
                    old_kind=prev.kind,
                    new_kind=kind,
                )
            records[name] = DependencyRecord(
                name=name,
                declared_version=declared,
                kind=kind,
                range=analyze_version_range(declared),
            )
    return records


def dependency_stats(records: Iterable[DependencyRecord]) -> DependencyStats:
    """Count dependencies by kind and by version-specifier class."""
    stats = DependencyStats()
    for dep in records:
        stats.total += 1
        stats.by_kind[dep.kind] = stats.by_kind.get(dep.kind, 0) + 1
        if dep.range.is_exact:
            stats.exact_versions += 1
        elif dep.range.is_range:
            stats.range_versions += 1
        else:
            stats.invalid_versions += 1
    return stats
