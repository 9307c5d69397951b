"""Manifest engine — read package.json and classify declared dependencies."""

from depcheck.engines.manifest.extractor import dependency_stats, extract_dependencies
from depcheck.engines.manifest.models import (
    DependencyRecord,
    DependencyStats,
    ManifestReadResult,
    VersionRangeInfo,
)
from depcheck.engines.manifest.reader import read_manifest
from depcheck.engines.manifest.versions import analyze_version_range, clean_version

__all__ = [
    "DependencyRecord",
    "DependencyStats",
    "ManifestReadResult",
    "VersionRangeInfo",
    "analyze_version_range",
    "clean_version",
    "dependency_stats",
    "extract_dependencies",
    "read_manifest",
]
