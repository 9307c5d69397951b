"""Data models for the manifest engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

DependencyKind = Literal["runtime", "dev", "peer", "optional"]


@dataclass(frozen=True)
class VersionRangeInfo:
    """Classification of a declared version specifier.

    ``is_exact`` and ``is_range`` are never both true; both are false only
    for an unparseable specifier. ``resolved_exact`` and the numeric parts
    are set iff ``is_exact``.
    """

    original: str
    resolved_exact: str | None = None
    is_exact: bool = False
    is_range: bool = False
    major: int | None = None
    minor: int | None = None
    patch: int | None = None


@dataclass(frozen=True)
class DependencyRecord:
    """A single dependency declared in a manifest."""

    name: str
    declared_version: str
    kind: DependencyKind
    range: VersionRangeInfo


@dataclass
class ManifestReadResult:
    """Outcome of reading a manifest file; failure is a normal return value."""

    success: bool
    path: str
    document: dict[str, Any] | None = None
    error: str | None = None


@dataclass
class DependencyStats:
    total: int = 0
    by_kind: dict[str, int] = field(default_factory=dict)
    exact_versions: int = 0
    range_versions: int = 0
    invalid_versions: int = 0
