"""Severity classifier — threshold filtering and critical-first ordering."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from depcheck.engines.advisories.models import SEVERITY_LEVELS, Severity, VulnerabilityFinding

T = TypeVar("T")

_RANK: dict[str, int] = {level: idx for idx, level in enumerate(SEVERITY_LEVELS)}


def severity_rank(severity: str) -> int:
    """Rank in ``low < moderate < high < critical``; unknown levels rank -1."""
    return _RANK.get(severity.lower(), -1)


def parse_severity(value: str) -> Severity:
    """Normalize a user-supplied threshold; raises ValueError if unknown."""
    level = value.strip().lower()
    if level not in _RANK:
        raise ValueError(
            f"unknown severity {value!r} (expected one of: {', '.join(SEVERITY_LEVELS)})"
        )
    return level  # type: ignore[return-value]


def filter_findings(
    findings: Iterable[VulnerabilityFinding],
    threshold: Severity,
) -> list[VulnerabilityFinding]:
    """Keep findings at or above *threshold*, preserving input order.

    Duplicates are passed through unchanged.
    """
    minimum = severity_rank(threshold)
    return [f for f in findings if severity_rank(f.severity) >= minimum]


def sort_findings(
    findings: Iterable[T],
    key: Callable[[T], str] = lambda f: f.severity,
) -> list[T]:
    """Order items critical first; equal severities keep input order.

    *key* extracts the severity string, so report rows that wrap a finding
    can be sorted the same way.
    """
    return sorted(findings, key=lambda item: -severity_rank(key(item)))


def count_by_severity(findings: Iterable[VulnerabilityFinding]) -> dict[str, int]:
    """Count findings per level, highest first, all four levels present."""
    counts = {level: 0 for level in reversed(SEVERITY_LEVELS)}
    for finding in findings:
        if finding.severity in counts:
            counts[finding.severity] += 1
    return counts
