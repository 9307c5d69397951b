"""Data models for the advisory engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Severity = Literal["low", "moderate", "high", "critical"]

SEVERITY_LEVELS: tuple[Severity, ...] = ("low", "moderate", "high", "critical")


@dataclass(frozen=True)
class VulnerabilityFinding:
    """A known vulnerability affecting a package."""

    id: str
    severity: Severity
    title: str = ""
    description: str = ""
    affected_range: str | None = None
    fixed_range: str | None = None
    cwe: str | None = None


@dataclass(frozen=True)
class FixPlan:
    """Advisory upgrade target that clears every finding of one package."""

    package: str
    target_version: str
    finding_ids: tuple[str, ...]
