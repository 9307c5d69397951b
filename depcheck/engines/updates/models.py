"""Data models for the update engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

UpdateBucket = Literal["patch", "minor", "major"]
UpdateType = Literal["none", "patch", "minor", "major", "unknown"]
Priority = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class UpdateCandidate:
    """A published version newer than the current one."""

    version: str
    bucket: UpdateBucket
    breaking: bool


@dataclass(frozen=True)
class Recommendation:
    """The single suggested update for one bucket of one dependency."""

    bucket: UpdateBucket
    version: str
    priority: Priority
    breaking: bool
    rationale: str
