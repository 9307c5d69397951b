"""Update classifier — size of the delta between two versions."""

from __future__ import annotations

from depcheck.engines.manifest.versions import parse_version
from depcheck.engines.updates.models import UpdateType


def classify_update(current: str | None, candidate: str | None) -> UpdateType:
    """Classify *candidate* relative to *current* as none/patch/minor/major.

    Compares major, then minor, then patch numerically; the first component
    that differs decides, and an older candidate is ``"none"``. Pre-release
    and build suffixes are ignored. Returns ``"unknown"`` if either side is
    missing or not a strict version.
    """
    cur = parse_version(current)
    new = parse_version(candidate)
    if cur is None or new is None:
        return "unknown"

    for bucket, old_part, new_part in (
        ("major", cur.major, new.major),
        ("minor", cur.minor, new.minor),
        ("patch", cur.patch, new.patch),
    ):
        if new_part > old_part:
            return bucket  # type: ignore[return-value]
        if new_part < old_part:
            return "none"
    return "none"
