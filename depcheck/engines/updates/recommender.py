"""Update recommender — newest candidate per bucket with a fixed priority."""

from __future__ import annotations

from collections.abc import Iterable

from depcheck.engines.manifest.models import VersionRangeInfo
from depcheck.engines.manifest.versions import parse_version
from depcheck.engines.updates.classifier import classify_update
from depcheck.engines.updates.models import Priority, Recommendation, UpdateBucket, UpdateCandidate

BUCKET_ORDER: tuple[UpdateBucket, ...] = ("patch", "minor", "major")

_PRIORITY: dict[UpdateBucket, Priority] = {
    "patch": "high",
    "minor": "medium",
    "major": "low",
}

_RATIONALE: dict[UpdateBucket, str] = {
    "patch": "Safe bug fixes and improvements",
    "minor": "New features and improvements",
    "major": "Major version with potential breaking changes",
}


def find_update_candidates(
    current: VersionRangeInfo,
    versions: Iterable[str],
    include_major: bool = False,
) -> list[UpdateCandidate]:
    """List published versions newer than *current*, newest first.

    Nothing is returned when *current* is not an exact version. Versions
    that do not parse are ignored; major candidates are dropped unless
    *include_major* is set.
    """
    baseline = parse_version(current.resolved_exact) if current.is_exact else None
    if baseline is None:
        return []

    parsed = [(v, parse_version(v)) for v in versions]
    newer = sorted(
        ((v, p) for v, p in parsed if p is not None and p > baseline),
        key=lambda pair: pair[1],
        reverse=True,
    )

    candidates: list[UpdateCandidate] = []
    for version, _ in newer:
        bucket = classify_update(current.resolved_exact, version)
        if bucket not in BUCKET_ORDER:
            # newer only by pre-release tag
            continue
        if bucket == "major" and not include_major:
            continue
        candidates.append(
            UpdateCandidate(version=version, bucket=bucket, breaking=bucket == "major")
        )
    return candidates


def recommend_updates(
    candidates: Iterable[UpdateCandidate],
    include_major: bool = False,
) -> list[Recommendation]:
    """Pick the first (newest) candidate of each bucket.

    *candidates* must be ordered newest first, as returned by
    :func:`find_update_candidates`. At most one recommendation per bucket is
    produced, in patch, minor, major order; major only with *include_major*.
    """
    newest: dict[UpdateBucket, UpdateCandidate] = {}
    for candidate in candidates:
        newest.setdefault(candidate.bucket, candidate)

    recommendations: list[Recommendation] = []
    for bucket in BUCKET_ORDER:
        candidate = newest.get(bucket)
        if candidate is None:
            continue
        if bucket == "major" and not include_major:
            continue
        recommendations.append(
            Recommendation(
                bucket=bucket,
                version=candidate.version,
                priority=_PRIORITY[bucket],
                breaking=bucket == "major",
                rationale=_RATIONALE[bucket],
            )
        )
    return recommendations
