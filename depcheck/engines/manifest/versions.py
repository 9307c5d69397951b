"""Version specifier parsing — exact versions vs npm comparator ranges."""

from __future__ import annotations

from semantic_version import NpmSpec, Version

from depcheck.engines.manifest.models import VersionRangeInfo

# npm treats a leading "=" or "v" as decoration on an exact version.
_DECORATION = "=v"


def clean_version(text: str | None) -> str | None:
    """Return the canonical form of an exact version, or None.

    Surrounding whitespace and leading ``=``/``v`` characters are stripped;
    the rest must be a strict ``MAJOR.MINOR.PATCH[-pre][+build]`` version.
    Build metadata is dropped. Ranges such as ``^1.2.0`` do not clean.
    """
    version = parse_version(text)
    return str(version.truncate("prerelease")) if version is not None else None


def parse_version(text: str | None) -> Version | None:
    """Parse *text* as a strict semantic version, or return None."""
    if not text:
        return None
    candidate = text.strip().lstrip(_DECORATION)
    try:
        return Version(candidate)
    except ValueError:
        return None


def is_valid_range(text: str) -> bool:
    """True if *text* is a valid npm range expression (empty means ``*``)."""
    if not text.strip():
        return True
    try:
        NpmSpec(text)
    except ValueError:
        return False
    return True


def range_matches(expression: str, version: str) -> bool | None:
    """Check *version* against an npm range; None if either does not parse."""
    parsed = parse_version(version)
    if parsed is None:
        return None
    try:
        npm_range = NpmSpec(expression)
    except ValueError:
        return None
    return parsed in npm_range


def analyze_version_range(declared: str) -> VersionRangeInfo:
    """Classify a version specifier as exact, range or invalid.

    Never raises: an unparseable specifier yields the all-false result.
    """
    version = parse_version(declared)
    if version is not None:
        return VersionRangeInfo(
            original=declared,
            resolved_exact=str(version.truncate("prerelease")),
            is_exact=True,
            major=version.major,
            minor=version.minor,
            patch=version.patch,
        )

    if is_valid_range(declared):
        return VersionRangeInfo(original=declared, is_range=True)

    return VersionRangeInfo(original=declared)
