"""Data models for the registry engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RegistryLookupResult:
    """Version data for one package.

    ``latest_version is None`` means the lookup failed; ``error`` then
    carries the reason.
    """

    package_name: str
    latest_version: str | None = None
    all_versions: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.latest_version is not None
