"""Custom exceptions for depcheck."""

from __future__ import annotations


class DepcheckError(Exception):
    """Base exception for all depcheck errors."""


class ManifestStructureError(DepcheckError):
    """Raised when a manifest document is not a JSON object."""


class RegistryError(DepcheckError):
    """Raised when a registry lookup fails (transport or HTTP error).

    *message* describes the failure and is wrapped in a standard prefix;
    pass *detail* instead to use it as the full message.
    """

    def __init__(
        self,
        package_name: str,
        message: str | None = None,
        *,
        detail: str | None = None,
    ):
        self.package_name = package_name
        super().__init__(detail or f"Failed to fetch package '{package_name}': {message}")


class PackageNotFoundError(RegistryError):
    """Raised when the registry has no package with the requested name."""

    def __init__(self, package_name: str):
        super().__init__(package_name, detail=f"Package '{package_name}' not found")
