"""Manifest reader — load package.json without raising."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from depcheck.engines.manifest.models import ManifestReadResult

log = structlog.get_logger("depcheck.engine")


def read_manifest(path: str | Path) -> ManifestReadResult:
    """Read and parse a manifest file.

    Missing files, decoding errors, invalid JSON and a non-object top level
    all produce ``success=False`` with a human-readable ``error``.
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
        document = json.loads(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.debug("manifest.read_failed", path=str(file_path), error=str(exc))
        return ManifestReadResult(success=False, path=str(file_path), error=_describe(exc))

    if not isinstance(document, dict):
        return ManifestReadResult(
            success=False,
            path=str(file_path),
            error=f"expected a JSON object, got {type(document).__name__}",
        )

    return ManifestReadResult(success=True, path=str(file_path), document=document)


def _describe(exc: Exception) -> str:
    if isinstance(exc, FileNotFoundError):
        return f"no such file: {exc.filename}"
    if isinstance(exc, OSError):
        return exc.strerror or str(exc)
    return str(exc)
