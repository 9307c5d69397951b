"""CLI entry point: depcheck.

Subcommands:
    depcheck check  -p package.json --format json   # Freshness report
    depcheck audit  -p package.json --severity high # Security findings
    depcheck update -p package.json --major         # Update recommendations
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable
from typing import NoReturn, TypeVar

import click
import structlog

from depcheck import __version__
from depcheck.core.config import RegistrySettings
from depcheck.core.logging import setup_logging
from depcheck.engines.advisories.models import SEVERITY_LEVELS
from depcheck.engines.advisories.severity import parse_severity
from depcheck.engines.advisories.sources import (
    AdvisoryDatabaseError,
    AdvisorySource,
    JsonAdvisorySource,
)
from depcheck.engines.manifest.extractor import extract_dependencies
from depcheck.engines.manifest.models import DependencyRecord
from depcheck.engines.manifest.reader import read_manifest
from depcheck.engines.registry.client import NpmRegistryClient
from depcheck.engines.report.audit import run_audit
from depcheck.engines.report.check import run_check
from depcheck.engines.report.models import (
    AuditReport,
    CheckReport,
    PackageInfo,
    UpdateReport,
)
from depcheck.engines.report.update import run_update
from depcheck.exceptions import DepcheckError
from depcheck.render import (
    OUTPUT_FORMATS,
    render_audit,
    render_cache_stats,
    render_check,
    render_update,
)

log = structlog.get_logger("depcheck.cli")

T = TypeVar("T")

_DEFAULT_MANIFEST = "./package.json"

# Per-command registry defaults
_CHECK_CONCURRENCY = 10
_AUDIT_CONCURRENCY = 5
_AUDIT_CACHE_TTL = 1800.0
_UPDATE_CONCURRENCY = 10

_path_option = click.option(
    "-p",
    "--path",
    default=_DEFAULT_MANIFEST,
    show_default=True,
    help="Path to package.json",
)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_manifest(path: str) -> tuple[dict[str, DependencyRecord], PackageInfo]:
    """Read the manifest and extract dependencies, exiting 1 on failure."""
    result = read_manifest(path)
    if not result.success or result.document is None:
        _fail(f"Failed to read package.json: {result.error}")
    try:
        records = extract_dependencies(result.document)
    except DepcheckError as exc:
        _fail(f"Failed to read package.json: {exc}")
    return records, PackageInfo.from_manifest(result.document, path=result.path)


def _run(coro: Awaitable[T], context: str) -> T:
    """Run a pipeline coroutine; any unhandled error exits with status 1."""
    try:
        return asyncio.run(coro)  # type: ignore[arg-type]
    except Exception as exc:
        log.exception("cli.unhandled_error", context=context)
        _fail(f"{context}: {exc}")


@click.group()
@click.version_option(__version__, prog_name="depcheck")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """depcheck: check npm dependencies for updates and vulnerabilities."""
    setup_logging("DEBUG" if verbose else None)


@main.command("check")
@_path_option
@click.option(
    "-d",
    "--depth",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Depth of dependency tree (only direct dependencies are checked)",
)
@click.option("--cache/--no-cache", default=True, help="Disable caching for fresh results")
@click.option(
    "--parallel",
    type=click.IntRange(min=1),
    default=_CHECK_CONCURRENCY,
    show_default=True,
    help="Number of parallel requests",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format",
)
def check(path: str, depth: int, cache: bool, parallel: int, fmt: str) -> None:
    """Check dependencies for updates and vulnerabilities."""
    records, package = _load_manifest(path)
    if not records:
        click.echo("No dependencies found in package.json")
        return
    if depth > 1:
        log.info("check.depth_ignored", depth=depth)

    settings = RegistrySettings.from_env().with_overrides(max_concurrency=parallel)
    if not cache:
        settings = settings.with_overrides(cache_ttl=0.0)

    async def _check() -> tuple[CheckReport, NpmRegistryClient]:
        async with NpmRegistryClient(settings) as client:
            return await run_check(client, records, package), client

    report, client = _run(_check(), "Dependency check failed")
    render_check(report, fmt)
    if client.caching_enabled:
        render_cache_stats(client.cache_stats())


@main.command("audit")
@_path_option
@click.option(
    "--severity",
    type=click.Choice(SEVERITY_LEVELS, case_sensitive=False),
    default="moderate",
    show_default=True,
    help="Minimum severity level",
)
@click.option("--fix", is_flag=True, help="Show the upgrades that would fix vulnerabilities")
@click.option(
    "--advisories",
    type=click.Path(exists=True, dir_okay=False),
    envvar="DEPCHECK_ADVISORIES",
    default=None,
    help="JSON advisory database ({package: [finding, ...]})",
)
def audit(path: str, severity: str, fix: bool, advisories: str | None) -> None:
    """Security audit of dependencies."""
    records, package = _load_manifest(path)
    if not records:
        click.echo("No dependencies found to audit")
        return

    source: AdvisorySource | None = None
    if advisories:
        try:
            source = JsonAdvisorySource(advisories)
        except AdvisoryDatabaseError as exc:
            _fail(str(exc))

    threshold = parse_severity(severity)
    settings = RegistrySettings.from_env().with_overrides(
        max_concurrency=_AUDIT_CONCURRENCY, cache_ttl=_AUDIT_CACHE_TTL
    )

    async def _audit() -> AuditReport:
        async with NpmRegistryClient(settings, advisory_source=source) as client:
            return await run_audit(client, records, package, threshold, with_fixes=fix)

    report = _run(_audit(), "Security audit failed")
    render_audit(report, fix=fix)


@main.command("update")
@_path_option
@click.option("--major", is_flag=True, help="Include major version updates")
@click.option("--dry-run", is_flag=True, help="Show what would be updated without making changes")
def update(path: str, major: bool, dry_run: bool) -> None:
    """Get update recommendations for dependencies."""
    records, package = _load_manifest(path)
    if not records:
        click.echo("No dependencies found to check for updates")
        return

    settings = RegistrySettings.from_env().with_overrides(max_concurrency=_UPDATE_CONCURRENCY)

    async def _update() -> UpdateReport:
        async with NpmRegistryClient(settings) as client:
            return await run_update(client, records, package, include_major=major)

    report = _run(_update(), "Update check failed")
    render_update(report, dry_run=dry_run)


if __name__ == "__main__":
    main()
