"""Terminal renderers for check, update and audit reports."""

from __future__ import annotations

import csv
import io

import click

from depcheck.engines.registry.cache import CacheStats
from depcheck.engines.report.models import (
    AuditReport,
    CheckItem,
    CheckReport,
    PackageInfo,
    RecommendationRow,
    UpdateReport,
)
from depcheck.engines.report.update import plan_dry_run

OUTPUT_FORMATS = ("table", "json", "csv")

CSV_HEADER = [
    "Package",
    "Current Version",
    "Latest Version",
    "Update Type",
    "Dependency Type",
    "Vulnerabilities",
    "Update Available",
]

_BUCKET_COLORS = {"major": "red", "minor": "yellow", "patch": "blue"}
_SEVERITY_COLORS = {"critical": "red", "high": "red", "moderate": "yellow", "low": "blue"}
_STATUS_ICONS = {"major": "!", "minor": "~", "patch": "+"}


def _rule(width: int = 80) -> None:
    click.secho("─" * width, fg="bright_black")


def _package_header(package: PackageInfo) -> None:
    click.secho(f"Package: {package.name or 'unnamed'}@{package.version or '0.0.0'}", bold=True)


# ── check ──────────────────────────────────────────────────────────────────


def render_check(report: CheckReport, fmt: str = "table") -> None:
    fmt = fmt.lower()
    if fmt == "json":
        click.echo(report.model_dump_json(indent=2))
    elif fmt == "csv":
        click.echo(check_csv(report), nl=False)
    else:
        _check_table(report)


def check_csv(report: CheckReport) -> str:
    """One quoted row per dependency, in report order."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for dep in report.dependencies:
        writer.writerow(
            [
                dep.name,
                dep.current_version,
                dep.latest_version or "N/A",
                dep.update_type or "none",
                dep.dependency_type,
                len(dep.vulnerabilities),
                "true" if dep.update_available else "false",
            ]
        )
    return buf.getvalue()


def _status(dep: CheckItem) -> str:
    if dep.vulnerabilities:
        return click.style("vuln", fg="red")
    if dep.update_available:
        icon = _STATUS_ICONS.get(dep.update_type or "", "?")
        return click.style(icon, fg=_BUCKET_COLORS.get(dep.update_type or "", "bright_black"))
    if dep.latest_version is None:
        return click.style("?", fg="bright_black")
    return click.style("ok", fg="green")


def _check_table(report: CheckReport) -> None:
    summary = report.summary
    click.echo()
    click.secho("Dependency Check Report", bold=True, fg="blue")
    _rule()
    _package_header(report.package)
    if report.package.path:
        click.secho(f"Path: {report.package.path}", fg="bright_black")
    click.echo()

    click.secho("Summary:", bold=True)
    click.echo(f"  Total dependencies: {click.style(str(summary.total), fg='cyan')}")
    click.echo(f"  Up to date: {click.style(str(summary.up_to_date), fg='green')}")
    click.echo(f"  Outdated: {click.style(str(summary.outdated), fg='yellow')}")
    click.echo(f"  Major updates: {click.style(str(summary.major_updates), fg='red')}")
    click.echo(f"  Minor updates: {click.style(str(summary.minor_updates), fg='yellow')}")
    click.echo(f"  Patch updates: {click.style(str(summary.patch_updates), fg='blue')}")
    click.echo(f"  Vulnerabilities: {click.style(str(summary.vulnerabilities), fg='red')}")
    if summary.unknown:
        click.echo(f"  Lookup failures: {click.style(str(summary.unknown), fg='bright_black')}")
    click.echo()

    if report.dependencies:
        click.secho("Dependencies:", bold=True)
        _rule(120)
        header = (
            f"{'Package':<25}{'Current':<15}{'Latest':<15}{'Update':<10}"
            f"{'Type':<15}{'Vulns':<8}Status"
        )
        click.secho(header, bold=True)
        _rule(120)

        # outdated first, then by name
        ordered = sorted(report.dependencies, key=lambda d: (not d.update_available, d.name))
        for dep in ordered:
            update_type = dep.update_type or "none"
            row = (
                click.style(f"{dep.name:<25}", fg="cyan")
                + f"{dep.current_version:<15}"
                + f"{dep.latest_version or 'N/A':<15}"
                + click.style(f"{update_type:<10}", fg=_BUCKET_COLORS.get(update_type))
                + f"{dep.dependency_type:<15}"
                + f"{len(dep.vulnerabilities):<8}"
                + _status(dep)
            )
            click.echo(row)
        _rule(120)

    if summary.outdated:
        click.echo()
        click.secho("Recommendations:", bold=True)
        if summary.major_updates:
            click.secho(
                f"  {summary.major_updates} major updates available. "
                "Review carefully before updating.",
                fg="red",
            )
        if summary.minor_updates:
            click.secho(
                f"  {summary.minor_updates} minor updates available. "
                "Consider updating for new features.",
                fg="yellow",
            )
        if summary.patch_updates:
            click.secho(
                f"  {summary.patch_updates} patch updates available. "
                "Safe to update for bug fixes.",
                fg="blue",
            )
        click.secho(
            '  Run "depcheck update" for detailed update recommendations.',
            fg="bright_black",
        )

    if summary.vulnerabilities:
        click.secho(f"\n{summary.vulnerabilities} vulnerabilities found!", fg="red")
        click.secho('  Run "depcheck audit" for security details.', fg="bright_black")


def render_cache_stats(stats: CacheStats) -> None:
    click.secho(f"\nCache hits: {stats.hits}, misses: {stats.misses}", fg="bright_black", err=True)


# ── update ─────────────────────────────────────────────────────────────────


def render_update(report: UpdateReport, dry_run: bool = False) -> None:
    summary = report.summary
    click.echo()
    click.secho("Update Recommendations", bold=True, fg="blue")
    _rule()
    _package_header(report.package)
    if report.include_major:
        click.secho("  Including major version updates", fg="yellow")
    click.echo()

    click.secho("Summary:", bold=True)
    click.echo(f"  Total dependencies: {click.style(str(summary.total), fg='cyan')}")
    click.echo(f"  Up to date: {click.style(str(summary.up_to_date), fg='green')}")
    click.echo(f"  Has updates: {click.style(str(summary.outdated), fg='yellow')}")
    if summary.unknown:
        click.echo(f"  Lookup failures: {click.style(str(summary.unknown), fg='bright_black')}")
    click.echo()

    if not summary.outdated:
        click.secho("All dependencies are up to date!", fg="green")
        return

    click.secho("Update Breakdown:", bold=True)
    click.echo(f"  Patch updates: {click.style(str(summary.patch_updates), fg='blue')}")
    click.echo(f"  Minor updates: {click.style(str(summary.minor_updates), fg='yellow')}")
    click.echo(f"  Major updates: {click.style(str(summary.major_updates), fg='red')}")
    click.echo()

    by_bucket = plan_dry_run(report.recommendations)
    for bucket in ("patch", "minor", "major"):
        title = f"{bucket.capitalize()} Updates"
        _recommendation_block(title, by_bucket.get(bucket, []), _BUCKET_COLORS[bucket])

    click.secho("Update Commands:", bold=True)
    click.secho("  # Update all patch versions (safest)", fg="bright_black")
    click.secho("  npm update", fg="cyan")
    for bucket, note in (
        ("patch", "Update specific packages"),
        ("minor", "Update minor versions (review changes)"),
        ("major", "Update major versions (breaking changes)"),
    ):
        rows = by_bucket.get(bucket, [])
        if not rows:
            continue
        click.echo()
        click.secho(f"  # {note}", fg="bright_black")
        for rec in rows[:3]:
            click.secho(f"  npm install {rec.package}@{rec.version}", fg=_BUCKET_COLORS[bucket])

    if dry_run:
        render_dry_run(report.recommendations)


def _recommendation_block(title: str, rows: list[RecommendationRow], color: str) -> None:
    if not rows:
        return
    click.echo(click.style(title, bold=True, fg=color) + f" ({len(rows)})")
    _rule(60)
    for rec in rows:
        click.echo(f"[{rec.priority}] {click.style(rec.package, fg='cyan')}")
        click.echo(
            f"   Current: {rec.current_version} -> Latest: {click.style(rec.version, fg=color)}"
        )
        click.echo(f"   Reason: {rec.rationale}")
        if rec.breaking:
            click.secho("   Breaking changes possible", fg="red")
        click.echo()


def render_dry_run(rows: list[RecommendationRow]) -> None:
    click.echo()
    click.secho("Dry Run Mode:", bold=True)
    click.secho("The following updates would be applied:", fg="bright_black")
    click.echo()
    for bucket, selected in plan_dry_run(rows).items():
        click.secho(f"{bucket.upper()} Updates:", fg=_BUCKET_COLORS[bucket])
        for rec in selected:
            click.echo(f"  {rec.package}: {rec.current_version} -> {rec.version}")
        click.echo()
    click.secho("Dry run completed. No changes were made to package.json", fg="blue")
    click.secho("Run without --dry-run to apply these updates", fg="yellow")


# ── audit ──────────────────────────────────────────────────────────────────


def render_audit(report: AuditReport, fix: bool = False) -> None:
    summary = report.summary
    click.echo()
    click.secho("Security Audit Report", bold=True, fg="red")
    _rule()
    _package_header(report.package)
    click.secho(f"Minimum severity: {summary.min_severity}", fg="bright_black")
    click.echo()

    click.secho("Summary:", bold=True)
    click.echo(
        f"  Total vulnerabilities: {click.style(str(summary.total_vulnerabilities), fg='red')}"
    )
    click.echo(f"  Affected packages: {click.style(str(summary.affected_packages), fg='yellow')}")
    click.echo()

    click.secho("Severity Breakdown:", bold=True)
    for severity, count in summary.severity_counts.items():
        if count:
            styled = click.style(str(count), fg=_SEVERITY_COLORS[severity])
            click.echo(f"  {severity.upper()}: {styled}")
    click.echo()

    if not report.vulnerabilities:
        click.secho("No vulnerabilities found at the specified severity level!", fg="green")
        return

    click.secho("Vulnerabilities:", bold=True)
    _rule(120)
    for row in report.vulnerabilities:
        vuln = row.finding
        color = _SEVERITY_COLORS[vuln.severity]
        click.echo(click.style(vuln.severity.upper(), fg=color, bold=True) + f" - {vuln.id}")
        click.echo(f"  Package: {click.style(row.package, fg='cyan')}@{row.current_version}")
        if vuln.title:
            click.echo(f"  Title: {vuln.title}")
        if vuln.description:
            click.echo(f"  Description: {vuln.description}")
        click.echo(f"  Affected versions: {click.style(vuln.affected_range or 'N/A', fg='red')}")
        click.echo(f"  Fixed versions: {click.style(vuln.fixed_range or 'N/A', fg='green')}")
        if vuln.cwe:
            click.echo(f"  CWE: {click.style(vuln.cwe, fg='bright_black')}")
        click.echo()

    click.secho("Recommendations:", bold=True)
    click.secho("  - Update affected packages to fixed versions", fg="yellow")
    click.secho("  - Review and test changes before deploying", fg="yellow")
    click.secho('  - Consider using "depcheck update" for update recommendations', fg="yellow")

    if fix:
        render_fix_plan(report)


def render_fix_plan(report: AuditReport) -> None:
    click.echo()
    click.secho("Auto-fix Mode:", bold=True)
    if not report.fixes:
        click.secho("  No fixed versions are known for the affected packages.", fg="yellow")
    for plan in report.fixes:
        click.secho(f"  Would update {plan.package} to {plan.target_version}", fg="cyan")
    click.secho(
        "Auto-fix is in preview mode: package.json was not modified. "
        "Manual verification is recommended.",
        fg="yellow",
    )
