"""Fix planner — advisory upgrade targets for vulnerable packages."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from depcheck.engines.advisories.models import FixPlan, VulnerabilityFinding
from depcheck.engines.manifest.versions import parse_version


def fixed_version(finding: VulnerabilityFinding) -> str | None:
    """The version named by a ``>=X.Y.Z`` fixed range, or None."""
    if not finding.fixed_range:
        return None
    text = finding.fixed_range.strip()
    if text.startswith(">="):
        text = text[2:]
    parsed = parse_version(text)
    return str(parsed) if parsed is not None else None


def plan_fixes(findings_by_package: Mapping[str, Iterable[VulnerabilityFinding]]) -> list[FixPlan]:
    """Pick the highest fixed version per package.

    Packages whose findings name no usable fixed version get no plan.
    Nothing is written; the plan is advisory.
    """
    plans: list[FixPlan] = []
    for package, findings in findings_by_package.items():
        findings = list(findings)
        targets = [v for v in (fixed_version(f) for f in findings) if v is not None]
        if not targets:
            continue
        best = max(targets, key=parse_version)
        plans.append(
            FixPlan(
                package=package,
                target_version=best,
                finding_ids=tuple(f.id for f in findings),
            )
        )
    return plans
