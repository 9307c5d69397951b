"""Advisory engine — vulnerability sources, severity filtering, fix plans."""

from depcheck.engines.advisories.fixes import plan_fixes
from depcheck.engines.advisories.models import (
    SEVERITY_LEVELS,
    FixPlan,
    Severity,
    VulnerabilityFinding,
)
from depcheck.engines.advisories.severity import (
    count_by_severity,
    filter_findings,
    parse_severity,
    severity_rank,
    sort_findings,
)
from depcheck.engines.advisories.sources import (
    AdvisoryDatabaseError,
    AdvisorySource,
    JsonAdvisorySource,
    NullAdvisorySource,
)

__all__ = [
    "SEVERITY_LEVELS",
    "AdvisoryDatabaseError",
    "AdvisorySource",
    "FixPlan",
    "JsonAdvisorySource",
    "NullAdvisorySource",
    "Severity",
    "VulnerabilityFinding",
    "count_by_severity",
    "filter_findings",
    "parse_severity",
    "plan_fixes",
    "severity_rank",
    "sort_findings",
]
