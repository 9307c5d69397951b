"""Report engine — check, update and audit pipelines plus report schemas."""

from depcheck.engines.report.audit import audit_dependency, build_audit_report, run_audit
from depcheck.engines.report.check import build_check_report, check_dependency, run_check
from depcheck.engines.report.models import (
    AuditReport,
    CheckReport,
    PackageInfo,
    UpdateReport,
)
from depcheck.engines.report.update import (
    build_update_report,
    plan_dry_run,
    run_update,
    update_dependency,
)

__all__ = [
    "AuditReport",
    "CheckReport",
    "PackageInfo",
    "UpdateReport",
    "audit_dependency",
    "build_audit_report",
    "build_check_report",
    "check_dependency",
    "plan_dry_run",
    "run_audit",
    "run_check",
    "run_update",
    "update_dependency",
]
