"""
Audit results presentation pipeline.

- Status classification and badge styling
- Setup-path deep-link resolution
- Payload normalization into display rows
- Severity-aware row sorting
"""

from .classify import StatusStyle, badge_class, classify
from .models import (
    AuditResult,
    AuditSummaryPayload,
    ComplianceAssessment,
    ComplianceControl,
    ComplianceStatus,
    ComplianceTemplate,
    DisplayRow,
    ExportKind,
    ExportResult,
    NormalizedAudit,
    Severity,
    SummaryCounts,
    TrendDirection,
    TrendSummary,
)
from .normalize import normalize
from .setup_paths import GENERIC_SETUP_URL, SETUP_URL_TABLE, resolve_setup_url
from .sorting import SortDirection, sort_rows

__all__ = [
    "AuditResult",
    "AuditSummaryPayload",
    "ComplianceAssessment",
    "ComplianceControl",
    "ComplianceStatus",
    "ComplianceTemplate",
    "DisplayRow",
    "ExportKind",
    "ExportResult",
    "NormalizedAudit",
    "Severity",
    "SummaryCounts",
    "TrendDirection",
    "TrendSummary",
    "StatusStyle",
    "badge_class",
    "classify",
    "normalize",
    "GENERIC_SETUP_URL",
    "SETUP_URL_TABLE",
    "resolve_setup_url",
    "SortDirection",
    "sort_rows",
]
