"""
Pydantic Models for Audit Engine Payloads.

Provides data models for:
- AuditSummaryPayload / AuditResult: raw audit summary from the engine
- SummaryCounts / DisplayRow: render-ready snapshots built by the normalizer
- ComplianceAssessment / ComplianceControl: template assessment results
- TrendSummary: score history across a day window
- ExportResult: export documents produced by the engine

Raw models are lenient: unknown keys are ignored and values of the wrong
type fall back to defaults instead of failing validation. Payload keys are
camelCase on the wire; attributes are snake_case.
"""

import math
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Impact level of an audit finding."""

    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    PASS = "PASS"
    SKIPPED = "SKIPPED"
    INFO = "INFO"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_value(cls, value: Any) -> "Severity":
        """Map any value onto a severity, UNKNOWN when unrecognized."""
        if isinstance(value, Severity):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN


class ComplianceStatus(str, Enum):
    """Outcome of a single compliance control."""

    COMPLIANT = "Compliant"
    NON_COMPLIANT = "Non-Compliant"
    PARTIAL = "Partial Compliance"
    NOT_APPLICABLE = "Not Applicable"
    UNKNOWN = "Unknown"

    @classmethod
    def from_value(cls, value: Any) -> "ComplianceStatus":
        if isinstance(value, ComplianceStatus):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        wanted = value.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return cls.UNKNOWN


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class ExportKind(str, Enum):
    """Export documents the engine can generate."""

    CSV = "csv"
    XLSX = "xlsx"
    TREND_CSV = "trend-csv"


# Day windows the trend engine accepts
TREND_WINDOWS: Tuple[int, ...] = (7, 30, 90, 180, 365)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_number(value: Any) -> float:
    """Finite number from value, 0 for anything else (NaN and infinities too)."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, int):
        # Integers too large for a float are as unusable as infinity
        try:
            float(value)
        except OverflowError:
            return 0
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    return 0


def _as_count(value: Any) -> int:
    return int(_as_number(value))


def _as_records(value: Any) -> List[Mapping[str, Any]]:
    """Keep list entries that look like records, blank out the rest."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item if isinstance(item, (Mapping, BaseModel)) else {} for item in value]


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class _Snapshot(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class AuditResult(_Payload):
    """One test result as sent by the audit engine. Never mutated."""

    test_name: Optional[str] = None
    status: Optional[str] = None
    message: Optional[str] = None
    remediation_steps: Optional[str] = None

    @field_validator(
        "test_name", "status", "message", "remediation_steps", mode="before"
    )
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return _as_text(v)


class AuditSummaryPayload(_Payload):
    """Raw audit summary: score, grade, counts and the ordered results."""

    score: float = 0
    grade: Optional[str] = None
    grade_color: Optional[str] = None
    grade_label: Optional[str] = None
    critical_count: int = 0
    warning_count: int = 0
    pass_count: int = 0
    skipped_count: int = 0
    total_tests: int = 0
    results: List[AuditResult] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, v: Any) -> float:
        return _as_number(v)

    @field_validator(
        "critical_count",
        "warning_count",
        "pass_count",
        "skipped_count",
        "total_tests",
        mode="before",
    )
    @classmethod
    def _counts(cls, v: Any) -> int:
        return _as_count(v)

    @field_validator("grade", "grade_color", "grade_label", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return _as_text(v)

    @field_validator("results", mode="before")
    @classmethod
    def _results(cls, v: Any) -> List[Mapping[str, Any]]:
        return _as_records(v)


class SummaryCounts(_Snapshot):
    """Headline numbers shown above the results table."""

    score: float = 0
    grade: str = "A"
    grade_color: str = "green"
    grade_label: str = "Excellent security posture"
    critical_count: int = 0
    warning_count: int = 0
    pass_count: int = 0
    skipped_count: int = 0
    total_tests: int = 0


class DisplayRow(_Snapshot):
    """
    Render-ready audit result.

    Every derived field is a pure function of the source AuditResult, so a
    row is rebuilt on refresh rather than patched.
    """

    id: str
    test_name: str
    status: Severity
    message: str
    remediation_steps: str
    status_class: str
    severity_rank: int
    setup_url: Optional[str] = None
    has_setup_link: bool = False


class NormalizedAudit(_Snapshot):
    summary: SummaryCounts = Field(default_factory=SummaryCounts)
    rows: Tuple[DisplayRow, ...] = ()

    @classmethod
    def empty(cls) -> "NormalizedAudit":
        """Zeroed summary with no rows, used when loading fails."""
        return cls(summary=SummaryCounts(score=0), rows=())


class ComplianceTemplate(_Payload):
    id: str = ""
    name: str = ""
    description: str = ""

    @field_validator("id", "name", "description", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _as_text(v) or ""


class ComplianceControl(_Payload):
    """A single control evaluated by a compliance template."""

    control_id: str = ""
    name: str = ""
    category: str = ""
    status: ComplianceStatus = ComplianceStatus.UNKNOWN
    details: str = ""
    remediation_steps: str = ""

    @field_validator(
        "control_id", "name", "category", "details", "remediation_steps", mode="before"
    )
    @classmethod
    def _text(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> ComplianceStatus:
        return ComplianceStatus.from_value(v)


class ComplianceAssessment(_Payload):
    template_id: str = ""
    template_name: str = ""
    compliance_score: float = 0
    total_controls: int = 0
    passed_controls: int = 0
    failed_controls: int = 0
    not_applicable_controls: int = 0
    controls: List[ComplianceControl] = Field(default_factory=list)

    @field_validator("template_id", "template_name", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("compliance_score", mode="before")
    @classmethod
    def _score(cls, v: Any) -> float:
        return _as_number(v)

    @field_validator(
        "total_controls",
        "passed_controls",
        "failed_controls",
        "not_applicable_controls",
        mode="before",
    )
    @classmethod
    def _counts(cls, v: Any) -> int:
        return _as_count(v)

    @field_validator("controls", mode="before")
    @classmethod
    def _controls(cls, v: Any) -> List[Mapping[str, Any]]:
        return _as_records(v)


class TrendDataPoint(_Payload):
    health_score: float = 0
    snapshot_date: str = ""
    grade: Optional[str] = None

    @field_validator("health_score", mode="before")
    @classmethod
    def _score(cls, v: Any) -> float:
        return _as_number(v)

    @field_validator("snapshot_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("grade", mode="before")
    @classmethod
    def _grade(cls, v: Any) -> Optional[str]:
        return _as_text(v)


class TrendSummary(_Payload):
    """Score history over a day window."""

    day_window: int = 30
    current_score: float = 0
    average_score: float = 0
    highest_score: float = 0
    snapshot_count: int = 0
    trend_direction: TrendDirection = TrendDirection.STABLE
    score_trend: float = 0
    data_points: List[TrendDataPoint] = Field(default_factory=list)

    @field_validator(
        "current_score", "average_score", "highest_score", "score_trend", mode="before"
    )
    @classmethod
    def _scores(cls, v: Any) -> float:
        return _as_number(v)

    @field_validator("day_window", "snapshot_count", mode="before")
    @classmethod
    def _counts(cls, v: Any) -> int:
        return _as_count(v)

    @field_validator("trend_direction", mode="before")
    @classmethod
    def _direction(cls, v: Any) -> TrendDirection:
        if isinstance(v, TrendDirection):
            return v
        try:
            return TrendDirection(str(v).strip().lower())
        except ValueError:
            return TrendDirection.STABLE

    @field_validator("data_points", mode="before")
    @classmethod
    def _points(cls, v: Any) -> List[Mapping[str, Any]]:
        return _as_records(v)


class ExportResult(_Payload):
    """Export document returned by the engine; content is already rendered."""

    success: bool = False
    content: str = ""
    file_name: str = ""
    mime_type: str = "text/plain"
    error_message: Optional[str] = None

    @field_validator("success", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes")
        return bool(v)

    @field_validator("content", "file_name", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("mime_type", mode="before")
    @classmethod
    def _mime(cls, v: Any) -> str:
        return _as_text(v) or "text/plain"

    @field_validator("error_message", mode="before")
    @classmethod
    def _error(cls, v: Any) -> Optional[str]:
        return _as_text(v)
