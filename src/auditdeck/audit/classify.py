"""
Status classification tables.

Maps audit severities, compliance control statuses and trend directions
onto the CSS tokens, badge classes, terminal styles and sort ranks used by
the dashboard. All tables are read-only.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from .models import ComplianceStatus, Severity, TrendDirection


@dataclass(frozen=True)
class StatusStyle:
    """Presentation attributes for one severity level."""

    css_class: str
    severity_rank: int
    badge_class: str
    style: str
    icon: str


STATUS_STYLES: Mapping[Severity, StatusStyle] = MappingProxyType(
    {
        Severity.CRITICAL: StatusStyle(
            "badge badge-inverse badge-critical",
            1,
            "impact-badge impact-critical",
            "bold white on red",
            "🔴",
        ),
        Severity.WARNING: StatusStyle(
            "badge badge-warning",
            2,
            "impact-badge impact-warning",
            "bold black on yellow",
            "🟠",
        ),
        Severity.PASS: StatusStyle(
            "badge badge-pass",
            3,
            "impact-badge impact-pass",
            "bold white on green",
            "🟢",
        ),
        # SKIPPED and INFO look the same but keep separate ranks
        Severity.SKIPPED: StatusStyle(
            "badge badge-info", 4, "impact-badge impact-info", "white on blue", "⚪"
        ),
        Severity.INFO: StatusStyle(
            "badge badge-info", 5, "impact-badge impact-info", "white on blue", "⚪"
        ),
        Severity.UNKNOWN: StatusStyle("badge", 6, "impact-badge", "dim", "❓"),
    }
)


def classify(status: Any) -> StatusStyle:
    """Classify a raw status value; anything unrecognized is UNKNOWN."""
    return STATUS_STYLES[Severity.from_value(status)]


def badge_class(status: Any) -> str:
    """CSS class for the impact badge cell."""
    return classify(status).badge_class


@dataclass(frozen=True)
class ControlStyle:
    css_class: str
    rank: int
    style: str


CONTROL_STYLES: Mapping[ComplianceStatus, ControlStyle] = MappingProxyType(
    {
        ComplianceStatus.NON_COMPLIANT: ControlStyle(
            "badge badge-inverse badge-critical", 1, "bold white on red"
        ),
        ComplianceStatus.PARTIAL: ControlStyle(
            "badge badge-warning", 2, "bold black on yellow"
        ),
        ComplianceStatus.COMPLIANT: ControlStyle(
            "badge badge-pass", 3, "bold white on green"
        ),
        ComplianceStatus.NOT_APPLICABLE: ControlStyle(
            "badge badge-info", 4, "white on blue"
        ),
        ComplianceStatus.UNKNOWN: ControlStyle("badge", 5, "dim"),
    }
)


def classify_control(status: Any) -> ControlStyle:
    return CONTROL_STYLES[ComplianceStatus.from_value(status)]


@dataclass(frozen=True)
class TrendStyle:
    css_class: str
    icon: str
    style: str


TREND_STYLES: Mapping[TrendDirection, TrendStyle] = MappingProxyType(
    {
        TrendDirection.IMPROVING: TrendStyle("trend trend-improving", "▲", "green"),
        TrendDirection.DECLINING: TrendStyle("trend trend-declining", "▼", "red"),
        TrendDirection.STABLE: TrendStyle("trend trend-stable", "▶", "blue"),
    }
)


def classify_trend(direction: Any) -> TrendStyle:
    """Style for a trend direction; unrecognized directions read as stable."""
    try:
        key = TrendDirection(str(getattr(direction, "value", direction)).lower())
    except ValueError:
        key = TrendDirection.STABLE
    return TREND_STYLES[key]
