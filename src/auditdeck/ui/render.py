"""
Rich renderables for audit results.

Provides:
- Status badges styled from the classification table
- Summary panel with score gauge and counts
- Results table with setup deep links
- Compliance assessment and trend tables
"""

from typing import Iterable, Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..audit.classify import classify, classify_control, classify_trend
from ..audit.gauge import score_bar, score_color
from ..audit.models import (
    ComplianceAssessment,
    DisplayRow,
    SummaryCounts,
    TrendSummary,
)
from ..audit.sorting import SortDirection, resolve_column, sort_controls

# (header, column key) in display order
RESULT_COLUMNS = [
    ("Test Name", "testName"),
    ("Impact", "status"),
    ("Message", "message"),
    ("Remediation Steps", "remediationSteps"),
]


def status_badge(status) -> Text:
    style = classify(status)
    label = getattr(status, "value", status) or "UNKNOWN"
    return Text(f" {label} ", style=style.style)


def link_for(row: DisplayRow, instance_url: str = "") -> Optional[str]:
    """Absolute link for a row's setup page, if it has one."""
    if not row.setup_url:
        return None
    return f"{instance_url.rstrip('/')}{row.setup_url}" if instance_url else row.setup_url


def remediation_cell(row: DisplayRow, instance_url: str = "") -> Text:
    """Remediation text, followed by a setup link when one resolved."""
    text = Text(row.remediation_steps)
    link = link_for(row, instance_url)
    if link:
        text.append("\n")
        text.append("Open in Setup ↗", style=f"link {link} underline cyan")
    return text


def format_score(score: float) -> str:
    return f"{score:g}"


def summary_panel(summary: SummaryCounts) -> Panel:
    color = score_color(summary.score)
    gauge = Text()
    gauge.append(score_bar(summary.score), style=color)
    gauge.append(f"  {format_score(summary.score)} / 100", style=f"bold {color}")

    grade = Text()
    grade.append(f"Grade {summary.grade}", style=f"bold {summary.grade_color}")
    grade.append(f"  {summary.grade_label}")

    counts = Table.grid(expand=True)
    for _ in range(5):
        counts.add_column(justify="center", ratio=1)
    counts.add_row(
        Text(f"Critical: {summary.critical_count}", style="bold red"),
        Text(f"Warning: {summary.warning_count}", style="bold yellow"),
        Text(f"Pass: {summary.pass_count}", style="bold green"),
        Text(f"Skipped: {summary.skipped_count}", style="blue"),
        Text(f"Total: {summary.total_tests}", style="bold"),
    )
    return Panel(Group(gauge, grade, counts), title="🛡️  Security Score", border_style=color)


def _header(title: str, key: str, sort_column: Optional[str], direction: SortDirection) -> str:
    if sort_column and resolve_column(sort_column) == resolve_column(key):
        return f"{title} {'▲' if direction is SortDirection.ASC else '▼'}"
    return title


def results_table(
    rows: Iterable[DisplayRow],
    instance_url: str = "",
    sort_column: Optional[str] = None,
    sort_direction=SortDirection.ASC,
) -> Table:
    direction = SortDirection.parse(sort_direction)
    table = Table(expand=True, border_style="dim", show_lines=False)
    table.add_column(_header("Test Name", "testName", sort_column, direction), ratio=3)
    table.add_column(_header("Impact", "status", sort_column, direction), no_wrap=True)
    table.add_column(_header("Message", "message", sort_column, direction), ratio=4)
    table.add_column("Remediation Steps", ratio=4)

    for row in rows:
        table.add_row(
            row.test_name,
            status_badge(row.status),
            row.message,
            remediation_cell(row, instance_url),
        )

    if not table.row_count:
        table.caption = "No audit results"
    return table


def assessment_table(assessment: ComplianceAssessment) -> Table:
    title = assessment.template_name or assessment.template_id or "Compliance"
    table = Table(
        title=f"{title} — {format_score(assessment.compliance_score)}% compliant",
        expand=True,
        border_style="dim",
    )
    table.add_column("Control", no_wrap=True)
    table.add_column("Name", ratio=3)
    table.add_column("Category")
    table.add_column("Status", no_wrap=True)
    table.add_column("Details", ratio=4)

    for control in sort_controls(assessment.controls):
        style = classify_control(control.status)
        table.add_row(
            control.control_id,
            control.name,
            control.category,
            Text(f" {control.status.value} ", style=style.style),
            control.details,
        )

    table.caption = (
        f"Passed {assessment.passed_controls} · Failed {assessment.failed_controls} · "
        f"N/A {assessment.not_applicable_controls} · Total {assessment.total_controls}"
    )
    return table


def trend_table(trend: TrendSummary) -> Table:
    style = classify_trend(trend.trend_direction)
    table = Table(title=f"Trend — last {trend.day_window} days", expand=True, border_style="dim")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Current score", format_score(trend.current_score))
    table.add_row("Average score", format_score(trend.average_score))
    table.add_row("Highest score", format_score(trend.highest_score))
    table.add_row("Snapshots", str(trend.snapshot_count))
    table.add_row(
        "Direction",
        Text(
            f"{style.icon} {trend.trend_direction.value} ({trend.score_trend:+g})",
            style=style.style,
        ),
    )
    return table
