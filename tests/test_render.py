"""
Tests for the rich renderables.

Renderables are printed to a recording console and checked as plain text.
"""

from rich.console import Console

from auditdeck.audit.models import ComplianceAssessment, SummaryCounts, TrendSummary
from auditdeck.audit.normalize import normalize
from auditdeck.audit.sorting import SortDirection
from auditdeck.ui.render import (
    assessment_table,
    link_for,
    remediation_cell,
    results_table,
    status_badge,
    summary_panel,
    trend_table,
)

from conftest import SAMPLE_ASSESSMENT, SAMPLE_TREND


def render(renderable) -> str:
    console = Console(record=True, width=160, color_system=None)
    console.print(renderable)
    return console.export_text()


def rows_for(payload):
    return normalize(payload).rows


def test_status_badge_label_and_style():
    badge = status_badge("CRITICAL")
    assert badge.plain == " CRITICAL "
    assert str(badge.style) == "bold white on red"
    assert status_badge("").plain == " UNKNOWN "


def test_link_for(sample_payload):
    rows = {r.test_name: r for r in rows_for(sample_payload)}
    row = rows["Session Timeout"]
    assert link_for(row) == row.setup_url
    assert link_for(row, "https://acme.my.salesforce.com/").startswith(
        "https://acme.my.salesforce.com/lightning/setup/"
    )
    assert link_for(rows["Password Policy"], "https://acme.my.salesforce.com") is None


def test_remediation_cell_appends_link(sample_payload):
    rows = {r.test_name: r for r in rows_for(sample_payload)}
    cell = remediation_cell(rows["Session Timeout"])
    assert "Open in Setup" in cell.plain
    assert remediation_cell(rows["Password Policy"]).plain == "-"


def test_summary_panel(sample_payload):
    text = render(summary_panel(normalize(sample_payload).summary))
    assert "72 / 100" in text
    assert "Grade C" in text
    assert "Critical: 1" in text
    assert "Total: 5" in text


def test_summary_panel_defaults():
    text = render(summary_panel(SummaryCounts()))
    assert "Grade A" in text
    assert "Excellent security posture" in text


def test_results_table(sample_payload):
    text = render(
        results_table(rows_for(sample_payload), sort_column="status", sort_direction="desc")
    )
    assert "Impact ▼" in text
    assert "Session Timeout" in text
    assert "Open in Setup" in text


def test_results_table_sort_marker_on_name():
    table = results_table([], sort_column="testName", sort_direction=SortDirection.ASC)
    assert table.columns[0].header == "Test Name ▲"
    assert table.columns[1].header == "Impact"


def test_empty_results_table():
    table = results_table([])
    assert table.row_count == 0
    assert table.caption == "No audit results"


def test_assessment_table_orders_failures_first():
    assessment = ComplianceAssessment.model_validate(SAMPLE_ASSESSMENT)
    text = render(assessment_table(assessment))
    assert "CIS Benchmark" in text
    assert "62.5% compliant" in text
    assert text.index("Session lock") < text.index("Login IP ranges") < text.index(
        "MFA enforced"
    )
    assert "Passed 2" in text


def test_trend_table():
    trend = TrendSummary.model_validate({**SAMPLE_TREND, "dayWindow": 30})
    text = render(trend_table(trend))
    assert "last 30 days" in text
    assert "improving (+6)" in text
    assert "68.5" in text
