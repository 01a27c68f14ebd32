from typing import Any, Mapping

import structlog
from pydantic import BaseModel

from .classify import classify
from .models import (
    AuditResult,
    AuditSummaryPayload,
    DisplayRow,
    NormalizedAudit,
    Severity,
    SummaryCounts,
)
from .setup_paths import resolve_setup_url

log = structlog.get_logger()

DEFAULT_TEST_NAME = "Unknown Test"
DEFAULT_REMEDIATION = "-"


def _to_payload(raw: Any) -> AuditSummaryPayload:
    if isinstance(raw, AuditSummaryPayload):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        return AuditSummaryPayload()
    return AuditSummaryPayload.model_validate(dict(raw))


def build_row(index: int, result: AuditResult) -> DisplayRow:
    """Derive the display row for the result at position index."""
    raw_status = (result.status or "").strip()
    status = Severity.from_value(raw_status) if raw_status else Severity.INFO
    style = classify(status)

    # Links come from the text as sent, not from the "-" placeholder
    setup_url = resolve_setup_url(result.remediation_steps)

    return DisplayRow(
        id=f"result-{index}",
        test_name=result.test_name or DEFAULT_TEST_NAME,
        status=status,
        message=result.message or "",
        remediation_steps=result.remediation_steps or DEFAULT_REMEDIATION,
        status_class=style.css_class,
        severity_rank=style.severity_rank,
        setup_url=setup_url,
        has_setup_link=setup_url is not None,
    )


def normalize(raw: Any) -> NormalizedAudit:
    """
    Turn a raw audit summary into a summary and render-ready rows.

    Never raises: missing or malformed fields fall back to defaults so a
    partially populated payload still renders.
    """
    payload = _to_payload(raw)

    summary = SummaryCounts(
        score=payload.score,
        grade=payload.grade or "A",
        grade_color=payload.grade_color or "green",
        grade_label=payload.grade_label or "Excellent security posture",
        critical_count=payload.critical_count,
        warning_count=payload.warning_count,
        pass_count=payload.pass_count,
        skipped_count=payload.skipped_count,
        total_tests=payload.total_tests,
    )
    rows = tuple(build_row(i, result) for i, result in enumerate(payload.results))

    log.debug("audit.normalized", rows=len(rows), score=summary.score)
    return NormalizedAudit(summary=summary, rows=rows)
