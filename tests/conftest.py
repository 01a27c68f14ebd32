import asyncio
import json
from typing import Dict, List, Optional

import pytest

from auditdeck.audit.models import (
    AuditSummaryPayload,
    ComplianceAssessment,
    ComplianceTemplate,
    ExportKind,
    ExportResult,
    TrendSummary,
)
from auditdeck.core.errors import AuditEngineError
from auditdeck.engine.base import AuditEngine, check_trend_window, snapshot_template_name


SAMPLE_PAYLOAD = {
    "score": 72,
    "grade": "C",
    "gradeColor": "orange",
    "gradeLabel": "Needs attention",
    "criticalCount": 1,
    "warningCount": 1,
    "passCount": 1,
    "skippedCount": 1,
    "totalTests": 5,
    "results": [
        {
            "testName": "Session Timeout",
            "status": "WARNING",
            "message": "Session timeout is 24 hours",
            "remediationSteps": "Go to Setup > Security > Session Settings.",
        },
        {
            "testName": "Admin Permission Sets",
            "status": "CRITICAL",
            "message": "3 permission sets grant Modify All Data",
            "remediationSteps": "Please go to Setup > Users > Permission Sets.",
        },
        {
            "testName": "Password Policy",
            "status": "PASS",
            "message": "Password policy meets guidance",
            "remediationSteps": "",
        },
        {
            "testName": "Event Monitoring",
            "status": "SKIPPED",
            "message": "Event monitoring not licensed",
            "remediationSteps": "No action required.",
        },
        {
            "testName": "API Version",
            "status": "INFO",
            "message": "Org is on the latest API version",
        },
    ],
}

SAMPLE_TREND = {
    "currentScore": 72,
    "averageScore": 68.5,
    "highestScore": 80,
    "snapshotCount": 4,
    "trendDirection": "improving",
    "scoreTrend": 6,
    "dataPoints": [
        {"snapshotDate": "2026-10-01", "healthScore": 60, "grade": "D"},
        {"snapshotDate": "2026-10-08", "healthScore": 66, "grade": "D"},
        {"snapshotDate": "2026-10-15", "healthScore": 80, "grade": "B"},
        {"snapshotDate": "2026-10-18", "healthScore": 72, "grade": "C"},
    ],
}

SAMPLE_ASSESSMENT = {
    "templateName": "CIS Benchmark",
    "complianceScore": 62.5,
    "totalControls": 4,
    "passedControls": 2,
    "failedControls": 1,
    "notApplicableControls": 1,
    "controls": [
        {"controlId": "1.1", "name": "MFA enforced", "status": "Compliant"},
        {"controlId": "1.2", "name": "Session lock", "status": "Non-Compliant"},
        {"controlId": "2.1", "name": "Field audit", "status": "Not Applicable"},
        {"controlId": "2.2", "name": "Login IP ranges", "status": "Partial Compliance"},
    ],
}


class FakeEngine(AuditEngine):
    """In-memory engine with per-call failure switches and trend gates."""

    def __init__(self, payload: Optional[Dict] = None):
        self.payload = payload if payload is not None else SAMPLE_PAYLOAD
        self.trend = SAMPLE_TREND
        self.fail: Dict[str, Exception] = {}
        self.trend_gates: Dict[int, asyncio.Event] = {}
        self.calls: List[str] = []
        self.snapshots: List[str] = []
        self.export_result = ExportResult(
            success=True,
            content="Test Name,Status\nSession Timeout,WARNING\n",
            fileName="security_audit.csv",
            mimeType="text/csv",
        )

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail:
            raise self.fail[name]

    async def get_audit_summary(self) -> AuditSummaryPayload:
        self._maybe_fail("summary")
        return AuditSummaryPayload.model_validate(self.payload)

    async def get_trend_summary(self, days: int) -> TrendSummary:
        check_trend_window(days)
        self._maybe_fail("trend")
        gate = self.trend_gates.get(days)
        if gate is not None:
            await gate.wait()
        return TrendSummary.model_validate({**self.trend, "dayWindow": days})

    async def list_templates(self) -> List[ComplianceTemplate]:
        self._maybe_fail("templates")
        return [ComplianceTemplate(id="cis", name="CIS Benchmark")]

    async def run_assessment(self, template_id: str) -> ComplianceAssessment:
        self._maybe_fail("assessment")
        return ComplianceAssessment.model_validate(
            {**SAMPLE_ASSESSMENT, "templateId": template_id}
        )

    async def save_snapshot(self, template_name: Optional[str] = None) -> str:
        self._maybe_fail("snapshot")
        self.snapshots.append(snapshot_template_name(template_name))
        return f"snap-{len(self.snapshots)}"

    async def export(self, kind: ExportKind, days: int = 30) -> ExportResult:
        self._maybe_fail("export")
        return self.export_result


@pytest.fixture
def sample_payload():
    return json.loads(json.dumps(SAMPLE_PAYLOAD))


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def engine_error():
    return AuditEngineError(
        "HTTP 500", body={"message": "Audit engine is down"}, status_code=500
    )


@pytest.fixture
def data_dir(tmp_path):
    """Directory laid out for FileAuditEngine."""
    root = tmp_path / "audit-data"
    root.mkdir()
    (root / "audit_summary.json").write_text(json.dumps(SAMPLE_PAYLOAD))
    (root / "trends.json").write_text(json.dumps({"30": SAMPLE_TREND}))
    (root / "compliance").mkdir()
    (root / "compliance" / "cis.json").write_text(json.dumps(SAMPLE_ASSESSMENT))
    return root
