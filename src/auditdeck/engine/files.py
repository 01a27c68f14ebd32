"""
Directory-backed audit engine.

Serves engine payloads exported to disk, for offline review and demos:

    <data_dir>/audit_summary.json        audit summary payload
    <data_dir>/trends.json               trend summary, or {"<days>": summary, ...}
    <data_dir>/templates.json            compliance template list
    <data_dir>/compliance/<id>.json      assessment result per template
    <data_dir>/snapshots.json            snapshots saved through this engine

Exports are rendered from the same files. Spreadsheet export needs a
remote engine and is reported as unsuccessful.
"""

import csv
import io
import json
import os
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

import structlog

from ..audit.models import (
    AuditSummaryPayload,
    ComplianceAssessment,
    ComplianceTemplate,
    ExportKind,
    ExportResult,
    TrendSummary,
)
from ..core.errors import AuditEngineError
from .base import AuditEngine, check_trend_window, snapshot_template_name

log = structlog.get_logger()

SUMMARY_FILE = "audit_summary.json"
TRENDS_FILE = "trends.json"
TEMPLATES_FILE = "templates.json"
SNAPSHOTS_FILE = "snapshots.json"
COMPLIANCE_DIR = "compliance"

RESULT_COLUMNS = ["Test Name", "Status", "Message", "Remediation Steps"]
TREND_COLUMNS = ["Snapshot Date", "Health Score", "Grade"]


class FileAuditEngine(AuditEngine):
    def __init__(self, data_dir: str):
        self.data_dir = data_dir

    def _path(self, *parts: str) -> str:
        return os.path.join(self.data_dir, *parts)

    def _load_json(self, path: str, required: bool = True) -> Any:
        if not os.path.exists(path):
            if required:
                raise AuditEngineError(f"No audit data found at {path}")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("engine.file_parse_error", file=path, error=str(e))
            raise AuditEngineError(f"Could not read {path}: {e}") from e

    async def get_audit_summary(self) -> AuditSummaryPayload:
        data = self._load_json(self._path(SUMMARY_FILE))
        return AuditSummaryPayload.model_validate(data if isinstance(data, dict) else {})

    async def get_trend_summary(self, days: int) -> TrendSummary:
        check_trend_window(days)
        data = self._load_json(self._path(TRENDS_FILE), required=False)
        if isinstance(data, dict) and str(days) in data:
            data = data[str(days)]
        data = dict(data) if isinstance(data, dict) else {}
        data["dayWindow"] = days
        return TrendSummary.model_validate(data)

    async def list_templates(self) -> List[ComplianceTemplate]:
        data = self._load_json(self._path(TEMPLATES_FILE), required=False)
        if isinstance(data, list):
            return [
                ComplianceTemplate.model_validate(t) for t in data if isinstance(t, dict)
            ]

        # No index: one template per assessment file
        folder = self._path(COMPLIANCE_DIR)
        if not os.path.isdir(folder):
            return []
        return [
            ComplianceTemplate(id=name[:-5], name=name[:-5])
            for name in sorted(os.listdir(folder))
            if name.endswith(".json")
        ]

    async def run_assessment(self, template_id: str) -> ComplianceAssessment:
        if not template_id or os.path.basename(template_id) != template_id:
            raise AuditEngineError(f"Invalid compliance template id: {template_id!r}")
        data = self._load_json(self._path(COMPLIANCE_DIR, f"{template_id}.json"))
        data = dict(data) if isinstance(data, dict) else {}
        data.setdefault("templateId", template_id)
        return ComplianceAssessment.model_validate(data)

    async def save_snapshot(self, template_name: Optional[str] = None) -> str:
        summary = await self.get_audit_summary()
        path = self._path(SNAPSHOTS_FILE)
        snapshots = self._load_json(path, required=False)
        if not isinstance(snapshots, list):
            snapshots = []

        snapshot_id = uuid.uuid4().hex
        snapshots.append(
            {
                "id": snapshot_id,
                "templateName": snapshot_template_name(template_name),
                "savedAt": datetime.now(timezone.utc).isoformat(),
                "healthScore": summary.score,
                "grade": summary.grade,
            }
        )
        os.makedirs(self.data_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(snapshots, f, indent=2)

        log.info("engine.snapshot_saved", snapshot_id=snapshot_id, path=path)
        return snapshot_id

    async def export(self, kind: ExportKind, days: int = 30) -> ExportResult:
        kind = ExportKind(kind)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d")

        if kind is ExportKind.XLSX:
            return ExportResult(
                success=False,
                error_message="Spreadsheet export requires a remote audit engine",
            )

        buf = io.StringIO()
        writer = csv.writer(buf)
        if kind is ExportKind.CSV:
            summary = await self.get_audit_summary()
            writer.writerow(RESULT_COLUMNS)
            for r in summary.results:
                writer.writerow(
                    [
                        r.test_name or "",
                        r.status or "",
                        r.message or "",
                        r.remediation_steps or "",
                    ]
                )
            file_name = f"security_audit_{stamp}.csv"
        else:
            trend = await self.get_trend_summary(days)
            writer.writerow(TREND_COLUMNS)
            for p in trend.data_points:
                writer.writerow([p.snapshot_date, p.health_score, p.grade or ""])
            file_name = f"security_trends_{days}d_{stamp}.csv"

        return ExportResult(
            success=True,
            content=buf.getvalue(),
            file_name=file_name,
            mime_type="text/csv",
        )
