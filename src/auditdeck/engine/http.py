import asyncio
import os
from typing import Any, Dict, List, Optional

import requests
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
from ..core.logging import mask_token
from .base import AuditEngine, check_trend_window, snapshot_template_name

log = structlog.get_logger()

API_PREFIX = "/api/v1"


def _create_session(verify_ssl: bool = True) -> requests.Session:
    """
    Create requests session with SSL configuration.

    Failed calls are reported, never retried, so no retry adapter is mounted.
    """
    session = requests.Session()
    session.verify = verify_ssl

    # Set custom CA bundle if provided
    ca_bundle = os.environ.get("REQUESTS_CA_BUNDLE")
    if ca_bundle and verify_ssl:
        session.verify = ca_bundle

    session.headers.update({"Accept": "application/json"})
    return session


class HttpAuditEngine(AuditEngine):
    """Audit engine reached over JSON/HTTP."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout_sec: int = 30,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise AuditEngineError("Audit engine base_url is not configured")
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout_sec = timeout_sec
        self.session = session or _create_session(verify_ssl)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{API_PREFIX}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout_sec,
                **kwargs,
            )
        except requests.RequestException as e:
            log.warning(
                "engine.request_failed",
                url=url,
                token_masked=mask_token(self.token),
                error=str(e),
            )
            raise AuditEngineError(f"Audit engine unreachable: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = (
                body.get("message") if isinstance(body, dict) else None
            ) or f"Audit engine returned HTTP {response.status_code}"
            log.warning(
                "engine.http_error",
                url=url,
                status=response.status_code,
                error=message,
            )
            raise AuditEngineError(
                message, body=body, status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            log.warning("engine.invalid_json", url=url)
            raise AuditEngineError("Audit engine returned invalid JSON") from e

    async def _call(self, method: str, path: str, **kwargs) -> Any:
        return await asyncio.to_thread(self._request, method, path, **kwargs)

    async def get_audit_summary(self) -> AuditSummaryPayload:
        data = await self._call("GET", "/audit/summary")
        return AuditSummaryPayload.model_validate(data if isinstance(data, dict) else {})

    async def get_trend_summary(self, days: int) -> TrendSummary:
        check_trend_window(days)
        data = await self._call("GET", "/audit/trends", params={"days": days})
        data = dict(data) if isinstance(data, dict) else {}
        data.setdefault("dayWindow", days)
        return TrendSummary.model_validate(data)

    async def list_templates(self) -> List[ComplianceTemplate]:
        data = await self._call("GET", "/compliance/templates")
        if isinstance(data, dict):
            data = data.get("templates", [])
        if not isinstance(data, list):
            return []
        return [ComplianceTemplate.model_validate(t) for t in data if isinstance(t, dict)]

    async def run_assessment(self, template_id: str) -> ComplianceAssessment:
        data = await self._call(
            "POST", "/compliance/assessments", json={"templateId": template_id}
        )
        data = dict(data) if isinstance(data, dict) else {}
        data.setdefault("templateId", template_id)
        return ComplianceAssessment.model_validate(data)

    async def save_snapshot(self, template_name: Optional[str] = None) -> str:
        name = snapshot_template_name(template_name)
        data = await self._call("POST", "/snapshots", json={"templateName": name})
        snapshot_id = data.get("id") if isinstance(data, dict) else data
        if not snapshot_id:
            raise AuditEngineError("Audit engine did not return a snapshot id")
        log.info("engine.snapshot_saved", snapshot_id=str(snapshot_id), template=name)
        return str(snapshot_id)

    async def export(self, kind: ExportKind, days: int = 30) -> ExportResult:
        kind = ExportKind(kind)
        params = {}
        if kind is ExportKind.TREND_CSV:
            params["days"] = check_trend_window(days)
        data = await self._call("GET", f"/exports/{kind.value}", params=params)
        return ExportResult.model_validate(data if isinstance(data, dict) else {})
