"""
Audit engine capability set.

The engine owns scoring, compliance evaluation, snapshot storage and
export rendering. This package only consumes the result shapes, so every
capability is an awaitable returning a parsed model.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..audit.models import (
    TREND_WINDOWS,
    AuditSummaryPayload,
    ComplianceAssessment,
    ComplianceTemplate,
    ExportKind,
    ExportResult,
    TrendSummary,
)
from ..core.errors import InvalidTrendWindow

NO_TEMPLATE = "None"


def check_trend_window(days: int) -> int:
    if days not in TREND_WINDOWS:
        raise InvalidTrendWindow(
            f"Unsupported trend window {days}; expected one of {list(TREND_WINDOWS)}"
        )
    return days


def snapshot_template_name(template_name: Optional[str]) -> str:
    """Snapshots without a template are saved under the literal "None"."""
    if template_name and template_name.strip():
        return template_name.strip()
    return NO_TEMPLATE


class AuditEngine(ABC):
    @abstractmethod
    async def get_audit_summary(self) -> AuditSummaryPayload:
        """Fetch the latest audit summary."""

    @abstractmethod
    async def get_trend_summary(self, days: int) -> TrendSummary:
        """Fetch score history for the last `days` days."""

    @abstractmethod
    async def list_templates(self) -> List[ComplianceTemplate]:
        """List compliance templates available for assessment."""

    @abstractmethod
    async def run_assessment(self, template_id: str) -> ComplianceAssessment:
        """Evaluate a compliance template against the current audit."""

    @abstractmethod
    async def save_snapshot(self, template_name: Optional[str] = None) -> str:
        """Persist the current summary; returns the snapshot id."""

    @abstractmethod
    async def export(self, kind: ExportKind, days: int = 30) -> ExportResult:
        """Render an export document. `days` applies to trend exports."""
