"""
Audit Dashboard Controller.

Owns the dashboard state and the calls to the audit engine:
- Immutable state snapshots, replaced on every change
- Listener callbacks after each change
- Initial load and refresh with concurrent fetches
- Trend window changes that drop superseded responses
- Compliance assessment, snapshot and export actions with toast reporting
"""

import asyncio
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import structlog

from ..audit.models import (
    AuditSummaryPayload,
    ComplianceAssessment,
    ComplianceTemplate,
    DisplayRow,
    ExportKind,
    NormalizedAudit,
    SummaryCounts,
    TrendSummary,
)
from ..audit.normalize import normalize
from ..audit.sorting import STATUS_COLUMN, SortDirection, sort_rows
from ..core.errors import InvalidTrendWindow, extract_error_message
from ..engine.base import AuditEngine, check_trend_window
from .downloads import DownloadBlob, to_download

log = structlog.get_logger()


@dataclass(frozen=True)
class Toast:
    """Transient notification shown to the user."""

    title: str
    message: str
    variant: str = "error"


@dataclass(frozen=True)
class DashboardState:
    summary: SummaryCounts = field(default_factory=SummaryCounts)
    rows: Tuple[DisplayRow, ...] = ()
    sort_column: str = STATUS_COLUMN
    sort_direction: SortDirection = SortDirection.ASC
    trend_days: int = 30
    trend: Optional[TrendSummary] = None
    templates: Tuple[ComplianceTemplate, ...] = ()
    assessment: Optional[ComplianceAssessment] = None
    last_snapshot_id: Optional[str] = None
    is_loading: bool = True
    busy: bool = False
    error_message: str = ""

    @property
    def has_data(self) -> bool:
        return not self.is_loading and not self.error_message


class AuditDashboard:
    def __init__(
        self,
        engine: AuditEngine,
        sort_column: str = STATUS_COLUMN,
        sort_direction: Union[str, SortDirection] = SortDirection.ASC,
        trend_days: int = 30,
        notifier: Optional[Callable[[Toast], None]] = None,
    ):
        self.engine = engine
        self._state = DashboardState(
            sort_column=sort_column,
            sort_direction=SortDirection.parse(sort_direction),
            trend_days=check_trend_window(trend_days),
        )
        self._callbacks: List[Callable[[DashboardState], None]] = []
        self._notifier = notifier
        self._busy_count = 0
        self._trend_generation = 0

    @classmethod
    def from_settings(
        cls,
        engine: AuditEngine,
        settings,
        notifier: Optional[Callable[[Toast], None]] = None,
    ) -> "AuditDashboard":
        return cls(
            engine,
            sort_column=settings.dashboard.sort_column,
            sort_direction=settings.dashboard.sort_direction,
            trend_days=settings.dashboard.trend_days,
            notifier=notifier,
        )

    @property
    def state(self) -> DashboardState:
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # State and notifications
    # ─────────────────────────────────────────────────────────────────────────

    def register_callback(self, callback: Callable[[DashboardState], None]) -> None:
        """Register a callback to be called with each new state."""
        self._callbacks.append(callback)

    def set_notifier(self, notifier: Callable[[Toast], None]) -> None:
        self._notifier = notifier

    def _notify(self) -> None:
        for callback in self._callbacks:
            try:
                callback(self._state)
            except Exception as e:
                log.warning("dashboard.callback_error", error=str(e))

    def _set_state(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        self._notify()

    def _toast(self, title: str, message: str, variant: str = "error") -> None:
        if self._notifier:
            self._notifier(Toast(title=title, message=message, variant=variant))

    def _begin_busy(self) -> None:
        self._busy_count += 1
        self._set_state(busy=True)

    def _end_busy(self) -> None:
        self._busy_count = max(0, self._busy_count - 1)
        self._set_state(busy=self._busy_count > 0, is_loading=False)

    def _next_trend_generation(self) -> int:
        self._trend_generation += 1
        return self._trend_generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._trend_generation

    def _summary_changes(self, payload: AuditSummaryPayload) -> Dict[str, Any]:
        normalized = normalize(payload)
        rows = sort_rows(
            normalized.rows, self._state.sort_column, self._state.sort_direction
        )
        return {"summary": normalized.summary, "rows": tuple(rows)}

    # ─────────────────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────────────────

    async def load(self) -> bool:
        """
        Initial load of summary, templates and trend.

        Any failure puts the dashboard in its error state with zeroed
        summary and no rows.
        """
        generation = self._next_trend_generation()
        self._set_state(is_loading=True)
        try:
            payload, templates, trend = await asyncio.gather(
                self.engine.get_audit_summary(),
                self.engine.list_templates(),
                self.engine.get_trend_summary(self._state.trend_days),
            )
        except Exception as e:
            log.error("dashboard.load_failed", error=str(e))
            empty = NormalizedAudit.empty()
            self._set_state(
                summary=empty.summary,
                rows=empty.rows,
                templates=(),
                trend=None,
                error_message=extract_error_message(e),
                is_loading=False,
            )
            return False

        changes = self._summary_changes(payload)
        changes.update(templates=tuple(templates), error_message="", is_loading=False)
        if self._is_current(generation):
            changes["trend"] = trend
        self._set_state(**changes)
        log.info("dashboard.loaded", rows=len(changes["rows"]))
        return True

    async def refresh(self) -> bool:
        """Re-fetch summary and trend together; the first failure is reported."""
        generation = self._next_trend_generation()
        days = self._state.trend_days
        self._begin_busy()
        try:
            payload, trend = await asyncio.gather(
                self.engine.get_audit_summary(),
                self.engine.get_trend_summary(days),
            )
            changes = self._summary_changes(payload)
            changes["error_message"] = ""
            if self._is_current(generation):
                changes["trend"] = trend
            else:
                log.info("dashboard.stale_response_ignored", days=days)
            self._set_state(**changes)
            self._toast("Refreshed", "Audit results are up to date.", "success")
            return True
        except Exception as e:
            log.warning("dashboard.refresh_failed", error=str(e))
            self._toast("Refresh failed", extract_error_message(e))
            return False
        finally:
            self._end_busy()

    async def set_trend_window(self, days: int) -> bool:
        """Switch the trend window; responses for older windows are dropped."""
        try:
            check_trend_window(days)
        except InvalidTrendWindow as e:
            self._toast("Invalid trend window", str(e), "warning")
            return False

        generation = self._next_trend_generation()
        self._set_state(trend_days=days)
        self._begin_busy()
        try:
            trend = await self.engine.get_trend_summary(days)
        except Exception as e:
            if self._is_current(generation):
                log.warning("dashboard.trend_failed", days=days, error=str(e))
                self._toast("Trend analysis failed", extract_error_message(e))
            return False
        finally:
            self._end_busy()

        if not self._is_current(generation):
            log.info("dashboard.stale_response_ignored", days=days)
            return False
        self._set_state(trend=trend)
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Table
    # ─────────────────────────────────────────────────────────────────────────

    def sort(
        self, column: str, direction: Union[str, SortDirection] = SortDirection.ASC
    ) -> Tuple[DisplayRow, ...]:
        """Sort current rows and remember the column and direction."""
        direction = SortDirection.parse(direction)
        rows = tuple(sort_rows(self._state.rows, column, direction))
        self._set_state(rows=rows, sort_column=column, sort_direction=direction)
        return rows

    # ─────────────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────────────

    async def run_assessment(self, template_id: str) -> Optional[ComplianceAssessment]:
        if not template_id:
            self._toast(
                "No template selected", "Select a compliance template first.", "warning"
            )
            return None

        self._begin_busy()
        try:
            assessment = await self.engine.run_assessment(template_id)
            self._set_state(assessment=assessment)
            self._toast(
                "Assessment complete",
                f"Compliance score: {assessment.compliance_score:g}%",
                "success",
            )
            return assessment
        except Exception as e:
            log.warning("dashboard.assessment_failed", template=template_id, error=str(e))
            self._toast("Assessment failed", extract_error_message(e))
            return None
        finally:
            self._end_busy()

    async def save_snapshot(self, template_name: Optional[str] = None) -> Optional[str]:
        self._begin_busy()
        try:
            snapshot_id = await self.engine.save_snapshot(template_name)
            self._set_state(last_snapshot_id=snapshot_id)
            self._toast("Snapshot saved", f"Snapshot {snapshot_id} saved.", "success")
            return snapshot_id
        except Exception as e:
            log.warning("dashboard.snapshot_failed", error=str(e))
            self._toast("Snapshot failed", extract_error_message(e))
            return None
        finally:
            self._end_busy()

    async def export(
        self, kind: Union[str, ExportKind], days: Optional[int] = None
    ) -> Optional[DownloadBlob]:
        self._begin_busy()
        try:
            kind = ExportKind(kind)
            result = await self.engine.export(kind, days or self._state.trend_days)
            blob = to_download(result)
            self._toast("Export ready", f"{blob.file_name} is ready.", "success")
            return blob
        except Exception as e:
            log.warning("dashboard.export_failed", kind=str(kind), error=str(e))
            self._toast("Export failed", extract_error_message(e))
            return None
        finally:
            self._end_busy()
