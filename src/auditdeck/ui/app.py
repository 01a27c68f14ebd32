"""
Audit Dashboard TUI.

Features:
- Score gauge and counts above the results table
- Click a column header to sort; click again to flip the direction
- Refresh, CSV export and trend window switching from the keyboard
- Failures reported as toast notifications
"""

from typing import Optional

from textual.app import App, ComposeResult
from textual.widgets import DataTable, Footer, Header, Static

from ..audit.models import TREND_WINDOWS, ExportKind
from ..audit.sorting import SortDirection, resolve_column
from ..dashboard.controller import AuditDashboard, DashboardState, Toast
from ..dashboard.downloads import write_blob
from .render import (
    RESULT_COLUMNS,
    remediation_cell,
    status_badge,
    summary_panel,
    trend_table,
)

TOAST_SEVERITY = {"success": "information", "info": "information", "warning": "warning"}


class AuditDashboardApp(App):
    """Interactive audit results dashboard."""

    TITLE = "auditdeck"
    SUB_TITLE = "Security audit results"

    CSS = """
    #summary {
        height: auto;
        margin: 0 1;
    }
    #trend {
        height: auto;
        margin: 0 1;
    }
    #error {
        height: auto;
        margin: 1 2;
        padding: 1 2;
        border: heavy red;
        color: red;
    }
    #results {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("r", "refresh", "Refresh"),
        ("e", "export_csv", "Export CSV"),
        ("t", "cycle_trend", "Trend window"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        dashboard: AuditDashboard,
        out_dir: str = "exports",
        instance_url: str = "",
    ):
        super().__init__()
        self.dashboard = dashboard
        self.out_dir = out_dir
        self.instance_url = instance_url
        self.last_export_path: Optional[str] = None
        self._table_ready = False
        dashboard.register_callback(self._on_state)
        dashboard.set_notifier(self._on_toast)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="summary")
        yield Static("", id="trend")
        yield Static("", id="error")
        yield DataTable(id="results", zebra_stripes=True, cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#results", DataTable)
        for title, key in RESULT_COLUMNS:
            table.add_column(title, key=key)
        self._table_ready = True
        self._render_state(self.dashboard.state)
        self.run_worker(self.dashboard.load(), group="dashboard")

    def _on_state(self, state: DashboardState) -> None:
        if self._table_ready:
            self._render_state(state)

    def _on_toast(self, toast: Toast) -> None:
        self.notify(
            toast.message,
            title=toast.title,
            severity=TOAST_SEVERITY.get(toast.variant, "error"),
        )

    def _render_state(self, state: DashboardState) -> None:
        table = self.query_one("#results", DataTable)
        error = self.query_one("#error", Static)

        table.loading = state.is_loading or state.busy
        error.display = bool(state.error_message)
        error.update(state.error_message)
        table.display = not state.error_message

        self.query_one("#summary", Static).update(summary_panel(state.summary))
        self.query_one("#trend", Static).update(
            trend_table(state.trend) if state.trend else ""
        )

        table.clear()
        for row in state.rows:
            table.add_row(
                row.test_name,
                status_badge(row.status),
                row.message,
                remediation_cell(row, self.instance_url),
                key=row.id,
            )

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        column = str(event.column_key.value)
        state = self.dashboard.state
        if resolve_column(column) == resolve_column(state.sort_column):
            direction = state.sort_direction.toggled()
        else:
            direction = SortDirection.ASC
        self.dashboard.sort(column, direction)

    def action_refresh(self) -> None:
        self.run_worker(self.dashboard.refresh(), group="dashboard")

    def action_cycle_trend(self) -> None:
        current = self.dashboard.state.trend_days
        index = TREND_WINDOWS.index(current) if current in TREND_WINDOWS else -1
        days = TREND_WINDOWS[(index + 1) % len(TREND_WINDOWS)]
        self.run_worker(self.dashboard.set_trend_window(days), group="dashboard")

    async def _export_csv(self) -> None:
        blob = await self.dashboard.export(ExportKind.CSV)
        if blob:
            self.last_export_path = write_blob(blob, self.out_dir)

    def action_export_csv(self) -> None:
        self.run_worker(self._export_csv(), group="dashboard")


def launch(settings) -> None:
    """Build the configured engine and run the dashboard."""
    from ..engine import create_engine

    dashboard = AuditDashboard.from_settings(create_engine(settings), settings)
    AuditDashboardApp(
        dashboard,
        out_dir=settings.exports.out_dir,
        instance_url=settings.dashboard.instance_url,
    ).run()
