import asyncio
import os

from textual.widgets import DataTable

from auditdeck.dashboard.controller import AuditDashboard
from auditdeck.ui.app import AuditDashboardApp


def run_app(app, scenario):
    async def main():
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            await scenario(app, pilot)

    asyncio.run(main())


def test_app_shows_results(fake_engine, tmp_path):
    app = AuditDashboardApp(AuditDashboard(fake_engine), out_dir=str(tmp_path))

    async def scenario(app, pilot):
        table = app.query_one("#results", DataTable)
        assert table.row_count == 5
        assert app.dashboard.state.has_data

    run_app(app, scenario)


def test_app_cycles_trend_window(fake_engine, tmp_path):
    app = AuditDashboardApp(AuditDashboard(fake_engine), out_dir=str(tmp_path))

    async def scenario(app, pilot):
        await pilot.press("t")
        await app.workers.wait_for_complete()
        assert app.dashboard.state.trend_days == 90
        assert app.dashboard.state.trend.day_window == 90

    run_app(app, scenario)


def test_app_exports_csv(fake_engine, tmp_path):
    app = AuditDashboardApp(AuditDashboard(fake_engine), out_dir=str(tmp_path))

    async def scenario(app, pilot):
        await pilot.press("e")
        await app.workers.wait_for_complete()
        assert app.last_export_path == os.path.join(str(tmp_path), "security_audit.csv")
        assert os.path.exists(app.last_export_path)

    run_app(app, scenario)


def test_app_shows_error_state(fake_engine, engine_error, tmp_path):
    fake_engine.fail["summary"] = engine_error
    app = AuditDashboardApp(AuditDashboard(fake_engine), out_dir=str(tmp_path))

    async def scenario(app, pilot):
        assert app.dashboard.state.error_message == "Audit engine is down"
        assert app.query_one("#error").display
        assert not app.query_one("#results", DataTable).display

    run_app(app, scenario)
