from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.web import admin_required, current_actor, json_result, optional_int, to_data
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.result import run_operation
from .export import payroll_csv_filename, write_payroll_csv


def register(app: Flask, container: Container) -> None:
    aggregator = container.payroll_aggregator

    def _report_params():
        """start/end default to the last two weeks, ending today."""

        today = now_local().date()
        start = parse_optional_date(request.args.get("start"), "Start date") or today - timedelta(days=DEFAULT_REPORT_DAYS - 1)
        end = parse_optional_date(request.args.get("end"), "End date") or today
        team_member_id = optional_int(request.args.get("team_member_id"), "Team member")
        return start, end, team_member_id

    def _calculate():
        start, end, team_member_id = _report_params()
        items = aggregator.calculate(actor=current_actor(), start=start, end=end, team_member_id=team_member_id)
        return start, end, items

    @app.route("/api/admin/payroll", methods=["GET"], endpoint="admin_payroll")
    @admin_required
    def payroll_report():
        def op():
            start, end, items = _calculate()
            return {
                "start": start.strftime("%Y-%m-%d"),
                "end": end.strftime("%Y-%m-%d"),
                "items": to_data(items),
            }

        return json_result(run_operation(op, name="calculate_payroll"))

    @app.route("/api/admin/payroll.csv", methods=["GET"], endpoint="admin_payroll_csv")
    @admin_required
    def payroll_report_csv():
        result = run_operation(_calculate, name="export_payroll")
        if not result.success:
            return json_result(result)

        start, end, items = result.data
        csv_bytes = write_payroll_csv(items).encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={payroll_csv_filename(start, end)}"},
        )
