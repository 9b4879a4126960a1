from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_datetime, parse_optional_date
from ..common.web import (
    admin_required,
    current_actor,
    login_required,
    optional_int,
    request_json,
    respond,
    to_data,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ledger = container.shift_ledger

    # ===== SELF-SERVICE (admins may pass team_member_id to act as a kiosk) =====

    @app.route("/api/timeclock/clock-in", methods=["POST"], endpoint="timeclock_clock_in")
    @login_required
    def clock_in():
        body = request_json()

        def op():
            entry = ledger.clock_in(
                actor=current_actor(),
                venue_id=body.get("venue_id"),
                subject_id=optional_int(body.get("team_member_id"), "Team member"),
            )
            return entry.to_dict()

        return respond(op, name="clock_in", success_status=201)

    @app.route("/api/timeclock/entries/<int:entry_id>/break/start", methods=["POST"], endpoint="timeclock_start_break")
    @login_required
    def start_break(entry_id: int):
        body = request_json()
        return respond(
            lambda: ledger.start_break(
                actor=current_actor(),
                entry_id=entry_id,
                subject_id=optional_int(body.get("team_member_id"), "Team member"),
            ).to_dict(),
            name="start_break",
        )

    @app.route("/api/timeclock/entries/<int:entry_id>/break/end", methods=["POST"], endpoint="timeclock_end_break")
    @login_required
    def end_break(entry_id: int):
        body = request_json()
        return respond(
            lambda: ledger.end_break(
                actor=current_actor(),
                entry_id=entry_id,
                subject_id=optional_int(body.get("team_member_id"), "Team member"),
            ).to_dict(),
            name="end_break",
        )

    @app.route("/api/timeclock/entries/<int:entry_id>/clock-out", methods=["POST"], endpoint="timeclock_clock_out")
    @login_required
    def clock_out(entry_id: int):
        body = request_json()
        return respond(
            lambda: ledger.clock_out(
                actor=current_actor(),
                entry_id=entry_id,
                subject_id=optional_int(body.get("team_member_id"), "Team member"),
            ).to_dict(),
            name="clock_out",
        )

    @app.route("/api/timeclock/active", methods=["GET"], endpoint="timeclock_active")
    @login_required
    def active_shift():
        return respond(
            lambda: to_data(
                ledger.get_active_shift(
                    actor=current_actor(),
                    subject_id=optional_int(request.args.get("team_member_id"), "Team member"),
                )
            ),
            name="get_active_shift",
        )

    @app.route("/api/timeclock/entries", methods=["GET"], endpoint="timeclock_entries")
    @login_required
    def list_entries():
        def op():
            entries = ledger.list_entries(
                actor=current_actor(),
                team_member_id=optional_int(request.args.get("team_member_id"), "Team member"),
                venue_id=optional_int(request.args.get("venue_id"), "Venue"),
                start=parse_optional_date(request.args.get("start"), "Start date"),
                end=parse_optional_date(request.args.get("end"), "End date"),
                limit=optional_int(request.args.get("limit"), "Limit"),
            )
            return to_data(entries)

        return respond(op, name="list_entries")

    # ===== ADMIN =====

    @app.route("/api/admin/timeclock/entries", methods=["POST"], endpoint="admin_timeclock_create")
    @admin_required
    def create_manual_shift():
        body = request_json()

        def op():
            entry = ledger.create_manual_shift(
                actor=current_actor(),
                subject_id=optional_int(body.get("team_member_id"), "Team member"),
                venue_id=body.get("venue_id"),
                clock_in_time=parse_iso_datetime(body.get("clock_in_time"), "Clock in time"),
                clock_out_time=parse_iso_datetime(body.get("clock_out_time"), "Clock out time"),
                shift_date=parse_optional_date(body.get("shift_date"), "Shift date"),
                notes=body.get("notes"),
            )
            return entry.to_dict()

        return respond(op, name="create_manual_shift", success_status=201)

    @app.route("/api/admin/timeclock/entries/<int:entry_id>/clock-out", methods=["POST"], endpoint="admin_timeclock_clock_out")
    @admin_required
    def admin_clock_out(entry_id: int):
        body = request_json()

        def op():
            entry = ledger.admin_clock_out(
                actor=current_actor(),
                entry_id=entry_id,
                clock_out_time=parse_iso_datetime(body.get("clock_out_time"), "Clock out time"),
                notes=body.get("notes"),
            )
            return entry.to_dict()

        return respond(op, name="admin_clock_out")

    @app.route("/api/admin/timeclock/entries/<int:entry_id>", methods=["PUT"], endpoint="admin_timeclock_update")
    @admin_required
    def update_shift(entry_id: int):
        body = request_json()

        def op():
            entry = ledger.update_shift(
                actor=current_actor(),
                entry_id=entry_id,
                clock_in_time=parse_iso_datetime(body["clock_in_time"], "Clock in time") if body.get("clock_in_time") else None,
                clock_out_time=parse_iso_datetime(body["clock_out_time"], "Clock out time") if body.get("clock_out_time") else None,
                notes=body.get("notes"),
            )
            return entry.to_dict()

        return respond(op, name="update_shift")

    @app.route("/api/admin/timeclock/entries/<int:entry_id>", methods=["DELETE"], endpoint="admin_timeclock_delete")
    @admin_required
    def delete_shift(entry_id: int):
        return respond(lambda: ledger.delete_shift(actor=current_actor(), entry_id=entry_id), name="delete_shift")

    @app.route("/api/admin/timeclock/long-running", methods=["GET"], endpoint="admin_timeclock_long_running")
    @admin_required
    def long_running():
        def op():
            hours = request.args.get("hours")
            shifts = ledger.list_long_running(
                actor=current_actor(),
                hours_threshold=optional_int(hours, "Hours threshold"),
            )
            return to_data(shifts)

        return respond(op, name="list_long_running")
