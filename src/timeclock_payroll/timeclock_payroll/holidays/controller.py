from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.web import (
    admin_required,
    current_actor,
    login_required,
    optional_bool,
    optional_int,
    request_json,
    respond,
    to_data,
)
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    calendar = container.holiday_calendar

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @login_required
    def list_holidays():
        return respond(
            lambda: to_data(
                calendar.list_holidays(actor=current_actor(), year=optional_int(request.args.get("year"), "Year"))
            ),
            name="list_holidays",
        )

    @app.route("/api/holidays/check", methods=["GET"], endpoint="holidays_check")
    @login_required
    def check_holiday():
        def op():
            on_date = parse_optional_date(request.args.get("date"), "Date")
            if on_date is None:
                raise ValidationError("Date is required")
            return calendar.check(actor=current_actor(), on_date=on_date).to_dict()

        return respond(op, name="check_holiday")

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="admin_holidays_add")
    @admin_required
    def add_holiday():
        body = request_json()
        return respond(
            lambda: calendar.add_holiday(
                actor=current_actor(),
                on_date=parse_optional_date(body.get("date"), "Date"),
                name=body.get("name"),
                is_recurring=optional_bool(body.get("is_recurring"), "Recurring") or False,
            ).to_dict(),
            name="add_holiday",
            success_status=201,
        )

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["PUT"], endpoint="admin_holidays_update")
    @admin_required
    def update_holiday(holiday_id: int):
        body = request_json()
        return respond(
            lambda: calendar.update_holiday(
                actor=current_actor(),
                holiday_id=holiday_id,
                name=body.get("name"),
                is_recurring=optional_bool(body.get("is_recurring"), "Recurring"),
            ).to_dict(),
            name="update_holiday",
        )

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="admin_holidays_delete")
    @admin_required
    def delete_holiday(holiday_id: int):
        return respond(lambda: calendar.delete_holiday(actor=current_actor(), holiday_id=holiday_id), name="delete_holiday")

    @app.route("/api/admin/holidays/roll-forward", methods=["POST"], endpoint="admin_holidays_roll_forward")
    @admin_required
    def roll_forward():
        body = request_json()
        return respond(
            lambda: {
                "created": calendar.roll_forward_recurring(
                    actor=current_actor(),
                    from_year=optional_int(body.get("from_year"), "From year"),
                    to_year=optional_int(body.get("to_year"), "To year"),
                )
            },
            name="roll_forward_holidays",
        )
