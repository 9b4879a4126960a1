from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.web import admin_required, current_actor, login_required, request_json, respond, to_data
from ..container import Container
from .model import RATE_FIELDS


def _rate_changes(body: dict) -> dict:
    return {name: body[name] for name in RATE_FIELDS if name in body}


def register(app: Flask, container: Container) -> None:
    rates = container.pay_rate_service

    @app.route("/api/pay-rates/default", methods=["GET"], endpoint="pay_rates_default")
    @login_required
    def get_default():
        return respond(lambda: rates.get_default(actor=current_actor()).to_dict(), name="get_default_rates")

    @app.route("/api/pay-rates/effective/<int:team_member_id>", methods=["GET"], endpoint="pay_rates_effective")
    @login_required
    def get_effective(team_member_id: int):
        def op():
            on_date = parse_optional_date(request.args.get("date"), "Date") or now_local().date()
            return rates.get_effective(actor=current_actor(), team_member_id=team_member_id, on_date=on_date).to_dict()

        return respond(op, name="get_effective_rates")

    @app.route("/api/admin/pay-rates/default", methods=["PUT"], endpoint="admin_pay_rates_default")
    @admin_required
    def update_default():
        body = request_json()
        return respond(
            lambda: rates.update_default(actor=current_actor(), changes=_rate_changes(body)).to_dict(),
            name="update_default_rates",
        )

    @app.route("/api/admin/pay-rates/overrides", methods=["GET"], endpoint="admin_pay_rates_overrides")
    @admin_required
    def list_overrides():
        return respond(lambda: to_data(rates.list_overrides(actor=current_actor())), name="list_rate_overrides")

    @app.route("/api/admin/pay-rates/overrides/<int:team_member_id>", methods=["GET"], endpoint="admin_pay_rates_override")
    @admin_required
    def get_override(team_member_id: int):
        return respond(
            lambda: to_data(rates.get_override(actor=current_actor(), team_member_id=team_member_id)),
            name="get_rate_override",
        )

    @app.route("/api/admin/pay-rates/overrides/<int:team_member_id>", methods=["PUT"], endpoint="admin_pay_rates_upsert")
    @admin_required
    def upsert_override(team_member_id: int):
        body = request_json()
        return respond(
            lambda: rates.upsert_override(
                actor=current_actor(),
                team_member_id=team_member_id,
                changes=_rate_changes(body),
                notes=body.get("notes"),
            ).to_dict(),
            name="upsert_rate_override",
        )

    @app.route("/api/admin/pay-rates/overrides/<int:team_member_id>", methods=["DELETE"], endpoint="admin_pay_rates_delete")
    @admin_required
    def delete_override(team_member_id: int):
        return respond(
            lambda: rates.delete_override(actor=current_actor(), team_member_id=team_member_id),
            name="delete_rate_override",
        )
