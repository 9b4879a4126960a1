from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_actor, json_result, request_json, respond
from ..container import Container
from ..core.exceptions import NotFoundError
from ..core.result import run_operation
from .badge import render_badge_png


def register(app: Flask, container: Container) -> None:
    kiosk = container.kiosk_service

    @app.route("/api/admin/kiosk/punch", methods=["POST"], endpoint="admin_kiosk_punch")
    @admin_required
    def punch():
        body = request_json()
        return respond(
            lambda: kiosk.punch(
                actor=current_actor(),
                code=body.get("code"),
                venue_id=body.get("venue_id"),
            ).to_dict(),
            name="kiosk_punch",
        )

    @app.route("/api/admin/kiosk/badges/<int:team_member_id>.png", methods=["GET"], endpoint="admin_kiosk_badge")
    @admin_required
    def badge_image(team_member_id: int):
        def op():
            member = container.members_repo.get_by_id(team_member_id)
            if not member or not member.is_staff:
                raise NotFoundError("Team member not found")
            return render_badge_png(kiosk.badge_payload(team_member_id))

        result = run_operation(op, name="kiosk_badge")
        if not result.success:
            return json_result(result)
        return app.response_class(result.data, mimetype="image/png")
