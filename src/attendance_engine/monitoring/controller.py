from __future__ import annotations

from flask import Flask, jsonify

from ..common.serialization import to_primitive
from ..common.web import ADMIN_ROLES, STAFF_ROLES, current_role, current_user_id, error_response, login_required, roles_required
from ..container import Container
from ..core.enums import LiveStatus, Role
from ..roster.model import SectionKey


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<program>/<year>/<section>/status", methods=["GET"], endpoint="api_class_status")
    @login_required
    def api_class_status(program: str, year: str, section: str):
        key = SectionKey(program, year, section)

        # Captains only see their own class.
        if current_role() not in STAFF_ROLES and container.captain_service.class_of(current_user_id()) != key:
            return error_response("Forbidden", 403)

        board = container.monitoring_service.class_status(key, now=container.clock())
        return jsonify(
            {
                "success": True,
                "board": to_primitive(board),
                "counts": {status.value: board.count(status) for status in LiveStatus},
            }
        )

    @app.route("/api/advisories/status", methods=["GET"], endpoint="api_advisory_status")
    @roles_required(Role.TEACHER)
    def api_advisory_status():
        summaries = container.monitoring_service.advisory_summaries(current_user_id(), now=container.clock())
        return jsonify(
            {
                "success": True,
                "classes": [
                    {"class": s.section.label(), "verified": s.verified, "total": s.total}
                    for s in summaries
                ],
            }
        )

    @app.route("/api/overview/today", methods=["GET"], endpoint="api_daily_overview")
    @roles_required(*ADMIN_ROLES)
    def api_daily_overview():
        overview = container.monitoring_service.daily_overview(now=container.clock())
        return jsonify({"success": True, "overview": to_primitive(overview)})
