from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, to_local
from ..common.serialization import to_primitive
from ..common.web import STAFF_ROLES, current_user_id, error_response, login_required, roles_required
from ..container import Container


def _parse_day(value: str | None, default: date) -> date | None:
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        return None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/audience", methods=["GET"], endpoint="api_audience")
    @roles_required(*STAFF_ROLES)
    def api_audience():
        today = to_local(container.clock()).date()
        day = _parse_day(request.args.get("date"), today)
        if day is None:
            return error_response("Invalid date, expected YYYY-MM-DD", 400)

        audience = container.resolver.resolve(day)
        return jsonify(
            {
                "success": True,
                "date": day.strftime("%Y-%m-%d"),
                "is_flag_day": audience.is_flag_day,
                "schedule": to_primitive(audience.schedule),
                "student_ids": to_primitive(audience.student_ids),
                "teacher_ids": to_primitive(audience.teacher_ids),
                "total": len(audience),
            }
        )

    @app.route("/api/me/status", methods=["GET"], endpoint="api_my_status")
    @login_required
    def api_my_status():
        now = container.clock()
        status = container.live_status_service.status_for(current_user_id(), now=now)
        return jsonify(
            {
                "success": True,
                "date": to_local(now).date().strftime("%Y-%m-%d"),
                "required": status is not None,
                "status": to_primitive(status),
            }
        )
