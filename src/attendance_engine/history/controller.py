from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.serialization import to_primitive
from ..common.web import STAFF_ROLES, current_user_id, error_response, login_required, roles_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _history(person_id: str):
        days_s = request.args.get("days")
        try:
            days = int(days_s) if days_s else None
            history = container.history_service.build_history(person_id, now=container.clock(), days=days)
        except ValueError:
            return error_response("days must be a whole number", 400)
        except ValidationError as e:
            return error_response(str(e), 400)

        return jsonify({"success": True, "history": to_primitive(history)})

    @app.route("/api/me/history", methods=["GET"], endpoint="api_my_history")
    @login_required
    def api_my_history():
        return _history(current_user_id())

    @app.route("/api/people/<person_id>/history", methods=["GET"], endpoint="api_person_history")
    @roles_required(*STAFF_ROLES)
    def api_person_history(person_id: str):
        return _history(person_id)
