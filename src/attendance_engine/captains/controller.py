from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.serialization import to_primitive
from ..common.web import STAFF_ROLES, current_role, current_user_id, error_response, login_required, roles_required
from ..container import Container
from ..core.exceptions import AuthorizationError, ValidationError
from ..roster.model import SectionKey


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<program>/<year>/<section>/captain", methods=["GET"], endpoint="api_class_captain")
    @roles_required(*STAFF_ROLES)
    def api_class_captain(program: str, year: str, section: str):
        captain = container.captain_service.captain_for(SectionKey(program, year, section))
        return jsonify({"success": True, "captain": to_primitive(captain)})

    @app.route("/api/classes/<program>/<year>/<section>/captain", methods=["POST"], endpoint="api_assign_captain")
    @login_required
    def api_assign_captain(program: str, year: str, section: str):
        payload = request.get_json(silent=True) or {}
        try:
            captain = container.captain_service.assign(
                current_role=current_role(),
                section=SectionKey(program, year, section),
                captain_user_id=str(payload.get("captain_user_id") or ""),
                assigned_by=current_user_id(),
                now=container.clock(),
            )
        except AuthorizationError as e:
            return error_response(str(e), 403)
        except ValidationError as e:
            return error_response(str(e), 400)

        return jsonify({"success": True, "captain": to_primitive(captain)})

    @app.route("/api/me/class", methods=["GET"], endpoint="api_my_class")
    @login_required
    def api_my_class():
        section = container.captain_service.class_of(current_user_id())
        return jsonify({"success": True, "class": to_primitive(section)})
