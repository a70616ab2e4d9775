from __future__ import annotations

import json

from flask import Flask, jsonify, request

from ..common.serialization import to_primitive
from ..common.web import ADMIN_ROLES, error_response, roles_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _month_args():
        today = container.clock()
        return (
            request.args.get("year") or today.year,
            request.args.get("month") or today.month,
        )

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="api_monthly_report")
    @roles_required(*ADMIN_ROLES)
    def api_monthly_report():
        year, month = _month_args()
        try:
            report = container.report_service.build_monthly_report(
                year,
                month,
                college=request.args.get("college") or None,
                program=request.args.get("program") or None,
                year_level=request.args.get("year_level") or None,
                section=request.args.get("section") or None,
            )
        except ValidationError as e:
            return error_response(str(e), 400)

        return jsonify({"success": True, "report": to_primitive(report)})

    @app.route("/api/reports/monthly/cache", methods=["POST"], endpoint="api_monthly_report_cache")
    @roles_required(*ADMIN_ROLES)
    def api_monthly_report_cache():
        year, month = _month_args()
        try:
            report = container.report_service.generate_and_cache(
                year,
                month,
                generated_at=container.clock(),
                college=request.args.get("college") or None,
            )
        except ValidationError as e:
            return error_response(str(e), 400)

        if not report.complete:
            return error_response("Attendance data unavailable, report not cached", 503)

        return jsonify({"success": True, "summary": to_primitive(report.summary)})

    @app.route("/api/reports/monthly/cached", methods=["GET"], endpoint="api_cached_monthly_report")
    @roles_required(*ADMIN_ROLES)
    def api_cached_monthly_report():
        year, month = _month_args()
        try:
            cached = container.report_service.cached_report(year, month, college=request.args.get("college") or None)
        except ValidationError as e:
            return error_response(str(e), 400)

        if cached is None:
            return error_response("No cached report for that month", 404)

        return jsonify(
            {
                "success": True,
                "generated_at": to_primitive(cached.generated_at),
                "report": json.loads(cached.payload),
            }
        )
