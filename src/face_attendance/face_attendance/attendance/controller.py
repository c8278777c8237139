from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_employee_id, identity_required, read_image
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/employee/check-in", methods=["POST"], endpoint="check_in")
    @identity_required
    def check_in():
        data = request.get_json(silent=True) or {}
        outcome = container.attendance_service.check_in(
            current_employee_id(),
            read_image(),
            image_ref=data.get("image_ref") or request.form.get("image_ref"),
        )
        return jsonify({"message": "Check-in successful", "data": outcome.to_dict()}), 200

    @app.route("/employee/check-out", methods=["POST"], endpoint="check_out")
    @identity_required
    def check_out():
        outcome = container.attendance_service.check_out(current_employee_id(), read_image())
        return jsonify({"message": "Check-out successful", "data": outcome.to_dict()}), 200

    @app.route("/employee/history", methods=["GET"], endpoint="attendance_history")
    @identity_required
    def attendance_history():
        overview = container.statistics_service.employee_overview(current_employee_id())
        return jsonify(overview.to_dict()), 200

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        overview = container.statistics_service.organization_overview()
        return jsonify(overview.to_dict()), 200

    @app.route("/admin/top-performers", methods=["GET"], endpoint="top_performers")
    @admin_required
    def top_performers():
        top = container.statistics_service.top_performers()
        return jsonify({"success": True, **top.to_dict()}), 200
