from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import decode_image_payload
from ..common.web import admin_required
from ..container import Container
from .service import EnrollmentRequest


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        data = request.get_json(silent=True) or request.form.to_dict()
        upload = request.files.get("image")
        image = upload.read() if upload is not None else decode_image_payload(data.get("image"))

        employee = container.enrollment_service.enroll(
            EnrollmentRequest(
                email=data.get("email", ""),
                password=data.get("password", ""),
                employee_code=str(data.get("employee_id") or ""),
                first_name=data.get("first_name", ""),
                last_name=data.get("last_name", ""),
                is_admin=_as_bool(data.get("is_admin", False)),
                image=image,
            )
        )
        return jsonify({"message": "Employee created successfully", "employee": employee.to_dict()}), 201

    @app.route("/admin/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        employees = container.employee_service.list_employees()
        return jsonify({"data": [e.to_dict() for e in employees]}), 200
