from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/reconcile", methods=["POST"], endpoint="reconcile")
    @admin_required
    def reconcile():
        report = container.reconciliation_job.run()
        return jsonify({"success": True, "report": report.to_dict()}), 200
