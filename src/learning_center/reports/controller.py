from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.gate import current_user, make_gates
from ..common.serializers import to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_gates(container.users_repo)

    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    @login_required
    def dashboard_stats():
        return jsonify(to_json(container.report_service.get_dashboard_stats()))

    @app.route("/api/reports", methods=["GET"], endpoint="monthly_report")
    @admin_required
    def monthly_report():
        report = container.report_service.build_monthly_report(
            current_user=current_user(),
            month=request.args.get("month") or None,
        )
        return jsonify(to_json(report))
