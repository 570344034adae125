from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.gate import current_user, make_gates
from ..common.serializers import to_json
from ..common.validators import require_choice
from ..core.enums import RequestStatus
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_gates(container.users_repo)

    @app.route("/api/schedule-change-requests", methods=["GET"], endpoint="change_requests_list")
    @login_required
    def change_requests_list():
        status_s = request.args.get("status")
        status = require_choice(status_s, "status", RequestStatus) if status_s else None
        items = container.request_service.list_requests(current_user=current_user(), status=status)
        return jsonify(to_json(list(items)))

    @app.route("/api/schedule-change-requests", methods=["POST"], endpoint="change_requests_create")
    @login_required
    def change_requests_create():
        req = container.request_service.create_request(
            current_user=current_user(),
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(req)), 201

    @app.route("/api/schedule-change-requests/<int:request_id>", methods=["PUT"], endpoint="change_requests_resolve")
    @login_required
    def change_requests_resolve(request_id: int):
        req = container.request_service.resolve_request(
            current_user=current_user(),
            request_id=request_id,
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(req))
