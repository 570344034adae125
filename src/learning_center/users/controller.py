from __future__ import annotations

from flask import Flask, jsonify

from ..auth.gate import make_gates
from ..common.serializers import to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_gates(container.users_repo)

    @app.route("/api/teachers", methods=["GET"], endpoint="teachers")
    @login_required
    def teachers():
        return jsonify(to_json(list(container.user_service.list_teachers())))
