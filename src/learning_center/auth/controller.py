from __future__ import annotations

from flask import Flask, abort, jsonify, request, session

from ..common.serializers import to_json
from ..core.constants import SESSION_USER_KEY
from ..container import Container
from .gate import current_user, make_gates
from .service import parse_claims


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_gates(container.users_repo)

    @app.route("/api/auth/user", methods=["GET"], endpoint="auth_user")
    @login_required
    def auth_user():
        return jsonify(to_json(current_user()))

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        # Production sign-in goes through the identity provider's callback.
        if not app.config.get("ALLOW_DEV_LOGIN"):
            abort(404)
        user = container.auth_service.sign_in(parse_claims(request.get_json(silent=True)))
        session.clear()
        session[SESSION_USER_KEY] = user.id
        return jsonify(to_json(user))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return "", 204
