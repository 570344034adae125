from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.gate import current_user, make_gates
from ..common.serializers import to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_gates(container.users_repo)

    @app.route("/api/packages", methods=["GET"], endpoint="packages_list")
    @login_required
    def packages_list():
        return jsonify(to_json(list(container.package_service.list_packages())))

    @app.route("/api/packages/<int:package_id>", methods=["GET"], endpoint="packages_get")
    @login_required
    def packages_get(package_id: int):
        return jsonify(to_json(container.package_service.get_package(package_id)))

    @app.route("/api/packages", methods=["POST"], endpoint="packages_create")
    @admin_required
    def packages_create():
        pkg = container.package_service.create_package(
            current_user=current_user(),
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(pkg)), 201

    @app.route("/api/packages/<int:package_id>", methods=["PUT"], endpoint="packages_update")
    @admin_required
    def packages_update(package_id: int):
        pkg = container.package_service.update_package(
            current_user=current_user(),
            package_id=package_id,
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(pkg))

    @app.route("/api/packages/<int:package_id>", methods=["DELETE"], endpoint="packages_delete")
    @admin_required
    def packages_delete(package_id: int):
        container.package_service.delete_package(current_user=current_user(), package_id=package_id)
        return "", 204
