from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..auth.gate import current_user, make_gates
from ..common.datetime_utils import parse_range_bound
from ..common.serializers import to_json
from ..core.exceptions import ValidationError
from ..container import Container


def _range_arg(name: str, *, end: bool) -> Optional[datetime]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_range_bound(value, end=end)
    except ValueError:
        raise ValidationError(f"{name}: must be a date", errors={name: "must be YYYY-MM-DD or an ISO datetime"})


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_gates(container.users_repo)

    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    @login_required
    def classes_list():
        classes = container.class_service.list_classes(
            current_user=current_user(),
            start=_range_arg("startDate", end=False),
            end=_range_arg("endDate", end=True),
        )
        return jsonify(to_json(list(classes)))

    @app.route("/api/classes/<int:class_id>", methods=["GET"], endpoint="classes_get")
    @login_required
    def classes_get(class_id: int):
        return jsonify(to_json(container.class_service.get_class(current_user=current_user(), class_id=class_id)))

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @admin_required
    def classes_create():
        klass = container.class_service.create_class(
            current_user=current_user(),
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(klass)), 201

    @app.route("/api/classes/<int:class_id>", methods=["PUT"], endpoint="classes_update")
    @admin_required
    def classes_update(class_id: int):
        klass = container.class_service.update_class(
            current_user=current_user(),
            class_id=class_id,
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(klass))

    @app.route("/api/classes/<int:class_id>", methods=["DELETE"], endpoint="classes_delete")
    @admin_required
    def classes_delete(class_id: int):
        container.class_service.delete_class(current_user=current_user(), class_id=class_id)
        return "", 204
