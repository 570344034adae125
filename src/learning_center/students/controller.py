from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.gate import current_user, make_gates
from ..common.serializers import to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_gates(container.users_repo)

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @login_required
    def students_list():
        return jsonify(to_json(list(container.student_service.list_students())))

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @login_required
    def students_get(student_id: int):
        return jsonify(to_json(container.student_service.get_student(student_id)))

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @admin_required
    def students_create():
        student = container.student_service.create_student(
            current_user=current_user(),
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(student)), 201

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="students_update")
    @admin_required
    def students_update(student_id: int):
        student = container.student_service.update_student(
            current_user=current_user(),
            student_id=student_id,
            payload=request.get_json(silent=True),
        )
        return jsonify(to_json(student))

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @admin_required
    def students_delete(student_id: int):
        container.student_service.delete_student(current_user=current_user(), student_id=student_id)
        return "", 204
