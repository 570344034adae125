from __future__ import annotations

import importlib
import uuid
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .auth.controller import register as register_auth
from .classes.controller import register as register_classes
from .common.logging import bind_context, clear_context, get_logger, setup_logging
from .config import get_settings_module
from .container import Container, build_container
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StateError,
    StorageError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .packages.controller import register as register_packages
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = get_logger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (StateError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StorageError, 500),
)


def _error_body(message: str, errors: Optional[dict] = None):
    body = {"message": message}
    if errors:
        body["errors"] = errors
    return jsonify(body)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
        if status >= 500:
            logger.error("storage_error", path=request.path, error=str(exc), exc_info=exc)
            return _error_body("Internal server error"), status
        if status >= 403:
            logger.info("request_rejected", path=request.path, status=status, error=str(exc))
        return _error_body(str(exc), getattr(exc, "errors", None)), status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return _error_body(exc.description or exc.name), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled_error", path=request.path)
        return _error_body("Internal server error"), 500


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    A prebuilt ``container`` skips the database entirely (tests pass one
    wired to in-memory repositories).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ALLOW_DEV_LOGIN"] = bool(getattr(settings, "ALLOW_DEV_LOGIN", False))

    setup_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), debug=app.config["DEBUG"])
    logger.info(
        "app_starting",
        settings=settings_module,
        db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
    )

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema_ready", tables=len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo_seed_ready")
        container = build_container(db_config=db_config)

    @app.before_request
    def _bind_request():
        clear_context()
        bind_context(request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex, path=request.path)

    @app.teardown_request
    def _clear_request(_exc):
        clear_context()

    register_error_handlers(app)

    register_auth(app, container)
    register_users(app, container)
    register_packages(app, container)
    register_students(app, container)
    register_classes(app, container)
    register_requests(app, container)
    register_reports(app, container)

    app.extensions["container"] = container
    return app
