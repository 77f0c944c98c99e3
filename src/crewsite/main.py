from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .container import build_container, build_store
from .core.constants import DEFAULT_RADIUS_METERS
from .core.exceptions import DomainError
from .common.http import error_response
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .payroll.controller import register as register_payroll
from .settings import get_settings_module
from .store.document_store import DocumentStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger("crewsite")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def create_app(*, store: DocumentStore | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    backend = getattr(settings, "STORE_BACKEND", "memory")
    db_config = getattr(settings, "DB_CONFIG", {})
    logger.info("settings=%s store=%s", settings_module, "injected" if store is not None else backend)

    if store is None:
        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(DatabaseConnection(DBConfig.from_dict(db_config)))
        store = build_store(backend=backend, db_config=db_config)

    container = build_container(
        store=store,
        default_radius_meters=float(getattr(settings, "DEFAULT_RADIUS_METERS", DEFAULT_RADIUS_METERS)),
    )
    app.extensions["crewsite"] = container

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        logger.info("request rejected: %s: %s", type(exc).__name__, exc)
        return error_response(exc)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        # Flask renders its own HTTP errors (routing 404, 405, ...).
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("unhandled error")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    register_attendance(app, container)
    register_payroll(app, container)

    return app
