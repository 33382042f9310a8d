# postal_api/__init__.py
from __future__ import annotations

import os
import logging
import time
import uuid
from contextvars import ContextVar
from typing import Any, Mapping, Optional

from flask import Flask, g, request

from .config import Config, database_uri, load_db_settings
from .extensions import db, migrate
from .errors import register_error_handlers

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

log = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "alembic")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [rid:%(request_id)s] %(message)s"


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.json.ensure_ascii = False

    # Raises ConfigError when PASSWORD is missing
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        app.config["SQLALCHEMY_DATABASE_URI"] = database_uri(load_db_settings())

    # ---- Logging
    _configure_logging(app)
    _register_request_logging(app)

    # ---- Extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)
    register_error_handlers(app)

    # ---- Blueprints
    from .blueprints.address import address_bp
    from .blueprints.health import health_bp

    app.register_blueprint(address_bp)
    app.register_blueprint(health_bp)

    return app


def _configure_logging(app: Flask) -> None:
    level = logging.INFO if app.config.get("APP_ENV") == "production" else logging.DEBUG
    root = logging.getLogger()
    root.setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.INFO)

    # WSGI servers may bring their own handlers; only tag their records
    if root.handlers:
        for handler in root.handlers:
            if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
                handler.addFilter(RequestIdFilter())
        return

    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def _register_request_logging(app: Flask) -> None:
    """One line per request: method, path, status, latency."""

    @app.before_request
    def _start_request() -> None:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        _request_id.set(rid)
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        rid = _request_id.get()
        if rid:
            response.headers["X-Request-ID"] = rid
        log.info(
            "%s %s %s %.1fms",
            request.method,
            request.full_path.rstrip("?"),
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.teardown_request
    def _clear_request_id(_exc: Optional[BaseException]) -> None:
        _request_id.set(None)


class RequestIdFilter(logging.Filter):
    """Tags every record with the id of the request being served, or "-"."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        return True
