# postal_api/errors.py
from __future__ import annotations

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)


class APIError(Exception):
    status_code = 500
    error = "APIError"

    def __init__(self, message: str = "", *, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.message = message or self.error

    def to_response(self):
        return jsonify({"error": self.message}), self.status_code


class StorageError(APIError):
    status_code = 500
    error = "StorageError"


class GeocodeError(APIError):
    status_code = 500
    error = "GeocodeError"


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(err: APIError):
        log.warning("%s: %s", err.__class__.__name__, err.message)
        return err.to_response()

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        return jsonify({"error": err.description}), err.code

    # Last resort, so a bug never leaks an HTML traceback page
    @app.errorhandler(Exception)
    def _unhandled(err: Exception):
        log.exception("Unhandled error: %s", err)
        return jsonify({"error": "internal server error"}), 500
