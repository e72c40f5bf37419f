# visitor_registry/errors.py
from enum import Enum
from typing import NamedTuple, Optional

from flask import jsonify, request


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    CONFIG_ERROR = "config_error"
    STORE_ERROR = "store_error"
    UNEXPECTED_ERROR = "unexpected_error"

    @property
    def status(self) -> int:
        return 400 if self is ErrorKind.BAD_REQUEST else 500


class RegistrationResult(NamedTuple):
    """Outcome of one registration request: a status code and a user-facing message."""

    status: int
    message: str
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, message: str) -> "RegistrationResult":
        return cls(200, message)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "RegistrationResult":
        return cls(kind.status, message, kind)


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(e):
        return jsonify(error="not_found", path=request.path), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify(error="method_not_allowed"), 405

    @app.errorhandler(413)
    def too_large(e):
        return "Request body is too large.", 413, {"Content-Type": "text/plain; charset=utf-8"}

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="server_error"), 500
