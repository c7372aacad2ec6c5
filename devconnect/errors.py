"""
Error types raised by the service layer.

Services never build HTTP responses. They raise a ``ServiceError`` variant
and the single handler registered in ``register_error_handlers`` turns it
into ``{"message": ..., "errors": [...]}`` with the status from
``HTTP_STATUS``.
"""

import logging
from enum import Enum
from typing import Optional

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class ServiceError(Exception):
    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[list] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return HTTP_STATUS[self.kind]

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"


class Unauthorized(ServiceError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "User not authenticated"


class Forbidden(ServiceError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class Conflict(ServiceError):
    kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class Internal(ServiceError):
    kind = ErrorKind.INTERNAL


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        if e.kind is ErrorKind.INTERNAL:
            logger.error("Internal service error: %s", e.message)
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"message": "Request body is too large"}), 413

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"message": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        # raw error text is passed through to the client
        logger.exception("Unhandled error on request")
        return jsonify({"message": str(e) or "Internal server error"}), 500
