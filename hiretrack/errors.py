import logging

from flask import jsonify
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class AuthError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    status_code = 404


class UpstreamError(ApiError):
    status_code = 502


def _first_error_message(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    # ValueError raised in our validators already reads as a sentence
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{field}: {message}" if field else message


def register_error_handlers(app):
    from hiretrack.extensions import db

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(PydanticValidationError)
    def handle_payload_error(e):
        return jsonify({"error": _first_error_message(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 413:
            return jsonify({"error": "File upload error: file too large"}), 413
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        logger.error("Unhandled error: %s", e, exc_info=True)
        return jsonify({"error": str(e) or "Internal server error"}), 500
