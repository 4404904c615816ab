# backend/errors.py
import logging
import sqlite3

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger("finance-backend")

UNAUTHENTICATED_MESSAGE = "Please authenticate."


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"message": self.message}


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid input"


class Conflict(ApiError):
    # register reports duplicates as a plain 400
    status_code = 400
    default_message = "Already exists"


class Unauthenticated(ApiError):
    status_code = 401
    default_message = UNAUTHENTICATED_MESSAGE

    def __init__(self, message=None):
        # one message for every cause
        super().__init__(UNAUTHENTICATED_MESSAGE)


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Fault(ApiError):
    status_code = 500
    default_message = "Internal server error"


class InvalidToken(Exception):
    """Token could not be verified (missing, malformed, bad signature, expired)."""


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error(f"❌ {type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(sqlite3.Error)
    def handle_storage_error(error):
        logger.exception("Storage failure")
        fault = Fault("Storage error")
        return jsonify(fault.to_dict()), fault.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return jsonify({"message": Fault.default_message}), 500
