"""
Error translation at the HTTP boundary.

Services raise; nothing below them knows about status codes. Each error
class maps to one status and every response body carries a `message`.
"""

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from expense_tracker.logs import get_logger
from expense_tracker.models import RequestValidationError
from expense_tracker.services import (
    DuplicateUserError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    StorageError,
)


logger = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:

    @app.errorhandler(RequestValidationError)
    def handle_validation(e: RequestValidationError):
        return jsonify({"message": e.message, "errors": e.errors}), 400

    @app.errorhandler(DuplicateUserError)
    @app.errorhandler(InvalidCredentialsError)
    def handle_client_identity_error(e):
        return jsonify({"message": e.message}), 400

    @app.errorhandler(ForbiddenError)
    def handle_forbidden(e: ForbiddenError):
        return jsonify({"message": e.message}), 403

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return jsonify({"message": "Expense not found"}), 404

    @app.errorhandler(StorageError)
    def handle_storage_error(e: StorageError):
        logger.error("storage_error", error=str(e))
        return jsonify({"message": "Storage error"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({"message": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled_error", error=str(e))
        return jsonify({"message": "Internal server error"}), 500
