"""Map application errors onto the JSON error envelope."""

import traceback

from flask import Blueprint, current_app, jsonify, request
from google.api_core import exceptions as google_exceptions
from werkzeug.exceptions import HTTPException

from .errors import AppError, ServiceUnavailableError

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Render any application error as a JSON envelope."""
    if error.status_code >= 500:
        current_app.logger.error(f"Application Error: {error.message}")
    else:
        current_app.logger.warning(
            f"{type(error).__name__} on {request.path}: {error.message}"
        )
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(google_exceptions.ServiceUnavailable)
@error_handlers_bp.app_errorhandler(google_exceptions.DeadlineExceeded)
def handle_store_unreachable(e):
    """Mark the store degraded when a call fails mid-request."""
    current_app.logger.error(f"Database unreachable: {e}")
    store = current_app.extensions.get("store")
    if store is not None:
        store.mark_degraded()
    error = ServiceUnavailableError(
        "Database connection lost",
        {"message": "Connection to database was lost. Please try again."},
    )
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(google_exceptions.GoogleAPIError)
def handle_db_error(e):
    """Handles database errors."""
    current_app.logger.error(f"Database Error: {e}")
    # Avoid exposing raw database error details to the user
    return (
        jsonify(
            {
                "success": False,
                "error": "A database error occurred. Please try again later.",
            }
        ),
        500,
    )


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return (
        jsonify({"success": False, "error": "Route not found", "path": request.path}),
        404,
    )


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests using a method the route does not accept."""
    return jsonify({"success": False, "error": "Method not allowed"}), 405


@error_handlers_bp.app_errorhandler(Exception)
def handle_500(e):
    """Handles unexpected server errors."""
    if isinstance(e, HTTPException):
        return jsonify({"success": False, "error": e.description}), e.code

    current_app.logger.exception(f"Internal Server Error: {e}")
    body = {"success": False, "error": "Internal server error"}
    if current_app.debug:
        body["stack"] = traceback.format_exc()
    return jsonify(body), 500
