"""Routes for the main blueprint."""

from __future__ import annotations

from typing import Any

from flask import jsonify

from . import bp


@bp.route("/")
def index() -> Any:
    """Report that the server is up."""
    return jsonify(
        {
            "success": True,
            "message": "Event Booking Server is Running!",
            "status": "online",
        }
    )


@bp.route("/health")
def health() -> Any:
    """Perform a simple health check."""
    return "OK", 200
