from __future__ import annotations

from typing import Any

from flask import jsonify

from eventhub.core.store import get_db

from . import bp
from .services import DashboardService


@bp.route("/dashboard-stats", methods=["GET"])
def dashboard_stats() -> Any:
    """Endpoint for the per-day users/groups timeline."""
    return jsonify(DashboardService.get_dashboard_stats(get_db()))
