"""Routes for the user blueprint."""

from flask import jsonify

from eventhub.core.store import get_db
from eventhub.utils import get_json_body

from . import bp
from .services import UserService


@bp.route("/save-user", methods=["POST"])
def save_user():
    """Create or refresh the user record sent by the client after login."""
    user_id, created = UserService.save_user(get_db(), get_json_body())
    return jsonify({"success": True, "data": {"id": user_id, "created": created}})


@bp.route("/totalUsers", methods=["GET"])
def total_users():
    return jsonify({"total": UserService.count_users(get_db())})
