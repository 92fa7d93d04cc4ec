"""Routes for the group blueprint."""

from flask import g, jsonify, request

from eventhub.auth.decorators import auth_required
from eventhub.core.store import get_db
from eventhub.utils import get_json_body

from . import bp
from .services import GroupService


@bp.route("/createGroup", methods=["POST"])
@auth_required
def create_group():
    """Create a new group owned by the caller."""
    group_id = GroupService.create_group(get_db(), get_json_body(), g.identity)
    return (
        jsonify(
            {
                "success": True,
                "message": "Group created successfully",
                "data": {"id": group_id},
            }
        ),
        201,
    )


@bp.route("/groups", methods=["GET"])
def list_groups():
    """List all groups, optionally only those created by ``userEmail``."""
    user_email = request.args.get("userEmail")
    return jsonify(GroupService.list_groups(get_db(), user_email))


@bp.route("/groups/<string:group_id>", methods=["GET"])
def get_group(group_id):
    return jsonify(GroupService.get_group(get_db(), group_id))


@bp.route("/groups/<string:group_id>", methods=["PUT"])
@auth_required
def update_group(group_id):
    """Update a group. Only its creator may do this."""
    GroupService.update_group(get_db(), group_id, get_json_body(), g.identity)
    return jsonify({"success": True, "message": "Group updated successfully"})


@bp.route("/groups/<string:group_id>", methods=["DELETE"])
@auth_required
def delete_group(group_id):
    """Delete a group and every join record pointing at it."""
    GroupService.delete_group(get_db(), group_id, g.identity)
    return jsonify({"success": True, "message": "Group deleted successfully"})


@bp.route("/groupsByIds", methods=["POST"])
def groups_by_ids():
    """Fetch the groups named in ``{"ids": [...]}``."""
    ids = get_json_body().get("ids")
    return jsonify(GroupService.get_groups_by_ids(get_db(), ids))


@bp.route("/joinGroup", methods=["POST"])
@auth_required
def join_group():
    """Join a group as the caller."""
    group_id = get_json_body().get("groupId")
    join_id = GroupService.join_group(get_db(), group_id, g.identity)
    return jsonify({"success": True, "data": {"id": join_id}}), 201


@bp.route("/leaveGroup", methods=["POST"])
@auth_required
def leave_group():
    """Leave a group. Only the caller's own membership is removed."""
    group_id = get_json_body().get("groupId")
    GroupService.leave_group(get_db(), group_id, g.identity)
    return jsonify({"success": True, "message": "Left group successfully"})


@bp.route("/user-joined-groups", methods=["GET"])
@auth_required
def user_joined_groups():
    """List the caller's own join records."""
    return jsonify(GroupService.get_joined_groups(get_db(), g.identity.email))
