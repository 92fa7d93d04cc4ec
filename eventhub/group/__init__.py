"""The group blueprint."""

from flask import Blueprint

bp = Blueprint("group", __name__)

from . import routes  # noqa: E402

__all__ = ["routes"]
