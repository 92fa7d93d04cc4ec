"""The main blueprint: status endpoints that never touch the store."""

from flask import Blueprint

bp = Blueprint("main", __name__)

from . import routes  # noqa: E402, F401
