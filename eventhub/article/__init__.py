"""The article blueprint, covering articles and their comments."""

from flask import Blueprint

bp = Blueprint("article", __name__, url_prefix="/articles")

from . import routes  # noqa: E402

__all__ = ["routes"]
