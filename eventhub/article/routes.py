"""Routes for the article blueprint."""

from flask import g, jsonify

from eventhub.auth.decorators import auth_required
from eventhub.core.store import get_db
from eventhub.utils import get_json_body

from . import bp
from .services import ArticleService, CommentService


@bp.route("", methods=["POST"])
@auth_required
def create_article():
    """Publish an article as the caller."""
    article_id = ArticleService.create_article(get_db(), get_json_body(), g.identity)
    return (
        jsonify(
            {
                "success": True,
                "message": "Article created successfully",
                "data": {"id": article_id},
            }
        ),
        201,
    )


@bp.route("", methods=["GET"])
def list_articles():
    return jsonify(ArticleService.list_articles(get_db()))


@bp.route("/<string:article_id>", methods=["GET"])
def get_article(article_id):
    return jsonify(ArticleService.get_article(get_db(), article_id))


@bp.route("/<string:article_id>", methods=["PUT"])
@auth_required
def update_article(article_id):
    """Update an article. Only its author may do this."""
    ArticleService.update_article(get_db(), article_id, get_json_body(), g.identity)
    return jsonify({"success": True, "message": "Article updated successfully"})


@bp.route("/<string:article_id>", methods=["DELETE"])
@auth_required
def delete_article(article_id):
    """Delete an article and all of its comments."""
    ArticleService.delete_article(get_db(), article_id, g.identity)
    return jsonify({"success": True, "message": "Article deleted successfully"})


@bp.route("/<string:article_id>/comments", methods=["GET"])
def list_comments(article_id):
    return jsonify(CommentService.list_comments(get_db(), article_id))


@bp.route("/<string:article_id>/comments", methods=["POST"])
@auth_required
def create_comment(article_id):
    """Comment on an article as the caller."""
    comment_id = CommentService.create_comment(
        get_db(), article_id, get_json_body(), g.identity
    )
    return (
        jsonify(
            {
                "success": True,
                "message": "Comment created successfully",
                "data": {"id": comment_id},
            }
        ),
        201,
    )


@bp.route("/<string:article_id>/comments/<string:comment_id>", methods=["DELETE"])
@auth_required
def delete_comment(article_id, comment_id):
    """Delete a comment as its author or as the article's author."""
    CommentService.delete_comment(get_db(), article_id, comment_id, g.identity)
    return jsonify({"success": True, "message": "Comment deleted successfully"})
