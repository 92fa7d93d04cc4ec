"""Service layer for articles and their comments."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from eventhub.auth.ownership import can_delete_comment
from eventhub.constants import (
    ANONYMOUS_AUTHOR_NAME,
    ARTICLE_PLACEHOLDER_COVER,
    ARTICLES_COLLECTION,
    AVATAR_PLACEHOLDER,
    COMMENTS_COLLECTION,
    DEFAULT_CATEGORY,
    OWNERSHIP_IDENTITY_FIELDS,
    PROTECTED_FIELDS,
)
from eventhub.core.lifecycle import (
    delete_owned,
    insert_owned,
    load_document,
    require_fields,
    strip_fields,
    update_owned,
)
from eventhub.errors import ForbiddenError, NotFoundError, ValidationError
from eventhub.utils import (
    delete_where,
    require_document_id,
    sort_newest_first,
    to_public,
    utcnow_iso,
)

from .models import ARTICLE_DISPLAY_OWNERSHIP_FIELDS, REQUIRED_ARTICLE_FIELDS

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from eventhub.auth.identity import ResolvedIdentity


class ArticleService:
    """Service class for article operations."""

    @staticmethod
    def create_article(
        db: Client, body: dict[str, Any], identity: ResolvedIdentity
    ) -> str:
        """Create an article authored by ``identity`` and return its id."""
        require_fields(body, REQUIRED_ARTICLE_FIELDS)

        article_data = strip_fields(
            body, (*OWNERSHIP_IDENTITY_FIELDS, *PROTECTED_FIELDS)
        )
        article_data["authorEmail"] = identity.email
        article_data["authorId"] = identity.subject_id
        # Mirrored so groups and articles share one owner convention
        article_data["userEmail"] = identity.email
        article_data["userId"] = identity.subject_id

        if not article_data.get("authorName"):
            article_data["authorName"] = (
                identity.display_name or ANONYMOUS_AUTHOR_NAME
            )
        if not article_data.get("coverImage"):
            article_data["coverImage"] = ARTICLE_PLACEHOLDER_COVER
        if not article_data.get("category"):
            article_data["category"] = DEFAULT_CATEGORY
        if not article_data.get("publishDate"):
            article_data["publishDate"] = utcnow_iso()

        return insert_owned(db, ARTICLES_COLLECTION, article_data)

    @staticmethod
    def list_articles(db: Client) -> list[dict[str, Any]]:
        """Fetch all articles, newest publish date first."""
        articles = [
            to_public(doc)
            for doc in db.collection(ARTICLES_COLLECTION).stream()
            if doc.exists
        ]
        sort_newest_first(articles, "publishDate", "createdAt")
        return articles

    @staticmethod
    def get_article(db: Client, article_id: str) -> dict[str, Any]:
        """Fetch one article."""
        require_document_id(article_id, "article ID")
        snapshot = db.collection(ARTICLES_COLLECTION).document(article_id).get()
        if not snapshot.exists:
            raise NotFoundError("Article not found")
        return to_public(snapshot)

    @staticmethod
    def update_article(
        db: Client,
        article_id: str,
        body: dict[str, Any],
        identity: ResolvedIdentity,
    ) -> None:
        """Apply a partial update to an article the caller wrote."""
        update_owned(
            db,
            ARTICLES_COLLECTION,
            article_id,
            body,
            identity,
            "Article",
            immutable_fields=ARTICLE_DISPLAY_OWNERSHIP_FIELDS,
        )

    @staticmethod
    def delete_article(
        db: Client, article_id: str, identity: ResolvedIdentity
    ) -> None:
        """Delete an article the caller wrote along with its comments."""
        delete_owned(
            db,
            ARTICLES_COLLECTION,
            article_id,
            identity,
            "Article",
            cascade=ArticleService.delete_article_comments,
        )

    @staticmethod
    def delete_article_comments(db: Client, article_id: str) -> int:
        """Remove every comment on ``article_id``."""
        return delete_where(db, COMMENTS_COLLECTION, "articleId", article_id)


class CommentService:
    """Service class for comment operations."""

    @staticmethod
    def list_comments(db: Client, article_id: str) -> list[dict[str, Any]]:
        """Fetch the comments on an article, newest first."""
        require_document_id(article_id, "article ID")
        query = db.collection(COMMENTS_COLLECTION).where(
            filter=firestore.FieldFilter("articleId", "==", article_id)
        )
        comments = [to_public(doc) for doc in query.stream() if doc.exists]
        sort_newest_first(comments, "timestamp", "createdAt")
        return comments

    @staticmethod
    def create_comment(
        db: Client,
        article_id: str,
        body: dict[str, Any],
        identity: ResolvedIdentity,
    ) -> str:
        """Add a comment by ``identity`` to an existing article."""
        load_document(db, ARTICLES_COLLECTION, article_id, "Article")

        text = body.get("text") or body.get("comment")
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Comment text is required")

        comment = {
            "articleId": article_id,
            "text": text,
            "authorName": body.get("authorName")
            or identity.display_name
            or ANONYMOUS_AUTHOR_NAME,
            "authorEmail": identity.email,
            "authorId": identity.subject_id,
            "authorImage": body.get("authorImage") or AVATAR_PLACEHOLDER,
            "timestamp": body.get("timestamp") or utcnow_iso(),
        }
        return insert_owned(db, COMMENTS_COLLECTION, comment)

    @staticmethod
    def delete_comment(
        db: Client, article_id: str, comment_id: str, identity: ResolvedIdentity
    ) -> None:
        """Delete a comment as its author or as the article's author."""
        require_document_id(article_id, "article ID")
        comment = load_document(db, COMMENTS_COLLECTION, comment_id, "Comment")
        if comment.get("articleId") != article_id:
            raise NotFoundError("Comment not found")

        if not can_delete_comment(db, comment, identity):
            raise ForbiddenError(
                "Forbidden: You can only delete your own comments "
                "or comments on your articles"
            )
        db.collection(COMMENTS_COLLECTION).document(comment_id).delete()
