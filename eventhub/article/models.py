"""Data models for the article blueprint."""

from __future__ import annotations

from eventhub.core.types import FirestoreDocument


class Article(FirestoreDocument, total=False):
    """An article document in Firestore."""

    title: str
    shortDescription: str
    content: str
    coverImage: str
    category: str
    publishDate: str

    # Ownership, stamped once at creation
    authorEmail: str
    authorId: str
    userEmail: str
    userId: str
    authorName: str
    authorImage: str


class Comment(FirestoreDocument, total=False):
    """A comment on an article."""

    articleId: str
    text: str
    authorName: str
    authorEmail: str
    authorId: str
    authorImage: str
    timestamp: str


REQUIRED_ARTICLE_FIELDS = ("title", "content")
ARTICLE_DISPLAY_OWNERSHIP_FIELDS = ("authorName", "authorImage")
